"""Layouts that ship with the game."""

from enum import StrEnum


class TwoCornerLayout(StrEnum):
    LARGE = "2CO01h8lgVVVVVVVV"  # 17x8
    MEDIUM = "2CO01c7jDWWWWWWW"  # 12x7
    SMALL = "2CO0185dtYYYYY"  # 8x5
    HEART = "2CO01989zm6vfTnBjshzgg"  # 9x8


class TraditionalLayout(StrEnum):
    TURTLE = "MJS01f8y2XDHHLRX5GKRX6RQJJQLC4Z8FLRQP2Cg7zCNPQLRC4Z8Z4Z8CXDLQPNNPQLRX4RQJJQLX6GKRX5HHLR"
