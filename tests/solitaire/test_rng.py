"""Unit tests for src/solitaire/rng.py"""

import pytest

from src.solitaire.rng import UINT32_MASK, SeededRandom, derive_seed


@pytest.mark.parametrize(
    "seed, expected",
    [
        (12345, 12345),
        ("12345", 12345),
        (0, 0),
        (UINT32_MASK + 1, 0),
        (-1, UINT32_MASK),
    ],
)
def test_derive_seed_coerces_to_uint32(seed: int | str, expected: int) -> None:
    """Numeric seeds wrap around into the unsigned 32-bit range."""
    assert derive_seed(seed) == expected


@pytest.mark.parametrize("seed", [None, "not a number", ""])
def test_derive_seed_draws_fresh_seed(seed: str | None) -> None:
    """Without a usable seed one gets drawn, and it is still a valid uint32."""
    drawn = derive_seed(seed)
    assert 0 <= drawn <= UINT32_MASK


def test_same_seed_same_stream() -> None:
    first = SeededRandom(42)
    second = SeededRandom(42)
    assert [first.random() for _ in range(20)] == [second.random() for _ in range(20)]


def test_below_stays_in_range(rng: SeededRandom) -> None:
    values = [rng.below(7) for _ in range(500)]
    assert min(values) >= 0
    assert max(values) < 7


def test_shuffle_is_a_permutation(rng: SeededRandom) -> None:
    items = list(range(50))
    rng.shuffle(items)
    assert sorted(items) == list(range(50))


def test_shuffle_is_reproducible() -> None:
    first, second = list(range(30)), list(range(30))
    SeededRandom(7).shuffle(first)
    SeededRandom(7).shuffle(second)
    assert first == second
