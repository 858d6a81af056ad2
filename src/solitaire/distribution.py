"""
Tile distribution policies: which designs end up on a board, and how often.
----

A "set" is the full alphabet placed twice, i.e. both pairs of every design. Boards smaller than a
set use a random selection of designs, boards larger than a set start over with another round.

Strategy pattern: every policy has its own pair-queue builder, looked up in PAIR_QUEUE_RULES.
"""

from itertools import count
from typing import Callable, Iterator

from src.core.shared_types import TileDistribution
from src.solitaire.rng import SeededRandom

PAIRS_PER_DESIGN = 2

PairQueueFn = Callable[[int, list[int], SeededRandom], list[int]]


def _select_designs(num_designs: int, alphabet: list[int], rng: SeededRandom) -> list[int]:
    """Random subset of the alphabet, or the whole alphabet when it fits."""
    designs = list(alphabet)
    if num_designs < len(designs):
        rng.shuffle(designs)
        designs = designs[:num_designs]
    return designs


def _fill_rounds(
    queue: list[int], num_pairs: int, designs: list[int], rng: SeededRandom, copies: int = 1
) -> list[int]:
    """Keep appending shuffled rounds of the designs until every pair has one."""
    while len(queue) < num_pairs:
        next_round = list(designs)
        rng.shuffle(next_round)
        for design in next_round:
            queue.extend([design] * copies)
    return queue[:num_pairs]


def single_pairs(num_pairs: int, alphabet: list[int], rng: SeededRandom) -> list[int]:
    designs = _select_designs(num_pairs, alphabet, rng)
    return _fill_rounds(sorted(designs), num_pairs, designs, rng)


def prioritize_both_pairs(num_pairs: int, alphabet: list[int], rng: SeededRandom) -> list[int]:
    """Both pairs of every design in the first set, single pairs after that."""
    designs = _select_designs(max(num_pairs // PAIRS_PER_DESIGN, 1), alphabet, rng)
    return _fill_rounds(sorted(designs * PAIRS_PER_DESIGN), num_pairs, designs, rng)


def always_both_pairs(num_pairs: int, alphabet: list[int], rng: SeededRandom) -> list[int]:
    designs = _select_designs(max(num_pairs // PAIRS_PER_DESIGN, 1), alphabet, rng)
    return _fill_rounds(
        sorted(designs * PAIRS_PER_DESIGN), num_pairs, designs, rng, copies=PAIRS_PER_DESIGN
    )


def random_per_set(num_pairs: int, alphabet: list[int], rng: SeededRandom) -> list[int]:
    """Each set is the doubled alphabet in random order; small boards keep the first part of it."""
    queue: list[int] = []
    while len(queue) < num_pairs:
        full_set = list(alphabet) * PAIRS_PER_DESIGN
        rng.shuffle(full_set)
        queue.extend(full_set)
    return queue[:num_pairs]


def fully_random(num_pairs: int, alphabet: list[int], rng: SeededRandom) -> list[int]:
    return [rng.choice(alphabet) for _ in range(num_pairs)]


PAIR_QUEUE_RULES: dict[TileDistribution, PairQueueFn] = {
    TileDistribution.SINGLE_PAIRS: single_pairs,
    TileDistribution.PRIORITIZE_BOTH_PAIRS: prioritize_both_pairs,
    TileDistribution.ALWAYS_BOTH_PAIRS: always_both_pairs,
    TileDistribution.RANDOM_PER_SET: random_per_set,
    TileDistribution.RANDOM: fully_random,
}


def build_pair_queue(
    num_pairs: int,
    alphabet: list[int],
    distribution: TileDistribution,
    rng: SeededRandom,
) -> list[int]:
    """One design per pair, in the (shuffled) order the pre-solve generators hand them out."""
    if num_pairs <= 0:
        return []
    queue = PAIR_QUEUE_RULES[distribution](num_pairs, alphabet, rng)
    rng.shuffle(queue)
    return queue


# --- SIMPLE SHUFFLE ---
def _slots_per_design(distribution: TileDistribution, round_index: int) -> int:
    """2 when a design is placed as a single pair, 4 when both of its pairs go down together."""
    if distribution == TileDistribution.SINGLE_PAIRS:
        return 2
    if distribution == TileDistribution.PRIORITIZE_BOTH_PAIRS and round_index > 0:
        return 2
    return 4


def slot_designs(
    alphabet: list[int], distribution: TileDistribution, rng: SeededRandom
) -> Iterator[int]:
    """
    Endless stream of designs, one per tile slot, for the simple shuffle.
    Consecutive slots share a design in runs of 2 or 4; the board is shuffled afterwards anyway.
    """
    designs = list(alphabet)
    rng.shuffle(designs)

    if distribution == TileDistribution.RANDOM:
        while True:
            design = rng.choice(designs)
            yield design
            yield design

    for round_index in count():
        if distribution == TileDistribution.RANDOM_PER_SET:
            pairs = designs * PAIRS_PER_DESIGN
            rng.shuffle(pairs)
            for design in pairs:
                yield design
                yield design
            continue

        run_length = _slots_per_design(distribution, round_index)
        for design in designs:
            for _ in range(run_length):
                yield design
