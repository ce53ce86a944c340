"""Pairwise pattern mining over top performer co-occurrence counts.

A pattern's frequency is the share of the cohort (whole percent, rounded half
up) whose top 3 contained both attributes. Rare pairs are dropped and only
the most frequent few are kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Mapping, TypeVar

from talentscope.benchmarks.aggregator import PairStats
from talentscope.benchmarks.taxonomy import Competency, Talent

MIN_PATTERN_FREQUENCY = 10
MAX_PATTERNS = 6

A = TypeVar("A", Competency, Talent)


@dataclass(frozen=True)
class MinedPattern(Generic[A]):
    pair: tuple[A, A]
    count: int
    frequency: int
    avg_outcome: float


def frequency_percent(count: int, population: int) -> int:
    """Percentage of population, rounded half up to a whole number.

    Exact in integers: 29 of 200 is 14.5% and gives 15, where float rounding
    of count / population * 100 gives 14.
    """
    return (count * 200 + population) // (2 * population)


def mine_pair_patterns(
    pairs: Mapping[tuple[A, A], PairStats],
    top_performer_count: int,
    *,
    min_frequency: int = MIN_PATTERN_FREQUENCY,
    limit: int = MAX_PATTERNS,
) -> list[MinedPattern[A]]:
    """Rank co-occurring pairs by how common they are in the cohort.

    Pairs below min_frequency percent are dropped. Equal frequencies fall
    back to the raw count, then to the pair codes, so reruns on the same data
    always return the same list.

    Args:
        pairs: Pair counters from the aggregator.
        top_performer_count: Cohort size (the frequency denominator).
        min_frequency: Minimum whole-percent frequency to keep.
        limit: Maximum number of patterns returned.

    Returns:
        At most limit patterns, most frequent first.
    """
    if top_performer_count <= 0:
        return []

    mined = [
        MinedPattern(
            pair=pair,
            count=stats.count,
            frequency=frequency_percent(stats.count, top_performer_count),
            avg_outcome=stats.avg_outcome,
        )
        for pair, stats in pairs.items()
    ]
    kept = [p for p in mined if p.frequency >= min_frequency]
    kept.sort(
        key=lambda p: (-p.frequency, -p.count, p.pair[0].value, p.pair[1].value)
    )
    return kept[:limit]
