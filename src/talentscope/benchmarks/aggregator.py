"""Streaming aggregation of one outcome's top performer cohort.

Pages through every record whose outcome score meets the threshold and keeps
only running totals: per-attribute sum/count, the cohort size, and
co-occurrence counters for pairs drawn from each record's top 3 core
competencies and top 3 talents. The full cohort is never held in memory.

The returned CohortAggregate belongs to the calling pipeline; nothing here is
shared between outcomes.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from itertools import combinations
from typing import Generic, Optional, Sequence, TypeVar

from talentscope.benchmarks.datasource import BenchmarkDataSource, ScoreRecord
from talentscope.benchmarks.taxonomy import (
    ALL_COMPETENCIES,
    CORE_COMPETENCIES,
    TALENTS,
    Competency,
    Outcome,
    Talent,
)
from talentscope.benchmarks.thresholds import raise_if_cancelled

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10_000
TOP_ATTRIBUTES_PER_RECORD = 3

A = TypeVar("A", Competency, Talent)


@dataclass
class AttributeStats:
    """Null-safe running sum and count for one attribute."""

    total: float = 0.0
    count: int = 0

    def add(self, value: Optional[float]) -> None:
        if value is None:
            return
        self.total += value
        self.count += 1

    @property
    def mean(self) -> Optional[float]:
        return self.total / self.count if self.count > 0 else None


@dataclass
class PairStats:
    """How often a pair co-occurs, and the outcome values of those records."""

    count: int = 0
    outcome_total: float = 0.0

    def add(self, outcome_value: float) -> None:
        self.count += 1
        self.outcome_total += outcome_value

    @property
    def avg_outcome(self) -> float:
        return self.outcome_total / self.count if self.count > 0 else 0.0


class PairCounter(Generic[A]):
    """Co-occurrence counts keyed by an unordered attribute pair.

    Keys are the two attributes sorted by code, so (RP, EL) and (EL, RP)
    land on the same entry.
    """

    def __init__(self) -> None:
        self.pairs: dict[tuple[A, A], PairStats] = {}

    @staticmethod
    def key(first: A, second: A) -> tuple[A, A]:
        return (first, second) if first.value <= second.value else (second, first)

    def add_top_ranked(
        self,
        record: ScoreRecord,
        attributes: Sequence[A],
        outcome_value: float,
    ) -> None:
        """Count every pair among the record's top ranked attributes."""
        for first, second in combinations(top_ranked(record, attributes), 2):
            key = self.key(first, second)
            stats = self.pairs.get(key)
            if stats is None:
                stats = self.pairs[key] = PairStats()
            stats.add(outcome_value)

    def __len__(self) -> int:
        return len(self.pairs)


def top_ranked(
    record: ScoreRecord,
    attributes: Sequence[A],
    limit: int = TOP_ATTRIBUTES_PER_RECORD,
) -> list[A]:
    """Return the record's highest scoring attributes, best first.

    Unanswered attributes are skipped. sorted() is stable, so equal scores
    keep the order of attributes (the taxonomy declaration order).
    """
    scored = [(attr, record.get(attr)) for attr in attributes]
    answered = [(attr, score) for attr, score in scored if score is not None]
    answered.sort(key=lambda item: item[1], reverse=True)
    return [attr for attr, _ in answered[:limit]]


@dataclass
class CohortAggregate:
    """Everything streamed for one outcome's top performers."""

    outcome: Outcome
    threshold: float
    top_performer_count: int = 0
    competency_stats: dict[Competency, AttributeStats] = field(
        default_factory=lambda: {c: AttributeStats() for c in ALL_COMPETENCIES}
    )
    talent_stats: dict[Talent, AttributeStats] = field(
        default_factory=lambda: {t: AttributeStats() for t in TALENTS}
    )
    competency_pairs: PairCounter[Competency] = field(default_factory=PairCounter)
    talent_pairs: PairCounter[Talent] = field(default_factory=PairCounter)

    def add_record(self, record: ScoreRecord) -> None:
        """Fold one top performer into the running totals."""
        self.top_performer_count += 1

        for competency, stats in self.competency_stats.items():
            stats.add(record.get(competency))
        for talent, stats in self.talent_stats.items():
            stats.add(record.get(talent))

        outcome_value = record.get(self.outcome) or 0.0
        self.competency_pairs.add_top_ranked(record, CORE_COMPETENCIES, outcome_value)
        self.talent_pairs.add_top_ranked(record, TALENTS, outcome_value)


def aggregate_top_performers(
    source: BenchmarkDataSource,
    benchmark_id: int,
    outcome: Outcome,
    threshold: float,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    cancel_event: Optional[threading.Event] = None,
) -> CohortAggregate:
    """Stream one outcome's top performers page by page.

    Stops on an empty page or on a page shorter than page_size. The cancel
    event is checked before every page request; once it is set the partial
    aggregate is dropped and EngineCancelledError is raised.

    Args:
        source: Benchmark data source.
        benchmark_id: Benchmark to analyse.
        outcome: Outcome the cohort was selected on.
        threshold: Inclusive P90 cutoff for outcome.
        page_size: Records requested per page.
        cancel_event: Set by the engine on timeout or failure elsewhere.

    Returns:
        The completed CohortAggregate.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    aggregate = CohortAggregate(outcome=outcome, threshold=threshold)
    offset = 0
    pages = 0

    while True:
        raise_if_cancelled(
            cancel_event,
            f"Stopped streaming {outcome.value} for benchmark {benchmark_id} "
            f"after {pages} pages",
        )

        page = source.scan_top_performers(
            benchmark_id, outcome, threshold, offset, page_size
        )
        if not page:
            break

        for record in page:
            aggregate.add_record(record)

        pages += 1
        offset += len(page)
        if len(page) < page_size:
            break

    logger.info(
        "%s: %d top performers in %d pages (threshold %.2f)",
        outcome.value, aggregate.top_performer_count, pages, threshold,
    )
    return aggregate
