"""Read access to benchmark data points.

BenchmarkDataSource is the narrow interface the profiling engine consumes:
counts, an ascending-rank lookup for percentiles, a paged top performer
scan and a null-excluding mean. SqlBenchmarkDataSource implements it with
SQLAlchemy, opening a short-lived session per call so one instance can be
shared by the per-outcome worker threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable, Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from talentscope.benchmarks.models import BenchmarkDataPoint
from talentscope.benchmarks.taxonomy import (
    ALL_COMPETENCIES,
    OUTCOMES,
    TALENTS,
    Attribute,
)
from talentscope.exceptions import DataAccessError

logger = logging.getLogger(__name__)

ScoreRecord = Mapping[Attribute, Optional[float]]

# Every column a top performer scan returns, in taxonomy order
RECORD_ATTRIBUTES: tuple[Attribute, ...] = ALL_COMPETENCIES + TALENTS + OUTCOMES


class BenchmarkDataSource(Protocol):
    """Queries the profiling engine runs against one benchmark's records."""

    def count_non_null(self, benchmark_id: int, attribute: Attribute) -> int:
        """Count records with a score for attribute."""
        ...

    def value_at_ascending_rank(
        self, benchmark_id: int, attribute: Attribute, rank: int
    ) -> Optional[float]:
        """Return the non-null score at 0-indexed position rank in ascending order."""
        ...

    def scan_top_performers(
        self,
        benchmark_id: int,
        outcome: Attribute,
        threshold: float,
        offset: int,
        page_size: int,
    ) -> list[ScoreRecord]:
        """Return one page of records whose outcome score is >= threshold."""
        ...

    def mean_non_null(self, benchmark_id: int, attribute: Attribute) -> Optional[float]:
        """Mean of non-null scores for attribute, or None without observations."""
        ...


def _column(attribute: Attribute):
    return getattr(BenchmarkDataPoint, attribute.column)


class SqlBenchmarkDataSource:
    """BenchmarkDataSource backed by the benchmark_data_points table.

    All SQLAlchemy errors surface as DataAccessError.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def _run(self, description: str, statement, fetch: Callable):
        try:
            with self._session_factory() as db:
                return fetch(db.execute(statement))
        except SQLAlchemyError as e:
            raise DataAccessError(
                message=f"Failed to {description}",
                detail=str(e),
            ) from e

    def count_non_null(self, benchmark_id: int, attribute: Attribute) -> int:
        column = _column(attribute)
        stmt = select(func.count(BenchmarkDataPoint.id)).where(
            BenchmarkDataPoint.benchmark_id == benchmark_id,
            column.isnot(None),
        )
        count = self._run(
            f"count {attribute.value} scores", stmt, lambda result: result.scalar_one()
        )
        return int(count)

    def value_at_ascending_rank(
        self, benchmark_id: int, attribute: Attribute, rank: int
    ) -> Optional[float]:
        column = _column(attribute)
        stmt = (
            select(column)
            .where(
                BenchmarkDataPoint.benchmark_id == benchmark_id,
                column.isnot(None),
            )
            .order_by(column.asc(), BenchmarkDataPoint.id.asc())
            .offset(rank)
            .limit(1)
        )
        return self._run(
            f"look up {attribute.value} at rank {rank}",
            stmt,
            lambda result: result.scalar_one_or_none(),
        )

    def scan_top_performers(
        self,
        benchmark_id: int,
        outcome: Attribute,
        threshold: float,
        offset: int,
        page_size: int,
    ) -> list[ScoreRecord]:
        outcome_column = _column(outcome)
        stmt = (
            select(*(_column(attr) for attr in RECORD_ATTRIBUTES))
            .where(
                BenchmarkDataPoint.benchmark_id == benchmark_id,
                outcome_column >= threshold,
            )
            .order_by(BenchmarkDataPoint.id.asc())
            .offset(offset)
            .limit(page_size)
        )
        rows = self._run(
            f"scan {outcome.value} top performers at offset {offset}",
            stmt,
            lambda result: result.all(),
        )
        logger.debug(
            "Scanned %d %s rows for benchmark %d at offset %d",
            len(rows), outcome.value, benchmark_id, offset,
        )
        return [dict(zip(RECORD_ATTRIBUTES, row)) for row in rows]

    def mean_non_null(self, benchmark_id: int, attribute: Attribute) -> Optional[float]:
        column = _column(attribute)
        stmt = select(func.avg(column)).where(
            BenchmarkDataPoint.benchmark_id == benchmark_id,
            column.isnot(None),
        )
        mean = self._run(
            f"average {attribute.value} scores", stmt, lambda result: result.scalar_one()
        )
        return float(mean) if mean is not None else None
