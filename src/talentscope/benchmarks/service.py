"""Benchmark service functions.

Lookups take a SQLAlchemy session as first arg, like the rest of the
service layer. Recalculation takes a session factory instead, because the
engine's worker threads each open their own sessions.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from talentscope.benchmarks.datasource import SqlBenchmarkDataSource
from talentscope.benchmarks.models import (
    Benchmark,
    BenchmarkDataPoint,
    BenchmarkStatus,
    BenchmarkTopPerformer,
)
from talentscope.benchmarks.recompute import TopPerformerEngine
from talentscope.benchmarks.store import SqlProfileStore
from talentscope.benchmarks.taxonomy import Outcome
from talentscope.config import Settings, get_settings
from talentscope.exceptions import BenchmarkNotFoundError

logger = logging.getLogger(__name__)


def get_benchmark(db: Session, benchmark_id: int) -> Benchmark:
    """Return the benchmark or raise BenchmarkNotFoundError."""
    benchmark = db.get(Benchmark, benchmark_id)
    if benchmark is None:
        raise BenchmarkNotFoundError(
            message=f"Benchmark {benchmark_id} not found",
        )
    return benchmark


def get_latest_completed_benchmark(db: Session) -> Optional[Benchmark]:
    """Most recently created benchmark whose upload finished."""
    stmt = (
        select(Benchmark)
        .where(Benchmark.status == BenchmarkStatus.COMPLETED.value)
        .order_by(Benchmark.created_at.desc(), Benchmark.id.desc())
        .limit(1)
    )
    return db.scalars(stmt).first()


def count_population(db: Session, benchmark_id: int, outcome: Outcome) -> int:
    """Number of records in the benchmark that answered an outcome."""
    column = getattr(BenchmarkDataPoint, outcome.column)
    stmt = select(func.count(BenchmarkDataPoint.id)).where(
        BenchmarkDataPoint.benchmark_id == benchmark_id,
        column.isnot(None),
    )
    return int(db.execute(stmt).scalar_one())


def list_top_performer_profiles(
    db: Session, benchmark_id: int, outcome: Optional[Outcome] = None
) -> list[BenchmarkTopPerformer]:
    """Stored profiles for a benchmark, ordered by outcome key."""
    get_benchmark(db, benchmark_id)
    query = db.query(BenchmarkTopPerformer).filter(
        BenchmarkTopPerformer.benchmark_id == benchmark_id
    )
    if outcome is not None:
        query = query.filter(BenchmarkTopPerformer.outcome_key == outcome.value)
    return query.order_by(BenchmarkTopPerformer.outcome_key.asc()).all()


def build_engine(
    session_factory: Callable[[], Session],
    settings: Optional[Settings] = None,
) -> TopPerformerEngine:
    """Wire the SQL data source and profile store into an engine."""
    settings = settings or get_settings()
    return TopPerformerEngine(
        SqlBenchmarkDataSource(session_factory),
        SqlProfileStore(session_factory),
        max_workers=settings.max_workers,
        timeout_seconds=settings.job_timeout_seconds,
    )


def recalculate_benchmark(
    session_factory: Callable[[], Session],
    benchmark_id: int,
    settings: Optional[Settings] = None,
) -> int:
    """Recompute every top performer profile of a benchmark.

    Returns:
        Number of outcomes that produced a profile.

    Raises:
        BenchmarkNotFoundError: Unknown benchmark id.
    """
    with session_factory() as db:
        benchmark = get_benchmark(db, benchmark_id)
        name = benchmark.name

    logger.info("Recalculating top performers for benchmark %d (%s)", benchmark_id, name)
    return build_engine(session_factory, settings).run(benchmark_id)


def recalculate_latest_benchmark(
    session_factory: Callable[[], Session],
    settings: Optional[Settings] = None,
) -> Optional[tuple[int, int]]:
    """Recalculate the newest COMPLETED benchmark.

    Returns:
        (benchmark_id, profiles_created), or None if no benchmark is completed.
    """
    with session_factory() as db:
        benchmark = get_latest_completed_benchmark(db)
        if benchmark is None:
            logger.warning("No completed benchmark to recalculate")
            return None
        benchmark_id = benchmark.id

    return benchmark_id, recalculate_benchmark(session_factory, benchmark_id, settings)
