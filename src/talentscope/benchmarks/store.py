"""Persistence of top performer profiles.

replace_profiles deletes every stored profile of a benchmark and inserts the
new set inside a single transaction, so readers see either the old set or
the new one. An empty new set still clears the old profiles.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

import structlog
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from talentscope.benchmarks.models import BenchmarkTopPerformer
from talentscope.benchmarks.schemas import TopPerformerProfile
from talentscope.exceptions import ProfileWriteError

logger = structlog.get_logger(__name__)


class ProfileStore(Protocol):
    """Output store for computed profiles."""

    def replace_profiles(
        self, benchmark_id: int, profiles: Sequence[TopPerformerProfile]
    ) -> None:
        ...


def profile_to_row(
    benchmark_id: int, profile: TopPerformerProfile
) -> BenchmarkTopPerformer:
    """Map a profile onto a new ORM row, ranked lists as JSON."""
    data = profile.model_dump(mode="json")
    return BenchmarkTopPerformer(benchmark_id=benchmark_id, **data)


class SqlProfileStore:
    """ProfileStore backed by the benchmark_top_performers table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def replace_profiles(
        self, benchmark_id: int, profiles: Sequence[TopPerformerProfile]
    ) -> None:
        """Atomically swap the benchmark's profile set.

        Raises:
            ProfileWriteError: If the delete or insert fails. The transaction
                is rolled back, leaving the previous profiles in place.
        """
        logger.info(
            "replacing_top_performer_profiles",
            benchmark_id=benchmark_id,
            profile_count=len(profiles),
        )
        try:
            with self._session_factory() as db:
                with db.begin():
                    deleted = db.execute(
                        delete(BenchmarkTopPerformer).where(
                            BenchmarkTopPerformer.benchmark_id == benchmark_id
                        )
                    ).rowcount
                    db.add_all(profile_to_row(benchmark_id, p) for p in profiles)
                    db.flush()
        except SQLAlchemyError as e:
            raise ProfileWriteError(
                message=f"Failed to replace top performer profiles for benchmark {benchmark_id}",
                detail=str(e),
            ) from e

        logger.info(
            "top_performer_profiles_replaced",
            benchmark_id=benchmark_id,
            deleted=deleted,
            inserted=len(profiles),
        )

