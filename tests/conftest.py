"""Test fixtures for TalentScope integration tests.

Uses a temp-file SQLite database with the same PRAGMAs as the production
engine, so the recalculation worker threads read through real connections.
"""

import os
import tempfile
from typing import Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from talentscope.benchmarks.datasource import RECORD_ATTRIBUTES, ScoreRecord
from talentscope.benchmarks.models import (  # noqa: F401 -- ensure models registered
    Benchmark,
    BenchmarkDataPoint,
    BenchmarkStatus,
    BenchmarkTopPerformer,
)
from talentscope.benchmarks.taxonomy import Attribute
from talentscope.db.base import Base


@pytest.fixture(scope="session")
def test_engine():
    """Create a file-backed SQLite test database engine.

    Creates all tables via Base.metadata.create_all.
    """
    tmpfile = tempfile.NamedTemporaryFile(
        suffix=".db", dir="/tmp", delete=False, prefix="talentscope_test_"
    )
    db_path = tmpfile.name
    tmpfile.close()

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def set_pragmas(dbapi_conn, conn_rec):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    Base.metadata.create_all(engine)

    yield engine

    # Teardown: drop tables, remove temp file
    Base.metadata.drop_all(engine)
    engine.dispose()
    try:
        os.unlink(db_path)
        for ext in ("-wal", "-shm"):
            wal_path = db_path + ext
            if os.path.exists(wal_path):
                os.unlink(wal_path)
    except OSError:
        pass


@pytest.fixture
def db_session(test_engine):
    """Create a database session for each test.

    Rolls back all changes after each test to maintain isolation.
    """
    connection = test_engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def session_factory(test_engine):
    """Session factory for code that opens its own sessions and commits.

    The recalculation engine reads from worker threads, so its data must be
    committed. Every table is emptied after the test instead of rolled back.
    """
    factory = sessionmaker(bind=test_engine, expire_on_commit=False)

    yield factory

    with test_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture
def sample_benchmark(db_session):
    """A completed benchmark without data points."""
    benchmark = Benchmark(name="Acme 2026", status=BenchmarkStatus.COMPLETED.value)
    db_session.add(benchmark)
    db_session.flush()
    return benchmark


class InMemoryDataSource:
    """BenchmarkDataSource over a list of records, for engine unit tests.

    benchmark_id is ignored. Every scan request is recorded in scan_calls as
    (outcome, offset, page_size).
    """

    def __init__(self, records: list[dict[Attribute, Optional[float]]]) -> None:
        self.records = [
            {attr: record.get(attr) for attr in RECORD_ATTRIBUTES} for record in records
        ]
        self.scan_calls: list[tuple] = []

    def count_non_null(self, benchmark_id, attribute):
        return sum(1 for r in self.records if r[attribute] is not None)

    def value_at_ascending_rank(self, benchmark_id, attribute, rank):
        values = sorted(r[attribute] for r in self.records if r[attribute] is not None)
        return values[rank] if rank < len(values) else None

    def scan_top_performers(
        self, benchmark_id, outcome, threshold, offset, page_size
    ) -> list[ScoreRecord]:
        self.scan_calls.append((outcome, offset, page_size))
        matching = [
            r for r in self.records
            if r[outcome] is not None and r[outcome] >= threshold
        ]
        return matching[offset:offset + page_size]

    def mean_non_null(self, benchmark_id, attribute):
        values = [r[attribute] for r in self.records if r[attribute] is not None]
        return sum(values) / len(values) if values else None


@pytest.fixture
def memory_source():
    """Factory fixture building an InMemoryDataSource from record dicts."""
    return InMemoryDataSource


class RecordingStore:
    """ProfileStore that keeps every replace call in memory."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def replace_profiles(self, benchmark_id, profiles):
        self.calls.append((benchmark_id, list(profiles)))


@pytest.fixture
def recording_store():
    return RecordingStore()
