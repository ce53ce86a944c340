"""Tests for benchmark service functions, settings and demo data."""

import pytest

from talentscope.benchmarks.demo import generate_demo_data_points, seed_demo_benchmark
from talentscope.benchmarks.models import (
    Benchmark,
    BenchmarkDataPoint,
    BenchmarkStatus,
    BenchmarkTopPerformer,
)
from talentscope.benchmarks.service import (
    count_population,
    get_benchmark,
    get_latest_completed_benchmark,
    list_top_performer_profiles,
    recalculate_benchmark,
    recalculate_latest_benchmark,
)
from talentscope.benchmarks.taxonomy import OUTCOMES, Outcome
from talentscope.config import Settings, get_settings
from talentscope.exceptions import BenchmarkNotFoundError


def _profile_row(benchmark_id, outcome_key):
    return BenchmarkTopPerformer(
        benchmark_id=benchmark_id,
        outcome_key=outcome_key,
        percentile_threshold=90,
        threshold_value=120.0,
        sample_size=40,
        top_competencies=[],
        top_talents=[],
        top_talents_summary=[],
        common_patterns=[],
        talent_patterns=[],
    )


class TestLookups:
    def test_get_benchmark(self, db_session, sample_benchmark):
        assert get_benchmark(db_session, sample_benchmark.id).name == "Acme 2026"

    def test_get_missing_benchmark(self, db_session):
        with pytest.raises(BenchmarkNotFoundError, match="Benchmark 999999 not found"):
            get_benchmark(db_session, 999999)

    def test_latest_completed_ignores_pending(self, db_session, sample_benchmark):
        newer = Benchmark(name="Acme 2027", status=BenchmarkStatus.COMPLETED.value)
        pending = Benchmark(name="Uploading", status=BenchmarkStatus.PENDING.value)
        db_session.add_all([newer, pending])
        db_session.flush()

        assert get_latest_completed_benchmark(db_session).id == newer.id

    def test_latest_completed_none(self, db_session):
        assert get_latest_completed_benchmark(db_session) is None

    def test_count_population(self, db_session, sample_benchmark):
        db_session.add_all([
            BenchmarkDataPoint(benchmark_id=sample_benchmark.id, health=80.0),
            BenchmarkDataPoint(benchmark_id=sample_benchmark.id, health=None),
            BenchmarkDataPoint(benchmark_id=sample_benchmark.id, health=90.0),
        ])
        db_session.flush()

        assert count_population(db_session, sample_benchmark.id, Outcome.HEALTH) == 2
        assert count_population(db_session, sample_benchmark.id, Outcome.BALANCE) == 0

    def test_list_profiles_filtered_and_ordered(self, db_session, sample_benchmark):
        db_session.add_all([
            _profile_row(sample_benchmark.id, "wellbeing"),
            _profile_row(sample_benchmark.id, "effectiveness"),
            _profile_row(sample_benchmark.id, "health"),
        ])
        db_session.flush()

        rows = list_top_performer_profiles(db_session, sample_benchmark.id)
        assert [r.outcome_key for r in rows] == ["effectiveness", "health", "wellbeing"]

        rows = list_top_performer_profiles(db_session, sample_benchmark.id, Outcome.HEALTH)
        assert [r.outcome_key for r in rows] == ["health"]

    def test_list_profiles_unknown_benchmark(self, db_session):
        with pytest.raises(BenchmarkNotFoundError):
            list_top_performer_profiles(db_session, 999999)


class TestRecalculation:
    def test_recalculate_benchmark(self, session_factory):
        with session_factory() as db:
            benchmark_id = seed_demo_benchmark(db, count=400).id
            db.commit()

        settings = Settings(max_workers=2)
        assert recalculate_benchmark(session_factory, benchmark_id, settings) == len(OUTCOMES)

    def test_recalculate_unknown_benchmark(self, session_factory):
        with pytest.raises(BenchmarkNotFoundError):
            recalculate_benchmark(session_factory, 999999, Settings())

    def test_recalculate_latest(self, session_factory):
        assert recalculate_latest_benchmark(session_factory, Settings()) is None

        with session_factory() as db:
            benchmark_id = seed_demo_benchmark(db, count=400).id
            db.commit()

        assert recalculate_latest_benchmark(session_factory, Settings()) == (
            benchmark_id,
            len(OUTCOMES),
        )


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TALENTSCOPE_MAX_WORKERS", raising=False)
        settings = Settings()
        assert settings.max_workers == 4
        assert settings.job_timeout_seconds is None

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("TALENTSCOPE_MAX_WORKERS", "8")
        monkeypatch.setenv("TALENTSCOPE_JOB_TIMEOUT_SECONDS", "30")
        settings = get_settings()
        assert settings.max_workers == 8
        assert settings.job_timeout_seconds == 30.0

    def test_invalid_pool_size(self, monkeypatch):
        monkeypatch.setenv("TALENTSCOPE_MAX_WORKERS", "0")
        with pytest.raises(RuntimeError, match="TALENTSCOPE_"):
            get_settings()


class TestDemoData:
    def test_deterministic_for_seed(self):
        assert generate_demo_data_points(1, 20, seed=5) == generate_demo_data_points(1, 20, seed=5)
        assert generate_demo_data_points(1, 20, seed=5) != generate_demo_data_points(1, 20, seed=6)

    def test_rows_cover_every_column(self):
        row = generate_demo_data_points(3, 1, missing_rate=0.0)[0]
        assert row["benchmark_id"] == 3
        assert all(row[outcome.column] is not None for outcome in OUTCOMES)

    def test_seed_demo_benchmark(self, db_session):
        benchmark = seed_demo_benchmark(db_session, name="Demo", count=50)
        assert benchmark.status == BenchmarkStatus.COMPLETED.value
        assert db_session.query(BenchmarkDataPoint).filter_by(benchmark_id=benchmark.id).count() == 50


class TestGetDb:
    def test_yields_session_on_configured_factory(self, session_factory, monkeypatch):
        monkeypatch.setenv("TALENTSCOPE_DATABASE_URL", "sqlite://")
        from talentscope.db import engine as db_engine

        monkeypatch.setattr(db_engine, "SessionLocal", session_factory)
        with session_factory() as db:
            db.add(Benchmark(name="Committed", status=BenchmarkStatus.COMPLETED.value))
            db.commit()

        with db_engine.get_db() as db:
            names = [b.name for b in db.query(Benchmark).all()]
            assert db.is_active

        assert "Committed" in names
