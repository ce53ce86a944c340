"""Tests for the benchmark top performer REST endpoints.

Uses FastAPI TestClient with dependency overrides pointing at the test
database.
"""

import pytest
from fastapi.testclient import TestClient

from talentscope.benchmarks.demo import seed_demo_benchmark
from talentscope.benchmarks.router import _get_db, _get_session_factory
from talentscope.benchmarks.taxonomy import OUTCOMES
from talentscope.exceptions import EngineCancelledError
from talentscope.main import app


@pytest.fixture
def client(session_factory):
    def override_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[_get_db] = override_db
    app.dependency_overrides[_get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def demo_benchmark_id(session_factory):
    with session_factory() as db:
        benchmark = seed_demo_benchmark(db, name="API demo", count=400)
        db.commit()
        return benchmark.id


def test_health(client):
    assert client.get("/api/health").json() == {"ok": True}


def test_generate_and_read_profiles(client, demo_benchmark_id):
    response = client.post(f"/api/benchmarks/{demo_benchmark_id}/top-performers/generate")
    assert response.status_code == 200
    assert response.json() == {
        "benchmark_id": demo_benchmark_id,
        "profiles_created": len(OUTCOMES),
    }

    response = client.get(f"/api/benchmarks/{demo_benchmark_id}/top-performers")
    assert response.status_code == 200
    profiles = response.json()
    keys = [p["outcome_key"] for p in profiles]
    assert keys == sorted(o.value for o in OUTCOMES)

    profile = profiles[0]
    assert profile["percentile_threshold"] == 90
    assert profile["total_population"] > profile["sample_size"]
    assert profile["confidence_level"] == "low"
    assert isinstance(profile["insights"], list)
    assert profile["top_talents"][0]["cluster"] == "focus"


def test_read_single_outcome(client, demo_benchmark_id):
    client.post(f"/api/benchmarks/{demo_benchmark_id}/top-performers/generate")

    response = client.get(
        f"/api/benchmarks/{demo_benchmark_id}/top-performers",
        params={"outcome": "quality_of_life"},
    )
    assert response.status_code == 200
    assert [p["outcome_key"] for p in response.json()] == ["quality_of_life"]


def test_read_before_generate_is_empty(client, demo_benchmark_id):
    response = client.get(f"/api/benchmarks/{demo_benchmark_id}/top-performers")
    assert response.status_code == 200
    assert response.json() == []


def test_unknown_outcome_rejected(client, demo_benchmark_id):
    response = client.get(
        f"/api/benchmarks/{demo_benchmark_id}/top-performers",
        params={"outcome": "happiness"},
    )
    assert response.status_code == 422


def test_unknown_benchmark(client):
    assert client.post("/api/benchmarks/999999/top-performers/generate").status_code == 404
    assert client.get("/api/benchmarks/999999/top-performers").status_code == 404


def test_timeout_maps_to_504(client, demo_benchmark_id, monkeypatch):
    def timed_out(session_factory, benchmark_id):
        raise EngineCancelledError(message="Top performer recalculation timed out")

    monkeypatch.setattr("talentscope.benchmarks.router.recalculate_benchmark", timed_out)

    response = client.post(f"/api/benchmarks/{demo_benchmark_id}/top-performers/generate")
    assert response.status_code == 504
    assert "timed out" in response.json()["detail"]
