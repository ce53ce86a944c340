"""Synthetic benchmark data for demos and tests.

Scores loosely follow the SEI scale (competencies around 100, talents
around 50). Outcomes rise with a latent "EQ" factor so the P90 cohorts
have distinctive competencies, and a small share of answers is left blank.
"""

from __future__ import annotations

import random
from typing import Optional

from sqlalchemy.orm import Session

from talentscope.benchmarks.models import Benchmark, BenchmarkDataPoint, BenchmarkStatus
from talentscope.benchmarks.taxonomy import (
    ALL_COMPETENCIES,
    CORE_COMPETENCIES,
    OUTCOMES,
    TALENTS,
)

DEFAULT_MISSING_RATE = 0.03


def _score(rng: random.Random, mean: float, spread: float, missing_rate: float) -> Optional[float]:
    if rng.random() < missing_rate:
        return None
    return round(rng.gauss(mean, spread), 2)


def generate_demo_data_points(
    benchmark_id: int,
    count: int,
    *,
    seed: int = 42,
    missing_rate: float = DEFAULT_MISSING_RATE,
) -> list[dict]:
    """Build column dicts for count synthetic data points.

    The same seed always yields the same rows.
    """
    rng = random.Random(seed)
    rows = []
    for _ in range(count):
        latent = rng.gauss(0.0, 1.0)
        row: dict = {"benchmark_id": benchmark_id}

        for competency in ALL_COMPETENCIES:
            # Core competencies carry more of the latent factor than macros
            weight = 8.0 if competency in CORE_COMPETENCIES[:4] else 4.0
            row[competency.column] = _score(rng, 100 + latent * weight, 10, missing_rate)
        for index, talent in enumerate(TALENTS):
            weight = 6.0 if index % 3 == 0 else 1.5
            row[talent.column] = _score(rng, 50 + latent * weight, 12, missing_rate)
        for outcome in OUTCOMES:
            row[outcome.column] = _score(rng, 100 + latent * 9, 8, missing_rate)

        rows.append(row)
    return rows


def seed_demo_benchmark(
    db: Session,
    name: str = "Demo Benchmark",
    count: int = 2000,
    *,
    seed: int = 42,
) -> Benchmark:
    """Create a COMPLETED benchmark filled with synthetic data points."""
    benchmark = Benchmark(name=name, status=BenchmarkStatus.COMPLETED.value)
    db.add(benchmark)
    db.flush()

    db.execute(
        BenchmarkDataPoint.__table__.insert(),
        generate_demo_data_points(benchmark.id, count, seed=seed),
    )
    db.flush()
    return benchmark
