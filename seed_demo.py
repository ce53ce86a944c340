"""Seed the database with a demo benchmark and compute its top performers."""

import sys

from talentscope.db.engine import SessionLocal, engine, get_db
from talentscope.db.base import Base

# Import all models so create_all knows about them
import talentscope.benchmarks.models  # noqa: F401

from talentscope.benchmarks.demo import seed_demo_benchmark
from talentscope.benchmarks.models import Benchmark
from talentscope.benchmarks.service import recalculate_benchmark

DEMO_POINTS = 5000

# Create tables
Base.metadata.create_all(engine)

with get_db() as db:
    # Check if already seeded
    if db.query(Benchmark).count() > 0:
        print("Database already seeded. Skipping.")
        sys.exit(0)

    benchmark = seed_demo_benchmark(db, name="Demo Benchmark 2026", count=DEMO_POINTS)
    db.commit()
    benchmark_id = benchmark.id

created = recalculate_benchmark(SessionLocal, benchmark_id)
print(
    f"Seeded benchmark {benchmark_id} with {DEMO_POINTS} data points, "
    f"{created} top performer profiles."
)
