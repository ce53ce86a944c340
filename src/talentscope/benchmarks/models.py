"""Benchmark ORM models.

A Benchmark owns many BenchmarkDataPoint rows (one per assessed person,
every score nullable for "not answered") and the BenchmarkTopPerformer
profiles derived from them. Data points are read-only for the profiling
engine; profiles are replaced wholesale on every recalculation.
"""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from talentscope.db.base import Base, TimestampMixin


class BenchmarkStatus(str, PyEnum):
    """Upload/processing state of a benchmark."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Benchmark(TimestampMixin, Base):
    """A named dataset of assessment records under analysis."""

    __tablename__ = "benchmarks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BenchmarkStatus.PENDING.value
    )


class BenchmarkDataPoint(Base):
    """One assessed individual's scores within a benchmark.

    Column names match the taxonomy: Competency.column, Talent.column and
    Outcome.column resolve to attributes of this model.
    """

    __tablename__ = "benchmark_data_points"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    benchmark_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("benchmarks.id"), nullable=False, index=True
    )

    # Macro competencies
    k: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    c: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    g: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Core competencies
    el: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    act: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ne: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    im: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    op: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    emp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Brain talents: Focus
    data_mining: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    modeling: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prioritizing: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    connection: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    emotional_insight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    collaboration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Brain talents: Decisions
    reflecting: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    adaptability: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    critical_thinking: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    resilience: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    risk_tolerance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    imagination: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Brain talents: Drive
    proactivity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    commitment: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    problem_solving: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    vision: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    designing: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    entrepreneurship: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Outcomes
    effectiveness: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    relationships: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    quality_of_life: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    wellbeing: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    influence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    decision_making: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    community: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    network: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    achievement: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    satisfaction: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    balance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    health: Mapped[Optional[float]] = mapped_column(Float, nullable=True)


class BenchmarkTopPerformer(TimestampMixin, Base):
    """P90 top performer profile for one outcome of one benchmark.

    Ranked lists and patterns are stored as JSON in the shapes produced by
    talentscope.benchmarks.schemas.
    """

    __tablename__ = "benchmark_top_performers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    benchmark_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("benchmarks.id"), nullable=False, index=True
    )
    outcome_key: Mapped[str] = mapped_column(String(40), nullable=False)
    percentile_threshold: Mapped[int] = mapped_column(Integer, nullable=False)
    threshold_value: Mapped[float] = mapped_column(Float, nullable=False)
    sample_size: Mapped[int] = mapped_column(Integer, nullable=False)

    avg_k: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_c: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_g: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_el: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_rp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_act: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_ne: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_im: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_op: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_emp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_ng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    top_competencies: Mapped[list] = mapped_column(JSON, nullable=False)
    top_talents: Mapped[list] = mapped_column(JSON, nullable=False)
    top_talents_summary: Mapped[list] = mapped_column(JSON, nullable=False)
    common_patterns: Mapped[list] = mapped_column(JSON, nullable=False)
    talent_patterns: Mapped[list] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "benchmark_id", "outcome_key", name="uq_top_performer_benchmark_outcome"
        ),
        Index("ix_top_performers_benchmark_outcome", "benchmark_id", "outcome_key"),
    )
