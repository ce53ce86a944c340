"""Initial schema: benchmarks, data points, top performer profiles.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Creates: benchmarks, benchmark_data_points, benchmark_top_performers
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Score columns as of this revision (competencies, talents, outcomes)
SCORE_COLUMNS = (
    "k", "c", "g",
    "el", "rp", "act", "ne", "im", "op", "emp", "ng",
    "data_mining", "modeling", "prioritizing", "connection",
    "emotional_insight", "collaboration",
    "reflecting", "adaptability", "critical_thinking", "resilience",
    "risk_tolerance", "imagination",
    "proactivity", "commitment", "problem_solving", "vision",
    "designing", "entrepreneurship",
    "effectiveness", "relationships", "quality_of_life", "wellbeing",
    "influence", "decision_making", "community", "network",
    "achievement", "satisfaction", "balance", "health",
)

AVERAGE_COLUMNS = (
    "avg_k", "avg_c", "avg_g",
    "avg_el", "avg_rp", "avg_act", "avg_ne",
    "avg_im", "avg_op", "avg_emp", "avg_ng",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    """Create the benchmark tables."""

    # -- benchmarks --
    op.create_table(
        "benchmarks",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        *_timestamps(),
    )

    # -- benchmark_data_points --
    op.create_table(
        "benchmark_data_points",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "benchmark_id",
            sa.Integer,
            sa.ForeignKey("benchmarks.id"),
            nullable=False,
        ),
        *(sa.Column(name, sa.Float, nullable=True) for name in SCORE_COLUMNS),
    )
    op.create_index(
        "ix_benchmark_data_points_benchmark_id",
        "benchmark_data_points",
        ["benchmark_id"],
    )

    # -- benchmark_top_performers --
    op.create_table(
        "benchmark_top_performers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "benchmark_id",
            sa.Integer,
            sa.ForeignKey("benchmarks.id"),
            nullable=False,
        ),
        sa.Column("outcome_key", sa.String(40), nullable=False),
        sa.Column("percentile_threshold", sa.Integer, nullable=False),
        sa.Column("threshold_value", sa.Float, nullable=False),
        sa.Column("sample_size", sa.Integer, nullable=False),
        *(sa.Column(name, sa.Float, nullable=True) for name in AVERAGE_COLUMNS),
        sa.Column("top_competencies", sa.JSON, nullable=False),
        sa.Column("top_talents", sa.JSON, nullable=False),
        sa.Column("top_talents_summary", sa.JSON, nullable=False),
        sa.Column("common_patterns", sa.JSON, nullable=False),
        sa.Column("talent_patterns", sa.JSON, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "benchmark_id", "outcome_key", name="uq_top_performer_benchmark_outcome"
        ),
    )
    op.create_index(
        "ix_benchmark_top_performers_benchmark_id",
        "benchmark_top_performers",
        ["benchmark_id"],
    )
    op.create_index(
        "ix_top_performers_benchmark_outcome",
        "benchmark_top_performers",
        ["benchmark_id", "outcome_key"],
    )


def downgrade() -> None:
    """Drop the benchmark tables in reverse dependency order."""
    op.drop_index("ix_top_performers_benchmark_outcome", table_name="benchmark_top_performers")
    op.drop_index("ix_benchmark_top_performers_benchmark_id", table_name="benchmark_top_performers")
    op.drop_table("benchmark_top_performers")
    op.drop_index("ix_benchmark_data_points_benchmark_id", table_name="benchmark_data_points")
    op.drop_table("benchmark_data_points")
    op.drop_table("benchmarks")
