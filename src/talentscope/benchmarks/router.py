"""Benchmark top performer REST API router.

Provides endpoints to trigger a full recalculation and to read the stored
per-outcome profiles. DB dependencies use the placeholder pattern (wired in
main.py, overridden in tests).

Error handling: BenchmarkNotFoundError -> 404, EngineCancelledError -> 504,
other TalentScopeError -> 500.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from talentscope.benchmarks.profiles import confidence_level, generate_insights
from talentscope.benchmarks.schemas import (
    RecalculationResponse,
    TopPerformerProfileResponse,
)
from talentscope.benchmarks.service import (
    count_population,
    list_top_performer_profiles,
    recalculate_benchmark,
)
from talentscope.benchmarks.taxonomy import Outcome
from talentscope.exceptions import (
    BenchmarkNotFoundError,
    EngineCancelledError,
    TalentScopeError,
)

benchmarks_router = APIRouter(prefix="/api/benchmarks", tags=["benchmarks"])


# -- DB dependency placeholders -----------------------------------------------


def _get_db():
    """Yield a SQLAlchemy session. Lazy-imports engine so importing the router stays cheap."""
    from talentscope.db.engine import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _get_session_factory():
    """Session factory for the recalculation worker threads."""
    from talentscope.db.engine import SessionLocal

    return SessionLocal


# -- Endpoints ----------------------------------------------------------------


@benchmarks_router.post(
    "/{benchmark_id}/top-performers/generate",
    response_model=RecalculationResponse,
)
def generate_top_performers(
    benchmark_id: int,
    session_factory=Depends(_get_session_factory),
):
    """Recompute the P90 top performer profile of every outcome.

    Replaces all stored profiles of the benchmark. Long running: streams the
    whole benchmark once per eligible outcome.
    """
    try:
        created = recalculate_benchmark(session_factory, benchmark_id)
    except BenchmarkNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EngineCancelledError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except TalentScopeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return RecalculationResponse(benchmark_id=benchmark_id, profiles_created=created)


@benchmarks_router.get(
    "/{benchmark_id}/top-performers",
    response_model=list[TopPerformerProfileResponse],
)
def get_top_performers(
    benchmark_id: int,
    outcome: Optional[Outcome] = Query(None),
    db: Session = Depends(_get_db),
):
    """Stored top performer profiles, enriched for reporting.

    Each profile carries the outcome's answering population, a confidence
    label derived from the cohort size, and insight tokens.
    """
    try:
        rows = list_top_performer_profiles(db, benchmark_id, outcome)
    except BenchmarkNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    responses = []
    for row in rows:
        profile = TopPerformerProfileResponse.model_validate(row)
        responses.append(
            profile.model_copy(
                update={
                    "total_population": count_population(
                        db, benchmark_id, Outcome(row.outcome_key)
                    ),
                    "confidence_level": confidence_level(row.sample_size),
                    "insights": generate_insights(profile),
                }
            )
        )
    return responses
