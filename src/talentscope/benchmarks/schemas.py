"""Pydantic v2 schemas for top performer profiles.

TopPerformerProfile is the immutable result of one outcome pipeline.
TopPerformerProfileResponse reads stored rows back (from_attributes=True)
for the REST API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from talentscope.benchmarks.taxonomy import Outcome, TalentCluster


class CompetencyRanking(BaseModel):
    """A core competency's cohort average against the population baseline."""

    model_config = ConfigDict(frozen=True)

    key: str
    avg_score: float
    importance: float
    diff_from_avg: float


class TalentRanking(CompetencyRanking):
    """A talent ranking, tagged with its cluster for grid display."""

    cluster: TalentCluster


class CompetencyPattern(BaseModel):
    """Two core competencies that co-occur in top performers' top 3."""

    model_config = ConfigDict(frozen=True)

    competencies: tuple[str, str]
    frequency: int
    avg_outcome: float


class TalentPattern(BaseModel):
    """Two talents that co-occur in top performers' top 3."""

    model_config = ConfigDict(frozen=True)

    talents: tuple[str, str]
    frequency: int
    avg_outcome: float


class TopPerformerProfile(BaseModel):
    """Profile of the P90 cohort for one outcome."""

    model_config = ConfigDict(frozen=True)

    outcome_key: Outcome
    percentile_threshold: int
    threshold_value: float
    sample_size: int

    avg_k: Optional[float] = None
    avg_c: Optional[float] = None
    avg_g: Optional[float] = None
    avg_el: Optional[float] = None
    avg_rp: Optional[float] = None
    avg_act: Optional[float] = None
    avg_ne: Optional[float] = None
    avg_im: Optional[float] = None
    avg_op: Optional[float] = None
    avg_emp: Optional[float] = None
    avg_ng: Optional[float] = None

    top_competencies: tuple[CompetencyRanking, ...] = ()
    top_talents: tuple[TalentRanking, ...] = ()
    top_talents_summary: tuple[TalentRanking, ...] = ()
    common_patterns: tuple[CompetencyPattern, ...] = ()
    talent_patterns: tuple[TalentPattern, ...] = ()


class TopPerformerProfileResponse(BaseModel):
    """Response schema for a stored top performer profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    benchmark_id: int
    outcome_key: str
    percentile_threshold: int
    threshold_value: float
    sample_size: int

    avg_k: Optional[float] = None
    avg_c: Optional[float] = None
    avg_g: Optional[float] = None
    avg_el: Optional[float] = None
    avg_rp: Optional[float] = None
    avg_act: Optional[float] = None
    avg_ne: Optional[float] = None
    avg_im: Optional[float] = None
    avg_op: Optional[float] = None
    avg_emp: Optional[float] = None
    avg_ng: Optional[float] = None

    top_competencies: list[CompetencyRanking] = Field(default_factory=list)
    top_talents: list[TalentRanking] = Field(default_factory=list)
    top_talents_summary: list[TalentRanking] = Field(default_factory=list)
    common_patterns: list[CompetencyPattern] = Field(default_factory=list)
    talent_patterns: list[TalentPattern] = Field(default_factory=list)

    total_population: Optional[int] = None
    confidence_level: Optional[str] = None
    insights: list[str] = Field(default_factory=list)
    created_at: datetime


class RecalculationResponse(BaseModel):
    """Result of a top performer recalculation."""

    benchmark_id: int
    profiles_created: int
