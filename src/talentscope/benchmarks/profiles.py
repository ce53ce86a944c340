"""Top performer profile assembly and reporting helpers.

Turns a streamed CohortAggregate plus the population baseline into an
immutable TopPerformerProfile:

- top_competencies: the 8 core competencies, most distinctive first
- top_talents: all answered talents in fixed cluster order (grid display)
- top_talents_summary: the 5 most distinctive talents
- common_patterns / talent_patterns: mined top-3 pairs

Macro competencies (K, C, G) only appear as flat averages.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol, Sequence

from talentscope.benchmarks.aggregator import AttributeStats, CohortAggregate
from talentscope.benchmarks.patterns import mine_pair_patterns
from talentscope.benchmarks.schemas import (
    CompetencyPattern,
    CompetencyRanking,
    TalentPattern,
    TalentRanking,
    TopPerformerProfile,
)
from talentscope.benchmarks.taxonomy import (
    CORE_COMPETENCIES,
    TALENTS,
    ScoredAttribute,
)
from talentscope.benchmarks.thresholds import MIN_SAMPLE_SIZE, PERCENTILE_THRESHOLD

logger = logging.getLogger(__name__)

IMPORTANCE_SCALE = 10
TALENT_SUMMARY_SIZE = 5

# Sample sizes for the reporting confidence label
CONFIDENCE_HIGH = 385  # 95% confidence, 5% margin of error
CONFIDENCE_MEDIUM = 100

# Insight cutoffs
INSIGHT_MIN_DIFF = 5.0
INSIGHT_MIN_PATTERN_FREQUENCY = 30
INSIGHT_MIN_TALENT_SCORE = 70.0


def _differential(
    stats: AttributeStats, baseline: float
) -> tuple[Optional[float], float, float]:
    """Return (cohort average, diff from baseline, importance)."""
    average = stats.mean
    diff = average - baseline if average is not None else 0.0
    importance = max(0.0, diff * IMPORTANCE_SCALE)
    return average, diff, importance


def _rank_competencies(
    aggregate: CohortAggregate, baseline: Mapping[ScoredAttribute, float]
) -> list[CompetencyRanking]:
    rankings = []
    for competency in CORE_COMPETENCIES:
        average, diff, importance = _differential(
            aggregate.competency_stats[competency], baseline.get(competency, 0.0)
        )
        if average is None or average <= 0:
            continue
        rankings.append(
            CompetencyRanking(
                key=competency.value,
                avg_score=average,
                importance=importance,
                diff_from_avg=diff,
            )
        )
    rankings.sort(key=lambda r: r.diff_from_avg, reverse=True)
    return rankings


def _rank_talents(
    aggregate: CohortAggregate, baseline: Mapping[ScoredAttribute, float]
) -> list[TalentRanking]:
    """Answered talents in declaration (cluster) order; never re-sorted here."""
    rankings = []
    for talent in TALENTS:
        average, diff, importance = _differential(
            aggregate.talent_stats[talent], baseline.get(talent, 0.0)
        )
        if average is None or average <= 0:
            continue
        rankings.append(
            TalentRanking(
                key=talent.value,
                avg_score=average,
                importance=importance,
                diff_from_avg=diff,
                cluster=talent.cluster,
            )
        )
    return rankings


def assemble_profile(
    aggregate: CohortAggregate,
    baseline: Mapping[ScoredAttribute, float],
) -> Optional[TopPerformerProfile]:
    """Build the profile for one outcome's cohort.

    Returns None when the streamed cohort is smaller than MIN_SAMPLE_SIZE.
    That can happen even for an eligible outcome, since eligibility counts
    answers while the cohort counts scores at or above the threshold.
    """
    sample_size = aggregate.top_performer_count
    if sample_size < MIN_SAMPLE_SIZE:
        logger.info(
            "Discarding %s profile: %d top performers (need %d)",
            aggregate.outcome.value, sample_size, MIN_SAMPLE_SIZE,
        )
        return None

    top_talents = _rank_talents(aggregate, baseline)
    summary = sorted(top_talents, key=lambda r: r.diff_from_avg, reverse=True)

    common_patterns = [
        CompetencyPattern(
            competencies=(p.pair[0].value, p.pair[1].value),
            frequency=p.frequency,
            avg_outcome=p.avg_outcome,
        )
        for p in mine_pair_patterns(aggregate.competency_pairs.pairs, sample_size)
    ]
    talent_patterns = [
        TalentPattern(
            talents=(p.pair[0].value, p.pair[1].value),
            frequency=p.frequency,
            avg_outcome=p.avg_outcome,
        )
        for p in mine_pair_patterns(aggregate.talent_pairs.pairs, sample_size)
    ]

    averages = {
        f"avg_{competency.column}": stats.mean
        for competency, stats in aggregate.competency_stats.items()
    }

    return TopPerformerProfile(
        outcome_key=aggregate.outcome,
        percentile_threshold=PERCENTILE_THRESHOLD,
        threshold_value=aggregate.threshold,
        sample_size=sample_size,
        top_competencies=tuple(_rank_competencies(aggregate, baseline)),
        top_talents=tuple(top_talents),
        top_talents_summary=tuple(summary[:TALENT_SUMMARY_SIZE]),
        common_patterns=tuple(common_patterns),
        talent_patterns=tuple(talent_patterns),
        **averages,
    )


def confidence_level(sample_size: int) -> str:
    """Label how far a cohort of this size can be trusted for reporting."""
    if sample_size >= CONFIDENCE_HIGH:
        return "high"
    if sample_size >= CONFIDENCE_MEDIUM:
        return "medium"
    return "low"


class _ProfileLike(Protocol):
    sample_size: int
    top_competencies: Sequence[CompetencyRanking]
    top_talents_summary: Sequence[TalentRanking]
    common_patterns: Sequence[CompetencyPattern]


def generate_insights(profile: _ProfileLike) -> list[str]:
    """Summarise what sets a cohort apart as compact insight tokens.

    Tokens are "top_competency:<key>:<diff>", "pattern:<a>+<b>:<frequency>"
    and "talent:<key>:<avg>"; the UI translates them.
    """
    insights: list[str] = []
    if profile.sample_size < MIN_SAMPLE_SIZE:
        return insights

    if profile.top_competencies:
        top = profile.top_competencies[0]
        if top.diff_from_avg > INSIGHT_MIN_DIFF:
            insights.append(f"top_competency:{top.key}:{top.diff_from_avg:.1f}")

    if profile.common_patterns:
        pattern = profile.common_patterns[0]
        if pattern.frequency >= INSIGHT_MIN_PATTERN_FREQUENCY:
            insights.append(
                f"pattern:{'+'.join(pattern.competencies)}:{pattern.frequency}"
            )

    if profile.top_talents_summary:
        talent = profile.top_talents_summary[0]
        if talent.avg_score > INSIGHT_MIN_TALENT_SCORE:
            insights.append(f"talent:{talent.key}:{talent.avg_score:.1f}")

    return insights
