"""Attribute taxonomy for Six Seconds style benchmark records.

Competencies, talents and outcomes are typed enumerations. Declaration order
is significant: it is the stable tie-break when ranking a record's scores and
the display order of talents (Focus, then Decisions, then Drive).
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Competency(str, Enum):
    """Emotional intelligence competencies.

    K, C and G are the macro domains (know / choose / give yourself). They are
    averaged but never ranked or mined for patterns.
    """

    K = "K"
    C = "C"
    G = "G"
    EL = "EL"  # Enhance Emotional Literacy
    RP = "RP"  # Recognize Patterns
    ACT = "ACT"  # Apply Consequential Thinking
    NE = "NE"  # Navigate Emotions
    IM = "IM"  # Engage Intrinsic Motivation
    OP = "OP"  # Exercise Optimism
    EMP = "EMP"  # Increase Empathy
    NG = "NG"  # Pursue Noble Goals

    @property
    def is_macro(self) -> bool:
        return self in _MACRO

    @property
    def column(self) -> str:
        return self.value.lower()


class TalentCluster(str, Enum):
    """Brain talent clusters, in display order."""

    FOCUS = "focus"
    DECISIONS = "decisions"
    DRIVE = "drive"


class Talent(str, Enum):
    """The 18 brain talents, grouped six per cluster."""

    # Focus
    DATA_MINING = "data_mining"
    MODELING = "modeling"
    PRIORITIZING = "prioritizing"
    CONNECTION = "connection"
    EMOTIONAL_INSIGHT = "emotional_insight"
    COLLABORATION = "collaboration"
    # Decisions
    REFLECTING = "reflecting"
    ADAPTABILITY = "adaptability"
    CRITICAL_THINKING = "critical_thinking"
    RESILIENCE = "resilience"
    RISK_TOLERANCE = "risk_tolerance"
    IMAGINATION = "imagination"
    # Drive
    PROACTIVITY = "proactivity"
    COMMITMENT = "commitment"
    PROBLEM_SOLVING = "problem_solving"
    VISION = "vision"
    DESIGNING = "designing"
    ENTREPRENEURSHIP = "entrepreneurship"

    @property
    def cluster(self) -> TalentCluster:
        return _TALENT_CLUSTERS[self]

    @property
    def column(self) -> str:
        return self.value


class Outcome(str, Enum):
    """Life and work outcome metrics, each thresholded independently."""

    EFFECTIVENESS = "effectiveness"
    RELATIONSHIPS = "relationships"
    QUALITY_OF_LIFE = "quality_of_life"
    WELLBEING = "wellbeing"
    INFLUENCE = "influence"
    DECISION_MAKING = "decision_making"
    COMMUNITY = "community"
    NETWORK = "network"
    ACHIEVEMENT = "achievement"
    SATISFACTION = "satisfaction"
    BALANCE = "balance"
    HEALTH = "health"

    @property
    def column(self) -> str:
        return self.value


_MACRO = frozenset({Competency.K, Competency.C, Competency.G})

_TALENT_CLUSTERS: dict[Talent, TalentCluster] = {
    talent: cluster
    for cluster, members in (
        (TalentCluster.FOCUS, list(Talent)[0:6]),
        (TalentCluster.DECISIONS, list(Talent)[6:12]),
        (TalentCluster.DRIVE, list(Talent)[12:18]),
    )
    for talent in members
}

ALL_COMPETENCIES: tuple[Competency, ...] = tuple(Competency)
MACRO_COMPETENCIES: tuple[Competency, ...] = tuple(c for c in Competency if c.is_macro)
CORE_COMPETENCIES: tuple[Competency, ...] = tuple(c for c in Competency if not c.is_macro)
TALENTS: tuple[Talent, ...] = tuple(Talent)
OUTCOMES: tuple[Outcome, ...] = tuple(Outcome)

# Attributes that get a baseline and a cohort average (outcomes excluded)
ScoredAttribute = Union[Competency, Talent]
SCORED_ATTRIBUTES: tuple[ScoredAttribute, ...] = ALL_COMPETENCIES + TALENTS

Attribute = Union[Competency, Talent, Outcome]


def talents_in_cluster(cluster: TalentCluster) -> tuple[Talent, ...]:
    """Return the talents of one cluster in declaration order."""
    return tuple(t for t in TALENTS if t.cluster is cluster)
