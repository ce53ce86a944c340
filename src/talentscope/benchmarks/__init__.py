"""Benchmark datasets and the top performer profiling engine."""

from talentscope.benchmarks.recompute import TopPerformerEngine
from talentscope.benchmarks.schemas import TopPerformerProfile
from talentscope.benchmarks.taxonomy import Competency, Outcome, Talent, TalentCluster

__all__ = [
    "Competency",
    "Outcome",
    "Talent",
    "TalentCluster",
    "TopPerformerEngine",
    "TopPerformerProfile",
]
