"""Percentile thresholds and population baselines.

The P90 cutoff is the score at ascending rank floor(0.9 * n) among the
non-null scores for an outcome, computed with integer arithmetic so the rank
never drifts on float rounding. Outcomes with fewer than MIN_SAMPLE_SIZE
answers are ineligible.

Baselines are plain means over the whole benchmark, not the top performer
cohort, and are computed once per recalculation.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from talentscope.benchmarks.datasource import BenchmarkDataSource
from talentscope.benchmarks.taxonomy import SCORED_ATTRIBUTES, Outcome, ScoredAttribute
from talentscope.exceptions import EngineCancelledError

logger = logging.getLogger(__name__)

PERCENTILE_THRESHOLD = 90
MIN_SAMPLE_SIZE = 30


def raise_if_cancelled(cancel_event: Optional[threading.Event], detail: str) -> None:
    """Raise EngineCancelledError once the job's cancel event is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise EngineCancelledError(detail=detail)


def percentile_rank(count: int, percentile: int = PERCENTILE_THRESHOLD) -> int:
    """Return the 0-indexed ascending rank of the percentile cutoff.

    Equivalent to floor(count * percentile / 100).
    """
    return count * percentile // 100


def compute_percentile_threshold(
    source: BenchmarkDataSource,
    benchmark_id: int,
    outcome: Outcome,
    cancel_event: Optional[threading.Event] = None,
) -> Optional[float]:
    """Compute the P90 cutoff for one outcome.

    Args:
        source: Benchmark data source.
        benchmark_id: Benchmark to analyse.
        outcome: Outcome metric to threshold.
        cancel_event: Checked before each query.

    Returns:
        The threshold score, or None when the outcome is ineligible (fewer
        than MIN_SAMPLE_SIZE non-null scores).
    """
    raise_if_cancelled(cancel_event, f"Stopped before counting {outcome.value} answers")
    count = source.count_non_null(benchmark_id, outcome)
    if count < MIN_SAMPLE_SIZE:
        logger.info(
            "Skipping %s for benchmark %d: only %d answers (need %d)",
            outcome.value, benchmark_id, count, MIN_SAMPLE_SIZE,
        )
        return None

    rank = percentile_rank(count)
    raise_if_cancelled(cancel_event, f"Stopped before the {outcome.value} rank lookup")
    threshold = source.value_at_ascending_rank(benchmark_id, outcome, rank)
    if threshold is None:
        logger.info(
            "Skipping %s for benchmark %d: no score at rank %d",
            outcome.value, benchmark_id, rank,
        )
        return None

    logger.info(
        "P%d threshold for %s: %.2f (n=%d)",
        PERCENTILE_THRESHOLD, outcome.value, threshold, count,
    )
    return threshold


def compute_baseline_averages(
    source: BenchmarkDataSource,
    benchmark_id: int,
    cancel_event: Optional[threading.Event] = None,
) -> dict[ScoredAttribute, float]:
    """Compute the population mean of every competency and talent.

    Attributes nobody answered get a baseline of 0.0. The cancel event is
    checked before each of the per-attribute queries.
    """
    baseline: dict[ScoredAttribute, float] = {}
    for attribute in SCORED_ATTRIBUTES:
        raise_if_cancelled(
            cancel_event,
            f"Stopped computing baselines for benchmark {benchmark_id} at {attribute.value}",
        )
        mean = source.mean_non_null(benchmark_id, attribute)
        baseline[attribute] = mean if mean is not None else 0.0

    logger.info(
        "Computed %d baseline averages for benchmark %d",
        len(baseline), benchmark_id,
    )
    return baseline
