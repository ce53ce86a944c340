"""Top performer recalculation engine.

One run is a finite batch job for a single benchmark:

1. Population baselines, computed once and shared read-only.
2. Per outcome, on a bounded thread pool: P90 threshold, streamed cohort
   aggregation, pattern mining, profile assembly.
3. One atomic replace of the benchmark's stored profiles.

Outcomes that are ineligible or whose cohort is too small produce no profile.
If any pipeline fails, or the job is cancelled or times out, the remaining
work stops before its next query and nothing is written. The time budget
covers the whole job, baselines included.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Mapping, Optional

from talentscope.benchmarks.aggregator import DEFAULT_PAGE_SIZE, aggregate_top_performers
from talentscope.benchmarks.datasource import BenchmarkDataSource
from talentscope.benchmarks.profiles import assemble_profile
from talentscope.benchmarks.schemas import TopPerformerProfile
from talentscope.benchmarks.store import ProfileStore
from talentscope.benchmarks.taxonomy import OUTCOMES, Outcome, ScoredAttribute
from talentscope.benchmarks.thresholds import (
    compute_baseline_averages,
    compute_percentile_threshold,
)
from talentscope.exceptions import EngineCancelledError

logger = logging.getLogger(__name__)


class TopPerformerEngine:
    """Recomputes every outcome's top performer profile for a benchmark."""

    def __init__(
        self,
        source: BenchmarkDataSource,
        store: ProfileStore,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_workers: int = 4,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.source = source
        self.store = store
        self.page_size = page_size
        self.max_workers = max_workers
        self.timeout_seconds = timeout_seconds

    def profile_outcome(
        self,
        benchmark_id: int,
        outcome: Outcome,
        baseline: Mapping[ScoredAttribute, float],
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[TopPerformerProfile]:
        """Run threshold -> aggregation -> mining -> assembly for one outcome."""
        threshold = compute_percentile_threshold(
            self.source, benchmark_id, outcome, cancel_event
        )
        if threshold is None:
            return None

        aggregate = aggregate_top_performers(
            self.source,
            benchmark_id,
            outcome,
            threshold,
            page_size=self.page_size,
            cancel_event=cancel_event,
        )
        return assemble_profile(aggregate, baseline)

    def run(
        self,
        benchmark_id: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """Recompute and store all profiles for a benchmark.

        Args:
            benchmark_id: Benchmark to recalculate.
            cancel_event: Optional event the caller sets to abort the job. The
                engine also sets it when timeout_seconds elapse, which is
                measured from the start of the baseline queries.

        Returns:
            Number of profiles written.

        Raises:
            DataAccessError: A read failed; nothing was written.
            EngineCancelledError: Cancelled or timed out; nothing was written.
            ProfileWriteError: The final replace failed.
        """
        started = time.monotonic()
        cancel_event = cancel_event or threading.Event()
        expired = threading.Event()
        timer = self._start_timer(cancel_event, expired)

        try:
            baseline = compute_baseline_averages(self.source, benchmark_id, cancel_event)
            profiles = self._profile_all_outcomes(benchmark_id, baseline, cancel_event)
        except EngineCancelledError as e:
            if expired.is_set():
                raise self._timeout_error(benchmark_id) from e
            raise
        finally:
            if timer is not None:
                timer.cancel()

        if expired.is_set():
            raise self._timeout_error(benchmark_id)
        if cancel_event.is_set():
            raise EngineCancelledError(
                detail=f"Recalculation of benchmark {benchmark_id} was aborted by the caller",
            )

        self.store.replace_profiles(benchmark_id, profiles)

        logger.info(
            "Top performers recalculated for benchmark %d: %d of %d outcomes in %.1fs",
            benchmark_id, len(profiles), len(OUTCOMES), time.monotonic() - started,
        )
        return len(profiles)

    def _start_timer(
        self, cancel_event: threading.Event, expired: threading.Event
    ) -> Optional[threading.Timer]:
        """Set both events once timeout_seconds have elapsed."""
        if self.timeout_seconds is None:
            return None

        def expire() -> None:
            expired.set()
            cancel_event.set()

        timer = threading.Timer(self.timeout_seconds, expire)
        timer.daemon = True
        timer.start()
        return timer

    def _timeout_error(self, benchmark_id: int) -> EngineCancelledError:
        return EngineCancelledError(
            message="Top performer recalculation timed out",
            detail=f"Benchmark {benchmark_id} exceeded {self.timeout_seconds}s",
        )

    def _profile_all_outcomes(
        self,
        benchmark_id: int,
        baseline: Mapping[ScoredAttribute, float],
        cancel_event: threading.Event,
    ) -> list[TopPerformerProfile]:
        pool = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="top-performers"
        )
        try:
            futures: dict[Outcome, Future] = {
                outcome: pool.submit(
                    self.profile_outcome, benchmark_id, outcome, baseline, cancel_event
                )
                for outcome in OUTCOMES
            }
            done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)

            if pending:
                # FIRST_EXCEPTION only returns early when a pipeline failed
                cancel_event.set()
                raise next(f.exception() for f in done if f.exception() is not None)

            # Declaration order keeps the stored set identical across reruns
            return [
                profile
                for profile in (futures[outcome].result() for outcome in OUTCOMES)
                if profile is not None
            ]
        finally:
            pool.shutdown(wait=True, cancel_futures=True)
