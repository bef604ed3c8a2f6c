"""
Run metrics for majority vote computations.

A MetricsCollector is owned by the caller and written to by the vote engine
and the verifier during a single run. It is not safe to share one collector
between runs executing concurrently.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger(__name__)


class MetricsCollector:
    """
    Collects comparison counts, candidate changes and wall-clock time
    for one algorithm run.

    Elapsed time reads as zero until both ends of the timer have been
    recorded.
    """

    def __init__(self):
        self._comparisons = 0
        self._candidate_changes = 0
        self._start_ns: Optional[int] = None
        self._end_ns: Optional[int] = None

    def start_timer(self):
        self._start_ns = time.perf_counter_ns()
        self._end_ns = None

    def stop_timer(self):
        self._end_ns = time.perf_counter_ns()

    def increment_comparisons(self, amount: int = 1):
        self._comparisons += amount

    def increment_candidate_changes(self, amount: int = 1):
        self._candidate_changes += amount

    def reset(self):
        """Zero all counters and forget both timestamps."""
        self._comparisons = 0
        self._candidate_changes = 0
        self._start_ns = None
        self._end_ns = None

    @property
    def comparisons(self) -> int:
        return self._comparisons

    @property
    def candidate_changes(self) -> int:
        return self._candidate_changes

    @property
    def timer_running(self) -> bool:
        return self._start_ns is not None and self._end_ns is None

    @property
    def execution_time_nanos(self) -> int:
        if self._start_ns is None or self._end_ns is None:
            return 0
        return self._end_ns - self._start_ns

    @property
    def execution_time_millis(self) -> float:
        return self.execution_time_nanos / 1_000_000.0

    def to_dict(self) -> Dict[str, Any]:
        """
        Export the collected metrics as a flat record.

        Returns:
            Dictionary suitable for a pandas DataFrame row
        """
        return {
            "comparisons": self._comparisons,
            "candidate_changes": self._candidate_changes,
            "execution_time_ms": round(self.execution_time_millis, 3),
        }

    def __str__(self) -> str:
        return (
            "Metrics:\n"
            f"  Comparisons: {self._comparisons}\n"
            f"  Candidate Changes: {self._candidate_changes}\n"
            f"  Execution Time: {self.execution_time_millis:.3f} ms"
        )


@contextmanager
def timed_run(metrics: Optional[MetricsCollector], name: str = "run") -> Iterator[None]:
    """
    Time a block against an optional collector.

    The timer is stopped on every exit path, including exceptions.
    """
    if metrics is None:
        yield
        return

    metrics.start_timer()
    try:
        yield
    finally:
        metrics.stop_timer()
        logger.debug(f"[TIMER] {name}: {metrics.execution_time_millis:.3f} ms")
