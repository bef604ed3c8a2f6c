"""
Run configuration for the majority vote engine and verifier.

A VoteContext is immutable once built. Passing ``None`` wherever a context is
accepted is the same as passing ``VoteContext()``.
"""

from dataclasses import dataclass
from typing import Optional

from metrics.collector import MetricsCollector


@dataclass(frozen=True)
class VoteContext:
    """Options controlling instrumentation and optimisations for one run."""

    metrics: Optional[MetricsCollector] = None
    early_termination: bool = False
    stream_processing: bool = False

    @staticmethod
    def builder() -> "VoteContextBuilder":
        return VoteContextBuilder()

    @property
    def is_default(self) -> bool:
        return (
            self.metrics is None
            and not self.early_termination
            and not self.stream_processing
        )


class VoteContextBuilder:
    """
    Fluent builder for VoteContext.

    Example:
        context = (
            VoteContext.builder()
            .with_metrics(MetricsCollector())
            .enable_early_termination()
            .build()
        )
    """

    def __init__(self):
        self._metrics: Optional[MetricsCollector] = None
        self._early_termination = False
        self._stream_processing = False

    def with_metrics(self, metrics: MetricsCollector) -> "VoteContextBuilder":
        self._metrics = metrics
        return self

    def enable_early_termination(self) -> "VoteContextBuilder":
        self._early_termination = True
        return self

    def enable_stream_processing(self) -> "VoteContextBuilder":
        self._stream_processing = True
        return self

    def build(self) -> VoteContext:
        return VoteContext(
            metrics=self._metrics,
            early_termination=self._early_termination,
            stream_processing=self._stream_processing,
        )


DEFAULT_CONTEXT = VoteContext()


def resolve_context(context: Optional[VoteContext]) -> VoteContext:
    """Substitute the default context for ``None``."""
    return DEFAULT_CONTEXT if context is None else context
