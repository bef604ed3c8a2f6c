"""
Instrumentation for majority vote runs.
"""

from .collector import MetricsCollector, timed_run

__all__ = [
    "MetricsCollector",
    "timed_run",
]
