"""
Shared pytest configuration and fixtures for majority-vote-analyzer.

This module provides common test fixtures and utilities used across
all test modules.
"""

import random
import sys
from collections import Counter
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analysis.context import VoteContext  # noqa: E402
from metrics.collector import MetricsCollector  # noqa: E402

INT_MAX = 2**31 - 1
INT_MIN = -(2**31)


def reference_majority(values):
    """Majority by full frequency count, used to cross-check the vote engine."""
    if not values:
        return None
    value, count = Counter(values).most_common(1)[0]
    return value if count > len(values) // 2 else None


def shuffled(values, seed=0):
    copy = list(values)
    random.Random(seed).shuffle(copy)
    return copy


@pytest.fixture
def metrics():
    """Provide a fresh metrics collector."""
    return MetricsCollector()


@pytest.fixture
def metrics_context(metrics):
    """Provide a context that records into the metrics fixture."""
    return VoteContext.builder().with_metrics(metrics).build()


@pytest.fixture
def all_contexts():
    """Provide one context per combination of optimisation flags, each with its own collector."""

    def build(stream, early):
        builder = VoteContext.builder().with_metrics(MetricsCollector())
        if stream:
            builder.enable_stream_processing()
        if early:
            builder.enable_early_termination()
        return builder.build()

    return [build(stream, early) for stream in (False, True) for early in (False, True)]


@pytest.fixture
def majority_sequence():
    """Provide a shuffled sequence of 1001 values where 100 is the majority."""
    values = [100] * 501 + list(range(1000, 1500))
    return shuffled(values, seed=42)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (end-to-end workflows)",
    )
    config.addinivalue_line(
        "markers",
        "golden: marks tests as golden dataset validation (hand-computed results)",
    )
    config.addinivalue_line(
        "markers", "invariant: marks tests as mathematical invariant validation"
    )
    config.addinivalue_line(
        "markers", "smoke: marks tests as smoke tests (basic functionality check)"
    )
    config.addinivalue_line(
        "markers", "performance: marks tests as performance and scaling checks (slow)"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based (hypothesis)"
    )
