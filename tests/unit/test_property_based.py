"""
Property-based tests for the vote engine and verifier.

Properties:
- A value occupying more than half of the positions is always returned.
- Without such a value, find_and_verify returns None.
- find_and_verify agrees across permutations of the same multiset.
- Array, iterator and chunked sources agree for the same order.
- Early termination and stream processing never change an answer or a count
  that they are not meant to change.
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from analysis import (
    VoteContext,
    find_and_verify,
    find_candidate,
    find_candidate_from_chunks,
    find_candidate_from_iterator,
    verify,
)
from conftest import reference_majority
from metrics.collector import MetricsCollector

small_values = st.integers(min_value=-5, max_value=5)
any_ints = st.integers(min_value=-(2**70), max_value=2**70)
sequences = st.lists(small_values, max_size=200)


@st.composite
def sequences_with_majority(draw):
    """A shuffled sequence in which one value fills more than half the positions."""
    majority = draw(any_ints)
    others = draw(st.lists(any_ints.filter(lambda v: v != majority), max_size=100))
    extra = draw(st.integers(min_value=1, max_value=20))
    values = [majority] * (len(others) + extra) + others
    return majority, draw(st.permutations(values))


@pytest.mark.property
class TestMajorityProperties:
    @given(sequences_with_majority())
    @settings(max_examples=200)
    def test_majority_always_found(self, case):
        majority, values = case
        assert find_candidate(values) == majority
        assert find_and_verify(values) == majority

    @given(sequences)
    @settings(max_examples=200)
    def test_no_majority_returns_none(self, values):
        assume(reference_majority(values) is None)
        assert find_and_verify(values) is None

    @given(sequences, st.randoms(use_true_random=False))
    @settings(max_examples=100)
    def test_permutation_invariance(self, values, rnd):
        permuted = list(values)
        rnd.shuffle(permuted)
        assert find_and_verify(permuted) == find_and_verify(values)

    @given(sequences)
    @settings(max_examples=200)
    def test_matches_reference(self, values):
        assert find_and_verify(values) == reference_majority(values)


@pytest.mark.property
class TestSourceConsistency:
    @given(sequences)
    @settings(max_examples=200)
    def test_array_and_iterator_agree(self, values):
        assert find_candidate(values) == find_candidate_from_iterator(iter(values))

    @given(sequences, st.integers(min_value=1, max_value=50))
    @settings(max_examples=200)
    def test_array_and_chunks_agree(self, values, size):
        chunks = [values[i : i + size] for i in range(0, len(values), size)]
        assert find_candidate(values) == find_candidate_from_chunks(chunks)


@pytest.mark.property
class TestOptimisationInvariance:
    @given(sequences, small_values)
    @settings(max_examples=200)
    def test_early_termination_never_changes_verify(self, values, candidate):
        early = VoteContext.builder().enable_early_termination().build()
        early_stream = (
            VoteContext.builder().enable_early_termination().enable_stream_processing().build()
        )
        expected = verify(values, candidate)
        assert verify(values, candidate, early) == expected
        assert verify(values, candidate, early_stream) == expected

    @given(sequences)
    @settings(max_examples=200)
    def test_stream_processing_matches_bulk_counts(self, values):
        bulk = MetricsCollector()
        stream = MetricsCollector()

        bulk_result = find_candidate(values, VoteContext.builder().with_metrics(bulk).build())
        stream_result = find_candidate(
            values,
            VoteContext.builder().with_metrics(stream).enable_stream_processing().build(),
        )

        assert bulk_result == stream_result
        assert bulk.comparisons == stream.comparisons == max(len(values) - 1, 0)
        assert bulk.candidate_changes == stream.candidate_changes

    @given(sequences, small_values)
    @settings(max_examples=200)
    def test_verification_visits_match_between_paths(self, values, candidate):
        bulk = MetricsCollector()
        stream = MetricsCollector()

        verify(
            values,
            candidate,
            VoteContext.builder().with_metrics(bulk).enable_early_termination().build(),
        )
        verify(
            values,
            candidate,
            VoteContext.builder()
            .with_metrics(stream)
            .enable_early_termination()
            .enable_stream_processing()
            .build(),
        )

        assert bulk.comparisons == stream.comparisons <= len(values)
