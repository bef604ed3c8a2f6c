"""
Boyer-Moore majority vote.

Selects, in one pass and constant space, the only element that can possibly be
the majority of a sequence. The selected candidate is only a majority claim
after verification: for a sequence without a true majority the engine still
returns one of its elements, and that value carries no meaning on its own.
"""

import itertools
import logging
import operator
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from metrics.collector import MetricsCollector, timed_run

from .context import VoteContext, resolve_context

logger = logging.getLogger(__name__)


def as_vote_value(value: Any) -> int:
    """
    Validate one sequence element and normalise it to a plain int.

    Args:
        value: Element pulled from a sequence, iterator or chunk

    Returns:
        The element as an int (NumPy integer scalars included)

    Raises:
        ValueError: If the element is None
        TypeError: If the element is not an integer
    """
    if value is None:
        raise ValueError("Sequence elements must not be None")
    return operator.index(value)


def materialize(sequence: Any) -> List[int]:
    """
    Convert an array source into a list of plain ints in one bulk step.

    Integer NumPy arrays (and anything exposing a dtype, such as a pandas
    Series) are converted without per-element checks; other sources are
    validated element by element.
    """
    if hasattr(sequence, "dtype"):
        array = np.asarray(sequence)
        if array.ndim != 1:
            raise ValueError(f"Expected a one-dimensional sequence, got {array.ndim} dimensions")
        if array.dtype.kind in "iu":
            return array.tolist()
        sequence = array.tolist()
    return [as_vote_value(value) for value in sequence]


@dataclass
class VoteState:
    """Running Boyer-Moore state: the current candidate and its counter."""

    candidate: Optional[int] = None
    count: int = 0
    seen: int = 0

    def observe(self, value: int) -> bool:
        """
        Fold one value into the vote.

        Returns:
            True when the value replaced the candidate after the counter
            dropped to zero. Taking the very first element is not a change.
        """
        self.seen += 1
        if self.seen == 1:
            self.candidate = value
            self.count = 1
            return False

        if self.count == 0:
            self.candidate = value
            self.count = 1
            return True

        if value == self.candidate:
            self.count += 1
        else:
            self.count -= 1
        return False

    @property
    def comparisons(self) -> int:
        # every element after the first is compared against the candidate
        return max(self.seen - 1, 0)


def _observe_stream(
    state: VoteState, values: Iterator[Any], metrics: Optional[MetricsCollector]
):
    """Pull elements lazily, validating and recording each one as it arrives."""
    for raw in values:
        value = as_vote_value(raw)
        changed = state.observe(value)
        if metrics is not None and state.seen > 1:
            metrics.increment_comparisons()
            if changed:
                metrics.increment_candidate_changes()


def _observe_bulk(
    state: VoteState, values: List[int], metrics: Optional[MetricsCollector]
):
    """Run the vote over already materialised values, recording metrics once."""
    if not values:
        return

    candidate, count = state.candidate, state.count
    start = 0
    if state.seen == 0:
        candidate, count, start = values[0], 1, 1

    changes = 0
    for value in itertools.islice(values, start, None):
        if count == 0:
            candidate = value
            count = 1
            changes += 1
        elif value == candidate:
            count += 1
        else:
            count -= 1

    state.candidate = candidate
    state.count = count
    state.seen += len(values)

    if metrics is not None:
        metrics.increment_comparisons(len(values) - start)
        if changes:
            metrics.increment_candidate_changes(changes)


def select_candidate(
    sequence: Optional[Sequence[int]], context: VoteContext
) -> Optional[int]:
    """Candidate selection over an array source, without touching the timer."""
    if sequence is None or len(sequence) == 0:
        return None

    state = VoteState()
    if context.stream_processing:
        _observe_stream(state, iter(sequence), context.metrics)
    else:
        _observe_bulk(state, materialize(sequence), context.metrics)

    logger.debug(
        f"Vote over {state.seen} elements selected candidate {state.candidate} "
        f"(counter {state.count})"
    )
    return state.candidate


def find_candidate(
    sequence: Optional[Sequence[int]], context: Optional[VoteContext] = None
) -> Optional[int]:
    """
    Find the majority candidate of an array source.

    Args:
        sequence: Random-access sequence of integers (list, tuple, NumPy array)
        context: Optional run configuration; None means defaults

    Returns:
        The candidate, or None for a None or empty sequence. The candidate is
        the majority if one exists; otherwise it is an arbitrary element and
        must be verified before use.
    """
    context = resolve_context(context)
    with timed_run(context.metrics, "find_candidate"):
        return select_candidate(sequence, context)


def find_candidate_from_iterator(
    iterator: Optional[Iterable[int]], context: Optional[VoteContext] = None
) -> Optional[int]:
    """
    Find the majority candidate of a one-pass source.

    Elements are pulled one at a time regardless of the stream flag.

    Raises:
        ValueError: If the iterator is None or yields None
    """
    if iterator is None:
        raise ValueError("iterator must not be None")

    context = resolve_context(context)
    with timed_run(context.metrics, "find_candidate_from_iterator"):
        state = VoteState()
        _observe_stream(state, iter(iterator), context.metrics)
        return state.candidate


def find_candidate_from_chunks(
    chunks: Optional[Iterable[Sequence[int]]], context: Optional[VoteContext] = None
) -> Optional[int]:
    """
    Find the majority candidate of a source delivered in batches.

    The vote carries across chunk boundaries, so the result and the recorded
    metrics match a single pass over the concatenated chunks. Empty chunks
    are skipped.

    Raises:
        ValueError: If the chunk source or any chunk is None
    """
    if chunks is None:
        raise ValueError("chunk source must not be None")

    context = resolve_context(context)
    with timed_run(context.metrics, "find_candidate_from_chunks"):
        state = VoteState()
        for index, chunk in enumerate(chunks):
            if chunk is None:
                raise ValueError(f"Chunk {index} is None")
            if context.stream_processing:
                _observe_stream(state, iter(chunk), context.metrics)
            else:
                _observe_bulk(state, materialize(chunk), context.metrics)

        logger.debug(
            f"Chunked vote over {state.seen} elements selected candidate {state.candidate}"
        )
        return state.candidate
