"""
Majority verification.

Confirms that a Boyer-Moore candidate occurs in strictly more than half of the
positions of a sequence, and composes candidate selection with that check.
"""

import logging
from typing import Any, Iterable, Optional, Sequence, Tuple

import numpy as np

from metrics.collector import MetricsCollector, timed_run

from .boyer_moore import as_vote_value, materialize, select_candidate
from .context import VoteContext, resolve_context

logger = logging.getLogger(__name__)


def majority_threshold(length: int) -> int:
    """
    Occurrence count a value must exceed to be the majority.

    Args:
        length: Number of elements in the sequence

    Returns:
        floor(length / 2)
    """
    return length // 2


def _to_vote_array(sequence: Any) -> np.ndarray:
    """
    Convert an array source into a one-dimensional NumPy array of integers.

    Integer arrays are used as they are. Anything else is validated element by
    element first and then stored as int64, or as Python ints in an object
    array when a value does not fit in 64 bits. The dtype is never inferred,
    so large integers are never rounded through float64.
    """
    if hasattr(sequence, "dtype"):
        array = np.asarray(sequence)
        if array.ndim != 1:
            raise ValueError(f"Expected a one-dimensional sequence, got {array.ndim} dimensions")
        if array.dtype.kind in "iu":
            return array

    values = materialize(sequence)
    try:
        return np.array(values, dtype=np.int64)
    except OverflowError:
        return np.array(values, dtype=object)


def _match_mask(array: np.ndarray, candidate: int) -> np.ndarray:
    if array.dtype.kind in "iu":
        info = np.iinfo(array.dtype)
        if not info.min <= candidate <= info.max:
            return np.zeros(len(array), dtype=bool)
    return np.asarray(array == candidate, dtype=bool)


def _count_vectorized(
    sequence: Sequence[int], candidate: int, early_termination: bool
) -> Tuple[int, int]:
    """
    Count occurrences of the candidate with NumPy.

    Returns:
        Tuple of (occurrences, elements visited). With early termination the
        visited count is the position at which the running count first
        exceeded the threshold, exactly as a sequential scan would stop.
    """
    array = _to_vote_array(sequence)
    threshold = majority_threshold(len(array))
    matches = _match_mask(array, candidate)

    if not early_termination:
        return int(np.count_nonzero(matches)), len(array)

    running = np.cumsum(matches, dtype=np.int64)
    crossed = np.flatnonzero(running > threshold)
    if crossed.size:
        return int(running[crossed[0]]), int(crossed[0]) + 1
    return int(running[-1]), len(array)


def _count_streaming(
    sequence: Sequence[int],
    candidate: int,
    early_termination: bool,
    metrics: Optional[MetricsCollector],
) -> int:
    """
    Count occurrences element by element, stopping early when allowed.

    Elements past an early exit are not counted, but they are still validated
    so that invalid input fails the same way on every path.
    """
    threshold = majority_threshold(len(sequence))
    occurrences = 0
    values = iter(sequence)
    for raw in values:
        value = as_vote_value(raw)
        if metrics is not None:
            metrics.increment_comparisons()
        if value == candidate:
            occurrences += 1
            if early_termination and occurrences > threshold:
                break

    for raw in values:
        as_vote_value(raw)
    return occurrences


def check_majority(
    sequence: Optional[Sequence[int]], candidate: int, context: VoteContext
) -> bool:
    """Verification pass over an array source, without touching the timer."""
    if sequence is None or len(sequence) == 0:
        return False

    candidate = as_vote_value(candidate)
    threshold = majority_threshold(len(sequence))

    if context.stream_processing:
        occurrences = _count_streaming(
            sequence, candidate, context.early_termination, context.metrics
        )
    else:
        occurrences, visited = _count_vectorized(
            sequence, candidate, context.early_termination
        )
        if context.metrics is not None:
            context.metrics.increment_comparisons(visited)

    logger.debug(
        f"Candidate {candidate} occurs {occurrences} times, threshold {threshold}"
    )
    return occurrences > threshold


def verify(
    sequence: Optional[Sequence[int]],
    candidate: int,
    context: Optional[VoteContext] = None,
) -> bool:
    """
    Check whether a candidate is the majority element of a sequence.

    Args:
        sequence: Random-access sequence of integers
        candidate: Value to check
        context: Optional run configuration; early termination stops the scan
            once the count exceeds floor(len / 2)

    Returns:
        True iff the candidate occurs more than floor(len / 2) times. None or
        empty sequences give False.
    """
    context = resolve_context(context)
    with timed_run(context.metrics, "verify"):
        return check_majority(sequence, candidate, context)


def verify_from_iterator(
    iterator: Optional[Iterable[int]],
    candidate: int,
    context: Optional[VoteContext] = None,
) -> bool:
    """
    Check a candidate against a one-pass source.

    The length of the source is only known once it is exhausted, so every
    element is visited and the early termination flag has no effect.

    Raises:
        ValueError: If the iterator is None or yields None
    """
    if iterator is None:
        raise ValueError("iterator must not be None")

    context = resolve_context(context)
    metrics = context.metrics
    with timed_run(metrics, "verify_from_iterator"):
        candidate = as_vote_value(candidate)
        length = 0
        occurrences = 0
        for raw in iterator:
            value = as_vote_value(raw)
            length += 1
            if metrics is not None:
                metrics.increment_comparisons()
            if value == candidate:
                occurrences += 1

        return length > 0 and occurrences > majority_threshold(length)


def find_and_verify(
    sequence: Optional[Sequence[int]], context: Optional[VoteContext] = None
) -> Optional[int]:
    """
    Find the majority element of a sequence, if there is one.

    Runs candidate selection followed by verification. The timer spans both
    passes and the comparison count is their sum.

    Returns:
        The majority element, or None when no value occurs in more than half
        of the positions (including None and empty sequences).
    """
    context = resolve_context(context)
    with timed_run(context.metrics, "find_and_verify"):
        candidate = select_candidate(sequence, context)
        if candidate is None:
            return None

        if check_majority(sequence, candidate, context):
            return candidate

        logger.debug(f"Candidate {candidate} is not a majority")
        return None


def find_and_verify_from_iterator(
    iterator: Optional[Iterable[int]], context: Optional[VoteContext] = None
) -> Optional[int]:
    """
    Find the majority element of a one-pass source.

    Verification needs a second pass, so the source is buffered once; every
    element is validated as it is buffered.

    Raises:
        ValueError: If the iterator is None or yields None
    """
    if iterator is None:
        raise ValueError("iterator must not be None")

    context = resolve_context(context)
    with timed_run(context.metrics, "find_and_verify_from_iterator"):
        values = [as_vote_value(value) for value in iterator]
        candidate = select_candidate(values, context)
        if candidate is None:
            return None
        return candidate if check_majority(values, candidate, context) else None
