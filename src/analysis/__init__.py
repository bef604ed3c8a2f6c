"""
Analysis module for majority vote computations.

This module provides the Boyer-Moore majority vote engine and its verifier:
- find_candidate / find_candidate_from_iterator / find_candidate_from_chunks:
  single-pass candidate selection (unverified)
- verify / verify_from_iterator: majority confirmation for a candidate
- find_and_verify / find_and_verify_from_iterator: the composed entry points
  callers should use when a true majority is required

Runs are configured with an immutable VoteContext built via VoteContext.builder().
"""

from .boyer_moore import (
    VoteState,
    find_candidate,
    find_candidate_from_chunks,
    find_candidate_from_iterator,
)
from .context import VoteContext, VoteContextBuilder
from .verification import (
    find_and_verify,
    find_and_verify_from_iterator,
    majority_threshold,
    verify,
    verify_from_iterator,
)

__all__ = [
    "find_candidate",
    "find_candidate_from_iterator",
    "find_candidate_from_chunks",
    "verify",
    "verify_from_iterator",
    "find_and_verify",
    "find_and_verify_from_iterator",
    "majority_threshold",
    "VoteContext",
    "VoteContextBuilder",
    "VoteState",
]
