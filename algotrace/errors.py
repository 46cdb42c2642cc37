"""Error types raised at the generator and playback boundaries."""

from __future__ import annotations


class AlgoTraceError(Exception):
    """Base class for all algotrace errors."""


class InvalidInput(AlgoTraceError, ValueError):
    """User-supplied input was rejected before any step was recorded.

    ``row`` and ``column`` are 1-based and only set for grid text errors.
    """

    def __init__(self, message: str, row: int | None = None, column: int | None = None):
        super().__init__(message)
        self.row = row
        self.column = column


class ContractViolation(AlgoTraceError, AssertionError):
    """A programming error: empty trace bound, broken trace invariant, etc."""
