"""Exception hierarchy for grid parsing and search."""

from typing import Any, Optional


class XGridError(Exception):
    """Base exception for puzzle failures."""


class MalformedInput(XGridError, ValueError):
    """Raised when a puzzle instance does not have the expected shape or labels."""

    def __init__(self, message: str, row: Optional[int] = None, word: Optional[str] = None):
        super().__init__(message)
        self.row = row
        self.word = word


class NoSolution(XGridError):
    """Raised when no placement satisfies every column constraint."""

    def __init__(self, message: str, stats: Optional[Any] = None):
        super().__init__(message)
        self.stats = stats


class SearchBudgetExceeded(NoSolution):
    """Raised when a caller-imposed node or time budget runs out mid-search."""
