"""Independent validation of a solved grid against its puzzle lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from .model import (
    MARKED_PER_COLUMN,
    MAX_FLAGGED_MARKED_PER_COLUMN,
    MIN_FLAGGED_PER_COLUMN,
    NUM_COLS,
    NUM_ROWS,
)
from src.utils.logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str] = field(default_factory=list)


def validate_solution(lines: Sequence[str], solution: Sequence[Sequence[str]]) -> ValidationResult:
    """
    Check that every solution row is a permutation of its puzzle line and that
    every column holds exactly 4 marked, at least 4 flagged and at most 1 BX.
    Collects every violation instead of stopping at the first one.
    """
    messages: List[str] = []

    if len(lines) != NUM_ROWS or len(solution) != NUM_ROWS:
        messages.append(
            f"Expected {NUM_ROWS} puzzle lines and solution rows, got {len(lines)} and {len(solution)}."
        )
    else:
        for i, (line, row) in enumerate(zip(lines, solution)):
            if len(row) != NUM_COLS:
                messages.append(f"Row {i} has {len(row)} words (needs {NUM_COLS}).")
            elif sorted(line.split()) != sorted(row):
                messages.append(f"Row {i} is not a permutation of its original words.")

    if not messages:
        for j in range(NUM_COLS):
            column = [row[j] for row in solution]
            marked = sum(1 for w in column if w in ("AX", "BX"))
            flagged = sum(1 for w in column if w in ("B", "BX"))
            double = sum(1 for w in column if w == "BX")
            if marked != MARKED_PER_COLUMN:
                messages.append(f"Column {j} has {marked} X's (needs exactly {MARKED_PER_COLUMN}).")
            if flagged < MIN_FLAGGED_PER_COLUMN:
                messages.append(f"Column {j} has {flagged} B's (needs >={MIN_FLAGGED_PER_COLUMN}).")
            if double > MAX_FLAGGED_MARKED_PER_COLUMN:
                messages.append(
                    f"Column {j} has {double} BX (needs <={MAX_FLAGGED_MARKED_PER_COLUMN})."
                )

    for message in messages:
        LOGGER.warning("Validation failed: %s", message)
    return ValidationResult(ok=not messages, messages=messages)
