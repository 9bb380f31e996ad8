"""Random solvable puzzle generator with a controllable flagged-marked column count.

A solution grid is planted first and each row is shuffled afterwards, so every
generated puzzle is solvable by construction:

- each row holds exactly one marked word (AX or BX)
- each column holds exactly 4 marked words
- exactly ``bx_count`` columns hold one BX, the others none
- each column holds 4 or 5 flagged words, so the puzzle total is 16..20
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple, Union

from .model import MARKED_PER_COLUMN, MIN_FLAGGED_PER_COLUMN, NUM_COLS, NUM_ROWS, Grid, Word
from src.utils.logging_utils import get_logger

LOGGER = get_logger(__name__)

BXCount = Union[int, str]


def _resolve_bx_count(rng: random.Random, bx_count: BXCount) -> int:
    if bx_count == "random":
        return rng.randint(0, NUM_COLS)
    if isinstance(bx_count, bool) or not isinstance(bx_count, int) or not 0 <= bx_count <= NUM_COLS:
        raise ValueError(f"bx_count must be an integer in 0..{NUM_COLS} or 'random', got {bx_count!r}")
    return bx_count


def generate_planted(
    seed: Optional[int] = None, bx_count: BXCount = "random"
) -> Tuple[List[str], Grid]:
    """Return (puzzle lines, planted solution grid)."""
    rng = random.Random(seed)
    solution: Grid = [[""] * NUM_COLS for _ in range(NUM_ROWS)]

    flagged_needed = [
        MIN_FLAGGED_PER_COLUMN + (1 if rng.random() < 0.5 else 0) for _ in range(NUM_COLS)
    ]

    rows = list(range(NUM_ROWS))
    rng.shuffle(rows)
    marked_rows_by_col = [
        rows[c * MARKED_PER_COLUMN:(c + 1) * MARKED_PER_COLUMN] for c in range(NUM_COLS)
    ]

    double_columns = set(rng.sample(range(NUM_COLS), _resolve_bx_count(rng, bx_count)))
    for c, marked_rows in enumerate(marked_rows_by_col):
        bx_row = rng.choice(marked_rows) if c in double_columns else None
        for r in marked_rows:
            solution[r][c] = Word.FLAGGED_MARKED.value if r == bx_row else Word.MARKED.value

    for c in range(NUM_COLS):
        already = sum(1 for r in range(NUM_ROWS) if solution[r][c] == Word.FLAGGED_MARKED.value)
        open_rows = [r for r in range(NUM_ROWS) if not solution[r][c]]
        flagged_rows = set(rng.sample(open_rows, flagged_needed[c] - already))
        for r in open_rows:
            solution[r][c] = Word.FLAGGED.value if r in flagged_rows else Word.PLAIN.value

    lines = []
    for row in solution:
        shuffled = list(row)
        rng.shuffle(shuffled)
        lines.append(" ".join(shuffled))

    LOGGER.debug(
        "Generated puzzle (seed=%s, bx columns=%d, flagged=%d)",
        seed,
        len(double_columns),
        sum(flagged_needed),
    )
    return lines, solution


def generate_puzzle(seed: Optional[int] = None, bx_count: BXCount = "random") -> List[str]:
    """Generate 16 puzzle lines that are guaranteed to have a solution."""
    lines, _ = generate_planted(seed=seed, bx_count=bx_count)
    return lines
