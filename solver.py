"""Top-level grid solve interface.

Expose `solve_puzzle(puzzle)` that accepts either a parsed `Puzzle` or any raw
puzzle source understood by `src.xgrid.parser.parse_puzzle` (16 lines, one text
block, or a loader record with a "lines" field).
"""

from typing import Optional

from src.xgrid import solver_core
from src.xgrid.model import Grid, Puzzle
from src.xgrid.parser import parse_puzzle


def solve_puzzle(puzzle, key_strategy: Optional[str] = None) -> Grid:
    """
    Solve a puzzle and return the 16x4 grid of labels.
    Raises MalformedInput for bad input and NoSolution when no grid exists.
    """
    if isinstance(puzzle, Puzzle):
        parsed = puzzle
    elif isinstance(puzzle, (str, list, tuple, dict)):
        parsed = parse_puzzle(puzzle)
    else:
        raise TypeError("solve_puzzle expects a Puzzle, a list of lines, a text block or a puzzle record")

    return solver_core.solve(parsed, key_strategy=key_strategy)


__all__ = ["solve_puzzle"]
