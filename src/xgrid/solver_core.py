"""Backtracking grid search with column-capacity pruning and memoized sub-states."""

import time
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

from .config import config
from .exceptions import NoSolution, SearchBudgetExceeded
from .keys import StateKey, get_key_encoder
from .model import NUM_COLS, NUM_ROWS, ColumnState, Grid, Puzzle
from src.utils.logging_utils import get_logger
from src.utils.trace import Tracer, get_tracer

LOGGER = get_logger(__name__)

ALL_COLUMNS = tuple(range(NUM_COLS))


@dataclass
class SearchStats:
    """Counters collected over one search."""

    key_strategy: str = ""
    nodes: int = 0
    memo_hits: int = 0
    memo_entries: int = 0
    pruned_reachability: int = 0
    pruned_overcommit: int = 0
    backtracks: int = 0
    elapsed_ms: float = 0.0


@dataclass
class SearchResult:
    grid: Grid
    stats: SearchStats = field(default_factory=SearchStats)


def row_order(puzzle: Puzzle) -> List[int]:
    """Visit flagged-marked rows first, then rows with fewer flagged words."""
    return sorted(
        range(NUM_ROWS),
        key=lambda i: (not puzzle.rows[i].is_flagged_marked, puzzle.rows[i].flagged_count),
    )


class _Search:
    """One search invocation: owns the column state, memo table and output grid."""

    def __init__(
        self,
        puzzle: Puzzle,
        key_strategy: str,
        max_nodes: Optional[int],
        timeout_sec: Optional[float],
        tracer: Tracer,
    ):
        self.puzzle = puzzle
        self.encode = get_key_encoder(key_strategy)
        self.max_nodes = max_nodes
        self.deadline = time.perf_counter() + timeout_sec if timeout_sec is not None else None
        self.tracer = tracer

        self.order = row_order(puzzle)
        self.columns = ColumnState()
        self.memo: Dict[Hashable, bool] = {}
        self.grid: Grid = [[""] * NUM_COLS for _ in range(NUM_ROWS)]
        self.stats = SearchStats(key_strategy=key_strategy)

    def _check_budget(self) -> None:
        if self.max_nodes is not None and self.stats.nodes > self.max_nodes:
            raise SearchBudgetExceeded(f"Search exceeded {self.max_nodes} nodes")
        if self.deadline is not None and time.perf_counter() > self.deadline:
            raise SearchBudgetExceeded("Search exceeded its time budget")

    def assign(self, position: int) -> bool:
        columns = self.columns
        if position == NUM_ROWS:
            if columns.is_complete():
                self.tracer.log_solution_found(position)
                return True
            return False

        self.stats.nodes += 1
        self._check_budget()

        key = self.encode(position, columns)
        cached = self.memo.get(key)
        if cached is not None:
            self.stats.memo_hits += 1
            if self.tracer.enabled:
                self.tracer.log_memo_hit(position, StateKey.capture(position, columns).to_text(), cached)
            return cached

        row = self.puzzle.rows[self.order[position]]
        marked = row.marked_word
        rows_left = NUM_ROWS - (position + 1)
        surplus = self.puzzle.flagged_surplus
        out = self.grid[row.index]

        for marked_column in ALL_COLUMNS:
            if not columns.accepts(marked_column, marked):
                continue
            self.tracer.log_place(position, row.index, marked_column, marked.value)
            out[marked_column] = marked.value
            others = [c for c in ALL_COLUMNS if c != marked_column]

            with columns.marked_placed(marked_column, marked):
                for companions in row.companion_orders:
                    with columns.companions_placed(others, companions):
                        reason = columns.prune_reason(rows_left, surplus)
                        if reason is not None:
                            if reason == "reachability":
                                self.stats.pruned_reachability += 1
                            else:
                                self.stats.pruned_overcommit += 1
                            self.tracer.log_prune(position, row.index, reason)
                            continue

                        for column, word in zip(others, companions):
                            out[column] = word.value
                        if self.assign(position + 1):
                            self.memo[key] = True
                            return True

        self.memo[key] = False
        self.stats.backtracks += 1
        self.tracer.log_backtrack(position, row.index)
        return False


def solve_with_stats(
    puzzle: Puzzle,
    key_strategy: Optional[str] = None,
    max_nodes: Optional[int] = None,
    timeout_sec: Optional[float] = None,
    tracer: Optional[Tracer] = None,
) -> SearchResult:
    """
    Search for a placement of every row that satisfies the column constraints.
    Raises NoSolution when the search space is exhausted and
    SearchBudgetExceeded when a node or time budget runs out first.
    """
    key_strategy = key_strategy or config.key_strategy
    if max_nodes is None:
        max_nodes = config.max_nodes
    if timeout_sec is None:
        timeout_sec = config.timeout_sec

    search = _Search(puzzle, key_strategy, max_nodes, timeout_sec, tracer or get_tracer())
    LOGGER.debug(
        "Searching puzzle (flagged total %d, flagged-marked rows %d) with %s keys",
        puzzle.total_flagged,
        puzzle.flagged_marked_rows,
        key_strategy,
    )

    start = time.perf_counter()
    try:
        found = search.assign(0)
    finally:
        search.stats.elapsed_ms = (time.perf_counter() - start) * 1000
        search.stats.memo_entries = len(search.memo)

    if not found:
        LOGGER.debug("Search exhausted after %d nodes", search.stats.nodes)
        raise NoSolution("No valid solution found under the puzzle constraints.", stats=search.stats)

    LOGGER.debug(
        "Solved in %.2f ms: %d nodes, %d memo hits",
        search.stats.elapsed_ms,
        search.stats.nodes,
        search.stats.memo_hits,
    )
    return SearchResult(grid=search.grid, stats=search.stats)


def solve(puzzle: Puzzle, key_strategy: Optional[str] = None) -> Grid:
    """Solve a parsed puzzle and return the 16x4 grid of labels."""
    return solve_with_stats(puzzle, key_strategy=key_strategy).grid
