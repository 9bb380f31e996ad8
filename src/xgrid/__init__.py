"""Marked-word grid puzzles: parsing, memoized backtracking search, generation and validation."""

from .exceptions import MalformedInput, NoSolution, SearchBudgetExceeded, XGridError
from .model import ColumnState, Puzzle, Row, Word
from .parser import parse_puzzle
from .keys import StateKey, get_key_encoder, get_key_strategy_names
from .solver_core import SearchResult, SearchStats, solve, solve_with_stats
from .generator import generate_puzzle
from .validator import ValidationResult, validate_solution

__all__ = [
    "XGridError",
    "MalformedInput",
    "NoSolution",
    "SearchBudgetExceeded",
    "Word",
    "Row",
    "Puzzle",
    "ColumnState",
    "parse_puzzle",
    "StateKey",
    "get_key_encoder",
    "get_key_strategy_names",
    "SearchStats",
    "SearchResult",
    "solve",
    "solve_with_stats",
    "generate_puzzle",
    "ValidationResult",
    "validate_solution",
]
