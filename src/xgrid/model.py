"""Grid puzzle data structures and column bookkeeping."""

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from itertools import permutations
from typing import Iterator, List, Optional, Sequence, Tuple

from .exceptions import MalformedInput

NUM_ROWS = 16
NUM_COLS = 4
WORDS_PER_ROW = NUM_COLS
MARKED_PER_COLUMN = 4
MIN_FLAGGED_PER_COLUMN = 4
MAX_FLAGGED_MARKED_PER_COLUMN = 1

Grid = List[List[str]]


class Word(str, Enum):
    """Word categories, valued by their puzzle labels."""

    PLAIN = "A"
    FLAGGED = "B"
    MARKED = "AX"
    FLAGGED_MARKED = "BX"

    @property
    def is_marked(self) -> bool:
        return self in (Word.MARKED, Word.FLAGGED_MARKED)

    @property
    def is_flagged(self) -> bool:
        return self in (Word.FLAGGED, Word.FLAGGED_MARKED)


# Rows are normalized into this order so the marked word always sits in slot 0.
CANONICAL_ORDER: Tuple[Word, ...] = (
    Word.FLAGGED_MARKED,
    Word.MARKED,
    Word.FLAGGED,
    Word.PLAIN,
)
LABELS = frozenset(word.value for word in Word)


def canonical_sort(words: Sequence[Word]) -> Tuple[Word, ...]:
    return tuple(sorted(words, key=CANONICAL_ORDER.index))


def distinct_orders(words: Sequence[Word]) -> Tuple[Tuple[Word, ...], ...]:
    """
    Return every ordering of `words` that differs by category sequence.
    Words are sorted by label first, so orders come out lexicographically
    ("A" before "B") with duplicates collapsed to their first occurrence.
    """
    ordered = sorted(words, key=lambda w: w.value)
    return tuple(dict.fromkeys(permutations(ordered)))


@dataclass(frozen=True)
class Row:
    index: int
    words: Tuple[Word, ...]
    flagged_count: int
    companion_orders: Tuple[Tuple[Word, ...], ...] = field(repr=False)

    @classmethod
    def from_words(cls, index: int, words: Sequence[Word]) -> "Row":
        normalized = canonical_sort(words)
        return cls(
            index=index,
            words=normalized,
            flagged_count=sum(1 for word in normalized if word.is_flagged),
            companion_orders=distinct_orders(normalized[1:]),
        )

    @property
    def marked_word(self) -> Word:
        return self.words[0]

    @property
    def marked_is_flagged(self) -> bool:
        return self.marked_word.is_flagged

    @property
    def is_flagged_marked(self) -> bool:
        return self.marked_word is Word.FLAGGED_MARKED


@dataclass
class Puzzle:
    rows: List[Row]
    lines: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.rows) != NUM_ROWS:
            raise MalformedInput(f"A puzzle needs {NUM_ROWS} rows, got {len(self.rows)}")
        self.total_flagged: int = sum(row.flagged_count for row in self.rows)

    @property
    def flagged_surplus(self) -> int:
        """Largest flagged count any single column may hold while the others still reach their minimum."""
        return self.total_flagged - MIN_FLAGGED_PER_COLUMN * (NUM_COLS - 1)

    @property
    def flagged_marked_rows(self) -> int:
        return sum(1 for row in self.rows if row.is_flagged_marked)


class ColumnState:
    """
    Per-column counters for one search. Placements are applied inside
    context managers that undo them on exit, success or failure alike.
    """

    def __init__(self) -> None:
        self.marked_capacity = [MARKED_PER_COLUMN] * NUM_COLS
        self.flagged_marked_capacity = [MAX_FLAGGED_MARKED_PER_COLUMN] * NUM_COLS
        self.flagged_count = [0] * NUM_COLS

    def accepts(self, column: int, word: Word) -> bool:
        if self.marked_capacity[column] <= 0:
            return False
        if word is Word.FLAGGED_MARKED and self.flagged_marked_capacity[column] <= 0:
            return False
        return True

    @contextmanager
    def marked_placed(self, column: int, word: Word) -> Iterator[None]:
        double = word is Word.FLAGGED_MARKED
        flagged = word.is_flagged
        self.marked_capacity[column] -= 1
        if double:
            self.flagged_marked_capacity[column] -= 1
        if flagged:
            self.flagged_count[column] += 1
        try:
            yield
        finally:
            self.marked_capacity[column] += 1
            if double:
                self.flagged_marked_capacity[column] += 1
            if flagged:
                self.flagged_count[column] -= 1

    @contextmanager
    def companions_placed(self, columns: Sequence[int], words: Sequence[Word]) -> Iterator[None]:
        touched = [column for column, word in zip(columns, words) if word.is_flagged]
        for column in touched:
            self.flagged_count[column] += 1
        try:
            yield
        finally:
            for column in touched:
                self.flagged_count[column] -= 1

    def prune_reason(self, rows_left: int, flagged_surplus: int) -> Optional[str]:
        """Return why this state cannot lead to a solution, or None if it still can."""
        for count in self.flagged_count:
            if count + rows_left < MIN_FLAGGED_PER_COLUMN:
                return "reachability"
            if count > flagged_surplus:
                return "overcommit"
        return None

    def is_complete(self) -> bool:
        return (
            all(cap == 0 for cap in self.marked_capacity)
            and all(count >= MIN_FLAGGED_PER_COLUMN for count in self.flagged_count)
            and all(cap >= 0 for cap in self.flagged_marked_capacity)
        )

    def snapshot(self) -> Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]]:
        return (
            tuple(self.marked_capacity),
            tuple(self.flagged_marked_capacity),
            tuple(self.flagged_count),
        )
