"""Puzzle parser: convert puzzle text into normalized rows.

Supports:
- A sequence of 16 lines, each holding 4 whitespace-separated labels
- A single text block that splits into those 16 lines
- Loader records of the form {"id": ..., "lines": ...}
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

from .exceptions import MalformedInput
from .model import LABELS, NUM_ROWS, WORDS_PER_ROW, Puzzle, Row, Word

PuzzleSource = Union[str, Sequence[str], Dict[str, Any]]


def split_lines(source: PuzzleSource) -> List[str]:
    if isinstance(source, dict):
        if "lines" not in source:
            raise MalformedInput("Puzzle record has no 'lines' field")
        source = source["lines"]
    if isinstance(source, str):
        return source.strip().splitlines()
    if not isinstance(source, (list, tuple)):
        raise MalformedInput("Puzzle 'lines' must be a string or a sequence of strings")
    return [str(line) for line in source]


def parse_row(index: int, line: str) -> Row:
    tokens = line.split()
    if len(tokens) != WORDS_PER_ROW:
        raise MalformedInput(
            f"Row {index} has {len(tokens)} words, expected {WORDS_PER_ROW}: {line!r}",
            row=index,
        )

    words: List[Word] = []
    for token in tokens:
        if token not in LABELS:
            allowed = ", ".join(sorted(LABELS))
            raise MalformedInput(
                f'Invalid word "{token}" in row {index}. Allowed are {allowed}.',
                row=index,
                word=token,
            )
        words.append(Word(token))

    marked = sum(1 for word in words if word.is_marked)
    if marked != 1:
        raise MalformedInput(
            f"Row {index} has {marked} marked words, expected exactly 1: {line!r}",
            row=index,
        )
    return Row.from_words(index, words)


def parse_puzzle(source: PuzzleSource) -> Puzzle:
    lines = split_lines(source)
    if len(lines) != NUM_ROWS:
        raise MalformedInput(f"Expected exactly {NUM_ROWS} lines of input, got {len(lines)}")

    rows = [parse_row(index, line) for index, line in enumerate(lines)]
    return Puzzle(rows=rows, lines=tuple(line.strip() for line in lines))
