"""Memo key encodings for (position, column state) search nodes.

Two encoders share one contract: equal logical states give equal keys and
distinct states give distinct keys.

- "text": delimited string, kept as the readable reference encoding.
- "packed": a single integer laid out as

      bits  0..19  flagged count, 5 bits per column (column 0 lowest)
      bits 20..23  flagged-marked capacity, 1 bit per column
      bits 24..35  marked capacity, 3 bits per column
      bits 36..40  position
"""

from __future__ import annotations

from typing import Callable, Dict, Hashable, List, NamedTuple, Tuple

from .model import NUM_COLS, ColumnState

FLAGGED_BITS = 5
FLAGGED_MARKED_BITS = 1
MARKED_BITS = 3
POSITION_BITS = 5

FLAGGED_MARKED_SHIFT = FLAGGED_BITS * NUM_COLS
MARKED_SHIFT = FLAGGED_MARKED_SHIFT + FLAGGED_MARKED_BITS * NUM_COLS
POSITION_SHIFT = MARKED_SHIFT + MARKED_BITS * NUM_COLS

KeyEncoder = Callable[[int, ColumnState], Hashable]


class StateKey(NamedTuple):
    position: int
    marked_capacity: Tuple[int, ...]
    flagged_marked_capacity: Tuple[int, ...]
    flagged_count: Tuple[int, ...]

    @classmethod
    def capture(cls, position: int, columns: ColumnState) -> "StateKey":
        marked, flagged_marked, flagged = columns.snapshot()
        return cls(position, marked, flagged_marked, flagged)

    def pack(self) -> int:
        key = 0
        for c in range(NUM_COLS):
            key |= (self.flagged_count[c] & 0x1F) << (FLAGGED_BITS * c)
            key |= (self.flagged_marked_capacity[c] & 0x1) << (FLAGGED_MARKED_SHIFT + c)
            key |= (self.marked_capacity[c] & 0x7) << (MARKED_SHIFT + MARKED_BITS * c)
        key |= (self.position & 0x1F) << POSITION_SHIFT
        return key

    @classmethod
    def unpack(cls, key: int) -> "StateKey":
        flagged = tuple((key >> (FLAGGED_BITS * c)) & 0x1F for c in range(NUM_COLS))
        flagged_marked = tuple((key >> (FLAGGED_MARKED_SHIFT + c)) & 0x1 for c in range(NUM_COLS))
        marked = tuple((key >> (MARKED_SHIFT + MARKED_BITS * c)) & 0x7 for c in range(NUM_COLS))
        position = (key >> POSITION_SHIFT) & 0x1F
        return cls(position, marked, flagged_marked, flagged)

    def to_text(self) -> str:
        parts = [
            str(self.position),
            ",".join(map(str, self.marked_capacity)),
            ",".join(map(str, self.flagged_marked_capacity)),
            ",".join(map(str, self.flagged_count)),
        ]
        return "|".join(parts)


def encode_text(position: int, columns: ColumnState) -> str:
    return "|".join(
        [
            str(position),
            ",".join(map(str, columns.marked_capacity)),
            ",".join(map(str, columns.flagged_marked_capacity)),
            ",".join(map(str, columns.flagged_count)),
        ]
    )


def encode_packed(position: int, columns: ColumnState) -> int:
    # Inlined StateKey.pack; this runs once per search node.
    flagged: List[int] = columns.flagged_count
    flagged_marked: List[int] = columns.flagged_marked_capacity
    marked: List[int] = columns.marked_capacity
    return (
        flagged[0]
        | flagged[1] << 5
        | flagged[2] << 10
        | flagged[3] << 15
        | flagged_marked[0] << 20
        | flagged_marked[1] << 21
        | flagged_marked[2] << 22
        | flagged_marked[3] << 23
        | marked[0] << 24
        | marked[1] << 27
        | marked[2] << 30
        | marked[3] << 33
        | position << POSITION_SHIFT
    )


KEY_STRATEGIES: Dict[str, KeyEncoder] = {
    "text": encode_text,
    "packed": encode_packed,
}

DEFAULT_KEY_STRATEGY = "packed"


def get_key_encoder(name: str) -> KeyEncoder:
    if name not in KEY_STRATEGIES:
        available = ", ".join(KEY_STRATEGIES)
        raise ValueError(f"Unknown key strategy: {name}. Available: {available}")
    return KEY_STRATEGIES[name]


def get_key_strategy_names() -> List[str]:
    return list(KEY_STRATEGIES)
