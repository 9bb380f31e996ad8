"""Tracing module: logs grid search steps and writes to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.utils.logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass
class TraceStep:
    """A single step in the search."""

    timestamp: float
    step_number: int
    action_type: str  # 'place', 'prune', 'memo_hit', 'backtrack', 'solution_found'
    position: Optional[int] = None  # index in the row visitation order
    row: Optional[int] = None
    column: Optional[int] = None
    word: Optional[str] = None
    state_key: Optional[str] = None
    verdict: Optional[bool] = None
    reason: Optional[str] = None


class Tracer:
    """Records search steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_place(self, position: int, row: int, column: int, word: str):
        """Log a marked word placed into a column."""
        if not self.enabled:
            return
        self._record('place', position=position, row=row, column=column, word=word)

    def log_prune(self, position: int, row: int, reason: str):
        """Log a companion order rejected by a column prune."""
        if not self.enabled:
            return
        self._record('prune', position=position, row=row, reason=reason)

    def log_memo_hit(self, position: int, state_key: Any, verdict: bool):
        """Log a search node answered from the memo table."""
        if not self.enabled:
            return
        self._record('memo_hit', position=position, state_key=str(state_key), verdict=verdict)

    def log_backtrack(self, position: int, row: int, reason: str = "No column accepts this row"):
        """Log a backtrack event."""
        if not self.enabled:
            return
        self._record('backtrack', position=position, row=row, reason=reason)

    def log_solution_found(self, position: int):
        """Log when a solution is found."""
        if not self.enabled:
            return
        self._record('solution_found', position=position)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            LOGGER.info("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'position', 'row',
            'column', 'word', 'state_key', 'verdict', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        LOGGER.info("Trace written to %s (%d steps)", filepath, len(self.steps))

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_placements': action_counts.get('place', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'num_memo_hits': action_counts.get('memo_hit', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        from src.xgrid.config import config

        _global_tracer = Tracer(enabled=config.trace_enabled)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
