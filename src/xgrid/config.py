"""Grid solver configuration."""

from typing import Literal, Optional

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv(usecwd=True) or None


class SolverConfig(BaseSettings):
    """Configuration settings for the grid solver, read from XGRID_* variables."""

    key_strategy: Literal["text", "packed"] = "packed"
    """Memo key encoding used by default. Default: packed."""

    max_nodes: Optional[int] = None
    """Abort a search after this many visited nodes. If None (default), unbounded."""

    timeout_sec: Optional[float] = None
    """Abort a search after this many seconds. If None (default), unbounded."""

    trace_enabled: bool = False
    """Whether the global tracer records search events. Default: False."""

    log_level: str = "INFO"

    fuzz_iterations: int = 100
    """Number of generated puzzles checked by a fuzz run. Default: 100."""

    bench_rounds: int = 20
    """Puzzles timed per (bx count, strategy) pair in a benchmark run. Default: 20."""

    model_config = SettingsConfigDict(
        env_prefix="XGRID_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )


config = SolverConfig()
