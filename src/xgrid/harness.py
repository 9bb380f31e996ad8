"""Fuzz and benchmark drivers: generate, solve and validate puzzles in bulk."""

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import pandas as pd
from tqdm import tqdm

from .exceptions import NoSolution
from .generator import BXCount, generate_puzzle
from .keys import get_key_encoder, get_key_strategy_names
from .model import NUM_COLS, Grid
from .parser import parse_puzzle
from .solver_core import solve_with_stats
from .validator import validate_solution
from src.utils.logging_utils import get_logger

LOGGER = get_logger(__name__)

SEED_RANGE = 2**32


@dataclass
class FuzzFailure:
    seed: int
    puzzle: List[str]
    solution: Optional[Grid]
    messages: List[str]


@dataclass
class FuzzReport:
    iterations: int
    passed: int = 0
    failures: List[FuzzFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def run_fuzz(
    iterations: int = 100,
    key_strategy: Optional[str] = None,
    seed: Optional[int] = None,
    bx_count: BXCount = "random",
    progress: bool = False,
) -> FuzzReport:
    """Solve `iterations` generated puzzles and validate every answer."""
    rng = random.Random(seed)
    report = FuzzReport(iterations=iterations)

    for _ in tqdm(range(iterations), desc="Fuzzing", unit="puzzle", disable=not progress):
        puzzle_seed = rng.randrange(SEED_RANGE)
        lines = generate_puzzle(seed=puzzle_seed, bx_count=bx_count)
        try:
            grid = solve_with_stats(parse_puzzle(lines), key_strategy=key_strategy).grid
        except NoSolution as exc:
            LOGGER.error("FAILED PUZZLE (seed %d): %s", puzzle_seed, exc)
            report.failures.append(FuzzFailure(puzzle_seed, lines, None, [str(exc)]))
            continue

        result = validate_solution(lines, grid)
        if result.ok:
            report.passed += 1
        else:
            LOGGER.error("FAILED PUZZLE (seed %d): %s", puzzle_seed, "; ".join(result.messages))
            report.failures.append(FuzzFailure(puzzle_seed, lines, grid, result.messages))

    if report.ok:
        LOGGER.info("All %d fuzz puzzles passed", iterations)
    else:
        LOGGER.error("%d of %d fuzz puzzles failed", len(report.failures), iterations)
    return report


def run_benchmark(
    strategies: Optional[Sequence[str]] = None,
    bx_counts: Sequence[int] = tuple(range(NUM_COLS + 1)),
    rounds: int = 20,
    seed: int = 0,
    progress: bool = False,
) -> pd.DataFrame:
    """
    Time every key strategy on the same generated puzzles.

    Returns one row per (bx_count, round, strategy) with the elapsed time and
    search counters of that solve.
    """
    strategies = list(strategies or get_key_strategy_names())
    for name in strategies:
        get_key_encoder(name)

    rng = random.Random(seed)
    records = []
    total = len(bx_counts) * rounds
    with tqdm(total=total, desc="Benchmark", unit="puzzle", disable=not progress) as bar:
        for bx_count in bx_counts:
            for round_index in range(rounds):
                puzzle_seed = rng.randrange(SEED_RANGE)
                puzzle = parse_puzzle(generate_puzzle(seed=puzzle_seed, bx_count=bx_count))
                for name in strategies:
                    stats = solve_with_stats(puzzle, key_strategy=name).stats
                    records.append(
                        {
                            "strategy": name,
                            "bx_count": bx_count,
                            "round": round_index,
                            "seed": puzzle_seed,
                            "elapsed_ms": stats.elapsed_ms,
                            "nodes": stats.nodes,
                            "memo_hits": stats.memo_hits,
                        }
                    )
                bar.update(1)

    return pd.DataFrame.from_records(
        records,
        columns=["strategy", "bx_count", "round", "seed", "elapsed_ms", "nodes", "memo_hits"],
    )


def summarize_benchmark(frame: pd.DataFrame, baseline: str = "text") -> pd.DataFrame:
    """Per (bx_count, strategy) timing statistics plus speedup over `baseline`."""
    grouped = frame.groupby(["bx_count", "strategy"])["elapsed_ms"]
    summary = grouped.agg(["mean", "median", "min", "max"])
    summary["p99"] = grouped.quantile(0.99)
    summary["nodes"] = frame.groupby(["bx_count", "strategy"])["nodes"].mean()
    summary = summary.reset_index()

    if baseline in set(summary["strategy"]):
        base = summary.loc[summary["strategy"] == baseline, ["bx_count", "mean"]]
        summary = summary.merge(base.rename(columns={"mean": "baseline_mean"}), on="bx_count", how="left")
        summary["speedup"] = summary["baseline_mean"] / summary["mean"]
        summary = summary.drop(columns="baseline_mean")
    return summary
