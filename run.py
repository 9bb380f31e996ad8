"""CLI entrypoint: solve puzzle files, fuzz the solver, or benchmark key strategies."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from solver import solve_puzzle
from src.utils.logging_utils import configure_logging, get_logger
from src.utils.trace import enable_tracing, get_tracer, reset_tracer
from src.xgrid.config import config
from src.xgrid.exceptions import XGridError
from src.xgrid.harness import run_benchmark, run_fuzz, summarize_benchmark
from src.xgrid.keys import get_key_strategy_names
from src.xgrid.loader import load_puzzles

LOGGER = get_logger("run")

PUZZLE_SUFFIXES = [".txt", ".json", ".jsonl", ".parquet"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Solve, fuzz or benchmark marked-word grid puzzles")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level (default from XGRID_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    solve_cmd = sub.add_parser("solve", help="Solve puzzles from a file or directory")
    solve_cmd.add_argument("input", type=Path, help="Path to a puzzle file or a directory of puzzle files")
    solve_cmd.add_argument("--key-strategy", choices=get_key_strategy_names(), default=None)
    solve_cmd.add_argument("--trace-dir", type=Path, default=None, help="Write one search trace CSV per puzzle here")

    fuzz_cmd = sub.add_parser("fuzz", help="Solve and validate generated puzzles")
    fuzz_cmd.add_argument("--iterations", type=int, default=config.fuzz_iterations)
    fuzz_cmd.add_argument("--key-strategy", choices=get_key_strategy_names(), default=None)
    fuzz_cmd.add_argument("--seed", type=int, default=None)

    bench_cmd = sub.add_parser("bench", help="Compare memo key strategies on generated puzzles")
    bench_cmd.add_argument("--rounds", type=int, default=config.bench_rounds)
    bench_cmd.add_argument("--seed", type=int, default=0)
    bench_cmd.add_argument("--output", type=Path, default=None, help="Optional path to write the summary CSV")

    return parser.parse_args(argv)


def collect_puzzles(path: Path) -> List[dict]:
    if path.is_file():
        return load_puzzles(str(path))
    if path.is_dir():
        puzzles = []
        for file_path in sorted(path.iterdir()):
            if file_path.suffix in PUZZLE_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
        return puzzles
    raise ValueError(f"Input path {path} is neither file nor directory")


def format_grid(grid: List[List[str]]) -> str:
    return "\n".join(" ".join(f"{word:<2}" for word in row).rstrip() for row in grid)


def cmd_solve(args: argparse.Namespace) -> int:
    failures = 0
    for puzzle in collect_puzzles(args.input):
        reset_tracer()
        if args.trace_dir:
            enable_tracing(True)
        tracer = get_tracer()
        puzzle_id = puzzle.get("id", "unknown")

        try:
            grid = solve_puzzle(puzzle, key_strategy=args.key_strategy)
        except XGridError as e:
            LOGGER.error("Failed to solve puzzle %s: %s", puzzle_id, e)
            failures += 1
            continue

        print(f"# {puzzle_id}")
        print(format_grid(grid))
        print()
        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"{puzzle_id}.csv")

    return 1 if failures else 0


def cmd_fuzz(args: argparse.Namespace) -> int:
    report = run_fuzz(
        iterations=args.iterations,
        key_strategy=args.key_strategy,
        seed=args.seed,
        progress=True,
    )
    for failure in report.failures:
        print("FAILED PUZZLE:")
        print("\n".join(failure.puzzle))
        if failure.solution is not None:
            print("FAILED SOLUTION:")
            print(format_grid(failure.solution))
        print()
    print(f"{report.passed}/{report.iterations} passed")
    return 0 if report.ok else 1


def cmd_bench(args: argparse.Namespace) -> int:
    frame = run_benchmark(rounds=args.rounds, seed=args.seed, progress=True)
    summary = summarize_benchmark(frame)
    print(summary.to_string(index=False, float_format=lambda v: f"{v:.3f}"))
    if args.output:
        summary.to_csv(args.output, index=False)
    return 0


COMMANDS = {
    "solve": cmd_solve,
    "fuzz": cmd_fuzz,
    "bench": cmd_bench,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level.upper())
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
