import pandas as pd
import pytest

from src.xgrid import harness
from src.xgrid.exceptions import NoSolution


def test_fuzz_hundred_generated_puzzles():
    report = harness.run_fuzz(iterations=100, seed=2024)
    assert report.ok
    assert report.passed == 100


def test_fuzz_records_no_solution_as_failure(monkeypatch):
    def _never_solves(*args, **kwargs):
        raise NoSolution("boom")

    monkeypatch.setattr(harness, "solve_with_stats", _never_solves)
    report = harness.run_fuzz(iterations=3, seed=1)

    assert not report.ok
    assert report.passed == 0
    assert len(report.failures) == 3
    assert report.failures[0].solution is None
    assert report.failures[0].messages == ["boom"]
    assert len(report.failures[0].puzzle) == 16


def test_fuzz_records_invalid_solution_as_failure(monkeypatch):
    class _Broken:
        grid = [["A", "A", "A", "A"]] * 16

    monkeypatch.setattr(harness, "solve_with_stats", lambda *a, **k: _Broken())
    report = harness.run_fuzz(iterations=2, seed=1, bx_count=1)

    assert report.passed == 0
    assert report.failures[0].solution == _Broken.grid
    assert report.failures[0].messages


def test_benchmark_times_every_strategy_on_the_same_puzzles():
    frame = harness.run_benchmark(bx_counts=(0, 4), rounds=2, seed=7)

    assert list(frame.columns) == ["strategy", "bx_count", "round", "seed", "elapsed_ms", "nodes", "memo_hits"]
    assert len(frame) == 2 * 2 * 2
    per_puzzle = frame.groupby(["bx_count", "round"])
    assert (per_puzzle["seed"].nunique() == 1).all()
    assert (per_puzzle["nodes"].nunique() == 1).all()


def test_benchmark_rejects_unknown_strategy():
    with pytest.raises(ValueError):
        harness.run_benchmark(strategies=["packed", "msgpack"], rounds=1)


def test_summarize_benchmark_reports_speedup_over_baseline():
    frame = pd.DataFrame(
        {
            "strategy": ["text", "text", "packed", "packed"],
            "bx_count": [0, 0, 0, 0],
            "round": [0, 1, 0, 1],
            "seed": [1, 2, 1, 2],
            "elapsed_ms": [4.0, 6.0, 2.0, 3.0],
            "nodes": [10, 20, 10, 20],
            "memo_hits": [0, 1, 0, 1],
        }
    )
    summary = harness.summarize_benchmark(frame).set_index("strategy")

    assert summary.loc["text", "mean"] == pytest.approx(5.0)
    assert summary.loc["packed", "mean"] == pytest.approx(2.5)
    assert summary.loc["packed", "speedup"] == pytest.approx(2.0)
    assert summary.loc["text", "speedup"] == pytest.approx(1.0)
    assert summary.loc["packed", "nodes"] == pytest.approx(15.0)


def test_summarize_benchmark_without_baseline_has_no_speedup():
    frame = pd.DataFrame(
        {
            "strategy": ["packed"],
            "bx_count": [1],
            "round": [0],
            "seed": [1],
            "elapsed_ms": [1.5],
            "nodes": [17],
            "memo_hits": [0],
        }
    )
    summary = harness.summarize_benchmark(frame)
    assert "speedup" not in summary.columns
    assert summary.loc[0, "p99"] == pytest.approx(1.5)
