"""Unit tests for the grid search core."""

import re

import pytest

from src.utils.trace import Tracer
from src.xgrid import solver_core
from src.xgrid.exceptions import NoSolution, SearchBudgetExceeded
from src.xgrid.generator import generate_puzzle
from src.xgrid.parser import parse_puzzle
from src.xgrid.validator import validate_solution

FIVE_FLAGGED_MARKED_ROWS = ["BX B A A"] * 5


def test_row_order_puts_flagged_marked_rows_first_then_fewest_flagged(solvable_lines):
    lines = list(solvable_lines)
    lines[4] = "B B AX B"  # 3 flagged
    lines[10] = "BX A A A"  # flagged-marked, 1 flagged
    lines[12] = "BX B B A"  # flagged-marked, 3 flagged
    lines[14] = "AX A A A"  # 0 flagged
    order = solver_core.row_order(parse_puzzle(lines))

    assert order[:2] == [10, 12]
    assert order[2] == 14
    assert order[-1] == 4
    # Ties keep input order.
    assert order[3:6] == [0, 1, 2]


def test_solves_handcrafted_puzzle(solvable_lines):
    result = solver_core.solve_with_stats(parse_puzzle(solvable_lines))

    assert validate_solution(solvable_lines, result.grid).ok
    assert result.stats.nodes >= 16
    assert result.stats.key_strategy == "packed"
    assert result.stats.memo_entries >= 16


@pytest.mark.parametrize("key_strategy", ["text", "packed"])
def test_unsolvable_puzzle_raises_no_solution(unsolvable_lines, key_strategy):
    with pytest.raises(NoSolution):
        solver_core.solve(parse_puzzle(unsolvable_lines), key_strategy=key_strategy)


@pytest.mark.parametrize("key_strategy", ["text", "packed"])
def test_five_flagged_marked_words_cannot_fit_four_columns(solvable_lines, key_strategy):
    lines = FIVE_FLAGGED_MARKED_ROWS + list(solvable_lines[5:])
    with pytest.raises(NoSolution) as info:
        solver_core.solve(parse_puzzle(lines), key_strategy=key_strategy)
    assert info.value.stats.key_strategy == key_strategy
    assert info.value.stats.memo_hits > 0


@pytest.mark.parametrize("five_flagged_marked", [False, True])
def test_both_key_strategies_exhaust_the_same_nodes(unsolvable_lines, solvable_lines, five_flagged_marked):
    if five_flagged_marked:
        lines = FIVE_FLAGGED_MARKED_ROWS + list(solvable_lines[5:])
    else:
        lines = unsolvable_lines
    puzzle = parse_puzzle(lines)

    stats = {}
    for key_strategy in ("text", "packed"):
        with pytest.raises(NoSolution) as info:
            solver_core.solve_with_stats(puzzle, key_strategy=key_strategy)
        stats[key_strategy] = info.value.stats

    assert stats["text"].nodes == stats["packed"].nodes
    assert stats["text"].memo_hits == stats["packed"].memo_hits
    assert stats["text"].memo_entries == stats["packed"].memo_entries


@pytest.mark.parametrize("seed", [1, 7, 42, 1234])
def test_both_key_strategies_find_the_same_first_solution(seed):
    puzzle = parse_puzzle(generate_puzzle(seed=seed))
    text = solver_core.solve_with_stats(puzzle, key_strategy="text")
    packed = solver_core.solve_with_stats(puzzle, key_strategy="packed")

    assert text.grid == packed.grid
    assert text.stats.nodes == packed.stats.nodes
    assert text.stats.memo_hits == packed.stats.memo_hits


def test_solve_does_not_share_state_between_calls(solvable_lines):
    puzzle = parse_puzzle(solvable_lines)
    first = solver_core.solve_with_stats(puzzle)
    second = solver_core.solve_with_stats(puzzle)

    assert first.grid == second.grid
    assert first.grid is not second.grid
    assert first.stats.nodes == second.stats.nodes


def test_node_budget_raises_budget_exceeded(solvable_lines):
    with pytest.raises(SearchBudgetExceeded) as info:
        solver_core.solve_with_stats(parse_puzzle(solvable_lines), max_nodes=3)
    assert isinstance(info.value, NoSolution)


def test_zero_time_budget_raises_budget_exceeded(solvable_lines):
    with pytest.raises(SearchBudgetExceeded):
        solver_core.solve_with_stats(parse_puzzle(solvable_lines), timeout_sec=0.0)


def test_unknown_key_strategy_is_rejected(solvable_lines):
    with pytest.raises(ValueError):
        solver_core.solve(parse_puzzle(solvable_lines), key_strategy="json")


def test_overcommit_prune_rejects_puzzles_without_flagged_surplus(unsolvable_lines):
    tracer = Tracer(enabled=True)
    with pytest.raises(NoSolution):
        solver_core.solve_with_stats(parse_puzzle(unsolvable_lines), tracer=tracer)

    prunes = [step for step in tracer.steps if step.action_type == "prune"]
    assert prunes
    assert {step.reason for step in prunes} == {"overcommit"}
    assert tracer.summary()["num_backtracks"] >= 1
    assert "solution_found" not in tracer.summary()["action_counts"]


def test_tracer_records_search_events(solvable_lines):
    tracer = Tracer(enabled=True)
    solver_core.solve_with_stats(parse_puzzle(solvable_lines), tracer=tracer)
    summary = tracer.summary()

    assert summary["num_placements"] >= 16
    assert summary["action_counts"]["solution_found"] == 1
    assert tracer.steps[-1].action_type == "solution_found"


def test_disabled_tracer_records_nothing(solvable_lines):
    tracer = Tracer(enabled=False)
    solver_core.solve_with_stats(parse_puzzle(solvable_lines), tracer=tracer)
    assert tracer.steps == []


@pytest.mark.parametrize("key_strategy", ["text", "packed"])
def test_memo_hits_are_traced_with_readable_state_keys(solvable_lines, key_strategy):
    tracer = Tracer(enabled=True)
    lines = FIVE_FLAGGED_MARKED_ROWS + list(solvable_lines[5:])
    with pytest.raises(NoSolution):
        solver_core.solve_with_stats(parse_puzzle(lines), key_strategy=key_strategy, tracer=tracer)

    hits = [step for step in tracer.steps if step.action_type == "memo_hit"]
    assert hits
    for step in hits:
        assert re.fullmatch(r"\d+\|\d,\d,\d,\d\|\d,\d,\d,\d\|\d+,\d+,\d+,\d+", step.state_key)
        assert step.state_key.split("|")[0] == str(step.position)
