import pytest

from src.utils.trace import reset_tracer


# Row r puts its AX in column r // 4 and its B in the next column over.
SOLVABLE_LINES = ["A B AX A"] * 16

# Every column must end with 4 flagged words, but this puzzle has none at all.
UNSOLVABLE_LINES = ["AX A A A"] * 16


@pytest.fixture
def solvable_lines():
    return list(SOLVABLE_LINES)


@pytest.fixture
def unsolvable_lines():
    return list(UNSOLVABLE_LINES)


@pytest.fixture(autouse=True)
def fresh_tracer():
    reset_tracer()
    yield
    reset_tracer()
