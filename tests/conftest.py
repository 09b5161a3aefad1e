# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "gridsolver" and "api_proto" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


# Known 9x9 puzzle and its unique solution (0 = blank, digits are 1-based)
CLASSIC_PUZZLE = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)

CLASSIC_SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]

# 4x4 with 2x2 blocks, solvable by propagation alone
SMALL_PUZZLE = [
    ["1", "2", "", "4"],
    ["", "4", "1", ""],
    ["", "1", "4", ""],
    ["4", "", "", "1"],
]

SMALL_SOLUTION = [
    [1, 2, 3, 4],
    [3, 4, 1, 2],
    [2, 1, 4, 3],
    [4, 3, 2, 1],
]


@pytest.fixture
def classic_puzzle():
    return CLASSIC_PUZZLE, CLASSIC_SOLUTION


@pytest.fixture
def small_puzzle():
    return SMALL_PUZZLE, SMALL_SOLUTION
