"""Named constants: eliminates magic strings across the codebase."""

from __future__ import annotations

ROOT_NODE_ID = "root"
NODE_ID_PREFIX = "n"

VARIANT_BACKTRACKING = "backtracking"
VARIANT_GRID = "grid"
VARIANT_PREFIX_SUM = "prefix_sum"

# Input ceilings, enforced before any step is recorded
MAX_SUBSET_ELEMENTS = 6
MAX_PERMUTATION_ELEMENTS = 5
MAX_PARENTHESES_PAIRS = 5
MAX_PHONE_DIGITS = 4
MAX_COMBINATION_CANDIDATES = 8
MAX_COMBINATION_TARGET = 30
MAX_COMBINATION_TREE_NODES = 400
MAX_GRID_ROWS = 20
MAX_GRID_COLS = 20
MAX_PREFIX_SUM_VALUES = 20

# Hard ceiling checked by the recorder on every append
MAX_TRACE_STEPS = 5000

# Playback cadence (milliseconds)
SHORT_INTERVAL_MS = 100
LONG_INTERVAL_MS = 800
MIN_SPEED = 0.25
MAX_SPEED = 4.0

PHONE_MAP: dict[str, str] = {
    "2": "abc",
    "3": "def",
    "4": "ghi",
    "5": "jkl",
    "6": "mno",
    "7": "pqrs",
    "8": "tuv",
    "9": "wxyz",
}

ISLAND_SYMBOLS: tuple[str, ...] = ("0", "1")
ROTTING_SYMBOLS: tuple[str, ...] = ("0", "1", "2")

# Up, right, down, left
ISLAND_DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))
# Right, down, left, up
SPREAD_DIRECTIONS: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

PROBLEM_SUBSETS = "subsets"
PROBLEM_PERMUTATIONS = "permutations"
PROBLEM_PARENTHESES = "parentheses"
PROBLEM_LETTER_COMBINATIONS = "letters"
PROBLEM_COMBINATION_SUM = "combination-sum"
PROBLEM_ISLANDS = "islands"
PROBLEM_ROTTING = "rotting"
PROBLEM_SUBARRAY_SUM = "subarray-sum"

BACKTRACKING_PROBLEMS: tuple[str, ...] = (
    PROBLEM_SUBSETS,
    PROBLEM_PERMUTATIONS,
    PROBLEM_PARENTHESES,
    PROBLEM_LETTER_COMBINATIONS,
    PROBLEM_COMBINATION_SUM,
)
GRID_PROBLEMS: tuple[str, ...] = (PROBLEM_ISLANDS, PROBLEM_ROTTING)
