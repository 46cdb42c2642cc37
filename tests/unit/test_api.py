"""Tests for the composable API functions."""

import pytest

from algotrace.api import (
    available_problems,
    dump_mermaid,
    dump_trace,
    generate_backtracking_trace,
    generate_grid_trace,
    generate_prefix_sum_trace,
    generate_trace,
)
from algotrace.errors import InvalidInput
from algotrace.trace_types import BacktrackStep, GridStep, PrefixSumStep


class TestGenerateTrace:
    def test_dispatches_backtracking(self):
        trace = generate_trace("subsets", "1,2,3")

        assert trace.problem == "subsets"
        assert isinstance(trace[0], BacktrackStep)

    def test_dispatches_grid(self):
        trace = generate_trace("rotting", "21\n01")

        assert isinstance(trace[0], GridStep)
        assert trace.tree is None

    def test_dispatches_prefix_sum(self):
        trace = generate_trace("subarray-sum", [1, 2, 3], 3)

        assert isinstance(trace[0], PrefixSumStep)
        assert trace.final_results == (1, 2)

    def test_target_only_reaches_combination_sum(self):
        trace = generate_trace("combination-sum", "2,3,6,7", "7")

        assert trace.final_results == ((2, 2, 3), (7,))

    def test_unknown_problem(self):
        with pytest.raises(InvalidInput, match="Unknown problem"):
            generate_trace("sudoku", "1")

    def test_available_problems(self):
        problems = available_problems()

        assert len(problems) == 8
        assert "islands" in problems
        assert "subarray-sum" in problems


class TestBoundaryFunctions:
    def test_grid_defaults_to_islands(self):
        trace = generate_grid_trace(["11000", "11000", "00100", "00011"])

        assert trace.problem == "islands"
        assert trace.last.region_count == 3

    def test_grid_rejects_invalid_symbol(self):
        with pytest.raises(InvalidInput):
            generate_grid_trace("2x1")

    def test_backtracking_ignores_target_elsewhere(self):
        trace = generate_backtracking_trace("subsets", [1], target=99)

        assert trace.final_results == ((), (1,))

    def test_prefix_sum(self):
        trace = generate_prefix_sum_trace("1 -1 0", 0)

        assert trace.final_results == (1, 2, 2)


class TestDumps:
    def test_dump_trace_has_one_header_per_step(self):
        trace = generate_backtracking_trace("parentheses", 1)

        text = dump_trace(trace)

        assert text.count("[#") == len(trace)

    def test_dump_mermaid_at_index(self):
        trace = generate_backtracking_trace("subsets", [1])

        text = dump_mermaid(trace, 0)

        assert "style t0 fill:#10b981" in text

    def test_dump_mermaid_needs_a_tree(self):
        trace = generate_grid_trace(["1"])

        with pytest.raises(InvalidInput):
            dump_mermaid(trace)
