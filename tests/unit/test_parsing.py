"""Tests for number and grid text parsing."""

import pytest

from algotrace.constants import ISLAND_SYMBOLS, ROTTING_SYMBOLS
from algotrace.errors import InvalidInput
from algotrace.parsing import parse_grid, parse_numbers
from algotrace.run_types import GenerationLimits


class TestParseNumbers:
    def test_commas_and_spaces(self):
        assert parse_numbers("1, 2 3,4") == [1, 2, 3, 4]

    def test_full_width_comma(self):
        assert parse_numbers("5，-6") == [5, -6]

    def test_sequence_passes_through(self):
        assert parse_numbers([3, 1]) == [3, 1]

    def test_blank_is_empty(self):
        assert parse_numbers("   ") == []

    def test_rejects_words(self):
        with pytest.raises(InvalidInput, match="Element 3"):
            parse_numbers("1 2 three")

    def test_rejects_bools_in_sequence(self):
        with pytest.raises(InvalidInput):
            parse_numbers([1, True])


class TestParseGrid:
    def test_newline_separated_rows(self):
        grid = parse_grid("10\n01\n", ISLAND_SYMBOLS)

        assert grid == [["1", "0"], ["0", "1"]]

    def test_spaces_inside_rows_are_ignored(self):
        grid = parse_grid(["1 0 1", " 0 1 0 "], ISLAND_SYMBOLS)

        assert grid == [["1", "0", "1"], ["0", "1", "0"]]

    def test_invalid_symbol_reports_row_and_column(self):
        with pytest.raises(InvalidInput) as exc_info:
            parse_grid("2x1", ROTTING_SYMBOLS)

        assert exc_info.value.row == 1
        assert exc_info.value.column == 2
        assert "row 1, col 2" in str(exc_info.value)

    def test_invalid_symbol_on_later_row(self):
        with pytest.raises(InvalidInput) as exc_info:
            parse_grid(["11", "12"], ISLAND_SYMBOLS)

        assert (exc_info.value.row, exc_info.value.column) == (2, 2)

    def test_inconsistent_row_width(self):
        with pytest.raises(InvalidInput, match="Row 2 has 1 columns") as exc_info:
            parse_grid("11\n1", ISLAND_SYMBOLS)

        assert exc_info.value.row == 2

    def test_empty_grid(self):
        with pytest.raises(InvalidInput, match="empty"):
            parse_grid("  \n ", ISLAND_SYMBOLS)

    def test_empty_row_in_sequence(self):
        with pytest.raises(InvalidInput) as exc_info:
            parse_grid(["1", ""], ISLAND_SYMBOLS)

        assert exc_info.value.row == 2

    def test_interior_blank_line_is_an_empty_row(self):
        with pytest.raises(InvalidInput, match="Row 2 is empty") as exc_info:
            parse_grid("11\n\n11", ISLAND_SYMBOLS)

        assert exc_info.value.row == 2

    def test_surrounding_blank_lines_are_ignored(self):
        assert parse_grid("\n\n11\n01\n\n", ISLAND_SYMBOLS) == [["1", "1"], ["0", "1"]]

    def test_non_text_row_in_sequence(self):
        with pytest.raises(InvalidInput, match="Row 2 is not text") as exc_info:
            parse_grid(["11", 5], ISLAND_SYMBOLS)

        assert exc_info.value.row == 2

    def test_wide_first_row_rejected_before_symbols_are_checked(self):
        limits = GenerationLimits(max_grid_cols=2)

        with pytest.raises(InvalidInput, match="columns"):
            parse_grid(["x" * 1000], ISLAND_SYMBOLS, limits)

    def test_long_later_row_rejected_by_width(self):
        with pytest.raises(InvalidInput, match="Row 2 has 1000 columns") as exc_info:
            parse_grid(["11", "x" * 1000], ISLAND_SYMBOLS)

        assert (exc_info.value.row, exc_info.value.column) == (2, 3)

    def test_row_ceiling(self):
        limits = GenerationLimits(max_grid_rows=2)

        with pytest.raises(InvalidInput, match="rows"):
            parse_grid(["1", "1", "1"], ISLAND_SYMBOLS, limits)

    def test_column_ceiling(self):
        limits = GenerationLimits(max_grid_cols=2)

        with pytest.raises(InvalidInput, match="columns"):
            parse_grid(["111"], ISLAND_SYMBOLS, limits)
