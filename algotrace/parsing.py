"""Input parsing: the only place raw user text reaches the generators."""

from __future__ import annotations

import logging
import re
from typing import Sequence

from .errors import InvalidInput
from .run_types import DEFAULT_LIMITS, GenerationLimits

logger = logging.getLogger(__name__)

# ASCII and full-width commas, plus any whitespace
_NUMBER_SEPARATORS = re.compile(r"[,，\s]+")
_ROW_WHITESPACE = re.compile(r"[ \t]+")


def parse_numbers(text: str | Sequence[int]) -> list[int]:
    """Parse ``"1, 2 3"`` (or pass through a sequence) into a list of ints."""
    if not isinstance(text, str):
        values = list(text)
        for i, value in enumerate(values):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(f"Element {i + 1} is not an integer: {value!r}")
        return values

    parts = [p for p in _NUMBER_SEPARATORS.split(text.strip()) if p]
    numbers: list[int] = []
    for i, part in enumerate(parts):
        try:
            numbers.append(int(part))
        except ValueError:
            raise InvalidInput(f"Element {i + 1} is not an integer: {part!r}") from None
    return numbers


def _split_rows(raw: str | Sequence[str]) -> list[str]:
    if isinstance(raw, str):
        lines = raw.strip().splitlines()
    else:
        lines = list(raw)
        for i, line in enumerate(lines):
            if not isinstance(line, str):
                raise InvalidInput(f"Row {i + 1} is not text: {line!r}", row=i + 1)
    return [_ROW_WHITESPACE.sub("", line.strip()) for line in lines]


def parse_grid(
    raw: str | Sequence[str],
    symbols: Sequence[str],
    limits: GenerationLimits = DEFAULT_LIMITS,
) -> list[list[str]]:
    """Validate grid text and return it as rows of single-character symbols.

    Rows are separated by newlines (or given as a sequence of strings);
    spaces inside a row and blank lines before or after the grid are ignored,
    but a blank line between rows is an empty row. Errors carry 1-based
    row/column numbers.
    """
    rows = _split_rows(raw)
    if not rows or all(not row for row in rows):
        raise InvalidInput("Grid is empty")
    if len(rows) > limits.max_grid_rows:
        raise InvalidInput(
            f"Grid has {len(rows)} rows; at most {limits.max_grid_rows} are supported"
        )

    width = len(rows[0])
    if width > limits.max_grid_cols:
        raise InvalidInput(
            f"Grid has {width} columns; at most {limits.max_grid_cols} are supported"
        )
    grid: list[list[str]] = []
    for r, row in enumerate(rows):
        if not row:
            raise InvalidInput(f"Row {r + 1} is empty", row=r + 1)
        if len(row) != width:
            raise InvalidInput(
                f"Row {r + 1} has {len(row)} columns, expected {width}",
                row=r + 1,
                column=min(len(row), width) + 1,
            )
        for c, char in enumerate(row):
            if char not in symbols:
                raise InvalidInput(
                    f"Invalid character at row {r + 1}, col {c + 1}: {char!r} "
                    f"(allowed: {', '.join(symbols)})",
                    row=r + 1,
                    column=c + 1,
                )
        grid.append(list(row))

    logger.debug("Parsed %dx%d grid", len(grid), width)
    return grid
