"""Grid data types (pure data, no business logic)."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

Coord = tuple[int, int]


class CellStatus(str, Enum):
    # Region counting
    WATER = "water"
    LAND = "land"
    VISITED = "visited"
    # Spreading
    EMPTY = "empty"
    FRESH = "fresh"
    ROTTEN = "rotten"
    SOURCE = "source"
    JUST_ROTTED = "just_rotted"


class Cell(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    col: int
    symbol: str
    status: CellStatus
    region: int | None = None

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    def __str__(self) -> str:
        if self.region is not None:
            return str(self.region)
        return self.symbol


class GridSnapshot(BaseModel):
    """Full copy of every cell at one instant."""

    model_config = ConfigDict(frozen=True)

    rows: tuple[tuple[Cell, ...], ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def shape(self) -> tuple[int, int]:
        return (self.height, self.width)

    def cell(self, row: int, col: int) -> Cell:
        return self.rows[row][col]

    def cells(self) -> list[Cell]:
        return [cell for row in self.rows for cell in row]

    def count(self, status: CellStatus) -> int:
        return sum(1 for cell in self.cells() if cell.status == status)

    def coords_with(self, *statuses: CellStatus) -> list[Coord]:
        return [cell.coord for cell in self.cells() if cell.status in statuses]

    def __str__(self) -> str:
        return "\n".join("".join(str(cell) for cell in row) for row in self.rows)
