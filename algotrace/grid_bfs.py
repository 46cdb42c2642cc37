"""Breadth-first grid trace generators.

Both generators scan the grid in row-major order, one ``scan`` step per
cell, then record one ``expand`` step per logical unit of work: one cell
for region flood-fill, one simultaneous round for spreading.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Iterable, Sequence

from . import constants
from .errors import InvalidInput
from .grid_types import Cell, CellStatus, Coord, GridSnapshot
from .parsing import parse_grid
from .recorder import TraceRecorder
from .run_types import DEFAULT_LIMITS, GenerationLimits
from .trace_types import GridStep, RegionResult, SpreadRound, StepKind, Trace

logger = logging.getLogger(__name__)


def _sorted_coords(coords: Iterable[Coord]) -> tuple[Coord, ...]:
    return tuple(sorted(set(coords)))


class GridGenerator(ABC):
    """Base class owning the working grid of one run."""

    problem: str = ""
    symbols: tuple[str, ...] = ()

    def __init__(self, limits: GenerationLimits = DEFAULT_LIMITS):
        self._limits = limits

    def generate(self, raw: str | Sequence[str]) -> Trace[GridStep]:
        """Parse *raw* grid text, run the simulation and return the trace."""
        symbols = parse_grid(raw, self.symbols, self._limits)
        self._recorder: TraceRecorder[GridStep] = TraceRecorder(
            self.problem, GridStep, self._limits
        )
        self._cells: list[list[Cell]] = [
            [
                Cell(row=r, col=c, symbol=s, status=self.initial_status(s))
                for c, s in enumerate(row)
            ]
            for r, row in enumerate(symbols)
        ]
        self._simulate()
        return self._recorder.finish()

    @abstractmethod
    def initial_status(self, symbol: str) -> CellStatus: ...

    @abstractmethod
    def _simulate(self) -> None: ...

    @property
    def height(self) -> int:
        return len(self._cells)

    @property
    def width(self) -> int:
        return len(self._cells[0])

    def _coords(self) -> Iterable[Coord]:
        for r in range(self.height):
            for c in range(self.width):
                yield (r, c)

    def _in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.height and 0 <= c < self.width

    def _cell(self, coord: Coord) -> Cell:
        return self._cells[coord[0]][coord[1]]

    def _update(self, coord: Coord, **changes: Any) -> None:
        r, c = coord
        self._cells[r][c] = self._cells[r][c].model_copy(update=changes)

    def _snapshot(self) -> GridSnapshot:
        return GridSnapshot(rows=tuple(tuple(row) for row in self._cells))

    def _emit(
        self,
        kind: StepKind,
        description: str,
        frontier: Iterable[Coord] = (),
        changed: Iterable[Coord] = (),
        scan_pos: Coord | None = None,
        **counters: int,
    ) -> None:
        self._recorder.record(
            kind,
            description,
            grid_snapshot=self._snapshot(),
            frontier=_sorted_coords(frontier),
            changed=_sorted_coords(changed),
            scan_pos=scan_pos,
            **counters,
        )


class IslandsGenerator(GridGenerator):
    """Counts 4-connected regions of land ('1') surrounded by water ('0')."""

    problem = constants.PROBLEM_ISLANDS
    symbols = constants.ISLAND_SYMBOLS

    def initial_status(self, symbol: str) -> CellStatus:
        return CellStatus.LAND if symbol == "1" else CellStatus.WATER

    def _simulate(self) -> None:
        self._regions = 0
        self._unvisited = sum(
            1 for coord in self._coords() if self._cell(coord).status == CellStatus.LAND
        )
        for coord in self._coords():
            cell = self._cell(coord)
            self._emit(
                StepKind.SCAN,
                f"Check [{coord[0]}, {coord[1]}]: value {cell.symbol}",
                scan_pos=coord,
                region_count=self._regions,
                remaining=self._unvisited,
            )
            if cell.status != CellStatus.LAND:
                continue
            self._regions += 1
            self._recorder.collect(RegionResult(number=self._regions, root=coord))
            self._emit(
                StepKind.FOUND,
                f"[{coord[0]}, {coord[1]}] is unvisited land: region {self._regions} found",
                frontier=[coord],
                scan_pos=coord,
                region_count=self._regions,
                remaining=self._unvisited,
            )
            self._flood(coord)

        self._emit(
            StepKind.FINISHED,
            f"Scan complete: {self._regions} region(s) found",
            region_count=self._regions,
            remaining=self._unvisited,
        )

    def _flood(self, root: Coord) -> None:
        queue: deque[Coord] = deque([root])
        queued = {root}
        while queue:
            coord = queue.popleft()
            self._update(coord, status=CellStatus.VISITED, region=self._regions)
            self._unvisited -= 1
            for dr, dc in constants.ISLAND_DIRECTIONS:
                nr, nc = coord[0] + dr, coord[1] + dc
                neighbour = (nr, nc)
                if (
                    self._in_bounds(nr, nc)
                    and neighbour not in queued
                    and self._cell(neighbour).status == CellStatus.LAND
                ):
                    queued.add(neighbour)
                    queue.append(neighbour)
            self._emit(
                StepKind.EXPAND,
                f"Mark [{coord[0]}, {coord[1]}] as part of region {self._regions}",
                frontier=queue,
                changed=[coord],
                scan_pos=root,
                region_count=self._regions,
                remaining=self._unvisited,
            )


class RottingGenerator(GridGenerator):
    """Multi-source spread: every rotten cell ('2') infects fresh ('1')
    4-neighbours once per minute; empty cells ('0') block the spread."""

    problem = constants.PROBLEM_ROTTING
    symbols = constants.ROTTING_SYMBOLS

    def initial_status(self, symbol: str) -> CellStatus:
        return {
            "0": CellStatus.EMPTY,
            "1": CellStatus.FRESH,
            "2": CellStatus.ROTTEN,
        }[symbol]

    def _simulate(self) -> None:
        frontier: list[Coord] = []
        fresh = 0
        for coord in self._coords():
            cell = self._cell(coord)
            changed: list[Coord] = []
            if cell.status == CellStatus.ROTTEN:
                self._update(coord, status=CellStatus.SOURCE)
                frontier.append(coord)
                changed.append(coord)
                description = f"[{coord[0]}, {coord[1]}] is rotten: add to frontier"
            elif cell.status == CellStatus.FRESH:
                fresh += 1
                description = f"[{coord[0]}, {coord[1]}] is fresh ({fresh} so far)"
            else:
                description = f"[{coord[0]}, {coord[1]}] is empty"
            self._emit(
                StepKind.SCAN,
                description,
                frontier=frontier,
                changed=changed,
                scan_pos=coord,
                remaining=fresh,
            )

        minute = 0
        while frontier and fresh > 0:
            newly: list[Coord] = []
            for r, c in frontier:
                for dr, dc in constants.SPREAD_DIRECTIONS:
                    nr, nc = r + dr, c + dc
                    if self._in_bounds(nr, nc) and self._cell((nr, nc)).status == CellStatus.FRESH:
                        self._update((nr, nc), symbol="2", status=CellStatus.JUST_ROTTED)
                        newly.append((nr, nc))
                        fresh -= 1
            if not newly:
                break
            minute += 1
            self._recorder.collect(SpreadRound(minute=minute, cells=tuple(newly)))
            self._emit(
                StepKind.EXPAND,
                f"Minute {minute}: {len(newly)} fresh cell(s) infected",
                frontier=frontier,
                changed=newly,
                minute=minute,
                remaining=fresh,
            )
            for coord in newly:
                self._update(coord, status=CellStatus.ROTTEN)
            frontier = newly

        if fresh == 0:
            self._emit(
                StepKind.FINISHED,
                f"All fresh cells rotted after {minute} minute(s)",
                minute=minute,
                remaining=0,
            )
        else:
            logger.debug("%d fresh cells unreachable after %d minutes", fresh, minute)
            self._emit(
                StepKind.IMPOSSIBLE,
                f"{fresh} fresh cell(s) can never be reached; result is -1",
                minute=minute,
                remaining=fresh,
            )


_GENERATORS: dict[str, type[GridGenerator]] = {
    cls.problem: cls for cls in (IslandsGenerator, RottingGenerator)
}


def get_grid_generator(
    problem: str, limits: GenerationLimits = DEFAULT_LIMITS
) -> GridGenerator:
    """Factory for grid generators by problem name."""
    cls = _GENERATORS.get(problem)
    if cls is None:
        raise InvalidInput(
            f"Unknown grid problem: {problem!r}. Available: {sorted(_GENERATORS)}"
        )
    return cls(limits)
