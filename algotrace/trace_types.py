"""Trace data types for step-by-step replay."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Generic, Iterator, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from . import constants
from .grid_types import Coord, GridSnapshot
from .run_types import TraceStats
from .tree_types import CallTree, NodeStatus


class StepKind(str, Enum):
    # Backtracking
    START = "start"
    CHOOSE = "choose"
    COLLECT = "collect"
    UNDO = "undo"
    PRUNE = "prune"
    # Grid
    SCAN = "scan"
    FOUND = "found"
    EXPAND = "expand"
    FINISHED = "finished"
    IMPOSSIBLE = "impossible"
    # Prefix sum
    ADD = "add"
    RECORD = "record"
    MATCH = "match"


TERMINAL_KINDS: frozenset[StepKind] = frozenset(
    {StepKind.FINISHED, StepKind.IMPOSSIBLE}
)


class Step(BaseModel):
    """Fields shared by every step variant.

    ``results_so_far`` is a copy of the accumulated output as it existed
    when the step was recorded.
    """

    model_config = ConfigDict(frozen=True)

    sequence_id: int
    kind: StepKind
    description: str
    results_so_far: tuple[Any, ...] = ()


class BacktrackStep(Step):
    variant: Literal["backtracking"] = constants.VARIANT_BACKTRACKING
    results_so_far: tuple[Union[tuple[int, ...], str], ...] = ()
    path: tuple[Union[int, str], ...] = ()
    focus_node_id: str = constants.ROOT_NODE_ID
    # Sparse: nodes not listed are NodeStatus.DEFAULT
    node_statuses: tuple[tuple[str, NodeStatus], ...] = ()
    counters: tuple[tuple[str, int], ...] = ()

    def status_of(self, node_id: str) -> NodeStatus:
        for nid, status in self.node_statuses:
            if nid == node_id:
                return status
        return NodeStatus.DEFAULT

    def counter(self, name: str, default: int = 0) -> int:
        return dict(self.counters).get(name, default)


class RegionResult(BaseModel):
    """A connected region, numbered in the order its root was scanned."""

    model_config = ConfigDict(frozen=True)

    number: int
    root: Coord


class SpreadRound(BaseModel):
    """One simultaneous spreading round."""

    model_config = ConfigDict(frozen=True)

    minute: int
    cells: tuple[Coord, ...]


class GridStep(Step):
    variant: Literal["grid"] = constants.VARIANT_GRID
    results_so_far: tuple[Union[RegionResult, SpreadRound], ...] = ()
    grid_snapshot: GridSnapshot
    frontier: tuple[Coord, ...] = ()
    changed: tuple[Coord, ...] = ()
    scan_pos: Coord | None = None
    region_count: int = 0
    minute: int = 0
    remaining: int = 0


class PrefixSumStep(Step):
    variant: Literal["prefix_sum"] = constants.VARIANT_PREFIX_SUM
    # End indices of matching subarrays, one entry per match
    results_so_far: tuple[int, ...] = ()
    index: int = -1
    value: int = 0
    prefix_sum: int = 0
    target: int = 0
    prefix_counts: tuple[tuple[int, int], ...] = ()


AnyStep = Annotated[
    Union[BacktrackStep, GridStep, PrefixSumStep], Field(discriminator="variant")
]
_STEPS_ADAPTER = TypeAdapter(list[AnyStep])

TStep = TypeVar("TStep", bound=Step)


@dataclass(frozen=True)
class Trace(Generic[TStep]):
    """Complete, immutable trace of one generator run.

    ``tree`` is only set for backtracking traces.
    """

    problem: str
    steps: tuple[TStep, ...] = ()
    tree: CallTree | None = None
    stats: TraceStats = field(default_factory=TraceStats, compare=False)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[TStep]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> TStep:
        return self.steps[index]

    @property
    def last(self) -> TStep:
        return self.steps[-1]

    @property
    def final_results(self) -> tuple[Any, ...]:
        return self.steps[-1].results_so_far if self.steps else ()

    def kinds(self) -> list[StepKind]:
        return [s.kind for s in self.steps]

    def steps_of(self, kind: StepKind) -> list[TStep]:
        return [s for s in self.steps if s.kind == kind]

    def to_json(self, indent: int | None = None) -> str:
        return _STEPS_ADAPTER.dump_json(list(self.steps), indent=indent).decode("utf-8")


def steps_from_json(data: str) -> list[Step]:
    """Rebuild typed steps from :meth:`Trace.to_json` output."""
    return _STEPS_ADAPTER.validate_json(data)
