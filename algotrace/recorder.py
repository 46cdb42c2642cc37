"""Trace recorder: appends immutable steps and enforces trace invariants."""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import Any, Generic

from .errors import ContractViolation
from .run_types import DEFAULT_LIMITS, GenerationLimits, TraceStats
from .trace_types import StepKind, Trace, TStep
from .tree_types import CallTree

logger = logging.getLogger(__name__)


class TraceRecorder(Generic[TStep]):
    """Accumulates the steps of a single generator run.

    Each call to :meth:`record` stamps the next ``sequence_id`` and a copy of
    the results collected so far, so every step is a self-contained snapshot.
    """

    def __init__(
        self,
        problem: str,
        step_type: type[TStep],
        limits: GenerationLimits = DEFAULT_LIMITS,
    ):
        self.problem = problem
        self._step_type = step_type
        self._limits = limits
        self._steps: list[TStep] = []
        self._results: list[Any] = []
        self._started = time.perf_counter()
        self._finished = False

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def results(self) -> tuple[Any, ...]:
        return tuple(self._results)

    def collect(self, result: Any) -> None:
        """Append a result; it appears in every step recorded after this call."""
        self._results.append(result)

    def record(self, kind: StepKind, description: str, **fields: Any) -> TStep:
        if self._finished:
            raise ContractViolation(f"Trace for '{self.problem}' is already finished")
        if len(self._steps) >= self._limits.max_trace_steps:
            raise ContractViolation(
                f"Trace for '{self.problem}' exceeded "
                f"{self._limits.max_trace_steps} steps"
            )
        step = self._step_type(
            sequence_id=len(self._steps),
            kind=kind,
            description=description,
            results_so_far=tuple(self._results),
            **fields,
        )
        if self._steps:
            _check_successor(self._steps[-1], step)
        self._steps.append(step)
        logger.debug("[%s #%d] %s: %s", self.problem, step.sequence_id, kind.value, description)
        return step

    def finish(self, tree: CallTree | None = None) -> Trace[TStep]:
        """Seal the recorder and return the immutable trace."""
        if not self._steps:
            raise ContractViolation(f"Generator for '{self.problem}' produced no steps")
        self._finished = True
        kinds = Counter(step.kind.value for step in self._steps)
        stats = TraceStats(
            problem=self.problem,
            steps=len(self._steps),
            results=len(self._results),
            kind_counts=dict(kinds),
            generation_time=time.perf_counter() - self._started,
        )
        logger.info(
            "Generated '%s' trace: %d steps, %d results in %.1fms",
            self.problem,
            stats.steps,
            stats.results,
            stats.generation_time * 1000,
        )
        return Trace(problem=self.problem, steps=tuple(self._steps), tree=tree, stats=stats)


def _check_successor(previous: Any, step: Any) -> None:
    """Raise ContractViolation if *step* cannot follow *previous*."""
    if step.sequence_id != previous.sequence_id + 1:
        raise ContractViolation(
            f"Non-monotonic sequence id: {previous.sequence_id} -> {step.sequence_id}"
        )
    if len(step.results_so_far) < len(previous.results_so_far):
        raise ContractViolation(
            f"Results shrank at step {step.sequence_id}: "
            f"{len(previous.results_so_far)} -> {len(step.results_so_far)}"
        )
    prev_grid = getattr(previous, "grid_snapshot", None)
    grid = getattr(step, "grid_snapshot", None)
    if prev_grid is not None and grid is not None and prev_grid.shape != grid.shape:
        raise ContractViolation(
            f"Grid dimensions changed at step {step.sequence_id}: "
            f"{prev_grid.shape} -> {grid.shape}"
        )


def validate_trace(trace: Trace) -> None:
    """Check every invariant of a finished trace."""
    if not trace.steps:
        raise ContractViolation("Trace is empty")
    if trace.steps[0].sequence_id != 0:
        raise ContractViolation(
            f"Trace starts at sequence id {trace.steps[0].sequence_id}, expected 0"
        )
    for previous, step in zip(trace.steps, trace.steps[1:]):
        _check_successor(previous, step)
