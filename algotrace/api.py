"""Composable API functions for generating and inspecting traces.

Each function corresponds to a CLI workflow but is callable programmatically
without argparse. All of them validate input fully before recording a step.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from . import constants
from .backtracking import get_backtracking_generator
from .errors import InvalidInput
from .grid_bfs import get_grid_generator
from .prefix_sum import generate_subarray_sum_trace
from .render import render_step, tree_to_mermaid
from .run_types import DEFAULT_LIMITS, GenerationLimits
from .trace_types import BacktrackStep, GridStep, PrefixSumStep, Trace

logger = logging.getLogger(__name__)


def generate_backtracking_trace(
    problem: str,
    values: Any,
    target: Any = None,
    limits: GenerationLimits = DEFAULT_LIMITS,
) -> Trace[BacktrackStep]:
    """Run a backtracking search and return its trace.

    Args:
        problem: One of ``constants.BACKTRACKING_PROBLEMS``.
        values: Numbers (list or ``"1,2,3"``), ``n`` for parentheses, or a
            digit string for letter combinations.
        target: Target sum, only used by combination sum.
        limits: Input ceilings.

    Returns:
        The immutable trace, with the explored call tree attached.

    Raises:
        InvalidInput: if the input is malformed or above the size ceiling.
    """
    logger.info("Generating backtracking trace (%s)", problem)
    generator = get_backtracking_generator(problem, limits)
    if problem == constants.PROBLEM_COMBINATION_SUM:
        return generator.generate(values, target)
    return generator.generate(values)


def generate_grid_trace(
    raw_grid: str | Sequence[str],
    problem: str = constants.PROBLEM_ISLANDS,
    limits: GenerationLimits = DEFAULT_LIMITS,
) -> Trace[GridStep]:
    """Parse grid text and return the BFS trace for *problem*.

    Raises:
        InvalidInput: on malformed grid text; ``row``/``column`` locate the
            offending cell.
    """
    logger.info("Generating grid trace (%s)", problem)
    return get_grid_generator(problem, limits).generate(raw_grid)


def generate_prefix_sum_trace(
    values: str | Sequence[int],
    k: Any,
    limits: GenerationLimits = DEFAULT_LIMITS,
) -> Trace[PrefixSumStep]:
    """Return the prefix-sum hash-map trace for "subarrays summing to k"."""
    logger.info("Generating prefix-sum trace (k=%s)", k)
    return generate_subarray_sum_trace(values, k, limits)


def generate_trace(
    problem: str,
    values: Any,
    extra: Any = None,
    limits: GenerationLimits = DEFAULT_LIMITS,
) -> Trace:
    """Dispatch to the right generator by problem name.

    *extra* is the target for combination sum and ``k`` for subarray sum.
    """
    if problem in constants.BACKTRACKING_PROBLEMS:
        return generate_backtracking_trace(problem, values, extra, limits)
    if problem in constants.GRID_PROBLEMS:
        return generate_grid_trace(values, problem, limits)
    if problem == constants.PROBLEM_SUBARRAY_SUM:
        return generate_prefix_sum_trace(values, extra, limits)
    raise InvalidInput(f"Unknown problem: {problem!r}. Available: {available_problems()}")


def available_problems() -> list[str]:
    return [
        *constants.BACKTRACKING_PROBLEMS,
        *constants.GRID_PROBLEMS,
        constants.PROBLEM_SUBARRAY_SUM,
    ]


def dump_trace(trace: Trace) -> str:
    """Return a human-readable text dump of every step."""
    return "\n".join(render_step(step) for step in trace.steps)


def dump_mermaid(trace: Trace[BacktrackStep], index: int = -1) -> str:
    """Mermaid flowchart of a backtracking trace's call tree at step *index*."""
    if trace.tree is None:
        raise InvalidInput(f"Trace '{trace.problem}' has no call tree")
    return tree_to_mermaid(trace.tree, trace.steps[index])
