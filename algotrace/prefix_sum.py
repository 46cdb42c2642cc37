"""Prefix-sum hash-map trace generator (count subarrays summing to k)."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from . import constants
from .errors import InvalidInput
from .parsing import parse_numbers
from .recorder import TraceRecorder
from .run_types import DEFAULT_LIMITS, GenerationLimits
from .trace_types import PrefixSumStep, StepKind, Trace

logger = logging.getLogger(__name__)


def _parse_target(k: Any) -> int:
    if isinstance(k, str):
        try:
            return int(k.strip())
        except ValueError:
            raise InvalidInput(f"k must be an integer, got {k!r}") from None
    if isinstance(k, bool) or not isinstance(k, int):
        raise InvalidInput(f"k must be an integer, got {k!r}")
    return k


def generate_subarray_sum_trace(
    values: str | Sequence[int],
    k: Any,
    limits: GenerationLimits = DEFAULT_LIMITS,
) -> Trace[PrefixSumStep]:
    """Record every add / match / record transition of the prefix-sum scan.

    ``results_so_far`` holds the end index of each matching subarray, one
    entry per match, so its final length is the answer.
    """
    numbers = parse_numbers(values)
    target = _parse_target(k)
    if not numbers:
        raise InvalidInput("Enter at least one number")
    if len(numbers) > limits.max_prefix_sum_values:
        raise InvalidInput(
            f"At most {limits.max_prefix_sum_values} numbers are supported, "
            f"got {len(numbers)}"
        )

    recorder: TraceRecorder[PrefixSumStep] = TraceRecorder(
        constants.PROBLEM_SUBARRAY_SUM, PrefixSumStep, limits
    )
    # Insertion-ordered, so snapshots are deterministic
    counts: dict[int, int] = {0: 1}
    prefix = 0

    recorder.record(
        StepKind.RECORD,
        "Initialise: prefix sum 0 seen once (the empty prefix)",
        target=target,
        prefix_counts=tuple(counts.items()),
    )

    for index, value in enumerate(numbers):
        prefix += value
        recorder.record(
            StepKind.ADD,
            f"Add element {value} at index {index}: prefix sum is {prefix}",
            index=index,
            value=value,
            prefix_sum=prefix,
            target=target,
            prefix_counts=tuple(counts.items()),
        )

        wanted = prefix - target
        seen = counts.get(wanted, 0)
        if seen > 0:
            for _ in range(seen):
                recorder.collect(index)
            recorder.record(
                StepKind.MATCH,
                f"Prefix sum {wanted} seen {seen} time(s): "
                f"{seen} subarray(s) ending at index {index} sum to {target}",
                index=index,
                value=value,
                prefix_sum=prefix,
                target=target,
                prefix_counts=tuple(counts.items()),
            )

        counts[prefix] = counts.get(prefix, 0) + 1
        recorder.record(
            StepKind.RECORD,
            f"Record prefix sum {prefix} (count {counts[prefix]})",
            index=index,
            value=value,
            prefix_sum=prefix,
            target=target,
            prefix_counts=tuple(counts.items()),
        )

    return recorder.finish()
