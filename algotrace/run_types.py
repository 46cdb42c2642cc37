"""Run and playback configuration types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import constants


@dataclass(frozen=True)
class PlaybackConfig:
    """Groups playback cadence configuration."""

    short_interval_ms: int = constants.SHORT_INTERVAL_MS
    long_interval_ms: int = constants.LONG_INTERVAL_MS
    speed: float = 1.0

    def clamped_speed(self) -> float:
        return min(max(self.speed, constants.MIN_SPEED), constants.MAX_SPEED)


@dataclass(frozen=True)
class GenerationLimits:
    """Input ceilings applied at the API boundary."""

    max_subset_elements: int = constants.MAX_SUBSET_ELEMENTS
    max_permutation_elements: int = constants.MAX_PERMUTATION_ELEMENTS
    max_parentheses_pairs: int = constants.MAX_PARENTHESES_PAIRS
    max_phone_digits: int = constants.MAX_PHONE_DIGITS
    max_combination_candidates: int = constants.MAX_COMBINATION_CANDIDATES
    max_combination_target: int = constants.MAX_COMBINATION_TARGET
    max_combination_tree_nodes: int = constants.MAX_COMBINATION_TREE_NODES
    max_grid_rows: int = constants.MAX_GRID_ROWS
    max_grid_cols: int = constants.MAX_GRID_COLS
    max_prefix_sum_values: int = constants.MAX_PREFIX_SUM_VALUES
    max_trace_steps: int = constants.MAX_TRACE_STEPS


DEFAULT_LIMITS = GenerationLimits()


@dataclass
class TraceStats:
    """Returned generation metrics for one trace."""

    problem: str = ""
    steps: int = 0
    results: int = 0
    kind_counts: dict[str, int] = field(default_factory=dict)
    generation_time: float = 0.0

    def report(self) -> str:
        lines = [
            "═══ Trace Statistics ═══",
            f"  Problem: {self.problem}",
            f"  Steps:   {self.steps}",
            f"  Results: {self.results}",
            f"  Time:    {self.generation_time * 1000:.1f}ms",
            "",
            f"  {'Kind':<12} {'Count':>6}",
            f"  {'─' * 12} {'─' * 6}",
        ]
        for kind, count in sorted(self.kind_counts.items()):
            lines.append(f"  {kind:<12} {count:>6}")
        return "\n".join(lines)
