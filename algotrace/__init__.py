"""Algorithm trace recorder and playback controller."""

from .api import (  # noqa: F401
    available_problems,
    dump_mermaid,
    dump_trace,
    generate_backtracking_trace,
    generate_grid_trace,
    generate_prefix_sum_trace,
    generate_trace,
)
from .errors import ContractViolation, InvalidInput  # noqa: F401
from .playback import PlaybackClock, PlaybackController  # noqa: F401
from .trace_types import StepKind, Trace  # noqa: F401
