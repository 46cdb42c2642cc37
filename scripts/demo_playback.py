"""Demo: two independent controllers replaying one recorded trace."""

from algotrace.api import generate_backtracking_trace, generate_grid_trace
from algotrace.playback import PlaybackController
from algotrace.render import format_step, render_step
from algotrace.trace_types import StepKind

GRID = """\
11000
11000
00100
00011
"""


def main():
    print("=" * 60)
    print("SUBSETS of [1, 2, 3]")
    print("=" * 60)
    trace = generate_backtracking_trace("subsets", [1, 2, 3])
    fast = PlaybackController(trace)
    slow = PlaybackController(trace)

    fast.play()
    while fast.is_playing():
        fast.tick()
    for _ in range(3):
        slow.step()

    print(f"fast view: {fast.progress()}  {format_step(fast.current_step())}")
    print(f"slow view: {slow.progress()}  {format_step(slow.current_step())}")
    print(trace.stats.report())

    print()
    print("=" * 60)
    print("ISLANDS")
    print("=" * 60)
    grid_trace = generate_grid_trace(GRID, "islands")
    for step in grid_trace.steps_of(StepKind.FOUND):
        print(render_step(step))
        print()
    print(render_step(grid_trace.last))


if __name__ == "__main__":
    main()
