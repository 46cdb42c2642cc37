"""Command-line front end: generate a trace, then replay or dump it."""

from __future__ import annotations

import argparse
import logging
import sys
import time

from . import constants
from .api import available_problems, dump_mermaid, generate_trace
from .errors import InvalidInput
from .playback import PlaybackClock, PlaybackController
from .render import render_step
from .run_types import PlaybackConfig

logger = logging.getLogger(__name__)

DEMO_INPUTS: dict[str, tuple[str, str | None]] = {
    constants.PROBLEM_SUBSETS: ("1,2,3", None),
    constants.PROBLEM_PERMUTATIONS: ("1,2,3", None),
    constants.PROBLEM_PARENTHESES: ("3", None),
    constants.PROBLEM_LETTER_COMBINATIONS: ("23", None),
    constants.PROBLEM_COMBINATION_SUM: ("2,3,6,7", "7"),
    constants.PROBLEM_ISLANDS: ("11110\n11010\n11000\n00000", None),
    constants.PROBLEM_ROTTING: ("211\n110\n011", None),
    constants.PROBLEM_SUBARRAY_SUM: ("1, 2, 3, -2, 5", "3"),
}


def _no_sleep(_seconds: float) -> None:
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="algotrace",
        description="Record an algorithm run, then replay it step by step",
    )
    parser.add_argument("problem", choices=available_problems(),
                        help="Algorithm to trace")
    parser.add_argument("input", nargs="?", default=None,
                        help="Numbers, n, digits or grid rows separated by '/' "
                             "(default: a built-in demo)")
    parser.add_argument("--target", "-k", default=None,
                        help="Target sum (combination-sum) or k (subarray-sum)")
    parser.add_argument("--speed", "-s", type=float, default=1.0,
                        help="Playback speed multiplier (default: 1.0)")
    parser.add_argument("--no-sleep", action="store_true",
                        help="Replay without waiting between steps")
    parser.add_argument("--json", action="store_true",
                        help="Print the trace as JSON instead of replaying it")
    parser.add_argument("--mermaid", action="store_true",
                        help="Print the final call tree as a Mermaid flowchart")
    parser.add_argument("--stats", action="store_true",
                        help="Print generation statistics after the replay")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    demo_input, demo_target = DEMO_INPUTS[args.problem]
    raw = args.input if args.input is not None else demo_input
    target = args.target if args.target is not None else demo_target
    if args.problem in constants.GRID_PROBLEMS:
        raw = raw.replace("/", "\n")

    try:
        trace = generate_trace(args.problem, raw, target)
    except InvalidInput as exc:
        logger.warning("Rejected input for %s: %s", args.problem, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(trace.to_json(indent=2))
        return 0

    if args.mermaid:
        if trace.tree is None:
            print(f"error: '{args.problem}' has no call tree", file=sys.stderr)
            return 2
        print(dump_mermaid(trace))
        return 0

    controller = PlaybackController(trace, PlaybackConfig(speed=args.speed))
    clock = PlaybackClock(
        controller,
        on_step=lambda step: print(render_step(step)),
        sleep=_no_sleep if args.no_sleep else time.sleep,
    )
    clock.run()

    if args.stats:
        print()
        print(trace.stats.report())
    return 0


if __name__ == "__main__":
    sys.exit(main())
