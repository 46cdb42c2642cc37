"""Playback controller: replays a recorded trace without touching it."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Generic

from .errors import ContractViolation
from .run_types import PlaybackConfig
from .trace_types import StepKind, Trace, TStep

logger = logging.getLogger(__name__)

# Bookkeeping kinds flash by; everything else changes visible state
SHORT_INTERVAL_KINDS: frozenset[StepKind] = frozenset({StepKind.SCAN, StepKind.RECORD})


def tick_interval_ms(kind: StepKind, config: PlaybackConfig = PlaybackConfig()) -> float:
    """Delay to hold a step of *kind* on screen before the next tick."""
    if kind in SHORT_INTERVAL_KINDS:
        base = config.short_interval_ms
    else:
        base = config.long_interval_ms
    return base / config.clamped_speed()


class PlaybackPhase(str, Enum):
    IDLE = "idle"
    READY = "ready"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True)
class PlaybackState:
    trace: Trace | None
    current_index: int
    running: bool


class PlaybackController(Generic[TStep]):
    """State machine over one bound trace.

    The controller owns only ``current_index`` and ``running``; the trace is
    held read-only, so several controllers may replay the same trace. Out of
    range commands are no-ops rather than errors.
    """

    def __init__(
        self,
        trace: Trace[TStep] | None = None,
        config: PlaybackConfig = PlaybackConfig(),
    ):
        self._trace: Trace[TStep] | None = None
        self._index = 0
        self._running = False
        self.config = config
        if trace is not None:
            self.bind(trace)

    # ── commands ─────────────────────────────────────────────────

    def bind(self, trace: Trace[TStep]) -> None:
        """Replace any previous trace and rewind to the first step."""
        if trace is None or len(trace) == 0:
            raise ContractViolation("Cannot bind an empty trace")
        self._trace = trace
        self._index = 0
        self._running = False
        logger.debug("Bound trace '%s' (%d steps)", trace.problem, len(trace))

    def unbind(self) -> None:
        self._trace = None
        self._index = 0
        self._running = False

    def play(self) -> None:
        if self._trace is None or self.is_at_end():
            self._running = False
            return
        self._running = True

    def pause(self) -> None:
        self._running = False

    def toggle(self) -> None:
        if self._running:
            self.pause()
        else:
            self.play()

    def step(self) -> bool:
        """Advance one step; valid while paused or playing."""
        if self._trace is None:
            return False
        if self.is_at_end():
            self._running = False
            return False
        self._index += 1
        return True

    def reset(self) -> None:
        self._index = 0
        self._running = False

    def tick(self) -> bool:
        """Clock callback: advance while running, stopping at the last step."""
        if self._trace is None or not self._running:
            return False
        if self.is_at_end():
            self._running = False
            return False
        self._index += 1
        if self.is_at_end():
            self._running = False
            logger.debug("Playback of '%s' finished", self._trace.problem)
        return True

    def set_speed(self, speed: float) -> None:
        self.config = replace(self.config, speed=speed)

    # ── observers ────────────────────────────────────────────────

    @property
    def trace(self) -> Trace[TStep] | None:
        return self._trace

    @property
    def current_index(self) -> int:
        return self._index

    def current_step(self) -> TStep:
        if self._trace is None:
            raise ContractViolation("No trace bound")
        return self._trace.steps[self._index]

    def is_at_end(self) -> bool:
        return self._trace is not None and self._index >= len(self._trace) - 1

    def is_playing(self) -> bool:
        return self._running

    @property
    def phase(self) -> PlaybackPhase:
        if self._trace is None:
            return PlaybackPhase.IDLE
        if self._running:
            return PlaybackPhase.PLAYING
        if self.is_at_end():
            return PlaybackPhase.FINISHED
        return PlaybackPhase.READY

    def progress(self) -> str:
        total = len(self._trace) if self._trace is not None else 0
        current = self._index + 1 if self._trace is not None else 0
        return f"{current} / {total}"

    def tick_interval(self) -> float:
        return tick_interval_ms(self.current_step().kind, self.config)

    def state(self) -> PlaybackState:
        return PlaybackState(
            trace=self._trace, current_index=self._index, running=self._running
        )


class PlaybackClock:
    """Drives a controller in real time until it stops playing.

    ``sleep`` and ``on_step`` are injectable so the clock can run headless.
    """

    def __init__(
        self,
        controller: PlaybackController,
        on_step: Callable[[object], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._controller = controller
        self._on_step = on_step
        self._sleep = sleep

    def run(self) -> int:
        """Play from the current step; returns the number of ticks taken."""
        controller = self._controller
        if self._on_step is not None:
            self._on_step(controller.current_step())
        controller.play()
        ticks = 0
        while controller.is_playing():
            self._sleep(controller.tick_interval() / 1000)
            if controller.tick():
                ticks += 1
                if self._on_step is not None:
                    self._on_step(controller.current_step())
        return ticks
