"""
stepper.py — Trace playback cursor
===================================
The Stepper is the ONLY object a renderer needs once a run is recorded.
It holds a cursor into a finished trace and exposes next / previous /
seek / rewind / jump_to_end.  It never runs a search itself.

State machine:
    IDLE      →  load()        →  AT_START
    AT_START  →  next()        →  MIDDLE  (or AT_END for a 1-step trace)
    any       →  jump_to_end() →  AT_END
    any       →  reset()       →  IDLE

next() and previous() clamp at the ends and return the current step.
seek() is the strict variant: an index outside the trace raises
IndexOutOfRange.

Works over anything exposing `step_count` and `at(index)`: a search
Trace, a CspTrace or a BlocksTrace.

Thread safety:
  Not thread-safe.  Drive it from the renderer's own thread.
"""

from enum import Enum
from typing import Any, Callable, Optional

from grid import IndexOutOfRange


class StepperState(Enum):
    IDLE     = "idle"
    AT_START = "at_start"
    MIDDLE   = "middle"
    AT_END   = "at_end"


class Stepper:
    """
    Attributes:
        trace   : The loaded trace (None while IDLE).
        index   : Cursor position, -1 while IDLE.
        on_step : Optional callback(step) fired every time the cursor moves.
                  A renderer hooks its re-draw here.
    """

    def __init__(self, trace=None, on_step: Optional[Callable[[Any], None]] = None):
        self.trace   = None
        self.index:   int = -1
        self.on_step: Optional[Callable[[Any], None]] = on_step
        if trace is not None:
            self.load(trace)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, trace) -> None:
        """Attach a trace and show its first step."""
        self.trace = trace
        self.index = -1
        if trace.step_count:
            self._goto(0)

    def reset(self) -> None:
        """Back to IDLE; load() must be called again."""
        self.trace = None
        self.index = -1

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def seek(self, index: int):
        count = self.step_count
        if not 0 <= index < count:
            raise IndexOutOfRange(index, count)
        return self._goto(index)

    def next(self):
        if self.step_count and self.index < self.step_count - 1:
            return self._goto(self.index + 1)
        return self.current

    def previous(self):
        if self.index > 0:
            return self._goto(self.index - 1)
        return self.current

    def rewind(self):
        if self.step_count:
            return self._goto(0)
        return None

    def jump_to_end(self):
        if self.step_count:
            return self._goto(self.step_count - 1)
        return None

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current(self):
        if self.trace is not None and 0 <= self.index < self.trace.step_count:
            return self.trace.at(self.index)
        return None

    @property
    def step_count(self) -> int:
        return self.trace.step_count if self.trace is not None else 0

    @property
    def at_start(self) -> bool:
        return self.index <= 0

    @property
    def at_end(self) -> bool:
        return self.index >= self.step_count - 1

    @property
    def state(self) -> StepperState:
        if self.trace is None or self.index < 0:
            return StepperState.IDLE
        if self.at_end:
            return StepperState.AT_END
        if self.at_start:
            return StepperState.AT_START
        return StepperState.MIDDLE

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _goto(self, index: int):
        moved = index != self.index
        self.index = index
        step = self.trace.at(index)
        if moved and self.on_step is not None:
            self.on_step(step)
        return step
