"""
trace.py — Recorded run
========================
An immutable, ordered tuple of Steps plus the facts needed to replay
them anywhere: which algorithm, start, goal and how the run ended.

    trace.at(0).current == start
    trace.at(0).closed_set == ()
    trace.at(trace.step_count - 1)  → the final frame

Traces round-trip through to_dict() / to_json() so a renderer in any
language can consume them.
"""

import json
from typing import Any, Dict, Iterator, Optional, Sequence

from grid import IndexOutOfRange, Position
from algorithms.step import Outcome, Step


class Trace:
    def __init__(
        self,
        steps: Sequence[Step],
        algorithm: str = "",
        start: Optional[Position] = None,
        goal: Optional[Position] = None,
        outcome: Optional[Outcome] = None,
    ):
        self._steps    = tuple(steps)
        self.algorithm = algorithm
        self.start     = start
        self.goal      = goal
        self.outcome   = outcome

    @property
    def steps(self):
        return self._steps

    @property
    def step_count(self) -> int:
        return len(self._steps)

    def at(self, index: int) -> Step:
        if not 0 <= index < len(self._steps):
            raise IndexOutOfRange(index, len(self._steps))
        return self._steps[index]

    @property
    def final(self) -> Optional[Step]:
        return self._steps[-1] if self._steps else None

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCEEDED

    @property
    def path(self) -> tuple:
        """start → goal once the run succeeded, else ()."""
        if not self.succeeded:
            return ()
        return tuple(reversed(self._steps[-1].path))

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Trace):
            return NotImplemented
        return (
            self._steps == other._steps
            and self.algorithm == other.algorithm
            and self.start == other.start
            and self.goal == other.goal
            and self.outcome == other.outcome
        )

    def __repr__(self) -> str:
        outcome = self.outcome.value if self.outcome else None
        return f"Trace({self.algorithm!r}, steps={len(self._steps)}, outcome={outcome})"

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "start":     self.start.to_dict() if self.start else None,
            "goal":      self.goal.to_dict() if self.goal else None,
            "outcome":   self.outcome.value if self.outcome else None,
            "steps":     [s.to_dict() for s in self._steps],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trace":
        start   = data.get("start")
        goal    = data.get("goal")
        outcome = data.get("outcome")
        return cls(
            steps=[Step.from_dict(s) for s in data.get("steps", [])],
            algorithm=data.get("algorithm", ""),
            start=Position.from_dict(start) if start else None,
            goal=Position.from_dict(goal) if goal else None,
            outcome=Outcome(outcome) if outcome else None,
        )

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, text: str) -> "Trace":
        return cls.from_dict(json.loads(text))
