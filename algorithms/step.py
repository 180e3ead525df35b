"""
step.py — Search Step Snapshot
===============================
The engine appends one Step per expansion.  A Step is a frozen-in-time
picture of everything a renderer needs to draw one frame:

    • Which cell is current, which are open, which are closed
    • The path from the current cell back to the start
    • Algorithm-specific numbers (g/h/f, temperature, acceptance, …)
    • Which line of pseudocode produced it
    • A plain-English explanation of *why* this step happened

Design decisions:
  - Step is a frozen dataclass with tuple fields.  The engine is the only
    writer; the stepper / renderer are pure readers.
  - `extra` is a free-form mapping so different algorithms can push
    whatever extra info they want.  The Step keeps a read-only copy; a
    reader cannot edit a recorded frame.  Positions inside it serialise
    as {"x", "y"}.
  - to_dict() produces a JSON-compatible record and from_dict() rebuilds
    an equal Step, so traces can be shipped to any renderer.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from grid import Position


# ---------------------------------------------------------------------------
# Outcome: how a run (or a budgeted slice of it) ended
# ---------------------------------------------------------------------------
class Outcome(Enum):
    SUCCEEDED            = "succeeded"              # current == goal
    EXHAUSTED            = "exhausted"              # open set ran dry
    STUCK                = "stuck"                  # local search found no move
    STEP_BUDGET_EXCEEDED = "step_budget_exceeded"   # resumable


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        index           : 0-based index of this step in the run.
        current         : Cell being expanded (or stood on) right now.
        open_set        : Frontier contents in extraction order.
        closed_set      : Cells expanded so far, in closing order.
        path            : current → … → start.
        extra           : Algorithm-specific fields:
                            • "g", "h", "f"            – A* / Greedy scores of current
                            • "stuck"                  – Hill Climbing
                            • "temperature", "neighbor", "current_cost",
                              "neighbor_cost", "acceptance_probability",
                              "accepted"               – Simulated Annealing
        status          : Run status after this step ("running", "succeeded", …).
        pseudocode_line : 0-based index of the pseudocode line executing now.
        explanation     : Human-readable "why" text.
    """

    index:           int                    = 0
    current:         Optional[Position]     = None
    open_set:        Tuple[Position, ...]   = ()
    closed_set:      Tuple[Position, ...]   = ()
    path:            Tuple[Position, ...]   = ()
    extra:           Mapping[str, Any]      = field(default_factory=dict)
    status:          str                    = "running"
    pseudocode_line: int                    = 0
    explanation:     str                    = ""

    def __post_init__(self):
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def is_final(self) -> bool:
        return self.status != "running"

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "index":           self.index,
            "current":         self.current.to_dict() if self.current else None,
            "open_set":        [p.to_dict() for p in self.open_set],
            "closed_set":      [p.to_dict() for p in self.closed_set],
            "path":            [p.to_dict() for p in self.path],
            "extra":           {k: _encode(v) for k, v in self.extra.items()},
            "status":          self.status,
            "pseudocode_line": self.pseudocode_line,
            "explanation":     self.explanation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        current = data.get("current")
        return cls(
            index=data["index"],
            current=Position.from_dict(current) if current else None,
            open_set=_positions(data.get("open_set", [])),
            closed_set=_positions(data.get("closed_set", [])),
            path=_positions(data.get("path", [])),
            extra={k: _decode(v) for k, v in data.get("extra", {}).items()},
            status=data.get("status", "running"),
            pseudocode_line=data.get("pseudocode_line", 0),
            explanation=data.get("explanation", ""),
        )


def _positions(items: Iterable[Dict[str, int]]) -> Tuple[Position, ...]:
    return tuple(Position.from_dict(p) for p in items)

def _encode(value: Any) -> Any:
    if isinstance(value, Position):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value

def _decode(value: Any) -> Any:
    if isinstance(value, dict) and set(value) == {"x", "y"}:
        return Position.from_dict(value)
    if isinstance(value, list):
        return tuple(_decode(v) for v in value)
    return value


# ---------------------------------------------------------------------------
# Convenience builder so the engine doesn't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Mutable scratch-pad used to construct Steps cleanly.

    Usage inside the engine:
        sb = StepBuilder()
        sb.set_current(p)
        sb.set_frontier(frontier.positions())
        sb.explanation = "Expand (1,2): it has the smallest f."
        steps.append(sb.build(index=3))
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self.current:         Optional[Position] = None
        self.open_set:        List[Position]     = []
        self.closed_set:      List[Position]     = []
        self.path:            List[Position]     = []
        self.extra:           Dict[str, Any]     = {}
        self.status:          str                = "running"
        self.pseudocode_line: int                = 0
        self.explanation:     str                = ""

    # -- helpers --
    def set_current(self, position: Position):
        self.current = position

    def set_frontier(self, positions: Iterable[Position]):
        self.open_set = list(positions)

    def set_closed(self, positions: Iterable[Position]):
        self.closed_set = list(positions)

    def set_path(self, path: Iterable[Position]):
        self.path = list(path)

    def build(self, index: int = 0) -> Step:
        return Step(
            index=index,
            current=self.current,
            open_set=tuple(self.open_set),
            closed_set=tuple(self.closed_set),
            path=tuple(self.path),
            extra=dict(self.extra),
            status=self.status,
            pseudocode_line=self.pseudocode_line,
            explanation=self.explanation,
        )
