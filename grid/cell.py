"""
cell.py — Grid Position & Cell
===============================
The two value types every other layer is built on.

Design decisions:
  - Position is a frozen dataclass: hashable, structurally equal and
    ordered (x first, then y) so sets of positions can be sorted into a
    stable order for snapshots.
  - y grows downwards (row index).  "North" therefore means y - 1.
  - Cell is immutable.  Obstacles and terrain cost are fixed when the
    grid is built; search bookkeeping lives in algorithms.base.NodeState,
    never on the cell.
"""

from dataclasses import dataclass
from typing import Dict, Any


# ---------------------------------------------------------------------------
# Position
# ---------------------------------------------------------------------------
@dataclass(frozen=True, order=True)
class Position:
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        return cls(x=int(data["x"]), y=int(data["y"]))

    @classmethod
    def of(cls, value) -> "Position":
        """Accept a Position, an (x, y) pair or an {"x", "y"} mapping."""
        if isinstance(value, Position):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        x, y = value
        return cls(int(x), int(y))

    def __repr__(self) -> str:
        return f"({self.x},{self.y})"


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Cell:
    """
    Attributes:
        position    : Where the cell sits.
        is_obstacle : Impassable when True.
        cost        : Terrain cost of entering / leaving the cell (>= 1).
    """

    position:    Position
    is_obstacle: bool  = False
    cost:        float = 1.0

    def __post_init__(self):
        if self.cost < 1:
            raise ValueError(f"cell cost must be >= 1, got {self.cost} at {self.position!r}")

    @property
    def passable(self) -> bool:
        return not self.is_obstacle

    def to_dict(self) -> dict:
        return {
            "x":           self.position.x,
            "y":           self.position.y,
            "is_obstacle": self.is_obstacle,
            "cost":        self.cost,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cell":
        return cls(
            position=Position(int(data["x"]), int(data["y"])),
            is_obstacle=data.get("is_obstacle", False),
            cost=data.get("cost", 1.0),
        )
