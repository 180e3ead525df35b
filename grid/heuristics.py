"""
heuristics.py — Heuristic catalogue
====================================
All heuristics take two Positions and return a float estimate of the
remaining cost.

  • manhattan   – |Δx| + |Δy|          (admissible on 4-connected grids)
  • euclidean   – √(Δx² + Δy²)        (admissible everywhere)
  • octile      – max(|Δx|,|Δy|) + (√2-1)·min(|Δx|,|Δy|)
                                       (admissible with diagonal moves)
  • chebyshev   – max(|Δx|,|Δy|)      (flat rings, handy for plateaus)
  • zero        – h = 0, turns A* into uniform-cost search

Terrain costs are >= 1, so every estimate above stays a lower bound on
weighted grids too.
"""

import math
from typing import Callable, Dict, Union

from grid.cell import Position

Heuristic = Callable[[Position, Position], float]


def manhattan(a: Position, b: Position) -> float:
    return abs(a.x - b.x) + abs(a.y - b.y)

def euclidean(a: Position, b: Position) -> float:
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2)

def octile(a: Position, b: Position) -> float:
    dx = abs(a.x - b.x)
    dy = abs(a.y - b.y)
    return max(dx, dy) + (math.sqrt(2) - 1) * min(dx, dy)

def chebyshev(a: Position, b: Position) -> float:
    return max(abs(a.x - b.x), abs(a.y - b.y))

def zero(a: Position, b: Position) -> float:
    """h=0 → A* degrades to uniform-cost search.  Useful for teaching."""
    return 0.0

HEURISTICS: Dict[str, Heuristic] = {
    "manhattan": manhattan,
    "euclidean": euclidean,
    "octile":    octile,
    "chebyshev": chebyshev,
    "zero":      zero,
}


def resolve_heuristic(value: Union[str, Heuristic, None], default: Heuristic = manhattan) -> Heuristic:
    """Map a catalogue key or a callable to a heuristic function."""
    if value is None:
        return default
    if callable(value):
        return value
    try:
        return HEURISTICS[value]
    except KeyError:
        raise ValueError(
            f"Unknown heuristic: {value!r} (expected one of {', '.join(HEURISTICS)})"
        ) from None


def heuristic_name(fn: Heuristic) -> str:
    for key, candidate in HEURISTICS.items():
        if candidate is fn:
            return key
    return getattr(fn, "__name__", "custom")
