"""
grid.py — Grid Container & Generator
=====================================
Single source of truth for the terrain.  Algorithms and the renderer
both talk to this object, and neither may change it.

Responsibilities:
  1. Cell lookup                            (cell / in_bounds / is_passable)
  2. Adjacency queries                      (neighbors, cost, heuristic)
  3. Grid-generation factory methods        (random walls, seeded)
  4. Import / export as ASCII map           (text ↔ grid)
  5. Serialisation round-trip               (to_dict / from_dict)

Design decisions:
  - Cells stored in a plain dict keyed by Position for O(1) lookup.
  - Neighbour order is fixed (N, E, S, W by default) so that traversal
    order, and hence every frontier tie, is reproducible.
  - Edge cost is the blend of the two cells' terrain costs; a diagonal
    step costs √2 times that and may not cut the corner of an obstacle.
"""

import math
import random
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from grid.cell import Cell, Position
from grid.errors import InvalidPosition, OutOfBounds
from grid.heuristics import Heuristic, heuristic_name, manhattan, resolve_heuristic


# ---------------------------------------------------------------------------
# Directions  (y grows downwards, so North is y - 1)
# ---------------------------------------------------------------------------
DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "N":  (0, -1),
    "NE": (1, -1),
    "E":  (1, 0),
    "SE": (1, 1),
    "S":  (0, 1),
    "SW": (-1, 1),
    "W":  (-1, 0),
    "NW": (-1, -1),
}

ORTHOGONAL_ORDER: Tuple[str, ...] = ("N", "E", "S", "W")
DIAGONAL_ORDER:   Tuple[str, ...] = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

# ASCII map symbols
OBSTACLE_CHAR = "#"
FREE_CHARS    = ".SG"
MARKER_CHARS  = "SG"


def parse_order(order: Union[str, Sequence[str], None], diagonal: bool = False) -> Tuple[str, ...]:
    """
    Normalise a neighbour order.

    "NESW" and ("N", "E", "S", "W") are equivalent.  Diagonal names are
    dropped on a 4-connected query; if a diagonal query names only the
    orthogonal directions, the diagonals follow in their default order.
    """
    if order is None:
        return DIAGONAL_ORDER if diagonal else ORTHOGONAL_ORDER
    names = [str(n).upper() for n in order]
    unknown = [n for n in names if n not in DIRECTIONS]
    if unknown:
        raise ValueError(f"Unknown direction(s) in neighbour order: {', '.join(unknown)}")
    if len(set(names)) != len(names):
        raise ValueError(f"Neighbour order repeats a direction: {order!r}")
    if not diagonal:
        return tuple(n for n in names if len(n) == 1)
    if all(len(n) == 1 for n in names):
        names += [n for n in DIAGONAL_ORDER if len(n) == 2]
    return tuple(names)


class Grid:
    """
    Attributes:
        width, height : Fixed dimensions.
        name          : Optional label (scenario key, file name, …).
        _cells        : {Position: Cell}
        _heuristic    : Default estimate used by heuristic().
    """

    def __init__(
        self,
        width: int,
        height: int,
        obstacles: Iterable = (),
        costs: Optional[Dict] = None,
        heuristic: Union[str, Heuristic, None] = None,
        name: str = "",
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width:  int = width
        self.height: int = height
        self.name:   str = name
        self._heuristic: Heuristic = resolve_heuristic(heuristic, manhattan)

        blocked = {Position.of(p) for p in obstacles}
        weights = {Position.of(p): float(c) for p, c in (costs or {}).items()}
        for p in list(blocked) + list(weights):
            if not self.in_bounds(p):
                raise OutOfBounds(p, width, height)

        self._cells: Dict[Position, Cell] = {}
        for y in range(height):
            for x in range(width):
                p = Position(x, y)
                self._cells[p] = Cell(p, is_obstacle=p in blocked, cost=weights.get(p, 1.0))

    # ==================================================================
    # CELL LOOKUP
    # ==================================================================
    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def cell(self, position) -> Cell:
        p = Position.of(position)
        try:
            return self._cells[p]
        except KeyError:
            raise OutOfBounds(p, self.width, self.height) from None

    def is_passable(self, position: Position) -> bool:
        return self.in_bounds(position) and not self._cells[position].is_obstacle

    def require_passable(self, position) -> Position:
        """Return the position, or raise InvalidPosition if it can't be stood on."""
        p = Position.of(position)
        if self.cell(p).is_obstacle:
            raise InvalidPosition(p, "position is an obstacle")
        return p

    @property
    def obstacles(self) -> List[Position]:
        return sorted(p for p, c in self._cells.items() if c.is_obstacle)

    def passable_positions(self) -> List[Position]:
        """Every free position in row-major order."""
        return [c.position for c in self if not c.is_obstacle]

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbors(
        self,
        position,
        diagonal: bool = False,
        order: Union[str, Sequence[str], None] = None,
    ) -> List[Position]:
        """In-bounds, non-obstacle neighbours in a fixed order."""
        p = self.require_passable(position)
        result = []
        for name in parse_order(order, diagonal):
            dx, dy = DIRECTIONS[name]
            q = p.offset(dx, dy)
            if not self.is_passable(q):
                continue
            # no squeezing diagonally between two blocked corners
            if dx and dy and not (self.is_passable(p.offset(dx, 0)) and self.is_passable(p.offset(0, dy))):
                continue
            result.append(q)
        return result

    def cost(self, a, b) -> float:
        """Blended terrain cost of the step a → b (√2 × blend for a diagonal)."""
        pa = self.require_passable(a)
        pb = self.require_passable(b)
        dx, dy = abs(pa.x - pb.x), abs(pa.y - pb.y)
        if max(dx, dy) != 1:
            raise ValueError(f"{pa!r} and {pb!r} are not adjacent")
        blend = (self._cells[pa].cost + self._cells[pb].cost) / 2
        return blend * math.sqrt(2) if dx and dy else blend

    def heuristic(self, position, goal, fn: Optional[Heuristic] = None) -> float:
        p = self.require_passable(position)
        g = self.require_passable(goal)
        return (fn or self._heuristic)(p, g)

    @property
    def heuristic_fn(self) -> Heuristic:
        return self._heuristic

    def path_cost(self, path: Sequence[Position]) -> float:
        """Sum of step costs along a path given in either direction."""
        return sum(self.cost(path[i], path[i + 1]) for i in range(len(path) - 1))

    # ==================================================================
    # GENERATORS  (factory methods → return a new Grid)
    # ==================================================================
    @classmethod
    def generate_random(
        cls,
        width: int = 8,
        height: int = 8,
        wall_prob: float = 0.25,
        seed: Optional[int] = None,
        keep_clear: Iterable = (),
        max_cost: int = 1,
    ) -> "Grid":
        """
        Random obstacle field.  A private Random(seed) keeps the global
        generator untouched; max_cost > 1 also scatters terrain weights.
        """
        rng   = random.Random(seed)
        clear = {Position.of(p) for p in keep_clear}
        obstacles, costs = [], {}
        for y in range(height):
            for x in range(width):
                p = Position(x, y)
                if p not in clear and rng.random() < wall_prob:
                    obstacles.append(p)
                elif max_cost > 1:
                    costs[p] = rng.randint(1, max_cost)
        return cls(width, height, obstacles=obstacles, costs=costs, name=f"random-{seed}")

    # ---------- Import from ASCII map ----------
    @classmethod
    def from_ascii(cls, text: str, heuristic: Union[str, Heuristic, None] = None, name: str = "") -> "Grid":
        grid, _ = parse_ascii(text, heuristic=heuristic, name=name)
        return grid

    def to_ascii(self, start: Optional[Position] = None, goal: Optional[Position] = None) -> str:
        """
        One character per cell.  Only whole costs 1-9 fit in a map cell; any
        other cost raises ValueError (use to_dict for those grids).
        """
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                p, c = Position(x, y), self._cells[Position(x, y)]
                if p == start:
                    row.append("S")
                elif p == goal:
                    row.append("G")
                elif c.is_obstacle:
                    row.append(OBSTACLE_CHAR)
                elif c.cost > 1:
                    if c.cost != int(c.cost) or c.cost > 9:
                        raise ValueError(f"cost {c.cost} at {p!r} has no single-digit map form; use to_dict()")
                    row.append(str(int(c.cost)))
                else:
                    row.append(".")
            rows.append("".join(row))
        return "\n".join(rows)

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "name":      self.name,
            "width":     self.width,
            "height":    self.height,
            "heuristic": heuristic_name(self._heuristic),
            "obstacles": [p.to_dict() for p in self.obstacles],
            "costs": [
                {"x": c.position.x, "y": c.position.y, "cost": c.cost}
                for c in self if c.cost != 1.0
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Grid":
        return cls(
            width=data["width"],
            height=data["height"],
            obstacles=[Position.from_dict(p) for p in data.get("obstacles", [])],
            costs={Position.from_dict(c): c["cost"] for c in data.get("costs", [])},
            heuristic=data.get("heuristic"),
            name=data.get("name", ""),
        )

    # ==================================================================
    # UTILITY
    # ==================================================================
    def __iter__(self) -> Iterator[Cell]:
        for y in range(self.height):
            for x in range(self.width):
                yield self._cells[Position(x, y)]

    def __contains__(self, position) -> bool:
        return self.in_bounds(Position.of(position))

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Grid)
            and self.width == other.width
            and self.height == other.height
            and self._cells == other._cells
        )

    def __hash__(self) -> int:
        return hash((self.width, self.height, tuple(self.obstacles)))

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"Grid({label}{self.width}x{self.height}, obstacles={len(self.obstacles)})"


# ---------------------------------------------------------------------------
# ASCII parser
# ---------------------------------------------------------------------------
def parse_ascii(
    text: str,
    heuristic: Union[str, Heuristic, None] = None,
    name: str = "",
) -> Tuple[Grid, Dict[str, Position]]:
    """
    Parse a text map, one row per line.

        #       obstacle
        .       free cell, cost 1
        1-9     free cell with that terrain cost
        S / G   start / goal marker (free, cost 1)

    Blank lines and lines starting with ';' are ignored.  Returns the
    grid and a {"S": Position, "G": Position} dict of the markers found.
    """
    rows = [line.strip() for line in text.strip().splitlines()]
    rows = [r for r in rows if r and not r.startswith(";")]
    if not rows:
        raise ValueError("ASCII map is empty")
    width = len(rows[0])
    if any(len(r) != width for r in rows):
        raise ValueError("ASCII map rows must all have the same width")

    obstacles: List[Position]        = []
    costs:     Dict[Position, float] = {}
    markers:   Dict[str, Position]   = {}
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            p = Position(x, y)
            if ch == OBSTACLE_CHAR:
                obstacles.append(p)
            elif ch.isdigit() and ch != "0":
                costs[p] = float(ch)
            elif ch in FREE_CHARS:
                if ch in MARKER_CHARS:
                    if ch in markers:
                        raise ValueError(f"ASCII map has more than one '{ch}' marker")
                    markers[ch] = p
            else:
                raise ValueError(f"Unexpected character {ch!r} at {p!r}")

    grid = Grid(width, len(rows), obstacles=obstacles, costs=costs, heuristic=heuristic, name=name)
    return grid, markers
