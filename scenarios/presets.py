"""
presets.py — Named demo grids
==============================
Every preset is an ASCII map plus metadata.  Rows run top to bottom
(y = 0 first); `#` is an obstacle, `.` a free cell, 1-9 a terrain cost,
`S` / `G` the start and goal.

Design decisions:
  - Maps are kept as text so a preset reads like the board it draws.
  - A preset may name a suggested algorithm and config; callers are free
    to run any other strategy on the same grid.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger

from grid import Grid, Position, parse_ascii
from engine import RunConfig, create_run


@dataclass
class Scenario:
    key:         str
    label:       str
    grid:        Grid
    start:       Position
    goal:        Position
    description: str            = ""
    algorithm:   str            = "astar"            # suggested strategy
    config:      Dict[str, Any] = field(default_factory=dict)

    def create_run(self, algorithm: Optional[str] = None, config=None, **overrides):
        """SearchRun on this scenario; the suggested algorithm/config unless overridden."""
        if config is None:
            config = RunConfig.from_dict(self.config)
        return create_run(self.grid, self.start, self.goal, algorithm or self.algorithm, config, **overrides)

    def to_ascii(self) -> str:
        return self.grid.to_ascii(self.start, self.goal)


def parse_scenario(
    key: str,
    text: str,
    label: str = "",
    description: str = "",
    algorithm: str = "astar",
    config: Optional[Dict[str, Any]] = None,
    heuristic=None,
) -> Scenario:
    """Build a Scenario from an ASCII map.  The map must mark both S and G."""
    grid, markers = parse_ascii(text, heuristic=heuristic, name=key)
    missing = [m for m in ("S", "G") if m not in markers]
    if missing:
        raise ValueError(f"Scenario {key!r} map has no {' / '.join(missing)} marker")
    return Scenario(
        key=key,
        label=label or key.replace("_", " ").title(),
        grid=grid,
        start=markers["S"],
        goal=markers["G"],
        description=description,
        algorithm=algorithm,
        config=dict(config or {}),
    )


# ---------------------------------------------------------------------------
# Maps
# ---------------------------------------------------------------------------
TWO_WALLS = """
........
.S#.....
..#..#..
..#..#..
..#..#..
..#..#..
.....#G.
........
"""

# the two-wall board as the lecture traces walk it: gaps at (2,1) and (5,6),
# a block at (3,3)-(4,3) and (6,2), and a dead-end pocket at (6,0)
LECTURE_GRID = """
.....#.#
.S......
..#..##.
..####..
..#..#..
..#..#..
......G.
........
"""

HILL_VALLEY = """
........
.S...#..
...#.#..
...#.#..
..##.#..
...#....
......G.
........
"""

OPEN_FIELD = """
S.......
........
........
........
........
........
........
.......G
"""

SWAMP = """
S.......
........
..5555..
..5555..
..5555..
..5555..
......G.
........
"""

SEALED_GOAL = """
........
.S......
........
....###.
....#G#.
....###.
........
........
"""


_PRESETS: List[Scenario] = [
    parse_scenario(
        "two_walls", TWO_WALLS,
        label="Two Walls",
        description="Walls at x=2 (y 1-5) and x=5 (y 2-6). Shortest path costs 12.",
    ),
    parse_scenario(
        "lecture_grid", LECTURE_GRID,
        label="Lecture Grid",
        description="Greedy without backtracking runs into the pocket at (6,0); A* goes down column 1.",
        algorithm="greedy",
        config={"backtrack": False},
    ),
    parse_scenario(
        "hill_valley", HILL_VALLEY,
        label="Hill Valley",
        description="A winding valley for Hill Climbing and Simulated Annealing.",
        algorithm="hill_climbing",
    ),
    parse_scenario(
        "open_field", OPEN_FIELD,
        label="Open Field",
        description="No obstacles at all. Compare how far each frontier spreads.",
        algorithm="bfs",
    ),
    parse_scenario(
        "swamp", SWAMP,
        label="Swamp",
        description="A cost-5 bog in the middle. A* walks around it, BFS does not care.",
    ),
    parse_scenario(
        "sealed_goal", SEALED_GOAL,
        label="Sealed Goal",
        description="The goal is walled in. Every complete search ends exhausted.",
        algorithm="bfs",
    ),
]

REGISTRY: Dict[str, Scenario] = {s.key: s for s in _PRESETS}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_scenario(key: str) -> Scenario:
    """Return the preset for key.  Raises KeyError for an unknown key."""
    try:
        scenario = REGISTRY[key]
    except KeyError:
        raise KeyError(f"Unknown scenario: {key!r} (expected one of {', '.join(REGISTRY)})") from None
    logger.info(
        "loaded scenario {}: {}x{}, {} → {}",
        key, scenario.grid.width, scenario.grid.height, scenario.start, scenario.goal,
    )
    return scenario


def list_scenarios() -> List[Scenario]:
    return list(REGISTRY.values())
