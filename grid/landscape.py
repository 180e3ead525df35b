"""
landscape.py — Local-search landscape features
===============================================
Classifies a cell by how a local search that minimises h would see it.
This is a pure query over (grid, heuristic, goal): nothing is stored on
the cells.

    GOAL           h reaches the goal here
    SLOPE          some orthogonal neighbour is strictly better
    RIDGE          no orthogonal neighbour is better, a diagonal one is
    SHOULDER       flat region with at least one way down out of it
    PLATEAU        flat region with no way down
    LOCAL_OPTIMUM  every neighbour is strictly worse (hill climbing stops)
"""

from collections import deque
from enum import Enum
from typing import Dict, List, Optional, Set

from grid.cell import Position
from grid.grid import DIRECTIONS, Grid
from grid.heuristics import Heuristic


class LandscapeFeature(Enum):
    GOAL          = "goal"
    SLOPE         = "slope"
    RIDGE         = "ridge"
    SHOULDER      = "shoulder"
    PLATEAU       = "plateau"
    LOCAL_OPTIMUM = "local_optimum"


def classify(
    grid: Grid,
    position,
    goal,
    heuristic: Optional[Heuristic] = None,
) -> LandscapeFeature:
    p = grid.require_passable(position)
    g = grid.require_passable(goal)
    h = heuristic or grid.heuristic_fn

    if p == g:
        return LandscapeFeature.GOAL

    here = h(p, g)
    nbrs = grid.neighbors(p)
    if any(h(n, g) < here for n in nbrs):
        return LandscapeFeature.SLOPE

    for name, (dx, dy) in DIRECTIONS.items():
        if len(name) == 2:
            q = p.offset(dx, dy)
            if grid.is_passable(q) and h(q, g) < here:
                return LandscapeFeature.RIDGE

    if any(h(n, g) == here for n in nbrs):
        region = _flat_region(grid, p, g, h)
        for member in region:
            if any(h(n, g) < here for n in grid.neighbors(member)):
                return LandscapeFeature.SHOULDER
        return LandscapeFeature.PLATEAU

    return LandscapeFeature.LOCAL_OPTIMUM


def classify_grid(
    grid: Grid,
    goal,
    heuristic: Optional[Heuristic] = None,
) -> Dict[Position, LandscapeFeature]:
    """Classify every passable cell."""
    return {p: classify(grid, p, goal, heuristic) for p in grid.passable_positions()}


def cells_with(features: Dict[Position, LandscapeFeature], feature: LandscapeFeature) -> List[Position]:
    return sorted(p for p, f in features.items() if f is feature)


def _flat_region(grid: Grid, origin: Position, goal: Position, h: Heuristic) -> Set[Position]:
    level  = h(origin, goal)
    region = {origin}
    queue  = deque([origin])
    while queue:
        p = queue.popleft()
        for n in grid.neighbors(p):
            if n not in region and h(n, goal) == level:
                region.add(n)
                queue.append(n)
    return region
