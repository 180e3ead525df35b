"""
astar.py — A* Search
=====================
Min-heap on f = g + h.  Ties go to the smaller h (the cell that looks
closer to the goal), then to insertion order.

A closed cell is re-opened only when a strictly cheaper g reaches it.
With a consistent heuristic that never happens and the first time the
goal is popped its g is optimal.

Heuristics come from grid.heuristics (manhattan / euclidean / octile /
chebyshev / zero); the run config picks one.
"""

from typing import Any, Dict, List, Optional

from algorithms.base import NodeState, PriorityFrontier, StrategyKind


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def AStar(grid, start, goal, h):",         # 0
    "    g[start] ← 0",                         # 1
    "    open_set ← [(h(start), start)]",       # 2
    "    while open_set:",                      # 3
    "        node ← open_set.pop_min()",        # 4
    "        if node == goal: return path",     # 5
    "        closed.add(node)",                 # 6
    "        for nbr in neighbors(node):",      # 7
    "            tentative_g ← g[node] + w",    # 8
    "            if tentative_g < g[nbr]:",     # 9
    "                parent[nbr] = node",       # 10
    "                g[nbr] ← tentative_g",     # 11
    "                open_set.push(f, nbr)",    # 12
    "    return NOT FOUND",                     # 13
]

LINE_INIT, LINE_POP, LINE_GOAL, LINE_EXPAND, LINE_FAIL = 2, 4, 5, 12, 13


def _f_then_h(state: NodeState):
    return (state.f, state.h)


class AStarFrontier(PriorityFrontier):
    kind = StrategyKind.PRIORITY_F

    def __init__(self, tie_break: str = "fifo"):
        super().__init__(key=_f_then_h, tie_break=tie_break)

    def decision(self, state: Optional[NodeState]) -> Dict[str, Any]:
        if state is None:
            return {}
        return {"g": state.g, "h": state.h, "f": state.f}


def make_frontier(config) -> AStarFrontier:
    return AStarFrontier(tie_break=config.tie_break)
