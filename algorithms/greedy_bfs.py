"""
greedy_bfs.py — Greedy Best-First Search
==========================================
Expands the cell with the smallest h(n): pure heuristic, zero regard
for the cost paid so far.

This is intentionally SUBOPTIMAL, and in committed mode INCOMPLETE.
The two modes are two configurations of the same algorithm:

  • backtrack=True  (default) – one global open set; a dead end just
    means the next-best open cell elsewhere is tried.  Finds the goal
    whenever it is reachable, though rarely by the cheapest path.
  • backtrack=False – committed greedy: only the current cell's
    unexpanded neighbours are candidates.  The best of them is taken
    even when it is worse than where we stand; a dead end ends the run
    as EXHAUSTED.

Ties go to insertion order, i.e. to neighbour order (N, E, S, W unless
the run config says otherwise).
"""

from typing import Any, Dict, List, Optional

from algorithms.base import NodeState, PriorityFrontier, StrategyKind


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def GreedyBFS(grid, start, goal, h):",     # 0
    "    open_set ← [(h(start), start)]",       # 1
    "    visited ← {}",                         # 2
    "    while open_set:",                      # 3
    "        node ← open_set.pop_min()",        # 4
    "        visited.add(node)",                # 5
    "        if node == goal: return path",     # 6
    "        for nbr in neighbors(node):",      # 7
    "            if nbr not in visited:",       # 8
    "                parent[nbr] = node",       # 9
    "                open_set.push((h(nbr), nbr))",  # 10
    "    return NOT FOUND",                     # 11
]

LINE_INIT, LINE_POP, LINE_GOAL, LINE_EXPAND, LINE_FAIL = 1, 4, 6, 10, 11


def _h_only(state: NodeState):
    return (state.h,)


class GreedyFrontier(PriorityFrontier):
    kind = StrategyKind.PRIORITY_H

    def __init__(self, tie_break: str = "fifo", backtrack: bool = True):
        super().__init__(key=_h_only, tie_break=tie_break)
        self.backtrack = backtrack
        self.local     = not backtrack

    def decision(self, state: Optional[NodeState]) -> Dict[str, Any]:
        if state is None:
            return {}
        return {"g": state.g, "h": state.h, "f": state.f}


def make_frontier(config) -> GreedyFrontier:
    return GreedyFrontier(tie_break=config.tie_break, backtrack=config.backtrack)
