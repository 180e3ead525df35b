"""
hill_climbing.py — Steepest-descent Hill Climbing
===================================================
No global frontier: the candidates are exactly the current cell's
unexpanded neighbours.  The climber moves to the candidate with the
lowest h, provided it is strictly lower than the current h; ties go to
neighbour order.  When no candidate improves, the run ends STUCK.

There is no backtracking.  The closed set is the single path walked so
far and is never revisited.
"""

from typing import Any, Dict, List, Optional

from grid import Position
from algorithms.base import EPSILON, Frontier, NodeState, StrategyKind
from algorithms.step import Outcome


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def HillClimbing(grid, start, goal, h):",           # 0
    "    current ← start",                                # 1
    "    loop:",                                          # 2
    "        if current == goal: return path",            # 3
    "        best ← argmin h(nbr) for nbr in neighbors",  # 4
    "        if h(best) >= h(current): return STUCK",     # 5
    "        current ← best",                             # 6
]

LINE_INIT, LINE_POP, LINE_GOAL, LINE_EXPAND, LINE_FAIL = 1, 6, 3, 4, 5


class BestNeighborFrontier(Frontier):
    kind          = StrategyKind.BEST_NEIGHBOR
    local         = True
    empty_outcome = Outcome.STUCK
    pop_outcome   = Outcome.STUCK

    def __init__(self):
        super().__init__()
        self._candidates: List[NodeState] = []

    def push(self, state: NodeState) -> None:
        self._candidates.append(self._stamp(state))

    def pop(self) -> Optional[NodeState]:
        best = None
        for state in self._candidates:
            if best is None or (state.h, state.order) < (best.h, best.order):
                best = state
        if best is None:
            return None
        if self.current is not None and best.h >= self.current.h - EPSILON:
            return None
        self._candidates.remove(best)
        return best

    def positions(self) -> List[Position]:
        return [s.position for s in sorted(self._candidates, key=lambda s: (s.h, s.order))]

    def clear(self) -> None:
        self._candidates.clear()

    def __len__(self) -> int:
        return len(self._candidates)

    def decision(self, state: Optional[NodeState]) -> Dict[str, Any]:
        return {"stuck": state is None}


def make_frontier(config) -> BestNeighborFrontier:
    return BestNeighborFrontier()
