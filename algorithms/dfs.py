"""
dfs.py — Depth-First Search
=============================
LIFO frontier using an explicit stack.

A cell is marked when it is popped, not when it is pushed.  If an open
cell is reached again before being expanded it moves back to the top of
the stack under its newer parent, which is what recursive DFS would do.
Closed cells are never re-opened.
"""

from typing import List, Optional

from grid import Position
from algorithms.base import Frontier, NodeState, StrategyKind


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DFS(grid, start, goal):",              # 0
    "    stack ← [start]",                      # 1
    "    visited ← {}",                         # 2
    "    while stack is not empty:",            # 3
    "        node ← stack.pop()",               # 4
    "        visited.add(node)",                # 5
    "        if node == goal: return path",     # 6
    "        for nbr in neighbors(node):",      # 7
    "            if nbr not visited:",          # 8
    "                parent[nbr] = node",       # 9
    "                stack.push(nbr)",          # 10
    "    return NOT FOUND",                     # 11
]

LINE_INIT, LINE_POP, LINE_GOAL, LINE_EXPAND, LINE_FAIL = 1, 4, 6, 10, 11


class LifoFrontier(Frontier):
    kind = StrategyKind.LIFO

    def __init__(self):
        super().__init__()
        self._stack: List[NodeState] = []

    def push(self, state: NodeState) -> None:
        self._stack = [s for s in self._stack if s.position != state.position]
        self._stack.append(self._stamp(state))

    def pop(self) -> Optional[NodeState]:
        return self._stack.pop() if self._stack else None

    def positions(self) -> List[Position]:
        # top of the stack comes out first
        return [s.position for s in reversed(self._stack)]

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)


def make_frontier(config) -> LifoFrontier:
    return LifoFrontier()
