"""
bfs.py — Breadth-First Search
==============================
FIFO frontier.  A cell is marked as soon as it is discovered, so the
first parent to reach it wins and nothing is ever re-opened.  On a
unit-cost grid the resulting path has the fewest possible moves.

Pseudocode lines are 0-indexed and match the PSEUDOCODE constant so a
renderer can highlight them live.
"""

from collections import deque
from typing import List, Optional

from grid import Position
from algorithms.base import Frontier, NodeState, StrategyKind


# ---------------------------------------------------------------------------
# Pseudocode: each string is one displayed line; index = pseudocode_line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(grid, start, goal):",              # 0
    "    queue ← [start]",                      # 1
    "    visited ← {start}",                    # 2
    "    while queue is not empty:",            # 3
    "        node ← queue.dequeue()",           # 4
    "        if node == goal: return path",     # 5
    "        for nbr in neighbors(node):",      # 6
    "            if nbr not visited:",          # 7
    "                visited.add(nbr)",         # 8
    "                parent[nbr] = node",       # 9
    "                queue.enqueue(nbr)",       # 10
    "    return NOT FOUND",                     # 11
]

LINE_INIT, LINE_POP, LINE_GOAL, LINE_EXPAND, LINE_FAIL = 1, 4, 5, 10, 11


class FifoFrontier(Frontier):
    kind         = StrategyKind.FIFO
    mark_on_push = True

    def __init__(self):
        super().__init__()
        self._queue = deque()

    def push(self, state: NodeState) -> None:
        self._queue.append(self._stamp(state))

    def pop(self) -> Optional[NodeState]:
        return self._queue.popleft() if self._queue else None

    def positions(self) -> List[Position]:
        return [s.position for s in self._queue]

    def clear(self) -> None:
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)


def make_frontier(config) -> FifoFrontier:
    return FifoFrontier()
