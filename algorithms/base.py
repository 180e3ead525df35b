"""
base.py — Frontier contract & per-run node bookkeeping
=======================================================
Every algorithm is a Frontier: an ordering policy over NodeStates that
the one shared expand-loop (engine.run.SearchRun) pushes into and pops
from.  Swapping the frontier is what turns the loop into BFS, DFS,
Greedy, A*, Hill Climbing or Simulated Annealing.

Class flags tell the loop how to treat a frontier:
    relax        – re-parent a seen node when a strictly better g turns up
                   (closed nodes are re-opened)
    local        – the candidate set is only the current node's neighbours;
                   it is cleared before every expansion
    revisit      – a local search may step back onto closed cells
    mark_on_push – a node counts as visited as soon as it is discovered
                   (BFS); otherwise it may be pushed again while still open
"""

import heapq
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from grid import Position
from algorithms.step import Outcome

EPSILON = 1e-9


class StrategyKind(Enum):
    FIFO                 = "fifo"                   # BFS
    LIFO                 = "lifo"                   # DFS
    PRIORITY_H           = "priority_h"             # Greedy Best-First
    PRIORITY_F           = "priority_f"             # A*
    BEST_NEIGHBOR        = "best_neighbor"          # Hill Climbing
    PROBABILISTIC_ACCEPT = "probabilistic_accept"   # Simulated Annealing


class NodeStatus(Enum):
    UNSEEN = "unseen"
    OPEN   = "open"
    CLOSED = "closed"


@dataclass
class NodeState:
    """Search bookkeeping for one position during one run."""

    position: Position
    g:        float              = 0.0
    h:        float              = 0.0
    parent:   Optional[Position] = None
    status:   NodeStatus         = NodeStatus.UNSEEN
    order:    int                = 0     # insertion counter, for ties

    @property
    def f(self) -> float:
        return self.g + self.h


# ---------------------------------------------------------------------------
# Frontier contract
# ---------------------------------------------------------------------------
class Frontier:
    kind:          StrategyKind
    relax:         bool    = False
    local:         bool    = False
    revisit:       bool    = False
    mark_on_push:  bool    = False
    empty_outcome: Outcome = Outcome.EXHAUSTED   # no candidates left at all
    pop_outcome:   Outcome = Outcome.EXHAUSTED   # candidates left, none chosen

    def __init__(self):
        self._counter = 0
        self.current: Optional[NodeState] = None

    def push(self, state: NodeState) -> None:
        raise NotImplementedError

    def pop(self) -> Optional[NodeState]:
        raise NotImplementedError

    def positions(self) -> List[Position]:
        """Open set in extraction order."""
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def __len__(self) -> int:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return len(self) == 0

    def anchor(self, state: NodeState) -> None:
        """Tell a local frontier which node its candidates surround."""
        self.current = state

    def decision(self, state: Optional[NodeState]) -> Dict[str, Any]:
        """Extra Step fields describing the last pop."""
        return {}

    def _stamp(self, state: NodeState) -> NodeState:
        self._counter += 1
        state.order = self._counter
        return state


# ---------------------------------------------------------------------------
# Shared min-heap with replace-on-push (lazy deletion of stale entries)
# ---------------------------------------------------------------------------
class PriorityFrontier(Frontier):
    """
    Min-heap keyed by key(state).  Ties fall back to insertion order:
    earliest first with tie_break="fifo", newest first with "lifo".
    Pushing a position that is already queued replaces its entry.
    """

    relax = True

    def __init__(self, key: Callable[[NodeState], Tuple], tie_break: str = "fifo"):
        super().__init__()
        if tie_break not in ("fifo", "lifo"):
            raise ValueError(f"tie_break must be 'fifo' or 'lifo', got {tie_break!r}")
        self.key       = key
        self.tie_break = tie_break
        self._heap: List[list] = []
        self._live: Dict[Position, list] = {}

    def _entry_key(self, state: NodeState) -> Tuple:
        order = state.order if self.tie_break == "fifo" else -state.order
        return tuple(self.key(state)) + (order,)

    def push(self, state: NodeState) -> None:
        stale = self._live.pop(state.position, None)
        if stale is not None:
            stale[-1] = None
        self._stamp(state)
        entry = [self._entry_key(state), state]
        self._live[state.position] = entry
        heapq.heappush(self._heap, entry)

    def pop(self) -> Optional[NodeState]:
        while self._heap:
            _, state = heapq.heappop(self._heap)
            if state is not None:
                del self._live[state.position]
                return state
        return None

    def positions(self) -> List[Position]:
        return [e[1].position for e in sorted(self._live.values(), key=lambda e: e[0])]

    def clear(self) -> None:
        self._heap.clear()
        self._live.clear()

    def __len__(self) -> int:
        return len(self._live)
