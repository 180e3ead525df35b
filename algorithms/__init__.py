"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every search strategy the engine knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "bfs": AlgoInfo(key, label, kind, make_frontier, pseudocode, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and any renderer both
consume it, so adding a new algorithm is literally: write the frontier,
add one entry here.  That's the plugin system.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms import astar, bfs, dfs, greedy_bfs, hill_climbing, simulated_annealing
from algorithms.base import EPSILON, Frontier, NodeState, NodeStatus, PriorityFrontier, StrategyKind
from algorithms.step import Outcome, Step, StepBuilder


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:           str                    # registry key, e.g. "bfs"
    label:         str                    # human label, e.g. "Breadth-First Search"
    kind:          StrategyKind           # frontier variant
    make_frontier: Callable               # make_frontier(config) → Frontier
    pseudocode:    List[str]              # lines for the side-panel
    lines:         Dict[str, int] = field(default_factory=dict)   # event → pseudocode line
    tags:          List[str] = field(default_factory=list)
    has_heuristic: bool     = False       # reads h at all?
    optimal:       bool     = False       # cheapest path guaranteed (admissible h)?
    complete:      bool     = False       # finds the goal whenever reachable?
    local_search:  bool     = False       # no global frontier
    description:   str      = ""          # one-liner for the UI card


def _lines(module) -> Dict[str, int]:
    return {
        "init":   module.LINE_INIT,
        "pop":    module.LINE_POP,
        "goal":   module.LINE_GOAL,
        "expand": module.LINE_EXPAND,
        "fail":   module.LINE_FAIL,
    }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", kind=StrategyKind.FIFO,
        make_frontier=bfs.make_frontier, pseudocode=bfs.PSEUDOCODE, lines=_lines(bfs),
        tags=["uninformed", "shortest-path"],
        complete=True,
        description="Explores ring by ring. Fewest moves on a unit-cost grid.",
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", kind=StrategyKind.LIFO,
        make_frontier=dfs.make_frontier, pseudocode=dfs.PSEUDOCODE, lines=_lines(dfs),
        tags=["uninformed"],
        complete=True,
        description="Dives deep before backtracking. Does NOT guarantee a short path.",
    ),

    "greedy": AlgoInfo(
        key="greedy", label="Greedy Best-First", kind=StrategyKind.PRIORITY_H,
        make_frontier=greedy_bfs.make_frontier, pseudocode=greedy_bfs.PSEUDOCODE,
        lines=_lines(greedy_bfs),
        tags=["heuristic", "suboptimal"],
        has_heuristic=True,
        description="Pure heuristic — fast but NOT optimal, and gets stuck when it may not backtrack.",
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Search", kind=StrategyKind.PRIORITY_F,
        make_frontier=astar.make_frontier, pseudocode=astar.PSEUDOCODE, lines=_lines(astar),
        tags=["heuristic", "shortest-path"],
        has_heuristic=True, optimal=True, complete=True,
        description="Uniform cost + heuristic guidance. Optimal when h is admissible.",
    ),

    "hill_climbing": AlgoInfo(
        key="hill_climbing", label="Hill Climbing", kind=StrategyKind.BEST_NEIGHBOR,
        make_frontier=hill_climbing.make_frontier, pseudocode=hill_climbing.PSEUDOCODE,
        lines=_lines(hill_climbing),
        tags=["heuristic", "local-search"],
        has_heuristic=True, local_search=True,
        description="Always takes the best strictly-improving neighbour. Stops at local optima.",
    ),

    "simulated_annealing": AlgoInfo(
        key="simulated_annealing", label="Simulated Annealing", kind=StrategyKind.PROBABILISTIC_ACCEPT,
        make_frontier=simulated_annealing.make_frontier, pseudocode=simulated_annealing.PSEUDOCODE,
        lines=_lines(simulated_annealing),
        tags=["heuristic", "local-search", "stochastic"],
        has_heuristic=True, local_search=True,
        description="Accepts worse moves with probability exp(−Δ/T) while the temperature cools.",
    ),
}

_BY_KIND: Dict[StrategyKind, AlgoInfo] = {info.kind: info for info in REGISTRY.values()}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


def resolve(strategy: Union[str, StrategyKind, AlgoInfo]) -> AlgoInfo:
    """
    Accept an AlgoInfo, a StrategyKind, a kind value ("priority_f") or a
    registry key ("astar").  Raises ValueError for anything else.
    """
    if isinstance(strategy, AlgoInfo):
        return strategy
    if isinstance(strategy, StrategyKind):
        return _BY_KIND[strategy]
    info = REGISTRY.get(strategy)
    if info is not None:
        return info
    for kind in StrategyKind:
        if kind.value == strategy:
            return _BY_KIND[kind]
    raise ValueError(f"Unknown algorithm: {strategy}")


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
    "resolve",
    "StrategyKind",
    "Frontier",
    "PriorityFrontier",
    "NodeState",
    "NodeStatus",
    "EPSILON",
    "Outcome",
    "Step",
    "StepBuilder",
]
