"""
simulated_annealing.py — Simulated Annealing
==============================================
Local search that can escape a local optimum by sometimes accepting a
worse move.

Each decision picks one neighbour of the current cell with the injected
random source and compares costs (cost = h, the estimated distance to
the goal):

    Δ = neighbour_cost − current_cost
    Δ ≤ 0   → accept
    Δ > 0   → accept with probability exp(−Δ / T)

After every decision the temperature is cooled, T ← schedule(T).  When
T drops below min_temperature the run freezes and ends STUCK.  A
rejected move keeps the current cell.  Stepping back onto visited cells
is allowed; the engine keeps the walk loop-free when it builds the path.

The random source is always supplied by the caller.  This module never
touches the global `random` generator.
"""

import math
import random
from typing import Any, Callable, Dict, List, Optional

from grid import Position
from algorithms.base import Frontier, NodeState, StrategyKind
from algorithms.step import Outcome

CoolingSchedule = Callable[[float], float]

DEFAULT_INITIAL_TEMPERATURE = 5.0
DEFAULT_MIN_TEMPERATURE     = 0.01
DEFAULT_ALPHA               = 0.95


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def SimulatedAnnealing(grid, start, goal, h, T, schedule):",  # 0
    "    current ← start",                                         # 1
    "    while T >= T_min:",                                       # 2
    "        if current == goal: return path",                     # 3
    "        nbr ← random choice of neighbors(current)",           # 4
    "        Δ ← h(nbr) − h(current)",                             # 5
    "        if Δ ≤ 0 or random() < exp(−Δ / T):",                 # 6
    "            current ← nbr",                                   # 7
    "        T ← schedule(T)",                                     # 8
    "    return STUCK (frozen)",                                   # 9
]

LINE_INIT, LINE_POP, LINE_GOAL, LINE_EXPAND, LINE_FAIL = 1, 6, 3, 4, 9


# ---------------------------------------------------------------------------
# Cooling schedules
# ---------------------------------------------------------------------------
def geometric(alpha: float = DEFAULT_ALPHA) -> CoolingSchedule:
    """T ← T × α"""
    if not 0 < alpha < 1:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")

    def schedule(t: float) -> float:
        return t * alpha
    return schedule


def linear(step: float = 0.5, floor: float = 0.0) -> CoolingSchedule:
    """T ← max(T − step, floor)"""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    def schedule(t: float) -> float:
        return max(t - step, floor)
    return schedule


def acceptance_probability(delta: float, temperature: float) -> float:
    if delta <= 0:
        return 1.0
    if temperature <= 0:
        return 0.0
    return math.exp(-delta / temperature)


class AnnealingFrontier(Frontier):
    kind          = StrategyKind.PROBABILISTIC_ACCEPT
    local         = True
    revisit       = True
    empty_outcome = Outcome.STUCK
    pop_outcome   = Outcome.STUCK

    def __init__(
        self,
        rng: random.Random,
        schedule: Optional[CoolingSchedule] = None,
        initial_temperature: float = DEFAULT_INITIAL_TEMPERATURE,
        min_temperature: float = DEFAULT_MIN_TEMPERATURE,
    ):
        super().__init__()
        if rng is None:
            raise ValueError("Simulated annealing needs a random source (random_source or seed)")
        if initial_temperature <= 0:
            raise ValueError(f"initial_temperature must be positive, got {initial_temperature}")
        if min_temperature <= 0:
            raise ValueError(f"min_temperature must be positive, got {min_temperature}")
        self.rng             = rng
        self.schedule        = schedule or geometric()
        self.temperature     = float(initial_temperature)
        self.min_temperature = float(min_temperature)
        self.frozen          = False
        self._candidates: List[NodeState] = []
        self._last: Dict[str, Any] = {}

    def push(self, state: NodeState) -> None:
        self._candidates.append(self._stamp(state))

    def pop(self) -> Optional[NodeState]:
        """
        Make one accept/reject decision.  Returns the neighbour if the
        move is accepted, the anchored current node if it is rejected,
        and None once the temperature has frozen.
        """
        if not self._candidates:
            return None
        if self.temperature < self.min_temperature:
            self.frozen = True
            self._last  = {"temperature": self.temperature, "frozen": True}
            return None

        t        = self.temperature
        neighbor = self.rng.choice(self._candidates)
        here     = self.current.h if self.current is not None else neighbor.h
        delta    = neighbor.h - here
        p        = acceptance_probability(delta, t)
        accepted = True if delta <= 0 else self.rng.random() < p

        self._last = {
            "temperature":            t,
            "neighbor":               neighbor.position,
            "current_cost":           here,
            "neighbor_cost":          neighbor.h,
            "acceptance_probability": p,
            "accepted":               accepted,
        }
        self.temperature = self.schedule(t)
        return neighbor if accepted else self.current

    def positions(self) -> List[Position]:
        return [s.position for s in self._candidates]

    def clear(self) -> None:
        self._candidates.clear()

    def __len__(self) -> int:
        return len(self._candidates)

    def decision(self, state: Optional[NodeState]) -> Dict[str, Any]:
        return dict(self._last)


def make_frontier(config) -> AnnealingFrontier:
    rng = config.random_source
    if rng is None and config.seed is not None:
        rng = random.Random(config.seed)
    return AnnealingFrontier(
        rng=rng,
        schedule=config.cooling_schedule,
        initial_temperature=config.initial_temperature,
        min_temperature=config.min_temperature,
    )
