"""
run.py — The shared expand loop
================================
One SearchRun drives one search over one grid.  Every algorithm uses the
same loop; only the Frontier differs:

    step 0      current ← start, open set = [start]
    step k > 0  node ← frontier.pop()
                  None        → terminal (Exhausted, or Stuck for local search)
                  node        → close it
                                goal?  → Succeeded
                                else   → push its neighbours, record a Step
                                         frontier now empty? → terminal

State machine:
    READY  →  step()  →  RUNNING
    RUNNING  →  (goal popped)          →  SUCCEEDED
    RUNNING  →  (open set ran dry)     →  FAILED
    RUNNING  →  (no acceptable move)   →  STUCK

Design decisions:
  - The grid is read-only.  Each run owns its NodeState map, its closed
    list and its Steps, so two runs over one grid never interfere.
  - A step budget ends run() early without ending the run; the returned
    Trace says STEP_BUDGET_EXCEEDED and the next run() carries on.
  - Local strategies (Hill Climbing, Simulated Annealing, committed
    Greedy) keep a walk trail instead of parent pointers.  Revisiting a
    cell cuts the trail back to that cell, so the path has no loops.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from loguru import logger

from grid import Grid, Position, resolve_heuristic
from grid.heuristics import manhattan, octile
from algorithms import AlgoInfo, resolve
from algorithms.base import EPSILON, NodeState, NodeStatus, StrategyKind
from algorithms.step import Outcome, Step, StepBuilder
from engine.config import RunConfig
from engine.trace import Trace


class RunStatus(Enum):
    READY     = "ready"
    RUNNING   = "running"
    SUCCEEDED = "succeeded"
    FAILED    = "failed"
    STUCK     = "stuck"


_STATUS_FOR: Dict[Outcome, RunStatus] = {
    Outcome.SUCCEEDED: RunStatus.SUCCEEDED,
    Outcome.EXHAUSTED: RunStatus.FAILED,
    Outcome.STUCK:     RunStatus.STUCK,
}

_PICKED_BECAUSE: Dict[StrategyKind, str] = {
    StrategyKind.FIFO:       "it is the oldest entry in the queue",
    StrategyKind.LIFO:       "it is the newest entry on the stack",
    StrategyKind.PRIORITY_H: "it has the lowest h",
    StrategyKind.PRIORITY_F: "it has the lowest f = g + h",
}


# ---------------------------------------------------------------------------
# SearchRun
# ---------------------------------------------------------------------------
class SearchRun:
    """
    Attributes:
        grid       : The grid being searched (never modified).
        start/goal : Validated Positions.
        algorithm  : AlgoInfo of the strategy.
        config     : RunConfig for this run.
        status     : Current RunStatus.
        outcome    : Outcome once terminal, else None.
        expansions : Number of nodes closed so far.
    """

    def __init__(self, grid: Grid, start: Position, goal: Position, algorithm: AlgoInfo, config: RunConfig):
        self.grid       = grid
        self.start      = start
        self.goal       = goal
        self.algorithm  = algorithm
        self.config     = config
        self.status:  RunStatus          = RunStatus.READY
        self.outcome: Optional[Outcome]  = None
        self.expansions: int             = 0

        self._frontier = algorithm.make_frontier(config)
        self._h        = _pick_heuristic(grid, config)
        self._order    = config.neighbor_order
        self._nodes:   Dict[Position, NodeState] = {}
        self._closed:  List[Position]            = []
        self._trail:   List[Position]            = []
        self._steps:   List[Step]                = []
        self._current: Optional[NodeState]       = None
        self._pending: Optional[NodeState]       = None   # local search: start, not yet expanded
        self._sb = StepBuilder()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def is_terminal(self) -> bool:
        return self.status in (RunStatus.SUCCEEDED, RunStatus.FAILED, RunStatus.STUCK)

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    @property
    def current(self) -> Optional[Position]:
        return self._current.position if self._current else None

    @property
    def heuristic(self):
        return self._h

    def node(self, position: Position) -> Optional[NodeState]:
        return self._nodes.get(position)

    def trace(self, outcome: Optional[Outcome] = None) -> Trace:
        return Trace(
            steps=self._steps,
            algorithm=self.algorithm.key,
            start=self.start,
            goal=self.goal,
            outcome=outcome or self.outcome,
        )

    # ------------------------------------------------------------------
    # Driving the loop
    # ------------------------------------------------------------------
    def run(self, max_steps: Optional[int] = None) -> Trace:
        """Step until terminal, or until this call has taken max_steps steps."""
        budget = max_steps if max_steps is not None else self.config.max_steps
        if budget is not None and budget < 1:
            raise ValueError(f"max_steps must be positive, got {budget}")
        taken = 0
        while not self.is_terminal:
            if budget is not None and taken >= budget:
                logger.warning(
                    "{} run paused: step budget of {} spent at step {}",
                    self.algorithm.key, budget, len(self._steps) - 1,
                )
                return self.trace(Outcome.STEP_BUDGET_EXCEEDED)
            self.step()
            taken += 1
        return self.trace()

    def step(self) -> Step:
        """Advance exactly one step.  A terminal run returns its last Step unchanged."""
        if self.is_terminal:
            return self._steps[-1]
        if self.status is RunStatus.READY:
            return self._begin()

        frontier = self._frontier
        pending = self._pending is not None
        if pending:
            node, self._pending = self._pending, None
        else:
            node = frontier.pop()
        extra = frontier.decision(node)

        if node is None:
            self._drop_candidates()
            outcome = frontier.pop_outcome
            if outcome is Outcome.STUCK:
                extra["stuck"] = True
            return self._finish(outcome, extra, self._explain_no_move(extra))

        if frontier.local and node is self._current and not pending:
            # annealing rejected the move; nothing is closed or expanded
            return self._record(
                "pop", extra,
                f"Stay at {node.position}: the move to {extra.get('neighbor')} was rejected "
                f"(p = {extra.get('acceptance_probability', 0.0):.3f}, T = {extra.get('temperature', 0.0):.3f}).",
            )

        self._close(node)
        if node.position == self.goal:
            return self._finish(Outcome.SUCCEEDED, extra, self._explain_goal())

        added = self._expand(node)
        if frontier.is_empty():
            outcome = frontier.empty_outcome
            if outcome is Outcome.STUCK:
                extra["stuck"] = True
            return self._finish(
                outcome, extra,
                f"{self._explain_pick(node, extra)} It has no neighbour left to try: "
                f"{'stuck' if outcome is Outcome.STUCK else 'dead end'} at {node.position}.",
            )
        return self._record(
            "expand", extra,
            f"{self._explain_pick(node, extra)} {added} neighbour(s) added to the open set.",
        )

    # ------------------------------------------------------------------
    # Internal: loop phases
    # ------------------------------------------------------------------
    def _begin(self) -> Step:
        logger.info(
            "{} run on {}x{} grid: {} → {}",
            self.algorithm.key, self.grid.width, self.grid.height, self.start, self.goal,
        )
        state = NodeState(self.start, g=0.0, h=self._h(self.start, self.goal), status=NodeStatus.OPEN)
        self._nodes[self.start] = state
        self._current = state
        self._trail   = [self.start]
        self.status   = RunStatus.RUNNING

        if self.start == self.goal:
            state.status = NodeStatus.CLOSED
            self._closed.append(self.start)
            return self._finish(
                Outcome.SUCCEEDED, {}, f"Start {self.start} is already the goal.",
                line="init", open_set=[self.start], closed=[],
            )

        if self._frontier.local:
            self._pending = state
            open_set = [self.start]
        else:
            self._frontier.push(state)
            open_set = None
        return self._record(
            "init", {}, f"Start at {self.start}; it is the only cell in the open set.",
            open_set=open_set,
        )

    def _close(self, node: NodeState) -> None:
        node.status = NodeStatus.CLOSED
        if node.position not in self._closed:
            self._closed.append(node.position)
        self.expansions += 1
        self._current = node
        if self._frontier.local:
            if node.position in self._trail:
                del self._trail[self._trail.index(node.position) + 1:]
            else:
                self._trail.append(node.position)

    def _expand(self, node: NodeState) -> int:
        """Push node's neighbours into the frontier.  Returns how many went in."""
        frontier = self._frontier
        neighbours = self.grid.neighbors(node.position, self.config.allow_diagonal, self._order)

        if frontier.local:
            self._drop_candidates()
            frontier.anchor(node)

        added = 0
        for pos in neighbours:
            g     = node.g + self.grid.cost(node.position, pos)
            state = self._nodes.get(pos)

            if frontier.local:
                if state is not None and state.status is NodeStatus.CLOSED and not frontier.revisit:
                    continue
                if state is None:
                    state = NodeState(pos, h=self._h(pos, self.goal))
                    self._nodes[pos] = state
                state.g, state.parent = g, node.position
                if state.status is not NodeStatus.CLOSED:
                    state.status = NodeStatus.OPEN
                frontier.push(state)
                added += 1
                continue

            if state is None:
                state = NodeState(pos, g=g, h=self._h(pos, self.goal), parent=node.position, status=NodeStatus.OPEN)
                self._nodes[pos] = state
                frontier.push(state)
                added += 1
            elif frontier.relax and g < state.g - EPSILON:
                state.g, state.parent = g, node.position
                if state.status is NodeStatus.CLOSED:
                    state.status = NodeStatus.OPEN
                frontier.push(state)
                added += 1
            elif not (frontier.relax or frontier.mark_on_push) and state.status is NodeStatus.OPEN:
                state.g, state.parent = g, node.position
                frontier.push(state)
                added += 1
        return added

    def _drop_candidates(self) -> None:
        for pos in self._frontier.positions():
            state = self._nodes[pos]
            if state.status is NodeStatus.OPEN:
                state.status = NodeStatus.UNSEEN
        self._frontier.clear()

    def _finish(self, outcome: Outcome, extra: dict, explanation: str, line: Optional[str] = None, **kw) -> Step:
        self.outcome = outcome
        self.status  = _STATUS_FOR[outcome]
        if line is None:
            line = "goal" if outcome is Outcome.SUCCEEDED else "fail"
        step = self._record(line, extra, explanation, **kw)
        logger.info(
            "{} run {} after {} step(s), {} expansion(s), path of {} cell(s)",
            self.algorithm.key, outcome.value, len(self._steps), self.expansions, len(step.path),
        )
        return step

    def _record(self, line: str, extra: dict, explanation: str, open_set=None, closed=None) -> Step:
        sb = self._sb
        sb.reset()
        sb.set_current(self._current.position)
        sb.set_frontier(open_set if open_set is not None else self._frontier.positions())
        sb.set_closed(closed if closed is not None else self._closed)
        sb.set_path(self._path())
        sb.extra           = dict(extra)
        sb.status          = self.status.value
        sb.pseudocode_line = self.algorithm.lines.get(line, 0)
        sb.explanation     = explanation
        step = sb.build(index=len(self._steps))
        self._steps.append(step)
        logger.debug("{} step {}: {}", self.algorithm.key, step.index, explanation)
        return step

    def _path(self) -> List[Position]:
        """current → … → start."""
        if self._frontier.local:
            return list(reversed(self._trail))
        path = []
        pos: Optional[Position] = self._current.position
        while pos is not None:
            path.append(pos)
            pos = self._nodes[pos].parent if pos != self.start else None
        return path

    # ------------------------------------------------------------------
    # Internal: explanations
    # ------------------------------------------------------------------
    def _explain_pick(self, node: NodeState, extra: dict) -> str:
        kind = self.algorithm.kind
        if self._frontier.local and self.expansions == 1:
            return f"Look around {node.position} (h = {node.h:.2f})."
        if kind is StrategyKind.PROBABILISTIC_ACCEPT:
            if extra.get("neighbor_cost", 0.0) > extra.get("current_cost", 0.0):
                return (f"Move to {node.position}: worse by "
                        f"{extra['neighbor_cost'] - extra['current_cost']:.2f} but accepted "
                        f"(p = {extra['acceptance_probability']:.3f}, T = {extra['temperature']:.3f}).")
            return f"Move to {node.position}: h = {node.h:.2f} is no worse (T = {extra.get('temperature', 0.0):.3f})."
        if self._frontier.local:
            return f"Move to {node.position}: lowest h among the neighbours (h = {node.h:.2f})."
        if node.position == self.start:
            return f"Expand {node.position}."
        reason = _PICKED_BECAUSE.get(kind, "it is next")
        scores = f" (g = {node.g:.2f}, h = {node.h:.2f}, f = {node.f:.2f})" if self.algorithm.has_heuristic else ""
        return f"Expand {node.position}: {reason}{scores}."

    def _explain_no_move(self, extra: dict) -> str:
        here = self._current.position
        if extra.get("frozen"):
            return (f"Frozen at {here}: T = {extra['temperature']:.4f} is below "
                    f"{self.config.min_temperature}.")
        if self.algorithm.kind is StrategyKind.BEST_NEIGHBOR:
            return f"Stuck at {here}: no neighbour has a lower h than {self._current.h:.2f}."
        if extra.get("stuck"):
            return f"Stuck at {here}: no move left to try."
        return f"Open set is empty: goal {self.goal} cannot be reached."

    def _explain_goal(self) -> str:
        cost = self._nodes[self.goal].g
        return (f"Goal {self.goal} reached after {self.expansions} expansion(s); "
                f"path cost {cost:.2f}.")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
def _pick_heuristic(grid: Grid, config: RunConfig):
    if config.heuristic is not None:
        return resolve_heuristic(config.heuristic)
    # manhattan overestimates once diagonal moves are allowed
    if config.allow_diagonal and grid.heuristic_fn is manhattan:
        return octile
    return grid.heuristic_fn


def create_run(
    grid: Grid,
    start,
    goal,
    strategy_kind: Union[str, StrategyKind, AlgoInfo],
    config: Union[RunConfig, dict, None] = None,
    **overrides,
) -> SearchRun:
    """
    Validate the inputs and build a READY SearchRun.

    start / goal may be Positions, (x, y) pairs or {"x", "y"} dicts.
    Raises InvalidPosition for a start or goal outside the grid or on an
    obstacle, ValueError for an unknown strategy or a bad config.
    """
    info = resolve(strategy_kind)
    if config is None:
        config = RunConfig()
    elif isinstance(config, dict):
        config = RunConfig.from_dict(config)
    if overrides:
        config = config.merged(**overrides)

    start = grid.require_passable(start)
    goal  = grid.require_passable(goal)
    if info.kind is StrategyKind.PROBABILISTIC_ACCEPT and config.random_source is None and config.seed is None:
        raise ValueError("Simulated annealing needs a random source (random_source or seed)")
    return SearchRun(grid, start, goal, info, config)
