"""
recorder.py — Run Recorder & Analytics
========================================
Runs a search to completion, keeps its Trace, then computes the metrics
a renderer shows on an analytics card or in a side-by-side comparison.

Usage:
    rec = Recorder()
    rec.start("astar", grid, start=(1, 1), goal=(6, 6))
    rec.run_to_completion()          # drives the SearchRun to a terminal state
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # serialisable snapshot for save/replay

Comparison Mode:
    Hold two Recorders (one per algorithm), run both to completion on the
    SAME grid, then call compare(rec1, rec2) → ComparisonResult.
"""

import math
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Union

from loguru import logger

from grid import Grid
from grid.heuristics import heuristic_name
from algorithms import AlgoInfo, get_algorithm
from engine.config import RunConfig
from engine.run import SearchRun, create_run
from engine.stepper import Stepper
from engine.trace import Trace


# ---------------------------------------------------------------------------
# Metrics dataclass: one analytics card
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:       str   = ""
    algo_label:     str   = ""
    start:          tuple = ()
    goal:           tuple = ()
    nodes_expanded: int   = 0
    path_length:    int   = 0          # moves on the final path
    path_cost:      float = 0.0        # summed step costs of the final path
    total_steps:    int   = 0          # Steps recorded
    outcome:        str   = ""
    wall_time_ms:   float = 0.0        # wall-clock time to run to completion
    path_found:     bool  = False
    heuristic:      str   = ""         # for A* / Greedy / local search


# ---------------------------------------------------------------------------
# ComparisonResult: side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_nodes: str = ""   # which algo expanded fewer nodes
    winner_steps: str = ""
    winner_path:  str = ""   # which algo found the cheaper path


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        run     : The underlying SearchRun.
        trace   : Trace of the finished run (after run_to_completion).
        metrics : Computed RunMetrics (after run_to_completion).
        stepper : Stepper over the trace, ready for playback.
    """

    def __init__(self):
        self.run:     Optional[SearchRun]  = None
        self.trace:   Optional[Trace]      = None
        self.metrics: Optional[RunMetrics] = None
        self.stepper: Optional[Stepper]    = None

        self._algo_info: Optional[AlgoInfo] = None
        self._grid:      Optional[Grid]     = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(
        self,
        algorithm: str,
        grid: Grid,
        start,
        goal,
        config: Union[RunConfig, dict, None] = None,
    ) -> None:
        """Create the SearchRun for this recording."""
        info = get_algorithm(algorithm)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algorithm}")

        self._algo_info = info
        self._grid      = grid
        self.trace      = None
        self.metrics    = None
        self.stepper    = None
        self.run        = create_run(grid, start, goal, info, config)

    def run_to_completion(self) -> RunMetrics:
        """Drive the run to a terminal state, keep its trace, compute metrics."""
        if self.run is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        # a budget in the config only slices run(); keep going until terminal
        while True:
            self.trace = self.run.run()
            if self.run.is_terminal:
                break
        wall_ms = (time.monotonic() - started) * 1000

        self.stepper = Stepper(self.trace)
        self.metrics = self._compute_metrics(wall_ms)
        logger.info(
            "recorded {}: {} step(s), {} expanded, outcome {}",
            self.metrics.algo_key, self.metrics.total_steps,
            self.metrics.nodes_expanded, self.metrics.outcome,
        )
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "config":   self.run.config.to_dict() if self.run else {},
            "grid":     self._grid.to_dict() if self._grid else {},
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "trace":    self.trace.to_dict() if self.trace else {},
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info  = self._algo_info
        run   = self.run
        trace = self.trace
        path  = trace.path
        path_cost = self._grid.path_cost(path) if len(path) > 1 else 0.0

        return RunMetrics(
            algo_key=info.key,
            algo_label=info.label,
            start=(run.start.x, run.start.y),
            goal=(run.goal.x, run.goal.y),
            nodes_expanded=run.expansions,
            path_length=max(len(path) - 1, 0),
            path_cost=round(path_cost, 6),
            total_steps=trace.step_count,
            outcome=trace.outcome.value if trace.outcome else "",
            wall_time_ms=round(wall_ms, 2),
            path_found=bool(path),
            heuristic=heuristic_name(run.heuristic) if info.has_heuristic else "",
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key, lower_is_better=True):
        if l_val == r_val:
            return "tie"
        if lower_is_better:
            return l_key if l_val < r_val else r_key
        return l_key if l_val > r_val else r_key

    # a run without a path never wins on path cost
    l_cost = l.path_cost if l.path_found else math.inf
    r_cost = r.path_cost if r.path_found else math.inf

    return ComparisonResult(
        left=l,
        right=r,
        winner_nodes=winner(l.nodes_expanded, r.nodes_expanded, l.algo_label, r.algo_label),
        winner_steps=winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
        winner_path =winner(l_cost, r_cost, l.algo_label, r.algo_label),
    )
