"""
engine/
-------
Run, record and play back searches.

    from engine import create_run, Stepper, Recorder, compare
"""

from engine.config   import RunConfig
from engine.trace    import Trace
from engine.run      import RunStatus, SearchRun, create_run
from engine.stepper  import Stepper, StepperState
from engine.recorder import ComparisonResult, Recorder, RunMetrics, compare

__all__ = [
    "RunConfig",
    "Trace",
    "RunStatus",
    "SearchRun",
    "create_run",
    "Stepper",
    "StepperState",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
]
