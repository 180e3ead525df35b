"""
csp.py — Constraint Satisfaction by Backtracking
==================================================
Generator-based backtracking search over a finite-domain CSP.  Yields a
CspStep at every meaningful event:

  1. Try a value for the next unassigned variable
  2. The value violates a constraint  →  record which ones, try the next
  3. A variable runs out of values    →  backtrack (unassign it)
  4. Every variable assigned          →  solved
  5. The first variable runs out      →  no solution

Variables are taken in the order given, values in domain order, so the
trace is fully determined by the problem.  CspTrace exposes step_count
and at() and can be replayed with engine.Stepper like a search trace.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Generator, List, Optional, Sequence, Tuple

from grid import IndexOutOfRange

Assignment = Dict[str, str]


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Backtrack(assignment):",                         # 0
    "    if assignment is complete: return assignment",   # 1
    "    var ← next unassigned variable",                 # 2
    "    for value in domain(var):",                      # 3
    "        if consistent(var = value):",                # 4
    "            assignment[var] ← value",                # 5
    "            result ← Backtrack(assignment)",         # 6
    "            if result: return result",               # 7
    "            remove var from assignment",             # 8
    "    return FAILURE",                                 # 9
]


@dataclass(frozen=True)
class Constraint:
    variables:   Tuple[str, ...]
    description: str
    predicate:   Callable[[Assignment], bool] = field(compare=False)

    def satisfied(self, assignment: Assignment) -> bool:
        """Unassigned variables never violate a constraint."""
        if any(v not in assignment for v in self.variables):
            return True
        return self.predicate(assignment)


def not_equal(a: str, b: str) -> Constraint:
    return Constraint((a, b), f"{a} ≠ {b}", lambda asg: asg[a] != asg[b])


@dataclass
class CspProblem:
    variables:   List[str]
    domains:     Dict[str, List[str]]
    constraints: List[Constraint] = field(default_factory=list)

    def __post_init__(self):
        missing = [v for v in self.variables if v not in self.domains]
        if missing:
            raise ValueError(f"No domain for variable(s): {', '.join(missing)}")
        for c in self.constraints:
            unknown = [v for v in c.variables if v not in self.domains]
            if unknown:
                raise ValueError(f"Constraint {c.description!r} names unknown variable(s): {', '.join(unknown)}")

    def violated(self, assignment: Assignment) -> List[Constraint]:
        return [c for c in self.constraints if not c.satisfied(assignment)]


@dataclass(frozen=True)
class CspStep:
    """
    Attributes:
        index       : 0-based index of this step.
        assignments : Variable → value, including the value being tried.
        variable    : Variable acted on (None on the final step).
        value       : Value tried (None when backtracking).
        consistent  : True when no constraint is violated.
        violated    : Descriptions of the violated constraints.
        action      : "assign", "reject", "backtrack", "solved" or "failed".
        explanation : Human-readable "why" text.
    """

    index:       int
    assignments: Tuple[Tuple[str, str], ...]
    variable:    Optional[str]
    value:       Optional[str]
    consistent:  bool
    violated:    Tuple[str, ...] = ()
    action:      str             = "assign"
    explanation: str             = ""

    @property
    def is_final(self) -> bool:
        return self.action in ("solved", "failed")

    def to_dict(self) -> dict:
        return {
            "index":       self.index,
            "assignments": dict(self.assignments),
            "variable":    self.variable,
            "value":       self.value,
            "consistent":  self.consistent,
            "violated":    list(self.violated),
            "action":      self.action,
            "explanation": self.explanation,
        }


class CspTrace:
    def __init__(self, steps: Sequence[CspStep], solution: Optional[Assignment]):
        self.steps    = tuple(steps)
        self.solution = dict(solution) if solution is not None else None

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def solved(self) -> bool:
        return self.solution is not None

    def at(self, index: int) -> CspStep:
        if not 0 <= index < len(self.steps):
            raise IndexOutOfRange(index, len(self.steps))
        return self.steps[index]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def backtracking_search(problem: CspProblem) -> Generator[CspStep, None, Optional[Assignment]]:
    """Yields CspSteps; the generator's return value is the solution or None."""
    assignment: Assignment = {}
    counter = [0]

    def emit(variable, value, violated, action, explanation) -> CspStep:
        step = CspStep(
            index=counter[0],
            assignments=tuple(assignment.items()),
            variable=variable,
            value=value,
            consistent=not violated,
            violated=tuple(c.description for c in violated),
            action=action,
            explanation=explanation,
        )
        counter[0] += 1
        return step

    def backtrack(depth: int):
        if depth == len(problem.variables):
            return True
        var = problem.variables[depth]
        for value in problem.domains[var]:
            assignment[var] = value
            broken = problem.violated(assignment)
            if broken:
                names = ", ".join(c.description for c in broken)
                yield emit(var, value, broken, "reject", f"Try {var} = {value} (violates {names})")
                del assignment[var]
                continue
            yield emit(var, value, [], "assign", f"Assign {var} = {value}")
            if (yield from backtrack(depth + 1)):
                return True
            del assignment[var]
            yield emit(var, None, [], "backtrack", f"Backtrack: no consistent value below {var} = {value}")
        return False

    solved = yield from backtrack(0)
    if solved:
        yield emit(None, None, [], "solved", "All constraints satisfied")
        return dict(assignment)
    yield emit(None, None, [], "failed", "Every value of the first variable fails: no solution")
    return None


def solve(problem: CspProblem) -> CspTrace:
    """Run backtracking_search to completion and freeze its steps."""
    gen   = backtracking_search(problem)
    steps = []
    while True:
        try:
            steps.append(next(gen))
        except StopIteration as stop:
            return CspTrace(steps, stop.value)


def map_colouring(
    variables: Sequence[str] = ("A", "B", "C"),
    colours: Sequence[str] = ("Red", "Green", "Blue"),
    borders: Optional[Sequence[Tuple[str, str]]] = None,
) -> CspProblem:
    """Colour regions so neighbours differ.  Defaults to the A/B/C triangle."""
    if borders is None:
        borders = [("A", "B"), ("B", "C"), ("A", "C")]
    return CspProblem(
        variables=list(variables),
        domains={v: list(colours) for v in variables},
        constraints=[not_equal(a, b) for a, b in borders],
    )
