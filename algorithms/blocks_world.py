"""
blocks_world.py — Blocks World planning
=========================================
A robot arm rearranges lettered blocks standing in a row of stacks:

  • only the top (clear) block of a stack can be picked up
  • it goes onto another stack: on the table if that stack is empty,
    on its top block otherwise
  • one block per move

plan() runs Breadth-First Search over whole world states, so the plan
it returns has the fewest moves.  solve() turns a plan into a
BlocksTrace: step 0 is the start, then one BlocksStep per move.  Like
CspTrace it exposes step_count and at(), so engine.Stepper plays it.

Design decisions:
  - A world state is a tuple of stacks, each stack a tuple listed bottom
    to top.  States are hashable, which is all BFS needs for its
    visited set.
  - Moves are generated source stack first, then target stack, both in
    ascending order, so the plan is fully determined by the input.
  - The goal must match exactly, empty stacks included.  A goal given
    with fewer stacks than the start is padded with empty ones.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from grid import IndexOutOfRange

Stack      = Tuple[str, ...]
WorldState = Tuple[Stack, ...]

# D at the bottom, B on top, three empty stacks beside it.
EXAMPLE_START: WorldState = (("D", "A", "C", "B"), (), (), ())
# A at the bottom, D on top, all on the first stack.
EXAMPLE_GOAL:  WorldState = (("A", "B", "C", "D"), (), (), ())


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Plan(start, goal):",                           # 0
    "    queue ← [start];  seen ← {start}",             # 1
    "    while queue:",                                 # 2
    "        state ← queue.popleft()",                  # 3
    "        if state == goal: return moves to state",  # 4
    "        for each clear block b, each other stack s:", # 5
    "            next ← state with b moved onto s",     # 6
    "            if next not in seen: queue.append(next)", # 7
    "    return NO PLAN",                               # 8
]


@dataclass(frozen=True)
class Move:
    block:  str
    source: int
    target: int

    def describe(self) -> str:
        return f"Move {self.block} from stack {self.source} to stack {self.target}"


def normalise(state: Sequence[Sequence[str]]) -> WorldState:
    return tuple(tuple(stack) for stack in state)


def legal_moves(state: WorldState) -> List[Move]:
    """Every move of a clear block onto another stack."""
    moves = []
    for source, stack in enumerate(state):
        if not stack:
            continue
        for target in range(len(state)):
            if target != source:
                moves.append(Move(stack[-1], source, target))
    return moves


def apply_move(state: WorldState, move: Move) -> WorldState:
    if not 0 <= move.source < len(state) or not 0 <= move.target < len(state):
        raise ValueError(f"No such stack in {move!r}")
    stack = state[move.source]
    if not stack or stack[-1] != move.block:
        raise ValueError(f"{move.block} is not clear on stack {move.source}")
    if move.source == move.target:
        raise ValueError(f"{move.block} is already on stack {move.target}")
    stacks = list(state)
    stacks[move.source] = stack[:-1]
    stacks[move.target] = state[move.target] + (move.block,)
    return tuple(stacks)


def _check(start: WorldState, goal: WorldState) -> WorldState:
    blocks = [b for stack in start for b in stack]
    if len(set(blocks)) != len(blocks):
        raise ValueError(f"Block names repeat in {start!r}")
    if len(goal) > len(start):
        raise ValueError(f"Goal uses {len(goal)} stacks, start has only {len(start)}")
    if sorted(blocks) != sorted(b for stack in goal for b in stack):
        raise ValueError("Start and goal must hold the same blocks")
    return goal + ((),) * (len(start) - len(goal))


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------
def plan(start: Sequence[Sequence[str]], goal: Sequence[Sequence[str]]) -> Optional[List[Move]]:
    """Shortest list of moves from start to goal, or None if there is none."""
    start = normalise(start)
    goal  = _check(start, normalise(goal))

    parent: Dict[WorldState, Optional[Tuple[WorldState, Move]]] = {start: None}
    queue = deque([start])
    while queue:
        state = queue.popleft()
        if state == goal:
            moves = []
            while parent[state] is not None:
                state, move = parent[state]
                moves.append(move)
            moves.reverse()
            return moves
        for move in legal_moves(state):
            nxt = apply_move(state, move)
            if nxt not in parent:
                parent[nxt] = (state, move)
                queue.append(nxt)
    return None


# ---------------------------------------------------------------------------
# Trace
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BlocksStep:
    """
    Attributes:
        index       : 0-based index of this step.
        state       : Stacks after this step, each listed bottom to top.
        action      : "start", "move", "goal" or "failed".
        explanation : Human-readable "why" text.
        move        : The move made (None on the start and failed steps).
    """

    index:       int
    state:       WorldState
    action:      str
    explanation: str
    move:        Optional[Move] = None

    def to_dict(self) -> dict:
        return {
            "index":       self.index,
            "state":       [list(stack) for stack in self.state],
            "action":      self.action,
            "explanation": self.explanation,
            "move":        None if self.move is None else {
                "block": self.move.block, "source": self.move.source, "target": self.move.target,
            },
        }


class BlocksTrace:
    def __init__(self, steps: Sequence[BlocksStep], goal: WorldState, solved: bool):
        self.steps  = tuple(steps)
        self.goal   = goal
        self.solved = solved

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def moves(self) -> List[Move]:
        return [s.move for s in self.steps if s.move is not None]

    @property
    def final(self) -> BlocksStep:
        return self.steps[-1]

    def at(self, index: int) -> BlocksStep:
        if not 0 <= index < len(self.steps):
            raise IndexOutOfRange(index, len(self.steps))
        return self.steps[index]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)


def _show(state: WorldState) -> str:
    return "  ".join(f"{i}:[{' '.join(stack)}]" for i, stack in enumerate(state))


def solve(
    start: Sequence[Sequence[str]] = EXAMPLE_START,
    goal: Sequence[Sequence[str]] = EXAMPLE_GOAL,
) -> BlocksTrace:
    """Plan, then record one step per move."""
    start = normalise(start)
    moves = plan(start, goal)
    goal  = _check(start, normalise(goal))

    opening = f"Start (bottom to top): {_show(start)}"
    if moves == []:
        opening += "; already the goal"
    steps = [BlocksStep(0, start, "start", opening)]
    if moves is None:
        logger.info("blocks world: no plan from {} to {}", _show(start), _show(goal))
        steps.append(BlocksStep(1, start, "failed", "No sequence of moves reaches the goal"))
        return BlocksTrace(steps, goal, solved=False)

    state = start
    for i, move in enumerate(moves, start=1):
        state  = apply_move(state, move)
        action = "goal" if i == len(moves) else "move"
        text   = move.describe()
        if action == "goal":
            text += f": goal reached in {len(moves)} move(s)"
        steps.append(BlocksStep(i, state, action, text, move))
    logger.info("blocks world: plan of {} move(s) for {} block(s)", len(moves), sum(map(len, start)))
    return BlocksTrace(steps, goal, solved=True)
