import pytest

from grid import IndexOutOfRange
from algorithms.blocks_world import (
    EXAMPLE_GOAL, EXAMPLE_START, Move, apply_move, legal_moves, plan, solve,
)
from engine import Stepper


def test_only_the_top_block_can_move():
    assert legal_moves(EXAMPLE_START) == [Move("B", 0, 1), Move("B", 0, 2), Move("B", 0, 3)]
    with pytest.raises(ValueError):
        apply_move(EXAMPLE_START, Move("A", 0, 1))
    with pytest.raises(ValueError):
        apply_move(EXAMPLE_START, Move("B", 0, 0))
    assert apply_move(EXAMPLE_START, Move("B", 0, 2)) == (("D", "A", "C"), (), ("B",), ())


def test_example_is_solved_in_eight_moves():
    # every block has to leave the first stack once and come back once
    trace = solve()
    assert trace.solved
    assert len(trace.moves) == 8
    assert trace.step_count == 9
    assert trace.at(0).state == EXAMPLE_START
    assert trace.at(0).action == "start"
    assert trace.final.state == EXAMPLE_GOAL
    assert trace.final.action == "goal"
    assert [s.action for s in trace.steps[1:-1]] == ["move"] * 7


def test_each_step_makes_one_legal_move():
    trace = solve()
    assert [s.index for s in trace] == list(range(trace.step_count))
    for before, after in zip(trace.steps, trace.steps[1:]):
        assert after.move in legal_moves(before.state)
        assert apply_move(before.state, after.move) == after.state
        assert after.explanation.startswith(after.move.describe())


def test_goal_with_fewer_stacks_is_padded():
    assert plan([["A"], ["B"]], [["A", "B"]]) == [Move("B", 1, 0)]
    assert plan([["A"], ["B"]], [["A"], ["B"]]) == []
    assert solve([["A"], ["B"]], [["A"], ["B"]]).step_count == 1


def test_unreachable_goal_records_a_failed_step():
    trace = solve([["A", "B"]], [["B", "A"]])
    assert not trace.solved
    assert trace.moves == []
    assert [s.action for s in trace] == ["start", "failed"]
    with pytest.raises(IndexOutOfRange):
        trace.at(2)


@pytest.mark.parametrize("start, goal", [
    ([["A", "B"], []], [["A", "C"], []]),
    ([["A", "A"], []], [["A"], ["A"]]),
    ([["A"]], [["A"], []]),
])
def test_bad_worlds_are_rejected(start, goal):
    with pytest.raises(ValueError):
        plan(start, goal)


def test_stepper_plays_a_plan():
    trace = solve()
    stepper = Stepper(trace)
    assert stepper.current.action == "start"
    assert stepper.jump_to_end().state == EXAMPLE_GOAL
    assert stepper.previous().index == 7
    data = trace.at(1).to_dict()
    assert data["move"] == {"block": "B", "source": 0, "target": 1}
    assert data["state"] == [["D", "A", "C"], ["B"], [], []]
