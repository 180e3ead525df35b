import pytest

from grid import IndexOutOfRange
from algorithms.csp import map_colouring, solve
from engine import Stepper, StepperState, Trace


@pytest.fixture
def trace(lecture):
    return lecture.create_run("hill_climbing").run()


def test_loads_at_the_first_step(trace):
    stepper = Stepper(trace)
    assert stepper.index == 0
    assert stepper.current is trace.at(0)
    assert stepper.at_start and not stepper.at_end
    assert stepper.state is StepperState.AT_START


def test_next_and_previous_clamp(trace):
    stepper = Stepper(trace)
    assert stepper.previous() is trace.at(0)
    assert stepper.next() is trace.at(1)
    assert stepper.state is StepperState.MIDDLE
    last = stepper.jump_to_end()
    assert last is trace.final
    assert stepper.next() is trace.final
    assert stepper.at_end
    assert stepper.rewind() is trace.at(0)


def test_seek_is_strict(trace):
    stepper = Stepper(trace)
    assert stepper.seek(3).index == 3
    with pytest.raises(IndexOutOfRange):
        stepper.seek(trace.step_count)
    with pytest.raises(IndexOutOfRange):
        stepper.seek(-1)
    assert stepper.index == 3


def test_on_step_fires_only_when_the_cursor_moves(trace):
    seen = []
    stepper = Stepper(trace, on_step=lambda s: seen.append(s.index))
    stepper.previous()
    stepper.next()
    stepper.next()
    stepper.seek(2)
    stepper.rewind()
    assert seen == [0, 1, 2, 0]


def test_idle_and_reset():
    stepper = Stepper()
    assert stepper.state is StepperState.IDLE
    assert stepper.current is None
    assert stepper.next() is None
    stepper.load(Trace([]))
    assert stepper.rewind() is None
    assert stepper.state is StepperState.IDLE
    stepper.reset()
    assert stepper.trace is None


def test_plays_back_a_csp_trace():
    csp = solve(map_colouring())
    stepper = Stepper(csp)
    actions = [stepper.current.action]
    while not stepper.at_end:
        actions.append(stepper.next().action)
    assert actions[-1] == "solved"
    assert len(actions) == csp.step_count
