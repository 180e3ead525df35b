import pytest

from grid import Grid, Position
from engine import create_run
from scenarios import get_scenario


def P(x, y):
    return Position(x, y)


def run_to_end(grid, start, goal, algorithm, **config):
    run = create_run(grid, start, goal, algorithm, **config)
    trace = run.run()
    return run, trace


def assert_well_formed(grid, trace, start, goal):
    """Shape every trace must have, whatever the algorithm."""
    first = trace.at(0)
    assert first.current == start
    assert first.closed_set == ()
    assert first.path == (start,)
    assert [s.index for s in trace] == list(range(trace.step_count))

    for before, after in zip(trace.steps, trace.steps[1:]):
        assert after.closed_set[:len(before.closed_set)] == before.closed_set

    for step in trace:
        assert step.path[0] == step.current
        assert step.path[-1] == start
        assert len(set(step.path)) == len(step.path)
        for a, b in zip(step.path, step.path[1:]):
            assert max(abs(a.x - b.x), abs(a.y - b.y)) == 1
            assert grid.is_passable(a) and grid.is_passable(b)

    final = trace.final
    assert final.is_final
    if final.status == "succeeded":
        assert final.current == goal
    else:
        assert final.open_set == ()
        assert final.current != goal


@pytest.fixture
def lecture():
    return get_scenario("lecture_grid")


@pytest.fixture
def two_walls():
    return get_scenario("two_walls")


@pytest.fixture
def open_grid():
    return Grid(5, 5)
