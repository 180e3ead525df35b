import pytest

from algorithms.step import Outcome
from scenarios import REGISTRY, get_scenario, list_scenarios, parse_scenario

from conftest import P


def test_registry_lists_every_preset():
    keys = [s.key for s in list_scenarios()]
    assert keys == list(REGISTRY)
    assert {"two_walls", "lecture_grid", "hill_valley", "open_field", "swamp", "sealed_goal"} <= set(keys)


def test_unknown_scenario():
    with pytest.raises(KeyError):
        get_scenario("moon")


def test_two_walls_layout(two_walls):
    grid = two_walls.grid
    assert (grid.width, grid.height) == (8, 8)
    assert (two_walls.start, two_walls.goal) == (P(1, 1), P(6, 6))
    walls = {P(2, y) for y in range(1, 6)} | {P(5, y) for y in range(2, 7)}
    assert set(grid.obstacles) == walls


def test_lecture_grid_gaps(lecture):
    grid = lecture.grid
    assert grid.is_passable(P(2, 1)) and grid.is_passable(P(5, 6))
    assert not grid.is_passable(P(3, 3)) and not grid.is_passable(P(6, 2))


def test_suggested_run_uses_the_preset_config(lecture):
    run = lecture.create_run()
    assert run.algorithm.key == "greedy"
    assert run.config.backtrack is False
    assert run.run().outcome is Outcome.EXHAUSTED


def test_ascii_round_trip(lecture):
    again = parse_scenario("copy", lecture.to_ascii())
    assert again.grid == lecture.grid
    assert (again.start, again.goal) == (lecture.start, lecture.goal)
    assert again.label == "Copy"


def test_map_without_goal_is_rejected():
    with pytest.raises(ValueError):
        parse_scenario("broken", "S..\n...")
