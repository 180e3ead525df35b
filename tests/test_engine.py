import math
import random

import pytest

from grid import Grid, InvalidPosition, OutOfBounds
from algorithms import REGISTRY, StrategyKind
from algorithms.step import Outcome
from engine import RunConfig, RunStatus, create_run
from scenarios import get_scenario

from conftest import P, assert_well_formed, run_to_end


# ---------------------------------------------------------------------------
# create_run validation
# ---------------------------------------------------------------------------
def test_start_on_an_obstacle_is_rejected(two_walls):
    with pytest.raises(InvalidPosition):
        create_run(two_walls.grid, (2, 1), two_walls.goal, "bfs")


def test_goal_outside_the_grid_is_rejected(two_walls):
    with pytest.raises(OutOfBounds):
        create_run(two_walls.grid, two_walls.start, (8, 8), "bfs")


def test_unknown_algorithm_is_rejected(open_grid):
    with pytest.raises(ValueError):
        create_run(open_grid, (0, 0), (4, 4), "teleport")


def test_annealing_without_random_source_is_rejected(open_grid):
    with pytest.raises(ValueError):
        create_run(open_grid, (0, 0), (4, 4), "simulated_annealing")


def test_strategy_can_be_named_by_kind(open_grid):
    assert create_run(open_grid, (0, 0), (4, 4), StrategyKind.PRIORITY_F).algorithm is REGISTRY["astar"]
    assert create_run(open_grid, (0, 0), (4, 4), "lifo").algorithm is REGISTRY["dfs"]


def test_config_from_mapping_and_overrides(open_grid):
    run = create_run(open_grid, (0, 0), (4, 4), "astar", {"allowDiagonal": True}, max_steps=3)
    assert run.config.allow_diagonal
    assert run.config.max_steps == 3
    with pytest.raises(ValueError):
        create_run(open_grid, (0, 0), (4, 4), "astar", {"warp": 9})


# ---------------------------------------------------------------------------
# Step semantics
# ---------------------------------------------------------------------------
def test_first_step_shows_only_the_start(lecture):
    run = lecture.create_run("astar")
    assert run.status is RunStatus.READY
    step = run.step()
    assert run.status is RunStatus.RUNNING
    assert step.index == 0
    assert step.current == lecture.start
    assert step.open_set == (lecture.start,)
    assert step.closed_set == ()
    assert step.path == (lecture.start,)
    assert step.pseudocode_line == REGISTRY["astar"].lines["init"]


@pytest.mark.parametrize("algorithm", ["bfs", "dfs", "greedy", "astar", "hill_climbing"])
def test_second_step_closes_and_expands_the_start(lecture, algorithm):
    run = lecture.create_run(algorithm)
    run.step()
    step = run.step()
    assert step.current == lecture.start
    assert step.closed_set == (lecture.start,)
    assert step.pseudocode_line == REGISTRY[algorithm].lines["expand"]
    assert "accepted" not in step.extra
    assert step.open_set
    assert run.expansions == 1


def test_start_equal_to_goal_succeeds_at_step_zero(open_grid):
    run, trace = run_to_end(open_grid, (2, 2), (2, 2), "dfs")
    assert trace.outcome is Outcome.SUCCEEDED
    assert trace.step_count == 1
    assert trace.path == (P(2, 2),)
    assert_well_formed(open_grid, trace, P(2, 2), P(2, 2))


def test_step_after_the_end_changes_nothing(lecture):
    run = lecture.create_run("astar")
    trace = run.run()
    count = len(run.steps)
    assert run.step() is trace.final
    assert len(run.steps) == count
    assert run.run() == trace


def test_budget_pauses_and_resumes(lecture):
    run = lecture.create_run("astar")
    partial = run.run(max_steps=3)
    assert partial.outcome is Outcome.STEP_BUDGET_EXCEEDED
    assert partial.step_count == 3
    assert run.status is RunStatus.RUNNING
    assert run.outcome is None

    rest = run.run()
    assert rest.outcome is Outcome.SUCCEEDED
    assert rest.steps[:3] == partial.steps
    assert_well_formed(lecture.grid, rest, lecture.start, lecture.goal)


def test_budget_from_config_applies_per_call(lecture):
    run = lecture.create_run("bfs", RunConfig(max_steps=5))
    assert run.run().step_count == 5
    assert run.run().step_count == 10
    with pytest.raises(ValueError):
        run.run(max_steps=0)


def test_grid_is_not_changed_by_a_run(two_walls):
    before = two_walls.grid.to_dict()
    two_walls.create_run("astar").run()
    assert two_walls.grid.to_dict() == before


# ---------------------------------------------------------------------------
# Uninformed search
# ---------------------------------------------------------------------------
def test_bfs_finds_fewest_moves_on_open_field():
    scenario = get_scenario("open_field")
    run, trace = run_to_end(scenario.grid, scenario.start, scenario.goal, "bfs")
    assert trace.outcome is Outcome.SUCCEEDED
    assert len(trace.path) == 15
    assert_well_formed(scenario.grid, trace, scenario.start, scenario.goal)


def test_dfs_reaches_the_goal(two_walls):
    run, trace = run_to_end(two_walls.grid, two_walls.start, two_walls.goal, "dfs")
    assert trace.outcome is Outcome.SUCCEEDED
    assert trace.path[0] == two_walls.start and trace.path[-1] == two_walls.goal
    assert_well_formed(two_walls.grid, trace, two_walls.start, two_walls.goal)


@pytest.mark.parametrize("algorithm", ["bfs", "dfs", "greedy", "astar"])
def test_sealed_goal_exhausts_every_reachable_cell(algorithm):
    scenario = get_scenario("sealed_goal")
    run, trace = run_to_end(scenario.grid, scenario.start, scenario.goal, algorithm)
    assert trace.outcome is Outcome.EXHAUSTED
    assert run.status is RunStatus.FAILED
    assert trace.final.status == "failed"
    assert len(trace.final.closed_set) == 55
    assert trace.final.pseudocode_line == REGISTRY[algorithm].lines["fail"]
    assert_well_formed(scenario.grid, trace, scenario.start, scenario.goal)


# ---------------------------------------------------------------------------
# Informed search
# ---------------------------------------------------------------------------
def test_astar_on_lecture_grid_goes_down_column_one(lecture):
    run, trace = run_to_end(lecture.grid, lecture.start, lecture.goal, "astar")
    assert trace.outcome is Outcome.SUCCEEDED
    assert trace.path == (
        P(1, 1), P(1, 2), P(1, 3), P(1, 4), P(1, 5), P(1, 6),
        P(2, 6), P(3, 6), P(4, 6), P(5, 6), P(6, 6),
    )
    closed = trace.final.closed_set
    assert closed.index(P(1, 2)) < closed.index(P(1, 6))
    assert trace.final.extra["f"] == pytest.approx(10)
    assert_well_formed(lecture.grid, trace, lecture.start, lecture.goal)


# Two routes into (1, 1): over the cost-2 cell (1, 0) for 3, or through
# (0, 1) for 2.  The estimate is admissible but not consistent, so A*
# closes (1, 1) over the dear route first and has to re-open it.
DETOUR_H = {(0, 1): 4.0, (2, 1): 2.0, (3, 1): 1.0}


def detour_grid():
    return Grid(5, 2, obstacles=[(2, 0), (3, 0), (4, 0)], costs={(1, 0): 2})


def detour_h(position, goal):
    return DETOUR_H.get((position.x, position.y), 0.0)


def test_astar_reopens_a_closed_cell_on_a_cheaper_route():
    grid = detour_grid()
    run, trace = run_to_end(grid, (0, 0), (4, 1), "astar", heuristic=detour_h)
    assert trace.outcome is Outcome.SUCCEEDED

    assert trace.at(3).current == P(1, 1)
    assert trace.at(3).path == (P(1, 1), P(1, 0), P(0, 0))
    assert trace.at(4).current == P(0, 1)
    assert P(1, 1) in trace.at(4).open_set
    assert P(1, 1) in trace.at(4).closed_set
    assert [s.index for s in trace.steps[1:] if s.current == P(1, 1)] == [3, 5]
    assert run.expansions == 8

    assert trace.path == (P(0, 0), P(0, 1), P(1, 1), P(2, 1), P(3, 1), P(4, 1))
    _, uniform = run_to_end(grid, (0, 0), (4, 1), "astar", heuristic="zero")
    assert grid.path_cost(trace.path) == pytest.approx(grid.path_cost(uniform.path))
    assert grid.path_cost(trace.path) == pytest.approx(5)
    assert_well_formed(grid, trace, P(0, 0), P(4, 1))


@pytest.mark.parametrize("algorithm", ["bfs", "dfs"])
@pytest.mark.parametrize("scenario_key", ["two_walls", "lecture_grid", "swamp"])
def test_uninformed_search_never_closes_a_cell_twice(algorithm, scenario_key):
    scenario = get_scenario(scenario_key)
    run, trace = run_to_end(scenario.grid, scenario.start, scenario.goal, algorithm)
    expanded = [s.current for s in trace.steps[1:]]
    assert len(expanded) == len(set(expanded))
    assert run.expansions == len(trace.final.closed_set)


def test_uninformed_search_never_reopens_on_the_detour_grid():
    grid = detour_grid()
    for algorithm in ("bfs", "dfs"):
        run, trace = run_to_end(grid, (0, 0), (4, 1), algorithm)
        assert trace.outcome is Outcome.SUCCEEDED
        expanded = [s.current for s in trace.steps[1:]]
        assert len(expanded) == len(set(expanded))


def test_astar_two_walls_costs_twelve(two_walls):
    run, trace = run_to_end(two_walls.grid, two_walls.start, two_walls.goal, "astar")
    assert len(trace.path) == 13
    assert two_walls.grid.path_cost(trace.path) == pytest.approx(12)


def test_astar_walks_around_the_swamp():
    swamp = get_scenario("swamp")
    run, trace = run_to_end(swamp.grid, swamp.start, swamp.goal, "astar")
    assert swamp.grid.path_cost(trace.path) == pytest.approx(12)
    assert all(swamp.grid.cell(p).cost == 1 for p in trace.path)


def test_astar_diagonal_uses_octile_by_default():
    scenario = get_scenario("open_field")
    run, trace = run_to_end(scenario.grid, scenario.start, scenario.goal, "astar", allow_diagonal=True)
    assert len(trace.path) == 8
    assert scenario.grid.path_cost(trace.path) == pytest.approx(7 * math.sqrt(2))
    assert trace.at(0).current == scenario.start


def test_committed_greedy_dead_ends_in_the_pocket(lecture):
    run, trace = run_to_end(lecture.grid, lecture.start, lecture.goal, "greedy", backtrack=False)
    assert trace.outcome is Outcome.EXHAUSTED
    assert trace.final.current == P(6, 0)
    assert trace.final.open_set == ()
    assert trace.final.path == (P(6, 0), P(6, 1), P(5, 1), P(4, 1), P(3, 1), P(2, 1), P(1, 1))
    assert_well_formed(lecture.grid, trace, lecture.start, lecture.goal)


def test_backtracking_greedy_recovers(lecture):
    run, trace = run_to_end(lecture.grid, lecture.start, lecture.goal, "greedy", backtrack=True)
    assert trace.outcome is Outcome.SUCCEEDED
    assert P(6, 0) in trace.final.closed_set
    assert_well_formed(lecture.grid, trace, lecture.start, lecture.goal)


def test_neighbor_order_changes_greedy_ties(lecture):
    run, trace = run_to_end(
        lecture.grid, lecture.start, lecture.goal, "greedy", backtrack=False, neighbor_order="SENW",
    )
    assert trace.at(2).current == P(1, 2)
    assert trace.outcome is Outcome.SUCCEEDED


# ---------------------------------------------------------------------------
# Local search
# ---------------------------------------------------------------------------
def test_hill_climbing_gets_stuck_on_lecture_grid(lecture):
    run, trace = run_to_end(lecture.grid, lecture.start, lecture.goal, "hill_climbing")
    assert trace.outcome is Outcome.STUCK
    assert run.status is RunStatus.STUCK
    final = trace.final
    assert final.current == P(6, 1)
    assert final.extra["stuck"] is True
    assert final.open_set == ()
    assert final.closed_set == (P(1, 1), P(2, 1), P(3, 1), P(4, 1), P(5, 1), P(6, 1))
    assert final.pseudocode_line == REGISTRY["hill_climbing"].lines["fail"]

    again = run.step()
    assert again.current == final.current
    assert again.closed_set == final.closed_set
    assert_well_formed(lecture.grid, trace, lecture.start, lecture.goal)


def test_hill_climbing_follows_the_valley():
    valley = get_scenario("hill_valley")
    run, trace = run_to_end(valley.grid, valley.start, valley.goal, "hill_climbing")
    assert trace.outcome is Outcome.SUCCEEDED
    hs = [valley.grid.heuristic(p, valley.goal) for p in trace.path]
    assert hs == sorted(hs, reverse=True)
    assert all(s.extra["stuck"] is False for s in trace.steps[1:])


def test_annealing_is_reproducible_with_a_seed():
    valley = get_scenario("hill_valley")
    a = valley.create_run("simulated_annealing", seed=11).run()
    b = valley.create_run("simulated_annealing", random_source=random.Random(11)).run()
    assert a == b
    assert a.outcome in (Outcome.SUCCEEDED, Outcome.STUCK)
    assert_well_formed(valley.grid, a, valley.start, valley.goal)


def test_annealing_records_every_decision():
    valley = get_scenario("hill_valley")
    trace = valley.create_run("simulated_annealing", seed=3).run()
    decisions = [s for s in trace.steps[2:] if "accepted" in s.extra]
    assert decisions
    for step in decisions:
        assert {"temperature", "neighbor", "current_cost", "neighbor_cost",
                "acceptance_probability"} <= set(step.extra)
        if not step.extra["accepted"]:
            assert step.current == trace.at(step.index - 1).current


def test_annealing_freezes_when_cold():
    grid = Grid(6, 1)
    run = create_run(grid, (0, 0), (5, 0), "simulated_annealing",
                     seed=0, initial_temperature=0.05, min_temperature=0.04,
                     cooling_schedule=lambda t: t / 2)
    trace = run.run()
    assert trace.outcome is Outcome.STUCK
    assert trace.final.extra.get("frozen") is True
    assert trace.final.open_set == ()
