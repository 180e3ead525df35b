import json

import pytest

from engine import Recorder, compare


def record(algorithm, scenario, config=None):
    rec = Recorder()
    rec.start(algorithm, scenario.grid, scenario.start, scenario.goal, config)
    rec.run_to_completion()
    return rec


def test_start_rejects_unknown_algorithm(lecture):
    with pytest.raises(ValueError):
        Recorder().start("dijkstra", lecture.grid, lecture.start, lecture.goal)


def test_run_before_start_is_an_error():
    with pytest.raises(RuntimeError):
        Recorder().run_to_completion()


def test_metrics_for_astar(two_walls):
    rec = record("astar", two_walls)
    m = rec.get_metrics()
    assert m.algo_key == "astar"
    assert m.algo_label == "A* Search"
    assert m.outcome == "succeeded"
    assert m.path_found
    assert m.path_length == 12
    assert m.path_cost == pytest.approx(12)
    assert m.total_steps == rec.trace.step_count
    assert m.nodes_expanded == len(rec.trace.final.closed_set)
    assert m.heuristic == "manhattan"
    assert m.start == (1, 1) and m.goal == (6, 6)


def test_budget_in_config_does_not_stop_the_recording(two_walls):
    rec = record("bfs", two_walls, {"max_steps": 3})
    assert rec.metrics.outcome == "succeeded"
    assert rec.stepper.step_count == rec.trace.step_count


def test_stuck_run_has_no_path(lecture):
    m = record("hill_climbing", lecture).metrics
    assert m.outcome == "stuck"
    assert not m.path_found
    assert m.path_length == 0 and m.path_cost == 0


def test_export_is_json_ready(lecture):
    rec = record("greedy", lecture, {"backtrack": False})
    data = rec.export()
    assert data["algo_key"] == "greedy"
    assert data["config"]["backtrack"] is False
    assert len(data["trace"]["steps"]) == data["metrics"]["total_steps"]
    json.dumps(data)


def test_compare_prefers_a_found_path(lecture):
    astar  = record("astar", lecture)
    greedy = record("greedy", lecture, {"backtrack": False})
    result = compare(astar, greedy)
    assert result.winner_path == "A* Search"
    assert result.winner_nodes == "Greedy Best-First"
    assert result.left.algo_key == "astar"


def test_compare_tie(two_walls):
    a = record("astar", two_walls)
    b = record("astar", two_walls)
    assert compare(a, b).winner_path == "tie"
