"""
scenarios/
----------
Ready-made grids with a start and a goal.

    from scenarios import get_scenario
    run = get_scenario("lecture_grid").create_run("astar")
"""

from scenarios.presets import REGISTRY, Scenario, get_scenario, list_scenarios, parse_scenario

__all__ = [
    "Scenario",
    "REGISTRY",
    "get_scenario",
    "list_scenarios",
    "parse_scenario",
]
