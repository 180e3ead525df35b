import math
import random

import pytest

from algorithms import NodeState
from algorithms.simulated_annealing import AnnealingFrontier, acceptance_probability

from conftest import P

TRIALS = 10_000


@pytest.mark.parametrize("delta, temperature", [(1.0, 2.0), (2.0, 1.0), (0.5, 5.0), (3.0, 0.8)])
def test_worse_moves_are_accepted_at_the_boltzmann_rate(delta, temperature):
    frontier = AnnealingFrontier(rng=random.Random(1234), schedule=lambda t: t)
    current  = NodeState(P(0, 0), h=1.0)
    frontier.anchor(current)
    frontier.push(NodeState(P(1, 0), h=1.0 + delta))
    frontier.temperature = temperature

    accepted = sum(frontier.pop() is not current for _ in range(TRIALS))
    expected = math.exp(-delta / temperature)
    assert abs(accepted / TRIALS - expected) <= 0.05
    assert frontier.temperature == temperature


def test_acceptance_probability_edges():
    assert acceptance_probability(-1.0, 1.0) == 1.0
    assert acceptance_probability(0.0, 0.0) == 1.0
    assert acceptance_probability(1.0, 0.0) == 0.0
    assert acceptance_probability(1.0, 1.0) == pytest.approx(math.exp(-1))
