import pytest

from genenet.evolution.genotype import BitGenome, Individual
from genenet.evolution.selection import (
    select_parents,
    select_tournament_parents,
    select_window_parents,
    tournament,
)
from genenet.utils.rng_manager import RNGManager


def _population(n):
    # already sorted descending by fitness
    return [Individual(genome=BitGenome([True]), fitness=float(n - i)) for i in range(n)]


def test_tournament_draws_with_replacement():
    pop = _population(3)
    sample = tournament(pop, 10, RNGManager(seed=1))
    assert len(sample) == 10
    assert all(ind in pop for ind in sample)
    assert len({id(ind) for ind in sample}) <= 3


def test_tournament_parents_are_two_best_of_sample():
    pop = _population(20)
    rng = RNGManager(seed=2)
    for _ in range(50):
        p1, p2 = select_tournament_parents(pop, 5, rng)
        assert p1.fitness >= p2.fitness


def test_window_parents_come_from_top_ranks():
    pop = _population(50)
    rng = RNGManager(seed=3)
    seen = set()
    for _ in range(200):
        for parent in select_window_parents(pop, 6, rng):
            seen.add(pop.index(parent))
    assert seen <= set(range(6))
    assert len(seen) > 1


def test_unknown_strategy_rejected():
    with pytest.raises(ValueError):
        select_parents(_population(4), "roulette", 2, RNGManager(seed=4))


def test_tournament_on_empty_population_rejected():
    with pytest.raises(ValueError):
        tournament([], 3, RNGManager(seed=5))
