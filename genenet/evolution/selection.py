"""Parent selection.

Two policies are available:
- TOURNAMENT: sample k individuals with replacement and keep the two fittest
- TOP_WINDOW: draw both parents uniformly from the k top-ranked individuals

Both expect the population sorted by descending fitness.
"""

from __future__ import annotations

from genenet.evolution.genotype import Individual
from genenet.utils.rng_manager import RNGManager

TOURNAMENT = "tournament"
TOP_WINDOW = "top_window"
SELECTION_STRATEGIES = (TOURNAMENT, TOP_WINDOW)


def tournament(population: list[Individual], k: int, rng_manager: RNGManager) -> list[Individual]:
    """Draw k individuals independently and uniformly, with replacement."""
    if not population:
        raise ValueError("Cannot run a tournament on an empty population")
    rng = rng_manager.get_context_rng("selection")
    return [population[rng.randrange(len(population))] for _ in range(max(1, int(k)))]


def select_tournament_parents(population: list[Individual], k: int,
                              rng_manager: RNGManager) -> tuple[Individual, Individual]:
    sample = tournament(population, max(2, int(k)), rng_manager)
    # sorted() is stable: equal fitness keeps draw order
    ranked = sorted(sample, key=lambda ind: ind.require_fitness(), reverse=True)
    return ranked[0], ranked[1]


def select_window_parents(population: list[Individual], k: int,
                          rng_manager: RNGManager) -> tuple[Individual, Individual]:
    rng = rng_manager.get_context_rng("selection")
    window = max(1, min(int(k), len(population)))
    return population[rng.randrange(window)], population[rng.randrange(window)]


def select_parents(population: list[Individual], strategy: str, k: int,
                   rng_manager: RNGManager) -> tuple[Individual, Individual]:
    if strategy == TOURNAMENT:
        return select_tournament_parents(population, k, rng_manager)
    if strategy == TOP_WINDOW:
        return select_window_parents(population, k, rng_manager)
    raise ValueError(f"Unknown selection strategy: {strategy}")


__all__ = [
    "TOURNAMENT",
    "TOP_WINDOW",
    "SELECTION_STRATEGIES",
    "tournament",
    "select_tournament_parents",
    "select_window_parents",
    "select_parents",
]
