"""Evolutionary engine for genenet."""

from .genotype import BitGenome, Individual, WeightGenome
from .operators import (
    BitGenomeOps,
    GenomeOps,
    WeightGenomeOps,
    single_point_crossover,
    uniform_crossover,
)
from .selection import select_parents, tournament
from .fitness import ClassificationFitness, FitnessEvaluator, PositionalBitFitness
from .engine import EvolutionEngine, EvolutionState, RunState

__all__ = [
    "BitGenome",
    "WeightGenome",
    "Individual",
    "GenomeOps",
    "BitGenomeOps",
    "WeightGenomeOps",
    "single_point_crossover",
    "uniform_crossover",
    "tournament",
    "select_parents",
    "FitnessEvaluator",
    "PositionalBitFitness",
    "ClassificationFitness",
    "EvolutionEngine",
    "EvolutionState",
    "RunState",
]
