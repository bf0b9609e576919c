"""Generic evolution engine.

The engine owns the population and advances it one generation per `step()`:

1. Elitism: the top `elite_count` individuals are carried over unchanged
2. Reproduction: the remaining slots are filled by crossover + mutation
3. Re-evaluation of every new individual (elites keep their fitness)
4. Stable sort by descending fitness
5. Convergence check on the individuals tied at the best fitness
6. Stagnation tracking and mutation-scale adaptation (when enabled)
7. Generation counter increment

The genome representation and the fitness function are strategies passed in
at construction; the engine never looks inside a genome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from genenet.config import EvolutionConfig
from genenet.evolution.fitness import FitnessEvaluator
from genenet.evolution.genotype import Individual
from genenet.evolution.operators import GenomeOps
from genenet.evolution.selection import select_parents
from genenet.utils.rng_manager import RNGManager
from genenet.utils.validation import ValidationError


class EvolutionState(Enum):
    RUNNING = "running"
    SOLVED = "solved"
    ABORTED = "aborted"
    EXHAUSTED = "exhausted"

    @property
    def terminal(self) -> bool:
        return self is not EvolutionState.RUNNING


@dataclass
class RunState:
    """Mutable per-run bookkeeping, reset on every difficulty change."""

    generation: int = 0
    task: int | None = None
    stall_count: int = 0
    mutation_scale: float = 1.0
    best_fitness_checkpoint: float = 0.0
    stagnation_resets: int = 0
    started_at: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


class EvolutionEngine:
    """Drives selection, recombination, mutation and replacement."""

    def __init__(self, ops: GenomeOps, evaluator: FitnessEvaluator, config: EvolutionConfig,
                 rng_manager: RNGManager | None = None) -> None:
        config.validate()
        check_task = getattr(evaluator, "check_task", None)
        if config.incremental and check_task is not None:
            check_task(config.task_start)
            check_task(config.task_ceiling)
        for dim in ("length", "input_size", "output_size"):
            expected = getattr(evaluator, dim, None)
            actual = getattr(ops, dim, None)
            if expected is not None and actual is not None and expected != actual:
                raise ValidationError("dimension_mismatch", f"Genome operators and fitness disagree on {dim}",
                                      ops=actual, evaluator=expected)
        self.ops = ops
        self.evaluator = evaluator
        self.config = config
        self.rng_manager = rng_manager or RNGManager(config.seed)
        self.population: list[Individual] = []
        self.state = EvolutionState.RUNNING
        self.run_state = RunState(task=config.task_start, mutation_scale=config.mutation_scale)

    @property
    def best(self) -> Individual:
        if not self.population:
            raise RuntimeError("Population is empty; call initialize() first")
        return self.population[0]

    def initialize(self, genomes: Sequence[Any] | None = None) -> None:
        """Create (or load) the initial population, evaluate and sort it."""
        size = self.config.population_size
        if genomes is None:
            genomes = [self.ops.randomize(self.rng_manager) for _ in range(size)]
        elif len(genomes) != size:
            raise ValidationError("population_size_mismatch", "Seed genomes do not match population_size",
                                  expected=size, actual=len(genomes))
        else:
            for genome in genomes:
                self.ops.check_shape(genome)
        self.population = [Individual(genome=g) for g in genomes]
        self.state = EvolutionState.RUNNING
        self.run_state = RunState(task=self.config.task_start, mutation_scale=self.config.mutation_scale)
        self.evaluate(self.population)
        self._sort()

    def evaluate(self, individuals: Sequence[Individual]) -> None:
        task = self.run_state.task
        for ind in individuals:
            if ind.fitness is None:
                ind.fitness = float(self.evaluator.evaluate(ind.genome, task))

    def _sort(self) -> None:
        # list.sort is stable with reverse=True: ties keep their current order
        self.population.sort(key=lambda ind: ind.require_fitness(), reverse=True)

    def _breed(self) -> Individual:
        cfg = self.config
        parent1, parent2 = select_parents(self.population, cfg.parent_selection, cfg.tournament_size,
                                          self.rng_manager)
        child = self.ops.crossover(parent1.genome, parent2.genome, self.rng_manager)
        self.ops.mutate(child, cfg.mutation_rate, self.run_state.mutation_scale, self.rng_manager)
        return Individual(genome=child)

    def step(self) -> EvolutionState:
        """Advance one generation and return the resulting state."""
        if self.state is not EvolutionState.RUNNING:
            raise RuntimeError(f"Cannot step an engine in state {self.state.value}")
        if not self.population:
            raise RuntimeError("Population is empty; call initialize() first")

        cfg = self.config
        elites = self.population[: cfg.elite_count]
        offspring = [self._breed() for _ in range(cfg.population_size - cfg.elite_count)]
        self.evaluate(offspring)
        # offspring precede elites so an equally fit newcomer takes the lead
        self.population = offspring + elites
        self._sort()

        if self._promote_solved():
            self.state = EvolutionState.SOLVED
            if cfg.stagnation_enabled:
                self._scale_mutation(cfg.solve_scale_decay)
        elif cfg.stagnation_enabled:
            self._track_stagnation()

        self.run_state.generation += 1
        return self.state

    def _promote_solved(self) -> bool:
        """Move the first solving individual tied at the best fitness to index 0."""
        top = self.best.require_fitness()
        task = self.run_state.task
        for i, ind in enumerate(self.population):
            if ind.require_fitness() != top:
                break
            if self.evaluator.is_solved(ind, task):
                if i:
                    self.population.insert(0, self.population.pop(i))
                return True
        return False

    def _scale_mutation(self, factor: float) -> None:
        rs = self.run_state
        rs.mutation_scale = max(self.config.mutation_scale_min, rs.mutation_scale * factor)

    def _track_stagnation(self) -> None:
        cfg = self.config
        rs = self.run_state
        best_fitness = self.best.require_fitness()
        if best_fitness <= rs.best_fitness_checkpoint + cfg.stall_epsilon:
            rs.stall_count += 1
        else:
            rs.stall_count = 0
            rs.best_fitness_checkpoint = best_fitness

        if rs.stall_count > cfg.stall_limit:
            logging.info(
                f"Stalled on task {rs.task} for {rs.stall_count} generations; "
                f"re-seeding lower half of the population"
            )
            self.reset_lower_half()
            rs.stall_count = 0
            rs.stagnation_resets += 1
            self._scale_mutation(cfg.stall_scale_boost)

    def reset_lower_half(self) -> None:
        """Replace the worse half of the population with fresh random genomes."""
        size = len(self.population)
        for i in range(size // 2, size):
            self.population[i] = Individual(genome=self.ops.randomize(self.rng_manager))
        self.evaluate(self.population)
        self._sort()

    def advance_task(self, task: int) -> None:
        """Switch to a new difficulty level and restart the per-level counters."""
        check_task = getattr(self.evaluator, "check_task", None)
        if check_task is not None:
            check_task(task)
        rs = self.run_state
        rs.task = task
        rs.generation = 0
        rs.stall_count = 0
        rs.best_fitness_checkpoint = 0.0
        rs.started_at = time.monotonic()
        for ind in self.population:
            ind.invalidate()
        self.evaluate(self.population)
        self._sort()
        self.state = EvolutionState.RUNNING

    def terminate(self, state: EvolutionState) -> None:
        if not state.terminal:
            raise ValueError("terminate() requires a terminal state")
        self.state = state


__all__ = ["EvolutionState", "RunState", "EvolutionEngine"]
