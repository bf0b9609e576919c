"""Fitness evaluators.

An evaluator maps (genome, task) to a scalar score, decides whether an
evaluated individual solves the task, and renders a genome for progress
reports. The task parameter is the current difficulty (highest class index)
for incremental runs and None otherwise.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

import torch

from genenet.evolution.genotype import BitGenome, Individual, WeightGenome
from genenet.translation.pytorch import encode_inputs, feed_forward
from genenet.utils.validation import ValidationError

Scorer = Callable[[WeightGenome, torch.Tensor], torch.Tensor]


class FitnessEvaluator(Protocol):
    def evaluate(self, genome: Any, task: int | None) -> float: ...

    def is_solved(self, individual: Individual, task: int | None) -> bool: ...

    def render(self, genome: Any, task: int | None) -> str: ...


class PositionalBitFitness:
    """Sum of i over every set bit i."""

    def __init__(self, length: int = 26) -> None:
        self.length = int(length)
        self.max_fitness = float(sum(range(self.length)))

    def evaluate(self, genome: BitGenome, task: int | None = None) -> float:
        return float(sum(i for i, bit in enumerate(genome.bits) if bit))

    def is_solved(self, individual: Individual, task: int | None = None) -> bool:
        genome = individual.genome
        return (
            len(genome) == self.length
            and genome.all_set()
            and individual.require_fitness() == self.max_fitness
        )

    def render(self, genome: BitGenome, task: int | None = None) -> str:
        return genome.render()


class ClassificationFitness:
    """Scores a weight genome on classifying the indices 0..max_class.

    Per input: 2.0 for a correct arg-max, otherwise partial credit
    ``1 - |true - predicted| / (max_class + 1)``; the raw output at the true
    class index is always added as a tie-breaker.
    """

    def __init__(self, input_size: int = 4, output_size: int = 10, scorer: Scorer | None = None,
                 dtype: torch.dtype = torch.float32) -> None:
        self.input_size = int(input_size)
        self.output_size = int(output_size)
        self.scorer: Scorer = scorer or feed_forward
        self.dtype = dtype
        self._inputs: dict[int, torch.Tensor] = {}

    def check_task(self, max_class: int) -> None:
        if max_class < 0 or max_class >= self.output_size or max_class >= 2 ** self.input_size:
            raise ValidationError(
                "invalid_task",
                "Task range does not fit the network dimensions",
                max_class=max_class,
                input_size=self.input_size,
                output_size=self.output_size,
            )

    def inputs_for(self, max_class: int) -> torch.Tensor:
        inputs = self._inputs.get(max_class)
        if inputs is None:
            self.check_task(max_class)
            inputs = encode_inputs(max_class, self.input_size, self.dtype)
            self._inputs[max_class] = inputs
        return inputs

    def outputs(self, genome: WeightGenome, max_class: int) -> torch.Tensor:
        outputs = self.scorer(genome, self.inputs_for(max_class))
        if outputs.shape != (max_class + 1, self.output_size):
            raise ValueError(f"Scorer returned shape {tuple(outputs.shape)}, "
                             f"expected {(max_class + 1, self.output_size)}")
        return outputs

    def predictions(self, genome: WeightGenome, max_class: int) -> list[int]:
        outputs = self.outputs(genome, max_class)
        return [int(p) for p in outputs[:, : max_class + 1].argmax(dim=1)]

    def evaluate(self, genome: WeightGenome, task: int | None) -> float:
        max_class = int(task)
        outputs = self.outputs(genome, max_class)
        predicted = outputs[:, : max_class + 1].argmax(dim=1)
        fitness = 0.0
        for true_class in range(max_class + 1):
            guess = int(predicted[true_class])
            if guess == true_class:
                fitness += 2.0
            else:
                fitness += 1.0 - abs(true_class - guess) / (max_class + 1)
            fitness += float(outputs[true_class, true_class])
        return fitness

    def is_solved(self, individual: Individual, task: int | None) -> bool:
        max_class = int(task)
        return self.predictions(individual.genome, max_class) == list(range(max_class + 1))

    def render(self, genome: WeightGenome, task: int | None) -> str:
        return "".join(str(p) for p in self.predictions(genome, int(task)))


__all__ = ["FitnessEvaluator", "PositionalBitFitness", "ClassificationFitness", "Scorer"]
