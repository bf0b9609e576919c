"""Genome strategies: random initialisation, mutation and crossover.

Two strategies share one protocol so the engine never inspects the genome:
- BitGenomeOps: per-bit flip mutation, single-point crossover
- WeightGenomeOps: additive scaled-noise mutation, uniform crossover

All randomness comes from the RNGManager passed to each call.
"""

from __future__ import annotations

from typing import Any, Protocol

import torch

from genenet.evolution.genotype import BitGenome, WeightGenome
from genenet.utils.rng_manager import RNGManager
from genenet.utils.validation import ValidationError


class GenomeOps(Protocol):
    def check_shape(self, genome: Any) -> None: ...

    def randomize(self, rng_manager: RNGManager) -> Any: ...

    def mutate(self, genome: Any, rate: float, scale: float, rng_manager: RNGManager) -> None: ...

    def crossover(self, parent1: Any, parent2: Any, rng_manager: RNGManager) -> Any: ...


def single_point_crossover(parent1: BitGenome, parent2: BitGenome, cut: int) -> BitGenome:
    """Child takes parent1 on [0, cut) and parent2 on [cut, length)."""
    if len(parent1) != len(parent2):
        raise ValueError("Parents must have equal length")
    if not 0 <= cut <= len(parent1):
        raise ValueError(f"Cut index {cut} outside [0, {len(parent1)}]")
    return BitGenome(bits=list(parent1.bits[:cut]) + list(parent2.bits[cut:]))


def uniform_crossover(parent1: WeightGenome, parent2: WeightGenome, generator: torch.Generator) -> WeightGenome:
    """Each weight is copied from parent1 or parent2 with probability 0.5."""
    children = []
    for a, b in zip(parent1.tensors(), parent2.tensors()):
        if a.shape != b.shape:
            raise ValueError(f"Parent shapes differ: {tuple(a.shape)} vs {tuple(b.shape)}")
        take_first = torch.rand(a.shape, generator=generator) < 0.5
        children.append(torch.where(take_first, a, b))
    return WeightGenome(input_hidden=children[0], hidden_output=children[1])


class BitGenomeOps:
    """Operators for fixed-length bit strings."""

    def __init__(self, length: int = 26) -> None:
        if int(length) < 1:
            raise ValidationError("invalid_genome_length", "Bit genome length must be positive", length=length)
        self.length = int(length)

    def check_shape(self, genome: BitGenome) -> None:
        if len(genome) != self.length:
            raise ValidationError("genome_shape_mismatch", "Bit genome has unexpected length",
                                  expected=self.length, actual=len(genome))

    def randomize(self, rng_manager: RNGManager) -> BitGenome:
        rng = rng_manager.get_context_rng("init")
        return BitGenome(bits=[rng.random() < 0.5 for _ in range(self.length)])

    def mutate(self, genome: BitGenome, rate: float, scale: float, rng_manager: RNGManager) -> None:
        # scale has no meaning for a flip
        rng = rng_manager.get_context_rng("mutation")
        for i in range(len(genome.bits)):
            if rng.random() < rate:
                genome.bits[i] = not genome.bits[i]

    def crossover(self, parent1: BitGenome, parent2: BitGenome, rng_manager: RNGManager) -> BitGenome:
        rng = rng_manager.get_context_rng("crossover")
        return single_point_crossover(parent1, parent2, rng.randrange(len(parent1)))


class WeightGenomeOps:
    """Operators for the two weight matrices of a feed-forward network."""

    def __init__(self, input_size: int = 4, hidden_size: int = 24, output_size: int = 10,
                 dtype: torch.dtype = torch.float32) -> None:
        for name, value in (("input_size", input_size), ("hidden_size", hidden_size), ("output_size", output_size)):
            if int(value) < 1:
                raise ValidationError("invalid_layer_size", f"{name} must be positive", **{name: value})
        self.input_size = int(input_size)
        self.hidden_size = int(hidden_size)
        self.output_size = int(output_size)
        self.dtype = dtype

    @property
    def shapes(self) -> tuple[tuple[int, int], tuple[int, int]]:
        return (self.input_size, self.hidden_size), (self.hidden_size, self.output_size)

    def check_shape(self, genome: WeightGenome) -> None:
        actual = tuple(tuple(t.shape) for t in genome.tensors())
        if actual != self.shapes:
            raise ValidationError("genome_shape_mismatch", "Weight genome has unexpected shape",
                                  expected=self.shapes, actual=actual)

    def randomize(self, rng_manager: RNGManager) -> WeightGenome:
        gen = rng_manager.get_torch_generator("init")
        ih, ho = (torch.rand(shape, generator=gen, dtype=self.dtype) * 2.0 - 1.0 for shape in self.shapes)
        return WeightGenome(input_hidden=ih, hidden_output=ho)

    def mutate(self, genome: WeightGenome, rate: float, scale: float, rng_manager: RNGManager) -> None:
        gen = rng_manager.get_torch_generator("mutation")
        for tensor in genome.tensors():
            hit = torch.rand(tensor.shape, generator=gen) < rate
            noise = torch.rand(tensor.shape, generator=gen, dtype=tensor.dtype) * 2.0 - 1.0
            tensor[hit] += noise[hit] * scale

    def crossover(self, parent1: WeightGenome, parent2: WeightGenome, rng_manager: RNGManager) -> WeightGenome:
        return uniform_crossover(parent1, parent2, rng_manager.get_torch_generator("crossover"))


__all__ = [
    "GenomeOps",
    "BitGenomeOps",
    "WeightGenomeOps",
    "single_point_crossover",
    "uniform_crossover",
]
