"""Genome containers and the Individual record used by the evolution engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

import torch


@dataclass
class BitGenome:
    """Fixed-length boolean vector."""

    bits: list[bool] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.bits)

    def all_set(self) -> bool:
        return all(self.bits)

    def render(self) -> str:
        # Position i shows the i-th letter when set (a, b, c, ...).
        return "".join(chr(ord("a") + i % 26) if bit else "-" for i, bit in enumerate(self.bits))


@dataclass(eq=False)
class WeightGenome:
    """Weight matrices of a two-layer feed-forward network.

    Attributes:
        input_hidden: Tensor of shape [input_size, hidden_size]
        hidden_output: Tensor of shape [hidden_size, output_size]
    """

    input_hidden: torch.Tensor
    hidden_output: torch.Tensor

    @property
    def input_size(self) -> int:
        return int(self.input_hidden.shape[0])

    @property
    def hidden_size(self) -> int:
        return int(self.input_hidden.shape[1])

    @property
    def output_size(self) -> int:
        return int(self.hidden_output.shape[1])

    def tensors(self) -> tuple[torch.Tensor, torch.Tensor]:
        return self.input_hidden, self.hidden_output


@dataclass(eq=False)
class Individual:
    """A genome with its (possibly stale) fitness.

    `fitness` is None whenever the genome has changed since the last
    evaluation; it must be recomputed before it is read.
    """

    genome: Any
    fitness: float | None = None
    individual_id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def evaluated(self) -> bool:
        return self.fitness is not None

    def require_fitness(self) -> float:
        if self.fitness is None:
            raise RuntimeError(f"Fitness read before evaluation for individual {self.individual_id}")
        return self.fitness

    def invalidate(self) -> None:
        self.fitness = None


__all__ = ["BitGenome", "WeightGenome", "Individual"]
