"""Ready-made problem variants.

- alphabet: evolve a 26-bit string until every letter is switched on
- numbers: evolve a 4-24-10 network that classifies 0..n, growing n up to 9
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import torch

from genenet.config import PRESET_ALPHABET, PRESET_NUMBERS, EvolutionConfig
from genenet.evolution.engine import EvolutionEngine
from genenet.evolution.fitness import ClassificationFitness, PositionalBitFitness, Scorer
from genenet.evolution.operators import BitGenomeOps, WeightGenomeOps
from genenet.utils.rng_manager import RNGManager


@dataclass
class Variant:
    name: str
    ops: Any
    evaluator: Any
    config: EvolutionConfig

    def build_engine(self, rng_manager: RNGManager | None = None) -> EvolutionEngine:
        return EvolutionEngine(self.ops, self.evaluator, self.config, rng_manager)


def alphabet_variant(length: int = 26, **overrides: Any) -> Variant:
    config = EvolutionConfig.from_dict(PRESET_ALPHABET, **overrides)
    return Variant(
        name="alphabet",
        ops=BitGenomeOps(length),
        evaluator=PositionalBitFitness(length),
        config=config,
    )


def numbers_variant(input_size: int = 4, hidden_size: int = 24, output_size: int = 10,
                    scorer: Scorer | None = None, dtype: torch.dtype = torch.float32,
                    **overrides: Any) -> Variant:
    config = EvolutionConfig.from_dict(PRESET_NUMBERS, **overrides)
    evaluator = ClassificationFitness(input_size, output_size, scorer=scorer, dtype=dtype)
    return Variant(
        name="numbers",
        ops=WeightGenomeOps(input_size, hidden_size, output_size, dtype=dtype),
        evaluator=evaluator,
        config=config,
    )


VARIANTS = {
    "alphabet": alphabet_variant,
    "numbers": numbers_variant,
}


__all__ = ["Variant", "alphabet_variant", "numbers_variant", "VARIANTS"]
