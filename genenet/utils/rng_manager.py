"""Seeded random sources for deterministic evolution runs.

Every stochastic operation receives an RNGManager and asks it for a named
context. Each context owns an independent stream derived from the manager
seed, so the draws made by selection never shift the draws made by mutation
and a given seed always replays the same run.
"""

from __future__ import annotations

import hashlib
import random

import torch


class RNGManager:
    """Hands out per-context `random.Random` and `torch.Generator` streams."""

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = random.SystemRandom().randrange(2**32)
        self.seed = int(seed)
        self._context_rngs: dict[str, random.Random] = {}
        self._torch_generators: dict[str, torch.Generator] = {}

    def derive_seed(self, context: str) -> int:
        digest = hashlib.sha256(f"{self.seed}:{context}".encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big") & 0x7FFF_FFFF_FFFF_FFFF

    def get_context_rng(self, context: str) -> random.Random:
        rng = self._context_rngs.get(context)
        if rng is None:
            rng = random.Random(self.derive_seed(context))
            self._context_rngs[context] = rng
        return rng

    def get_torch_generator(self, context: str) -> torch.Generator:
        gen = self._torch_generators.get(context)
        if gen is None:
            gen = torch.Generator(device="cpu")
            gen.manual_seed(self.derive_seed(f"torch:{context}"))
            self._torch_generators[context] = gen
        return gen


__all__ = ["RNGManager"]
