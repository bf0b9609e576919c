"""Evolution configuration and presets.

Configuration is an explicit value handed to the engine and the run
controller; nothing is read from module-level state at run time. Presets are
plain dicts so they can be copied, overridden and fed to
``EvolutionConfig.from_dict``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

from genenet.utils.validation import ValidationError

PARENT_SELECTION_CHOICES = ("tournament", "top_window")


@dataclass
class EvolutionConfig:
    """Parameters of one evolutionary run.

    Attributes:
        population_size: Number of individuals kept every generation
        elite_count: Individuals carried over unchanged each generation
        tournament_size: Sample size (tournament) or rank window (top_window)
        parent_selection: "tournament" or "top_window"
        mutation_rate: Per-element mutation probability
        mutation_scale: Initial noise amplitude for real-valued genomes
        mutation_scale_min: Lower clamp applied whenever the scale adapts
        stall_limit: Generations without improvement before half the
            population is re-seeded; None disables stagnation tracking
        stall_epsilon: Minimum best-fitness gain that counts as improvement
        stall_scale_boost: Scale multiplier applied on a stagnation reset
        solve_scale_decay: Scale multiplier applied on every solve
        task_start: First difficulty level; None for single-level runs
        task_ceiling: Last difficulty level; the run ends once it is solved
        max_generations: Generation cap per difficulty level; None is unbounded
        generation_delay: Seconds to pause between generations
        seed: RNGManager seed; None draws a fresh one
    """

    population_size: int = 20
    elite_count: int = 2
    tournament_size: int = 5
    parent_selection: str = "tournament"
    mutation_rate: float = 0.05
    mutation_scale: float = 1.0
    mutation_scale_min: float = 1e-3
    stall_limit: int | None = None
    stall_epsilon: float = 0.001
    stall_scale_boost: float = 1.1
    solve_scale_decay: float = 0.95
    task_start: int | None = None
    task_ceiling: int | None = None
    max_generations: int | None = None
    generation_delay: float = 0.0
    seed: int | None = None

    @classmethod
    def from_dict(cls, config: Mapping[str, Any] | None = None, **overrides: Any) -> "EvolutionConfig":
        merged = dict(config or {})
        merged.update(overrides)
        known = {f.name for f in fields(cls)}
        extras = sorted(k for k in merged if k not in known)
        if extras:
            raise ValidationError("unknown_config_keys", f"Unknown configuration keys: {extras}",
                                  extras=tuple(extras))
        cfg = cls(**merged)
        cfg.validate()
        return cfg

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def incremental(self) -> bool:
        return self.task_start is not None

    @property
    def stagnation_enabled(self) -> bool:
        return self.stall_limit is not None

    def validate(self) -> None:
        if self.population_size < 2:
            raise ValidationError("invalid_population_size", "Population needs at least two individuals",
                                  population_size=self.population_size)
        if not 1 <= self.elite_count < self.population_size:
            raise ValidationError("invalid_elite_count", "Elite count must be in [1, population_size)",
                                  elite_count=self.elite_count, population_size=self.population_size)
        if self.tournament_size < 1:
            raise ValidationError("invalid_tournament_size", "Tournament size must be positive",
                                  tournament_size=self.tournament_size)
        if self.parent_selection not in PARENT_SELECTION_CHOICES:
            raise ValidationError("invalid_parent_selection", f"Unknown parent selection '{self.parent_selection}'",
                                  choices=PARENT_SELECTION_CHOICES)
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValidationError("invalid_mutation_rate", "Mutation rate must be in [0, 1]",
                                  mutation_rate=self.mutation_rate)
        for name in ("mutation_scale", "mutation_scale_min", "stall_scale_boost", "solve_scale_decay"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise ValidationError("invalid_scale", f"{name} must be a positive finite number", **{name: value})
        if self.mutation_scale < self.mutation_scale_min:
            raise ValidationError("invalid_scale", "mutation_scale is below mutation_scale_min",
                                  mutation_scale=self.mutation_scale, mutation_scale_min=self.mutation_scale_min)
        if self.stall_limit is not None and self.stall_limit < 1:
            raise ValidationError("invalid_stall_limit", "Stall limit must be positive or None",
                                  stall_limit=self.stall_limit)
        if self.stall_epsilon < 0:
            raise ValidationError("invalid_stall_epsilon", "Stall epsilon must be non-negative",
                                  stall_epsilon=self.stall_epsilon)
        if (self.task_start is None) != (self.task_ceiling is None):
            raise ValidationError("invalid_task_range", "task_start and task_ceiling must be set together",
                                  task_start=self.task_start, task_ceiling=self.task_ceiling)
        if self.task_start is not None and not 0 <= self.task_start <= self.task_ceiling:
            raise ValidationError("invalid_task_range", "Require 0 <= task_start <= task_ceiling",
                                  task_start=self.task_start, task_ceiling=self.task_ceiling)
        if self.max_generations is not None and self.max_generations < 1:
            raise ValidationError("invalid_max_generations", "max_generations must be positive or None",
                                  max_generations=self.max_generations)
        if self.generation_delay < 0:
            raise ValidationError("invalid_generation_delay", "generation_delay must be non-negative",
                                  generation_delay=self.generation_delay)


# Alphabet learner: 26-bit genome, strong tournament pressure, single level
PRESET_ALPHABET: dict[str, Any] = {
    "population_size": 20,
    "elite_count": 2,
    "tournament_size": 5,
    "parent_selection": "tournament",
    "mutation_rate": 0.05,
    "stall_limit": None,
}

# Number learner: 4-24-10 network, classes 0..1 up to 0..9
PRESET_NUMBERS: dict[str, Any] = {
    "population_size": 50,
    "elite_count": 1,
    "tournament_size": 6,
    "parent_selection": "top_window",
    "mutation_rate": 0.1,
    "mutation_scale": 0.2,
    "stall_limit": 500,
    "stall_epsilon": 0.001,
    "stall_scale_boost": 1.1,
    "solve_scale_decay": 0.95,
    "task_start": 1,
    "task_ceiling": 9,
}


__all__ = ["EvolutionConfig", "PRESET_ALPHABET", "PRESET_NUMBERS", "PARENT_SELECTION_CHOICES"]
