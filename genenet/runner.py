"""Run controller: the outer generation loop.

Repeatedly steps an EvolutionEngine, escalates the task difficulty after each
solve (incremental runs), reports a snapshot per generation to the configured
sinks and polls a cancellation event between generations. A generation that
has started always completes before cancellation is honoured, so the
population is left evaluated and sorted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, Sequence

from genenet.evolution.engine import EvolutionEngine, EvolutionState
from genenet.evolution.genotype import Individual
from genenet.reporting import Snapshot, format_elapsed


class CancellationSignal(Protocol):
    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class LevelResult:
    difficulty: int | None
    generations: int
    elapsed: float


@dataclass
class RunResult:
    status: EvolutionState
    generation: int
    total_generations: int
    elapsed: float
    best: Individual | None = None
    best_rendering: str = ""
    best_fitness: float | None = None
    difficulty: int | None = None
    seed: int | None = None
    levels: list[LevelResult] = field(default_factory=list)
    sink_errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status is EvolutionState.SOLVED


class RunController:
    """Owns the loop around an EvolutionEngine."""

    def __init__(self, engine: EvolutionEngine, sinks: Sequence[Any] | None = None,
                 cancel_event: CancellationSignal | None = None,
                 sleep: Callable[[float], None] = time.sleep) -> None:
        self.engine = engine
        self.sinks = list(sinks or [])
        self.cancel_event = cancel_event
        self.sleep = sleep
        self.sink_errors: list[str] = []
        self.levels: list[LevelResult] = []
        self.total_generations = 0
        self._started_at = time.monotonic()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def snapshot(self) -> Snapshot:
        engine = self.engine
        rs = engine.run_state
        best = engine.best
        progress = None
        ceiling = engine.config.task_ceiling
        if rs.task is not None and ceiling is not None:
            progress = min(1.0, max(0.0, rs.task / ceiling)) if ceiling > 0 else 1.0
        return Snapshot(
            generation=rs.generation,
            best_rendering=engine.evaluator.render(best.genome, rs.task),
            best_fitness=best.require_fitness(),
            elapsed=rs.elapsed,
            difficulty=rs.task,
            progress=progress,
            mutation_scale=rs.mutation_scale,
            stall_count=rs.stall_count,
        )

    def _emit(self, method: str, payload: Any) -> None:
        for sink in self.sinks:
            handler = getattr(sink, method, None)
            if handler is None:
                continue
            try:
                handler(payload)
            except OSError as exc:
                message = f"{type(sink).__name__}.{method} failed: {exc}"
                logging.warning(message)
                self.sink_errors.append(message)

    def _finish(self, status: EvolutionState) -> RunResult:
        engine = self.engine
        engine.terminate(status)
        rs = engine.run_state
        best = engine.population[0] if engine.population else None
        result = RunResult(
            status=status,
            generation=rs.generation,
            total_generations=self.total_generations,
            elapsed=time.monotonic() - self._started_at,
            best=best,
            best_rendering=engine.evaluator.render(best.genome, rs.task) if best is not None else "",
            best_fitness=best.fitness if best is not None else None,
            difficulty=rs.task,
            seed=engine.rng_manager.seed,
            levels=list(self.levels),
            sink_errors=self.sink_errors,
        )
        self._emit("finish", result)
        return result

    def run(self, genomes: Sequence[Any] | None = None) -> RunResult:
        """Run until solved, cancelled or the generation cap is hit."""
        engine = self.engine
        cfg = engine.config
        self._started_at = time.monotonic()
        self.total_generations = 0
        self.levels = []
        engine.initialize(genomes)

        while True:
            if self.cancelled:
                logging.info(f"Run aborted at generation {engine.run_state.generation}")
                return self._finish(EvolutionState.ABORTED)
            if cfg.max_generations is not None and engine.run_state.generation >= cfg.max_generations:
                logging.warning(
                    f"No solution for task {engine.run_state.task} within {cfg.max_generations} generations"
                )
                return self._finish(EvolutionState.EXHAUSTED)

            state = engine.step()
            self.total_generations += 1
            self._emit("report", self.snapshot())

            if state is EvolutionState.SOLVED:
                rs = engine.run_state
                self.levels.append(LevelResult(rs.task, rs.generation, rs.elapsed))
                if rs.task is None or rs.task >= cfg.task_ceiling:
                    return self._finish(EvolutionState.SOLVED)
                logging.info(
                    f"Learned range 0-{rs.task} in {rs.generation} generations "
                    f"({format_elapsed(rs.elapsed)}); advancing to 0-{rs.task + 1}"
                )
                engine.advance_task(rs.task + 1)

            if cfg.generation_delay > 0:
                self.sleep(cfg.generation_delay)


__all__ = ["CancellationSignal", "LevelResult", "RunResult", "RunController"]
