"""Progress reporting sinks.

The run controller hands every sink a `Snapshot` after each generation and a
`RunResult` once the run ends. Sinks are best-effort: an `OSError` raised by a
sink is logged and recorded by the controller, and evolution carries on.
"""

from __future__ import annotations

import csv
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TextIO

if TYPE_CHECKING:  # pragma: no cover
    from genenet.runner import RunResult


@dataclass(frozen=True)
class Snapshot:
    generation: int
    best_rendering: str
    best_fitness: float
    elapsed: float
    difficulty: int | None = None
    progress: float | None = None
    mutation_scale: float | None = None
    stall_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ProgressSink(Protocol):
    def report(self, snapshot: Snapshot) -> None: ...

    def finish(self, result: "RunResult") -> None: ...


def format_elapsed(seconds: float) -> str:
    total = int(seconds)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"


class LoggingProgressSink:
    """Emits one DEBUG record per generation and an INFO summary at the end."""

    def report(self, snapshot: Snapshot) -> None:
        prefix = f"Range 0-{snapshot.difficulty} | " if snapshot.difficulty is not None else ""
        logging.debug(
            f"{prefix}Generation {snapshot.generation} | Output: {snapshot.best_rendering} "
            f"| Fitness: {snapshot.best_fitness:.3f}"
        )

    def finish(self, result: "RunResult") -> None:
        logging.info(
            f"Run finished: {result.status.value} after {result.total_generations} generations "
            f"({format_elapsed(result.elapsed)})"
        )


class ConsoleProgressSink:
    """Overwrites a single terminal line per generation."""

    def __init__(self, stream: TextIO | None = None, title: str | None = None, bar_width: int = 30) -> None:
        self.stream = stream or sys.stdout
        self.title = title
        self.bar_width = int(bar_width)
        self._started = False

    def progress_bar(self, progress: float) -> str:
        progress = min(1.0, max(0.0, progress))
        filled = int(progress * self.bar_width)
        return f"[{'=' * filled}{' ' * (self.bar_width - filled)}] {int(progress * 100):3d}%"

    def report(self, snapshot: Snapshot) -> None:
        if not self._started and self.title:
            self.stream.write(f"{self.title}\n")
        self._started = True
        line = f"Generation {snapshot.generation:4d} | Output: {snapshot.best_rendering} " \
               f"| Fitness: {snapshot.best_fitness:.3f} | Time: {format_elapsed(snapshot.elapsed)}"
        if snapshot.difficulty is not None:
            line = f"Range 0-{snapshot.difficulty} | {line}"
        if snapshot.progress is not None:
            line = f"{line} {self.progress_bar(snapshot.progress)}"
        self.stream.write(f"\r{line}")
        self.stream.flush()

    def finish(self, result: "RunResult") -> None:
        messages = {
            "solved": f"Solved at generation {result.generation}: {result.best_rendering}",
            "aborted": "Operation has been aborted",
            "exhausted": f"Did not converge within {result.generation} generations",
        }
        self.stream.write(f"\n{messages[result.status.value]} ({format_elapsed(result.elapsed)})\n")
        self.stream.flush()


class CsvRunLog:
    """Append-only CSV log with one row per generation."""

    FIELDNAMES = [
        "generation",
        "difficulty",
        "best_fitness",
        "best_rendering",
        "elapsed",
        "progress",
        "mutation_scale",
        "stall_count",
    ]

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def report(self, snapshot: Snapshot) -> None:
        write_header = not self.path.exists() or self.path.stat().st_size == 0
        with open(self.path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self.FIELDNAMES, extrasaction="ignore")
            if write_header:
                writer.writeheader()
            row = snapshot.to_dict()
            row["best_fitness"] = round(snapshot.best_fitness, 6)
            row["elapsed"] = round(snapshot.elapsed, 3)
            writer.writerow(row)

    def finish(self, result: "RunResult") -> None:
        return None


class JsonResultWriter:
    """Writes the final result as JSON once the run is solved."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def finish(self, result: "RunResult") -> None:
        if not result.succeeded:
            return
        payload = {
            "status": result.status.value,
            "generation": result.generation,
            "total_generations": result.total_generations,
            "elapsed_seconds": round(result.elapsed, 3),
            "best_rendering": result.best_rendering,
            "best_fitness": result.best_fitness,
            "difficulty": result.difficulty,
            "levels": [asdict(level) for level in result.levels],
            "seed": result.seed,
        }
        self.path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def report(self, snapshot: Snapshot) -> None:
        return None


__all__ = [
    "Snapshot",
    "ProgressSink",
    "LoggingProgressSink",
    "ConsoleProgressSink",
    "CsvRunLog",
    "JsonResultWriter",
    "format_elapsed",
]
