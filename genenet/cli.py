"""Command-line entry point: ``genenet alphabet`` / ``genenet numbers``."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import List, Optional

from genenet.evolution.engine import EvolutionState
from genenet.reporting import ConsoleProgressSink, CsvRunLog, JsonResultWriter, LoggingProgressSink
from genenet.runner import RunController
from genenet.variants import VARIANTS

EXIT_CODES = {
    EvolutionState.SOLVED: 0,
    EvolutionState.ABORTED: 1,
    EvolutionState.EXHAUSTED: 2,
}

TITLES = {
    "alphabet": "Alphabet Learning Neural Network",
    "numbers": "Number Learning Neural Network",
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="genenet", description="Train small classifiers by evolution")
    ap.add_argument("variant", choices=sorted(VARIANTS), help="problem to evolve")
    ap.add_argument("--seed", type=int, default=None, help="random seed (default: fresh)")
    ap.add_argument("--max-generations", type=int, default=None,
                    help="give up after this many generations per difficulty level")
    ap.add_argument("--delay", type=float, default=0.0, help="pause between generations, in seconds")
    ap.add_argument("--log-file", default=None, help="append a CSV row per generation to this file")
    ap.add_argument("--result-file", default=None, help="write the solved result as JSON to this file")
    ap.add_argument("--quiet", action="store_true", help="no terminal progress line")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    variant = VARIANTS[args.variant](
        seed=args.seed,
        max_generations=args.max_generations,
        generation_delay=args.delay,
    )
    engine = variant.build_engine()
    logging.info(f"Starting {variant.name} run with seed {engine.rng_manager.seed}")

    sinks: list = [LoggingProgressSink()]
    if not args.quiet:
        sinks.append(ConsoleProgressSink(title=TITLES[variant.name]))
    if args.log_file:
        sinks.append(CsvRunLog(args.log_file))
    if args.result_file:
        sinks.append(JsonResultWriter(args.result_file))

    cancel = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    try:
        result = RunController(engine, sinks, cancel).run()
    finally:
        signal.signal(signal.SIGINT, previous)
    return EXIT_CODES[result.status]


if __name__ == "__main__":
    raise SystemExit(main())
