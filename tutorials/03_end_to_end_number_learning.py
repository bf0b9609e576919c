"""
End-to-End Evolution: Number Learning

Goals:
- Evolve a 4-24-10 network to classify 0..1, then 0..2, ... up to 0..9
- Watch the difficulty escalate after each perfect solve
- Write a CSV log of every generation and a JSON result on success

Notes:
- Stagnation handling re-seeds the lower half of the population after 500
  generations without improvement and raises the mutation scale by 10%.
- Ctrl+C stops after the current generation; the log stays consistent.
"""

from __future__ import annotations

import signal
import threading

from genenet.reporting import ConsoleProgressSink, CsvRunLog, JsonResultWriter
from genenet.runner import RunController
from genenet.variants import numbers_variant


def main():
    variant = numbers_variant(seed=123)
    engine = variant.build_engine()

    cancel = threading.Event()
    signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())

    sinks = [
        ConsoleProgressSink(title='Number Learning Neural Network'),
        CsvRunLog('number_learning_log.csv'),
        JsonResultWriter('number_learning_result.json'),
    ]
    result = RunController(engine, sinks, cancel).run()

    for level in result.levels:
        print(f"range 0-{level.difficulty}: {level.generations} generations, {level.elapsed:.2f}s")
    print('status:', result.status.value)
    if result.sink_errors:
        print('log problems:', result.sink_errors)


if __name__ == '__main__':
    main()
