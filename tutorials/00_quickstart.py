from genenet.runner import RunController
from genenet.reporting import ConsoleProgressSink
from genenet.variants import alphabet_variant


def main():
    # Quickstart goal:
    # 1) Build the alphabet problem: 26 bits, bit i is worth i points
    # 2) Wrap it in a run controller with a terminal progress line
    # 3) Run until every letter is switched on

    # The seed fixes every random draw; the same seed replays the same run.
    variant = alphabet_variant(seed=42)

    # The engine owns the population; the controller owns the loop around it.
    engine = variant.build_engine()
    controller = RunController(engine, [ConsoleProgressSink(title='Alphabet Learning Neural Network')])

    result = controller.run()

    print('status:', result.status.value)
    print('generation:', result.generation)
    print('best:', result.best_rendering, result.best_fitness)


if __name__ == '__main__':
    main()
