"""
Translation and Forward Tutorial

Goals:
- Build a random weight genome (4 inputs, 24 hidden, 10 outputs)
- Translate it to a PyTorch module and run the binary-encoded inputs 0..3
- Score it with the classification fitness
"""

import torch

from genenet.evolution.fitness import ClassificationFitness
from genenet.evolution.operators import WeightGenomeOps
from genenet.translation.pytorch import encode_inputs, to_pytorch_model
from genenet.utils.rng_manager import RNGManager


def main():
    rng = RNGManager(seed=7)
    genome = WeightGenomeOps(4, 24, 10).randomize(rng)

    # Class n is fed as its 4-bit binary code, most significant bit first
    x = encode_inputs(3, 4)
    print('inputs:', x.tolist())

    model = to_pytorch_model(genome, {'device': 'cpu'})
    with torch.no_grad():
        y = model(x)
    print('output_shape:', tuple(y.shape))

    fitness = ClassificationFitness(4, 10)
    print('predictions:', fitness.render(genome, 3))
    print('fitness:', round(fitness.evaluate(genome, 3), 4))


if __name__ == '__main__':
    main()
