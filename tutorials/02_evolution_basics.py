"""
Evolution Basics Tutorial

Goals:
- Create bit genomes and score them
- Pick parents by tournament selection
- Apply single-point crossover and flip mutation deterministically
"""

from genenet.evolution.fitness import PositionalBitFitness
from genenet.evolution.genotype import Individual
from genenet.evolution.operators import BitGenomeOps
from genenet.evolution.selection import select_tournament_parents
from genenet.utils.rng_manager import RNGManager


def main():
    rng = RNGManager(seed=42)
    ops = BitGenomeOps(26)
    fitness = PositionalBitFitness(26)

    population = []
    for _ in range(8):
        genome = ops.randomize(rng)
        population.append(Individual(genome=genome, fitness=fitness.evaluate(genome)))
    population.sort(key=lambda ind: ind.fitness, reverse=True)
    for ind in population:
        print(ind.genome.render(), ind.fitness)

    # Two best out of a 5-draw tournament (draws may repeat)
    p1, p2 = select_tournament_parents(population, 5, rng)
    print('parents:', p1.fitness, p2.fitness)

    child = ops.crossover(p1.genome, p2.genome, rng)
    print('child:  ', child.render(), fitness.evaluate(child))

    ops.mutate(child, 0.05, 1.0, rng)
    print('mutated:', child.render(), fitness.evaluate(child))


if __name__ == '__main__':
    main()
