import pytest
import torch

from genenet.evolution.fitness import ClassificationFitness, PositionalBitFitness
from genenet.evolution.genotype import BitGenome, Individual, WeightGenome
from genenet.translation.pytorch import encode_inputs
from genenet.utils.validation import ValidationError


def _zero_network():
    return WeightGenome(torch.zeros(4, 24), torch.zeros(24, 10))


def _perfect_scorer(genome, inputs):
    return torch.eye(inputs.shape[0], 10)


def _evaluated(evaluator, genome, task=None):
    ind = Individual(genome=genome)
    ind.fitness = evaluator.evaluate(genome, task)
    return ind


def test_positional_fitness_values():
    fit = PositionalBitFitness(26)
    assert fit.max_fitness == 325.0
    assert fit.evaluate(BitGenome([True] * 26)) == 325.0
    assert fit.evaluate(BitGenome([False] * 26)) == 0.0
    bits = [False] * 26
    bits[3] = True
    bits[10] = True
    assert fit.evaluate(BitGenome(bits)) == 13.0


def test_positional_convergence_is_exact():
    fit = PositionalBitFitness(26)
    assert fit.is_solved(_evaluated(fit, BitGenome([True] * 26)))
    for i in range(26):
        bits = [True] * 26
        bits[i] = False
        assert not fit.is_solved(_evaluated(fit, BitGenome(bits)))


def test_render_shows_set_letters():
    bits = [True] * 26
    bits[1] = False
    assert BitGenome(bits).render() == "a-cdefghijklmnopqrstuvwxyz"


def test_encode_inputs_msb_first():
    x = encode_inputs(5, 4)
    assert x.shape == (6, 4)
    assert x[5].tolist() == [0.0, 1.0, 0.0, 1.0]
    assert x[0].tolist() == [0.0, 0.0, 0.0, 0.0]


def test_constant_network_partial_credit_two_classes():
    fit = ClassificationFitness()
    # every output is sigmoid(0) = 0.5, arg-max falls on class 0
    # input 0: 2.0 + 0.5; input 1: (1 - 1/2) + 0.5
    assert fit.evaluate(_zero_network(), 1) == pytest.approx(3.5)
    assert fit.predictions(_zero_network(), 1) == [0, 0]


def test_constant_network_partial_credit_three_classes():
    fit = ClassificationFitness()
    expected = (2.0 + 0.5) + (1.0 - 1 / 3 + 0.5) + (1.0 - 2 / 3 + 0.5)
    assert fit.evaluate(_zero_network(), 2) == pytest.approx(expected)


def test_opaque_scorer_perfect_classification():
    fit = ClassificationFitness(scorer=_perfect_scorer)
    genome = _zero_network()
    assert fit.evaluate(genome, 3) == pytest.approx(4 * 3.0)
    assert fit.is_solved(_evaluated(fit, genome, 3), 3)
    assert fit.render(genome, 3) == "0123"


def test_single_wrong_class_is_not_solved():
    def scorer(genome, inputs):
        out = torch.eye(inputs.shape[0], 10)
        out[2] = 0.0
        out[2, 1] = 1.0
        return out

    fit = ClassificationFitness(scorer=scorer)
    ind = _evaluated(fit, _zero_network(), 3)
    assert not fit.is_solved(ind, 3)
    assert fit.render(ind.genome, 3) == "0113"


def test_task_outside_network_is_rejected():
    fit = ClassificationFitness(input_size=4, output_size=10)
    with pytest.raises(ValidationError):
        fit.check_task(10)
    with pytest.raises(ValidationError):
        ClassificationFitness(input_size=3, output_size=10).check_task(8)


def test_scorer_shape_mismatch_raises():
    fit = ClassificationFitness(scorer=lambda g, x: torch.zeros(x.shape[0], 3))
    with pytest.raises(ValueError):
        fit.evaluate(_zero_network(), 1)
