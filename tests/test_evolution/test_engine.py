import pytest
import torch

from genenet.evolution.engine import EvolutionEngine, EvolutionState
from genenet.evolution.fitness import ClassificationFitness, PositionalBitFitness
from genenet.evolution.genotype import BitGenome
from genenet.evolution.operators import BitGenomeOps, WeightGenomeOps
from genenet.utils.validation import ValidationError
from genenet.variants import alphabet_variant, numbers_variant


def perfect_scorer(genome, inputs):
    return torch.eye(inputs.shape[0], 10)


def constant_scorer(genome, inputs):
    return torch.full((inputs.shape[0], 10), 0.5)


def _is_sorted(population):
    values = [ind.fitness for ind in population]
    return all(a >= b for a, b in zip(values, values[1:]))


def test_step_keeps_population_size_and_order():
    for variant in (alphabet_variant(seed=1), numbers_variant(seed=1, population_size=12)):
        engine = variant.build_engine()
        engine.initialize()
        for _ in range(5):
            if engine.step() is not EvolutionState.RUNNING:
                break
            assert len(engine.population) == variant.config.population_size
            assert _is_sorted(engine.population)
            assert all(ind.fitness is not None for ind in engine.population)


def test_elitism_never_loses_best_fitness():
    engine = numbers_variant(seed=2, population_size=10).build_engine()
    engine.initialize()
    best = engine.best.fitness
    for _ in range(25):
        state = engine.step()
        assert engine.best.fitness >= best
        best = engine.best.fitness
        if state is EvolutionState.SOLVED:
            break


def test_alphabet_run_converges_with_fixed_seed():
    engine = alphabet_variant(seed=11).build_engine()
    engine.initialize()
    state = EvolutionState.RUNNING
    for _ in range(5000):
        state = engine.step()
        if state is EvolutionState.SOLVED:
            break
    assert state is EvolutionState.SOLVED
    assert engine.best.genome.bits == [True] * 26
    assert engine.best.fitness == 325.0


def test_solved_only_when_every_bit_set():
    variant = alphabet_variant(seed=3, mutation_rate=0.0)
    engine = variant.build_engine()
    engine.initialize([BitGenome([True] * 26) for _ in range(20)])
    assert engine.step() is EvolutionState.SOLVED

    bits = [True] * 26
    bits[0] = False
    engine = variant.build_engine()
    engine.initialize([BitGenome(list(bits)) for _ in range(20)])
    assert engine.step() is EvolutionState.RUNNING
    assert engine.best.fitness == 325.0


def test_weight_engine_solves_with_perfect_scorer():
    engine = numbers_variant(seed=4, scorer=perfect_scorer, population_size=6).build_engine()
    engine.initialize()
    assert engine.step() is EvolutionState.SOLVED
    assert engine.run_state.generation == 1
    with pytest.raises(RuntimeError):
        engine.step()


def test_solve_decays_mutation_scale_with_floor():
    engine = numbers_variant(seed=5, scorer=perfect_scorer, population_size=6).build_engine()
    engine.initialize()
    engine.step()
    assert engine.run_state.mutation_scale == pytest.approx(0.2 * 0.95)

    engine = numbers_variant(seed=5, scorer=perfect_scorer, population_size=6,
                             mutation_scale_min=0.195).build_engine()
    engine.initialize()
    engine.step()
    assert engine.run_state.mutation_scale == pytest.approx(0.195)


def test_stagnation_triggers_reset_after_limit():
    engine = numbers_variant(seed=6, scorer=constant_scorer, population_size=6, stall_limit=3).build_engine()
    engine.initialize()
    engine.step()  # first generation records the checkpoint
    assert engine.run_state.stall_count == 0
    assert engine.run_state.best_fitness_checkpoint == pytest.approx(3.5)
    for expected in (1, 2, 3):
        engine.step()
        assert engine.run_state.stall_count == expected
    assert engine.run_state.stagnation_resets == 0
    engine.step()
    assert engine.run_state.stall_count == 0
    assert engine.run_state.stagnation_resets == 1
    assert engine.run_state.mutation_scale == pytest.approx(0.2 * 1.1)


def test_stall_counter_resets_on_improvement():
    engine = numbers_variant(seed=7, population_size=6, stall_limit=100).build_engine()
    engine.initialize()
    rs = engine.run_state
    rs.best_fitness_checkpoint = 1.0
    engine.population[0].fitness = 1.0005
    engine._track_stagnation()
    assert rs.stall_count == 1
    engine.population[0].fitness = 1.5
    engine._track_stagnation()
    assert rs.stall_count == 0
    assert rs.best_fitness_checkpoint == 1.5


def test_reset_lower_half_replaces_only_the_worse_half():
    engine = numbers_variant(seed=8, scorer=constant_scorer, population_size=8).build_engine()
    engine.initialize()
    before = [ind.individual_id for ind in engine.population]
    engine.reset_lower_half()
    after = [ind.individual_id for ind in engine.population]
    assert after[:4] == before[:4]
    assert not set(after[4:]) & set(before)
    assert len(engine.population) == 8


def test_advance_task_reevaluates_and_resets_counters():
    engine = numbers_variant(seed=9, scorer=perfect_scorer, population_size=6).build_engine()
    engine.initialize()
    engine.step()
    engine.advance_task(2)
    rs = engine.run_state
    assert engine.state is EvolutionState.RUNNING
    assert (rs.task, rs.generation, rs.stall_count, rs.best_fitness_checkpoint) == (2, 0, 0, 0.0)
    assert engine.best.fitness == pytest.approx(3 * 3.0)


def test_construction_time_validation():
    variant = alphabet_variant(seed=1)
    engine = variant.build_engine()
    with pytest.raises(ValidationError):
        engine.initialize([BitGenome([True] * 26)])
    with pytest.raises(ValidationError):
        engine.initialize([BitGenome([True] * 3) for _ in range(20)])
    with pytest.raises(ValidationError):
        numbers_variant(task_ceiling=10).build_engine()
    with pytest.raises(ValidationError):
        numbers_variant(input_size=3).build_engine()


def test_step_requires_initialized_population():
    variant = alphabet_variant(seed=1)
    engine = EvolutionEngine(variant.ops, variant.evaluator, variant.config)
    with pytest.raises(RuntimeError):
        engine.step()


def test_solved_when_all_ones_ties_below_the_best():
    # bit 0 scores nothing, so a genome missing it ties the all-ones genome
    partial = [False] + [True] * 25
    for seed in range(20):
        engine = alphabet_variant(seed=seed, mutation_rate=0.0).build_engine()
        genomes = [BitGenome(list(partial)) for _ in range(20)]
        genomes[1] = BitGenome([True] * 26)
        engine.initialize(genomes)
        assert not engine.best.genome.all_set()
        assert engine.step() is EvolutionState.SOLVED
        assert engine.best.genome.all_set()
        assert engine.best.fitness == 325.0


def test_dimension_mismatch_rejected_at_construction():
    cfg = numbers_variant().config
    with pytest.raises(ValidationError) as exc:
        EvolutionEngine(WeightGenomeOps(output_size=5), ClassificationFitness(output_size=10), cfg)
    assert exc.value.code == "dimension_mismatch"
    with pytest.raises(ValidationError):
        EvolutionEngine(WeightGenomeOps(input_size=3), ClassificationFitness(input_size=4), cfg)
    with pytest.raises(ValidationError):
        EvolutionEngine(BitGenomeOps(10), PositionalBitFitness(26), alphabet_variant().config)
