"""
Unit tests for neatdrive.run.trial module.

This module contains tests for the Trial class,
which is the abstract base class for NEAT trials.
"""

import random

import pytest
from joblib        import parallel_config
from unittest.mock import patch

from neatdrive.phenotype import NetworkFast
from neatdrive.run.trial import Trial


# ============================================================================
# Concrete Trial Implementation for Testing
# ============================================================================

class ConcreteTrial(Trial):
    """Concrete implementation of Trial for testing purposes."""

    def __init__(self, config, network_type='standard', suppress_output=False, fitness=10.0):
        super().__init__(config, network_type, suppress_output, rng=random.Random(0))
        self.fitness                 = fitness
        self.reset_calls             = 0
        self.evaluate_fitness_calls  = 0
        self.progress_report_calls   = []
        self.final_report_called     = False

    def _reset(self):
        super()._reset()
        self.reset_calls += 1

    def _evaluate_fitness(self, network):
        self.evaluate_fitness_calls += 1
        return self.fitness(network) if callable(self.fitness) else self.fitness

    def _report_progress(self):
        self.progress_report_calls.append(self.generation)

    def _final_report(self):
        self.final_report_called = True


def output_fitness(network):
    """Fitness of a network: its first output on a fixed input."""
    return network.predict([1.0, 0.5])[0]


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def trial_config(config):
    config.max_number_generations = 3
    return config


# ============================================================================
# Test Trial Initialization
# ============================================================================

class TestTrialInit:
    """Test Trial initialization."""

    def test_cannot_instantiate_abstract_trial(self, trial_config):
        with pytest.raises(TypeError):
            Trial(trial_config)

    def test_initial_state(self, trial_config):
        trial = ConcreteTrial(trial_config)
        assert trial.failed     is True
        assert trial.generation == 0


# ============================================================================
# Test Trial Run
# ============================================================================

class TestTrialRun:
    """Test Trial.run."""

    def test_runs_until_max_generations(self, trial_config):
        trial = ConcreteTrial(trial_config)
        trial.run()

        assert trial.generation                   == 3
        assert trial.reset_calls                  == 1
        assert trial.progress_report_calls        == [0, 1, 2, 3]
        assert trial.final_report_called
        assert trial.evaluate_fitness_calls       == 4 * trial_config.population_size

    def test_fitness_reported_to_population(self, trial_config):
        trial = ConcreteTrial(trial_config, fitness=4.0)
        trial.run()
        assert all(genome.fitness == 4.0 for genome in trial._population.genomes)

    def test_suppress_output(self, trial_config):
        trial = ConcreteTrial(trial_config, suppress_output=True)
        trial.run()

        assert trial.progress_report_calls == []
        assert not trial.final_report_called
        assert trial.generation == 3

    def test_zero_generations(self, trial_config):
        trial_config.max_number_generations = 0
        trial = ConcreteTrial(trial_config)
        trial.run()

        assert trial.generation            == 0
        assert trial.progress_report_calls == [0]

    def test_run_twice_starts_over(self, trial_config):
        trial = ConcreteTrial(trial_config, suppress_output=True)
        trial.run()
        trial.run()

        assert trial.reset_calls == 2
        assert trial.generation  == 3

    def test_fast_network_type(self, trial_config):
        seen  = []
        trial = ConcreteTrial(trial_config, network_type='fast',
                              fitness=lambda network: seen.append(type(network)) or 1.0)
        trial.run()
        assert set(seen) == {NetworkFast}

    def test_parallel_evaluation(self, trial_config):
        trial_serial   = ConcreteTrial(trial_config, suppress_output=True, fitness=output_fitness)
        trial_parallel = ConcreteTrial(trial_config, suppress_output=True, fitness=output_fitness)

        trial_serial.run(num_jobs=1)
        with parallel_config(backend="threading"):
            trial_parallel.run(num_jobs=2)

        assert [str(g) for g in trial_parallel._population.genomes] == \
               [str(g) for g in trial_serial._population.genomes]

    def test_evolution_driven_by_driver(self, trial_config):
        trial = ConcreteTrial(trial_config, suppress_output=True)
        with patch.object(trial._driver, 'evolve_population', wraps=trial._driver.evolve_population) as evolve:
            trial.run()
        assert evolve.call_count == 3


# ============================================================================
# Test Termination
# ============================================================================

class TestTrialTerminate:
    """Test Trial._terminate."""

    def test_threshold_on_max_fitness(self, trial_config):
        trial_config.max_number_generations    = 50
        trial_config.fitness_termination_check = True
        trial_config.fitness_criterion         = "max"
        trial_config.fitness_threshold         = 5.0

        trial = ConcreteTrial(trial_config, suppress_output=True, fitness=10.0)
        trial.run()

        assert trial.generation == 0
        assert trial.failed is False

    def test_threshold_not_reached(self, trial_config):
        trial_config.fitness_termination_check = True
        trial_config.fitness_threshold         = 50.0

        trial = ConcreteTrial(trial_config, suppress_output=True, fitness=10.0)
        trial.run()

        assert trial.generation == 3
        assert trial.failed is True

    def test_threshold_on_mean_fitness(self, trial_config):
        trial_config.max_number_generations    = 0
        trial_config.fitness_termination_check = True
        trial_config.fitness_criterion         = "mean"
        trial_config.fitness_threshold         = 5.0

        trial = ConcreteTrial(trial_config, suppress_output=True)
        trial.run()
        assert trial.failed is False

        trial._population.report_fitness([10.0] + [0.0] * 9)   # mean 1, max 10
        assert trial._terminate() is True                       # generation limit
        assert trial.failed is True

        trial._population.report_fitness([6.0] * 10)
        assert trial._terminate() is True
        assert trial.failed is False

    def test_failed_untouched_without_fitness_check(self, trial_config):
        trial = ConcreteTrial(trial_config, suppress_output=True)
        trial.run()
        assert trial.failed is True
