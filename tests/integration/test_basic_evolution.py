"""
Integration tests for basic NEAT evolution.

These tests run complete trials on the XOR problem and check the properties
of the run as a whole: the population keeps its size, structure is added,
both network backends agree, and a seeded run is reproducible.

NOTE: These tests use a fixed random seed for reproducibility.
"""

import numpy as np
import pytest

from neatdrive.genotype  import Genome
from neatdrive.phenotype import NetworkFast, NetworkStandard
from neatdrive.pool      import EvolutionDriver
from neatdrive.run       import Config
from neatdrive.run.trial import Trial


XOR_INPUTS  = np.array([[0.0, 0.0, 1.0], [0.0, 1.0, 1.0], [1.0, 0.0, 1.0], [1.0, 1.0, 1.0]])
XOR_OUTPUTS = np.array([0.0, 1.0, 1.0, 0.0])


# ============================================================================
# Helper Trial Class for XOR
# ============================================================================

class TrialXORTest(Trial):
    """Simplified XOR trial for integration testing."""

    def __init__(self, config, network_type='standard'):
        super().__init__(config, network_type, suppress_output=True)
        self.network_type = network_type
        self.best_fitness = []

    def _reset(self):
        super()._reset()
        self.best_fitness = []

    def _evaluate_fitness(self, network):
        if self.network_type == 'standard':
            outputs = np.array([network.predict(inputs.tolist())[0] for inputs in XOR_INPUTS])
        else:
            outputs = network.predict_batch(XOR_INPUTS)[:, 0]
        return float(4.0 - np.sum((outputs - XOR_OUTPUTS) ** 2))

    def _report_progress(self):
        pass

    def _final_report(self):
        pass

    def _terminate(self):
        self.best_fitness.append(self._population.get_fittest_genome().fitness)
        return super()._terminate()


@pytest.fixture
def xor_config():
    config = Config()
    config.population_size        = 60
    config.num_inputs             = 3
    config.num_outputs            = 1
    config.compatibility_threshold = 3.0
    config.max_number_generations = 30
    config.seed                   = 42
    return config


# ============================================================================
# Test Basic Evolution
# ============================================================================

class TestBasicEvolution:
    """End-to-end runs on the XOR problem."""

    @pytest.mark.parametrize("network_type", ["standard", "fast"])
    def test_xor_run(self, xor_config, network_type):
        trial = TrialXORTest(xor_config, network_type)
        trial.run()

        population = trial._population
        assert trial.generation         == 30
        assert len(population.genomes)  == 60
        assert len(population.networks) == 60
        assert len(trial.best_fitness)  == 31

        # 4 - Σerr² with outputs in (0, 1): fitness lies in [0, 4]
        assert all(0.0 <= fitness <= 4.0 for fitness in trial.best_fitness)

        # Structure has been added along the way
        assert any(genome.connections for genome in population.genomes)
        assert trial._driver.tracker.hidden_node_count > 0

    def test_backends_agree_on_evolved_population(self, xor_config):
        trial = TrialXORTest(xor_config)
        trial.run()

        for genome in trial._population.genomes:
            expected = [NetworkStandard(genome).predict(inputs.tolist())[0] for inputs in XOR_INPUTS]
            np.testing.assert_allclose(NetworkFast(genome).predict_batch(XOR_INPUTS)[:, 0], expected,
                                       rtol=1e-12, atol=1e-12)

    def test_seeded_runs_are_reproducible(self, xor_config):
        trial1 = TrialXORTest(xor_config)
        trial2 = TrialXORTest(xor_config)
        trial1.run()
        trial2.run()

        assert trial1.best_fitness == trial2.best_fitness
        assert [str(g) for g in trial1._population.genomes] == [str(g) for g in trial2._population.genomes]

    def test_independent_runs_do_not_share_state(self, xor_config):
        trial1 = TrialXORTest(xor_config)
        trial1.run()
        count_before = trial1._driver.tracker.innovation_count

        trial2 = TrialXORTest(xor_config)
        trial2.run()

        assert trial1._driver.tracker.innovation_count == count_before
        assert trial1._driver.tracker is not trial2._driver.tracker

    def test_fitter_genome_spreads(self, xor_config):
        """A single genome with a connection, and the highest fitness, passes it on."""
        xor_config.connection_add_probability = 0.0
        xor_config.node_add_probability       = 0.0

        driver     = EvolutionDriver(xor_config)
        population = driver.initialize_population()

        innovation_id = driver.tracker.next_innovation_id()
        population.genomes[0] = Genome.from_dict({
            "nodes":       [{"id": 0, "type": "input"}, {"id": 1, "type": "input"},
                            {"id": 2, "type": "input"}, {"id": 3, "type": "output"}],
            "connections": [{"from": 2, "to": 3, "weight": -3.0, "innovation": innovation_id}],
        })
        population.report_fitness([10.0] + [1.0] * 59)

        driver.evolve_population(population)

        carriers = [genome for genome in population.genomes
                    if any(conn.innovation_id == innovation_id for conn in genome.connections)]
        assert len(carriers) > 1
        assert len(population.genomes) == 60
