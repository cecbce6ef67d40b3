"""
Unit tests for Config class.
"""

import configparser
import os
from pathlib import Path

import pytest

from neatdrive.run.config import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def test_config_dir():
    """Return the directory containing test configuration files."""
    return os.path.join(os.path.dirname(__file__), 'test_configs')


@pytest.fixture
def write_config(tmp_path):
    """Write an INI file holding [POPULATION_INIT] plus the given extra text."""
    def _write(extra="", population_init="population_size = 10\nnum_inputs = 2\nnum_outputs = 1\n"):
        path = tmp_path / "config.ini"
        path.write_text(f"[POPULATION_INIT]\n{population_init}\n{extra}")
        return str(path)
    return _write


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:
    """Test Config initialization."""

    def test_init_without_file_creates_default_config(self):
        config = Config()

        assert config.population_size            == 100
        assert config.weight_mutation_power      == 0.5
        assert config.compatibility_threshold    == 3.5
        assert config.elitism                    == 1
        assert config.survival_threshold_percent == 20
        assert config.tournament_size            == 3
        assert config.reenable_probability       == 0.75
        assert config.fitness_criterion          == "max"
        assert config.fitness_threshold is None
        assert config.seed is None

    def test_default_config_is_valid(self):
        Config().validate()

    def test_init_with_nonexistent_file_raises_error(self):
        with pytest.raises(FileNotFoundError, match="Configuration file .* not found"):
            Config('nonexistent_file.ini')

    def test_init_with_minimal_config(self, test_config_dir):
        """Only [POPULATION_INIT] is required; everything else takes the default value."""
        config  = Config(os.path.join(test_config_dir, 'minimal.ini'))
        default = Config()

        assert config.population_size == 50
        assert config.num_inputs      == 4
        assert config.num_outputs     == 3

        for name in ('weight_mutation_rate', 'weight_replace_rate', 'weight_mutation_power',
                     'connection_add_probability', 'node_add_probability',
                     'compatibility_threshold', 'distance_excess_coeff', 'distance_disjoint_coeff',
                     'distance_weight_coeff', 'elitism', 'survival_threshold_percent', 'tournament_size',
                     'reenable_probability', 'max_stagnation_generations', 'min_species_count',
                     'max_number_generations', 'fitness_termination_check', 'fitness_criterion',
                     'fitness_threshold', 'seed'):
            assert getattr(config, name) == getattr(default, name), name


# ============================================================================
# Test Config Sections
# ============================================================================

class TestConfigSections:
    """Test the parsing of every section of a complete file."""

    @pytest.fixture
    def config(self, test_config_dir):
        return Config(os.path.join(test_config_dir, 'full.ini'))

    def test_population_init(self, config):
        assert (config.population_size, config.num_inputs, config.num_outputs) == (80, 6, 2)

    def test_connection(self, config):
        assert config.weight_mutation_rate  == 0.7
        assert config.weight_replace_rate   == 0.05
        assert config.weight_mutation_power == 1.5

    def test_structural_mutations(self, config):
        assert config.connection_add_probability == 0.3
        assert config.node_add_probability       == 0.1

    def test_speciation(self, config):
        assert config.compatibility_threshold == 2.5
        assert config.distance_excess_coeff   == 1.5
        assert config.distance_disjoint_coeff == 1.25
        assert config.distance_weight_coeff   == 0.4

    def test_reproduction(self, config):
        assert config.elitism                    == 3
        assert config.survival_threshold_percent == 30
        assert config.tournament_size            == 4
        assert config.reenable_probability       == 0.5

    def test_stagnation(self, config):
        assert config.max_stagnation_generations == 12
        assert config.min_species_count          == 1

    def test_termination(self, config):
        assert config.max_number_generations    == 75
        assert config.fitness_termination_check is True
        assert config.fitness_criterion         == "mean"
        assert config.fitness_threshold         == 0.95

    def test_random(self, config):
        assert config.seed == 7

    def test_types(self, config):
        assert isinstance(config.population_size, int)
        assert isinstance(config.compatibility_threshold, float)
        assert isinstance(config.seed, int)

    def test_example_xor_config(self):
        config = Config(str(Path(__file__).parents[3] / "examples" / "config_xor.ini"))
        assert config.num_inputs  == 3
        assert config.num_outputs == 1
        assert config.seed        == 42


# ============================================================================
# Test Missing and Special Values
# ============================================================================

class TestConfigValues:
    """Test missing required entries and special values."""

    def test_missing_required_option(self, write_config):
        path = write_config(population_init="population_size = 10\nnum_inputs = 2\n")
        with pytest.raises(configparser.NoOptionError):
            Config(path)

    def test_missing_required_section(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[CONNECTION]\nweight_mutation_rate = 0.5\n")
        with pytest.raises(configparser.NoSectionError):
            Config(str(path))

    def test_seed_none(self, write_config):
        assert Config(write_config("[RANDOM]\nseed = None\n")).seed is None

    def test_threshold_none(self, write_config):
        assert Config(write_config("[TERMINATION]\nfitness_threshold = none\n")).fitness_threshold is None

    def test_malformed_number(self, write_config):
        with pytest.raises(ValueError):
            Config(write_config("[REPRODUCTION]\nelitism = two\n"))


# ============================================================================
# Test Validation
# ============================================================================

class TestConfigValidate:
    """Test Config.validate."""

    @pytest.mark.parametrize("extra, message", [
        ("[CONNECTION]\nweight_mutation_rate = 1.5\n",             "weight_mutation_rate"),
        ("[STRUCTURAL_MUTATIONS]\nnode_add_probability = -0.1\n",  "node_add_probability"),
        ("[REPRODUCTION]\nreenable_probability = 2\n",             "reenable_probability"),
        ("[REPRODUCTION]\ntournament_size = 0\n",                  "tournament_size"),
        ("[REPRODUCTION]\nelitism = -1\n",                         "elitism"),
        ("[REPRODUCTION]\nsurvival_threshold_percent = 150\n",     "survival_threshold_percent"),
        ("[STAGNATION]\nmin_species_count = -2\n",                 "min_species_count"),
        ("[TERMINATION]\nfitness_criterion = median\n",            "fitness_criterion"),
        ("[TERMINATION]\nfitness_termination_check = True\n",      "fitness_threshold"),
    ])
    def test_invalid_values(self, write_config, extra, message):
        with pytest.raises(ValueError, match=message):
            Config(write_config(extra))

    def test_population_size_must_be_positive(self, write_config):
        with pytest.raises(ValueError, match="population_size"):
            Config(write_config(population_init="population_size = 0\nnum_inputs = 2\nnum_outputs = 1\n"))

    def test_validate_after_manual_changes(self):
        config = Config()
        config.fitness_criterion = "median"
        with pytest.raises(ValueError, match="fitness_criterion"):
            config.validate()
