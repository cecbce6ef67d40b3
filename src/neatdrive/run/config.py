import configparser
import os

class Config:

    _FITNESS_CRITERIA = ("max", "mean")

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Every key except those in [POPULATION_INIT] is optional in the file;
        missing keys take the same value as the default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config holding the default values.

        Raises:
            FileNotFoundError: if 'config_file' does not exist
            ValueError:        if a parameter holds a value outside its allowed range
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.population_size = 100
            self.num_inputs      = 5
            self.num_outputs     = 2

            self.weight_mutation_rate  = 0.8
            self.weight_replace_rate   = 0.1
            self.weight_mutation_power = 0.5

            self.connection_add_probability = 0.4
            self.node_add_probability       = 0.24

            self.compatibility_threshold = 3.5
            self.distance_excess_coeff   = 1.0
            self.distance_disjoint_coeff = 1.0
            self.distance_weight_coeff   = 0.6

            self.elitism                    = 1
            self.survival_threshold_percent = 20
            self.tournament_size            = 3
            self.reenable_probability       = 0.75

            self.max_stagnation_generations = 25
            self.min_species_count          = 2

            self.max_number_generations    = 200
            self.fitness_termination_check = False
            self.fitness_criterion         = "max"
            self.fitness_threshold         = None

            self.seed = None
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [POPULATION_INIT]

        # The number of genomes in each generation.
        self.population_size = get_value('POPULATION_INIT', 'population_size', int)

        # The number of input nodes, through which the network receives the sensor vector.
        self.num_inputs = get_value('POPULATION_INIT', 'num_inputs', int)

        # The number of output nodes, from which the caller reads the agent actions.
        self.num_outputs = get_value('POPULATION_INIT', 'num_outputs', int)

        # [CONNECTION]

        # The probability that any one connection weight is mutated.
        self.weight_mutation_rate = get_value('CONNECTION', 'weight_mutation_rate', float, default=0.8)

        # Given that a weight mutates, the probability that it is replaced by a fresh
        # value drawn uniformly from [-1, 1] (otherwise it is perturbed).
        self.weight_replace_rate = get_value('CONNECTION', 'weight_replace_rate', float, default=0.1)

        # A perturbation adds a value drawn uniformly from [-power, +power].
        self.weight_mutation_power = get_value('CONNECTION', 'weight_mutation_power', float, default=0.5)

        # [STRUCTURAL_MUTATIONS]

        # The probability that a genome gains a new connection in a generation.
        self.connection_add_probability = get_value('STRUCTURAL_MUTATIONS', 'connection_add_probability', float, default=0.4)

        # The probability that a genome gains a new node (splitting an enabled connection).
        self.node_add_probability = get_value('STRUCTURAL_MUTATIONS', 'node_add_probability', float, default=0.24)

        # [SPECIATION]

        # Genomes whose distance to a species representative is less than
        # this threshold are considered to be in that species.
        self.compatibility_threshold = get_value('SPECIATION', 'compatibility_threshold', float, default=3.5)

        # The coefficients of the excess gene count, disjoint gene count
        # and average weight difference terms of the genetic distance.
        self.distance_excess_coeff   = get_value('SPECIATION', 'distance_excess_coeff'  , float, default=1.0)
        self.distance_disjoint_coeff = get_value('SPECIATION', 'distance_disjoint_coeff', float, default=1.0)
        self.distance_weight_coeff   = get_value('SPECIATION', 'distance_weight_coeff'  , float, default=0.6)

        # [REPRODUCTION]

        # The number of most-fit genomes in each species that are
        # copied as-is from one generation to the next.
        self.elitism = get_value('REPRODUCTION', 'elitism', int, default=1)

        # The percentage (0-100) of each species, taken from the top, allowed to reproduce.
        self.survival_threshold_percent = get_value('REPRODUCTION', 'survival_threshold_percent', int, default=20)

        # The number of genomes sampled (with replacement) in each selection tournament.
        self.tournament_size = get_value('REPRODUCTION', 'tournament_size', int, default=3)

        # The probability that a matching gene disabled in either parent is enabled in the child.
        self.reenable_probability = get_value('REPRODUCTION', 'reenable_probability', float, default=0.75)

        # [STAGNATION]

        # Species whose best fitness has not improved for this
        # number of generations are considered stagnant and removed.
        self.max_stagnation_generations = get_value('STAGNATION', 'max_stagnation_generations', int, default=25)

        # Stagnant species are not removed if that would leave fewer species than this.
        self.min_species_count = get_value('STAGNATION', 'min_species_count', int, default=2)

        # [TERMINATION]

        # The number of generations after which a trial stops.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int, default=200)

        # Whether to use the fitness of the most recent
        # generation as a criterion for stopping the run.
        self.fitness_termination_check = get_value('TERMINATION', 'fitness_termination_check', bool, default=False)

        # How the population fitness is summarized for the termination check.
        # Allowed values:
        #   "mean" calculate the mean fitness across the entire population
        #   "max"  get the fitness of the fittest genome in the population
        self.fitness_criterion = get_value('TERMINATION', 'fitness_criterion', str, default="max")

        # The fitness value which when met or exceeded causes the run to end.
        self.fitness_threshold = get_value('TERMINATION', 'fitness_threshold', float, default=None)

        # [RANDOM]

        # Seed for the random source of the evolution driver.
        # Use "None" for an unseeded (non-reproducible) run.
        self.seed = get_value('RANDOM', 'seed', int, default=None)

        self.validate()

    def validate(self) -> None:
        """
        Check that all parameters hold values in their allowed ranges.

        Raises:
            ValueError: naming the first offending parameter
        """
        for name in ('population_size', 'num_inputs', 'num_outputs', 'tournament_size'):
            if getattr(self, name) < 1:
                raise ValueError(f"'{name}' must be at least 1, got {getattr(self, name)}")

        for name in ('elitism', 'max_stagnation_generations', 'min_species_count', 'max_number_generations'):
            if getattr(self, name) < 0:
                raise ValueError(f"'{name}' cannot be negative, got {getattr(self, name)}")

        for name in ('weight_mutation_rate', 'weight_replace_rate',
                     'connection_add_probability', 'node_add_probability', 'reenable_probability'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"'{name}' is a probability and must lie in [0, 1], got {value}")

        if not 0 <= self.survival_threshold_percent <= 100:
            raise ValueError(f"'survival_threshold_percent' must lie in [0, 100], got {self.survival_threshold_percent}")

        if self.fitness_criterion not in self._FITNESS_CRITERIA:
            raise ValueError(f"'fitness_criterion' must be one of {self._FITNESS_CRITERIA}, got '{self.fitness_criterion}'")

        if self.fitness_termination_check and self.fitness_threshold is None:
            raise ValueError("'fitness_threshold' is required when 'fitness_termination_check' is True")
