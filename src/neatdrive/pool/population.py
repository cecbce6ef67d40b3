"""
NEAT Population Module

This module implements the Population class, the container for one generation
of genomes and the networks decoded from them.

Classes:
    Population: The genomes of the current generation and their decoded networks
"""

import math
from typing import Sequence, TYPE_CHECKING

from loguru import logger

from neatdrive.genotype  import Genome
from neatdrive.phenotype import NetworkBase, decode

if TYPE_CHECKING:
    from neatdrive.run.config import Config

class Population:
    """
    A generation of genomes, with one decoded network per genome.

    'genomes[i]' and 'networks[i]' belong together: the caller evaluates
    'networks[i]' (for example by letting it drive one simulated agent) and
    reports the resulting fitness at position 'i'.

    Public Attributes:
        genomes:    The genomes of the current generation
        networks:   The networks decoded from 'genomes', same order
        generation: Number of generation transitions so far

    Public Methods:
        initialize():              Fill the population with minimal genomes
        build_networks():          Decode every genome
        report_fitness(values):    Store the fitness of every genome
        get_fittest_genome():      Return the genome with highest fitness
    """

    def __init__(self, config: 'Config', network_type: str = "standard"):
        """
        Create an empty population.

        Parameters:
            config:       Stores configuration parameters
            network_type: Type of network backend to decode into ('standard', 'fast')
        """
        self._config       = config
        self._network_type = network_type

        self.genomes   : list[Genome]      = []
        self.networks  : list[NetworkBase] = []
        self.generation: int               = 0

    def initialize(self) -> None:
        """
        Create 'population_size' minimal genomes: input and
        output nodes only, no hidden nodes, no connections.
        """
        self.genomes    = [Genome(self._config.num_inputs, self._config.num_outputs)
                           for _ in range(self._config.population_size)]
        self.generation = 0
        self.build_networks()

    def build_networks(self) -> None:
        self.networks = [decode(genome, self._network_type) for genome in self.genomes]

    def report_fitness(self, values: Sequence[float]) -> None:
        """
        Store the fitness of every genome, by position.

        Genomes without a matching value get fitness 0, extra values
        are ignored, and NaN counts as 0; all three are logged.

        Parameters:
            values: one fitness value per genome, in population order
        """
        if len(values) != len(self.genomes):
            logger.warning("Got {} fitness values for {} genomes; missing values count as 0",
                           len(values), len(self.genomes))

        for idx, genome in enumerate(self.genomes):
            fitness = float(values[idx]) if idx < len(values) else 0.0
            if math.isnan(fitness):
                logger.warning("Genome {} reported NaN fitness; using 0", idx)
                fitness = 0.0
            genome.fitness = fitness

    def get_fittest_genome(self) -> Genome | None:
        """
        Find and return the genome with the highest fitness in the population.

        Returns:
            The genome with the highest fitness value, or None if the population is empty
        """
        if not self.genomes:
            return None
        return max(self.genomes, key=lambda genome: genome.fitness)

    def __len__(self):
        return len(self.genomes)

    def __repr__(self):
        return f"Population(generation={self.generation}, size={len(self.genomes)})"
