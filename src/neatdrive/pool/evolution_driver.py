"""
NEAT Evolution Driver Module

This module implements the EvolutionDriver class, which orchestrates the
transition from one generation to the next.

Classes:
    EvolutionDriver: Owns the innovation tracker and species of one evolutionary run
"""

import math
import random
from typing import TYPE_CHECKING

from loguru import logger

from neatdrive.genotype             import Genome, InnovationTracker
from neatdrive.genotype             import compatibility_distance as _compatibility_distance
from neatdrive.pool.population      import Population
from neatdrive.pool.species         import Species
from neatdrive.pool.species_manager import SpeciesManager

if TYPE_CHECKING:
    from neatdrive.run.config import Config

class EvolutionDriver:
    """
    Drives one evolutionary run.

    The driver owns everything whose lifetime is the run: the innovation
    tracker, the species, and the random source. Independent drivers share
    nothing, so several runs can coexist in one process.

    A run alternates between two phases, under the control of the caller:
        Evaluating: the caller runs 'population.networks' and sets the fitness
                    of every genome (directly, or with 'population.report_fitness')
        Evolving:   the caller calls 'evolve_population(population)'

    The driver is single-threaded: genomes must not be read by evaluation
    workers while 'evolve_population' runs.

    Public Attributes:
        config:          Configuration parameters of the run
        rng:             The random source of the run
        tracker:         Source of innovation IDs and hidden node IDs
        species_manager: The species of the run

    Public Methods:
        initialize_population():       Start a run, return the first generation
        evolve_population(population): Replace the population with the next generation
        crossover(parent1, parent2):   NEAT crossover of two genomes
        compatibility_distance(g1, g2): Genetic distance between two genomes
    """

    def __init__(self, config: 'Config', rng: random.Random | None = None, network_type: str = "standard"):
        """
        Parameters:
            config:       configuration parameters
            rng:          random source of the run; if None, a new one seeded
                          with 'config.seed' (unseeded if that is None)
            network_type: network backend the populations decode into
        """
        self.config         : 'Config'          = config
        self.rng            : random.Random     = rng if rng is not None else random.Random(config.seed)
        self.tracker        : InnovationTracker = InnovationTracker(config.num_inputs, config.num_outputs)
        self.species_manager: SpeciesManager    = SpeciesManager(config)
        self._network_type  : str               = network_type

    @property
    def species(self) -> list[Species]:
        return self.species_manager.species

    def initialize_population(self) -> Population:
        """
        Start a new run: reset the innovation tracker and the species, create
        'population_size' minimal genomes, decode them, and speciate them.

        Returns:
            The first generation
        """
        self.tracker.reset()
        self.species_manager.reset()

        population = Population(self.config, self._network_type)
        population.initialize()
        self.species_manager.speciate(population.genomes, self.rng)

        logger.info("Population of {} genomes initialized and speciated into {} species",
                    len(population.genomes), len(self.species))
        return population

    def evolve_population(self, population: Population) -> None:
        """
        Evolve the population for one generation, in place.

        The fitness of every genome must already be set. Steps:
        1. Fitness intake (missing or NaN fitness counts as 0)
        2. Speciation (first-fit, against drifting representatives)
        3. Staleness update of every species
        4. Stagnation pruning, down to 'min_species_count' species
        5. Offspring allocation by shared fitness
        6. Reproduction: elitism, tournament selection, crossover; padding
           from the previous generation if the species fall short
        7. Mutation of every genome of the new generation
        8. The generation counter advances and the new genomes are decoded

        Afterwards 'population.genomes' holds exactly 'population_size' genomes.

        Parameters:
            population: the generation whose evaluation just completed
        """
        self._intake_fitness(population)

        self.species_manager.speciate(population.genomes, self.rng)
        logger.debug("Population speciated into {} species", len(self.species))

        self.species_manager.update_staleness()

        removed = self.species_manager.remove_stagnating_species()
        if removed:
            logger.info("Removed {} stale species; {} remaining", len(removed), len(self.species))

        allocations = self.species_manager.calculate_offspring_allocations()
        logger.debug("Offspring per species: {}", allocations)

        next_generation = self._reproduce(population.genomes)
        logger.debug("Reproduced {} genomes", len(next_generation))

        self._mutate(next_generation)
        logger.debug("Mutated next generation")

        population.genomes     = next_generation
        population.generation += 1
        population.build_networks()

        logger.info("Completed generation {}; starting generation {}",
                    population.generation - 1, population.generation)

    def _intake_fitness(self, population: Population) -> None:
        for idx, genome in enumerate(population.genomes):
            if genome.fitness is None or math.isnan(genome.fitness):
                logger.warning("Genome {} has no valid fitness; using 0", idx)
                genome.fitness = 0.0

        fittest = population.get_fittest_genome()
        logger.debug("Fitness intake for generation {}: best {}",
                     population.generation, fittest.fitness if fittest else None)

    def _reproduce(self, previous: list[Genome]) -> list[Genome]:
        """
        Create the genomes of the next generation.

        Parameters:
            previous: the genomes of the generation just evaluated

        Returns:
            Exactly 'population_size' genomes
        """
        target = self.config.population_size

        next_generation = []
        for spec in self.species:
            next_generation.extend(spec.spawn(self.rng))

        # Pad with copies of the previous generation, fittest first
        ranked = sorted(previous, key=lambda genome: genome.fitness, reverse=True)
        idx = 0
        while len(next_generation) < target:
            if ranked:
                next_generation.append(ranked[idx % len(ranked)].copy())
                idx += 1
            else:
                logger.error("Nothing to reproduce from; adding a fresh genome")
                next_generation.append(Genome(self.config.num_inputs, self.config.num_outputs))

        return next_generation[:target]

    def _mutate(self, genomes: list[Genome]) -> None:
        config = self.config
        for genome in genomes:
            genome.mutate_weights(config.weight_mutation_rate, config.weight_replace_rate,
                                  config.weight_mutation_power, self.rng)
            if self.rng.random() < config.connection_add_probability:
                genome.mutate_add_connection(self.tracker.next_innovation_id, self.rng)
            if self.rng.random() < config.node_add_probability:
                genome.mutate_add_node(self.tracker.next_innovation_id, self.tracker.next_node_id, self.rng)

    def crossover(self, parent1: Genome, parent2: Genome) -> Genome:
        """
        NEAT crossover; ties in fitness favor 'parent1'. See 'Genome.crossover'.
        """
        return parent1.crossover(parent2, self.config.reenable_probability, self.rng)

    def compatibility_distance(self, genome1: Genome, genome2: Genome) -> float:
        return _compatibility_distance(genome1, genome2, self.config)
