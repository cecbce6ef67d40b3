"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: Represents a single species with members and fitness tracking

Functions:
    tournament_select: Pick a parent from a breeding pool by tournament
"""

import random
from typing import TYPE_CHECKING

from loguru import logger

from neatdrive.genotype import Genome, compatibility_distance

if TYPE_CHECKING:
    from neatdrive.run.config import Config

def tournament_select(pool: list[Genome], config: 'Config', rng=random) -> Genome:
    """
    Select a genome from a pool by tournament.

    'config.tournament_size' genomes are sampled from the pool with
    replacement; the fittest of the sample wins (the first one sampled,
    among equally fit genomes).

    Parameters:
        pool:   the genomes competing in the tournament
        config: provides the tournament size and, for the fallback, the genome dimensions
        rng:    source of randomness

    Returns:
        The winning genome; a fresh minimal genome if the pool is empty
    """
    if not pool:
        logger.error("Tournament selection on empty pool; using a fresh genome")
        return Genome(config.num_inputs, config.num_outputs)

    participants = [rng.choice(pool) for _ in range(config.tournament_size)]
    return max(participants, key=lambda genome: genome.fitness)

class Species:
    """
    A species representing a cluster of genetically similar genomes in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as genomes only compete for offspring within their own species.

    Each species keeps a representative genome used for distance calculations
    during speciation. The representative is a private copy: every generation it
    is replaced by a copy of a randomly drawn member, so it drifts with the species
    rather than staying pinned to one genotype.

    The species manages reproduction by:
    - Preserving elite genomes through elitism
    - Creating a breeding pool from top performers
    - Generating offspring through tournament selection and crossover

    Public Attributes:
        id:                Unique species identifier
        representative:    Genome used for distance calculations during speciation
        members:           The genomes that are part of this species in the current generation
        best_fitness_ever: Best fitness ever achieved by a member of this species
        stale_generations: Generations since 'best_fitness_ever' last improved
        expected_offspring: Number of genomes this species contributes to the next generation
        fitness_history:   Best member fitness, for each generation the species was evaluated

    Public Methods:
        is_compatible(genome):                Is the genome close enough to the representative?
        add_member(genome):                   Add a genome to the species
        calculate_adjusted_fitnesses():       Compute the shared fitness of the members
        get_average_adjusted_fitness():       Average shared fitness of the members
        update_staleness_and_best_fitness():  Track improvement of the species
        reset_for_next_generation():          Prepare the species for a new generation
        spawn():                              Generate the offspring of this species
    """

    def __init__(self, founder: Genome, config: 'Config', species_id: int = 0):
        """
        Initialize a new species.

        Parameters:
            founder:    the genome founding the species; it becomes the first member
                        and a copy of it becomes the representative
            config:     stores configuration parameters
            species_id: unique species identifier
        """
        self._config: 'Config' = config

        self.id                : int          = species_id
        self.representative    : Genome       = founder.copy()
        self.members           : list[Genome] = [founder]
        self.best_fitness_ever : float        = founder.fitness
        self.stale_generations : int          = 0
        self.expected_offspring: int          = 0
        self.fitness_history   : list[float]  = []

        self._sum_adjusted_fitness: float = 0.0

    def is_compatible(self, genome: Genome) -> bool:
        """
        Check whether a genome belongs in this species.

        Parameters:
            genome: the genome to check

        Returns:
            True if the distance between the genome and the representative
            is below the compatibility threshold
        """
        distance = compatibility_distance(genome, self.representative, self._config)
        return distance < self._config.compatibility_threshold

    def add_member(self, genome: Genome) -> None:
        """
        Add a genome to the species. Callers check 'is_compatible' first.
        """
        self.members.append(genome)

    def calculate_adjusted_fitnesses(self) -> None:
        """
        Explicit fitness sharing: the adjusted fitness of a member is its raw
        fitness divided by the number of members. Stores their sum.
        """
        self._sum_adjusted_fitness = 0.0
        if not self.members:
            return

        num_members = len(self.members)
        for genome in self.members:
            self._sum_adjusted_fitness += genome.fitness / num_members

    def get_average_adjusted_fitness(self) -> float:
        if not self.members:
            return 0.0
        return self._sum_adjusted_fitness / len(self.members)

    def update_staleness_and_best_fitness(self) -> None:
        """
        Update the best fitness ever achieved by the species.
        A generation that does not strictly improve it makes the species one generation staler.
        """
        max_fitness = max((genome.fitness for genome in self.members), default=0.0)
        self.fitness_history.append(max_fitness)

        if max_fitness > self.best_fitness_ever:
            self.best_fitness_ever = max_fitness
            self.stale_generations = 0
        else:
            self.stale_generations += 1

    def reset_for_next_generation(self, rng=random) -> None:
        """
        Prepare the species to be assigned the genomes of a new generation.

        Parameters:
            rng: source of randomness (picks the new representative)
        """
        if self.members:
            self.representative = rng.choice(self.members).copy()
        self.members               = []
        self.expected_offspring    = 0
        self._sum_adjusted_fitness = 0.0

    def spawn(self, rng=random) -> list[Genome]:
        """
        Generate 'expected_offspring' genomes for the next generation.

        The spawning process:
        1. Sort all members by fitness (highest first)
        2. Copy the elite members unchanged (they keep their fitness)
        3. Create the breeding pool from the top 'survival_threshold_percent' of members
        4. Fill the remaining slots with the crossover of two tournament winners,
           or with clones of the only pool member if the pool is smaller than 2

        Configuration parameters used:
            - elitism:                    Number of top genomes to carry over unchanged
            - survival_threshold_percent: Percentage of the species that can reproduce
            - tournament_size:            Sample size of each selection tournament
            - reenable_probability:       Crossover re-enabling of disabled genes

        Parameters:
            rng: source of randomness

        Returns:
            List of offspring genomes for the next generation
        """

        # Trivial case
        if self.expected_offspring <= 0 or not self.members:
            return []

        # Stable sort: among equally fit members, the earlier one ranks higher
        self.members.sort(key=lambda genome: genome.fitness, reverse=True)

        num_elites = min(self._config.elitism, len(self.members), self.expected_offspring)
        offspring  = [genome.copy() for genome in self.members[:num_elites]]

        pool_size     = max(1, int(len(self.members) * self._config.survival_threshold_percent / 100.0))
        breeding_pool = self.members[:pool_size]

        num_children = self.expected_offspring - num_elites
        if len(breeding_pool) < 2:
            offspring.extend(breeding_pool[0].copy() for _ in range(num_children))
        else:
            for _ in range(num_children):
                parent1 = tournament_select(breeding_pool, self._config, rng)
                parent2 = tournament_select(breeding_pool, self._config, rng)
                offspring.append(parent1.crossover(parent2, self._config.reenable_probability, rng))

        return offspring

    def __repr__(self):
        return (f"Species(id={self.id}, members={len(self.members)}, "
                f"best_fitness_ever={self.best_fitness_ever}, stale_generations={self.stale_generations}, "
                f"expected_offspring={self.expected_offspring})")
