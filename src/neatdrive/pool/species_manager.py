"""
NEAT Species Manager Module

This module implements the SpeciesManager class for the NEAT algorithm.
The manager coordinates the speciation process and manages the lifecycle
of all species across generations.

Speciation in NEAT:
In traditional genetic algorithms, new structural innovations often have lower
initial fitness and are quickly eliminated. NEAT addresses this by organizing
the population into species - groups of genetically similar genomes that
compete primarily within their own niche. This allows novel structures time to
optimize before facing global competition.

How Speciation Works:
1. Every existing species draws a new representative from its current members
2. Each genome, in population order, joins the first species (in species order)
   whose representative is within the compatibility threshold (first-fit)
3. A genome that fits no existing species founds a new one
4. Species left without members are discarded
5. Stagnant species are removed, down to a minimum number of species
6. Each species is allotted offspring in proportion to its shared fitness

Classes:
    SpeciesManager: Manages all species, handles speciation and offspring allocation
"""

import random
from itertools import count
from typing    import TYPE_CHECKING

from loguru import logger

from neatdrive.pool.species import Species

if TYPE_CHECKING:
    from neatdrive.genotype   import Genome
    from neatdrive.run.config import Config

# Below this total of average adjusted fitness, offspring are split evenly
FITNESS_EPSILON = 0.00001

class SpeciesManager:
    """
    Manages the collection of species and speciation process across generations.

    The species are kept in a list, in creation order; that order matters,
    since speciation is first-fit.

    Public Attributes:
        species: List of the current Species, in creation order

    Public Methods:
        reset():                           Forget all species (start of a run)
        speciate(genomes):                 Assign all genomes to species
        update_staleness():                Track the improvement of every species
        remove_stagnating_species():       Remove species that haven't improved
        calculate_offspring_allocations(): Determine offspring count per species
    """

    def __init__(self, config: 'Config'):
        """
        Initialize the Species Manager.

        Parameters:
            config: Stores configuration parameters.
        """
        self._config = config
        self.reset()

    def reset(self) -> None:
        self.species      : list[Species] = []
        self._id_generator                = count(1)  # generates species IDs

    def speciate(self, genomes: list['Genome'], rng=random) -> None:
        """
        Assign all genomes of a generation to species based on genetic similarity.

        Postconditions:
            - Every genome is a member of exactly one species
            - Each species has at least one member

        Parameters:
            genomes: the genomes of the current generation, in population order
            rng:     source of randomness (picks the new representatives)
        """
        for spec in self.species:
            spec.reset_for_next_generation(rng)

        for genome in genomes:
            for spec in self.species:
                if spec.is_compatible(genome):
                    spec.add_member(genome)
                    break
            else:
                self.species.append(Species(genome, self._config, next(self._id_generator)))

        # Remove extinct species
        extinct = [spec.id for spec in self.species if not spec.members]
        if extinct:
            self.species = [spec for spec in self.species if spec.members]
            logger.debug("Species {} went extinct", extinct)

        assigned_count = sum(len(spec.members) for spec in self.species)
        assert assigned_count == len(genomes), "Lost genomes during speciation!"

    def update_staleness(self) -> None:
        for spec in self.species:
            spec.update_staleness_and_best_fitness()

    def remove_stagnating_species(self) -> list[Species]:
        """
        Remove the species that have not improved for too long.

        A species is stagnant once 'stale_generations' reaches
        'max_stagnation_generations'. Stagnant species are removed stalest
        first (earliest created among equally stale ones), and removal stops
        as soon as only 'min_species_count' species are left.

        Returns:
            The removed species
        """
        stagnant = [spec for spec in self.species
                    if spec.stale_generations >= self._config.max_stagnation_generations]
        stagnant.sort(key=lambda spec: spec.stale_generations, reverse=True)

        removed = []
        for spec in stagnant:
            if len(self.species) - len(removed) <= self._config.min_species_count:
                break
            removed.append(spec)

        if removed:
            removed_ids  = {spec.id for spec in removed}
            self.species = [spec for spec in self.species if spec.id not in removed_ids]

        return removed

    def calculate_offspring_allocations(self) -> dict[int, int]:
        """
        Calculate how many offspring each species should produce.

        Each species gets 'floor(avg adjusted fitness / total * population size)'
        offspring, or an even share when the total adjusted fitness is (nearly)
        zero. The shortfall left by rounding down is then handed out one at a
        time, round-robin over the species sorted by descending average adjusted
        fitness, until the allocations add up to the population size.

        Negative fitness is allowed: each allocation is finally clamped to
        [0, population size], so the allocations may then no longer add up
        to the population size (reproduction pads or truncates).

        Sets 'expected_offspring' on every species.

        Returns:
            Dictionary mapping species ID to number of offspring to produce
        """
        population_size = self._config.population_size

        for spec in self.species:
            spec.calculate_adjusted_fitnesses()

        total_fitness = sum(spec.get_average_adjusted_fitness() for spec in self.species)

        if total_fitness > FITNESS_EPSILON:
            for spec in self.species:
                spec.expected_offspring = int(spec.get_average_adjusted_fitness() / total_fitness * population_size)
        elif self.species:
            for spec in self.species:
                spec.expected_offspring = population_size // len(self.species)

        total_allocated = sum(spec.expected_offspring for spec in self.species)

        sorted_species = sorted(self.species, key=lambda spec: spec.get_average_adjusted_fitness(), reverse=True)
        idx = 0
        while total_allocated < population_size and sorted_species:
            sorted_species[idx % len(sorted_species)].expected_offspring += 1
            total_allocated += 1
            idx             += 1

        # Negative fitness can push quotas below 0 or above the population size
        for spec in self.species:
            spec.expected_offspring = min(max(0, spec.expected_offspring), population_size)

        return {spec.id: spec.expected_offspring for spec in self.species}

    def __len__(self):
        return len(self.species)
