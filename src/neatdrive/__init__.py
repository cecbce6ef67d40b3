"""
neatdrive: NEAT neuroevolution for feed-forward controllers of simulated agents.

Typical use, with the caller owning the simulation:

    driver     = EvolutionDriver(Config("config.ini"))
    population = driver.initialize_population()
    while True:
        fitness = [simulate(network) for network in population.networks]
        population.report_fitness(fitness)
        driver.evolve_population(population)
"""

from neatdrive.genotype  import ConnectionGene, Genome, InnovationTracker, compatibility_distance
from neatdrive.phenotype import NetworkBase, NetworkFast, NetworkStandard, decode
from neatdrive.pool      import EvolutionDriver, Population, Species, SpeciesManager
from neatdrive.run       import Config
from neatdrive.run.trial import Trial
from neatdrive.utils     import setup_logger

__all__ = [
    'ConnectionGene',
    'Genome',
    'InnovationTracker',
    'compatibility_distance',
    'NetworkBase',
    'NetworkFast',
    'NetworkStandard',
    'decode',
    'EvolutionDriver',
    'Population',
    'Species',
    'SpeciesManager',
    'Config',
    'Trial',
    'setup_logger',
]
