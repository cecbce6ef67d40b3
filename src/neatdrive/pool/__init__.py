from neatdrive.pool.species          import Species, tournament_select
from neatdrive.pool.species_manager  import SpeciesManager
from neatdrive.pool.population       import Population
from neatdrive.pool.evolution_driver import EvolutionDriver

__all__ = [
    'Species',
    'tournament_select',
    'SpeciesManager',
    'Population',
    'EvolutionDriver',
]
