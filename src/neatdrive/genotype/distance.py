"""
NEAT Compatibility Distance Module

The genetic distance between two genomes, used to decide species membership.

Functions:
    compatibility_distance: NEAT distance between two genomes
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neatdrive.genotype.genome import Genome
    from neatdrive.run.config      import Config

# Below this many connection genes, excess and disjoint counts are not normalized
SMALL_GENOME_SIZE = 20

def compatibility_distance(genome1: 'Genome', genome2: 'Genome', config: 'Config') -> float:
    """
    Calculate the genetic distance between two genomes using the NEAT formula:
        distance = (c1 * E / N) + (c2 * D / N) + c3 * W̄

    Where:
    - E  = number of excess connection genes
    - D  = number of disjoint connection genes
    - W̄  = average weight difference of matching connection genes
    - N  = number of connection genes in the larger genome, or 1 if that is below 20
    - c1, c2, c3 = weight of the various terms (from the configuration)

    The result does not depend on the order of the two genomes.

    Parameters:
        genome1: first genome
        genome2: second genome
        config:  provides the coefficients c1, c2, c3

    Returns:
        the genetic distance between the two genomes
    """
    num_excess, num_disjoint, avg_weight_diff = genome1.compare_genes(genome2)

    N = max(len(genome1.connections), len(genome2.connections))
    if N < SMALL_GENOME_SIZE:
        N = 1

    return (config.distance_excess_coeff   * num_excess   / N +
            config.distance_disjoint_coeff * num_disjoint / N +
            config.distance_weight_coeff   * avg_weight_diff)
