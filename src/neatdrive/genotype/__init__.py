"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm: the genetic encoding of a candidate network and
the bookkeeping that keeps gene identities consistent across a population.

A genome consists of node IDs (input, output and hidden) and connection genes.
Every connection gene carries an innovation ID, which aligns homologous genes
during crossover and during the computation of the genetic distance.

Modules:
    connection_gene:    ConnectionGene class
    genome:             Genome class
    innovation_tracker: InnovationTracker class
    distance:           compatibility_distance function

Exported:
    ConnectionGene:         Gene encoding a weighted connection between nodes
    Genome:                 Complete genome representing a neural network
    InnovationTracker:      Run-wide source of innovation IDs and node IDs
    compatibility_distance: NEAT genetic distance between two genomes
"""

from neatdrive.genotype.connection_gene    import ConnectionGene
from neatdrive.genotype.distance           import compatibility_distance
from neatdrive.genotype.genome             import Genome
from neatdrive.genotype.innovation_tracker import InnovationTracker

__all__ = ['ConnectionGene',
           'Genome',
           'InnovationTracker',
           'compatibility_distance']
