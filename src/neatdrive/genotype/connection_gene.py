"""
NEAT Connection Gene Module

This module implements the ConnectionGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    ConnectionGene: Gene encoding a weighted connection between nodes
"""

import random

class ConnectionGene:
    """
    A gene describing a weighted connection between two nodes in a Neural Network.

    Each connection gene represents a directed edge in the neural network graph,
    connecting a source node to a destination node with an associated weight.
    Connection genes are uniquely identified by their innovation ID, which
    serves as a historical marker enabling proper gene alignment during crossover
    and during the computation of the genetic distance.

    Connections can be enabled or disabled, allowing NEAT to preserve structural
    information while temporarily deactivating pathways. A connection split by
    the add-node mutation is disabled, never removed.

    Connection genes are plain values: they hold no reference to the genome that
    contains them, and 'copy()' produces a fully independent gene.

    Public Attributes:
        from_node:     ID of the source node
        to_node:       ID of the destination node
        weight:        Weight of the connection
        enabled:       Whether this connection is active in the network
        innovation_id: Global innovation ID uniquely identifying this connection

    Public Methods:
        mutate(mutation_rate, replace_rate, power, rng): Stochastically mutate the weight
        copy():                                          Independent copy of this gene
    """

    __slots__ = ('from_node', 'to_node', 'weight', 'enabled', 'innovation_id')

    def __init__(self,
                 from_node    : int,
                 to_node      : int,
                 weight       : float,
                 innovation_id: int,
                 enabled      : bool = True):
        """
        Initialize a connection gene.

        Parameters:
            from_node:     ID of the source node
            to_node:       ID of the destination node
            weight:        Weight of the connection
            innovation_id: Number uniquely and globally identifying this connection
            enabled:       Whether this connection is active in the network
        """
        self.from_node    : int   = from_node
        self.to_node      : int   = to_node
        self.weight       : float = weight
        self.enabled      : bool  = enabled
        self.innovation_id: int   = innovation_id

    def mutate(self, mutation_rate: float, replace_rate: float, power: float, rng=random) -> None:
        """
        Stochastically mutate the (gene describing the) connection.

        With probability 'mutation_rate' the weight changes, in one of two ways:
         + replaced by a fresh value drawn uniformly from [-1, 1] (probability 'replace_rate')
         + perturbed by adding a value drawn uniformly from [-power, +power]

        Parameters:
            mutation_rate: probability that the weight changes at all
            replace_rate:  probability of replacing (vs perturbing), given a change
            power:         magnitude of a perturbation
            rng:           source of randomness
        """
        if rng.random() < mutation_rate:
            if rng.random() < replace_rate:
                self.weight = rng.uniform(-1.0, 1.0)
            else:
                self.weight += rng.uniform(-power, power)

    def copy(self) -> 'ConnectionGene':
        return ConnectionGene(self.from_node, self.to_node, self.weight, self.innovation_id, self.enabled)

    def __eq__(self, other):
        if not isinstance(other, ConnectionGene):
            return NotImplemented
        return (self.from_node     == other.from_node and
                self.to_node       == other.to_node   and
                self.weight        == other.weight    and
                self.enabled       == other.enabled   and
                self.innovation_id == other.innovation_id)

    __hash__ = None

    def __repr__(self):
        return (f"ConnectionGene(from_node={self.from_node:03d}, to_node={self.to_node:03d}, "
                f"weight={self.weight:+.6f}, enabled={self.enabled}, innovation_id={self.innovation_id:03d})")

    def __str__(self):
        s  = f"[{self.innovation_id:03d},{'E' if self.enabled else 'D'},"
        s += f"{self.from_node:02d}=>{self.to_node:02d},{self.weight:+.02f}]"
        return s
