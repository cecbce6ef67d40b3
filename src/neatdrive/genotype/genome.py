"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Genome: Complete genome representing a feed-forward neural network structure
"""

import random
from typing import Callable, Iterator

from neatdrive.genotype.connection_gene import ConnectionGene

class Genome:
    """
    A NEAT genome representing a neural network as node IDs plus connection genes.

    In the NEAT (NeuroEvolution of Augmenting Topologies) algorithm, a genome encodes
    the structure and parameters of a neural network at the genotype level. It consists of:
    - Node IDs: the input and output nodes (fixed for the whole run) and the hidden
      nodes, which are only ever introduced by the add-node mutation
    - Connection genes: weighted connections between nodes, each carrying a unique
      innovation ID used to align homologous genes during crossover and speciation

    A minimal genome contains only input and output nodes with no connections. Via mutation
    operations, genomes can grow by adding nodes and connections, forming increasingly complex
    network topologies while maintaining a DAG structure.

    Node numbering convention:
        - Input nodes:  [0, num_inputs)
        - Output nodes: [num_inputs, num_inputs + num_outputs)
        - Hidden nodes: [num_inputs + num_outputs, ...), in creation order

    Genomes are plain values with no identity of their own: the evolution driver
    replaces whole generations at a time and never deletes a genome mid-generation.

    Attributes:
        input_node_ids:  IDs of the input nodes, in declared order
        output_node_ids: IDs of the output nodes, in declared order
        hidden_node_ids: IDs of the hidden nodes, ascending
        connections:     Connection genes, sorted by innovation ID
        fitness:         Fitness assigned by the caller for the current generation

    Public Methods:
        mutate_weights(mutation_rate, replace_rate, power):          Mutate connection weights
        mutate_add_connection(next_innovation_id):                   Add a new connection gene
        mutate_add_node(next_innovation_id, next_node_id):           Split a connection with a new node
        count_excess_genes(other):                                   Genes beyond the other genome's range
        count_disjoint_genes(other):                                 Non-matching genes within that range
        calculate_average_weight_difference(other):                  Mean |Δw| over matching genes
        crossover(other, reenable_probability):                      Create offspring with another genome
        copy():                                                      Deep, independent copy

    Class Methods:
        from_dict(genome_dict): Create a genome from a dictionary description
    """

    def __init__(self, num_inputs: int, num_outputs: int):
        """
        Initialize a minimal Genome: input and output nodes, no hidden nodes, no connections.

        Parameters:
            num_inputs:  number of input nodes
            num_outputs: number of output nodes
        """
        # By convention, input nodes are numbered: [0, NUMBER INPUT NODES)
        self.input_node_ids : list[int] = list(range(num_inputs))

        # By convention, output nodes are numbered: [NUMBER INPUT NODES, NUMBER INPUT NODES + NUMBER OUTPUT NODES)
        self.output_node_ids: list[int] = list(range(num_inputs, num_inputs + num_outputs))

        self.hidden_node_ids: list[int]            = []
        self.connections    : list[ConnectionGene] = []
        self.fitness        : float                = 0.0

    @classmethod
    def from_dict(cls, genome_dict: dict) -> 'Genome':
        """
        Create a Genome from a dictionary description.

        This method allows programmatic creation of genomes with specific structures.
        The dictionary specifies nodes and connections, and the method validates that
        the structure follows the node numbering convention and is acyclic.

        Dictionary format:
            {
                "nodes": [
                    {"id": 0, "type": "input"},
                    {"id": 1, "type": "input"},
                    {"id": 2, "type": "output"},
                    {"id": 3, "type": "hidden"}
                ],
                "connections": [
                    {"from": 0, "to": 3, "weight":  0.5, "enabled": true, "innovation": 0},
                    {"from": 1, "to": 3, "weight": -0.3},
                    {"from": 3, "to": 2, "weight":  1.5}
                ],
                "fitness": 0.0
            }

        "enabled" defaults to True; "innovation" defaults to the position
        of the connection in the list; "fitness" defaults to 0.

        Parameters:
            genome_dict: Dictionary describing the genome structure

        Returns:
            A new Genome object with the specified structure

        Raises:
            ValueError: If the structure is invalid (wrong node numbering, cycles, etc.)
            KeyError: If required fields are missing from the dictionary
        """
        nodes_data = genome_dict["nodes"]
        input_ids  = [n["id"] for n in nodes_data if n["type"] == "input"]
        output_ids = [n["id"] for n in nodes_data if n["type"] == "output"]
        hidden_ids = [n["id"] for n in nodes_data if n["type"] == "hidden"]

        unknown = [n["type"] for n in nodes_data if n["type"] not in ("input", "output", "hidden")]
        if unknown:
            raise ValueError(f"Unknown node type(s): {unknown}")

        cls._validate_node_numbering(input_ids, output_ids, hidden_ids)

        genome = cls(len(input_ids), len(output_ids))
        genome.hidden_node_ids = sorted(hidden_ids)
        genome.fitness         = genome_dict.get("fitness", 0.0)

        node_ids = set(input_ids) | set(output_ids) | set(hidden_ids)
        for position, conn_data in enumerate(genome_dict.get("connections", [])):
            from_node  = conn_data["from"]
            to_node    = conn_data["to"]
            weight     = conn_data["weight"]
            enabled    = conn_data.get("enabled", True)
            innovation = conn_data.get("innovation", position)

            # Validate that nodes exist
            if from_node not in node_ids:
                raise ValueError(f"Connection references non-existent source node: {from_node}")
            if to_node not in node_ids:
                raise ValueError(f"Connection references non-existent destination node: {to_node}")
            if from_node in output_ids or to_node in input_ids:
                raise ValueError(f"Connection from {from_node} to {to_node} points against the input->output direction")
            if any(conn.innovation_id == innovation for conn in genome.connections):
                raise ValueError(f"Duplicate innovation ID {innovation}")

            # Validate that connection wouldn't create a cycle
            if genome._would_create_cycle(from_node, to_node):
                raise ValueError(f"Connection from {from_node} to {to_node} would create a cycle")

            genome.connections.append(ConnectionGene(from_node, to_node, weight, innovation, enabled))

        genome.connections.sort(key=lambda c: c.innovation_id)
        return genome

    @staticmethod
    def _validate_node_numbering(input_ids: list[int], output_ids: list[int], hidden_ids: list[int]) -> None:
        """
        Validate that node IDs follow the numbering convention.

        Raises:
            ValueError: If node numbering doesn't follow the convention
        """
        num_inputs  = len(input_ids)
        num_outputs = len(output_ids)

        expected_input_ids = list(range(num_inputs))
        if sorted(input_ids) != expected_input_ids:
            raise ValueError(f"Input nodes must be numbered {expected_input_ids}, got {sorted(input_ids)}")

        expected_output_ids = list(range(num_inputs, num_inputs + num_outputs))
        if sorted(output_ids) != expected_output_ids:
            raise ValueError(f"Output nodes must be numbered {expected_output_ids}, got {sorted(output_ids)}")

        min_hidden_id = num_inputs + num_outputs
        for hid in hidden_ids:
            if hid < min_hidden_id:
                raise ValueError(f"Hidden node {hid} has ID below minimum {min_hidden_id}")

        if len(hidden_ids) != len(set(hidden_ids)):
            raise ValueError("Duplicate node IDs found in node list")

    @property
    def node_ids(self) -> list[int]:
        """All node IDs: inputs, then hidden nodes, then outputs."""
        return self.input_node_ids + self.hidden_node_ids + self.output_node_ids

    @property
    def number_enabled_connections(self) -> int:
        return sum(1 for conn in self.connections if conn.enabled)

    @property
    def max_innovation_id(self) -> int:
        """Largest innovation ID in this genome (-1 if it has no connections)."""
        return self.connections[-1].innovation_id if self.connections else -1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def mutate_weights(self, mutation_rate: float, replace_rate: float, power: float = 0.5, rng=random) -> None:
        """
        Mutate the weight of every connection gene, each one independently.

        Parameters:
            mutation_rate: probability that a weight changes
            replace_rate:  probability that a changing weight is replaced rather than perturbed
            power:         perturbations are drawn uniformly from [-power, +power]
            rng:           source of randomness
        """
        for conn in self.connections:
            conn.mutate(mutation_rate, replace_rate, power, rng)

    def mutate_add_connection(self, next_innovation_id: Callable[[], int], rng=random) -> ConnectionGene | None:
        """
        Add a new connection between two existing, unconnected nodes.

        Candidate pairs (a, b) draw 'a' from the input and hidden nodes and 'b'
        from the hidden and output nodes, with a < b. Pairs already present as
        a connection gene (enabled or not) are excluded, and so are pairs that
        would close a cycle through genes created by earlier node splits.
        One of the remaining pairs is picked uniformly at random.

        Parameters:
            next_innovation_id: called once to mint the innovation ID of the new gene
            rng:                source of randomness

        Returns:
            The new connection gene, or None if no candidate pair exists
        """
        connected = {(conn.from_node, conn.to_node) for conn in self.connections}
        sources   = self.input_node_ids  + self.hidden_node_ids
        targets   = self.hidden_node_ids + self.output_node_ids

        candidates = [(a, b) for a in sources for b in targets
                      if a < b and (a, b) not in connected]

        # The expensive check is only needed when splits produced back-edges (hidden -> lower ID)
        if any(conn.from_node > conn.to_node for conn in self.connections):
            candidates = [(a, b) for a, b in candidates if not self._would_create_cycle(a, b)]

        if not candidates:
            return None

        from_node, to_node = rng.choice(candidates)
        new_conn = ConnectionGene(from_node, to_node, rng.uniform(-1.0, 1.0), next_innovation_id())
        self._add_connection(new_conn)
        return new_conn

    def mutate_add_node(self,
                        next_innovation_id: Callable[[], int],
                        next_node_id      : Callable[[], int],
                        rng=random) -> int | None:
        """
        Split a random enabled connection by inserting a new hidden node.

        The split connection (a -> b, weight w) is disabled, not removed, and
        is replaced functionally by two new enabled connections:
            a -> new  with weight 1.0
            new -> b  with weight w

        The new node ID is the largest minted so far, so the gene 'new -> b'
        always points from a larger to a smaller node ID. Only add-connection
        guarantees from_node < to_node; the genes created here do not.

        Parameters:
            next_innovation_id: called twice to mint the innovation IDs of the two new genes
            next_node_id:       called once to mint the ID of the new hidden node
            rng:                source of randomness

        Returns:
            The ID of the new hidden node, or None if there was no enabled connection to split
        """
        enabled_conns = [conn for conn in self.connections if conn.enabled]
        if not enabled_conns:
            return None

        split_conn = rng.choice(enabled_conns)
        split_conn.enabled = False

        new_node_id = next_node_id()
        self.hidden_node_ids.append(new_node_id)
        self.hidden_node_ids.sort()

        self._add_connection(ConnectionGene(split_conn.from_node, new_node_id, 1.0, next_innovation_id()))
        self._add_connection(ConnectionGene(new_node_id, split_conn.to_node, split_conn.weight, next_innovation_id()))
        return new_node_id

    def _add_connection(self, conn: ConnectionGene) -> None:
        """
        Append a connection gene, keeping 'connections' sorted by innovation ID.
        """
        self.connections.append(conn)
        if len(self.connections) > 1 and self.connections[-2].innovation_id > conn.innovation_id:
            self.connections.sort(key=lambda c: c.innovation_id)

    def _would_create_cycle(self, from_node: int, to_node: int) -> bool:
        """
        Check if adding a connection from_node -> to_node would create a cycle.
        Uses DFS to check if there's already a path from 'to_node' back to 'from_node'.
        Considers ALL connections (both enabled and disabled) to maintain DAG structure.

        Parameters:
            from_node: proposed start of the new connection
            to_node:   proposed end   of the new connections

        Returns:
            whether adding the new connection would create a cycle in the network
        """
        # Avoid trivial connections.
        if from_node == to_node:
            return True

        successors: dict[int, list[int]] = {}
        for conn in self.connections:
            successors.setdefault(conn.from_node, []).append(conn.to_node)

        # If we can reach 'from_node' starting at 'to_node', then adding a
        # connection 'from_node' -> 'to_node' would create a network cycle
        visited = set()
        stack   = [to_node]
        while stack:
            current = stack.pop()
            if current == from_node:
                return True
            if current in visited:
                continue
            visited.add(current)
            stack.extend(successors.get(current, []))

        return False

    # ------------------------------------------------------------------
    # Gene comparison
    # ------------------------------------------------------------------

    def _align(self, other: 'Genome') -> Iterator[tuple[ConnectionGene | None, ConnectionGene | None]]:
        """
        Merge-walk the connection genes of both genomes in innovation ID order.

        Yields:
            (gene_self, gene_other) pairs; matching genes come together,
            a gene present in only one genome comes paired with None
        """
        genes1 = sorted(self.connections,  key=lambda c: c.innovation_id)
        genes2 = sorted(other.connections, key=lambda c: c.innovation_id)
        i1 = i2 = 0
        while i1 < len(genes1) or i2 < len(genes2):
            gene1 = genes1[i1] if i1 < len(genes1) else None
            gene2 = genes2[i2] if i2 < len(genes2) else None
            if gene1 is not None and gene2 is not None and gene1.innovation_id == gene2.innovation_id:
                yield gene1, gene2
                i1 += 1
                i2 += 1
            elif gene2 is None or (gene1 is not None and gene1.innovation_id < gene2.innovation_id):
                yield gene1, None
                i1 += 1
            else:
                yield None, gene2
                i2 += 1

    def compare_genes(self, other: 'Genome') -> tuple[int, int, float]:
        """
        Classify the connection genes of this genome and another in a single pass.

        A gene present in only one genome is 'excess' if its innovation ID exceeds
        the other genome's largest innovation ID, and 'disjoint' otherwise.

        Returns:
            (number of excess genes, number of disjoint genes, average weight difference
             of matching genes, or 0.0 if no gene matches)
        """
        max_self  = max((c.innovation_id for c in self.connections),  default=-1)
        max_other = max((c.innovation_id for c in other.connections), default=-1)

        num_excess   = 0
        num_disjoint = 0
        num_matching = 0
        weight_diff  = 0.0
        for gene_self, gene_other in self._align(other):
            if gene_self is not None and gene_other is not None:
                num_matching += 1
                weight_diff  += abs(gene_self.weight - gene_other.weight)
            elif gene_self is not None:
                if gene_self.innovation_id > max_other:
                    num_excess += 1
                else:
                    num_disjoint += 1
            else:
                if gene_other.innovation_id > max_self:
                    num_excess += 1
                else:
                    num_disjoint += 1

        avg_weight_diff = weight_diff / num_matching if num_matching else 0.0
        return num_excess, num_disjoint, avg_weight_diff

    def count_excess_genes(self, other: 'Genome') -> int:
        return self.compare_genes(other)[0]

    def count_disjoint_genes(self, other: 'Genome') -> int:
        return self.compare_genes(other)[1]

    def calculate_average_weight_difference(self, other: 'Genome') -> float:
        return self.compare_genes(other)[2]

    # ------------------------------------------------------------------
    # Reproduction
    # ------------------------------------------------------------------

    def crossover(self, other: 'Genome', reenable_probability: float = 0.75, rng=random) -> 'Genome':
        """
        Perform NEAT crossover between this genome and another to create offspring.

        The fitter parent is the one with the higher fitness; on a tie, 'self'.

        NEAT crossover rules:
        - Matching genes: inherit a copy from either parent at random; if the gene is
          disabled in either parent, the copy is enabled with 'reenable_probability'
          and disabled otherwise
        - Disjoint/excess genes of the fitter parent: always inherited
        - Disjoint/excess genes of the weaker parent: never inherited
        The hidden nodes of the offspring are the union of both parents' hidden nodes.

        Parameters:
            other:                the other parent genome
            reenable_probability: chance that a gene disabled in a parent is enabled in the child
            rng:                  source of randomness

        Returns:
            New offspring genome (fitness 0)
        """
        self_is_fitter = self.fitness >= other.fitness

        offspring = Genome.__new__(Genome)
        offspring.input_node_ids  = list(self.input_node_ids)
        offspring.output_node_ids = list(self.output_node_ids)
        offspring.hidden_node_ids = sorted(set(self.hidden_node_ids) | set(other.hidden_node_ids))
        offspring.connections     = []
        offspring.fitness         = 0.0

        for gene_self, gene_other in self._align(other):

            # Matching connections: inherit connection gene randomly from either parent
            if gene_self is not None and gene_other is not None:
                child_gene = (gene_self if rng.random() < 0.5 else gene_other).copy()
                if not gene_self.enabled or not gene_other.enabled:
                    child_gene.enabled = rng.random() < reenable_probability
                offspring.connections.append(child_gene)

            # Disjoint & excess connections: inherit connection genes from the fitter parent
            elif gene_self is not None and self_is_fitter:
                offspring.connections.append(gene_self.copy())
            elif gene_other is not None and not self_is_fitter:
                offspring.connections.append(gene_other.copy())

        return offspring

    def copy(self) -> 'Genome':
        """
        Create a deep copy of this genome, sharing no mutable state with it.
        """
        clone = Genome.__new__(Genome)
        clone.input_node_ids  = list(self.input_node_ids)
        clone.output_node_ids = list(self.output_node_ids)
        clone.hidden_node_ids = list(self.hidden_node_ids)
        clone.connections     = [conn.copy() for conn in self.connections]
        clone.fitness         = self.fitness
        return clone

    def __str__(self):
        node_genes_str  = ''.join(f"[I{node_id}]" for node_id in self.input_node_ids)
        node_genes_str += ''.join(f"[H{node_id}]" for node_id in self.hidden_node_ids)
        node_genes_str += ''.join(f"[O{node_id}]" for node_id in self.output_node_ids)
        conn_genes_str  = ''.join(str(conn) for conn in self.connections)
        return f"Nodes: {node_genes_str}\nConns: {conn_genes_str}"

    def __repr__(self):
        return (f"Genome(inputs={len(self.input_node_ids)}, outputs={len(self.output_node_ids)}, "
                f"hidden={len(self.hidden_node_ids)}, "
                f"connections={self.number_enabled_connections}/{len(self.connections)}, "
                f"fitness={self.fitness})")
