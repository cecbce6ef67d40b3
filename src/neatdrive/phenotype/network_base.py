"""
NEAT Network Base Module

This module defines the abstract base class for the decoded (phenotype) network.
It provides a common interface and shared functionality for the different network
backends (object-oriented, numpy vectorized).

Classes:
    NodeType:    Enumeration for node types (INPUT, HIDDEN, OUTPUT)
    Connection:  A weighted edge of a decoded network
    NetworkBase: Abstract base class defining the network interface
"""

import heapq
from abc    import ABC, abstractmethod
from enum   import Enum
from typing import Any, TYPE_CHECKING

import graphviz  # type: ignore
from loguru import logger

if TYPE_CHECKING:
    from neatdrive.genotype import Genome

class NodeType(Enum):
    """
    Nodes come in three types: input, hidden, output.
    """
    INPUT  = "I"
    HIDDEN = "H"
    OUTPUT = "O"

class Connection:
    """
    A weighted connection between two nodes of a decoded network.

    Holds copies of the values of the ConnectionGene it was decoded from;
    it keeps no reference to the gene or to the genome.
    """

    __slots__ = ('from_node', 'to_node', 'weight', 'enabled', 'innovation_id')

    def __init__(self, from_node: int, to_node: int, weight: float, enabled: bool, innovation_id: int):
        self.from_node     = from_node
        self.to_node       = to_node
        self.weight        = weight
        self.enabled       = enabled
        self.innovation_id = innovation_id

    def __repr__(self):
        return (f"Connection({self.from_node}->{self.to_node}, w={self.weight:+.4f}, "
                f"enabled={self.enabled}, innovation_id={self.innovation_id})")

class NetworkBase(ABC):
    """
    Abstract base class for decoded NEAT networks.

    Decoding copies everything it needs out of the genome: the network never
    refers back to the genome, so the genome can be mutated (or discarded)
    without affecting an already decoded network, and independent networks
    can be evaluated concurrently.

    The base class provides:
        - The node table (ID => NodeType) and the copied connections
        - The incoming-connection lists of every node (enabled connections only)
        - The evaluation order of the nodes
        - Standard network introspection properties
        - Network visualization

    Evaluation order:
        inputs, then hidden nodes by ascending ID, then outputs in declared order.
        This order is a valid feed-forward order whenever every connection goes
        from a node to a node placed after it. Splitting a hidden->hidden connection
        creates a node whose ID is larger than its destination. Evaluating in the
        fixed order would then read the not yet computed source as 0; instead the
        nodes are sorted topologically, preferring the fixed order, so that every
        node is computed after all of its sources. For such networks the outputs
        therefore differ from a strict fixed-order evaluation.

    Public Properties (available to all subclasses):
        input_ids:                  IDs of the input nodes, in declared order
        output_ids:                 IDs of the output nodes, in declared order
        evaluation_order:           IDs of all nodes, in the order they are computed
        number_nodes:               Total number of nodes in the network
        number_nodes_hidden:        Number of hidden nodes in the network
        number_connections:         Total number of connections in the network
        number_connections_enabled: Number of enabled connections in the network

    Public Methods (must be implemented by subclasses):
        predict(inputs): Process one input vector and return the output vector
    """

    def __init__(self, genome: 'Genome'):
        """
        Decode the genome into node and connection tables.

        Connections whose endpoints are not declared nodes of the genome are
        logged and left out of the network; decoding itself never fails.

        Parameters:
            genome: The Genome encoding the network structure
        """
        self._input_ids : list[int] = list(genome.input_node_ids)
        self._output_ids: list[int] = list(genome.output_node_ids)

        # One node per distinct declared ID; inputs win over outputs, outputs over hidden
        self._node_types: dict[int, NodeType] = {}
        for node_id in self._input_ids:
            self._node_types.setdefault(node_id, NodeType.INPUT)
        for node_id in self._output_ids:
            self._node_types.setdefault(node_id, NodeType.OUTPUT)
        for node_id in sorted(set(genome.hidden_node_ids)):
            self._node_types.setdefault(node_id, NodeType.HIDDEN)

        self._connections: list[Connection] = [
            Connection(gene.from_node, gene.to_node, gene.weight, gene.enabled, gene.innovation_id)
            for gene in genome.connections]

        # For each node, build the list of incoming enabled connections
        self._incoming: dict[int, list[Connection]] = {node_id: [] for node_id in self._node_types}
        for conn in self._connections:
            if not conn.enabled:
                continue
            if conn.from_node not in self._node_types or conn.to_node not in self._node_types:
                logger.warning("Connection gene {} references undeclared node(s): {} -> {}; dropped",
                               conn.innovation_id, conn.from_node, conn.to_node)
                continue
            self._incoming[conn.to_node].append(conn)

        self._evaluation_order: list[int] = self._sort_nodes()

    def _sort_nodes(self) -> list[int]:
        """
        Order the nodes for evaluation (Kahn's algorithm, preferring the fixed order).

        Returns:
            List of node IDs in evaluation order
        """
        fixed_order = [n for n in self._input_ids] + \
                      [n for n, t in self._node_types.items() if t == NodeType.HIDDEN] + \
                      [n for n in self._output_ids]
        rank = {}
        for node_id in fixed_order:
            rank.setdefault(node_id, len(rank))

        successors: dict[int, list[int]] = {node_id: [] for node_id in rank}
        in_degree = {node_id: 0 for node_id in rank}
        for node_id, conns in self._incoming.items():
            for conn in conns:
                successors[conn.from_node].append(node_id)
                in_degree[node_id] += 1

        ready = [(rank[node_id], node_id) for node_id, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        result = []
        while ready:
            _, node_id = heapq.heappop(ready)
            result.append(node_id)
            for successor in successors[node_id]:
                in_degree[successor] -= 1
                if in_degree[successor] == 0:
                    heapq.heappush(ready, (rank[successor], successor))

        # A cycle can only come from a hand-built genome; evaluate its nodes in the fixed order
        if len(result) < len(rank):
            placed   = set(result)
            leftover = sorted((node_id for node_id in rank if node_id not in placed), key=rank.get)
            logger.warning("Network contains a cycle through nodes {}; evaluating them in fixed order", leftover)
            result.extend(leftover)

        return result

    @property
    def input_ids(self) -> list[int]:
        return list(self._input_ids)

    @property
    def output_ids(self) -> list[int]:
        return list(self._output_ids)

    @property
    def evaluation_order(self) -> list[int]:
        return list(self._evaluation_order)

    @property
    def number_nodes(self) -> int:
        """Total number of nodes in the network."""
        return len(self._node_types)

    @property
    def number_nodes_hidden(self) -> int:
        """Number of hidden nodes in the network."""
        return sum(1 for t in self._node_types.values() if t == NodeType.HIDDEN)

    @property
    def number_connections(self) -> int:
        """Total number of connections in the network."""
        return len(self._connections)

    @property
    def number_connections_enabled(self) -> int:
        """Number of enabled connections in the network."""
        return sum(1 for conn in self._connections if conn.enabled)

    def _check_input_size(self, num_values: int) -> None:
        if num_values != len(self._input_ids):
            raise ValueError(f"Expected {len(self._input_ids)} inputs, got {num_values}")

    @abstractmethod
    def predict(self, inputs: Any) -> list[float]:
        """
        Perform a complete forward pass through the network.

        Parameters:
            inputs: one value per input node, in declared input order

        Returns:
            one value per output node, in declared output order

        Raises:
            ValueError: if the number of inputs does not match the number of input nodes
        """
        pass

    def visualize(self, view: bool = False) -> graphviz.Digraph:
        """
        Visualize the network using Graphviz.

        Parameters:
            view: If True, render the graph and open it in a viewer

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')  # Left to right layout

        node_attrs = {
            NodeType.INPUT:  {'fillcolor': 'lightgrey', 'style': 'filled', 'shape': 'circle', 'fontsize': '8'},
            NodeType.HIDDEN: {'fillcolor': 'lightblue', 'style': 'filled', 'shape': 'circle', 'fontsize': '8'},
            NodeType.OUTPUT: {'fillcolor': 'white'    , 'style': 'filled', 'shape': 'circle', 'fontsize': '8'},
        }
        clusters = {
            NodeType.INPUT:  ('cluster_input' , 'source', 'Inputs'),
            NodeType.HIDDEN: ('cluster_hidden', 'same'  , 'Hidden'),
            NodeType.OUTPUT: ('cluster_output', 'sink'  , 'Outputs'),
        }

        for node_type, (name, rank, label) in clusters.items():
            node_ids = [n for n in self._evaluation_order if self._node_types[n] == node_type]
            if not node_ids:
                continue
            with dot.subgraph(name=name) as cluster:
                cluster.attr(rank=rank, label=label, style='invisible')
                for node_id in node_ids:
                    cluster.node(str(node_id), label=f"id={node_id}", **node_attrs[node_type])

        # Add edges with weights (both enabled and disabled)
        for conn in self._connections:
            dot.edge(str(conn.from_node), str(conn.to_node),
                     label=f"i={conn.innovation_id},w={conn.weight:.2f}",
                     fontsize='6',
                     color='black' if conn.enabled else 'lightgray')

        if view:
            dot.view(cleanup=True)

        return dot
