"""
NEAT Fast Network Module

This module implements a decoded network optimized for batch inference.
NetworkFast computes exactly what NetworkStandard computes, but evaluates a
whole batch of input vectors (for example the sensor readings of many agents
sharing one controller, or a full training set) in a single call, using
vectorized numpy operations and in-place array updates.

Classes:
    NetworkFast: Batch-processing feedforward network using NumPy arrays
"""

import numpy as np
from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from neatdrive.genotype import Genome
from neatdrive.activations             import sigmoid_activation
from neatdrive.phenotype.network_base import NetworkBase, NodeType

class NetworkFast(NetworkBase):
    """
    High-performance batch-processing implementation of a NEAT neural network.

    Automatically handles both batched and non-batched inputs.

    Public Methods:
        predict(inputs):       Process one input vector, return a list of outputs
        predict_batch(inputs): Process a batch of input vectors
                               Input:  (batch_size, num_inputs) or (num_inputs,) auto-reshaped to (1, num_inputs)
                               Output: (batch_size, num_outputs)

    Public Properties (inherited from NetworkBase):
        number_nodes:               Total number of nodes in the network
        number_nodes_hidden:        Number of hidden nodes in the network
        number_connections:         Total number of connections in the network
        number_connections_enabled: Number of enabled connections in the network
    """

    def __init__(self, genome: 'Genome'):
        """
        Initialize the network from a genome.

        Builds per-node arrays of incoming source indices and weights, and the
        bias vector, so that the forward pass only does array arithmetic.

        Parameters:
            genome: The Genome encoding the network structure
        """
        super().__init__(genome)

        # Array index of a node = its position in the evaluation order
        self._num_nodes = len(self._evaluation_order)
        self._node_id_to_idx = {node_id: idx for idx, node_id in enumerate(self._evaluation_order)}

        # Biases are carried for every node but never evolved (always 0)
        self.biases = np.zeros(self._num_nodes, dtype=np.float64)

        self._input_indices  = np.array([self._node_id_to_idx[node_id] for node_id in self._input_ids] , dtype=np.int32)
        self._output_indices = np.array([self._node_id_to_idx[node_id] for node_id in self._output_ids], dtype=np.int32)

        # Non-input nodes, in evaluation order
        self._computed_indices = [self._node_id_to_idx[node_id] for node_id in self._evaluation_order
                                  if self._node_types[node_id] != NodeType.INPUT]

        # For each node: array of source indices and array of matching weights
        self._incoming_sources: list[np.ndarray] = []
        self._incoming_weights: list[np.ndarray] = []
        for node_id in self._evaluation_order:
            conns = self._incoming[node_id]
            self._incoming_sources.append(np.array([self._node_id_to_idx[c.from_node] for c in conns], dtype=np.int32))
            self._incoming_weights.append(np.array([c.weight for c in conns], dtype=np.float64))

    def predict_batch(self, inputs: np.ndarray | Sequence) -> np.ndarray:
        """
        Perform a forward pass for a batch of input vectors.

        Parameters:
            inputs: Input values as numpy array or nested list
                    Shape: (batch_size, num_inputs) or (num_inputs,)

        Returns:
            Output values as numpy array
            Shape: (batch_size, num_outputs)

        Raises:
            ValueError: if the array is not 1D or 2D, or holds the wrong number of inputs per row
        """
        inputs = np.asarray(inputs, dtype=np.float64)

        # Ensure inputs are 2D (batched). If 1D, convert to batch of size 1
        if inputs.ndim == 1:
            inputs = inputs.reshape(1, -1)
        elif inputs.ndim != 2:
            raise ValueError(f"Input must be 1D or 2D array, got {inputs.ndim}D")
        self._check_input_size(inputs.shape[1])

        batch_size  = inputs.shape[0]
        node_values = np.zeros((batch_size, self._num_nodes), dtype=np.float64)
        node_values[:, self._input_indices] = inputs

        weighted_sum = np.empty(batch_size, dtype=np.float64)
        for node_idx in self._computed_indices:
            sources = self._incoming_sources[node_idx]
            if len(sources) == 0:
                weighted_sum.fill(0.0)
            else:
                np.dot(node_values[:, sources], self._incoming_weights[node_idx], out=weighted_sum)
            weighted_sum += self.biases[node_idx]
            node_values[:, node_idx] = sigmoid_activation(weighted_sum)

        return node_values[:, self._output_indices]

    def predict(self, inputs: Sequence[float]) -> list[float]:
        """
        Perform a forward pass for a single input vector.

        Parameters:
            inputs: the network inputs (as many as input nodes)

        Returns:
            the output values, in declared output order

        Raises:
            ValueError: if the number of inputs does not match the number of input nodes
        """
        values = np.asarray(inputs, dtype=np.float64)
        if values.ndim != 1:
            raise ValueError(f"Expected a single input vector, got a {values.ndim}D array")
        return self.predict_batch(values)[0].tolist()

    def __repr__(self):
        return (f"NetworkFast(nodes={self._num_nodes}, "
                f"hidden={self.number_nodes_hidden}, "
                f"connections={self.number_connections_enabled}/{self.number_connections})")
