"""
NEAT Standard Network Module

This module implements the phenotype representation for the NEAT algorithm.
It decodes a genome into an executable feed-forward network using an Object
Oriented approach to representing Nodes, Connections and the Network.

Classes:
    Neuron:          A computational node applying the activation function
    NetworkStandard: A feedforward neural network decoded from a genome
"""

from typing import Sequence, TYPE_CHECKING

from neatdrive.activations             import sigmoid_activation
from neatdrive.phenotype.network_base import Connection, NetworkBase, NodeType

if TYPE_CHECKING:
    from neatdrive.genotype import Genome

class Neuron:
    """
    A computational node (neuron) in a decoded network.

    Input neurons simply hold the input value they are given.
    Hidden and output neurons compute their activation as:
        sigmoid(bias + Σ source_activation * weight)
    over their incoming enabled connections.

    The bias is carried but not evolved: every decoded neuron has bias 0.

    Public Attributes:
        id:         ID of the node this neuron was decoded from
        type:       Neuron type (INPUT, HIDDEN, or OUTPUT)
        bias:       Bias value added to the weighted input
        activation: The current output value of the neuron
        incoming:   The incoming enabled connections
    """

    __slots__ = ('id', 'type', 'bias', 'activation', 'incoming')

    def __init__(self, node_id: int, node_type: NodeType, incoming: list[Connection], bias: float = 0.0):
        self.id        : int              = node_id
        self.type      : NodeType         = node_type
        self.bias      : float            = bias
        self.activation: float            = 0.0
        self.incoming  : list[Connection] = incoming

    def __str__(self):
        return f"Neuron({self.id:+03d}, NodeType.{self.type.name:6s}, bias={self.bias}, in={len(self.incoming)})"

    def __repr__(self):
        return f"Neuron(id={self.id}, type={self.type.name}, bias={self.bias}, activation={self.activation})"

class NetworkStandard(NetworkBase):
    """
    Object-oriented implementation of a decoded NEAT network.

    This class implements NetworkBase with explicit Neuron objects, each holding
    its incoming connections. It processes one input vector at a time, which
    matches the per-tick sensor reading of a simulated agent.

    If the input data is available in batches, use NetworkFast.

    A network instance keeps the activations of its last forward pass, so one
    instance must not be shared between threads; distinct instances (even if
    decoded from the same genome) are fully independent.

    Public Methods:
        predict(inputs): Process inputs through the network and return outputs
    """

    def __init__(self, genome: "Genome"):
        """
        Parameters:
            genome: the Genome encoding the network
        """
        super().__init__(genome)

        self._neurons: dict[int, Neuron] = {
            node_id: Neuron(node_id, node_type, self._incoming[node_id])
            for node_id, node_type in self._node_types.items()}

    def predict(self, inputs: Sequence[float]) -> list[float]:
        """
        Perform a complete forward pass through the network.

        Parameters:
            inputs: the network inputs (as many as input neurons)

        Returns:
            the activations of the output neurons, in declared output order

        Raises:
            ValueError: if the number of inputs does not match the number of input neurons
        """
        self._check_input_size(len(inputs))

        # Reset the activation of all non-input neurons
        for neuron in self._neurons.values():
            if neuron.type != NodeType.INPUT:
                neuron.activation = 0.0

        # Set input values
        for input_id, value in zip(self._input_ids, inputs):
            self._neurons[input_id].activation = float(value)

        # Propagate values through the network
        for node_id in self._evaluation_order:
            neuron = self._neurons[node_id]
            if neuron.type == NodeType.INPUT:   # already set
                continue
            total = neuron.bias + sum(self._neurons[c.from_node].activation * c.weight for c in neuron.incoming)
            neuron.activation = float(sigmoid_activation(total))

        return [self._neurons[node_id].activation for node_id in self._output_ids]

    def __str__(self):
        neurons_str     = "\n".join(f"  {self._neurons[node_id]}" for node_id in self._evaluation_order)
        connections_str = "\n".join(f"  {conn}" for conn in self._connections)
        return f"{neurons_str}\n\n{connections_str}"

    def __repr__(self):
        return (f"NetworkStandard(nodes={self.number_nodes}, hidden={self.number_nodes_hidden}, "
                f"connections={self.number_connections_enabled}/{self.number_connections})")
