"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationTracker: Run-wide source of innovation IDs and node IDs
"""

from itertools import count

class InnovationTracker:
    """
    Hands out globally unique IDs for new connections and new hidden nodes.

    Each evolutionary run owns one tracker, so that independent runs can live
    side by side in the same process. Both counters only ever move forward:
    connection innovation IDs start at 0, node IDs start right after the
    block of input and output nodes, which makes every hidden node ID larger
    than every input and output node ID.

    The bound methods 'next_innovation_id' and 'next_node_id' are the
    callables that the structural mutation operators of 'Genome' consume.

    Public Methods:
        reset():              Restart both counters (call at the start of a run)
        next_innovation_id(): Mint a new connection innovation ID
        next_node_id():       Mint a new hidden node ID
    """

    def __init__(self, num_inputs: int, num_outputs: int):
        """
        Parameters:
            num_inputs:  number of input nodes in every genome
            num_outputs: number of output nodes in every genome
        """
        self._num_inputs  = num_inputs
        self._num_outputs = num_outputs
        self.reset()

    def reset(self) -> None:
        """
        Restart the counters from their initial values.
        """
        self._innovation_counter = count(0)
        self._node_counter       = count(self._num_inputs + self._num_outputs)
        self._last_innovation_id = -1
        self._last_node_id       = self._num_inputs + self._num_outputs - 1

    def next_innovation_id(self) -> int:
        self._last_innovation_id = next(self._innovation_counter)
        return self._last_innovation_id

    def next_node_id(self) -> int:
        self._last_node_id = next(self._node_counter)
        return self._last_node_id

    @property
    def innovation_count(self) -> int:
        """Number of innovation IDs handed out since the last reset."""
        return self._last_innovation_id + 1

    @property
    def hidden_node_count(self) -> int:
        """Number of hidden node IDs handed out since the last reset."""
        return self._last_node_id + 1 - (self._num_inputs + self._num_outputs)

    def __repr__(self):
        return (f"InnovationTracker(next_innovation_id={self._last_innovation_id + 1}, "
                f"next_node_id={self._last_node_id + 1})")
