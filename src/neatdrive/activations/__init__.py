"""
Activations Package

This package provides the activation function used by decoded networks.
Networks are strictly feed-forward and every hidden and output node applies
the logistic sigmoid.

Exported:
    activations:        Dictionary mapping activation function names to functions
    sigmoid_activation: The logistic sigmoid, works on scalars and numpy arrays
"""

from neatdrive.activations.basic_activations import (
    activations,
    sigmoid_activation
)

__all__ = [
    'activations',
    'sigmoid_activation'
]
