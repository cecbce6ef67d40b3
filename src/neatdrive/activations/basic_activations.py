import numpy as np

def sigmoid_activation(z):
    # Clip to keep np.exp inside the float64 range
    z = np.clip(z, -500.0, 500.0)
    return 1.0 / (1.0 + np.exp(-z))

activations = {
    "sigmoid": sigmoid_activation,
    }
