"""
XOR Problem Implementation for NEAT

This module runs the classic XOR (exclusive OR) problem as a benchmark for the
evolution engine. XOR is a two-input, one-output boolean function where the
output is 1 only when the inputs differ:
    Input (0, 0) → Output 0
    Input (0, 1) → Output 1
    Input (1, 0) → Output 1
    Input (1, 1) → Output 0

XOR is not linearly separable, so a solution needs at least one hidden node,
which the networks can only acquire through the add-node mutation.

Decoded networks carry no evolvable bias, so every network receives a third,
constant input of 1.0; a connection from it plays the part of a bias.

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

Usage:
    python trial_XOR.py [standard|fast]
"""

import sys
from pathlib import Path

import numpy as np

from neatdrive.phenotype import NetworkBase
from neatdrive.run       import Config
from neatdrive.run.trial import Trial
from neatdrive.utils     import setup_logger

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR problem with a configurable network backend.

    - 'standard': evaluates the four XOR cases one at a time
    - 'fast':     evaluates the four XOR cases as a single batch
    """

    def __init__(self, config: Config, network_type: str = "standard", suppress_output: bool = False):
        super().__init__(config, network_type, suppress_output)
        self._network_type = network_type

        # Third column is the constant bias input
        self.xor_inputs  = np.array([[0.0, 0.0, 1.0],
                                     [0.0, 1.0, 1.0],
                                     [1.0, 0.0, 1.0],
                                     [1.0, 1.0, 1.0]])
        self.xor_outputs = np.array([0.0, 1.0, 1.0, 0.0])

    def _reset(self):
        return super()._reset()

    def _evaluate_fitness(self, network: NetworkBase) -> float:
        if self._network_type == "standard":
            outputs = np.array([network.predict(inputs.tolist())[0] for inputs in self.xor_inputs])
        else:
            outputs = network.predict_batch(self.xor_inputs)[:, 0]

        return float(4.0 - np.sum((outputs - self.xor_outputs) ** 2))

    def _report_progress(self):
        fittest = self._population.get_fittest_genome()
        index   = self._population.genomes.index(fittest)
        network = self._population.networks[index]

        s  = f"===============\n"
        s += f"GENERATION {self.generation:04d}\n"
        s += f"population size = {len(self._population.genomes)}\n"
        s += f"number species  = {len(self._driver.species)}\n"
        s += f"maximum fitness = {fittest.fitness:.4f}\n"
        s += '\n'
        s += str(fittest)
        s += '\n\n'

        s += "input    output   target\n"
        s += "------------------------\n"
        for inputs, target in zip(self.xor_inputs, self.xor_outputs):
            output = network.predict(inputs.tolist())[0]
            s += f"{inputs[:2].tolist()} -> {output:.4f}   {target}\n"

        print(s)

    def _final_report(self):
        fittest = self._population.get_fittest_genome()
        index   = self._population.genomes.index(fittest)
        network = self._population.networks[index]

        print("SUCCESS" if not self.failed else "FAILED", f"after {self.generation} generations")
        print(repr(network))
        try:
            network.visualize().render("xor_network", cleanup=True)
            print("Network visualization saved as 'xor_network.pdf'")
        except Exception as e:
            print(f"Could not visualize network: {e}")

if __name__ == "__main__":
    setup_logger(level="INFO")

    network_type = sys.argv[1] if len(sys.argv) > 1 else "standard"
    config = Config(str(Path(__file__).parent / "config_xor.ini"))
    trial  = Trial_XOR(config, network_type)
    trial.run(num_jobs=1)
