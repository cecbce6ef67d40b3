"""
NEAT Trial Module

This module defines the abstract base class for NEAT trials with built-in
support for CPU-based parallelization using joblib.

A trial plays the part of the external caller of the evolution engine: it
evaluates every decoded network of a generation, reports the fitness values,
and asks the driver for the next generation, until a solution is found or the
maximum number of generations is reached.
"""

import random
from abc        import ABC, abstractmethod
from joblib     import Parallel, delayed
from statistics import mean
from typing     import TYPE_CHECKING

from neatdrive.pool import EvolutionDriver, Population
if TYPE_CHECKING:
    from neatdrive.phenotype  import NetworkBase
    from neatdrive.run.config import Config

class Trial(ABC):
    """
    Abstract base class for implementing a NEAT trial.

    Subclasses must implement:
    - _reset(): Reset trial-specific state and call super()._reset()
    - _evaluate_fitness(network): Evaluate fitness for a single decoded network
    - _report_progress(): Display progress after each generation
    - _final_report(): Display final results

    Subclasses can override:
    - _terminate(): Custom termination logic (default: max generations + fitness threshold)

    Network Types:
        'standard' - Object-oriented implementation (processes one input at a time)
        'fast'     - Vectorized numpy implementation (when data to process comes in batches)

    Public Attributes:
        failed: False once a trial has reached the fitness threshold

    Public Methods:
        run(): Execute a complete NEAT trial

    Parallelization of fitness evaluation:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self,
                 config         : 'Config',
                 network_type   : str = "standard",
                 suppress_output: bool = False,
                 rng            : random.Random | None = None):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            network_type:    Type of network backend to use ('standard' or 'fast')
            suppress_output: If True, suppress progress and final reports
            rng:             Random source of the evolution driver
                             (if None, one seeded with 'config.seed')
        """
        self._config         : 'Config'          = config
        self._driver         : EvolutionDriver   = EvolutionDriver(config, rng, network_type)
        self._population     : Population | None = None
        self._suppress_output: bool              = suppress_output
        self.failed          : bool              = True

    def run(self, num_jobs: int = 1):
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
        """
        # Reset the trial state before starting a new run
        self._reset()

        # Create and evaluate the initial population
        self._population = self._driver.initialize_population()
        self._evaluate_fitness_all(num_jobs)

        if not self._suppress_output:
            self._report_progress()

        # Evolution loop
        while not self._terminate():
            self._driver.evolve_population(self._population)
            self._evaluate_fitness_all(num_jobs)

            if not self._suppress_output:
                self._report_progress()

        if not self._suppress_output:
            self._final_report()

    @property
    def generation(self) -> int:
        return self._population.generation if self._population is not None else 0

    @abstractmethod
    def _reset(self):
        """
        Reset the trial state before starting a new run.

        Subclasses should call super()._reset() and then
        initialize their problem-specific data.
        """
        self._population = None
        self.failed      = True

    @abstractmethod
    def _evaluate_fitness(self, network: 'NetworkBase') -> float:
        """
        Evaluate and return the fitness of a decoded network.

        Higher fitness values indicate better performance and a larger
        share of the next generation.

        Any real value is accepted, including negative penalties.

        Parameters:
            network: The network to evaluate

        Returns:
            float: Fitness score for the network
        """
        pass

    def _evaluate_fitness_all(self, num_jobs: int):
        """
        Evaluate every network of the population and report the fitness values.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
        """
        networks = self._population.networks

        if num_jobs == 1:
            fitness_all = [self._evaluate_fitness(network) for network in networks]
        else:
            fitness_all = Parallel(num_jobs)(delayed(self._evaluate_fitness)(network) for network in networks)

        self._population.report_fitness(fitness_all)

    @abstractmethod
    def _report_progress(self):
        """
        Report trial progress after each generation.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it if a given measure of
        population fitness has reached a given threshold.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        terminate = self.generation >= self._config.max_number_generations

        if self._config.fitness_termination_check:
            genome_fitness = [genome.fitness for genome in self._population.genomes]

            if self._config.fitness_criterion == "max":
                overall_fitness = max(genome_fitness)
            else:
                overall_fitness = mean(genome_fitness)

            success   = overall_fitness >= self._config.fitness_threshold
            terminate = terminate or success

            if terminate:
                self.failed = not success

        return terminate
