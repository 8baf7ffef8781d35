"""
Task orchestrator.

A Task owns the population, the objective and constraint bindings, the
mutation/crossover/selection bindings with their parameter dicts, the
opaque task data and the run's random generator. GA drivers build a
generation out of the primitives exposed here.
"""

import math
from functools import cmp_to_key
from typing import Callable, Dict, List, Optional, Sequence, Any, Tuple

import numpy as np

from .data_models import Individual
from .random_utils import make_rng

Objective = Callable[[Any, Any], float]
Constraint = Callable[[Any, Any], int]
Mutator = Callable[["Task", Individual, Dict], List[Any]]
Crossover = Callable[["Task", Individual, Individual, Dict], Tuple[Individual, Individual]]
Selector = Callable[["Task", Dict], None]


class TaskConfigurationError(ValueError):
    """Raised when objectives, weights, constraints or penalties do not line up."""
    pass


class Task:
    """
    Population and operator bindings for one optimization problem.

    Args:
        rng: Random generator shared by every operator call
        seed: Seed for a new generator (ignored when rng is given)

    Attributes:
        population: Current individuals; index 0 is the best after ordering
        desired_size: Target population size set by set_population
        data: Opaque context passed to objectives, constraints and operators
        current_generation: Generation being run, None outside a run
        rng: numpy Generator for all stochastic draws
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        self.rng = rng if rng is not None else make_rng(seed)

        self.population: List[Individual] = []
        self.desired_size = 0
        self.current_generation: Optional[int] = None
        self.data: Any = None

        self.objectives: List[Objective] = []
        self.obj_factors: List[float] = []
        self.constraints: List[Constraint] = []
        self.penalties: List[float] = []

        self.mutator: Optional[Mutator] = None
        self.mutator_params: Dict = {}
        self.crossover: Optional[Crossover] = None
        self.crossover_params: Dict = {}
        self.selector: Optional[Selector] = None
        self.selector_params: Dict = {}

    # Population access -------------------------------------------------

    @property
    def size(self) -> int:
        """Number of individuals actually in the population."""
        return len(self.population)

    def set_population(self, population: Sequence[Individual]) -> None:
        """Set the population and make its size the desired size."""
        self.population = list(population)
        self.desired_size = len(self.population)

    def replace_population(self, population: Sequence[Individual]) -> None:
        """Replace the population without touching the desired size."""
        self.population = list(population)

    def append_population(self, population: Sequence[Individual], first: bool = False) -> None:
        """
        Add individuals to the population.

        Args:
            population: Individuals to add
            first: Insert them at the front instead of the back
        """
        if first:
            self.population = list(population) + self.population
        else:
            self.population = self.population + list(population)

    def get_individual(self, i: int) -> Individual:
        return self.population[i]

    def get_subpopulation_copy(self, offset: int, n: int) -> List[Individual]:
        """
        Copy n individuals starting at offset.

        The range must lie inside the population.
        """
        return [self.population[i].copy() for i in range(offset, offset + n)]

    def set_data(self, data: Any) -> None:
        self.data = data

    def set_generation(self, generation: Optional[int]) -> None:
        self.current_generation = generation

    # Problem definition ------------------------------------------------

    def set_objectives(self, objectives: Sequence[Objective], factors: Sequence[float]) -> None:
        """
        Bind the evaluation functions and their weights.

        A positive factor maximizes its objective, a negative one minimizes it.

        Args:
            objectives: Functions (decoded_genome, data) -> float
            factors: One non-zero weight per objective

        Raises:
            TaskConfigurationError: If the lists differ in length or a factor is zero
        """
        if len(objectives) != len(factors):
            raise TaskConfigurationError(
                f"Objectives and factors must be the same size "
                f"({len(objectives)} != {len(factors)})"
            )
        if any(factor == 0 for factor in factors):
            raise TaskConfigurationError("Objective factors must be non-zero")

        self.objectives = list(objectives)
        self.obj_factors = [float(factor) for factor in factors]

    def set_constraints(self, constraints: Sequence[Constraint], max_penalties: Sequence[float]) -> None:
        """
        Bind constraint functions and the maximum penalty per objective.

        Constraints return 0 when satisfied and a positive violation count
        otherwise. Each objective's maximum penalty is split evenly across
        the constraints, so an individual failing every constraint gets
        exactly the maximum penalty.

        Args:
            constraints: Functions (decoded_genome, data) -> int
            max_penalties: One maximum penalty per objective

        Raises:
            TaskConfigurationError: If there are not as many penalties as objectives
        """
        if len(max_penalties) != len(self.objectives):
            raise TaskConfigurationError(
                "max_penalties must have as many elements as the task has objectives "
                f"({len(max_penalties)} != {len(self.objectives)})"
            )

        self.constraints = list(constraints)
        n_constraints = max(len(self.constraints), 1)
        self.penalties = [float(penalty) / n_constraints for penalty in max_penalties]

    # Operator bindings -------------------------------------------------

    def set_mutator(self, mutator: Mutator, params: Optional[Dict] = None) -> None:
        self.mutator = mutator
        self.mutator_params = dict(params or {})

    def set_mutator_param(self, key: str, value: Any) -> None:
        self.mutator_params[key] = value

    def set_crossover(self, crossover: Crossover, params: Optional[Dict] = None) -> None:
        self.crossover = crossover
        self.crossover_params = dict(params or {})

    def set_crossover_param(self, key: str, value: Any) -> None:
        self.crossover_params[key] = value

    def set_selector(self, selector: Selector, params: Optional[Dict] = None) -> None:
        self.selector = selector
        self.selector_params = dict(params or {})

    def set_selector_param(self, key: str, value: Any) -> None:
        self.selector_params[key] = value

    # Generation primitives ---------------------------------------------

    def evaluate(self) -> None:
        """
        Compute fitness for every individual that has none.

        Constraints run first on the decoded genome. If none is violated the
        objectives are evaluated; otherwise each objective gets its penalty
        multiplied by the total violation count. Individuals that already
        carry fitness are skipped.
        """
        for individual in self.population:
            if individual.fitness is not None:
                continue

            genome = individual.get_genome()
            failed = 0
            for constraint in self.constraints:
                failed += int(constraint(genome, self.data))

            if failed == 0:
                fitness = [float(objective(genome, self.data)) for objective in self.objectives]
            else:
                fitness = [penalty * failed for penalty in self.penalties]

            individual.fitness = fitness

    def compare_individuals(
        self,
        a: Individual,
        b: Individual,
        objectives: Optional[Sequence[int]] = None
    ) -> int:
        """
        Rank two individuals lexicographically over the given objectives.

        Absent fitness counts as the worst possible value for every
        objective.

        Returns:
            -1 if a ranks before b, 1 if after, 0 if tied on every objective
        """
        if objectives is None:
            objectives = range(len(self.obj_factors))

        for objective in objectives:
            maximize = self.obj_factors[objective] > 0
            worst = -math.inf if maximize else math.inf
            x = worst if a.fitness is None else a.fitness[objective]
            y = worst if b.fitness is None else b.fitness[objective]

            if x > y:
                return -1 if maximize else 1
            if x < y:
                return 1 if maximize else -1

        return 0

    def order_population(self, objectives: Optional[Sequence[int]] = None) -> None:
        """
        Sort the population in place, best first (stable).

        Args:
            objectives: Objective indices by priority (default: all, in
                registration order)
        """
        if objectives is None:
            objectives = list(range(len(self.obj_factors)))
        else:
            objectives = list(objectives)

        self.population.sort(
            key=cmp_to_key(lambda a, b: self.compare_individuals(a, b, objectives))
        )

    def remove_duplicate_fitness(self) -> None:
        """
        Drop individuals whose fitness equals the previously kept one.

        The population is first fully ordered by all objectives, so this
        removes adjacent duplicates in ranked order. The desired size is
        not changed.
        """
        self.order_population()
        if not self.population:
            return

        kept = [self.population[0]]
        current = kept[0].fitness
        for individual in self.population[1:]:
            if individual.fitness != current:
                kept.append(individual)
                current = individual.fitness

        self.population = kept

    def adjust_population_size(self, n: Optional[int] = None) -> bool:
        """
        Truncate or grow the population to the desired size.

        Args:
            n: New desired size (default: keep the current desired size)

        Returns:
            True if the population grew; the caller then has to evaluate
            and order again.

        Growth clones uniformly chosen members of the current population
        and mutates each clone with the bound mutator before appending it.
        """
        if n is None:
            n = self.desired_size
        else:
            self.desired_size = n

        current_size = len(self.population)
        if n <= current_size:
            self.population = self.population[:n]
            return False

        for _ in range(n - current_size):
            index = int(self.rng.integers(0, current_size))
            born = self.population[index].copy()
            self.apply_mutation(born)
            self.population.append(born)

        return True

    def apply_mutation(self, individual: Individual) -> None:
        """Mutate one individual with the bound mutator (clears its fitness)."""
        genome = self.mutator(self, individual, self.mutator_params)
        individual.set_raw_genome(genome)

    def mutate(self) -> None:
        """Apply the bound mutator to every individual of the population."""
        for individual in self.population:
            self.apply_mutation(individual)

    def apply_selection(self) -> None:
        self.selector(self, self.selector_params)

    def apply_crossover(self, parent_a: Individual, parent_b: Individual) -> Tuple[Individual, Individual]:
        """Cross two individuals with the bound crossover."""
        return self.crossover(self, parent_a, parent_b, self.crossover_params)
