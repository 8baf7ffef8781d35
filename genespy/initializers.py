"""
Population initializers.

Build the starting population for a Task from permutations, uniform floats
or random fixed-point bit strings. Every initializer produces at least two
individuals.
"""

from typing import List, Sequence, Any

import numpy as np

from .data_models import Individual, BinaryIndividual, BinarySpec
from .random_utils import fisher_yates

MIN_POPULATION = 2


def init_permutation_population(
    n: int,
    elements: Sequence[Any],
    rng: np.random.Generator
) -> List[Individual]:
    """
    Create individuals whose genomes are random permutations of elements.

    Args:
        n: Number of individuals (raised to 2 if smaller)
        elements: Elements to permute (copied for each individual)
        rng: Random number generator

    Returns:
        List of Individual objects
    """
    n = max(n, MIN_POPULATION)

    population = []
    for _ in range(n):
        genome = list(elements)
        fisher_yates(genome, rng)
        population.append(Individual(raw_genome=genome))

    return population


def init_float_population(
    n: int,
    genes: int,
    low: float,
    high: float,
    rng: np.random.Generator
) -> List[Individual]:
    """
    Create individuals with genes drawn uniformly from [low, high).

    Args:
        n: Number of individuals (raised to 2 if smaller)
        genes: Number of floats per genome
        low: Lower bound of the range
        high: Upper bound of the range
        rng: Random number generator

    Returns:
        List of Individual objects
    """
    n = max(n, MIN_POPULATION)
    span = high - low

    population = []
    for _ in range(n):
        genome = [rng.random() * span + low for _ in range(genes)]
        population.append(Individual(raw_genome=genome))

    return population


def init_binary_population(
    n: int,
    structure: Sequence[Any],
    rng: np.random.Generator
) -> List[BinaryIndividual]:
    """
    Create individuals whose genomes are uniformly random bit strings.

    The encoding spec is built once and shared by all individuals.

    Args:
        n: Number of individuals (raised to 2 if smaller)
        structure: One (has_sign, integer_bits, fraction_bits) triple per variable
        rng: Random number generator

    Returns:
        List of BinaryIndividual objects

    Example:
        init_binary_population(100, [(True, 10, 5), (False, 13, 0)], rng)
    """
    n = max(n, MIN_POPULATION)
    spec = structure if isinstance(structure, BinarySpec) else BinarySpec(structure)

    population = []
    for _ in range(n):
        genome = [int(rng.integers(0, 2)) for _ in range(spec.total_bits)]
        population.append(BinaryIndividual(raw_genome=genome, spec=spec))

    return population
