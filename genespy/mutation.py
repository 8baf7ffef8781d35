"""
Mutation operators.

Each operator receives the Task (for its random generator), the individual
and the bound parameter dict, and returns the new raw genome. The Task
writes the genome back, which clears the individual's fitness.

Positions for swap, normal and flip mutation are picked by geometric
strides: instead of testing every gene with probability mp, the gap to the
next mutated gene is drawn from a geometric distribution with mean 1/mp.
"""

from typing import Dict, List, Any, Iterator

import numpy as np

from .data_models import Individual
from .random_utils import geometric_draw, gauss_draw


def stride_positions(length: int, mp: float, rng: np.random.Generator) -> Iterator[int]:
    """
    Yield the gene positions chosen for mutation.

    Args:
        length: Genome length
        mp: Per-gene mutation probability
        rng: Random number generator

    Yields:
        Increasing indices below length
    """
    j = geometric_draw(mp, rng) - 1
    while j < length:
        yield j
        j += geometric_draw(mp, rng)


def swap_mutation(task, individual: Individual, params: Dict) -> List[Any]:
    """
    Swap each stride-selected gene with a uniformly random gene.

    Args:
        task: Task providing the random generator
        individual: Individual to mutate
        params: 'mp' - probability that a gene is picked for a swap

    Returns:
        New raw genome
    """
    rng = task.rng
    genome = individual.raw_genome.copy()
    max_i = len(genome) - 1

    for j in stride_positions(len(genome), params['mp'], rng):
        k = int(rng.integers(0, max_i + 1))
        genome[j], genome[k] = genome[k], genome[j]

    return genome


def insert_mutation(task, individual: Individual, params: Dict) -> List[Any]:
    """
    Move a random block to the end of the genome.

    Two indices a <= b are drawn and the genome becomes
    [0, a) + [b, end) + [a, b).
    """
    rng = task.rng
    genome = individual.raw_genome
    max_i = len(genome) - 1

    a = int(rng.integers(0, max_i + 1))
    b = int(rng.integers(0, max_i + 1))
    if b < a:
        a, b = b, a

    return genome[:a] + genome[b:] + genome[a:b]


def normal_mutation(task, individual: Individual, params: Dict) -> List[Any]:
    """
    Perturb stride-selected genes with Gaussian noise centered on the gene.

    Args:
        task: Task providing the random generator
        individual: Individual to mutate
        params: Mutation parameters
            - 'mp': per-gene mutation probability
            - 'sd': standard deviation of the perturbation
            - 'integer': round new values to the nearest integer (default False)

    Returns:
        New raw genome
    """
    rng = task.rng
    sd = params['sd']
    integer = params.get('integer', False)
    genome = individual.raw_genome.copy()

    for j in stride_positions(len(genome), params['mp'], rng):
        genome[j] = gauss_draw(genome[j], sd, rng, integer)

    return genome


def flip_mutation(task, individual: Individual, params: Dict) -> List[Any]:
    """Invert stride-selected bits of a binary genome ('mp' per bit)."""
    rng = task.rng
    genome = individual.raw_genome.copy()

    for j in stride_positions(len(genome), params['mp'], rng):
        genome[j] = 1 - int(genome[j])

    return genome


def multiple_mutation(task, individual: Individual, params: Dict) -> List[Any]:
    """
    Delegate to one operator picked uniformly from params['operators'].

    The chosen operator receives the same params dict, so operators that
    use a key with the same name (e.g. 'mp') share its value.
    """
    operators = params['operators']
    operator = operators[int(task.rng.integers(0, len(operators)))]
    return operator(task, individual, params)
