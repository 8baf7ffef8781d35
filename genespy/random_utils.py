"""
Random draws shared by initializers and operators.

Every function takes the run's numpy Generator explicitly so a whole run
consumes one seeded stream in a fixed order.
"""

import math
import sys
from typing import List, Optional, Any, MutableSequence

import numpy as np


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create the generator threaded through a run.

    Args:
        seed: Fixed seed for reproducible runs (None draws fresh entropy)

    Returns:
        numpy Generator
    """
    return np.random.default_rng(seed)


def open_uniform(rng: np.random.Generator) -> float:
    """Uniform draw in the open interval (0, 1)."""
    u = rng.random()
    while u == 0.0:
        u = rng.random()
    return u


def geometric_draw(p: float, rng: np.random.Generator) -> int:
    """
    Number of Bernoulli(p) trials until the first success.

    Args:
        p: Success probability; 1 always yields 1, 0 yields sys.maxsize
        rng: Random number generator

    Returns:
        ceil(log(1 - u) / log(1 - p)) for u uniform in (0, 1), at least 1
        and at most sys.maxsize
    """
    if p >= 1.0:
        return 1
    if p <= 0.0:
        return sys.maxsize

    u = open_uniform(rng)
    # log1p keeps log(1 - p) non-zero for p below the float epsilon
    trials = math.log1p(-u) / math.log1p(-p)
    if trials >= sys.maxsize:
        return sys.maxsize
    return max(1, math.ceil(trials))


def gauss_draw(
    mean: float,
    sd: float,
    rng: np.random.Generator,
    integer: bool = False
) -> float:
    """
    Normally distributed value via the Box-Muller transform.

    Args:
        mean: Distribution mean
        sd: Standard deviation
        rng: Random number generator
        integer: Round the result to the nearest integer (halves away from zero)

    Returns:
        sqrt(-2 ln x) * cos(2 pi y) * sd + mean
    """
    x = open_uniform(rng)
    y = open_uniform(rng)
    value = math.sqrt(-2.0 * math.log(x)) * math.cos(2.0 * math.pi * y) * sd + mean

    if integer:
        return int(math.copysign(math.floor(abs(value) + 0.5), value))
    return value


def fisher_yates(elements: MutableSequence[Any], rng: np.random.Generator) -> None:
    """
    Shuffle a sequence in place (Fisher-Yates).

    For each index from the last down to 1, swap with a uniformly chosen
    index in [0, index].
    """
    index = len(elements) - 1
    while index > 0:
        r = int(rng.integers(0, index + 1))
        elements[r], elements[index] = elements[index], elements[r]
        index -= 1


def sample_indices(n: int, k: int, rng: np.random.Generator) -> List[int]:
    """
    Sample k distinct indices from range(n) without replacement.

    Raises:
        ValueError: If k exceeds n
    """
    if k > n:
        raise ValueError(f"Cannot sample {k} distinct indices from {n}")
    return [int(i) for i in rng.choice(n, size=k, replace=False)]
