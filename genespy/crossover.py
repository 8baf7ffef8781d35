"""
Crossover operators.

Every operator takes the Task, two parents and the bound parameter dict,
and returns two children. Parents are never modified; children are copies
of the parents with fresh raw genomes and no fitness.

Implements cut-point crossovers for any genome, and the sequential
constructive crossover (SCX) family for permutation genomes.
"""

from typing import Dict, List, Tuple, Any, Optional, Sequence

from .data_models import Individual


def _make_children(
    parent_a: Individual,
    parent_b: Individual,
    genome_a: List[Any],
    genome_b: List[Any]
) -> Tuple[Individual, Individual]:
    child_a = parent_a.copy()
    child_a.set_raw_genome(genome_a)
    child_b = parent_b.copy()
    child_b.set_raw_genome(genome_b)
    return child_a, child_b


def one_point_crossover(
    task,
    parent_a: Individual,
    parent_b: Individual,
    params: Optional[Dict] = None
) -> Tuple[Individual, Individual]:
    """
    Cut both genomes at one random point and swap the tails.

    The cut is drawn uniformly from [1, length - 1], so genomes need at
    least two genes.

    Args:
        task: Task providing the random generator
        parent_a: First parent
        parent_b: Second parent
        params: Unused

    Returns:
        Tuple of (a_head + b_tail, b_head + a_tail)
    """
    gen_a = parent_a.raw_genome
    gen_b = parent_b.raw_genome

    cut = int(task.rng.integers(1, len(gen_a)))

    return _make_children(
        parent_a, parent_b,
        gen_a[:cut] + gen_b[cut:],
        gen_b[:cut] + gen_a[cut:]
    )


def two_point_crossover(
    task,
    parent_a: Individual,
    parent_b: Individual,
    params: Optional[Dict] = None
) -> Tuple[Individual, Individual]:
    """
    Cut both genomes at two random points and swap the middle segments.

    Both cuts are drawn uniformly from [0, length - 1] and then ordered.

    Returns:
        Tuple of (a_left + b_middle + a_right, b_left + a_middle + b_right)
    """
    gen_a = parent_a.raw_genome
    gen_b = parent_b.raw_genome
    size = len(gen_a)

    cut_a = int(task.rng.integers(0, size))
    cut_b = int(task.rng.integers(0, size))
    if cut_a > cut_b:
        cut_a, cut_b = cut_b, cut_a

    return _make_children(
        parent_a, parent_b,
        gen_a[:cut_a] + gen_b[cut_a:cut_b] + gen_a[cut_b:],
        gen_b[:cut_a] + gen_a[cut_a:cut_b] + gen_b[cut_b:]
    )


def _next_legal(genome: Sequence[Any], position: int, legal: set) -> Any:
    """First legal node after position, else the first legal node overall."""
    for i in range(position + 1, len(genome)):
        if genome[i] in legal:
            return genome[i]
    for node in genome:
        if node in legal:
            return node
    raise ValueError("No legal node left; genomes are not permutations of the same nodes")


def _previous_legal(genome: Sequence[Any], position: int, legal: set) -> Any:
    """First legal node scanning backward from position, else the first legal node overall."""
    for i in range(position - 1, -1, -1):
        if genome[i] in legal:
            return genome[i]
    for node in genome:
        if node in legal:
            return node
    raise ValueError("No legal node left; genomes are not permutations of the same nodes")


def _prefer_b(cost_a: float, cost_b: float, minimize: bool) -> bool:
    """
    Whether the candidate from parent b wins the cost comparison.

    Minimizing keeps a unless b is strictly cheaper; maximizing keeps a
    unless b is strictly more expensive. Ties go to b when minimizing and
    to a when maximizing.
    """
    return (cost_a < cost_b) != minimize


def scx_crossover(
    task,
    parent_a: Individual,
    parent_b: Individual,
    params: Optional[Dict] = None
) -> Tuple[Individual, Individual]:
    """
    Sequential constructive crossover for tour permutations.

    Builds two children at once: the left child grows forward from the
    fixed start node, the right child grows backward from the tour's end.
    At each step the next still-unused node after (or before) the last
    added node is taken from each parent, and the one with the better edge
    cost to the last added node is kept.

    The optimization direction comes from the sign of the task's first
    objective factor. The cost matrix, start node and circuit flag are read
    from task.data as 'cost', 'start' and 'circuit'; cost[u][v] is the cost
    of the edge u -> v.

    Both genomes must be duplicate-free permutations of the same nodes and
    must not contain the start node.

    Ahmed, Z. H. (2010). Genetic algorithm for the traveling salesman
    problem using sequential constructive crossover operator. IJBB, 3(6), 96.

    Args:
        task: Task providing data, objective factors and random generator
        parent_a: First parent
        parent_b: Second parent
        params: Unused

    Returns:
        Tuple of (left_child, right_child)
    """
    data = task.data
    cost = data['cost']
    start = data['start']
    circuit = data.get('circuit', False)
    minimize = not task.obj_factors[0] > 0.0

    gen_a = parent_a.raw_genome
    gen_b = parent_b.raw_genome
    size = len(gen_a)

    pos_a = {node: i for i, node in enumerate(gen_a)}
    pos_b = {node: i for i, node in enumerate(gen_b)}

    legal_left = set(gen_a)
    legal_right = set(gen_a)

    # Left child starts with the better first step out of the start node
    if _prefer_b(cost[start][gen_a[0]], cost[start][gen_b[0]], minimize):
        last_left = gen_b[0]
    else:
        last_left = gen_a[0]
    left = [last_left]
    legal_left.discard(last_left)

    # Right child ends with the better last node: closer to the start for a
    # circuit, farther from it for an open path
    cost_a = cost[gen_a[-1]][start]
    cost_b = cost[gen_b[-1]][start]
    if circuit:
        take_b = _prefer_b(cost_a, cost_b, minimize)
    else:
        take_b = (cost_a > cost_b) != minimize
    last_right = gen_b[-1] if take_b else gen_a[-1]

    right = [None] * size
    index = size - 1
    right[index] = last_right
    legal_right.discard(last_right)
    index -= 1

    while index >= 0:
        candidate_a = _next_legal(gen_a, pos_a[last_left], legal_left)
        candidate_b = _next_legal(gen_b, pos_b[last_left], legal_left)
        if _prefer_b(cost[last_left][candidate_a], cost[last_left][candidate_b], minimize):
            last_left = candidate_b
        else:
            last_left = candidate_a
        left.append(last_left)
        legal_left.discard(last_left)

        candidate_a = _previous_legal(gen_a, pos_a[last_right], legal_right)
        candidate_b = _previous_legal(gen_b, pos_b[last_right], legal_right)
        if _prefer_b(cost[candidate_a][last_right], cost[candidate_b][last_right], minimize):
            last_right = candidate_b
        else:
            last_right = candidate_a
        right[index] = last_right
        legal_right.discard(last_right)
        index -= 1

    return _make_children(parent_a, parent_b, left, right)


def pseudo_scx_crossover(
    task,
    parent_a: Individual,
    parent_b: Individual,
    params: Optional[Dict] = None
) -> Tuple[Individual, Individual]:
    """
    Cost-free variant of SCX.

    Same outside-in construction as scx_crossover, but instead of comparing
    edge costs the source parent alternates deterministically. Both children
    are seeded from parent a (its first node on the left, its last node on
    the right), then steps draw from b, a, b, ...

    Returns:
        Tuple of (left_child, right_child)
    """
    gen_a = parent_a.raw_genome
    gen_b = parent_b.raw_genome
    size = len(gen_a)

    positions = (
        {node: i for i, node in enumerate(gen_a)},
        {node: i for i, node in enumerate(gen_b)},
    )
    genomes = (gen_a, gen_b)

    legal_left = set(gen_a)
    legal_right = set(gen_a)

    last_left = gen_a[0]
    left = [last_left]
    legal_left.discard(last_left)

    last_right = gen_a[-1]
    right = [None] * size
    right[size - 1] = last_right
    legal_right.discard(last_right)

    source = 0
    index = size - 2
    while index >= 0:
        source = 1 - source
        genome = genomes[source]
        position = positions[source]

        last_left = _next_legal(genome, position[last_left], legal_left)
        left.append(last_left)
        legal_left.discard(last_left)

        last_right = _previous_legal(genome, position[last_right], legal_right)
        right[index] = last_right
        legal_right.discard(last_right)
        index -= 1

    return _make_children(parent_a, parent_b, left, right)
