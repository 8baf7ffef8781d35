"""
Selection operators.

Selectors pick parent pairs from the Task's population, apply the Task's
bound crossover, and put the children back in the parents' slots through
Task.replace_population.
"""

from typing import Dict

from .random_utils import sample_indices


def vasconcelos_selection(task, params: Dict) -> None:
    """
    Pair the best with the worst, the second best with the second worst, ...

    The population is assumed to be ranked already. One uniform draw is
    made per pair, in rank order; when it falls below params['cp'] the two
    parents are replaced in place by the crossover's children.

    Args:
        task: Task holding the population and crossover binding
        params: 'cp' - crossover probability per pair
    """
    cp = params['cp']
    population = list(task.population)
    size = len(population)

    for minor in range(size // 2):
        major = size - 1 - minor
        if task.rng.random() < cp:
            child_a, child_b = task.apply_crossover(population[minor], population[major])
            population[minor] = child_a
            population[major] = child_b

    task.replace_population(population)


def tournament_selection(task, params: Dict) -> None:
    """
    Run params['matches'] crossovers between tournament winners.

    For each match two tournaments are held; each samples k distinct
    individuals and keeps the fittest by the chosen objective's direction.
    The two winners are crossed and their children written back at the
    winners' positions.

    Args:
        task: Task holding the population and crossover binding
        params: Selection parameters
            - 'k': tournament size
            - 'matches': number of crossovers per call
            - 'obj_index': objective used to rank contestants (default 0)
    """
    k = params['k']
    matches = params['matches']
    obj_index = params.get('obj_index', 0)
    maximize = task.obj_factors[obj_index] > 0.0

    population = list(task.population)
    size = len(population)

    for _ in range(matches):
        winners = []
        for _ in range(2):
            best = None
            best_i = None
            for i in sample_indices(size, k, task.rng):
                fitness = population[i].fitness
                current = None if fitness is None else fitness[obj_index]
                if best_i is None or _beats(current, best, maximize):
                    best = current
                    best_i = i
            winners.append(best_i)

        child_a, child_b = task.apply_crossover(population[winners[0]], population[winners[1]])
        population[winners[0]] = child_a
        population[winners[1]] = child_b

    task.replace_population(population)


def _beats(current, best, maximize: bool) -> bool:
    # Children written back by earlier matches have no fitness yet and
    # never win against an evaluated contestant.
    if current is None:
        return False
    if best is None:
        return True
    return current > best if maximize else current < best
