"""
Generational GA drivers.

Both drivers run the same elitist generation body on a configured Task:

    1. Snapshot the top floor(size * elitism) individuals
    2. Selection (with crossover), mutation of everyone, evaluation
    3. Reinsert the elite at the front, drop fitness duplicates
    4. Resize to the desired size, re-evaluating and re-ordering on growth

cos_mutation_ga additionally varies the mutator's 'mp' parameter along a
cosine wave. Runs stop after max_generations or once the time budget is
spent, and return the best individual.
"""

import math
import time
from typing import Callable, Optional, Sequence, Any

from .data_models import Individual, RunHistory
from .task import Task

Reporter = Callable[[int, Sequence[float], Any], None]


def print_report(generation: int, fitness: Sequence[float], genome: Any = None) -> None:
    """Default progress reporter."""
    print(f"Generation: {generation}")
    print(f"Best fitness: {', '.join(str(value) for value in fitness)}")
    print()


def cosine_mutation_probability(generation: int, max_mp: float, cycle_length: float) -> float:
    """
    Mutation probability for a generation on a cosine schedule.

    Starts at max_mp, falls to 0 half way through each cycle and climbs
    back to max_mp at the end of it.
    """
    half_max_mp = max_mp / 2.0
    return half_max_mp + half_max_mp * math.cos(generation * 2.0 * math.pi / cycle_length)


def _run_generation(task: Task, n_elite: int) -> None:
    elite = task.get_subpopulation_copy(0, n_elite)

    task.apply_selection()
    task.mutate()
    task.evaluate()

    task.append_population(elite, first=True)
    task.remove_duplicate_fitness()
    if task.adjust_population_size():
        task.evaluate()
        task.order_population()


def _report(
    task: Task,
    generation: int,
    report_interval: Optional[int],
    report: Optional[Reporter],
    history: Optional[RunHistory]
) -> None:
    best = task.get_individual(0)

    if history is not None:
        history.record(generation, best.fitness)

    if report_interval and generation % report_interval == 0:
        (report or print_report)(generation, best.fitness, best.get_genome())


def _evolve(
    task: Task,
    elitism: float,
    time_budget: float,
    max_generations: float,
    report_interval: Optional[int],
    report: Optional[Reporter],
    history: Optional[RunHistory],
    before_generation: Optional[Callable[[int], None]] = None
) -> Individual:
    start_time = time.monotonic()
    n_elite = int(math.floor(task.size * elitism))

    task.evaluate()
    task.order_population()

    generation = 0
    try:
        while generation < max_generations:
            task.set_generation(generation)
            if before_generation is not None:
                before_generation(generation)

            _run_generation(task, n_elite)
            _report(task, generation, report_interval, report, history)

            generation += 1
            if time.monotonic() - start_time >= time_budget:
                break
    finally:
        task.set_generation(None)

    return task.get_individual(0)


def general_ga(
    task: Task,
    elitism: float,
    time_budget: float = math.inf,
    max_generations: float = math.inf,
    report_interval: Optional[int] = None,
    report: Optional[Reporter] = None,
    history: Optional[RunHistory] = None
) -> Individual:
    """
    Run a plain elitist genetic algorithm.

    Args:
        task: Fully configured Task (population, objectives, operators)
        elitism: Fraction of the top-ranked population kept each generation
        time_budget: Seconds after which the run stops (checked after each generation)
        max_generations: Generation limit
        report_interval: Report every this many generations (None disables)
        report: Reporter (generation, best_fitness, best_genome); prints by default
        history: Optional RunHistory collecting the best fitness per generation

    Returns:
        The best individual when the run ends
    """
    return _evolve(task, elitism, time_budget, max_generations,
                   report_interval, report, history)


def cos_mutation_ga(
    task: Task,
    max_mutation_prob: float,
    cycle_length: float,
    elitism: float,
    time_budget: float = math.inf,
    max_generations: float = math.inf,
    report_interval: Optional[int] = None,
    report: Optional[Reporter] = None,
    history: Optional[RunHistory] = None
) -> Individual:
    """
    Run an elitist GA whose mutation probability follows a cosine schedule.

    Before each generation the mutator's 'mp' parameter is set to
    max_mutation_prob/2 + max_mutation_prob/2 * cos(g * 2pi / cycle_length).

    Args:
        task: Fully configured Task whose mutator reads params['mp']
        max_mutation_prob: Peak mutation probability
        cycle_length: Generations per cosine cycle
        elitism: Fraction of the top-ranked population kept each generation
        time_budget: Seconds after which the run stops
        max_generations: Generation limit
        report_interval: Report every this many generations (None disables)
        report: Reporter (generation, best_fitness, best_genome); prints by default
        history: Optional RunHistory collecting the best fitness per generation

    Returns:
        The best individual when the run ends
    """
    task.set_mutator_param('mp', max_mutation_prob)

    def schedule(generation: int) -> None:
        task.set_mutator_param(
            'mp', cosine_mutation_probability(generation, max_mutation_prob, cycle_length)
        )

    return _evolve(task, elitism, time_budget, max_generations,
                   report_interval, report, history, before_generation=schedule)
