"""
End-to-end tests for the GA drivers.
"""

import io
import unittest
from contextlib import redirect_stdout

import numpy as np

from genespy.algorithms import (
    general_ga,
    cos_mutation_ga,
    cosine_mutation_probability,
    print_report,
)
from genespy.crossover import two_point_crossover, one_point_crossover, scx_crossover
from genespy.data_models import RunHistory
from genespy.initializers import (
    init_float_population,
    init_binary_population,
    init_permutation_population,
)
from genespy.mutation import normal_mutation, flip_mutation, swap_mutation
from genespy.problems import beale, travel_cost, euclidean_distance_matrix
from genespy.selection import vasconcelos_selection, tournament_selection
from genespy.task import Task


def parabola(genome, data):
    """Peak of 0 at x = 3."""
    return -(genome[0] - 3.0) ** 2


def float_task(seed: int = 0, size: int = 20) -> Task:
    task = Task(seed=seed)
    task.set_population(init_float_population(size, 1, 0.0, 6.0, task.rng))
    task.set_objectives([parabola], [1.0])
    task.set_mutator(normal_mutation, {'mp': 1.0, 'sd': 1.0})
    task.set_crossover(two_point_crossover)
    task.set_selector(vasconcelos_selection, {'cp': 0.5})
    return task


class RecordingMutator:
    """Identity mutator recording the mutation probability per generation."""

    def __init__(self):
        self.mp_by_generation = {}

    def __call__(self, task, individual, params):
        self.mp_by_generation[task.current_generation] = params['mp']
        return individual.raw_genome.copy()


class TestCosineSchedule(unittest.TestCase):

    def test_schedule_values(self):
        expected = [0.8, 0.4, 0.0, 0.4, 0.8]
        for generation, mp in enumerate(expected):
            self.assertAlmostEqual(cosine_mutation_probability(generation, 0.8, 4), mp)

    def test_driver_sets_mp_before_each_generation(self):
        task = float_task()
        mutator = RecordingMutator()
        task.set_mutator(mutator, {'mp': 0.123})

        cos_mutation_ga(task, 0.8, 4, 0.5, max_generations=5)

        self.assertEqual(sorted(mutator.mp_by_generation), [0, 1, 2, 3, 4])
        for generation, mp in enumerate([0.8, 0.4, 0.0, 0.4, 0.8]):
            self.assertAlmostEqual(mutator.mp_by_generation[generation], mp)


class TestGeneralGA(unittest.TestCase):
    """Test the plain elitist driver."""

    def test_converges_on_parabola(self):
        task = float_task(seed=1)

        best = general_ga(task, 0.5, max_generations=100)

        self.assertLess(abs(best.raw_genome[0] - 3.0), 0.2)
        self.assertIs(best, task.get_individual(0))

    def test_small_population_reaches_peak(self):
        task = float_task(seed=0, size=4)

        best = general_ga(task, 0.5, max_generations=50)

        self.assertLess(abs(best.raw_genome[0] - 3.0), 0.5)

    def test_same_seed_same_result(self):
        best_a = general_ga(float_task(seed=3), 0.5, max_generations=10)
        best_b = general_ga(float_task(seed=3), 0.5, max_generations=10)

        self.assertEqual(best_a.raw_genome, best_b.raw_genome)
        self.assertEqual(best_a.fitness, best_b.fitness)

    def test_population_size_is_kept(self):
        task = float_task(size=12)

        general_ga(task, 0.3, max_generations=15)

        self.assertEqual(task.size, 12)

    def test_best_fitness_never_worsens(self):
        history = RunHistory()

        general_ga(float_task(seed=2), 0.5, max_generations=30, history=history)

        series = history.objective_series(0)
        self.assertEqual(len(series), 30)
        for previous, current in zip(series, series[1:]):
            self.assertGreaterEqual(current, previous)

    def test_time_budget_runs_one_generation(self):
        history = RunHistory()

        general_ga(float_task(), 0.5, time_budget=0, history=history)

        self.assertEqual(history.generations, [0])

    def test_zero_generations_returns_initial_best(self):
        task = float_task()
        history = RunHistory()

        best = general_ga(task, 0.5, max_generations=0, history=history)

        self.assertEqual(len(history), 0)
        self.assertIsNotNone(best.fitness)
        for ind in task.population:
            self.assertLessEqual(ind.fitness[0], best.fitness[0])

    def test_generation_reset_after_run(self):
        task = float_task()

        general_ga(task, 0.5, max_generations=3)

        self.assertIsNone(task.current_generation)

    def test_report_interval(self):
        calls = []

        def report(generation, fitness, genome):
            calls.append(generation)
            self.assertEqual(len(fitness), 1)
            self.assertEqual(len(genome), 1)

        general_ga(float_task(), 0.5, max_generations=5, report_interval=2, report=report)

        self.assertEqual(calls, [0, 2, 4])

    def test_default_report_prints(self):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            general_ga(float_task(), 0.5, max_generations=2, report_interval=1)

        output = buffer.getvalue()
        self.assertIn("Generation: 0", output)
        self.assertIn("Generation: 1", output)
        self.assertIn("Best fitness:", output)

    def test_no_report_without_interval(self):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            general_ga(float_task(), 0.5, max_generations=3)

        self.assertEqual(buffer.getvalue(), "")

    def test_print_report_format(self):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            print_report(7, [1.5, -2.0])

        self.assertEqual(buffer.getvalue(), "Generation: 7\nBest fitness: 1.5, -2.0\n\n")


class TestEndToEndRuns(unittest.TestCase):
    """Smoke runs over the bundled problem types."""

    def test_binary_beale(self):
        task = Task(seed=42)
        task.set_population(init_binary_population(40, [(True, 3, 6), (True, 3, 6)], task.rng))
        task.set_objectives([beale], [-1.0])
        task.set_mutator(flip_mutation, {'mp': 0.05})
        task.set_crossover(one_point_crossover)
        task.set_selector(vasconcelos_selection, {'cp': 0.3})
        history = RunHistory()

        best = cos_mutation_ga(task, 0.05, 20, 0.5, max_generations=40, history=history)

        series = history.objective_series(0)
        for previous, current in zip(series, series[1:]):
            self.assertLessEqual(current, previous)
        self.assertEqual(len(best.get_genome()), 2)
        self.assertEqual(task.size, 40)

    def test_salesman_with_scx(self):
        rng = np.random.default_rng(8)
        nodes = list(range(1, 11))
        points = {node: tuple(rng.random(2)) for node in [0] + nodes}

        task = Task(seed=8)
        task.set_data({'cost': euclidean_distance_matrix(points), 'start': 0, 'circuit': True})
        task.set_population(init_permutation_population(30, nodes, task.rng))
        task.set_objectives([travel_cost], [-1.0])
        task.set_mutator(swap_mutation, {'mp': 0.1})
        task.set_crossover(scx_crossover)
        task.set_selector(tournament_selection, {'k': 4, 'matches': 10})
        history = RunHistory()

        best = general_ga(task, 0.5, max_generations=30, history=history)

        self.assertEqual(sorted(best.raw_genome), nodes)
        self.assertAlmostEqual(best.fitness[0], travel_cost(best.raw_genome, task.data))
        series = history.objective_series(0)
        self.assertLessEqual(series[-1], series[0])


if __name__ == '__main__':
    unittest.main()
