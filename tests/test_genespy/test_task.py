"""
Tests for the Task orchestrator.
"""

import unittest

from genespy.data_models import Individual, BinarySpec, BinaryIndividual
from genespy.mutation import swap_mutation, flip_mutation
from genespy.task import Task, TaskConfigurationError


def first_gene(genome, data):
    return genome[0]


class TestTaskConfiguration(unittest.TestCase):
    """Test objective, constraint and operator bindings."""

    def setUp(self):
        self.task = Task(seed=0)

    def test_objective_factor_mismatch(self):
        with self.assertRaises(TaskConfigurationError):
            self.task.set_objectives([first_gene], [1.0, -1.0])

    def test_zero_factor_rejected(self):
        with self.assertRaises(TaskConfigurationError):
            self.task.set_objectives([first_gene], [0.0])

    def test_configuration_error_is_value_error(self):
        with self.assertRaises(ValueError):
            self.task.set_objectives([first_gene], [])

    def test_penalty_count_must_match_objectives(self):
        self.task.set_objectives([first_gene], [1.0])

        with self.assertRaises(TaskConfigurationError):
            self.task.set_constraints([lambda g, d: 0], [10.0, 20.0])

    def test_penalties_split_across_constraints(self):
        self.task.set_objectives([first_gene, first_gene], [1.0, -1.0])
        self.task.set_constraints([lambda g, d: 0] * 4, [100.0, 8.0])

        self.assertEqual(self.task.penalties, [25.0, 2.0])

    def test_operator_params_are_copied(self):
        params = {'mp': 0.1}
        self.task.set_mutator(swap_mutation, params)
        self.task.set_mutator_param('mp', 0.9)

        self.assertEqual(params, {'mp': 0.1})
        self.assertEqual(self.task.mutator_params, {'mp': 0.9})

    def test_same_seed_same_stream(self):
        self.assertEqual(Task(seed=5).rng.random(), Task(seed=5).rng.random())


class TestPopulationAccess(unittest.TestCase):
    """Test population bookkeeping."""

    def setUp(self):
        self.task = Task(seed=0)
        self.task.set_population([Individual(raw_genome=[i]) for i in range(4)])

    def test_set_population_sets_desired_size(self):
        self.assertEqual(self.task.size, 4)
        self.assertEqual(self.task.desired_size, 4)

    def test_replace_keeps_desired_size(self):
        self.task.replace_population([Individual(raw_genome=[9])])

        self.assertEqual(self.task.size, 1)
        self.assertEqual(self.task.desired_size, 4)

    def test_append_population(self):
        self.task.append_population([Individual(raw_genome=[10])])
        self.task.append_population([Individual(raw_genome=[-1])], first=True)

        genes = [ind.raw_genome[0] for ind in self.task.population]
        self.assertEqual(genes, [-1, 0, 1, 2, 3, 10])

    def test_subpopulation_copy_is_deep(self):
        copies = self.task.get_subpopulation_copy(1, 2)
        copies[0].raw_genome[0] = 99

        self.assertEqual([ind.raw_genome[0] for ind in copies], [99, 2])
        self.assertEqual(self.task.get_individual(1).raw_genome, [1])


class TestEvaluation(unittest.TestCase):
    """Test fitness evaluation and penalties."""

    def test_evaluate_objectives(self):
        task = Task(seed=0)
        task.set_objectives([first_gene, lambda g, d: g[0] * d], [1.0, -1.0])
        task.set_data(10)
        task.set_population([Individual(raw_genome=[2]), Individual(raw_genome=[3])])

        task.evaluate()

        self.assertEqual(task.population[0].fitness, [2.0, 20.0])
        self.assertEqual(task.population[1].fitness, [3.0, 30.0])

    def test_evaluate_skips_evaluated(self):
        calls = []

        def objective(genome, data):
            calls.append(genome[0])
            return genome[0]

        task = Task(seed=0)
        task.set_objectives([objective], [1.0])
        task.set_population([Individual(raw_genome=[1], fitness=[5.0]), Individual(raw_genome=[2])])

        task.evaluate()
        task.evaluate()

        self.assertEqual(calls, [2])
        self.assertEqual(task.population[0].fitness, [5.0])

    def test_constraint_penalty(self):
        task = Task(seed=0)
        task.set_objectives([first_gene], [-1.0])
        task.set_constraints(
            [lambda g, d: int(g[0] < 0), lambda g, d: int(g[0] > 5)],
            [1000.0]
        )
        task.set_population([
            Individual(raw_genome=[3]),
            Individual(raw_genome=[-1]),
            Individual(raw_genome=[7]),
        ])

        task.evaluate()

        self.assertEqual(task.population[0].fitness, [3.0])
        self.assertEqual(task.population[1].fitness, [500.0])
        self.assertEqual(task.population[2].fitness, [500.0])

    def test_failing_every_constraint_gets_max_penalty(self):
        task = Task(seed=0)
        task.set_objectives([first_gene], [-1.0])
        task.set_constraints([lambda g, d: 1, lambda g, d: 1], [1000.0])
        task.set_population([Individual(raw_genome=[3])])

        task.evaluate()

        self.assertEqual(task.population[0].fitness, [1000.0])

    def test_objectives_see_decoded_genome(self):
        spec = BinarySpec([(False, 3, 2)])
        task = Task(seed=0)
        task.set_objectives([first_gene], [1.0])
        task.set_population([BinaryIndividual(raw_genome=[0, 1, 0, 1, 0], spec=spec)])

        task.evaluate()

        self.assertEqual(task.population[0].fitness, [2.5])


class TestOrdering(unittest.TestCase):
    """Test comparison, ordering and duplicate removal."""

    def make_task(self, factors, fitnesses):
        task = Task(seed=0)
        task.set_objectives([first_gene] * len(factors), factors)
        task.set_population([
            Individual(raw_genome=[i], fitness=fitness)
            for i, fitness in enumerate(fitnesses)
        ])
        return task

    def genes(self, task):
        return [ind.raw_genome[0] for ind in task.population]

    def test_order_maximize(self):
        task = self.make_task([1.0], [[1.0], [3.0], [2.0]])
        task.order_population()

        self.assertEqual(self.genes(task), [1, 2, 0])

    def test_order_minimize(self):
        task = self.make_task([-1.0], [[1.0], [3.0], [2.0]])
        task.order_population()

        self.assertEqual(self.genes(task), [0, 2, 1])

    def test_lexicographic_tie_break(self):
        task = self.make_task([1.0, -1.0], [[1.0, 5.0], [2.0, 9.0], [2.0, 3.0]])
        task.order_population()

        self.assertEqual(self.genes(task), [2, 1, 0])

    def test_objective_priority(self):
        task = self.make_task([1.0, -1.0], [[1.0, 5.0], [2.0, 9.0], [2.0, 3.0]])
        task.order_population(objectives=[1])

        self.assertEqual(self.genes(task), [2, 0, 1])

    def test_ordering_is_stable(self):
        task = self.make_task([1.0], [[1.0], [2.0], [1.0], [2.0]])
        task.order_population()

        self.assertEqual(self.genes(task), [1, 3, 0, 2])

    def test_absent_fitness_ranks_last(self):
        for factor in [1.0, -1.0]:
            task = self.make_task([factor], [None, [1.0], [-1.0]])
            task.order_population()

            self.assertEqual(self.genes(task)[-1], 0)
            self.assertEqual(
                task.compare_individuals(task.population[-1], task.population[0]), 1
            )

    def test_remove_duplicate_fitness(self):
        task = self.make_task([1.0], [[1.0], [2.0], [1.0], [3.0], [2.0]])
        task.remove_duplicate_fitness()

        self.assertEqual(self.genes(task), [3, 1, 0])
        self.assertEqual(task.desired_size, 5)

    def test_remove_duplicate_fitness_idempotent(self):
        task = self.make_task([-1.0, 1.0], [[1.0, 2.0], [1.0, 2.0], [0.0, 5.0], [1.0, 3.0]])
        task.remove_duplicate_fitness()
        once = self.genes(task)
        task.remove_duplicate_fitness()

        self.assertEqual(self.genes(task), once)
        self.assertEqual(once, [2, 3, 0])


class TestMutationAndSizing(unittest.TestCase):
    """Test mutation application and population resizing."""

    def setUp(self):
        self.task = Task(seed=7)
        self.task.set_objectives([first_gene], [1.0])
        self.task.set_mutator(swap_mutation, {'mp': 0.5})
        self.task.set_population([
            Individual(raw_genome=[0, 1, 2, 3], fitness=[float(i)]) for i in range(4)
        ])

    def test_mutate_clears_all_fitness(self):
        self.task.mutate()

        for ind in self.task.population:
            self.assertIsNone(ind.fitness)
            self.assertEqual(sorted(ind.raw_genome), [0, 1, 2, 3])

    def test_truncate(self):
        grew = self.task.adjust_population_size(2)

        self.assertFalse(grew)
        self.assertEqual(self.task.size, 2)
        self.assertEqual(self.task.desired_size, 2)

    def test_grow_with_mutated_clones(self):
        self.task.replace_population(self.task.population[:2])

        grew = self.task.adjust_population_size()

        self.assertTrue(grew)
        self.assertEqual(self.task.size, 4)
        self.assertEqual([ind.fitness for ind in self.task.population[:2]], [[0.0], [1.0]])
        self.assertIsNone(self.task.population[2].fitness)
        self.assertIsNone(self.task.population[3].fitness)
        self.assertEqual(self.task.population[0].fitness, [0.0])

    def test_grow_binary_keeps_spec(self):
        spec = BinarySpec([(True, 2, 2)])
        task = Task(seed=1)
        task.set_mutator(flip_mutation, {'mp': 1.0})
        task.set_population([BinaryIndividual(raw_genome=[0] * 5, spec=spec, fitness=[0.0])])

        task.adjust_population_size(3)

        self.assertEqual(task.size, 3)
        for ind in task.population[1:]:
            self.assertIs(ind.spec, spec)
            self.assertEqual(ind.raw_genome, [1] * 5)


if __name__ == '__main__':
    unittest.main()
