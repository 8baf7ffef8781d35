"""
genespy - operator-pluggable genetic algorithm engine

Evolves a population of encoded candidate solutions with pluggable
selection, crossover and mutation operators towards one or more weighted
objectives, optionally under penalty constraints.

Key Features:
- Permutation, real-valued and fixed-point binary genomes
- Sequential constructive crossover (SCX) for tour permutations
- Geometric-stride mutation for sparse mutation probabilities
- One seeded random stream per run for reproducible results

Modules:
- data_models: Core data structures (Individual, BinaryIndividual, BinarySpec, RunHistory)
- codec: Fixed-point binary encode/decode
- random_utils: Geometric, Gaussian and permutation draws
- initializers: Population initializers
- crossover: One-point, two-point, SCX and pseudo-SCX crossover
- mutation: Swap, insert, normal, flip and multiple mutation
- selection: Vasconcelos and tournament selection
- task: Task orchestrator
- algorithms: Elitist GA drivers (plain and cosine mutation schedule)
- problems: Example objectives and cost matrices
- config: YAML run configuration
- cli: Command-line interface
"""

__version__ = "0.1.0"
__author__ = "genespy developers"

from .data_models import Individual, BinaryIndividual, BinarySpec, VariableSpec, RunHistory
from .task import Task, TaskConfigurationError
from .algorithms import general_ga, cos_mutation_ga

__all__ = [
    "Individual",
    "BinaryIndividual",
    "BinarySpec",
    "VariableSpec",
    "RunHistory",
    "Task",
    "TaskConfigurationError",
    "general_ga",
    "cos_mutation_ga",
]
