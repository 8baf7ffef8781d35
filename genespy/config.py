"""
Run configuration.

Loads and validates YAML run configurations and turns them into a fully
configured Task. Operators and objectives are named in YAML and resolved
through the registries below; any other callable can be referenced as
'package.module:function'.

Example run config:

    algorithm: cos_mutation
    random_seed: 42
    population: {type: binary, size: 200, structure: [[true, 5, 5], [true, 5, 5]]}
    objectives:
      - {function: beale, factor: -1.0}
    mutation: {operator: flip, params: {mp: 0.05}}
    crossover: {operator: one_point}
    selection: {operator: vasconcelos, params: {cp: 0.3}}
    run: {elitism: 0.5, max_generations: 200, report_interval: 10,
          max_mutation_prob: 0.05, cycle_length: 100}
"""

import importlib
import math
from pathlib import Path
from typing import Dict, Any, Callable, List

import yaml

from . import crossover, mutation, selection, problems
from .initializers import (
    init_permutation_population,
    init_float_population,
    init_binary_population,
)
from .random_utils import make_rng
from .task import Task

MUTATORS: Dict[str, Callable] = {
    'swap': mutation.swap_mutation,
    'insert': mutation.insert_mutation,
    'normal': mutation.normal_mutation,
    'flip': mutation.flip_mutation,
    'multiple': mutation.multiple_mutation,
}

CROSSOVERS: Dict[str, Callable] = {
    'one_point': crossover.one_point_crossover,
    'two_point': crossover.two_point_crossover,
    'scx': crossover.scx_crossover,
    'pseudo_scx': crossover.pseudo_scx_crossover,
}

SELECTORS: Dict[str, Callable] = {
    'vasconcelos': selection.vasconcelos_selection,
    'tournament': selection.tournament_selection,
}

FUNCTIONS: Dict[str, Callable] = {
    'beale': problems.beale,
    'travel_cost': problems.travel_cost,
}

ALGORITHMS = ('general', 'cos_mutation')
POPULATION_TYPES = ('permutation', 'float', 'binary')


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If the YAML is malformed or empty
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ConfigValidationError("Run configuration must be a mapping")

    algorithm = config.get('algorithm', 'general')
    if algorithm not in ALGORITHMS:
        raise ConfigValidationError(
            f"Invalid algorithm: '{algorithm}'. Must be one of {', '.join(ALGORITHMS)}"
        )

    for section in ['population', 'objectives', 'mutation', 'crossover', 'selection', 'run']:
        if section not in config:
            raise ConfigValidationError(f"Missing required field: '{section}'")

    for section in ['population', 'mutation', 'crossover', 'selection', 'run']:
        if not isinstance(config[section], dict):
            raise ConfigValidationError(f"'{section}' must be a dictionary")

    _validate_population(config['population'], config.get('problem'))
    _validate_objectives(config['objectives'])

    if 'constraints' in config:
        _validate_constraints(config['constraints'], len(config['objectives']))

    _validate_operator(config['mutation'], MUTATORS, 'mutation')
    _validate_operator(config['crossover'], CROSSOVERS, 'crossover')
    _validate_operator(config['selection'], SELECTORS, 'selection')

    _validate_run_section(config['run'], algorithm)


def _validate_population(population: Dict[str, Any], problem: Any) -> None:
    pop_type = population.get('type')
    if pop_type not in POPULATION_TYPES:
        raise ConfigValidationError(
            f"Invalid population type: '{pop_type}'. Must be one of {', '.join(POPULATION_TYPES)}"
        )

    size = population.get('size')
    if not isinstance(size, int) or size <= 0:
        raise ConfigValidationError(f"'population.size' must be a positive integer, got: {size}")

    if pop_type == 'permutation':
        has_tsp = isinstance(problem, dict) and problem.get('type') == 'tsp'
        if 'elements' not in population and not has_tsp:
            raise ConfigValidationError(
                "Permutation population requires 'population.elements' or a 'tsp' problem"
            )
    elif pop_type == 'float':
        for key in ['genes', 'min', 'max']:
            if key not in population:
                raise ConfigValidationError(f"Float population requires 'population.{key}' field")
        if population['min'] >= population['max']:
            raise ConfigValidationError("'population.min' must be lower than 'population.max'")
    elif pop_type == 'binary':
        structure = population.get('structure')
        if not structure:
            raise ConfigValidationError("Binary population requires 'population.structure' field")
        for item in structure:
            if not isinstance(item, (list, tuple)) or len(item) != 3:
                raise ConfigValidationError(
                    f"Each structure entry must be [sign, integer_bits, fraction_bits], got: {item}"
                )


def _validate_objectives(objectives: Any) -> None:
    if not isinstance(objectives, list) or not objectives:
        raise ConfigValidationError("'objectives' must be a non-empty list")

    for objective in objectives:
        if not isinstance(objective, dict) or 'function' not in objective:
            raise ConfigValidationError("Each objective requires a 'function' field")
        factor = objective.get('factor', 1.0)
        if not isinstance(factor, (int, float)) or factor == 0:
            raise ConfigValidationError(
                f"Objective factor must be a non-zero number, got: {factor}"
            )


def _validate_constraints(constraints: Any, n_objectives: int) -> None:
    if not isinstance(constraints, dict):
        raise ConfigValidationError("'constraints' must be a dictionary")
    if not constraints.get('functions'):
        raise ConfigValidationError("'constraints.functions' must be a non-empty list")

    penalties = constraints.get('max_penalties', [])
    if len(penalties) != n_objectives:
        raise ConfigValidationError(
            f"'constraints.max_penalties' must have one value per objective "
            f"({len(penalties)} != {n_objectives})"
        )


def _validate_operator(section: Dict[str, Any], registry: Dict[str, Callable], name: str) -> None:
    operator = section.get('operator')
    if operator not in registry:
        raise ConfigValidationError(
            f"Unknown {name} operator: '{operator}'. Must be one of {', '.join(registry)}"
        )

    params = section.get('params', {})
    if not isinstance(params, dict):
        raise ConfigValidationError(f"'{name}.params' must be a dictionary")

    if name == 'mutation' and operator == 'multiple':
        candidates = params.get('operators')
        if not candidates:
            raise ConfigValidationError("'multiple' mutation requires 'params.operators'")
        for candidate in candidates:
            if candidate not in registry or candidate == 'multiple':
                raise ConfigValidationError(f"Invalid operator for 'multiple' mutation: '{candidate}'")


def _validate_run_section(run: Dict[str, Any], algorithm: str) -> None:
    elitism = run.get('elitism', 0.5)
    if not isinstance(elitism, (int, float)) or not 0.0 <= elitism <= 1.0:
        raise ConfigValidationError(f"'run.elitism' must be between 0 and 1, got: {elitism}")

    if 'max_generations' not in run and 'time_budget' not in run:
        raise ConfigValidationError(
            "'run' requires 'max_generations' or 'time_budget' to stop the algorithm"
        )

    interval = run.get('report_interval')
    if interval is not None and (not isinstance(interval, int) or interval <= 0):
        raise ConfigValidationError(
            f"'run.report_interval' must be a positive integer, got: {interval}"
        )

    if algorithm == 'cos_mutation':
        for key in ['max_mutation_prob', 'cycle_length']:
            if key not in run:
                raise ConfigValidationError(f"cos_mutation algorithm requires 'run.{key}' field")
        if run['cycle_length'] <= 0:
            raise ConfigValidationError("'run.cycle_length' must be positive")


def resolve_function(name: str) -> Callable:
    """
    Resolve a function by registry name or 'module:attribute' path.

    Raises:
        ConfigValidationError: If the name cannot be resolved to a callable
    """
    if name in FUNCTIONS:
        return FUNCTIONS[name]

    if ':' not in name:
        raise ConfigValidationError(
            f"Unknown function: '{name}'. Use one of {', '.join(FUNCTIONS)} or 'module:function'"
        )

    module_name, attribute = name.split(':', 1)
    try:
        module = importlib.import_module(module_name)
        function = getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigValidationError(f"Cannot import function '{name}': {e}")

    if not callable(function):
        raise ConfigValidationError(f"'{name}' is not callable")
    return function


def build_task_data(config: Dict[str, Any]) -> Any:
    """
    Build the task-level data from 'problem' or pass 'data' through.

    A 'tsp' problem produces {'start', 'circuit', 'cost'} with a haversine
    cost matrix over its locations.
    """
    problem = config.get('problem')
    if isinstance(problem, dict) and problem.get('type') == 'tsp':
        locations = problem['locations']
        return {
            'start': problem['start'],
            'circuit': bool(problem.get('circuit', False)),
            'cost': problems.geographic_distance_matrix(locations),
        }
    return config.get('data')


def build_population(config: Dict[str, Any], rng) -> List:
    population = config['population']
    pop_type = population['type']
    size = population['size']

    if pop_type == 'permutation':
        elements = population.get('elements')
        if elements is None:
            problem = config['problem']
            elements = problems.tour_nodes(problem['locations'], problem['start'])
        return init_permutation_population(size, elements, rng)

    if pop_type == 'float':
        return init_float_population(
            size, population['genes'], population['min'], population['max'], rng
        )

    return init_binary_population(size, population['structure'], rng)


def build_task_from_config(config: Dict[str, Any]) -> Task:
    """
    Create a fully configured Task from a validated run configuration.

    Args:
        config: Run configuration dictionary

    Returns:
        Task with population, objectives, constraints, data and operators bound
    """
    task = Task(rng=make_rng(config.get('random_seed')))
    task.set_data(build_task_data(config))
    task.set_population(build_population(config, task.rng))

    objectives = config['objectives']
    task.set_objectives(
        [resolve_function(obj['function']) for obj in objectives],
        [obj.get('factor', 1.0) for obj in objectives]
    )

    if 'constraints' in config:
        constraints = config['constraints']
        task.set_constraints(
            [resolve_function(name) for name in constraints['functions']],
            constraints['max_penalties']
        )

    mutation_params = dict(config['mutation'].get('params', {}))
    if config['mutation']['operator'] == 'multiple':
        mutation_params['operators'] = [MUTATORS[name] for name in mutation_params['operators']]
    task.set_mutator(MUTATORS[config['mutation']['operator']], mutation_params)

    task.set_crossover(
        CROSSOVERS[config['crossover']['operator']],
        config['crossover'].get('params', {})
    )
    task.set_selector(
        SELECTORS[config['selection']['operator']],
        config['selection'].get('params', {})
    )

    return task


def run_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract driver arguments from the 'run' section.

    Missing or null time budgets and generation limits become infinite.
    """
    run = config['run']

    time_budget = run.get('time_budget')
    max_generations = run.get('max_generations')

    settings = {
        'elitism': float(run.get('elitism', 0.5)),
        'time_budget': math.inf if time_budget is None else float(time_budget),
        'max_generations': math.inf if max_generations is None else max_generations,
        'report_interval': run.get('report_interval'),
    }

    if config.get('algorithm', 'general') == 'cos_mutation':
        settings['max_mutation_prob'] = float(run['max_mutation_prob'])
        settings['cycle_length'] = float(run['cycle_length'])

    return settings
