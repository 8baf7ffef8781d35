"""
CLI module for the GA engine.

Handles run configuration loading, validation, and algorithm dispatching.
"""

import sys
from typing import Any, Dict, List, Optional

from .algorithms import general_ga, cos_mutation_ga
from .config import (
    ConfigValidationError,
    load_run_config,
    validate_run_config,
    build_task_from_config,
    run_settings,
)
from .data_models import Individual, RunHistory

USAGE = """\
Usage:
    genespy run_config.yaml
    genespy --config run_config.yaml
    genespy --help
"""


def run_config(config: Dict[str, Any]) -> Individual:
    """
    Build the Task for a validated config and run its algorithm.

    Args:
        config: Run configuration dictionary

    Returns:
        Best individual found
    """
    task = build_task_from_config(config)
    settings = run_settings(config)
    history = RunHistory()

    algorithm = config.get('algorithm', 'general')
    print(f"Algorithm: {algorithm}")
    print(f"Population: {task.size} individuals ({config['population']['type']})")
    print(f"Random seed: {config.get('random_seed')}")
    print()

    if algorithm == 'cos_mutation':
        best = cos_mutation_ga(task, history=history, **settings)
    elif algorithm == 'general':
        best = general_ga(task, history=history, **settings)
    else:
        # Should never reach here due to validation
        raise ConfigValidationError(f"Invalid algorithm: {algorithm}")

    plot_path = (config.get('output') or {}).get('plot')
    if plot_path and len(history) > 0:
        from .visualization_utils import plot_history
        plot_history(history, plot_path)

    print("=" * 70)
    print("BEST INDIVIDUAL")
    print("=" * 70)
    print(f"Generations run: {len(history)}")
    print(best)
    print(f"Decoded genome: {best.get_genome()}")

    return best


def run_from_config(config_path: str) -> Individual:
    """
    Load run configuration and execute it.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    validate_run_config(config)

    return run_config(config)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the GA CLI."""
    args = sys.argv[1:] if argv is None else argv

    if not args or args[0] in ['-h', '--help', 'help']:
        print(USAGE)
        return 0 if args else 1

    config_path = args[0]
    if config_path.startswith('--config='):
        config_path = config_path.split('=', 1)[1]
    elif config_path == '--config':
        if len(args) < 2:
            print("Error: --config requires an argument")
            print(USAGE)
            return 1
        config_path = args[1]

    try:
        run_from_config(config_path)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except (FileNotFoundError, ConfigValidationError, ValueError) as e:
        print(f"\nError: {e}")
        return 1

    return 0
