#!/usr/bin/env python3
"""
GA CLI - Minimal entry point.

Runs the genetic algorithm described by a YAML run configuration.

Usage:
    python3 ga_cli.py run_config.yaml
    python3 ga_cli.py --config run_config.yaml
    python3 ga_cli.py --help

Examples:
    # Minimize the Beale function with a fixed-point binary genome
    python3 ga_cli.py examples/beale_binary.yaml

    # Shortest open path through a set of locations (SCX crossover)
    python3 ga_cli.py examples/salesman.yaml
"""

import sys
from pathlib import Path

# Add project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


if __name__ == '__main__':
    from genespy.cli import main
    sys.exit(main())
