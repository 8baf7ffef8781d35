"""
Visualization utilities for GA runs.

Plots the best fitness recorded in a RunHistory against the generation
number.
"""

from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt

from .data_models import RunHistory


def plot_history(
    history: RunHistory,
    output_path: Union[str, Path],
    objectives: Optional[Sequence[int]] = None,
    figsize: Tuple[int, int] = (10, 6),
    title: str = "Best fitness per generation"
) -> Path:
    """
    Save a convergence plot of a run.

    Args:
        history: History recorded by general_ga or cos_mutation_ga
        output_path: Path to save PNG file
        objectives: Objective indices to plot (default: all)
        figsize: Figure size (width, height) in inches
        title: Plot title

    Returns:
        Path to the saved image

    Raises:
        ValueError: If the history is empty
    """
    if len(history) == 0:
        raise ValueError("Cannot plot an empty history")

    if objectives is None:
        first = next((f for f in history.best_fitness if f is not None), [])
        objectives = range(len(first))

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=figsize)
    for objective in objectives:
        ax.plot(history.generations, history.objective_series(objective),
                label=f"objective {objective}")

    ax.set_xlabel("Generation")
    ax.set_ylabel("Best fitness")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    print(f"  Saved convergence plot: {output_path}")
    return output_path
