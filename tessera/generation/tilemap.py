"""
Tilemap generation using Wave Function Collapse.

Runs a single generation to completion without any viewer attached.
Useful for scripts, tests, and the headless CLI mode.
"""

import random
from typing import Callable

from ..core.category import Category
from .tileset import create_default_rules
from .wfc import ContradictionPolicy, SolverState, WFCSolver, create_grid


def generate_tilemap(
    width: int = 32,
    height: int = 32,
    seed: int | None = None,
    policy: ContradictionPolicy = ContradictionPolicy.TOLERANT_RESET,
    progress_callback: Callable[[int, int], None] | None = None,
) -> list[list[Category | None]]:
    """
    Generate a tilemap with the default tileset.

    Args:
        width: Map width in cells
        height: Map height in cells
        seed: Random seed for reproducibility (None = random)
        policy: Contradiction policy for propagation
        progress_callback: Optional callback(resolved_count, total_cells)

    Returns:
        2D list of categories, indexed as tilemap[y][x]. Cells left
        unresolved (strict policy only) are None.
    """
    rules = create_default_rules()
    grid = create_grid(width, height, rules.categories)
    solver = WFCSolver(grid, rules, rng=random.Random(seed), policy=policy)
    total_cells = width * height

    while True:
        state = solver.step()
        if progress_callback is not None:
            progress_callback(solver.step_count, total_cells)
        if state in (SolverState.COMPLETE, SolverState.STUCK):
            break

    return grid.category_rows()
