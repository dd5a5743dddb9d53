"""GenerationController - owns the current generation and drives the solver.

The presentation layer talks to the solver only through this class: it
asks for ticks, passes along the one-shot reset request, and reads cell
snapshots back out.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from ..logging_config import log_step
from .tileset import create_default_rules
from .wfc import (
    AdjacencyRules,
    CellSnapshot,
    ContradictionPolicy,
    Grid,
    RandomSource,
    SolverState,
    WFCSolver,
    create_grid,
)

logger = logging.getLogger(__name__)


class GenerationController:
    """Runs one grid generation at a time and replaces it on request.

    Usage:
        controller = GenerationController(32, 32, seed=7)
        controller.on_reset(lambda grid: renderer.clear())

        # Once per frame / timer tick:
        controller.tick(reset_requested=key_pressed("r"))
        cells = controller.cells()
    """

    def __init__(
        self,
        width: int,
        height: int,
        rules: AdjacencyRules | None = None,
        rng: RandomSource | None = None,
        seed: int | None = None,
        policy: ContradictionPolicy = ContradictionPolicy.TOLERANT_RESET,
    ):
        """Initialize the controller with a fresh, fully unresolved grid.

        Args:
            width: Grid width in cells
            height: Grid height in cells
            rules: Category registry (default tileset if None)
            rng: Random source shared by every generation
            seed: Seed for a new random.Random when rng is not given
            policy: Contradiction policy handed to each solver

        Raises:
            GridConfigurationError: On non-positive dimensions
        """
        self.width = width
        self.height = height
        self.rules = rules if rules is not None else create_default_rules()
        self.rng = rng if rng is not None else random.Random(seed)
        self.policy = ContradictionPolicy(policy)

        self.generation = 1
        self.state = SolverState.RUNNING

        self._reset_callbacks: list[Callable[[Grid], None]] = []

        self.grid, self.solver = self._new_generation()

    def _new_generation(self) -> tuple[Grid, WFCSolver]:
        grid = create_grid(self.width, self.height, self.rules.categories)
        solver = WFCSolver(grid, self.rules, rng=self.rng, policy=self.policy)
        return grid, solver

    def on_reset(self, callback: Callable[[Grid], None]) -> None:
        """Register a callback invoked with the new grid after each reset."""
        self._reset_callbacks.append(callback)

    def tick(self, reset_requested: bool = False, steps: int = 1) -> SolverState:
        """Advance the current generation.

        Args:
            reset_requested: One-shot reset signal; when set, the grid is
                replaced and no step runs this tick
            steps: Maximum solver steps to run this tick

        Returns:
            Solver state after the last step run
        """
        if reset_requested:
            self.reset()
            return self.state

        for _ in range(steps):
            self.state = self.solver.step()
            if self.solver.last_collapsed is not None:
                log_step(
                    logger,
                    self.generation,
                    self.solver.step_count,
                    f"collapse {tuple(self.solver.last_collapsed)} -> {self.solver.last_choice.value}",
                )
            if self.state == SolverState.RUNNING and self.grid.is_complete():
                self.state = SolverState.COMPLETE
                logger.info(
                    f"Generation {self.generation} complete after {self.solver.step_count} steps"
                )
            if self.state != SolverState.RUNNING:
                break

        return self.state

    def reset(self) -> Grid:
        """Discard the current grid and start a new generation.

        Returns:
            The freshly created grid
        """
        self.grid, self.solver = self._new_generation()
        self.generation += 1
        self.state = SolverState.RUNNING
        logger.info(f"Reset: starting generation {self.generation} ({self.width}x{self.height})")

        for callback in self._reset_callbacks:
            callback(self.grid)
        return self.grid

    def cells(self) -> list[CellSnapshot]:
        """Read-only view of every cell, row-major."""
        return self.grid.snapshot()

    @property
    def is_complete(self) -> bool:
        return self.grid.is_complete()

    @property
    def step_count(self) -> int:
        return self.solver.step_count
