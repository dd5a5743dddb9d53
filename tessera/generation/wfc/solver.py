"""
Wave Function Collapse solver.

This is the heart of WFC - the algorithm that observes (collapses) cells
and propagates constraints until the entire grid is determined.

The algorithm, one cell per step:
1. Snapshot every cell before writing anything
2. Find the unresolved cell with lowest entropy (first in row-major order on ties)
3. Collapse it to a uniformly random category that its neighbors can support,
   falling back to any category of its domain when none can
4. Propagate: narrow the domains of its immediate neighbors

Propagation is a single hop. When it would empty a neighbor's domain the
default policy resets that neighbor to the full category set instead of
failing, so a grid of W x H cells always completes in exactly W x H steps.
Locally inconsistent edges can survive into the final grid.
"""

from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import Protocol, Sequence, TypeVar

from ...core.category import Category
from ...core.types import Position
from .grid import Grid, Cell, CellSnapshot
from .rules import AdjacencyRules

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SolverState(Enum):
    """The current state of the WFC solver."""
    RUNNING = auto()        # Collapsed a cell, more steps may be needed
    COMPLETE = auto()       # All cells resolved
    CONTRADICTION = auto()  # Strict policy: propagation emptied a neighbor this step
    STUCK = auto()          # Nothing left to select but some cell is unresolved


class ContradictionPolicy(str, Enum):
    """What propagation does when it would leave a neighbor with no candidates."""
    TOLERANT_RESET = "tolerant"  # Forget prior narrowing: reset to the full set
    STRICT_FAIL = "strict"       # Leave the domain empty and report CONTRADICTION


class RandomSource(Protocol):
    """Anything that can pick an element uniformly, e.g. random.Random."""

    def choice(self, seq: Sequence[T]) -> T:
        ...


class WFCSolver:
    """
    The WFC algorithm implementation.

    Usage:
        solver = WFCSolver(grid, rules, rng=random.Random(42))
        while solver.step() in (SolverState.RUNNING, SolverState.CONTRADICTION):
            pass

    Or for bulk solving:
        solver.solve()  # Returns True once every cell is resolved
    """

    def __init__(
        self,
        grid: Grid,
        rules: AdjacencyRules,
        rng: RandomSource | None = None,
        policy: ContradictionPolicy = ContradictionPolicy.TOLERANT_RESET,
    ):
        """
        Initialize the solver.

        Args:
            grid: The Grid to solve (should be in its initial state)
            rules: Category registry with the adjacency predicate
            rng: Random source for collapse choices (fresh random.Random if None)
            policy: Behavior when propagation empties a neighbor's domain
        """
        self.grid = grid
        self.rules = rules
        self.rng = rng if rng is not None else random.Random()
        self.policy = ContradictionPolicy(policy)
        self.step_count = 0

        # Bookkeeping from the last step (for visualization/debugging)
        self.last_collapsed: Position | None = None
        self.last_choice: Category | None = None
        self.last_propagated: set[Position] = set()
        self.last_reset: set[Position] = set()

    def step(self) -> SolverState:
        """
        Perform one collapse-and-propagate cycle.

        A no-op once no unresolved cell with candidates remains; the returned
        state then tells a finished grid (COMPLETE) from a stuck one (STUCK).
        """
        self.last_collapsed = None
        self.last_choice = None
        self.last_propagated.clear()
        self.last_reset.clear()

        # All reads in this step go through the snapshot
        snapshot = self.grid.snapshot()

        selected = self._select(snapshot)
        if selected is None:
            if self.grid.is_complete():
                return SolverState.COMPLETE
            logger.warning(
                f"No selectable cell but grid incomplete "
                f"({self.grid.resolved_count}/{len(snapshot)} resolved)"
            )
            return SolverState.STUCK

        choice = self._choose(selected, snapshot)
        cell = self.grid.get_cell(selected.x, selected.y)
        cell.collapse_to(choice)

        self.step_count += 1
        self.last_collapsed = selected.position
        self.last_choice = choice
        if not self._propagate(cell, choice, snapshot):
            return SolverState.CONTRADICTION
        return SolverState.RUNNING

    def _select(self, snapshot: list[CellSnapshot]) -> CellSnapshot | None:
        """
        Find the unresolved cell with minimum entropy.

        Cells with an empty domain are never selected. Ties go to the first
        cell in row-major order; only the collapse value is randomized.
        """
        candidates = [s for s in snapshot if not s.resolved and s.domain]
        if not candidates:
            return None
        return min(candidates, key=lambda s: s.entropy)

    def _choose(self, selected: CellSnapshot, snapshot: list[CellSnapshot]) -> Category:
        """
        Pick the collapse value for a cell.

        A candidate is valid when every in-bounds neighbor still has at least
        one category it allows in that direction. The filter is advisory: if
        nothing is valid the choice falls back to the whole domain.
        """
        domain = self.rules.ordered(selected.domain)
        neighbors = [
            (snapshot[n.y * self.grid.width + n.x], direction)
            for n, direction in self.grid.neighbors(self.grid.get_cell(selected.x, selected.y))
        ]

        valid_choices = [
            candidate
            for candidate in domain
            if all(
                any(
                    self.rules.allowed(candidate, neighbor_category, direction)
                    for neighbor_category in neighbor.domain
                )
                for neighbor, direction in neighbors
            )
        ]

        if not valid_choices:
            logger.debug(
                f"No valid choice at ({selected.x}, {selected.y}), "
                f"falling back to domain {[c.value for c in domain]}"
            )
            return self.rng.choice(domain)
        return self.rng.choice(valid_choices)

    def _propagate(self, cell: Cell, choice: Category, snapshot: list[CellSnapshot]) -> bool:
        """
        Narrow the domains of the collapsed cell's immediate neighbors.

        Neighbors already resolved in the snapshot are left alone.

        Returns False if the strict policy left a neighbor without candidates.
        """
        consistent = True

        for neighbor, direction in self.grid.neighbors(cell):
            if snapshot[neighbor.y * self.grid.width + neighbor.x].resolved:
                continue

            allowed = {
                candidate
                for candidate in neighbor.domain
                if self.rules.allowed(choice, candidate, direction)
            }
            changed = neighbor.constrain_to(allowed)

            if not neighbor.domain:
                if self.policy is ContradictionPolicy.STRICT_FAIL:
                    logger.warning(
                        f"Contradiction at ({neighbor.x}, {neighbor.y}) "
                        f"after collapsing ({cell.x}, {cell.y}) to {choice.value}"
                    )
                    consistent = False
                else:
                    neighbor.domain = set(self.grid.categories)
                    self.last_reset.add(neighbor.position)
                    logger.debug(
                        f"Empty domain at ({neighbor.x}, {neighbor.y}), reset to full set"
                    )
                    continue

            if changed:
                self.last_propagated.add(neighbor.position)

        return consistent

    def solve(self) -> bool:
        """
        Run the solver until no cell can be selected.

        Returns True if every cell ended up resolved.
        """
        while True:
            state = self.step()
            if state == SolverState.COMPLETE:
                return True
            if state == SolverState.STUCK:
                return False

    def reset(self):
        """Reset the solver and grid for a new generation."""
        self.grid.reset()
        self.step_count = 0
        self.last_collapsed = None
        self.last_choice = None
        self.last_propagated.clear()
        self.last_reset.clear()
