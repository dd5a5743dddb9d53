"""
Grid representation for Wave Function Collapse.

The Grid is the "wave function" - a 2D array of cells where each cell
holds a domain of candidate categories until the solver collapses it to
a single definite category.

Cells live in a flat row-major list, so iteration order (y outer, x inner)
is stable and doubles as the tie-break order for cell selection.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Iterator, TYPE_CHECKING

from ...core.category import Category, ALL_CATEGORIES
from ...core.types import Direction, Position
from .errors import GridConfigurationError

if TYPE_CHECKING:
    from .rules import AdjacencyRules


@dataclass
class Cell:
    """
    A single cell in the WFC grid.

    `resolved` is only set by the solver's collapse. A domain narrowed to a
    single category by propagation is still unresolved.
    """
    x: int
    y: int
    domain: set[Category] = field(default_factory=set)
    resolved: bool = False

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    @property
    def entropy(self) -> int:
        """Number of remaining candidates. Lower means more constrained."""
        return len(self.domain)

    @property
    def category(self) -> Category | None:
        """The resolved category, or None if not yet resolved."""
        if self.resolved:
            return next(iter(self.domain))
        return None

    def collapse_to(self, category: Category):
        """Resolve this cell to a specific category."""
        self.domain = {category}
        self.resolved = True

    def constrain_to(self, allowed: set[Category]) -> bool:
        """
        Constrain this cell to only the given candidates.

        Returns True if the cell changed (lost candidates).
        """
        old_count = len(self.domain)
        self.domain &= allowed
        return len(self.domain) < old_count

    def snapshot(self) -> CellSnapshot:
        return CellSnapshot(
            x=self.x,
            y=self.y,
            domain=frozenset(self.domain),
            resolved=self.resolved,
        )


@dataclass(frozen=True)
class CellSnapshot:
    """Read-only view of a cell, safe to hand to a renderer."""

    x: int
    y: int
    domain: frozenset[Category]
    resolved: bool

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    @property
    def entropy(self) -> int:
        return len(self.domain)

    @property
    def category(self) -> Category | None:
        if self.resolved:
            return next(iter(self.domain))
        return None


class Grid:
    """
    The 2D grid of cells representing the wave function.

    Initially every cell can be any category. As the solver runs, cells
    collapse and constrain their neighbors until every cell is resolved.
    """

    def __init__(self, width: int, height: int, categories: Iterable[Category]):
        """
        Create a grid with every cell holding the full category set.

        Args:
            width: Number of cells horizontally
            height: Number of cells vertically
            categories: All possible categories (initial domain)

        Raises:
            GridConfigurationError: On non-positive dimensions or no categories
        """
        self.categories: tuple[Category, ...] = tuple(dict.fromkeys(categories))

        if width <= 0 or height <= 0:
            raise GridConfigurationError(
                f"Grid dimensions must be positive, got {width}x{height}"
            )
        if not self.categories:
            raise GridConfigurationError("Grid needs at least one category")

        self.width = width
        self.height = height
        self.cells: list[Cell] = [
            Cell(x=x, y=y, domain=set(self.categories))
            for y in range(height)
            for x in range(width)
        ]

    def get_cell(self, x: int, y: int) -> Cell | None:
        """Get cell at position, or None if out of bounds."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.cells[y * self.width + x]
        return None

    def neighbors(self, cell: Cell) -> Iterator[tuple[Cell, Direction]]:
        """
        Yield all in-bounds neighbors of a cell with their directions.

        Direction is FROM the input cell TO the neighbor.
        e.g., (neighbor_cell, Direction.UP) means neighbor is above cell.
        """
        for direction in Direction:
            neighbor = self.get_cell(cell.x + direction.dx, cell.y + direction.dy)
            if neighbor is not None:
                yield neighbor, direction

    def all_cells(self) -> Iterator[Cell]:
        """Iterate over all cells in row-major order."""
        yield from self.cells

    def snapshot(self) -> list[CellSnapshot]:
        """Read-only copy of every cell, in row-major order."""
        return [cell.snapshot() for cell in self.cells]

    @property
    def resolved_count(self) -> int:
        return sum(1 for cell in self.cells if cell.resolved)

    def is_complete(self) -> bool:
        """Check if all cells have been resolved."""
        return all(cell.resolved for cell in self.cells)

    def is_stuck(self) -> bool:
        """Check if some unresolved cell has run out of candidates."""
        return any(not cell.resolved and not cell.domain for cell in self.cells)

    def reset(self):
        """Reset all cells to the full category set."""
        for cell in self.cells:
            cell.domain = set(self.categories)
            cell.resolved = False

    def category_rows(self) -> list[list[Category | None]]:
        """Resolved categories indexed as rows[y][x]."""
        return [
            [self.cells[y * self.width + x].category for x in range(self.width)]
            for y in range(self.height)
        ]

    def violations(self, rules: AdjacencyRules) -> list[tuple[Position, Position]]:
        """
        List adjacent resolved pairs that break the adjacency rules.

        Only UP and RIGHT are checked so each edge is reported once.
        """
        broken: list[tuple[Position, Position]] = []
        for cell in self.cells:
            if not cell.resolved:
                continue
            for direction in (Direction.UP, Direction.RIGHT):
                neighbor = self.get_cell(cell.x + direction.dx, cell.y + direction.dy)
                if neighbor is None or not neighbor.resolved:
                    continue
                if not (
                    rules.allowed(cell.category, neighbor.category, direction)
                    and rules.allowed(neighbor.category, cell.category, direction.opposite)
                ):
                    broken.append((cell.position, neighbor.position))
        return broken


def create_grid(
    width: int,
    height: int,
    categories: Iterable[Category] = ALL_CATEGORIES,
) -> Grid:
    """Create a fully unresolved grid. Fails fast on malformed input."""
    return Grid(width, height, categories)
