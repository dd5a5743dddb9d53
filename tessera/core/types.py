"""Foundational types for Tessera.

This module defines the geometry used throughout the system:
- Direction: The four axis-aligned neighbour relations
- Position: Grid coordinates (x, y)
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Direction(Enum):
    """Axis-aligned neighbour directions. There is no diagonal relation."""

    UP = "up"
    DOWN = "down"
    RIGHT = "right"
    LEFT = "left"

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (dx, dy) offset for this direction.

        Coordinate system: x increases rightward, y increases upward.
        """
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]

    @property
    def dx(self) -> int:
        return self.offset[0]

    @property
    def dy(self) -> int:
        return self.offset[1]


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.LEFT: (-1, 0),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.RIGHT: Direction.LEFT,
    Direction.LEFT: Direction.RIGHT,
}


class Position(NamedTuple):
    """A position in the grid.

    Coordinates use standard Cartesian orientation:
    - x increases to the right
    - y increases upward
    - (0, 0) is the bottom-left corner of the grid
    """

    x: int
    y: int

    def __add__(self, other: object) -> Position:
        """Add a direction offset or tuple to this position."""
        if isinstance(other, Direction):
            dx, dy = other.offset
            return Position(self.x + dx, self.y + dy)
        if isinstance(other, tuple) and len(other) == 2:
            return Position(self.x + other[0], self.y + other[1])
        return NotImplemented

    def direction_to(self, other: Position) -> Direction | None:
        """Get the direction of an adjacent position, or None if not adjacent."""
        for direction in Direction:
            if self + direction == other:
                return direction
        return None

    def neighbors(self) -> dict[Direction, Position]:
        """Get all adjacent positions keyed by direction."""
        return {d: self + d for d in Direction}

    def in_bounds(self, width: int, height: int) -> bool:
        """Check if position is within grid bounds (0 to width-1, 0 to height-1)."""
        return 0 <= self.x < width and 0 <= self.y < height
