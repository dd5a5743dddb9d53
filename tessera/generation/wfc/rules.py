"""
Adjacency rules for Wave Function Collapse.

The rule set is the category registry: the closed set of categories plus
the predicate saying which categories may sit next to each other in each
direction. This is the core data that drives constraint propagation.
"""

from __future__ import annotations

from collections.abc import Iterable

from ...core.category import Category
from ...core.types import Direction
from .errors import GridConfigurationError


class AdjacencyRules:
    """
    The fixed set of categories and the adjacency predicate between them.

    For each category and direction we store the set of categories allowed
    to lie in that direction. The predicate takes a direction even though
    symmetric rule sets ignore it, so directional tilesets can be expressed
    later without changing callers.
    """

    def __init__(self, categories: Iterable[Category]):
        """
        Create an empty rule set over the given categories.

        Args:
            categories: Categories in registry order (duplicates dropped)

        Raises:
            GridConfigurationError: If no categories are given
        """
        self.categories: tuple[Category, ...] = tuple(dict.fromkeys(categories))
        if not self.categories:
            raise GridConfigurationError("Rule set needs at least one category")

        self._allowed: dict[Category, dict[Direction, set[Category]]] = {
            category: {direction: set() for direction in Direction}
            for category in self.categories
        }

    def allow(self, category: Category, direction: Direction, neighbor: Category):
        """Allow `neighbor` to lie in `direction` from `category`."""
        for tile in (category, neighbor):
            if tile not in self._allowed:
                raise GridConfigurationError(f"Unknown category: {tile!r}")
        self._allowed[category][direction].add(neighbor)

    def allowed(self, a: Category, b: Category, direction: Direction) -> bool:
        """Whether `a` may be placed with `b` lying in `direction` from it."""
        return b in self._allowed.get(a, {}).get(direction, ())

    def get_allowed_neighbors(self, category: Category, direction: Direction) -> set[Category]:
        """Get all categories allowed in the given direction."""
        return set(self._allowed.get(category, {}).get(direction, ()))

    def ordered(self, domain: Iterable[Category]) -> list[Category]:
        """Return the members of `domain` in registry order."""
        members = set(domain)
        return [category for category in self.categories if category in members]


def make_bidirectional_rule(rules: AdjacencyRules, a: Category, b: Category):
    """
    Create a bidirectional adjacency rule: A and B can be neighbors in all directions.

    If A can have B above it, then B can have A below it, etc.
    """
    for direction in Direction:
        rules.allow(a, direction, b)
        rules.allow(b, direction.opposite, a)
