"""Tile categories for Tessera.

The solver only cares about category identity. Colors and symbols live in a
separate lookup table for whatever presentation layer consumes the grid.
"""

from __future__ import annotations

from enum import Enum
from typing import TypedDict


class Category(Enum):
    """Tile categories a cell may resolve to.

    Declaration order is the registry order.
    """

    SAND = "sand"
    WATER = "water"
    GRASS = "grass"


class CategoryProperties(TypedDict):
    """Presentation properties for a category."""

    color: tuple[int, int, int]
    symbol: str
    style: str


CATEGORY_DEFAULTS: dict[Category, CategoryProperties] = {
    Category.SAND: {
        "color": (230, 204, 128),
        "symbol": ":",
        "style": "yellow",
    },
    Category.WATER: {
        "color": (51, 102, 230),
        "symbol": "≈",
        "style": "blue",
    },
    Category.GRASS: {
        "color": (51, 204, 77),
        "symbol": "\"",
        "style": "green",
    },
}

ALL_CATEGORIES: tuple[Category, ...] = tuple(Category)


def get_color(category: Category) -> tuple[int, int, int]:
    """Get the RGB display color for a category."""
    return CATEGORY_DEFAULTS[category]["color"]


def get_symbol(category: Category) -> str:
    """Get the terminal symbol for a category."""
    return CATEGORY_DEFAULTS.get(category, {}).get("symbol", "?")


def get_style(category: Category) -> str:
    """Get the rich style string for a category."""
    return CATEGORY_DEFAULTS.get(category, {}).get("style", "white")
