"""Core domain types for Tessera.

Pure values with no I/O: grid geometry and tile categories.

Usage:
    from tessera.core import Position, Direction, Category
"""

# Types
from .types import Position, Direction

# Categories
from .category import (
    Category,
    CategoryProperties,
    CATEGORY_DEFAULTS,
    ALL_CATEGORIES,
    get_color,
    get_symbol,
    get_style,
)

__all__ = [
    "Position",
    "Direction",
    "Category",
    "CategoryProperties",
    "CATEGORY_DEFAULTS",
    "ALL_CATEGORIES",
    "get_color",
    "get_symbol",
    "get_style",
]
