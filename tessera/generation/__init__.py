"""Grid generation for Tessera."""

from .tileset import create_default_rules
from .tilemap import generate_tilemap
from .controller import GenerationController

__all__ = [
    "create_default_rules",
    "generate_tilemap",
    "GenerationController",
]
