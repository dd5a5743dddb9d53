"""TUI widgets for the Tessera viewer."""

from .grid_view import GridView, render_grid, get_cell_render
from .header import StatusHeader

__all__ = ["GridView", "render_grid", "get_cell_render", "StatusHeader"]
