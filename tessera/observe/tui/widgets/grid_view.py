"""Grid view widget for the Tessera TUI.

Renders the solver grid: resolved cells as their category symbol, unresolved
cells as their remaining entropy.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.text import Text
from textual.widget import Widget

from ....core.category import get_style, get_symbol
from ....core.types import Position
from ....generation.wfc import CellSnapshot


EMPTY_RENDER: tuple[str, str] = ("!", "bold red")


def get_cell_render(cell: CellSnapshot) -> tuple[str, str]:
    """Get (symbol, style) for a cell."""
    category = cell.category
    if category is not None:
        return (get_symbol(category), get_style(category))
    if not cell.domain:
        return EMPTY_RENDER
    return (str(cell.entropy), "bright_black")


def render_grid(
    cells: Iterable[CellSnapshot],
    width: int,
    height: int,
    highlight: Position | None = None,
) -> Text:
    """Render cells as rich Text, highest row first.

    Args:
        cells: Cell snapshots (any order)
        width: Grid width in cells
        height: Grid height in cells
        highlight: Position to draw in reverse video (e.g. last collapse)
    """
    lookup = {cell.position: cell for cell in cells}

    result = Text()
    for y in range(height - 1, -1, -1):
        for x in range(width):
            cell = lookup.get(Position(x, y))
            if cell is None:
                symbol, style = (" ", "")
            else:
                symbol, style = get_cell_render(cell)
            if highlight == (x, y):
                style = f"reverse {style}".strip()
            result.append(symbol, style=style)
            result.append(" ")  # Spacing between cells
        if y > 0:
            result.append("\n")

    return result


class GridView(Widget):
    """Widget that renders the whole solver grid."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ):
        """Initialize GridView.

        Args:
            width: Grid width in cells
            height: Grid height in cells
            name: Widget name
            id: Widget ID
            classes: CSS classes
        """
        super().__init__(name=name, id=id, classes=classes)
        self.grid_width = width
        self.grid_height = height
        self._cells: list[CellSnapshot] = []
        self._highlight: Position | None = None

    def update_cells(self, cells: list[CellSnapshot], highlight: Position | None = None) -> None:
        """Replace the cached cells and redraw."""
        self._cells = cells
        self._highlight = highlight
        self.refresh()

    def clear(self) -> None:
        """Drop cached cells (after a reset)."""
        self._cells = []
        self._highlight = None
        self.refresh()

    def render(self) -> Text:
        """Render the grid view."""
        return render_grid(self._cells, self.grid_width, self.grid_height, self._highlight)
