"""Main TUI application for the Tessera viewer.

Drives the solver from a Textual timer, one tick at a time, and forwards
the reset key to the controller as its one-shot reset request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Footer

from ...generation.wfc import SolverState
from .widgets import GridView, StatusHeader

if TYPE_CHECKING:
    from textual.timer import Timer

    from ...generation.controller import GenerationController
    from ...generation.wfc import Grid

logger = logging.getLogger(__name__)


class TesseraTUI(App):
    """Tessera solver viewer.

    Shows the grid as it collapses. Supports pausing, single-stepping and
    resetting to a fresh generation.
    """

    CSS = """
    StatusHeader {
        height: 1;
        background: $primary;
        color: $text;
        padding: 0 1;
    }

    GridView {
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "reset", "Reset"),
        Binding("space", "toggle_pause", "Pause"),
        Binding("n", "step_once", "Step"),
    ]

    def __init__(
        self,
        controller: "GenerationController",
        tick_interval: float = 0.02,
        steps_per_tick: int = 1,
    ):
        """Initialize TesseraTUI.

        Args:
            controller: Controller owning the current generation
            tick_interval: Seconds between automatic ticks
            steps_per_tick: Solver steps per automatic tick
        """
        super().__init__()
        self._controller = controller
        self._tick_interval = tick_interval
        self._steps_per_tick = steps_per_tick
        self._paused: bool = False
        self._timer: "Timer | None" = None

        self._controller.on_reset(self._on_grid_reset)

    @property
    def controller(self) -> "GenerationController":
        return self._controller

    @property
    def paused(self) -> bool:
        return self._paused

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield StatusHeader(id="header")
        yield GridView(self._controller.width, self._controller.height, id="grid")
        yield Footer()

    def on_mount(self) -> None:
        """Start the tick timer and draw the initial grid."""
        self._timer = self.set_interval(self._tick_interval, self._on_timer)
        self._refresh_views()

    def _on_timer(self) -> None:
        """Advance the solver by one tick unless paused or finished."""
        if self._paused or self._controller.state in (SolverState.COMPLETE, SolverState.STUCK):
            return
        self._controller.tick(steps=self._steps_per_tick)
        self._refresh_views()

    def _on_grid_reset(self, grid: "Grid") -> None:
        """Drop presentation state tied to the discarded grid."""
        try:
            self.query_one("#grid", GridView).clear()
        except NoMatches:
            return

    def _refresh_views(self) -> None:
        """Push controller state into the widgets."""
        controller = self._controller
        grid_view = self.query_one("#grid", GridView)
        grid_view.update_cells(controller.cells(), highlight=controller.solver.last_collapsed)

        header = self.query_one("#header", StatusHeader)
        header.update_state(
            generation=controller.generation,
            step=controller.step_count,
            resolved=(controller.grid.resolved_count, controller.width * controller.height),
            state=controller.state.name,
            paused=self._paused,
        )

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def action_reset(self) -> None:
        """Start a new generation."""
        self._controller.tick(reset_requested=True)
        self._refresh_views()

    def action_toggle_pause(self) -> None:
        """Pause or resume automatic ticking."""
        self._paused = not self._paused
        if self._timer is not None:
            if self._paused:
                self._timer.pause()
            else:
                self._timer.resume()
        self.query_one("#header", StatusHeader).update_state(paused=self._paused)

    def action_step_once(self) -> None:
        """Run a single solver step."""
        self._controller.tick(steps=1)
        self._refresh_views()


async def run_tui(
    controller: "GenerationController",
    tick_interval: float = 0.02,
    steps_per_tick: int = 1,
) -> None:
    """Run the TUI application.

    Args:
        controller: GenerationController instance
        tick_interval: Seconds between automatic ticks
        steps_per_tick: Solver steps per automatic tick
    """
    app = TesseraTUI(controller, tick_interval=tick_interval, steps_per_tick=steps_per_tick)
    await app.run_async()
