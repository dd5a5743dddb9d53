"""Header widget for the Tessera TUI.

Shows generation progress: generation number, steps, resolved cells, state.
"""

from __future__ import annotations

from textual.widgets import Static
from textual.reactive import reactive


class StatusHeader(Static):
    """Header widget showing solver state."""

    generation: reactive[int] = reactive(1)
    step: reactive[int] = reactive(0)
    resolved: reactive[str] = reactive("0/0")
    state: reactive[str] = reactive("RUNNING")
    paused: reactive[bool] = reactive(False)

    def render(self) -> str:
        """Render the header."""
        parts = [
            "Tessera",
            f"Generation: {self.generation}",
            f"Step: {self.step}",
            f"Resolved: {self.resolved}",
            f"[{self.state}]",
        ]

        if self.paused:
            parts.append("PAUSED")

        return " | ".join(parts)

    def update_state(
        self,
        generation: int | None = None,
        step: int | None = None,
        resolved: tuple[int, int] | None = None,
        state: str | None = None,
        paused: bool | None = None,
    ) -> None:
        """Update header state.

        Args:
            generation: Current generation number
            step: Steps taken in this generation
            resolved: (resolved, total) cell counts
            state: Solver state name
            paused: Whether the timer is paused
        """
        if generation is not None:
            self.generation = generation
        if step is not None:
            self.step = step
        if resolved is not None:
            self.resolved = f"{resolved[0]}/{resolved[1]}"
        if state is not None:
            self.state = state
        if paused is not None:
            self.paused = paused
