"""Textual viewer for Tessera."""

from .app import TesseraTUI, run_tui

__all__ = ["TesseraTUI", "run_tui"]
