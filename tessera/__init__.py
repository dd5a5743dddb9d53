"""Tessera - a Wave Function Collapse grid solver with a terminal viewer."""

__version__ = "0.1.0"
