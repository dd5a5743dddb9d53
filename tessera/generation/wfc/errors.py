"""Exceptions raised by the WFC package."""


class WFCError(Exception):
    """Base exception for WFC errors."""

    pass


class GridConfigurationError(WFCError, ValueError):
    """Grid or rule set cannot be built from the given arguments."""

    pass
