"""Wave Function Collapse solver core."""

from .errors import WFCError, GridConfigurationError
from .rules import AdjacencyRules, make_bidirectional_rule
from .grid import Grid, Cell, CellSnapshot, create_grid
from .solver import WFCSolver, SolverState, ContradictionPolicy, RandomSource

__all__ = [
    "WFCError",
    "GridConfigurationError",
    "AdjacencyRules",
    "make_bidirectional_rule",
    "Grid",
    "Cell",
    "CellSnapshot",
    "create_grid",
    "WFCSolver",
    "SolverState",
    "ContradictionPolicy",
    "RandomSource",
]
