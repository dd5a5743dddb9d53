"""
Default tileset for Tessera.

Three categories with a sand buffer between water and grass:

    water <-> sand <-> grass

Water and grass may never touch directly, so even purely local rules
produce shorelines.
"""

from ..core.category import Category
from .wfc import AdjacencyRules, make_bidirectional_rule


def create_default_rules() -> AdjacencyRules:
    """
    Create the default rule set with all adjacency rules defined.

    Sand is the hub: it may border anything.
    """
    rules = AdjacencyRules([Category.SAND, Category.WATER, Category.GRASS])

    make_bidirectional_rule(rules, Category.SAND, Category.SAND)
    make_bidirectional_rule(rules, Category.SAND, Category.WATER)
    make_bidirectional_rule(rules, Category.SAND, Category.GRASS)

    make_bidirectional_rule(rules, Category.WATER, Category.WATER)
    make_bidirectional_rule(rules, Category.GRASS, Category.GRASS)

    return rules


# Quick reference for the adjacency graph:
#
# sand:  [sand, water, grass]
# water: [sand, water]
# grass: [sand, grass]
