"""Graph layer for walking networks into traversal trees."""

from .errors import (
    DegenerateNetworkError,
    InvalidRootError,
    TraversalBudgetError,
    TraversalError,
)
from .node_types import EdgeKind, TreeEdge
from .traversal import (
    TraversalOptions,
    TraversalOutcome,
    find_root,
    traverse,
    traverse_all,
)
from .traversal_tree import TraversalTree
from .visited import VisitedSet

__all__ = [
    "DegenerateNetworkError",
    "InvalidRootError",
    "TraversalBudgetError",
    "TraversalError",
    "EdgeKind",
    "TreeEdge",
    "TraversalOptions",
    "TraversalOutcome",
    "find_root",
    "traverse",
    "traverse_all",
    "TraversalTree",
    "VisitedSet",
]
