"""Edge type definitions for the traversal tree."""

from dataclasses import dataclass
from enum import Enum

from ..schema.models import Direction


class EdgeKind(str, Enum):
    """Kinds of edges in the traversal tree."""

    TREE = "tree"  # Discovery edge, parent -> first-reached child
    NON_TREE = "non_tree"  # Connection to an already visited node


@dataclass(frozen=True)
class TreeEdge:
    """One physical connection recorded during a traversal."""

    parent: str
    child: str
    parent_port: str
    child_port: str
    kind: EdgeKind = EdgeKind.TREE
    direction: Direction = Direction.BIDIRECTIONAL

    @property
    def is_tree(self) -> bool:
        return self.kind == EdgeKind.TREE
