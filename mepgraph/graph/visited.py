"""Identity-keyed record of nodes already reached by a traversal."""

from typing import Iterator


class VisitedSet:
    """Nodes discovered so far, in discovery order.

    Grows monotonically; a node id is only ever added once.
    """

    def __init__(self):
        self._order: dict[str, int] = {}

    def add(self, node_id: str) -> bool:
        """Mark a node visited.

        Returns:
            True if the node was not visited before.
        """
        if node_id in self._order:
            return False
        self._order[node_id] = len(self._order)
        return True

    def position(self, node_id: str) -> int | None:
        """Get the discovery index of a node, or None if unvisited."""
        return self._order.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._order

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)
