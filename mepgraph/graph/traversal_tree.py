"""TraversalTree wrapper around networkx for network walks."""

from typing import Any, Iterator

import networkx as nx

from ..schema.models import Category
from .node_types import EdgeKind, TreeEdge


class TraversalTree:
    """The result of walking a network from its root.

    Wraps a networkx MultiDiGraph so that parallel physical connections
    between the same two components are kept. Tree edges form an
    arborescence rooted at the root; non-tree edges record the remaining
    connections to nodes that were already visited.
    """

    def __init__(
        self,
        root_id: str,
        network_id: str | None = None,
        network_name: str | None = None,
    ):
        """Initialize an empty traversal tree."""
        self._graph = nx.MultiDiGraph()
        self._root_id = root_id
        self._network_id = network_id
        self._network_name = network_name
        self._edges: list[TreeEdge] = []
        self._outgoing: dict[str, list[TreeEdge]] = {}
        self._parent_edge: dict[str, TreeEdge] = {}
        self._frozen = False

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    @property
    def root_id(self) -> str:
        return self._root_id

    @property
    def network_id(self) -> str | None:
        return self._network_id

    @property
    def network_name(self) -> str | None:
        return self._network_name

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_node(
        self,
        node_id: str,
        name: str | None = None,
        category: Category = Category.OTHER,
        **attrs: Any,
    ) -> str:
        """Add a discovered node.

        Args:
            node_id: The node identity.
            name: Human-readable name, defaults to the id.
            category: The component category.
            **attrs: Additional attributes for the node.

        Returns:
            The node ID.

        Raises:
            ValueError: If the node was already added.
            networkx.NetworkXError: If the tree is frozen.
        """
        if self._graph.has_node(node_id):
            raise ValueError(f"Node '{node_id}' is already in the tree")

        depth = 0 if node_id == self._root_id else None
        self._graph.add_node(
            node_id,
            name=name if name is not None else node_id,
            category=Category(category),
            depth=depth,
            **attrs,
        )
        self._outgoing[node_id] = []
        return node_id

    def add_edge(self, edge: TreeEdge) -> None:
        """Record a connection between two nodes already in the tree.

        Raises:
            ValueError: If an endpoint is missing, or a tree edge would give
                a node a second parent.
            networkx.NetworkXError: If the tree is frozen.
        """
        for node_id in (edge.parent, edge.child):
            if not self._graph.has_node(node_id):
                raise ValueError(f"Node '{node_id}' is not in the tree")

        if edge.kind == EdgeKind.TREE:
            if edge.child == self._root_id or edge.child in self._parent_edge:
                raise ValueError(f"Node '{edge.child}' already has a parent")

        self._graph.add_edge(
            edge.parent,
            edge.child,
            key=len(self._edges),
            kind=edge.kind,
            parent_port=edge.parent_port,
            child_port=edge.child_port,
            direction=edge.direction,
        )
        self._edges.append(edge)
        self._outgoing[edge.parent].append(edge)

        if edge.kind == EdgeKind.TREE:
            self._parent_edge[edge.child] = edge
            parent_depth = self._graph.nodes[edge.parent]["depth"]
            self._graph.nodes[edge.child]["depth"] = (
                None if parent_depth is None else parent_depth + 1
            )

    def freeze(self) -> "TraversalTree":
        """Make the tree read-only."""
        nx.freeze(self._graph)
        self._frozen = True
        return self

    # -------------------------------------------------------------------------
    # Counts
    # -------------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def tree_edge_count(self) -> int:
        return len(self._parent_edge)

    @property
    def non_tree_edge_count(self) -> int:
        return self.edge_count - self.tree_edge_count

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def has_node(self, node_id: str) -> bool:
        return self._graph.has_node(node_id)

    def nodes(self) -> list[str]:
        """Get node ids in discovery order."""
        return list(self._graph.nodes)

    def get_node(self, node_id: str) -> dict[str, Any] | None:
        """Get the attributes of a node, including its id."""
        if not self._graph.has_node(node_id):
            return None
        return {"id": node_id, **self._graph.nodes[node_id]}

    def edges(self) -> list[TreeEdge]:
        """Get all edges in recording order."""
        return list(self._edges)

    def tree_edges(self) -> list[TreeEdge]:
        return [e for e in self._edges if e.kind == EdgeKind.TREE]

    def non_tree_edges(self) -> list[TreeEdge]:
        return [e for e in self._edges if e.kind == EdgeKind.NON_TREE]

    def edges_from(self, node_id: str) -> list[TreeEdge]:
        """Get the edges recorded while expanding a node, in order."""
        return list(self._outgoing.get(node_id, []))

    def children(self, node_id: str) -> list[str]:
        """Get the child node ids of a node, in discovery order."""
        return [
            e.child for e in self._outgoing.get(node_id, []) if e.kind == EdgeKind.TREE
        ]

    def non_tree_edges_from(self, node_id: str) -> list[TreeEdge]:
        return [
            e
            for e in self._outgoing.get(node_id, [])
            if e.kind == EdgeKind.NON_TREE
        ]

    def parent_edge(self, node_id: str) -> TreeEdge | None:
        """Get the discovery edge of a node, None for the root."""
        return self._parent_edge.get(node_id)

    def parent(self, node_id: str) -> str | None:
        edge = self._parent_edge.get(node_id)
        return edge.parent if edge else None

    def depth(self, node_id: str) -> int | None:
        """Get the number of tree edges between the root and a node."""
        if not self._graph.has_node(node_id):
            return None
        return self._graph.nodes[node_id]["depth"]

    def leaves(self) -> list[str]:
        """Get nodes without children, in discovery order."""
        return [n for n in self._graph.nodes if not self.children(n)]

    def branch_nodes(self) -> list[str]:
        """Get nodes where the flow splits into more than one child."""
        return [n for n in self._graph.nodes if len(self.children(n)) > 1]

    def tree_view(self) -> nx.MultiDiGraph:
        """Get a read-only view restricted to tree edges."""
        graph = self._graph
        return nx.subgraph_view(
            graph,
            filter_edge=lambda u, v, k: graph.edges[u, v, k]["kind"] == EdgeKind.TREE,
        )

    def descendants(self, node_id: str) -> set[str]:
        """Get all nodes below a node in the tree."""
        return nx.descendants(self.tree_view(), node_id)

    def is_tree(self) -> bool:
        """Check that tree edges form an arborescence rooted at the root."""
        if not self._graph.has_node(self._root_id):
            return False
        view = self.tree_view()
        if view.in_degree(self._root_id) != 0:
            return False
        return nx.is_arborescence(view)

    def iter_connections(self) -> Iterator[tuple[str, str, EdgeKind]]:
        """Iterate over all recorded connections.

        Yields:
            Tuples of (parent, child, edge kind).
        """
        for edge in self._edges:
            yield edge.parent, edge.child, edge.kind

    def __repr__(self) -> str:
        return (
            f"TraversalTree(root={self._root_id!r}, nodes={self.node_count}, "
            f"edges={self.edge_count})"
        )
