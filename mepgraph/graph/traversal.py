"""Breadth-first traversal of a network into a TraversalTree."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from ..schema.models import Category, Network, Node
from .errors import (
    DegenerateNetworkError,
    InvalidRootError,
    TraversalBudgetError,
    TraversalError,
)
from .node_types import EdgeKind, TreeEdge
from .traversal_tree import TraversalTree
from .visited import VisitedSet

logger = logging.getLogger(__name__)


@dataclass
class TraversalOptions:
    """Policy knobs for a traversal.

    Attributes:
        allow_single_node: Return a one-node tree when the root has no
            connections. When False, raise DegenerateNetworkError instead.
        max_nodes: Optional cap on the number of discovered nodes.
    """

    allow_single_node: bool = True
    max_nodes: int | None = None

    def __post_init__(self):
        if self.max_nodes is not None and self.max_nodes < 1:
            raise ValueError("max_nodes must be at least 1")


@dataclass
class TraversalOutcome:
    """Per-network result of a batch traversal."""

    network: Network
    tree: TraversalTree | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def find_root(network: Network) -> Node:
    """Pick the node a traversal of the network starts from.

    Preference order: the designated root, the first equipment node, the
    first node with an open (unconnected) port, the first node.

    Args:
        network: The network to inspect.

    Returns:
        The root node.

    Raises:
        InvalidRootError: If the network is empty or its designated root
            does not exist.
    """
    if network.root is not None:
        node = network.get_node(network.root)
        if node is None:
            raise InvalidRootError(
                f"Root '{network.root}' is not part of network '{network.id}'",
                root_id=network.root,
                network_id=network.id,
            )
        return node

    if not network.nodes:
        raise InvalidRootError(
            f"Network '{network.id}' has no nodes", network_id=network.id
        )

    for node in network.nodes:
        if node.category == Category.EQUIPMENT:
            return node

    for node in network.nodes:
        if node.open_ports():
            return node

    return network.nodes[0]


def _resolve_root(network: Network, root: Node | str | None) -> Node:
    if root is None:
        return find_root(network)

    root_id = root.id if isinstance(root, Node) else root
    node = network.get_node(root_id) if isinstance(root_id, str) else None

    if node is None or (isinstance(root, Node) and node is not root):
        raise InvalidRootError(
            f"Root '{root_id}' is not part of network '{network.id}'",
            root_id=root_id if isinstance(root_id, str) else None,
            network_id=network.id,
        )
    return node


def traverse(
    network: Network,
    root: Node | str | None = None,
    options: TraversalOptions | None = None,
) -> TraversalTree:
    """Walk a network from its root and record how it is connected.

    Ports of each node are inspected in ascending port identity. A peer seen
    for the first time becomes a child through a tree edge; a peer already
    visited is linked through a non-tree edge and not expanded again. Each
    physical connection is recorded once, from the endpoint expanded first.

    Args:
        network: The network to walk.
        root: The starting node or its id. Resolved with find_root when None.
        options: Traversal policy, defaults to TraversalOptions().

    Returns:
        A frozen TraversalTree.

    Raises:
        InvalidRootError: If the root is missing or not part of the network.
        DegenerateNetworkError: If the root has no connections and
            options.allow_single_node is False.
        TraversalBudgetError: If more than options.max_nodes nodes are found.
    """
    options = options or TraversalOptions()
    start = _resolve_root(network, root)

    if not start.connected_ports() and not options.allow_single_node:
        raise DegenerateNetworkError(
            f"Root '{start.id}' of network '{network.id}' has no connections",
            network_id=network.id,
        )

    logger.debug("Traversing network %s from root %s", network.id, start.id)

    visited = VisitedSet()
    tree = TraversalTree(start.id, network_id=network.id, network_name=network.name)
    recorded: set[frozenset[tuple[str, str]]] = set()

    visited.add(start.id)
    tree.add_node(start.id, name=start.name, category=start.category)
    queue = deque([start])

    while queue:
        current = queue.popleft()

        for port in current.connected_ports():
            link = frozenset({(current.id, port.id), (port.peer.node, port.peer.port)})
            if link in recorded:
                continue  # Already recorded from the far end

            peer = network.peer_of(current, port)
            if peer is None:
                logger.debug(
                    "Port %s.%s points outside network %s",
                    current.id,
                    port.id,
                    network.id,
                )
                continue
            recorded.add(link)

            if peer.id in visited:
                tree.add_edge(
                    TreeEdge(
                        parent=current.id,
                        child=peer.id,
                        parent_port=port.id,
                        child_port=port.peer.port,
                        kind=EdgeKind.NON_TREE,
                        direction=port.direction,
                    )
                )
                continue

            if options.max_nodes is not None and len(visited) >= options.max_nodes:
                raise TraversalBudgetError(
                    f"Network '{network.id}' has more than {options.max_nodes} "
                    f"reachable nodes",
                    limit=options.max_nodes,
                    network_id=network.id,
                )

            visited.add(peer.id)
            tree.add_node(peer.id, name=peer.name, category=peer.category)
            tree.add_edge(
                TreeEdge(
                    parent=current.id,
                    child=peer.id,
                    parent_port=port.id,
                    child_port=port.peer.port,
                    kind=EdgeKind.TREE,
                    direction=port.direction,
                )
            )
            queue.append(peer)

    logger.debug(
        "Network %s: %d nodes, %d tree edges, %d non-tree edges",
        network.id,
        tree.node_count,
        tree.tree_edge_count,
        tree.non_tree_edge_count,
    )
    return tree.freeze()


def traverse_all(
    networks: Iterable[Network],
    options: TraversalOptions | None = None,
) -> list[TraversalOutcome]:
    """Traverse several networks independently.

    A network that fails is reported in its outcome and does not stop the
    others.

    Args:
        networks: The networks to walk.
        options: Traversal policy shared by every walk.

    Returns:
        One TraversalOutcome per network, in input order.
    """
    outcomes = []
    for network in networks:
        try:
            tree = traverse(network, options=options)
        except TraversalError as e:
            logger.warning("Skipping network %s: %s", network.id, e)
            outcomes.append(TraversalOutcome(network=network, error=e))
            continue
        outcomes.append(TraversalOutcome(network=network, tree=tree))
    return outcomes
