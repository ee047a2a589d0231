"""Compact JSON rendering of a traversal tree."""

import json
from collections import deque
from typing import Any, Literal

from ..graph.node_types import EdgeKind, TreeEdge
from ..graph.traversal_tree import TraversalTree
from ..schema.models import Category, Direction
from .errors import SerializationError

JsonShape = Literal["graph", "nested"]

# Deeper trees only fit the flat "graph" shape
NESTED_DEPTH_LIMIT = 200


def to_json_document(tree: TraversalTree, shape: JsonShape = "graph") -> str:
    """Render a traversal tree as a compact JSON string.

    Two shapes are supported:

    - "graph": a node list and an edge list, each edge tagged tree or
      non_tree.
    - "nested": each node holds its children in discovery order; non-tree
      connections appear among them as {"ref": ...} entries.

    Both are lossless, and identical trees give byte-identical output.

    Args:
        tree: The traversal tree to render.
        shape: The document shape.

    Returns:
        The JSON text.

    Raises:
        SerializationError: If the tree cannot be encoded.
    """
    if shape == "graph":
        data = _graph_document(tree)
    elif shape == "nested":
        data = _nested_document(tree)
    else:
        raise ValueError(f"Unknown JSON shape: {shape}")

    try:
        return json.dumps(data, separators=(",", ":"))
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Cannot encode tree as JSON: {e}") from e


def _network_header(tree: TraversalTree) -> dict[str, Any]:
    return {"id": tree.network_id, "name": tree.network_name}


def _node_entry(tree: TraversalTree, node_id: str) -> dict[str, Any]:
    data = tree.get_node(node_id)
    return {
        "id": node_id,
        "name": data["name"],
        "category": data["category"].value,
    }


def _graph_document(tree: TraversalTree) -> dict[str, Any]:
    return {
        "network": _network_header(tree),
        "root": tree.root_id,
        "nodes": [_node_entry(tree, node_id) for node_id in tree.nodes()],
        "edges": [
            {
                "parent": edge.parent,
                "child": edge.child,
                "parent_port": edge.parent_port,
                "child_port": edge.child_port,
                "kind": edge.kind.value,
                "direction": edge.direction.value,
            }
            for edge in tree.edges()
        ],
    }


def _nested_document(tree: TraversalTree) -> dict[str, Any]:
    for node_id in tree.nodes():
        if (tree.depth(node_id) or 0) > NESTED_DEPTH_LIMIT:
            raise SerializationError(
                f"Tree of network '{tree.network_id}' is deeper than "
                f"{NESTED_DEPTH_LIMIT} levels, use the graph shape",
                node_id,
            )

    root = _node_entry(tree, tree.root_id)
    root["children"] = []

    stack = [(tree.root_id, root)]
    while stack:
        node_id, entry = stack.pop()
        for edge in tree.edges_from(node_id):
            link = {
                "kind": edge.kind.value,
                "parent_port": edge.parent_port,
                "child_port": edge.child_port,
                "direction": edge.direction.value,
            }
            if edge.kind == EdgeKind.TREE:
                child = {**_node_entry(tree, edge.child), **link, "children": []}
                entry["children"].append(child)
                stack.append((edge.child, child))
            else:
                entry["children"].append({"ref": edge.child, **link})

    return {"network": _network_header(tree), "tree": root}


# -----------------------------------------------------------------------------
# Reading
# -----------------------------------------------------------------------------


def from_json_document(text: str) -> TraversalTree:
    """Rebuild a frozen traversal tree from either JSON shape.

    Args:
        text: Output of to_json_document.

    Returns:
        The reconstructed TraversalTree.

    Raises:
        SerializationError: If the text is not a valid tree document.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise SerializationError("JSON document is nested too deeply") from e

    if not isinstance(data, dict):
        raise SerializationError(
            f"Expected JSON object at root, got {type(data).__name__}"
        )

    try:
        if "edges" in data:
            tree = _read_graph_document(data)
        elif "tree" in data:
            tree = _read_nested_document(data)
        else:
            raise SerializationError("Document has neither 'edges' nor 'tree'")
    except (KeyError, TypeError, AttributeError) as e:
        raise SerializationError(f"Malformed tree document: {e!r}") from e

    if not tree.is_tree():
        raise SerializationError(
            f"Tree edges do not form a tree rooted at '{tree.root_id}'",
            tree.root_id,
        )
    return tree.freeze()


def _new_tree(data: dict, root_id: str) -> TraversalTree:
    network = data.get("network") or {}
    if not isinstance(network, dict):
        raise SerializationError(
            f"Expected JSON object for network, got {type(network).__name__}"
        )
    return TraversalTree(
        root_id, network_id=network.get("id"), network_name=network.get("name")
    )


def _add_node(tree: TraversalTree, entry: dict) -> None:
    node_id = entry["id"]
    try:
        tree.add_node(node_id, name=entry["name"], category=Category(entry["category"]))
    except ValueError as e:
        raise SerializationError(str(e), node_id) from e


def _add_edge(tree: TraversalTree, parent: str, child: str, entry: dict) -> None:
    try:
        tree.add_edge(
            TreeEdge(
                parent=parent,
                child=child,
                parent_port=entry["parent_port"],
                child_port=entry["child_port"],
                kind=EdgeKind(entry["kind"]),
                direction=Direction(entry["direction"]),
            )
        )
    except ValueError as e:
        raise SerializationError(str(e), child) from e


def _read_graph_document(data: dict) -> TraversalTree:
    tree = _new_tree(data, data["root"])
    for entry in data["nodes"]:
        _add_node(tree, entry)

    if not tree.has_node(tree.root_id):
        raise SerializationError(
            f"Root '{tree.root_id}' is missing from the node list", tree.root_id
        )

    for entry in data["edges"]:
        _add_edge(tree, entry["parent"], entry["child"], entry)
    return tree


def _read_nested_document(data: dict) -> TraversalTree:
    root = data["tree"]
    tree = _new_tree(data, root["id"])
    _add_node(tree, root)

    # Breadth-first, matching the order the edges were recorded in
    queue = deque([root])
    pending: list[tuple[str, str, dict]] = []
    while queue:
        entry = queue.popleft()
        for item in entry.get("children", []):
            if "ref" in item:
                pending.append((entry["id"], item["ref"], item))
            else:
                _add_node(tree, item)
                pending.append((entry["id"], item["id"], item))
                queue.append(item)

    for parent, child, item in pending:
        _add_edge(tree, parent, child, item)
    return tree
