"""Nested XML rendering of a traversal tree."""

from pathlib import Path

from lxml import etree

from ..graph.node_types import EdgeKind, TreeEdge
from ..graph.traversal_tree import TraversalTree
from .errors import SerializationError


def _set(element: etree._Element, key: str, value, node_id: str | None) -> None:
    if value is None:
        return
    try:
        element.set(key, str(value))
    except ValueError as e:
        raise SerializationError(
            f"Cannot write {key}={value!r} to XML: {e}", node_id
        ) from e


def _node_element(
    parent: etree._Element,
    tree: TraversalTree,
    node_id: str,
    edge: TreeEdge | None = None,
) -> etree._Element:
    data = tree.get_node(node_id)
    element = etree.SubElement(parent, "node")
    _set(element, "id", node_id, node_id)
    _set(element, "name", data["name"], node_id)
    _set(element, "category", data["category"].value, node_id)

    # Discovery edge, absent on the root
    if edge is not None:
        _set(element, "port", edge.child_port, node_id)
        _set(element, "parent-port", edge.parent_port, node_id)
        _set(element, "direction", edge.direction.value, node_id)
    return element


def _ref_element(parent: etree._Element, edge: TreeEdge) -> etree._Element:
    element = etree.SubElement(parent, "ref")
    _set(element, "id", edge.child, edge.child)
    _set(element, "port", edge.parent_port, edge.parent)
    _set(element, "peer-port", edge.child_port, edge.child)
    _set(element, "direction", edge.direction.value, edge.parent)
    _set(element, "kind", edge.kind.value, edge.parent)
    return element


def build_xml_element(tree: TraversalTree) -> etree._Element:
    """Build the XML element tree for a traversal tree.

    The document element is <network>; the root node is its single <node>
    child and every tree edge nests the child's <node> inside its parent's.
    Non-tree edges become <ref> elements inside the node that discovered
    them, in the order they were recorded.

    Args:
        tree: The traversal tree to render.

    Returns:
        The <network> element.

    Raises:
        SerializationError: If an identity or name cannot be written as XML.
    """
    document = etree.Element("network")
    _set(document, "id", tree.network_id, None)
    _set(document, "name", tree.network_name, None)
    _set(document, "root", tree.root_id, tree.root_id)
    _set(document, "nodes", tree.node_count, None)
    _set(document, "edges", tree.edge_count, None)

    # Explicit stack; networks can be deeper than the recursion limit
    stack = [(tree.root_id, _node_element(document, tree, tree.root_id))]
    while stack:
        node_id, element = stack.pop()
        for edge in tree.edges_from(node_id):
            if edge.kind == EdgeKind.TREE:
                child = _node_element(element, tree, edge.child, edge)
                stack.append((edge.child, child))
            else:
                _ref_element(element, edge)

    return document


def to_xml_document(tree: TraversalTree) -> str:
    """Render a traversal tree as a pretty-printed XML document.

    Raises:
        SerializationError: If an identity or name cannot be written as XML.
    """
    document = build_xml_element(tree)
    return etree.tostring(
        document,
        encoding="UTF-8",
        xml_declaration=True,
        pretty_print=True,
    ).decode("utf-8")


def write_xml_document(tree: TraversalTree, path: str | Path) -> Path:
    """Write the XML document for a traversal tree to a file.

    Args:
        tree: The traversal tree to render.
        path: Destination file; it is overwritten if it exists.

    Returns:
        The path written.

    Raises:
        SerializationError: If an identity or name cannot be written as XML.
    """
    path = Path(path)
    document = build_xml_element(tree)
    etree.ElementTree(document).write(
        str(path),
        encoding="UTF-8",
        xml_declaration=True,
        pretty_print=True,
    )
    return path
