"""Shared fixtures for tests."""

from pathlib import Path

import networkx as nx
import pytest

from mepgraph.graph.traversal import traverse
from mepgraph.schema.loader import parse_networks_from_string
from mepgraph.schema.models import Network


def _network_from_links(
    network_id: str,
    nodes: dict[str, str],
    links: list[tuple[str, str, str, str]],
    root: str | None = None,
) -> Network:
    """Build a network from (node, port, peer node, peer port) links."""
    ports: dict[str, list[dict]] = {node_id: [] for node_id in nodes}
    for node, port, peer_node, peer_port in links:
        ports[node].append({"id": port, "peer": f"{peer_node}.{peer_port}"})
        ports[peer_node].append({"id": peer_port, "peer": f"{node}.{port}"})

    return Network.model_validate(
        {
            "id": network_id,
            "root": root,
            "nodes": [
                {"id": node_id, "category": category, "ports": ports[node_id]}
                for node_id, category in nodes.items()
            ],
        }
    )


@pytest.fixture
def examples_dir() -> Path:
    """Return the path to the examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def make_network():
    """Return a factory building networks from explicit links."""
    return _network_from_links


@pytest.fixture
def network_from_graph():
    """Return a factory turning an undirected networkx graph into a network.

    Each edge gets a fresh port on both endpoints, numbered per node.
    """

    def factory(graph: nx.Graph, network_id: str = "G", root=None) -> Network:
        counters: dict = {node: 0 for node in graph.nodes}
        links = []
        for u, v in graph.edges():
            counters[u] += 1
            counters[v] += 1
            links.append((str(u), str(counters[u]), str(v), str(counters[v])))
        nodes = {str(node): "fitting" for node in graph.nodes}
        return _network_from_links(network_id, nodes, links, root=root)

    return factory


@pytest.fixture
def loop_network(make_network) -> Network:
    """Three components in a single loop back to the equipment."""
    return make_network(
        "LOOP",
        {"E1": "equipment", "F1": "fitting", "F2": "fitting"},
        [
            ("E1", "portA", "F1", "portX"),
            ("F1", "portY", "F2", "portZ"),
            ("F2", "portW", "E1", "portB"),
        ],
        root="E1",
    )


@pytest.fixture
def tee_network(make_network) -> Network:
    """A tee with three peers, ports declared out of order."""
    return make_network(
        "TEE",
        {"T": "fitting", "C": "segment", "A": "segment", "B": "segment"},
        [
            ("T", "3", "C", "1"),
            ("T", "1", "A", "1"),
            ("T", "2", "B", "1"),
        ],
        root="T",
    )


@pytest.fixture
def single_node_network() -> Network:
    return Network.model_validate(
        {
            "id": "LONE",
            "nodes": [
                {
                    "id": "FCU-9",
                    "name": "Fan Coil Unit 9",
                    "category": "equipment",
                    "ports": [{"id": "1", "direction": "out"}],
                }
            ],
        }
    )


@pytest.fixture
def hvac_yaml(examples_dir) -> str:
    return (examples_dir / "hvac_systems.yaml").read_text(encoding="utf-8")


@pytest.fixture
def hvac_networks(hvac_yaml):
    return parse_networks_from_string(hvac_yaml)


@pytest.fixture
def supply_air(hvac_networks) -> Network:
    return hvac_networks.get_network("101")


@pytest.fixture
def hot_water(hvac_networks) -> Network:
    return hvac_networks.get_network("202")


@pytest.fixture
def loop_tree(loop_network):
    return traverse(loop_network)


@pytest.fixture
def hot_water_tree(hot_water):
    return traverse(hot_water)
