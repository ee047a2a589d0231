"""Tests for network models."""

import pytest
from pydantic import ValidationError

from mepgraph.schema.models import (
    Category,
    Direction,
    Network,
    NetworkSet,
    Node,
    PeerRef,
    Port,
)


class TestPeerRef:
    def test_shorthand(self):
        ref = PeerRef.model_validate("AHU-1.2")
        assert ref.node == "AHU-1"
        assert ref.port == "2"

    def test_shorthand_uses_last_dot(self):
        ref = PeerRef.model_validate("zone.3.A")
        assert ref.node == "zone.3"
        assert ref.port == "A"

    def test_shorthand_without_port(self):
        with pytest.raises(ValidationError):
            PeerRef.model_validate("AHU-1")

    def test_integer_parts(self):
        ref = PeerRef.model_validate({"node": 7, "port": 2})
        assert str(ref) == "7.2"


class TestPort:
    def test_defaults(self):
        port = Port(id="1")
        assert port.direction == Direction.BIDIRECTIONAL
        assert port.peer is None
        assert not port.is_connected

    def test_integer_id(self):
        port = Port.model_validate({"id": 3})
        assert port.id == "3"

    def test_direction_aliases(self):
        assert Port.model_validate({"id": "a", "direction": "inbound"}).direction == Direction.IN
        assert Port.model_validate({"id": "b", "direction": "OUTBOUND"}).direction == Direction.OUT
        assert (
            Port.model_validate({"id": "c", "direction": "undirected"}).direction
            == Direction.BIDIRECTIONAL
        )

    def test_unknown_direction(self):
        with pytest.raises(ValidationError):
            Port.model_validate({"id": "a", "direction": "sideways"})


class TestNode:
    def test_name_defaults_to_id(self):
        node = Node.model_validate({"id": "T-1"})
        assert node.name == "T-1"
        assert node.category == Category.OTHER

    def test_port_mapping_shorthand(self):
        node = Node.model_validate(
            {
                "id": "T-1",
                "category": "Fitting",
                "ports": {1: "D-1.2", 2: {"direction": "out"}, 3: None},
            }
        )
        assert node.category == Category.FITTING
        assert [p.id for p in node.ports] == ["1", "2", "3"]
        assert node.get_port("1").peer == PeerRef(node="D-1", port="2")
        assert node.get_port("2").direction == Direction.OUT
        assert node.get_port("3").peer is None

    def test_duplicate_port(self):
        with pytest.raises(ValidationError) as exc_info:
            Node.model_validate({"id": "T", "ports": [{"id": "1"}, {"id": 1}]})
        assert "Duplicate port" in str(exc_info.value)

    def test_sorted_ports_numeric(self):
        node = Node.model_validate(
            {"id": "X", "ports": [{"id": "10"}, {"id": "2"}, {"id": "b"}, {"id": "a"}]}
        )
        assert [p.id for p in node.sorted_ports()] == ["2", "10", "a", "b"]

    def test_connected_and_open_ports(self):
        node = Node(
            id="X",
            ports=[Port(id="2", peer=PeerRef(node="Y", port="1")), Port(id="1")],
        )
        assert [p.id for p in node.connected_ports()] == ["2"]
        assert [p.id for p in node.open_ports()] == ["1"]


class TestNetwork:
    def test_node_mapping_shorthand(self):
        network = Network.model_validate(
            {
                "id": 7,
                "nodes": {
                    "A": {"ports": {1: "B.1"}},
                    "B": {"ports": {1: "A.1"}},
                },
            }
        )
        assert network.id == "7"
        assert network.name == "7"
        assert network.get_all_node_ids() == ["A", "B"]

    def test_peer_of(self, loop_network):
        e1 = loop_network.get_node("E1")
        port = e1.get_port("portA")
        assert loop_network.peer_of(e1, port) is loop_network.get_node("F1")
        assert loop_network.peer_of(e1, Port(id="open")) is None

    def test_connection_count(self, loop_network, tee_network):
        assert loop_network.connection_count() == 3
        assert tee_network.connection_count() == 3

    def test_duplicate_node(self):
        with pytest.raises(ValidationError) as exc_info:
            Network.model_validate({"id": "N", "nodes": [{"id": "A"}, {"id": "A"}]})
        assert "Duplicate node" in str(exc_info.value)

    def test_undefined_peer_node(self):
        with pytest.raises(ValidationError) as exc_info:
            Network.model_validate(
                {"id": "N", "nodes": [{"id": "A", "ports": {1: "Z.1"}}]}
            )
        assert "undefined node" in str(exc_info.value)

    def test_undefined_peer_port(self):
        with pytest.raises(ValidationError) as exc_info:
            Network.model_validate(
                {
                    "id": "N",
                    "nodes": [
                        {"id": "A", "ports": {1: "B.9"}},
                        {"id": "B", "ports": {1: "A.1"}},
                    ],
                }
            )
        assert "undefined port" in str(exc_info.value)

    def test_asymmetric_peer(self):
        with pytest.raises(ValidationError) as exc_info:
            Network.model_validate(
                {
                    "id": "N",
                    "nodes": [
                        {"id": "A", "ports": {1: "B.1"}},
                        {"id": "B", "ports": {1: None}},
                    ],
                }
            )
        assert "not mutual" in str(exc_info.value)

    def test_port_connected_to_itself(self):
        with pytest.raises(ValidationError) as exc_info:
            Network.model_validate(
                {"id": "N", "nodes": [{"id": "A", "ports": {1: "A.1"}}]}
            )
        assert "connected to itself" in str(exc_info.value)

    def test_two_ports_of_one_node(self):
        network = Network.model_validate(
            {"id": "N", "nodes": [{"id": "A", "ports": {1: "A.2", 2: "A.1"}}]}
        )
        assert network.connection_count() == 1

    def test_peer_pointing_elsewhere(self):
        with pytest.raises(ValidationError):
            Network.model_validate(
                {
                    "id": "N",
                    "nodes": [
                        {"id": "A", "ports": {1: "B.1"}},
                        {"id": "B", "ports": {1: "C.1"}},
                        {"id": "C", "ports": {1: "B.1"}},
                    ],
                }
            )


class TestNetworkSet:
    def test_mapping_shorthand(self):
        network_set = NetworkSet.model_validate(
            {"networks": {"SA-1": {"nodes": [{"id": "A"}]}, "HW-1": {}}}
        )
        assert [n.id for n in network_set.networks] == ["SA-1", "HW-1"]
        assert network_set.get_network("HW-1").nodes == []
        assert network_set.get_network("missing") is None

    def test_duplicate_network(self):
        with pytest.raises(ValidationError):
            NetworkSet.model_validate({"networks": [{"id": "A"}, {"id": "A"}]})
