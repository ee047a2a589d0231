"""Pydantic models for MEP networks."""

from enum import Enum
from functools import cached_property
from typing import Iterator, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class Category(str, Enum):
    """Category tag of a network component."""

    EQUIPMENT = "equipment"
    FITTING = "fitting"
    SEGMENT = "segment"
    TERMINAL = "terminal"
    ACCESSORY = "accessory"
    OTHER = "other"


class Direction(str, Enum):
    """Flow direction of a port."""

    IN = "in"
    OUT = "out"
    BIDIRECTIONAL = "bidirectional"


_DIRECTION_ALIASES = {
    "inbound": "in",
    "outbound": "out",
    "undirected": "bidirectional",
    "bi": "bidirectional",
}


def _as_id(value):
    """Normalize integer identities to strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


def port_sort_key(port_id: str) -> tuple[int, int, str]:
    """Sort key giving ascending port identity.

    Purely numeric identities compare numerically and sort before the rest,
    which compare lexically.
    """
    if port_id.isdigit():
        return (0, int(port_id), port_id)
    return (1, 0, port_id)


class PeerRef(BaseModel):
    """Reference to the port on the far side of a physical connection."""

    node: str
    port: str

    @model_validator(mode="before")
    @classmethod
    def normalize_peer(cls, data):
        """Accept "NODE.PORT" shorthand."""
        if isinstance(data, str):
            node, sep, port = data.rpartition(".")
            if not sep or not node or not port:
                raise ValueError(f"Peer reference '{data}' must look like NODE.PORT")
            return {"node": node, "port": port}
        if isinstance(data, dict):
            data = dict(data)
            for key in ("node", "port"):
                if key in data:
                    data[key] = _as_id(data[key])
        return data

    def __str__(self) -> str:
        return f"{self.node}.{self.port}"


class Port(BaseModel):
    """A connection point on a node."""

    id: str
    direction: Direction = Direction.BIDIRECTIONAL
    peer: PeerRef | None = None

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value):
        """Accept the long direction names."""
        if isinstance(value, str):
            value = value.lower()
            return _DIRECTION_ALIASES.get(value, value)
        return value

    @property
    def is_connected(self) -> bool:
        return self.peer is not None


class Node(BaseModel):
    """A physical component: equipment, fitting or segment."""

    id: str
    name: str = ""  # Defaults to the id
    category: Category = Category.OTHER
    ports: list[Port] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_node(cls, data):
        """Normalize ids and the port mapping shorthand."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["id"] = _as_id(data.get("id"))

        if not data.get("name") and data.get("id") is not None:
            data["name"] = str(data["id"])

        # {A: {peer: X.1}, B: {...}} -> [{id: A, peer: X.1}, ...]
        ports = data.get("ports")
        if isinstance(ports, dict):
            normalized = []
            for port_id, port_data in ports.items():
                if port_data is None:
                    port_data = {}
                elif isinstance(port_data, str):
                    port_data = {"peer": port_data}
                normalized.append({**port_data, "id": port_id})
            data["ports"] = normalized

        if isinstance(data.get("category"), str):
            data["category"] = data["category"].lower()

        return data

    @model_validator(mode="after")
    def check_unique_ports(self) -> "Node":
        seen: set[str] = set()
        for port in self.ports:
            if port.id in seen:
                raise ValueError(f"Duplicate port '{port.id}' on node '{self.id}'")
            seen.add(port.id)
        return self

    def get_port(self, port_id: str) -> Port | None:
        """Get a port by id."""
        for port in self.ports:
            if port.id == port_id:
                return port
        return None

    def sorted_ports(self) -> list[Port]:
        """Get ports in ascending port identity."""
        return sorted(self.ports, key=lambda p: port_sort_key(p.id))

    def connected_ports(self) -> list[Port]:
        """Get ports that have a peer, in ascending port identity."""
        return [p for p in self.sorted_ports() if p.is_connected]

    def open_ports(self) -> list[Port]:
        """Get ports with no peer."""
        return [p for p in self.ports if not p.is_connected]


class Network(BaseModel):
    """A mechanical or piping system of connected components."""

    id: str
    name: str = ""
    kind: Literal["mechanical", "piping", "other"] = "other"
    root: str | None = None
    nodes: list[Node] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_network(cls, data):
        """Normalize ids and the node mapping shorthand."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["id"] = _as_id(data.get("id"))
        data["root"] = _as_id(data.get("root"))
        if not data.get("name") and data.get("id") is not None:
            data["name"] = str(data["id"])

        nodes = data.get("nodes")
        if isinstance(nodes, dict):
            data["nodes"] = [
                {**(node_data or {}), "id": node_id}
                for node_id, node_data in nodes.items()
            ]
        return data

    @model_validator(mode="after")
    def check_connectivity(self) -> "Network":
        """Check node uniqueness and that every peer link is mutual."""
        index: dict[str, Node] = {}
        for node in self.nodes:
            if node.id in index:
                raise ValueError(f"Duplicate node '{node.id}' in network '{self.id}'")
            index[node.id] = node

        for node in self.nodes:
            for port in node.ports:
                if port.peer is None:
                    continue
                if port.peer.node == node.id and port.peer.port == port.id:
                    raise ValueError(
                        f"Port '{node.id}.{port.id}' is connected to itself"
                    )
                peer_node = index.get(port.peer.node)
                if peer_node is None:
                    raise ValueError(
                        f"Port '{node.id}.{port.id}' references undefined node "
                        f"'{port.peer.node}'"
                    )
                peer_port = peer_node.get_port(port.peer.port)
                if peer_port is None:
                    raise ValueError(
                        f"Port '{node.id}.{port.id}' references undefined port "
                        f"'{port.peer}'"
                    )
                back = peer_port.peer
                if back is None or back.node != node.id or back.port != port.id:
                    raise ValueError(
                        f"Connection '{node.id}.{port.id}' -> '{port.peer}' "
                        f"is not mutual"
                    )
        return self

    @cached_property
    def node_index(self) -> dict[str, Node]:
        """Map of node id to node."""
        return {node.id: node for node in self.nodes}

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by id."""
        return self.node_index.get(node_id)

    def get_all_node_ids(self) -> list[str]:
        """Get all node ids in declaration order."""
        return [node.id for node in self.nodes]

    def peer_of(self, node: Node, port: Port) -> Node | None:
        """Resolve the node physically touching a port, if any."""
        if port.peer is None:
            return None
        return self.get_node(port.peer.node)

    def iter_connections(self) -> Iterator[tuple[PeerRef, PeerRef]]:
        """Iterate over physical connections, each mutual pair once.

        Yields:
            Tuples of (near end, far end) port references.
        """
        seen: set[frozenset[tuple[str, str]]] = set()
        for node in self.nodes:
            for port in node.sorted_ports():
                if port.peer is None:
                    continue
                key = frozenset({(node.id, port.id), (port.peer.node, port.peer.port)})
                if key in seen:
                    continue
                seen.add(key)
                yield PeerRef(node=node.id, port=port.id), port.peer

    def connection_count(self) -> int:
        """Get the number of physical connections."""
        return sum(1 for _ in self.iter_connections())


class NetworkSet(BaseModel):
    """Root model for a network YAML file."""

    networks: list[Network] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_networks(cls, data):
        """Accept a networks mapping keyed by id."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        networks = data.get("networks")
        if isinstance(networks, dict):
            data["networks"] = [
                {**(net_data or {}), "id": net_id}
                for net_id, net_data in networks.items()
            ]
        return data

    @model_validator(mode="after")
    def check_unique_networks(self) -> "NetworkSet":
        seen: set[str] = set()
        for network in self.networks:
            if network.id in seen:
                raise ValueError(f"Duplicate network '{network.id}'")
            seen.add(network.id)
        return self

    def get_network(self, network_id: str) -> Network | None:
        """Get a network by id."""
        for network in self.networks:
            if network.id == network_id:
                return network
        return None
