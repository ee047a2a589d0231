"""Schema layer for describing MEP networks as nodes and ports."""

from .errors import NetworkLoadError, NetworkValidationError
from .models import (
    Category,
    Direction,
    Network,
    NetworkSet,
    Node,
    PeerRef,
    Port,
)
from .loader import load_yaml, parse_networks, parse_networks_from_string

__all__ = [
    "NetworkLoadError",
    "NetworkValidationError",
    "Category",
    "Direction",
    "Network",
    "NetworkSet",
    "Node",
    "PeerRef",
    "Port",
    "load_yaml",
    "parse_networks",
    "parse_networks_from_string",
]
