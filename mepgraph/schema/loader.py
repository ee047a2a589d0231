"""YAML loading and parsing for network descriptions."""

from pathlib import Path
from typing import IO

import yaml
from pydantic import ValidationError

from .errors import NetworkLoadError, NetworkValidationError
from .models import NetworkSet


def _read_documents(stream: str | IO[str], path: str | None = None) -> dict:
    """Read one or more YAML documents into a single mapping.

    A document with a "networks" key is returned as is. Otherwise each
    document describes one network and the result is {"networks": [...]}.
    Empty documents are ignored.

    Raises:
        NetworkLoadError: If the YAML is invalid or a document is not a mapping.
    """
    try:
        documents = [doc for doc in yaml.safe_load_all(stream) if doc is not None]
    except yaml.YAMLError as e:
        raise NetworkLoadError(f"Invalid YAML: {e}", path) from e

    for doc in documents:
        if not isinstance(doc, dict):
            raise NetworkLoadError(
                f"Expected YAML mapping at root, got {type(doc).__name__}", path
            )

    if not documents:
        return {}
    if len(documents) == 1 and "nodes" not in documents[0]:
        return documents[0]

    if any("networks" in doc for doc in documents):
        raise NetworkLoadError(
            "Multi-document files must hold one network per document", path
        )
    return {"networks": documents}


def load_yaml(path: str | Path) -> dict:
    """Load a YAML file and return the raw data.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed YAML data as a dictionary.

    Raises:
        NetworkLoadError: If the file cannot be read or parsed.
    """
    path = Path(path)

    if not path.exists():
        raise NetworkLoadError(f"File not found: {path}", str(path))
    if not path.is_file():
        raise NetworkLoadError(f"Not a file: {path}", str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            return _read_documents(f, str(path))
    except OSError as e:
        raise NetworkLoadError(f"Cannot read file: {e}", str(path)) from e


def parse_networks(path: str | Path) -> NetworkSet:
    """Load and parse a YAML file into a NetworkSet.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed NetworkSet.

    Raises:
        NetworkLoadError: If the file cannot be read or parsed.
        NetworkValidationError: If the data fails validation.
    """
    return _validate(load_yaml(path))


def parse_networks_from_string(yaml_string: str) -> NetworkSet:
    """Parse a YAML string into a NetworkSet.

    Raises:
        NetworkLoadError: If the YAML cannot be parsed.
        NetworkValidationError: If the data fails validation.
    """
    return _validate(_read_documents(yaml_string))


def _validate(data: dict) -> NetworkSet:
    """Validate raw data as a NetworkSet.

    Raises:
        NetworkValidationError: With one {loc, msg, type} entry per problem.
    """
    try:
        return NetworkSet.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(x) for x in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise NetworkValidationError(
            f"Network validation failed with {len(errors)} error(s)", errors
        ) from e
