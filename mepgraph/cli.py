"""Command-line interface for mepgraph."""

import logging
import sys
import tempfile
from pathlib import Path

import click

from .graph.errors import TraversalError
from .graph.traversal import TraversalOptions, traverse, traverse_all
from .output.errors import SerializationError
from .output.formatter import format_summary
from .output.json_writer import to_json_document
from .output.xml_writer import to_xml_document
from .schema.errors import NetworkLoadError, NetworkValidationError
from .schema.loader import parse_networks

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load(network_file: str):
    """Load a network file, exiting with code 2 on failure."""
    try:
        return parse_networks(network_file)
    except NetworkLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except NetworkValidationError as e:
        click.echo(f"Network validation error: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
        sys.exit(2)


def _is_file_stem(network_id: str) -> bool:
    """Check that a network id names a file inside the output directory."""
    if network_id in ("", ".", ".."):
        return False
    return not any(c in network_id for c in ("/", "\\", "\0"))


@click.group()
@click.version_option()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging")
def main(verbose: bool):
    """mepgraph: walk MEP networks into XML and JSON graphs."""
    _setup_logging(verbose)


@main.command("traverse")
@click.argument("network_file", type=click.Path(exists=True))
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the XML and JSON files (a new temporary one by default)",
)
@click.option(
    "--shape",
    type=click.Choice(["graph", "nested"]),
    default="graph",
    help="JSON document shape",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Summary format",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat networks whose root has no connections as failures",
)
@click.option(
    "--max-nodes",
    type=click.IntRange(min=1),
    default=None,
    help="Fail a network that has more reachable nodes than this",
)
def traverse_cmd(
    network_file: str,
    output_dir: str | None,
    shape: str,
    output_format: str,
    strict: bool,
    max_nodes: int | None,
):
    """Traverse every network in a file and write its graph documents.

    NETWORK_FILE is the path to a YAML network file. For each network,
    <id>.xml and <id>.json are written to the output directory.

    Exit codes:
      0 - All networks traversed
      1 - One or more networks failed
      2 - File or schema error
    """
    network_set = _load(network_file)
    options = TraversalOptions(allow_single_node=not strict, max_nodes=max_nodes)

    out_path = Path(output_dir) if output_dir else Path(tempfile.mkdtemp(prefix="mepgraph-"))
    out_path.mkdir(parents=True, exist_ok=True)

    outcomes = traverse_all(network_set.networks, options)
    json_sizes: dict[str, int] = {}

    for outcome in outcomes:
        if outcome.tree is None:
            continue
        network_id = outcome.network.id
        if not _is_file_stem(network_id):
            outcome.error = ValueError(
                f"Network id '{network_id}' cannot be used as a file name"
            )
            logger.warning("Skipping network %s: %s", network_id, outcome.error)
            continue

        try:
            json_text = to_json_document(outcome.tree, shape)  # type: ignore
            xml_text = to_xml_document(outcome.tree)
        except SerializationError as e:
            logger.warning("Cannot serialize network %s: %s", network_id, e)
            outcome.error = e
            continue

        try:
            (out_path / f"{network_id}.xml").write_text(xml_text, encoding="utf-8")
            (out_path / f"{network_id}.json").write_text(json_text, encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot write network %s: %s", network_id, e)
            outcome.error = e
            continue
        json_sizes[network_id] = len(json_text)
        logger.debug("Wrote %s.xml and %s.json to %s", network_id, network_id, out_path)

    click.echo(format_summary(outcomes, out_path, json_sizes, output_format))  # type: ignore

    if any(not o.ok for o in outcomes):
        sys.exit(1)
    sys.exit(0)


@main.command()
@click.argument("network_file", type=click.Path(exists=True))
@click.option("--network", "network_id", default=None, help="Network id (default: first)")
@click.option("--root", "root_id", default=None, help="Start from this node id")
@click.option(
    "--as",
    "document",
    type=click.Choice(["xml", "json"]),
    default="json",
    help="Document to print",
)
@click.option(
    "--shape",
    type=click.Choice(["graph", "nested"]),
    default="graph",
    help="JSON document shape",
)
def show(
    network_file: str,
    network_id: str | None,
    root_id: str | None,
    document: str,
    shape: str,
):
    """Print the XML or JSON document of one network.

    Exit codes:
      0 - Success
      1 - Traversal or serialization failed
      2 - File or schema error, or unknown network
    """
    network_set = _load(network_file)

    if network_id is None:
        if not network_set.networks:
            click.echo("No networks defined", err=True)
            sys.exit(2)
        network = network_set.networks[0]
    else:
        network = network_set.get_network(network_id)
        if network is None:
            click.echo(f"Unknown network: {network_id}", err=True)
            sys.exit(2)

    try:
        tree = traverse(network, root_id)
        if document == "xml":
            text = to_xml_document(tree).rstrip("\n")
        else:
            text = to_json_document(tree, shape)  # type: ignore
    except (TraversalError, SerializationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(text)
    sys.exit(0)


if __name__ == "__main__":
    main()
