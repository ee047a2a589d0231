"""Output formatting for batch traversal summaries."""

import json
from pathlib import Path
from typing import Literal

from ..graph.traversal import TraversalOutcome


def format_summary(
    outcomes: list[TraversalOutcome],
    output_dir: str | Path | None = None,
    json_sizes: dict[str, int] | None = None,
    format: Literal["text", "json"] = "text",
) -> str:
    """Format the result of traversing a batch of networks.

    Args:
        outcomes: Per-network traversal outcomes.
        output_dir: Directory the documents were written to, if any.
        json_sizes: Length of the JSON document per network id.
        format: Output format ("text" or "json").

    Returns:
        Formatted string representation.
    """
    json_sizes = json_sizes or {}
    if format == "json":
        return _format_json(outcomes, output_dir, json_sizes)
    return _format_text(outcomes, output_dir, json_sizes)


def _format_text(
    outcomes: list[TraversalOutcome],
    output_dir: str | Path | None,
    json_sizes: dict[str, int],
) -> str:
    lines: list[str] = []

    traversed = [o for o in outcomes if o.ok]
    failed = [o for o in outcomes if not o.ok]

    location = f" in {output_dir}" if output_dir else ""
    lines.append(
        f"{len(traversed)} XML files and {len(json_sizes)} JSON graphs "
        f"({sum(json_sizes.values())} bytes) generated{location} "
        f"({len(outcomes)} total systems):"
    )

    systems = sorted(f"{o.network.id}({o.network.name})" for o in traversed)
    lines.append("  " + (", ".join(systems) if systems else "(none)"))

    lines.append("")
    lines.append("ERRORS:")
    if failed:
        for outcome in failed:
            lines.append(f"  ✘ [{outcome.network.id}] {outcome.error}")
    else:
        lines.append("  (none)")

    return "\n".join(lines)


def _format_json(
    outcomes: list[TraversalOutcome],
    output_dir: str | Path | None,
    json_sizes: dict[str, int],
) -> str:
    """Format the summary as JSON."""
    networks = []
    for outcome in outcomes:
        entry = {
            "id": outcome.network.id,
            "name": outcome.network.name,
            "ok": outcome.ok,
            "error": str(outcome.error) if outcome.error else None,
        }
        if outcome.tree is not None:
            entry.update(
                {
                    "root": outcome.tree.root_id,
                    "nodes": outcome.tree.node_count,
                    "tree_edges": outcome.tree.tree_edge_count,
                    "non_tree_edges": outcome.tree.non_tree_edge_count,
                    "json_bytes": json_sizes.get(outcome.network.id),
                }
            )
        networks.append(entry)

    data = {
        "output_dir": str(output_dir) if output_dir else None,
        "total": len(outcomes),
        "failed": sum(1 for o in outcomes if not o.ok),
        "json_bytes": sum(json_sizes.values()),
        "networks": networks,
    }
    return json.dumps(data, indent=2)
