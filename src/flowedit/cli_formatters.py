"""CLI output formatting for parse results and engine errors.

Console output is plain text through typer.echo; JSON and YAML output are
built from the serializers in flowedit.core.flow.serialize so the CLI and
renderers see the same shape. Error panels are rendered with rich on
stderr, keeping stdout free for documents and parse output.
"""

from __future__ import annotations

import json
from typing import Any

import typer
import yaml

from flowedit.contracts.errors import (
    AdapterNotFoundError,
    AttributeNotFoundError,
    DuplicateNodeError,
    DuplicatePipeError,
    FlowStructureError,
    InvalidOperationError,
    MalformedElementError,
    NodeNotFoundError,
    UnresolvedForwardTargetError,
)
from flowedit.core.flow.graph import FlowGraph
from flowedit.core.flow.models import Edge, FlowStructure
from flowedit.core.flow.serialize import edges_to_dict, structure_to_dict

# Most specific first: DuplicatePipeError before DuplicateNodeError
_ERROR_PRESENTATION: tuple[tuple[type[FlowStructureError], str, str], ...] = (
    (MalformedElementError, "Malformed Markup", "Check that every opening tag has a matching closing tag."),
    (DuplicatePipeError, "Duplicate Pipe Names", "Pipe names must be unique; the graph is not drawn until they are."),
    (DuplicateNodeError, "Duplicate Node Names", "Choose a name no other receiver, pipe or exit uses."),
    (UnresolvedForwardTargetError, "Unresolved Forward", "Forward paths must name a pipe or an exit of the pipeline."),
    (AttributeNotFoundError, "Attribute Not Found", "List the node's attributes with 'flowedit parse'."),
    (NodeNotFoundError, "Node Not Found", "Node names are case-sensitive; list them with 'flowedit parse'."),
    (AdapterNotFoundError, "Adapter Not Found", "List the adapters of the document with 'flowedit adapters'."),
    (InvalidOperationError, "Invalid Operation", "Check the arguments of the command."),
)


def describe_error(error: FlowStructureError) -> tuple[str, str | None]:
    """Title and hint for an engine error."""
    for error_type, title, hint in _ERROR_PRESENTATION:
        if isinstance(error, error_type):
            return title, hint
    return "Flow Structure Error", None


def format_error_panel(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error with optional hint and details on stderr."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    panel = Panel(
        content,
        title=f"[red bold]{title}[/]",
        border_style="red",
        padding=(0, 1),
    )
    console.print(panel)


def format_engine_error(error: FlowStructureError) -> None:
    title, hint = describe_error(error)
    details: list[str] | None = None
    if isinstance(error, DuplicateNodeError):
        details = [f"'{name}'" for name in error.names]
    format_error_panel(title=title, message=str(error), hint=hint, details=details)


def echo_structure(structure: FlowStructure, edges: tuple[Edge, ...], graph: FlowGraph) -> None:
    """Human-readable summary of a parsed flow."""
    if structure.adapter:
        typer.echo(f"Adapter: {structure.adapter}")
    implicit = " (implicit)" if structure.implicit_first_pipe else ""
    typer.echo(f"First pipe: {structure.first_pipe or '-'}{implicit}")

    for label, nodes in (("Receivers", structure.receivers), ("Pipes", structure.pipes), ("Exits", structure.exits)):
        typer.echo(f"{label}: {len(nodes)}")
        for node in nodes:
            position = f" @ ({node.position.x}, {node.position.y})" if node.has_position else ""
            typer.echo(f"  {node.uid}{position}")
    if structure.implicit_exit:
        typer.echo(f"  implicit exit after {structure.last_pipe or '-'}")

    typer.echo(f"Edges: {len(edges)}")
    for edge in edges:
        marker = " *" if edge.implicit else ""
        typer.echo(f"  {edge.source} --{edge.label}--> {edge.target}{marker}")

    for warning in graph.warnings():
        typer.echo(f"Warning [{warning.code}]: {warning.message}: {', '.join(warning.node_ids)}", err=True)


def structure_payload(structure: FlowStructure, edges: tuple[Edge, ...], graph: FlowGraph) -> dict[str, Any]:
    return {
        "structure": structure_to_dict(structure),
        "edges": edges_to_dict(edges),
        "warnings": [
            {"code": warning.code, "message": warning.message, "node_ids": list(warning.node_ids)}
            for warning in graph.warnings()
        ],
    }


def render_payload(payload: dict[str, Any], output_format: str) -> str:
    """Render a JSON-ready payload as JSON or YAML."""
    if output_format == "yaml":
        rendered: str = yaml.safe_dump(payload, default_flow_style=False, sort_keys=False)
        return rendered
    return json.dumps(payload, indent=2)


def error_payload(error: FlowStructureError) -> dict[str, Any]:
    return {"error": {"code": error.code, "type": type(error).__name__, "message": str(error)}}
