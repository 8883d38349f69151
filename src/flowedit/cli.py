"""flowedit Command Line Interface.

Entry point for the flowedit CLI tool. Parse commands print the flow
structure; patch commands print the patched document to stdout, or write
it back with --in-place. Logs and error panels go to stderr.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from flowedit import __version__
from flowedit.cli_formatters import (
    echo_structure,
    error_payload,
    format_engine_error,
    format_error_panel,
    render_payload,
    structure_payload,
)
from flowedit.contracts.errors import FlowStructureError
from flowedit.core.config import EngineSettings, default_settings, load_settings
from flowedit.core.document import DocumentContext
from flowedit.core.patch.operations import (
    AddAttribute,
    AddForward,
    AddNode,
    AddParameter,
    ChangeAttribute,
    ChangeForwardTarget,
    ChangeNodeType,
    DeleteNode,
    MoveNode,
    Operation,
    RemoveAttribute,
    RemoveFirstPipe,
    RemoveForward,
    RemoveParameter,
    RenameNode,
    SetFirstPipe,
)
from flowedit.engine import FlowEngine

__all__ = [
    "app",
]

app = typer.Typer(
    name="flowedit",
    help="flowedit: parse and patch pipeline configuration markup.",
    no_args_is_help=True,
)

FILE_ARGUMENT = typer.Argument(..., help="Pipeline configuration file.")
ADAPTER_OPTION = typer.Option(None, "--adapter", "-a", help="Adapter to edit (default: the first one).")
SETTINGS_OPTION = typer.Option(None, "--settings", "-s", help="Path to settings YAML file.")
IN_PLACE_OPTION = typer.Option(False, "--in-place", "-i", help="Write the patched document back to FILE.")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"flowedit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """flowedit: parse and patch pipeline configuration markup."""
    # Configure logging before any subcommand runs
    from flowedit.core.logging import configure_logging

    log_level = "DEBUG" if verbose else "WARNING"
    configure_logging(json_output=json_logs, level=log_level)


def _load_engine_settings(settings: str | None) -> EngineSettings:
    if settings is None:
        return default_settings()
    settings_path = Path(settings).expanduser()
    try:
        return load_settings(settings_path)
    except (YamlParserError, YamlScannerError) as e:
        format_error_panel(
            title="YAML Syntax Error",
            message=f"Failed to parse {settings_path.name}",
            details=[str(e.problem)] if hasattr(e, "problem") else None,
            hint="Check for unclosed brackets, incorrect indentation, or invalid characters.",
        )
        raise typer.Exit(1) from None
    except FileNotFoundError:
        format_error_panel(
            title="File Not Found",
            message=f"Settings file does not exist: {settings}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        details = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            details.append(f"{loc}: {error['msg']}")
        format_error_panel(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name}",
            details=details,
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(1) from None


def _read_document(file: Path) -> str:
    # newline="" keeps line endings exactly as stored
    try:
        with file.open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        format_error_panel(
            title="File Not Found",
            message=f"Document does not exist: {file}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None


def _write_document(file: Path, text: str) -> None:
    with file.open("w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def _run_patch(
    file: Path,
    operation: Operation,
    *,
    adapter: str | None,
    settings: str | None,
    in_place: bool,
) -> None:
    engine = FlowEngine(_load_engine_settings(settings))
    text = _read_document(file)
    result = engine.patch(DocumentContext(text=text, adapter=adapter), operation)
    if not result.ok:
        assert result.error is not None
        format_engine_error(result.error)
        raise typer.Exit(1)

    if in_place:
        _write_document(file, result.text)
        typer.echo(f"Patched {file} ({result.operation})", err=True)
    else:
        typer.echo(result.text, nl=False)


@app.command()
def adapters(
    file: Path = FILE_ARGUMENT,
    settings: str | None = SETTINGS_OPTION,
) -> None:
    """List the adapters of a document."""
    engine = FlowEngine(_load_engine_settings(settings))
    try:
        names = engine.adapters(_read_document(file))
    except FlowStructureError as e:
        format_engine_error(e)
        raise typer.Exit(1) from None
    if not names:
        typer.echo("No adapters found.", err=True)
        return
    for name in names:
        typer.echo(name or "(unnamed)")


@app.command("show-settings")
def show_settings(
    settings: str | None = SETTINGS_OPTION,
    output_format: Literal["json", "yaml"] = typer.Option(
        "yaml",
        "--format",
        "-f",
        help="Output format: json or yaml.",
    ),
) -> None:
    """Print the effective settings (defaults, file and FLOWEDIT_* overrides)."""
    config = _load_engine_settings(settings)
    typer.echo(render_payload(config.model_dump(mode="json"), output_format))


@app.command()
def parse(
    file: Path = FILE_ARGUMENT,
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    output_format: Literal["console", "json", "yaml"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (human-readable), 'json' or 'yaml' (structured).",
    ),
) -> None:
    """Parse a document and print its flow structure and edges."""
    engine = FlowEngine(_load_engine_settings(settings))
    result = engine.parse(DocumentContext(text=_read_document(file), adapter=adapter))
    if not result.ok:
        assert result.error is not None
        if output_format != "console":
            typer.echo(render_payload(error_payload(result.error), output_format))
        else:
            format_engine_error(result.error)
        raise typer.Exit(1)

    assert result.structure is not None
    graph = engine.graph(result)
    if output_format != "console":
        typer.echo(render_payload(structure_payload(result.structure, result.edges, graph), output_format))
    else:
        echo_structure(result.structure, result.edges, graph)


@app.command()
def rename(
    file: Path = FILE_ARGUMENT,
    old_name: str = typer.Argument(..., help="Current node name."),
    new_name: str = typer.Argument(..., help="New node name."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Rename a node and every forward or firstPipe that references it."""
    _run_patch(file, RenameNode(old_name, new_name), adapter=adapter, settings=settings, in_place=in_place)


@app.command()
def move(
    file: Path = FILE_ARGUMENT,
    name: str = typer.Argument(..., help="Node name."),
    x: int = typer.Argument(..., help="Horizontal position."),
    y: int = typer.Argument(..., help="Vertical position."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Set a node's canvas position."""
    _run_patch(file, MoveNode(name, x, y), adapter=adapter, settings=settings, in_place=in_place)


@app.command()
def connect(
    file: Path = FILE_ARGUMENT,
    source: str = typer.Argument(..., help="Pipe the forward starts from."),
    target: str = typer.Argument(..., help="Pipe or exit path the forward points to."),
    forward_name: str = typer.Option("success", "--name", "-n", help="Forward name."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Add a forward from one node to another."""
    _run_patch(file, AddForward(source, target, forward_name), adapter=adapter, settings=settings, in_place=in_place)


@app.command()
def disconnect(
    file: Path = FILE_ARGUMENT,
    source: str = typer.Argument(..., help="Pipe the forward starts from."),
    target: str = typer.Argument(..., help="Path of the forward to remove."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Remove a forward."""
    _run_patch(file, RemoveForward(source, target), adapter=adapter, settings=settings, in_place=in_place)


@app.command()
def retarget(
    file: Path = FILE_ARGUMENT,
    source: str = typer.Argument(..., help="Pipe the forward starts from."),
    old_target: str = typer.Argument(..., help="Current forward path."),
    new_target: str = typer.Argument(..., help="New forward path."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Point an existing forward at another node."""
    _run_patch(
        file,
        ChangeForwardTarget(source, old_target, new_target),
        adapter=adapter,
        settings=settings,
        in_place=in_place,
    )


@app.command("add-node")
def add_node(
    file: Path = FILE_ARGUMENT,
    template: str = typer.Argument(..., help="Element tag, e.g. EchoPipe, Exit or Receiver."),
    name: str | None = typer.Option(None, "--name", "-n", help="Node name (default: a free name based on the tag)."),
    x: int = typer.Option(0, "--x", help="Horizontal position."),
    y: int = typer.Option(0, "--y", help="Vertical position."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Add a receiver, pipe or exit."""
    if name is None:
        engine = FlowEngine(_load_engine_settings(settings))
        result = engine.parse(DocumentContext(text=_read_document(file), adapter=adapter))
        if not result.ok or result.structure is None:
            assert result.error is not None
            format_engine_error(result.error)
            raise typer.Exit(1)
        name = engine.suggest_name((node.name for node in result.structure.nodes), template)
    _run_patch(file, AddNode(name, x, y, template), adapter=adapter, settings=settings, in_place=in_place)


@app.command("delete-node")
def delete_node(
    file: Path = FILE_ARGUMENT,
    name: str = typer.Argument(..., help="Node name."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Remove a node declaration."""
    _run_patch(file, DeleteNode(name), adapter=adapter, settings=settings, in_place=in_place)


@app.command("change-type")
def change_type(
    file: Path = FILE_ARGUMENT,
    name: str = typer.Argument(..., help="Node name."),
    new_type: str = typer.Argument(..., help="New element tag."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Change a node's element tag (e.g. one pipe class for another)."""
    _run_patch(file, ChangeNodeType(name, new_type), adapter=adapter, settings=settings, in_place=in_place)


@app.command("set-attr")
def set_attr(
    file: Path = FILE_ARGUMENT,
    node: str = typer.Argument(..., help="Node name."),
    attribute: str = typer.Argument(..., help="Attribute name."),
    value: str = typer.Argument(..., help="Attribute value."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Set an attribute value, adding the attribute if missing."""
    _run_patch(file, ChangeAttribute(node, attribute, value), adapter=adapter, settings=settings, in_place=in_place)


@app.command("add-attr")
def add_attr(
    file: Path = FILE_ARGUMENT,
    node: str = typer.Argument(..., help="Node name."),
    attribute: str = typer.Argument(..., help="Attribute name."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Add an empty attribute to a node."""
    _run_patch(file, AddAttribute(node, attribute), adapter=adapter, settings=settings, in_place=in_place)


@app.command("remove-attr")
def remove_attr(
    file: Path = FILE_ARGUMENT,
    node: str = typer.Argument(..., help="Node name."),
    attribute: str = typer.Argument(..., help="Attribute name."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Remove an attribute from a node."""
    _run_patch(file, RemoveAttribute(node, attribute), adapter=adapter, settings=settings, in_place=in_place)


@app.command("add-param")
def add_param(
    file: Path = FILE_ARGUMENT,
    node: str = typer.Argument(..., help="Node name."),
    param: str = typer.Argument(..., help="Parameter name."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Add a Param child to a node."""
    _run_patch(file, AddParameter(node, param), adapter=adapter, settings=settings, in_place=in_place)


@app.command("remove-param")
def remove_param(
    file: Path = FILE_ARGUMENT,
    node: str = typer.Argument(..., help="Node name."),
    param: str = typer.Argument(..., help="Parameter name."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Remove a Param child from a node."""
    _run_patch(file, RemoveParameter(node, param), adapter=adapter, settings=settings, in_place=in_place)


@app.command("first-pipe")
def first_pipe(
    file: Path = FILE_ARGUMENT,
    name: str | None = typer.Argument(None, help="Pipe to start the pipeline with."),
    remove: bool = typer.Option(False, "--remove", help="Remove firstPipe so the first declared pipe is used."),
    adapter: str | None = ADAPTER_OPTION,
    settings: str | None = SETTINGS_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Set or remove the pipeline's firstPipe."""
    operation: Operation
    if remove:
        if name is not None:
            format_error_panel(title="Invalid Arguments", message="Give either a pipe name or --remove, not both.")
            raise typer.Exit(1)
        operation = RemoveFirstPipe()
    elif name is None:
        format_error_panel(title="Invalid Arguments", message="A pipe name is required unless --remove is given.")
        raise typer.Exit(1)
    else:
        operation = SetFirstPipe(name)
    _run_patch(file, operation, adapter=adapter, settings=settings, in_place=in_place)


if __name__ == "__main__":
    app()
