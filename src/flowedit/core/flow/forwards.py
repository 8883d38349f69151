"""Forward resolver: FlowStructure -> edges.

Explicit Forward children win; a pipe without any forwards chains to
the next pipe in source order under the default forward name. Declaration
order is therefore treated as execution order; that is a convention of
the format, not something the text guarantees.

A second connection between the same (source, target) pair is dropped,
keeping the first. This mirrors the canvas, where drawing an existing
connection again collapses it.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowedit.contracts.enums import EdgeHint
from flowedit.contracts.errors import UnresolvedForwardTargetError
from flowedit.core.config import EngineSettings, default_settings
from flowedit.core.flow.models import Edge, FlowStructure, Node

_LABEL_HINTS: dict[str, EdgeHint] = {
    "success": EdgeHint.PRIMARY,
    "failure": EdgeHint.ALTERNATE,
    "exception": EdgeHint.ALTERNATE,
    "request": EdgeHint.DASHED,
    "response": EdgeHint.DASHED,
}


def hint_for_label(label: str) -> EdgeHint:
    """Styling hint for a forward label; unknown labels get DEFAULT."""
    return _LABEL_HINTS.get(label, EdgeHint.DEFAULT)


@dataclass(frozen=True, slots=True)
class ExitPlacement:
    """Exits split by whether the text positions them.

    Unpositioned exits are left for the layout collaborator to place.
    """

    positioned: tuple[Node, ...]
    unpositioned: tuple[Node, ...]


def place_exits(structure: FlowStructure) -> ExitPlacement:
    return ExitPlacement(
        positioned=tuple(exit_node for exit_node in structure.exits if exit_node.has_position),
        unpositioned=tuple(exit_node for exit_node in structure.exits if not exit_node.has_position),
    )


def resolve_target(structure: FlowStructure, source: Node, target_path: str) -> str:
    """Resolve a forward path to a node uid.

    Pipes are matched first (by name, path or uid), then exits. When the
    pipeline has no Exit elements, an unknown path is the implicit exit
    and is returned as-is.

    Raises:
        UnresolvedForwardTargetError: If nothing matches and exits are declared
    """
    for node in (*structure.pipes, *structure.exits):
        if target_path in (node.name, node.path, node.uid):
            return str(node.uid)
    if structure.implicit_exit:
        return target_path
    raise UnresolvedForwardTargetError(source.name, target_path)


def resolve_forwards(structure: FlowStructure, settings: EngineSettings | None = None) -> list[Edge]:
    """Compute the edge set of a flow structure.

    Returns:
        Edges in pipe source order, followed by the receiver edge

    Raises:
        UnresolvedForwardTargetError: If an explicit forward cannot be matched
    """
    settings = settings or default_settings()
    edges: list[Edge] = []
    seen: set[tuple[str, str]] = set()

    def emit(edge: Edge) -> None:
        key = (edge.source, edge.target)
        if key in seen:
            return
        seen.add(key)
        edges.append(edge)

    pipes = structure.pipes
    for index, pipe in enumerate(pipes):
        assert pipe.uid is not None  # assigned by assemble()
        if pipe.forwards:
            for forward in pipe.forwards:
                emit(
                    Edge(
                        source=pipe.uid,
                        target=resolve_target(structure, pipe, forward.target_path),
                        label=forward.name,
                        hint=hint_for_label(forward.name),
                    )
                )
        elif index + 1 < len(pipes):
            label = settings.default_forward_name
            emit(
                Edge(
                    source=pipe.uid,
                    target=str(pipes[index + 1].uid),
                    label=label,
                    hint=hint_for_label(label),
                    implicit=True,
                )
            )

    first_pipe_uid = structure.first_pipe_uid
    if structure.receivers and first_pipe_uid is not None:
        receiver = structure.receivers[0]
        assert receiver.uid is not None
        label = settings.receiver_edge_label
        emit(
            Edge(
                source=receiver.uid,
                target=str(first_pipe_uid),
                label=label,
                hint=hint_for_label(label),
                implicit=True,
            )
        )
    return edges
