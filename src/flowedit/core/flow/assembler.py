"""Graph assembler: ordered node list -> FlowStructure.

Pure function of its inputs. Assigns roles and uids, resolves the first
pipe, detects the implicit exit and enforces name uniqueness. A document
with duplicate pipe names never yields a structure.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from flowedit.contracts.enums import NodeRole
from flowedit.contracts.errors import DuplicatePipeError, UnresolvedForwardTargetError
from flowedit.contracts.types import NodeUID
from flowedit.core.config import EngineSettings, default_settings
from flowedit.core.flow.duplicates import check_no_duplicates
from flowedit.core.flow.models import FlowStructure, Node
from flowedit.core.flow.vocabulary import classify_type


def derive_uid(node: Node) -> NodeUID:
    """Stable identity from (type, name, active flag, path).

    ``name(type)`` for the common case; a path that differs from the
    name and a disabled element each add a qualifier.
    """
    uid = f"{node.name}({node.type})"
    if node.path is not None and node.path != node.name:
        uid = f"{uid}[{node.path}]"
    if not node.active:
        uid = f"{uid}#inactive"
    return NodeUID(uid)


def assemble(
    nodes: Sequence[Node],
    declared_first_pipe: str | None = None,
    *,
    settings: EngineSettings | None = None,
    adapter: str | None = None,
) -> FlowStructure:
    """Build the canonical flow structure from extracted nodes.

    Args:
        nodes: Extracted nodes in source order
        declared_first_pipe: The pipeline's firstPipe value, if any
        settings: Vocabulary used to classify nodes
        adapter: Name of the adapter the nodes came from

    Returns:
        FlowStructure with roles and uids assigned

    Raises:
        DuplicatePipeError: If two pipes share a name
        DuplicateNodeError: If two nodes share a uid
        UnresolvedForwardTargetError: If firstPipe names no pipe
    """
    settings = settings or default_settings()

    assigned: list[Node] = []
    for node in nodes:
        role = classify_type(node.type, settings)
        if role is None:
            raise ValueError(f"<{node.type}> at line {node.source_range.start_line} is not a receiver, pipe or exit")
        assigned.append(replace(node, role=role, uid=derive_uid(node)))

    receivers = tuple(node for node in assigned if node.role == NodeRole.RECEIVER)
    pipes = tuple(node for node in assigned if node.role == NodeRole.PIPE)
    exits = tuple(node for node in assigned if node.role == NodeRole.EXIT)

    check_no_duplicates((pipe.name for pipe in pipes), error_type=DuplicatePipeError)
    check_no_duplicates(node.uid for node in assigned if node.uid is not None)

    if declared_first_pipe:
        first_pipe: str | None = declared_first_pipe
        implicit_first_pipe = False
        if pipes and not any(pipe.name == declared_first_pipe for pipe in pipes):
            raise UnresolvedForwardTargetError(settings.first_pipe_attribute, declared_first_pipe)
    else:
        first_pipe = pipes[0].name if pipes else None
        implicit_first_pipe = True

    implicit_exit = not exits
    last_pipe = pipes[-1].uid if implicit_exit and pipes else None

    return FlowStructure(
        nodes=tuple(assigned),
        receivers=receivers,
        pipes=pipes,
        exits=exits,
        first_pipe=first_pipe,
        implicit_first_pipe=implicit_first_pipe,
        implicit_exit=implicit_exit,
        last_pipe=last_pipe,
        adapter=adapter,
    )
