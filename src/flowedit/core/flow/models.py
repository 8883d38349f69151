"""Value types for the flow structure.

Leaf module: no intra-package imports except contracts (prevents import
cycles). All types are frozen; a new parse produces new instances and
nothing is ever patched in place.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from flowedit.contracts.enums import EdgeHint, NodeRole
from flowedit.contracts.types import NodeUID


@dataclass(frozen=True, slots=True)
class SourceRange:
    """Half-open character span [start, end) with its 1-based line bounds."""

    start: int
    end: int
    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid source range [{self.start}, {self.end})")

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


@dataclass(frozen=True, slots=True)
class NodeAttribute:
    """One attribute as written on an element's opening tag.

    Columns are 1-based and cover the whole ``name="value"`` text,
    end column exclusive.
    """

    name: str
    value: str
    line: int
    start_column: int
    end_column: int


@dataclass(frozen=True, slots=True)
class Position:
    x: int = 0
    y: int = 0


@dataclass(frozen=True, slots=True)
class ForwardDeclaration:
    """A Forward child element: a named edge to a pipe or exit path."""

    name: str
    target_path: str
    source_range: SourceRange


@dataclass(frozen=True, slots=True)
class Node:
    """A receiver, pipe or exit as declared in the text.

    The extractor fills in everything read from the text; ``uid`` and
    ``role`` are assigned by the assembler. ``position`` is always a
    concrete pair; whether it was written explicitly is ``has_position``.
    """

    type: str
    name: str
    source_range: SourceRange
    attributes: Mapping[str, NodeAttribute] = field(default_factory=lambda: MappingProxyType({}))
    position: Position = field(default_factory=Position)
    has_position: bool = False
    forwards: tuple[ForwardDeclaration, ...] = ()
    path: str | None = None
    uid: NodeUID | None = None
    role: NodeRole | None = None

    @property
    def active(self) -> bool:
        """False when the element is switched off with active="false"."""
        attribute = self.attributes.get("active")
        return attribute is None or attribute.value.strip().lower() != "false"

    def attribute_value(self, name: str) -> str | None:
        attribute = self.attributes.get(name)
        return attribute.value if attribute is not None else None


@dataclass(frozen=True, slots=True)
class Edge:
    """A directed, labeled connection for the renderer.

    ``target`` is a node uid, or the bare path when it names the implicit
    exit of a pipeline without Exit elements. ``implicit`` marks edges the
    text does not declare (default chaining and the receiver edge).
    """

    source: NodeUID
    target: str
    label: str
    hint: EdgeHint = EdgeHint.DEFAULT
    implicit: bool = False


@dataclass(frozen=True, slots=True)
class FlowStructure:
    """Whole-document graph derived from an ordered node list.

    ``nodes`` keeps source order; role views are filtered from it.
    """

    nodes: tuple[Node, ...]
    receivers: tuple[Node, ...]
    pipes: tuple[Node, ...]
    exits: tuple[Node, ...]
    first_pipe: str | None
    implicit_first_pipe: bool
    implicit_exit: bool
    last_pipe: NodeUID | None = None
    adapter: str | None = None

    @property
    def first_pipe_uid(self) -> NodeUID | None:
        """Uid of the entry pipe, or None for an empty pipeline."""
        if self.first_pipe is None:
            return None
        pipe = self.find(self.first_pipe, role=NodeRole.PIPE)
        return pipe.uid if pipe is not None else None

    @property
    def uids(self) -> tuple[NodeUID, ...]:
        return tuple(node.uid for node in self.nodes if node.uid is not None)

    def get(self, uid: str) -> Node | None:
        for node in self.nodes:
            if node.uid == uid:
                return node
        return None

    def find(self, name: str, *, role: NodeRole | None = None) -> Node | None:
        """First node with this name (optionally restricted to one role)."""
        for node in self.nodes:
            if node.name == name and (role is None or node.role == role):
                return node
        return None
