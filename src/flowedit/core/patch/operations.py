"""Graph-level mutations the Text Patch Engine understands.

Each operation is a frozen value naming its target by node name, never by
a cached source range: the engine re-locates the target in whatever text
it is handed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias


@dataclass(frozen=True, slots=True)
class RenameNode:
    kind: ClassVar[str] = "rename_node"

    old_name: str
    new_name: str


@dataclass(frozen=True, slots=True)
class MoveNode:
    kind: ClassVar[str] = "move_node"

    name: str
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class AddForward:
    """Connect ``source_name`` to a pipe or exit path."""

    kind: ClassVar[str] = "add_forward"

    source_name: str
    target_path: str
    forward_name: str = "success"


@dataclass(frozen=True, slots=True)
class RemoveForward:
    kind: ClassVar[str] = "remove_forward"

    source_name: str
    target_path: str


@dataclass(frozen=True, slots=True)
class ChangeForwardTarget:
    kind: ClassVar[str] = "change_forward_target"

    source_name: str
    old_target: str
    new_target: str


@dataclass(frozen=True, slots=True)
class AddNode:
    """Add a receiver, pipe or exit.

    ``template`` is the element tag (e.g. ``EchoPipe`` or ``Exit``); the
    role it classifies to decides where the element is inserted.
    """

    kind: ClassVar[str] = "add_node"

    name: str
    x: int
    y: int
    template: str


@dataclass(frozen=True, slots=True)
class DeleteNode:
    kind: ClassVar[str] = "delete_node"

    name: str


@dataclass(frozen=True, slots=True)
class ChangeNodeType:
    kind: ClassVar[str] = "change_node_type"

    name: str
    new_type: str


@dataclass(frozen=True, slots=True)
class AddAttribute:
    """Add an attribute with an empty value, ready to be filled in."""

    kind: ClassVar[str] = "add_attribute"

    node_name: str
    attribute: str


@dataclass(frozen=True, slots=True)
class ChangeAttribute:
    """Set an attribute value, creating the attribute when missing."""

    kind: ClassVar[str] = "change_attribute"

    node_name: str
    attribute: str
    value: str


@dataclass(frozen=True, slots=True)
class RemoveAttribute:
    kind: ClassVar[str] = "remove_attribute"

    node_name: str
    attribute: str


@dataclass(frozen=True, slots=True)
class AddParameter:
    kind: ClassVar[str] = "add_parameter"

    node_name: str
    param_name: str


@dataclass(frozen=True, slots=True)
class RemoveParameter:
    kind: ClassVar[str] = "remove_parameter"

    node_name: str
    param_name: str


@dataclass(frozen=True, slots=True)
class SetFirstPipe:
    kind: ClassVar[str] = "set_first_pipe"

    name: str


@dataclass(frozen=True, slots=True)
class RemoveFirstPipe:
    kind: ClassVar[str] = "remove_first_pipe"


Operation: TypeAlias = (
    RenameNode
    | MoveNode
    | AddForward
    | RemoveForward
    | ChangeForwardTarget
    | AddNode
    | DeleteNode
    | ChangeNodeType
    | AddAttribute
    | ChangeAttribute
    | RemoveAttribute
    | AddParameter
    | RemoveParameter
    | SetFirstPipe
    | RemoveFirstPipe
)
