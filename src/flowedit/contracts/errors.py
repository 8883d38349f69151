"""Error taxonomy for the flow structure engine.

Every failure the engine can report derives from FlowStructureError and
carries the structured context needed to present it (names, offsets,
line/column). Library functions raise these; the FlowEngine entry points
convert them into typed ParseResult/PatchResult failures.
"""

from __future__ import annotations

from collections.abc import Sequence


class FlowStructureError(Exception):
    """Base class for all engine errors."""

    code: str = "flow_structure_error"


class MalformedElementError(FlowStructureError):
    """Raised when an element cannot be scanned into a balanced tag.

    Covers unterminated tags, unterminated attribute values and opening
    tags without a matching closing tag.
    """

    code = "malformed_element"

    def __init__(self, message: str, *, offset: int, line: int, column: int) -> None:
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(f"{message} (line {line}, column {column})")


class DuplicateNodeError(FlowStructureError):
    """Raised when two nodes of one document share an identity."""

    code = "duplicate_node"

    def __init__(self, names: Sequence[str], *, kind: str = "node") -> None:
        self.names = tuple(names)
        listed = ", ".join(f"'{name}'" for name in self.names)
        super().__init__(f"Duplicate {kind} name(s): {listed}")


class DuplicatePipeError(DuplicateNodeError):
    """Raised when two pipes share a name.

    Renderers must refuse to draw the graph while this error stands.
    """

    code = "duplicate_pipe"

    def __init__(self, names: Sequence[str]) -> None:
        super().__init__(names, kind="pipe")


class NodeNotFoundError(FlowStructureError):
    """Raised when a mutation targets a node absent from the current text."""

    code = "node_not_found"

    def __init__(self, name: str, *, detail: str | None = None) -> None:
        self.name = name
        message = f"Node '{name}' not found"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ChildElementNotFoundError(NodeNotFoundError):
    """Raised when a node exists but the Forward/Param child to change does not."""

    code = "child_element_not_found"

    def __init__(self, name: str, *, child_tag: str, key: str) -> None:
        self.child_tag = child_tag
        self.key = key
        super().__init__(name, detail=f"no <{child_tag}> child matching '{key}'")


class AttributeNotFoundError(FlowStructureError):
    """Raised when removing an attribute the node does not carry."""

    code = "attribute_not_found"

    def __init__(self, node_name: str, attribute: str) -> None:
        self.node_name = node_name
        self.attribute = attribute
        super().__init__(f"Node '{node_name}' has no attribute '{attribute}'")


class UnresolvedForwardTargetError(FlowStructureError):
    """Raised when a forward path (or firstPipe) matches no known node or exit."""

    code = "unresolved_forward_target"

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Forward from '{source}' targets unknown node '{target}'")


class AdapterNotFoundError(FlowStructureError):
    """Raised when the document context selects an adapter the text lacks."""

    code = "adapter_not_found"

    def __init__(self, adapter: str, available: Sequence[str]) -> None:
        self.adapter = adapter
        self.available = tuple(available)
        hint = f" (available: {', '.join(self.available)})" if self.available else ""
        super().__init__(f"Adapter '{adapter}' not found{hint}")


class InvalidOperationError(FlowStructureError):
    """Raised when a patch operation cannot apply to the node it targets.

    Examples: adding an attribute the node already has, or an AddNode
    template whose tag is not a receiver, pipe or exit.
    """

    code = "invalid_operation"

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: {message}")
