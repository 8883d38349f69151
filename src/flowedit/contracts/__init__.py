"""Shared contracts for flowedit.

This package contains value types, enums and the error taxonomy used
across subsystem boundaries. It is a leaf package: it imports nothing
from flowedit.core at runtime.
"""

from flowedit.contracts.enums import EdgeHint, NodeRole
from flowedit.contracts.errors import (
    AdapterNotFoundError,
    AttributeNotFoundError,
    ChildElementNotFoundError,
    DuplicateNodeError,
    DuplicatePipeError,
    FlowStructureError,
    InvalidOperationError,
    MalformedElementError,
    NodeNotFoundError,
    UnresolvedForwardTargetError,
)
from flowedit.contracts.results import ParseResult, PatchResult
from flowedit.contracts.types import AdapterName, NodeUID

__all__ = [
    "AdapterName",
    "AdapterNotFoundError",
    "AttributeNotFoundError",
    "ChildElementNotFoundError",
    "DuplicateNodeError",
    "DuplicatePipeError",
    "EdgeHint",
    "FlowStructureError",
    "InvalidOperationError",
    "MalformedElementError",
    "NodeNotFoundError",
    "NodeRole",
    "NodeUID",
    "ParseResult",
    "PatchResult",
    "UnresolvedForwardTargetError",
]
