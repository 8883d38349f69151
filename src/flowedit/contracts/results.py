"""Operation outcomes returned by the FlowEngine entry points.

These types answer: "What did a parse or a patch produce?"

IMPORTANT:
- status uses Literal["success", "error"], NOT an enum
- A failed result never carries a partial structure; a failed patch
  carries the untouched input text
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from flowedit.contracts.errors import FlowStructureError

if TYPE_CHECKING:
    from flowedit.core.flow.models import Edge, FlowStructure


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of parsing one document context.

    Use the factory methods to create instances.
    """

    status: Literal["success", "error"]
    structure: FlowStructure | None = None
    edges: tuple[Edge, ...] = field(default_factory=tuple)
    error: FlowStructureError | None = None

    @classmethod
    def success(cls, structure: FlowStructure, edges: tuple[Edge, ...]) -> ParseResult:
        return cls(status="success", structure=structure, edges=edges)

    @classmethod
    def failure(cls, error: FlowStructureError) -> ParseResult:
        return cls(status="error", error=error)

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True, slots=True)
class PatchResult:
    """Result of applying one operation to a text snapshot."""

    status: Literal["success", "error"]
    text: str
    operation: str
    error: FlowStructureError | None = None

    @classmethod
    def success(cls, text: str, operation: str) -> PatchResult:
        return cls(status="success", text=text, operation=operation)

    @classmethod
    def failure(cls, original_text: str, operation: str, error: FlowStructureError) -> PatchResult:
        return cls(status="error", text=original_text, operation=operation, error=error)

    @property
    def ok(self) -> bool:
        return self.status == "success"
