"""FlowEngine: the entry points the text surface and the renderer call.

The library functions in flowedit.core raise FlowStructureError
subclasses. The engine converts them into ParseResult/PatchResult
failures so callers branch on a value instead of catching; programming
errors still propagate.

The engine keeps no document state. Every call takes a DocumentContext
snapshot and returns new values; serializing edits against one buffer
is the caller's job.
"""

from __future__ import annotations

from collections.abc import Iterable

from flowedit.contracts.errors import FlowStructureError
from flowedit.contracts.results import ParseResult, PatchResult
from flowedit.core.config import EngineSettings, default_settings
from flowedit.core.document import DocumentContext, list_adapters, load_scope
from flowedit.core.flow.assembler import assemble
from flowedit.core.flow.duplicates import unique_node_name
from flowedit.core.flow.extractor import declared_first_pipe, extract_scope
from flowedit.core.flow.forwards import resolve_forwards
from flowedit.core.flow.graph import FlowGraph
from flowedit.core.logging import document_context, get_logger
from flowedit.core.markup import scan
from flowedit.core.patch.edits import apply_edits, changed_span
from flowedit.core.patch.operations import Operation
from flowedit.core.patch.patcher import plan_edits

logger = get_logger(__name__)


class FlowEngine:
    """Parse and patch pipeline documents under one set of settings."""

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self._settings = settings or default_settings()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def adapters(self, text: str) -> list[str]:
        """Adapter names of a document, in order.

        Raises:
            MalformedElementError: If the text cannot be scanned
        """
        return list_adapters(scan(text), self._settings)

    def parse(self, context: DocumentContext) -> ParseResult:
        """Extract, assemble and resolve the selected flow.

        A failed parse carries no structure at all; in particular duplicate
        pipe names never produce a partial graph.
        """
        with document_context(adapter=context.adapter):
            try:
                scope = load_scope(context, self._settings)
                nodes = extract_scope(scope, self._settings)
                structure = assemble(
                    nodes,
                    declared_first_pipe(scope, self._settings),
                    settings=self._settings,
                    adapter=scope.adapter_name,
                )
                edges = tuple(resolve_forwards(structure, self._settings))
            except FlowStructureError as e:
                logger.warning("flow_parse_failed", error_type=type(e).__name__, error=str(e))
                return ParseResult.failure(e)

            logger.info(
                "flow_parsed",
                adapter=structure.adapter,
                nodes=len(structure.nodes),
                edges=len(edges),
                implicit_first_pipe=structure.implicit_first_pipe,
                implicit_exit=structure.implicit_exit,
            )
        return ParseResult.success(structure, edges)

    def graph(self, result: ParseResult) -> FlowGraph:
        """Graph view of a successful parse.

        Raises:
            ValueError: If the parse failed
        """
        if not result.ok or result.structure is None:
            raise ValueError("Cannot build a graph from a failed parse")
        return FlowGraph.from_structure(result.structure, result.edges)

    def patch(self, context: DocumentContext, operation: Operation) -> PatchResult:
        """Apply one operation; on failure the original text is returned untouched."""
        with document_context(adapter=context.adapter, operation=operation.kind):
            try:
                edits = plan_edits(context, operation, self._settings)
            except FlowStructureError as e:
                logger.warning("patch_rejected", error_type=type(e).__name__, error=str(e))
                return PatchResult.failure(context.text, operation.kind, e)

            text = apply_edits(context.text, edits)
            logger.info("patch_applied", edits=len(edits), span=changed_span(edits))
        return PatchResult.success(text, operation.kind)

    def suggest_name(self, existing: Iterable[str], base: str) -> str:
        """First unused name among base, base2, base3, ..."""
        return unique_node_name(existing, base)
