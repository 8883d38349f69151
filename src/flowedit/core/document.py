"""Document context and adapter selection.

A configuration text may hold several adapters. Instead of remembering
"the current adapter" somewhere global, every engine call receives a
DocumentContext naming the text snapshot and the adapter being edited,
and the scope is re-derived from that snapshot on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from flowedit.contracts.errors import AdapterNotFoundError
from flowedit.core.config import EngineSettings
from flowedit.core.markup import Element, ScannedDocument, scan


@dataclass(frozen=True, slots=True)
class DocumentContext:
    """One text snapshot plus the adapter selection it is edited under.

    adapter=None selects the first adapter, or the first pipeline when the
    text contains no adapter elements.
    """

    text: str
    adapter: str | None = None

    def with_text(self, text: str) -> DocumentContext:
        """Same selection over a new snapshot (e.g. after a patch)."""
        return replace(self, text=text)


@dataclass(frozen=True, slots=True)
class FlowScope:
    """The elements of one snapshot that make up the selected flow."""

    document: ScannedDocument
    adapter: Element | None
    pipeline: Element | None

    @property
    def adapter_name(self) -> str | None:
        return self.adapter.get("name") if self.adapter is not None else None


def list_adapters(document: ScannedDocument, settings: EngineSettings) -> list[str]:
    """Adapter names in document order. Unnamed adapters are listed as ''."""
    return [element.get("name") or "" for element in document.find_all(lambda e: e.tag == settings.adapter_tag)]


def select_scope(document: ScannedDocument, adapter: str | None, settings: EngineSettings) -> FlowScope:
    """Resolve the adapter/pipeline pair a context refers to.

    Raises:
        AdapterNotFoundError: If a named adapter is not in the document.
    """
    adapters = document.find_all(lambda e: e.tag == settings.adapter_tag)
    chosen: Element | None = None
    if adapter is not None:
        for candidate in adapters:
            if candidate.get("name") == adapter:
                chosen = candidate
                break
        if chosen is None:
            raise AdapterNotFoundError(adapter, [a.get("name") or "" for a in adapters])
    elif adapters:
        chosen = adapters[0]

    search_root: Element | ScannedDocument = chosen if chosen is not None else document
    pipelines = search_root.find_all(lambda e: e.tag == settings.pipeline_tag)
    pipeline = pipelines[0] if pipelines else None
    return FlowScope(document=document, adapter=chosen, pipeline=pipeline)


def load_scope(context: DocumentContext, settings: EngineSettings) -> FlowScope:
    """Scan the context's text and select its flow scope."""
    return select_scope(scan(context.text), context.adapter, settings)
