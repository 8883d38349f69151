"""Core infrastructure: Markup scanning, Flow structure, Patching, Configuration, Logging."""

from flowedit.core.config import EngineSettings, PositionAttributes, default_settings, load_settings
from flowedit.core.document import DocumentContext, FlowScope, list_adapters, load_scope, select_scope
from flowedit.core.logging import configure_logging, document_context, get_logger

__all__ = [
    "DocumentContext",
    "EngineSettings",
    "FlowScope",
    "PositionAttributes",
    "configure_logging",
    "default_settings",
    "document_context",
    "get_logger",
    "list_adapters",
    "load_scope",
    "load_settings",
    "select_scope",
]
