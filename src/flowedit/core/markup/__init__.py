"""Markup scanning: element tree with exact source offsets."""

from flowedit.core.markup.lines import LineIndex
from flowedit.core.markup.scanner import Element, ScannedAttribute, ScannedDocument, scan

__all__ = [
    "Element",
    "LineIndex",
    "ScannedAttribute",
    "ScannedDocument",
    "scan",
]
