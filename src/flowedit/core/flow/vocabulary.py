"""Tag-name rules that decide which elements are flow nodes.

Shared by the extractor (which elements become nodes), the assembler
(which role a node plays) and the patch engine (how to re-find a node in
the current text), so all three agree on one matching rule.
"""

from __future__ import annotations

from flowedit.contracts.enums import NodeRole
from flowedit.core.config import EngineSettings
from flowedit.core.document import FlowScope
from flowedit.core.markup import Element


def classify_type(tag: str, settings: EngineSettings) -> NodeRole | None:
    """Role for an element tag, or None when the tag is not a node."""
    if tag == settings.receiver_tag:
        return NodeRole.RECEIVER
    if tag == settings.exit_tag:
        return NodeRole.EXIT
    if settings.is_pipe_tag(tag):
        return NodeRole.PIPE
    return None


def node_elements(scope: FlowScope, settings: EngineSettings) -> list[Element]:
    """All node elements of a scope, in source order.

    Receivers are searched anywhere in the selected adapter (outside the
    pipeline); pipes are direct pipeline children; exits are direct
    pipeline children or children of an Exits container in the pipeline.
    """
    pipeline = scope.pipeline
    search_root = scope.adapter if scope.adapter is not None else scope.document
    found = [
        element
        for element in search_root.iter()
        if element.tag == settings.receiver_tag and not (pipeline is not None and pipeline.start <= element.start < pipeline.end)
    ]

    if pipeline is not None:
        for child in pipeline.children:
            if child.tag == settings.exits_container_tag:
                found.extend(child.child_elements(settings.exit_tag))
            elif classify_type(child.tag, settings) in (NodeRole.PIPE, NodeRole.EXIT):
                found.append(child)

    found.sort(key=lambda element: element.start)
    return found


def display_name(element: Element) -> str:
    """Human-visible node name: name, then path, then the tag itself."""
    name = element.get("name")
    if name:
        return name
    path = element.get("path")
    if path:
        return path
    return element.tag
