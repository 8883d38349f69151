"""Re-locate patch targets in the current text.

Targets are found by name with the same matching rule the extractor uses
(flowedit.core.flow.vocabulary), on a fresh scan of the snapshot being
patched. Source ranges from an earlier parse are never reused.
"""

from __future__ import annotations

from collections.abc import Callable

from flowedit.contracts.errors import ChildElementNotFoundError, NodeNotFoundError
from flowedit.core.config import EngineSettings
from flowedit.core.document import FlowScope
from flowedit.core.flow.vocabulary import display_name, node_elements
from flowedit.core.markup import Element


def locate_node(scope: FlowScope, name: str, settings: EngineSettings) -> Element:
    """The first node element whose display name is ``name``.

    Raises:
        NodeNotFoundError: If no node of the scope has that name
    """
    for element in node_elements(scope, settings):
        if display_name(element) == name:
            return element
    raise NodeNotFoundError(name)


def require_pipeline(scope: FlowScope, settings: EngineSettings) -> Element:
    """The scope's pipeline element.

    Raises:
        NodeNotFoundError: If the selected flow has no pipeline
    """
    if scope.pipeline is None:
        raise NodeNotFoundError(settings.pipeline_tag, detail="document has no pipeline")
    return scope.pipeline


def node_names(scope: FlowScope, settings: EngineSettings) -> list[str]:
    return [display_name(element) for element in node_elements(scope, settings)]


def forward_target(forward: Element) -> str:
    """Effective target of a Forward element: its path, else its name."""
    return forward.get("path") or forward.get("name") or ""


def locate_child(
    element: Element,
    node_name: str,
    tag: str,
    key: str,
    matches: Callable[[Element], bool],
) -> Element:
    """First direct child of ``element`` with ``tag`` that ``matches``.

    Raises:
        ChildElementNotFoundError: If no such child exists
    """
    for child in element.child_elements(tag):
        if matches(child):
            return child
    raise ChildElementNotFoundError(node_name, child_tag=tag, key=key)
