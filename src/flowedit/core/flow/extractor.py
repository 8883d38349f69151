"""Structure extractor: markup text -> ordered list of nodes.

The extractor reads; it does not judge. It returns every receiver, pipe
and exit of the selected flow in source order, with attributes, forwards,
positions and exact source ranges. Roles and uids are assigned later by
the assembler.
"""

from __future__ import annotations

from types import MappingProxyType

from flowedit.core.config import EngineSettings, default_settings
from flowedit.core.document import DocumentContext, FlowScope, load_scope
from flowedit.core.flow.models import ForwardDeclaration, Node, NodeAttribute, Position, SourceRange
from flowedit.core.flow.vocabulary import display_name, node_elements
from flowedit.core.logging import get_logger
from flowedit.core.markup import Element, LineIndex

logger = get_logger(__name__)


def extract(text: str, settings: EngineSettings | None = None, *, adapter: str | None = None) -> list[Node]:
    """Extract the nodes of one flow from a markup text.

    Args:
        text: Full document text
        settings: Vocabulary (defaults to the built-in settings)
        adapter: Adapter to read; None selects the first one

    Returns:
        Nodes in source order

    Raises:
        MalformedElementError: If the markup is not balanced
        AdapterNotFoundError: If the named adapter is absent
    """
    settings = settings or default_settings()
    return extract_scope(load_scope(DocumentContext(text=text, adapter=adapter), settings), settings)


def extract_scope(scope: FlowScope, settings: EngineSettings) -> list[Node]:
    """Extract nodes from an already-selected scope."""
    lines = scope.document.lines
    return [_build_node(element, lines, settings) for element in node_elements(scope, settings)]


def declared_first_pipe(scope: FlowScope, settings: EngineSettings) -> str | None:
    """The pipeline's firstPipe attribute, or None when absent or blank."""
    if scope.pipeline is None:
        return None
    value = scope.pipeline.get(settings.first_pipe_attribute)
    if value is None or not value.strip():
        return None
    return value


def source_range(element: Element, lines: LineIndex) -> SourceRange:
    return SourceRange(
        start=element.start,
        end=element.end,
        start_line=lines.line_of(element.start),
        end_line=lines.line_of(element.end),
    )


def _build_node(element: Element, lines: LineIndex, settings: EngineSettings) -> Node:
    attributes: dict[str, NodeAttribute] = {}
    for scanned in element.attributes:
        line, start_column = lines.position(scanned.start)
        attributes[scanned.name] = NodeAttribute(
            name=scanned.name,
            value=scanned.value,
            line=line,
            start_column=start_column,
            end_column=start_column + (scanned.end - scanned.start),
        )

    position, has_position = _read_position(element, settings)
    forwards = tuple(_build_forward(child, lines) for child in element.children if child.tag == settings.forward_tag)

    return Node(
        type=element.tag,
        name=display_name(element),
        source_range=source_range(element, lines),
        attributes=MappingProxyType(attributes),
        position=position,
        has_position=has_position,
        forwards=forwards,
        path=element.get("path"),
    )


def _build_forward(element: Element, lines: LineIndex) -> ForwardDeclaration:
    name = element.get("name") or ""
    # A forward without a path points at the node named like the forward
    path = element.get("path")
    return ForwardDeclaration(
        name=name,
        target_path=path if path else name,
        source_range=source_range(element, lines),
    )


def _read_position(element: Element, settings: EngineSettings) -> tuple[Position, bool]:
    """Read the first recognized position pair; missing coordinates are 0."""
    for pair in settings.position_attributes:
        raw_x = element.get(pair.x)
        raw_y = element.get(pair.y)
        if raw_x is None and raw_y is None:
            continue
        position = Position(x=_coordinate(raw_x, element, pair.x), y=_coordinate(raw_y, element, pair.y))
        return position, raw_x is not None and raw_y is not None
    return Position(), False


def _coordinate(raw: str | None, element: Element, attribute: str) -> int:
    if raw is None:
        return 0
    try:
        return round(float(raw))
    except (ValueError, OverflowError):
        logger.debug("non_numeric_position", tag=element.tag, attribute=attribute, value=raw)
        return 0
