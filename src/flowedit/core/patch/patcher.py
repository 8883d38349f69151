"""Text Patch Engine: graph mutation -> minimal text replacement.

Each operation is planned as a list of TextEdits against a fresh scan of
the text it is given, then applied in one pass. Everything outside the
edited spans is returned byte-for-byte. Names that would collide are
rejected before any text changes.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

from flowedit.contracts.enums import NodeRole
from flowedit.contracts.errors import AttributeNotFoundError, InvalidOperationError, NodeNotFoundError
from flowedit.core.config import EngineSettings, default_settings
from flowedit.core.document import DocumentContext, FlowScope, load_scope
from flowedit.core.flow.duplicates import check_name_available
from flowedit.core.flow.vocabulary import classify_type, display_name, node_elements
from flowedit.core.markup import Element, ScannedAttribute
from flowedit.core.patch.edits import (
    TextEdit,
    apply_edits,
    escape_value,
    line_indent,
    line_start,
    removal_span,
    starts_line,
)
from flowedit.core.patch.locator import (
    forward_target,
    locate_child,
    locate_node,
    node_names,
    require_pipeline,
)
from flowedit.core.patch.operations import (
    AddAttribute,
    AddForward,
    AddNode,
    AddParameter,
    ChangeAttribute,
    ChangeForwardTarget,
    ChangeNodeType,
    DeleteNode,
    MoveNode,
    Operation,
    RemoveAttribute,
    RemoveFirstPipe,
    RemoveForward,
    RemoveParameter,
    RenameNode,
    SetFirstPipe,
)

_NAME_TOKEN = re.compile(r"[A-Za-z_][\w.:-]*")
_TAG_WHITESPACE = " \t\r\n"

_Handler: TypeAlias = Callable[[str, FlowScope, Any, EngineSettings], list[TextEdit]]


def patch(
    text: str,
    operation: Operation,
    settings: EngineSettings | None = None,
    *,
    adapter: str | None = None,
) -> str:
    """Apply one operation to a text snapshot.

    Args:
        text: Current document text
        operation: The mutation to perform
        settings: Vocabulary and generation conventions
        adapter: Adapter the operation applies to; None selects the first

    Returns:
        The entire document with only the affected spans replaced

    Raises:
        NodeNotFoundError: If the target node (or child) is not in the text
        DuplicateNodeError: If the edit would introduce a name collision
        FlowStructureError: For any other reason the edit cannot apply
    """
    settings = settings or default_settings()
    return apply_edits(text, plan_edits(DocumentContext(text=text, adapter=adapter), operation, settings))


def plan_edits(context: DocumentContext, operation: Operation, settings: EngineSettings) -> list[TextEdit]:
    """Compute the edits for one operation without applying them."""
    handler = _HANDLERS.get(type(operation))
    if handler is None:
        raise TypeError(f"Unsupported operation: {type(operation).__name__}")
    scope = load_scope(context, settings)
    return handler(context.text, scope, operation, settings)


# -- helpers ---------------------------------------------------------------


def _check_token(operation: str, value: str, what: str) -> None:
    if not _NAME_TOKEN.fullmatch(value):
        raise InvalidOperationError(operation, f"{value!r} is not a valid {what}")


def _check_node_name(operation: str, name: str) -> None:
    if not name.strip():
        raise InvalidOperationError(operation, "node name must not be empty")


def _element_markup(tag: str, attributes: Sequence[tuple[str, str]]) -> str:
    rendered = "".join(f' {name}="{escape_value(value)}"' for name, value in attributes)
    return f"<{tag}{rendered}/>"


def _set_attributes(element: Element, values: Sequence[tuple[str, str]]) -> list[TextEdit]:
    """Rewrite existing attribute values in place; append missing ones."""
    edits: list[TextEdit] = []
    missing: list[str] = []
    for name, value in values:
        escaped = escape_value(value)
        attribute = element.attribute(name)
        if attribute is None:
            missing.append(f' {name}="{escaped}"')
        elif attribute.raw_value != escaped:
            edits.append(TextEdit(attribute.value_start, attribute.value_end, escaped))
    if missing:
        edits.append(TextEdit(element.attributes_end, element.attributes_end, "".join(missing)))
    return edits


def _child_indent(text: str, element: Element, settings: EngineSettings) -> str:
    for child in reversed(element.children):
        if starts_line(text, child.start):
            return line_indent(text, child.start)
    return line_indent(text, element.start) + settings.indent_unit


def _insert_child(text: str, element: Element, markup: str, settings: EngineSettings) -> TextEdit:
    """Append ``markup`` as the last child of ``element``.

    A self-closing element is expanded into an open/close pair; a closing
    tag that shares its line with other content is moved to a new line.
    """
    indent = line_indent(text, element.start)
    child_indent = _child_indent(text, element, settings)
    if element.close_start is None:
        return TextEdit(element.attributes_end, element.end, f">\n{child_indent}{markup}\n{indent}</{element.tag}>")
    if starts_line(text, element.close_start):
        at = line_start(text, element.close_start)
        return TextEdit(at, at, f"{child_indent}{markup}\n")
    return TextEdit(element.close_start, element.close_start, f"\n{child_indent}{markup}\n{indent}")


def _insert_first_child(text: str, element: Element, markup: str, settings: EngineSettings) -> TextEdit:
    if not element.children:
        return _insert_child(text, element, markup, settings)
    child_indent = _child_indent(text, element, settings)
    return TextEdit(element.open_end, element.open_end, f"\n{child_indent}{markup}")


def _insert_after(text: str, element: Element, markup: str) -> TextEdit:
    return TextEdit(element.end, element.end, f"\n{line_indent(text, element.start)}{markup}")


def _remove_element(text: str, element: Element) -> TextEdit:
    start, end = removal_span(text, element.start, element.end)
    return TextEdit(start, end, "")


def _remove_attribute_text(text: str, attribute: ScannedAttribute) -> TextEdit:
    """Delete an attribute together with the whitespace separating it from the tag."""
    start = attribute.start
    while start > 0 and text[start - 1] in _TAG_WHITESPACE:
        start -= 1
    return TextEdit(start, attribute.end, "")


def _elements_with_role(scope: FlowScope, role: NodeRole, settings: EngineSettings) -> list[Element]:
    return [element for element in node_elements(scope, settings) if classify_type(element.tag, settings) == role]


# -- handlers --------------------------------------------------------------


def _rename_node(text: str, scope: FlowScope, op: RenameNode, settings: EngineSettings) -> list[TextEdit]:
    _check_node_name(op.kind, op.new_name)
    element = locate_node(scope, op.old_name, settings)
    if op.new_name == op.old_name:
        return []
    check_name_available(node_names(scope, settings), op.new_name)

    escaped = escape_value(op.new_name)
    identity = [attribute for attribute in (element.attribute("name"), element.attribute("path")) if attribute is not None]
    matching = [attribute for attribute in identity if attribute.value == op.old_name]
    if matching:
        edits = [TextEdit(attribute.value_start, attribute.value_end, escaped) for attribute in matching]
    else:
        # Node was named after its tag
        edits = _set_attributes(element, [("name", op.new_name)])

    # References match on the whole value only; FooBar never matches Foo
    for node in node_elements(scope, settings):
        for forward in node.child_elements(settings.forward_tag):
            path = forward.attribute("path")
            if path is not None and path.value == op.old_name:
                edits.append(TextEdit(path.value_start, path.value_end, escaped))
            elif path is None and forward_target(forward) == op.old_name:
                # Pathless forwards target their name; keep the label, add a path
                edits.extend(_set_attributes(forward, [("path", op.new_name)]))
    if scope.pipeline is not None:
        first_pipe = scope.pipeline.attribute(settings.first_pipe_attribute)
        if first_pipe is not None and first_pipe.value == op.old_name:
            edits.append(TextEdit(first_pipe.value_start, first_pipe.value_end, escaped))
    return edits


def _move_node(text: str, scope: FlowScope, op: MoveNode, settings: EngineSettings) -> list[TextEdit]:
    element = locate_node(scope, op.name, settings)
    pair = next(
        (
            candidate
            for candidate in settings.position_attributes
            if element.attribute(candidate.x) is not None or element.attribute(candidate.y) is not None
        ),
        settings.insert_position,
    )
    return _set_attributes(element, [(pair.x, str(op.x)), (pair.y, str(op.y))])


def _add_forward(text: str, scope: FlowScope, op: AddForward, settings: EngineSettings) -> list[TextEdit]:
    element = locate_node(scope, op.source_name, settings)
    markup = _element_markup(settings.forward_tag, [("name", op.forward_name), ("path", op.target_path)])
    return [_insert_child(text, element, markup, settings)]


def _remove_forward(text: str, scope: FlowScope, op: RemoveForward, settings: EngineSettings) -> list[TextEdit]:
    element = locate_node(scope, op.source_name, settings)
    forward = locate_child(
        element,
        op.source_name,
        settings.forward_tag,
        op.target_path,
        lambda child: forward_target(child) == op.target_path,
    )
    return [_remove_element(text, forward)]


def _change_forward_target(
    text: str, scope: FlowScope, op: ChangeForwardTarget, settings: EngineSettings
) -> list[TextEdit]:
    element = locate_node(scope, op.source_name, settings)
    forward = locate_child(
        element,
        op.source_name,
        settings.forward_tag,
        op.old_target,
        lambda child: forward_target(child) == op.old_target,
    )
    return _set_attributes(forward, [("path", op.new_target)])


def _add_node(text: str, scope: FlowScope, op: AddNode, settings: EngineSettings) -> list[TextEdit]:
    _check_token(op.kind, op.template, "element tag")
    _check_node_name(op.kind, op.name)
    role = classify_type(op.template, settings)
    if role is None:
        raise InvalidOperationError(op.kind, f"<{op.template}> is not a receiver, pipe or exit")
    check_name_available(node_names(scope, settings), op.name)
    pipeline = require_pipeline(scope, settings)

    pair = settings.insert_position
    position = [(pair.x, str(op.x)), (pair.y, str(op.y))]
    if role == NodeRole.EXIT:
        markup = _element_markup(op.template, [("path", op.name), ("state", settings.default_exit_state), *position])
    else:
        markup = _element_markup(op.template, [("name", op.name), *position])

    if role == NodeRole.RECEIVER:
        if starts_line(text, pipeline.start):
            at = line_start(text, pipeline.start)
            return [TextEdit(at, at, f"{line_indent(text, pipeline.start)}{markup}\n")]
        return [TextEdit(pipeline.start, pipeline.start, markup)]

    pipes = _elements_with_role(scope, NodeRole.PIPE, settings)
    if role == NodeRole.PIPE:
        if pipes:
            return [_insert_after(text, pipes[-1], markup)]
        return [_insert_first_child(text, pipeline, markup, settings)]

    containers = pipeline.child_elements(settings.exits_container_tag)
    if containers:
        exits = containers[0].child_elements(settings.exit_tag)
        if exits:
            return [_insert_after(text, exits[-1], markup)]
        return [_insert_child(text, containers[0], markup, settings)]
    exits = pipeline.child_elements(settings.exit_tag)
    if exits:
        return [_insert_after(text, exits[-1], markup)]
    if pipes:
        return [_insert_after(text, pipes[-1], markup)]
    return [_insert_child(text, pipeline, markup, settings)]


def _delete_node(text: str, scope: FlowScope, op: DeleteNode, settings: EngineSettings) -> list[TextEdit]:
    return [_remove_element(text, locate_node(scope, op.name, settings))]


def _change_node_type(text: str, scope: FlowScope, op: ChangeNodeType, settings: EngineSettings) -> list[TextEdit]:
    element = locate_node(scope, op.name, settings)
    _check_token(op.kind, op.new_type, "element tag")
    role = classify_type(element.tag, settings)
    if classify_type(op.new_type, settings) != role:
        raise InvalidOperationError(op.kind, f"<{op.new_type}> is not a {role} tag")
    if op.new_type == element.tag:
        return []
    tag_start = element.start + 1
    edits = [TextEdit(tag_start, tag_start + len(element.tag), op.new_type)]
    if element.close_start is not None:
        close_tag_start = element.close_start + 2
        edits.append(TextEdit(close_tag_start, close_tag_start + len(element.tag), op.new_type))
    return edits


def _add_attribute(text: str, scope: FlowScope, op: AddAttribute, settings: EngineSettings) -> list[TextEdit]:
    _check_token(op.kind, op.attribute, "attribute name")
    element = locate_node(scope, op.node_name, settings)
    if element.attribute(op.attribute) is not None:
        raise InvalidOperationError(op.kind, f"node '{op.node_name}' already has attribute '{op.attribute}'")
    return _set_attributes(element, [(op.attribute, "")])


def _change_attribute(text: str, scope: FlowScope, op: ChangeAttribute, settings: EngineSettings) -> list[TextEdit]:
    _check_token(op.kind, op.attribute, "attribute name")
    element = locate_node(scope, op.node_name, settings)
    if op.attribute == "name":
        # The name is the node's identity; references follow it
        current = element.get("name")
        if current:
            return _rename_node(text, scope, RenameNode(current, op.value), settings)
        _check_node_name(op.kind, op.value)
        if op.value != display_name(element):
            check_name_available(node_names(scope, settings), op.value)
    return _set_attributes(element, [(op.attribute, op.value)])


def _remove_attribute(text: str, scope: FlowScope, op: RemoveAttribute, settings: EngineSettings) -> list[TextEdit]:
    element = locate_node(scope, op.node_name, settings)
    attribute = element.attribute(op.attribute)
    if attribute is None:
        raise AttributeNotFoundError(op.node_name, op.attribute)
    return [_remove_attribute_text(text, attribute)]


def _add_parameter(text: str, scope: FlowScope, op: AddParameter, settings: EngineSettings) -> list[TextEdit]:
    element = locate_node(scope, op.node_name, settings)
    markup = _element_markup(settings.param_tag, [("name", op.param_name)])
    params = element.child_elements(settings.param_tag)
    if params and starts_line(text, params[-1].start):
        return [_insert_after(text, params[-1], markup)]
    return [_insert_child(text, element, markup, settings)]


def _remove_parameter(text: str, scope: FlowScope, op: RemoveParameter, settings: EngineSettings) -> list[TextEdit]:
    element = locate_node(scope, op.node_name, settings)
    param = locate_child(
        element,
        op.node_name,
        settings.param_tag,
        op.param_name,
        lambda child: child.get("name") == op.param_name,
    )
    return [_remove_element(text, param)]


def _set_first_pipe(text: str, scope: FlowScope, op: SetFirstPipe, settings: EngineSettings) -> list[TextEdit]:
    pipeline = require_pipeline(scope, settings)
    pipe_names = [display_name(element) for element in _elements_with_role(scope, NodeRole.PIPE, settings)]
    if op.name not in pipe_names:
        raise NodeNotFoundError(op.name, detail="no pipe with that name")
    return _set_attributes(pipeline, [(settings.first_pipe_attribute, op.name)])


def _remove_first_pipe(text: str, scope: FlowScope, op: RemoveFirstPipe, settings: EngineSettings) -> list[TextEdit]:
    pipeline = require_pipeline(scope, settings)
    attribute = pipeline.attribute(settings.first_pipe_attribute)
    if attribute is None:
        raise AttributeNotFoundError(settings.pipeline_tag, settings.first_pipe_attribute)
    return [_remove_attribute_text(text, attribute)]


_HANDLERS: dict[type, _Handler] = {
    RenameNode: _rename_node,
    MoveNode: _move_node,
    AddForward: _add_forward,
    RemoveForward: _remove_forward,
    ChangeForwardTarget: _change_forward_target,
    AddNode: _add_node,
    DeleteNode: _delete_node,
    ChangeNodeType: _change_node_type,
    AddAttribute: _add_attribute,
    ChangeAttribute: _change_attribute,
    RemoveAttribute: _remove_attribute,
    AddParameter: _add_parameter,
    RemoveParameter: _remove_parameter,
    SetFirstPipe: _set_first_pipe,
    RemoveFirstPipe: _remove_first_pipe,
}
