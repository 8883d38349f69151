"""JSON-ready views of flow structures and edges.

Renderers and the CLI consume plain dicts; the frozen model types stay
internal. Output key order is stable so JSON diffs stay readable.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from flowedit.core.flow.models import Edge, FlowStructure, Node


def node_to_dict(node: Node) -> dict[str, Any]:
    return {
        "uid": node.uid,
        "name": node.name,
        "type": node.type,
        "role": node.role.value if node.role is not None else None,
        "path": node.path,
        "active": node.active,
        "position": {"x": node.position.x, "y": node.position.y} if node.has_position else None,
        "attributes": {
            name: {
                "value": attribute.value,
                "line": attribute.line,
                "columns": [attribute.start_column, attribute.end_column],
            }
            for name, attribute in node.attributes.items()
        },
        "forwards": [{"name": forward.name, "path": forward.target_path} for forward in node.forwards],
        "source_range": {
            "start": node.source_range.start,
            "end": node.source_range.end,
            "start_line": node.source_range.start_line,
            "end_line": node.source_range.end_line,
        },
    }


def structure_to_dict(structure: FlowStructure) -> dict[str, Any]:
    """Serialize a flow structure; role views are given as uid lists."""
    return {
        "adapter": structure.adapter,
        "first_pipe": structure.first_pipe,
        "implicit_first_pipe": structure.implicit_first_pipe,
        "implicit_exit": structure.implicit_exit,
        "last_pipe": structure.last_pipe,
        "nodes": [node_to_dict(node) for node in structure.nodes],
        "receivers": [node.uid for node in structure.receivers],
        "pipes": [node.uid for node in structure.pipes],
        "exits": [node.uid for node in structure.exits],
    }


def edges_to_dict(edges: Iterable[Edge]) -> list[dict[str, Any]]:
    return [
        {
            "source": edge.source,
            "target": edge.target,
            "label": edge.label,
            "hint": edge.hint.value,
            "implicit": edge.implicit,
        }
        for edge in edges
    ]
