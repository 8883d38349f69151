"""Flow structure: node model, extraction, assembly and forward resolution.

Control flow: text -> extract() -> assemble() -> resolve_forwards().
"""

from flowedit.core.flow.assembler import assemble, derive_uid
from flowedit.core.flow.duplicates import (
    check_name_available,
    check_no_duplicates,
    find_duplicates,
    unique_node_name,
)
from flowedit.core.flow.extractor import declared_first_pipe, extract, extract_scope
from flowedit.core.flow.forwards import ExitPlacement, hint_for_label, place_exits, resolve_forwards
from flowedit.core.flow.graph import FlowGraph, FlowWarning
from flowedit.core.flow.models import (
    Edge,
    FlowStructure,
    ForwardDeclaration,
    Node,
    NodeAttribute,
    Position,
    SourceRange,
)
from flowedit.core.flow.serialize import edges_to_dict, structure_to_dict

__all__ = [
    "Edge",
    "ExitPlacement",
    "FlowGraph",
    "FlowStructure",
    "FlowWarning",
    "ForwardDeclaration",
    "Node",
    "NodeAttribute",
    "Position",
    "SourceRange",
    "assemble",
    "check_name_available",
    "check_no_duplicates",
    "declared_first_pipe",
    "derive_uid",
    "edges_to_dict",
    "extract",
    "extract_scope",
    "find_duplicates",
    "hint_for_label",
    "place_exits",
    "resolve_forwards",
    "structure_to_dict",
    "unique_node_name",
]
