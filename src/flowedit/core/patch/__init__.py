"""Text Patch Engine: graph mutations as minimal text replacements."""

from flowedit.core.patch.edits import TextEdit, apply_edits, changed_span, escape_value
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
from flowedit.core.patch.patcher import patch, plan_edits

__all__ = [
    "AddAttribute",
    "AddForward",
    "AddNode",
    "AddParameter",
    "ChangeAttribute",
    "ChangeForwardTarget",
    "ChangeNodeType",
    "DeleteNode",
    "MoveNode",
    "Operation",
    "RemoveAttribute",
    "RemoveFirstPipe",
    "RemoveForward",
    "RemoveParameter",
    "RenameNode",
    "SetFirstPipe",
    "TextEdit",
    "apply_edits",
    "changed_span",
    "escape_value",
    "patch",
    "plan_edits",
]
