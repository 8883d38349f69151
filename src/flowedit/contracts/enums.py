"""Roles and hints shared between the text layer and the graph layer."""

from enum import StrEnum


class NodeRole(StrEnum):
    """Structural role of a node in the flow.

    Role is inferred from the element's tag name, never declared in the text.
    """

    RECEIVER = "receiver"
    PIPE = "pipe"
    EXIT = "exit"


class EdgeHint(StrEnum):
    """Styling hint attached to an edge for the renderer.

    The engine treats forward labels as opaque strings; only these
    label families get a dedicated hint.
    """

    PRIMARY = "primary"  # success
    ALTERNATE = "alternate"  # failure / exception
    DASHED = "dashed"  # request / response
    DEFAULT = "default"
