"""Semantic type aliases for identifiers.

NewType gives zero-runtime-cost distinction between the engine-internal
node identity and the human-visible node name.
"""

from typing import NewType

NodeUID = NewType("NodeUID", str)
"""Engine-internal node identity, e.g. ``"A(FixedResultPipe)"``."""

AdapterName = NewType("AdapterName", str)
"""Name attribute of an adapter element."""
