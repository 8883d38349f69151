"""Duplicate/conflict detection for node names.

Pure and stateless. Used by the assembler after a parse and by the patch
engine before a rename or add, so an edit that would create a collision
is rejected before it reaches the text.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from flowedit.contracts.errors import DuplicateNodeError


def find_duplicates(names: Iterable[str]) -> list[str]:
    """Names occurring more than once, in order of first occurrence."""
    counts = Counter(names)
    return [name for name, count in counts.items() if count > 1]


def check_no_duplicates(
    names: Iterable[str],
    *,
    error_type: type[DuplicateNodeError] = DuplicateNodeError,
) -> None:
    """Raise if any name occurs more than once.

    Args:
        names: Names (or uids) to check
        error_type: DuplicateNodeError or a subclass taking the names

    Raises:
        DuplicateNodeError: (or error_type) naming every duplicated name
    """
    duplicates = find_duplicates(names)
    if duplicates:
        raise error_type(duplicates)


def check_name_available(existing: Iterable[str], name: str, *, kind: str = "node") -> None:
    """Reject a new name that is already taken.

    Raises:
        DuplicateNodeError: If ``name`` is in ``existing``
    """
    if name in set(existing):
        raise DuplicateNodeError([name], kind=kind)


def unique_node_name(existing: Iterable[str], base: str) -> str:
    """First free name among base, base2, base3, ..."""
    taken = set(existing)
    if base not in taken:
        return base
    suffix = 2
    while f"{base}{suffix}" in taken:
        suffix += 1
    return f"{base}{suffix}"
