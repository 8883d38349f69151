# tests/property/__init__.py
"""Property-based tests for flowedit.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific documents we think of: a parse is deterministic, a
patch never touches text outside its edited span, and an assembled flow
never carries two nodes with one uid.
"""
