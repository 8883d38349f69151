# tests/unit/core/patch/test_patch_move.py
"""Tests for moving nodes on the canvas."""

import pytest

from flowedit.contracts.errors import NodeNotFoundError
from flowedit.core.patch import MoveNode, patch


class TestMoveNode:
    def test_existing_position_rewritten_in_place(self, chained_flow: str) -> None:
        result = patch(chained_flow, MoveNode("A", 10, 20))

        assert result == chained_flow.replace('x="100" y="50"', 'x="10" y="20"')

    def test_missing_position_appended(self, chained_flow: str) -> None:
        result = patch(chained_flow, MoveNode("B", 10, 20))

        assert result == chained_flow.replace(
            '<XsltPipe name="B" styleSheetName="b.xsl"/>',
            '<XsltPipe name="B" styleSheetName="b.xsl" x="10" y="20"/>',
        )

    def test_namespaced_pair_is_kept(self) -> None:
        text = "<Pipeline><EchoPipe name='A' flow:x='1' flow:y='2'/></Pipeline>"

        assert patch(text, MoveNode("A", 5, 6)) == "<Pipeline><EchoPipe name='A' flow:x='5' flow:y='6'/></Pipeline>"

    def test_half_position_is_completed(self) -> None:
        text = '<Pipeline><EchoPipe name="A" x="1"/></Pipeline>'

        assert patch(text, MoveNode("A", 7, 8)) == '<Pipeline><EchoPipe name="A" x="7" y="8"/></Pipeline>'

    def test_same_position_is_a_no_op(self, chained_flow: str) -> None:
        assert patch(chained_flow, MoveNode("A", 100, 50)) == chained_flow

    def test_move_exit_inside_exits_container(self, adapter_document: str) -> None:
        result = patch(adapter_document, MoveNode("READY", 0, 0))

        assert '<Exit path="READY" state="success" x="0" y="0"/>' in result

    def test_unknown_node_rejected(self, chained_flow: str) -> None:
        with pytest.raises(NodeNotFoundError):
            patch(chained_flow, MoveNode("Z", 0, 0))
