# tests/unit/core/patch/test_patch_forwards.py
"""Tests for adding, removing and retargeting forwards."""

import pytest

from flowedit.contracts.errors import ChildElementNotFoundError, NodeNotFoundError
from flowedit.core.patch import AddForward, ChangeForwardTarget, RemoveForward, patch


class TestAddForward:
    def test_self_closing_pipe_is_expanded(self, chained_flow: str) -> None:
        result = patch(chained_flow, AddForward("B", "C"))

        assert result == chained_flow.replace(
            '\t\t<XsltPipe name="B" styleSheetName="b.xsl"/>\n',
            '\t\t<XsltPipe name="B" styleSheetName="b.xsl">\n'
            '\t\t\t<Forward name="success" path="C"/>\n'
            "\t\t</XsltPipe>\n",
        )

    def test_appended_after_last_child_line(self, adapter_document: str) -> None:
        result = patch(adapter_document, AddForward("Start", "ERROR", "exception"))

        assert result == adapter_document.replace(
            '\t\t\t\t<Forward name="success" path="READY"/>\n',
            '\t\t\t\t<Forward name="success" path="READY"/>\n'
            '\t\t\t\t<Forward name="exception" path="ERROR"/>\n',
        )

    def test_closing_tag_sharing_a_line(self) -> None:
        text = '<Pipeline>\n<EchoPipe name="A"><Forward name="success" path="B"/></EchoPipe>\n</Pipeline>'

        result = patch(text, AddForward("A", "ERR", "failure"))

        assert result == (
            '<Pipeline>\n<EchoPipe name="A"><Forward name="success" path="B"/>\n'
            '\t<Forward name="failure" path="ERR"/>\n'
            "</EchoPipe>\n</Pipeline>"
        )

    def test_new_forward_resolves(self, chained_flow: str) -> None:
        from flowedit.core.document import DocumentContext
        from flowedit.engine import FlowEngine

        result = FlowEngine().parse(DocumentContext(patch(chained_flow, AddForward("A", "C"))))

        assert result.ok
        triples = [(edge.source, edge.target, edge.implicit) for edge in result.edges]
        assert ("A(EchoPipe)", "C(JsonValidator)", False) in triples
        assert ("A(EchoPipe)", "B(XsltPipe)", True) not in triples

    def test_target_is_escaped(self, chained_flow: str) -> None:
        assert 'path="a&lt;b"' in patch(chained_flow, AddForward("A", "a<b"))

    def test_unknown_source_rejected(self, chained_flow: str) -> None:
        with pytest.raises(NodeNotFoundError):
            patch(chained_flow, AddForward("Z", "A"))


class TestRemoveForward:
    def test_line_removed_whole(self, adapter_document: str) -> None:
        result = patch(adapter_document, RemoveForward("Start", "READY"))

        assert result == adapter_document.replace('\t\t\t\t<Forward name="success" path="READY"/>\n', "")

    def test_inline_forward_removed(self, simple_flow: str) -> None:
        result = patch(simple_flow, RemoveForward("A", "EXIT"))

        assert result == simple_flow.replace('<Forward name="success" path="EXIT"/>', "")

    def test_forward_matched_by_name_when_pathless(self) -> None:
        text = "<Pipeline><EchoPipe name='A'><Forward name='B'/></EchoPipe><EchoPipe name='B'/></Pipeline>"

        assert patch(text, RemoveForward("A", "B")) == "<Pipeline><EchoPipe name='A'></EchoPipe><EchoPipe name='B'/></Pipeline>"

    def test_missing_forward_rejected(self, simple_flow: str) -> None:
        with pytest.raises(ChildElementNotFoundError) as exc_info:
            patch(simple_flow, RemoveForward("A", "ELSEWHERE"))

        assert exc_info.value.child_tag == "Forward"
        assert exc_info.value.key == "ELSEWHERE"
        assert isinstance(exc_info.value, NodeNotFoundError)


class TestChangeForwardTarget:
    def test_path_rewritten(self, simple_flow: str) -> None:
        result = patch(simple_flow, ChangeForwardTarget("A", "EXIT", "OTHER"))

        assert result == simple_flow.replace('<Forward name="success" path="EXIT"/>', '<Forward name="success" path="OTHER"/>')

    def test_pathless_forward_gains_path(self) -> None:
        text = "<Pipeline><EchoPipe name='A'><Forward name='B'/></EchoPipe></Pipeline>"

        assert patch(text, ChangeForwardTarget("A", "B", "C")) == (
            "<Pipeline><EchoPipe name='A'><Forward name='B' path=\"C\"/></EchoPipe></Pipeline>"
        )

    def test_missing_forward_rejected(self, simple_flow: str) -> None:
        with pytest.raises(ChildElementNotFoundError):
            patch(simple_flow, ChangeForwardTarget("A", "NOPE", "EXIT"))
