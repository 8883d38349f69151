# tests/unit/core/markup/test_scanner.py
"""Tests for the recursive-descent markup scanner."""

import pytest

from flowedit.contracts.errors import MalformedElementError


class TestScanElements:
    """Element boundaries and nesting."""

    def test_scan_nested_elements_with_offsets(self) -> None:
        from flowedit.core.markup import scan

        text = '<Pipeline><EchoPipe name="A"/></Pipeline>'
        document = scan(text)

        assert len(document.roots) == 1
        pipeline = document.roots[0]
        assert pipeline.tag == "Pipeline"
        assert pipeline.start == 0
        assert pipeline.end == len(text)
        assert pipeline.close_start == text.index("</Pipeline>")

        (pipe,) = pipeline.children
        assert pipe.tag == "EchoPipe"
        assert pipe.self_closing
        assert text[pipe.start : pipe.end] == '<EchoPipe name="A"/>'

    def test_open_end_points_past_opening_tag(self) -> None:
        from flowedit.core.markup import scan

        text = '<EchoPipe name="A">\n</EchoPipe>'
        (pipe,) = scan(text).roots

        assert text[pipe.start : pipe.open_end] == '<EchoPipe name="A">'
        assert not pipe.self_closing

    def test_iter_is_depth_first_in_source_order(self) -> None:
        from flowedit.core.markup import scan

        document = scan("<A><B><C/></B><D/></A><E/>")

        assert [element.tag for element in document.iter()] == ["A", "B", "C", "D", "E"]

    def test_skips_comments_declarations_and_cdata(self) -> None:
        from flowedit.core.markup import scan

        text = (
            '<?xml version="1.0"?>\n'
            "<!DOCTYPE Configuration>\n"
            "<Configuration>\n"
            "<!-- <EchoPipe name=\"commented\"/> -->\n"
            "<Pipeline><![CDATA[<NotAnElement>]]></Pipeline>\n"
            "</Configuration>\n"
        )
        document = scan(text)

        assert [element.tag for element in document.iter()] == ["Configuration", "Pipeline"]

    def test_text_content_is_ignored(self) -> None:
        from flowedit.core.markup import scan

        (root,) = scan("<Param name='p'>some value</Param>").roots

        assert root.children == ()
        assert root.get("name") == "p"

    def test_child_elements_filters_by_tag(self) -> None:
        from flowedit.core.markup import scan

        (pipe,) = scan('<EchoPipe><Forward name="a"/><Param name="p"/><Forward name="b"/></EchoPipe>').roots

        assert [child.get("name") for child in pipe.child_elements("Forward")] == ["a", "b"]


class TestScanAttributes:
    """Attribute extraction tolerates layout but not broken quoting."""

    def test_attributes_split_across_lines_with_spaces_around_equals(self) -> None:
        from flowedit.core.markup import scan

        text = '<EchoPipe\n    name = "A"\n\tx=\'10\'\n    y="20"/>'
        (pipe,) = scan(text).roots

        assert [attribute.name for attribute in pipe.attributes] == ["name", "x", "y"]
        assert pipe.get("name") == "A"
        assert pipe.get("x") == "10"
        x = pipe.attribute("x")
        assert x is not None
        assert x.quote == "'"
        assert text[x.value_start : x.value_end] == "10"
        assert text[x.start : x.end] == "x='10'"

    def test_attributes_end_after_last_attribute(self) -> None:
        from flowedit.core.markup import scan

        text = '<EchoPipe name="A" />'
        (pipe,) = scan(text).roots

        assert text[: pipe.attributes_end] == '<EchoPipe name="A"'

    def test_attributes_end_without_attributes(self) -> None:
        from flowedit.core.markup import scan

        (pipe,) = scan("<EchoPipe/>").roots

        assert pipe.attributes_end == len("<EchoPipe")

    def test_entities_are_decoded_in_value(self) -> None:
        from flowedit.core.markup import scan

        (pipe,) = scan('<EchoPipe name="a &amp; b &quot;c&quot; &lt;d&gt;"/>').roots

        attribute = pipe.attribute("name")
        assert attribute is not None
        assert attribute.value == 'a & b "c" <d>'
        assert attribute.raw_value == "a &amp; b &quot;c&quot; &lt;d&gt;"

    def test_get_returns_default_for_missing(self) -> None:
        from flowedit.core.markup import scan

        (pipe,) = scan("<EchoPipe/>").roots

        assert pipe.get("name") is None
        assert pipe.get("name", "fallback") == "fallback"

    def test_namespaced_attribute_names(self) -> None:
        from flowedit.core.markup import scan

        (pipe,) = scan('<EchoPipe flow:x="5" flow:y="6"/>').roots

        assert pipe.get("flow:x") == "5"
        assert pipe.get("flow:y") == "6"


class TestScanErrors:
    """Malformed markup fails loudly with a location."""

    def test_unclosed_element_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match=r"<EchoPipe> is never closed") as exc_info:
            scan('<Pipeline>\n<EchoPipe name="A">\n')

        # Innermost open element is reported, at its opening tag
        assert exc_info.value.line == 2
        assert exc_info.value.column == 1

    def test_element_never_closed_at_eof(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match=r"<Pipeline> is never closed") as exc_info:
            scan("<Pipeline>\n")

        assert exc_info.value.offset == 0
        assert exc_info.value.line == 1
        assert exc_info.value.column == 1

    def test_mismatched_closing_tag_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match="does not match"):
            scan("<EchoPipe></XsltPipe>")

    def test_stray_closing_tag_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match="no matching opening tag"):
            scan("<EchoPipe/></EchoPipe>")

    def test_unterminated_attribute_value_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match="Unterminated value"):
            scan('<EchoPipe name="A/>')

    def test_unquoted_value_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match="unquoted"):
            scan("<EchoPipe name=A/>")

    def test_attribute_without_value_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match="has no value"):
            scan("<EchoPipe disabled/>")

    def test_duplicate_attribute_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match="Duplicate attribute 'name'"):
            scan('<EchoPipe name="A" name="B"/>')

    def test_unterminated_comment_raises(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError, match="Unterminated comment"):
            scan("<Pipeline><!-- open </Pipeline>")

    def test_error_reports_line_and_column(self) -> None:
        from flowedit.core.markup import scan

        with pytest.raises(MalformedElementError) as exc_info:
            scan('<Pipeline>\n  <EchoPipe name=A/>\n</Pipeline>')

        assert exc_info.value.line == 2
        assert exc_info.value.column == 13
        assert "line 2, column 13" in str(exc_info.value)
