# tests/unit/core/patch/test_edits.py
"""Tests for text edits and the line helpers used to place them."""

import pytest

from flowedit.core.patch.edits import (
    TextEdit,
    apply_edits,
    changed_span,
    escape_value,
    line_indent,
    removal_span,
    starts_line,
)


class TestTextEdit:
    def test_insert_is_an_empty_span(self) -> None:
        assert apply_edits("ac", [TextEdit(1, 1, "b")]) == "abc"

    def test_negative_or_reversed_span_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid edit span"):
            TextEdit(3, 2, "")
        with pytest.raises(ValueError, match="Invalid edit span"):
            TextEdit(-1, 0, "")


class TestApplyEdits:
    def test_edits_applied_in_offset_order(self) -> None:
        text = "<A x='1' y='2'/>"

        result = apply_edits(text, [TextEdit(12, 13, "20"), TextEdit(6, 7, "10")])

        assert result == "<A x='10' y='20'/>"

    def test_no_edits_returns_text(self) -> None:
        assert apply_edits("unchanged", []) == "unchanged"

    def test_overlapping_edits_rejected(self) -> None:
        with pytest.raises(ValueError, match="Overlapping"):
            apply_edits("abcdef", [TextEdit(0, 3, "x"), TextEdit(2, 4, "y")])

    def test_adjacent_edits_allowed(self) -> None:
        assert apply_edits("abcd", [TextEdit(0, 2, "X"), TextEdit(2, 4, "Y")]) == "XY"

    def test_edit_outside_text_rejected(self) -> None:
        with pytest.raises(ValueError, match="outside text"):
            apply_edits("abc", [TextEdit(2, 5, "")])


class TestChangedSpan:
    def test_covers_every_edit(self) -> None:
        assert changed_span([TextEdit(10, 12, ""), TextEdit(3, 3, "x")]) == (3, 12)

    def test_none_without_edits(self) -> None:
        assert changed_span([]) is None


class TestEscapeValue:
    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("plain", "plain"),
            ("a&b", "a&amp;b"),
            ("<tag>", "&lt;tag&gt;"),
            ('say "hi"', "say &quot;hi&quot;"),
            ("it's", "it&apos;s"),
        ],
    )
    def test_escape(self, raw: str, escaped: str) -> None:
        assert escape_value(raw) == escaped


class TestLineHelpers:
    def test_line_indent(self) -> None:
        text = "<A>\n\t\t<B/>\n</A>"

        assert line_indent(text, text.index("<B")) == "\t\t"
        assert line_indent(text, 0) == ""

    def test_starts_line(self) -> None:
        text = "<A>\n  <B/><C/>\n</A>"

        assert starts_line(text, text.index("<B"))
        assert not starts_line(text, text.index("<C"))


class TestRemovalSpan:
    def test_element_alone_on_its_line_takes_the_line(self) -> None:
        text = "a\n  <X/>\nb"

        start, end = removal_span(text, 4, 8)

        assert text[:start] + text[end:] == "a\nb"

    def test_crlf_line_ending_is_removed_whole(self) -> None:
        text = "a\r\n<X/>\r\nb"

        start, end = removal_span(text, 3, 7)

        assert text[:start] + text[end:] == "a\r\nb"

    def test_inline_element_removes_only_itself(self) -> None:
        assert removal_span("<P><X/></P>", 3, 7) == (3, 7)

    def test_element_followed_by_content_removes_only_itself(self) -> None:
        assert removal_span("<X/> <Y/>", 0, 4) == (0, 4)

    def test_trailing_whitespace_at_end_of_text(self) -> None:
        text = "a\n<X/>  "

        start, end = removal_span(text, 2, 6)

        assert text[:start] + text[end:] == "a\n"
