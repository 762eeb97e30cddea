"""Tests for parsing/dom.py — query helpers and the two text extraction modes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from covview.parsing.dom import (
    all_by_class,
    all_by_tag,
    attr,
    child_elements,
    display_text,
    first_by_tag,
    full_text,
    parse_html,
    text,
)

if TYPE_CHECKING:
    from bs4 import Tag


def _pre(markup: str) -> Tag | None:
    return first_by_tag(parse_html(f"<pre>{markup}</pre>"), "pre")


# ── Query helpers ───────────────────────────────────────────────


class TestQueries:
    """Tests for the None-safe element queries."""

    def test_first_by_tag(self) -> None:
        doc = parse_html("<div><p>one</p><p>two</p></div>")
        assert text(first_by_tag(doc, "p")) == "one"

    def test_first_by_tag_missing(self) -> None:
        assert first_by_tag(parse_html("<div></div>"), "table") is None

    def test_none_node_is_total(self) -> None:
        assert first_by_tag(None, "p") is None
        assert all_by_tag(None, "p") == []
        assert all_by_class(None, "x") == []
        assert child_elements(None) == []
        assert text(None) == ""
        assert attr(None, "href") is None

    def test_all_by_tag_document_order(self) -> None:
        doc = parse_html("<ul><li>a</li><li>b<ul><li>c</li></ul></li></ul>")
        assert [el.get_text() for el in all_by_tag(doc, "li")] == ["a", "bc", "c"]

    def test_all_by_class_matches_single_token(self) -> None:
        doc = parse_html(
            '<table class="coverage"></table><table class="coverage-summary"></table>'
        )
        assert len(all_by_class(doc, "coverage")) == 1
        assert len(all_by_class(doc, "coverage-summary")) == 1

    def test_child_elements_only_direct(self) -> None:
        doc = parse_html("<tr><td>1<td>nested</td></td><td>2</td></tr>")
        row = first_by_tag(doc, "tr")
        assert len(child_elements(row, "td")) == 2

    def test_child_elements_skips_text_nodes(self) -> None:
        div = first_by_tag(parse_html("<div>a<span>b</span>c<em>d</em></div>"), "div")
        assert [el.name for el in child_elements(div)] == ["span", "em"]

    def test_text_joins_fragments(self) -> None:
        doc = parse_html("<h1> <a>All files</a> <span>src</span> </h1>")
        assert text(first_by_tag(doc, "h1")) == "All files src"

    def test_attr_joins_class_list(self) -> None:
        span = first_by_tag(parse_html('<span class="cline-any cline-no"></span>'), "span")
        assert attr(span, "class") == "cline-any cline-no"

    def test_attr_plain_and_missing(self) -> None:
        link = first_by_tag(parse_html('<a href="math.js.html">m</a>'), "a")
        assert attr(link, "href") == "math.js.html"
        assert attr(link, "title") is None


# ── Extraction ──────────────────────────────────────────────────


class TestFullText:
    """Tests for full_text (decorations included)."""

    def test_plain_text_unchanged(self) -> None:
        assert full_text(_pre("a = 1;\nb = 2;")) == "a = 1;\nb = 2;"

    def test_separator_around_decoration(self) -> None:
        assert full_text(_pre("a(<span>b</span>, c);")) == "a( b , c);"

    def test_no_separator_next_to_line_break(self) -> None:
        assert full_text(_pre("x\n<span>y</span>\nz")) == "x\ny\nz"

    def test_decoration_at_start(self) -> None:
        assert full_text(_pre("<span>foo()</span>;")) == "foo() ;"

    def test_nested_decoration_text_is_flattened(self) -> None:
        assert full_text(_pre("x <span>f(<span>a</span>)</span>")) == "x  f(a)"

    def test_custom_separator(self) -> None:
        assert full_text(_pre("a<span>b</span>c"), "|") == "a|b|c"

    def test_comments_skipped(self) -> None:
        assert full_text(_pre("a<!-- note -->b")) == "ab"

    def test_none_is_empty(self) -> None:
        assert full_text(None) == ""


class TestDisplayText:
    """Tests for display_text (decorations omitted)."""

    def test_decoration_text_dropped(self) -> None:
        assert display_text(_pre("a(<span>b</span>, c);")) == "a(, c);"

    def test_keeps_line_breaks_inside_decoration(self) -> None:
        assert display_text(_pre("a = <span>f(\n  1)</span>;")) == "a = \n;"

    def test_line_counts_match_full_text(self) -> None:
        node = _pre("a = <span>f(\n  1)</span>;\nb\n<span>c\nd</span>")
        assert full_text(node).count("\n") == display_text(node).count("\n")

    def test_nested_decorations_dropped(self) -> None:
        assert display_text(_pre("x <span>f(<span>a</span>)</span>")) == "x "

    def test_none_is_empty(self) -> None:
        assert display_text(None) == ""
