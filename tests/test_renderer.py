"""Tests for the HTML renderer."""

import asyncio

from typstdown.dispatch import render_math
from typstdown.extract import extract_math
from typstdown.nodes import (
    Blockquote,
    Break,
    Code,
    Element,
    Emphasis,
    Foreign,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    MathSegment,
    Paragraph,
    Raw,
    Root,
    Strong,
    Text,
    ThematicBreak,
)
from typstdown.renderers.html import HtmlRenderer, html_escape, render_attributes


def render(node) -> str:  # type: ignore[no-untyped-def]
    return HtmlRenderer().render(node)


class TestBlocks:
    """Block-level markup."""

    def test_paragraph_escapes_text(self) -> None:
        assert render(Paragraph(children=[Text(value="a < b & c")])) == "<p>a &lt; b &amp; c</p>\n"

    def test_heading(self) -> None:
        assert render(Heading(depth=3, children=[Text(value="Hi")])) == "<h3>Hi</h3>\n"

    def test_blockquote(self) -> None:
        html = render(Blockquote(children=[Paragraph(children=[Text(value="q")])]))
        assert html == "<blockquote>\n<p>q</p>\n</blockquote>\n"

    def test_tight_list(self) -> None:
        tree = List(children=[ListItem(children=[Paragraph(children=[Text(value="one")])])])
        assert render(tree) == "<ul>\n<li>one</li>\n</ul>\n"

    def test_ordered_list_start(self) -> None:
        tree = List(ordered=True, start=3, children=[ListItem(children=[Text(value="x")])])
        assert render(tree) == '<ol start="3">\n<li>x</li>\n</ol>\n'

    def test_code_block(self) -> None:
        html = render(Code(value="a < b", lang="python"))
        assert html == '<pre><code class="language-python">a &lt; b</code></pre>\n'

    def test_thematic_break_and_html(self) -> None:
        root = Root(children=[ThematicBreak(), Html(value="<div>x</div>\n")])
        assert render(root) == "<hr />\n<div>x</div>\n"

    def test_foreign_node_renders_its_children(self) -> None:
        node = Foreign(type_name="footnoteDefinition", children=[Text(value="a & b")])
        assert render(node) == "a &amp; b"

    def test_foreign_leaf_renders_nothing(self) -> None:
        assert render(Foreign(type_name="yaml", data={"value": "title: x"})) == ""


class TestInlines:
    """Inline markup."""

    def test_formatting(self) -> None:
        para = Paragraph(
            children=[
                Emphasis(children=[Text(value="e")]),
                Strong(children=[Text(value="s")]),
                InlineCode(value="<c>"),
                Break(),
            ]
        )
        assert render(para) == "<p><em>e</em><strong>s</strong><code>&lt;c&gt;</code><br />\n</p>\n"

    def test_link_and_image(self) -> None:
        para = Paragraph(
            children=[
                Link(url="/a?b=1&c=2", title="t", children=[Text(value="x")]),
                Image(url="i.png", alt="pic"),
            ]
        )
        assert render(para) == (
            '<p><a href="/a?b=1&amp;c=2" title="t">x</a><img src="i.png" alt="pic" /></p>\n'
        )


class TestMath:
    """Math segments before and after rendering."""

    def test_unrendered_segment_keeps_source(self) -> None:
        para = Paragraph(children=[MathSegment(content="&#123;a&#125; < b", raw="${a} < b$")])
        assert render(para) == '<p><code class="math-inline">{a} &lt; b</code></p>\n'

    def test_rendered_inline(self, fake_engine) -> None:  # type: ignore[no-untyped-def]
        tree = extract_math(Root(children=[Paragraph(children=[Text(value="see $x$")])]))
        asyncio.run(render_math(tree, engine=fake_engine))
        html = render(tree)
        assert html.startswith('<p>see <span class="typst-inline"><svg ')
        assert 'height="2em"' in html
        assert 'width="3em"' in html
        assert 'viewBox="0 0 33.0 22.0"' in html
        assert '<path d="M 0 0 L 1 1"/>' in html
        assert html.endswith("</svg></span></p>\n")

    def test_rendered_display_is_a_block(self, fake_engine) -> None:  # type: ignore[no-untyped-def]
        tree = extract_math(Root(children=[Paragraph(children=[Text(value="$$x$$")])]))
        asyncio.run(render_math(tree, engine=fake_engine))
        html = render(tree)
        assert html.startswith('<div class="typst-display"><svg ')
        assert html.endswith("</svg></div>\n")
        assert "<p>" not in html

    def test_error_marker_is_escaped_text(self) -> None:
        segment = MathSegment(content="x", raw="$x$")
        segment.children = [Text(value="[Typst Error: <bad>]")]
        assert render(segment) == '<code class="math-inline">[Typst Error: &lt;bad&gt;]</code>'


class TestElements:
    """Generic elements and attributes."""

    def test_element(self) -> None:
        el = Element(tag_name="span", properties={"class": ["a", "b"]}, children=[Raw(value="<i/>")])
        assert render(el) == '<span class="a b"><i/></span>'

    def test_block_element_newline(self) -> None:
        assert render(Element(tag_name="div")) == "<div></div>\n"

    def test_render_attributes(self) -> None:
        attrs = {"className": ["x"], "hidden": True, "skip": None, "off": False, "title": 'a"b'}
        assert render_attributes(attrs) == ' class="x" hidden title="a&quot;b"'

    def test_html_escape(self) -> None:
        assert html_escape("<'\">") == "&lt;'&quot;&gt;"
