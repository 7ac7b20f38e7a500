"""HTML renderer using StringBuilder pattern.

Serializes a typstdown tree to HTML in one walk. Rendered math comes out as
``<span class="typst-inline"><svg ...>`` or ``<div class="typst-display">``;
segments that were never rendered keep their ``<code class="math-inline">``
form so a client-side renderer can still pick them up.

Thread Safety:
Each render() call uses its own StringBuilder. A single HtmlRenderer may be
shared, but the tree must not be mutated while it is being rendered.
"""

import html

from typstdown.extract.classifier import unescape_braces
from typstdown.nodes import (
    Blockquote,
    Break,
    Code,
    Delete,
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
    Node,
    Paragraph,
    Parent,
    Raw,
    Root,
    Strong,
    Text,
    ThematicBreak,
)
from typstdown.stringbuilder import StringBuilder
from typstdown.utils.logger import get_logger
from typstdown.utils.text import escape_html

logger = get_logger(__name__)

# Elements rendered on their own line
_BLOCK_TAGS = frozenset({"div", "figure", "section", "pre", "p"})


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    Escapes <, >, &, " but not single quotes.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


def render_attributes(properties: dict[str, object]) -> str:
    """Render element properties as an HTML attribute string.

    Lists are space-joined, ``True`` renders a bare attribute and
    ``None``/``False`` are left out.

    Example:
        >>> render_attributes({"class": ["a", "b"], "hidden": True})
        ' class="a b" hidden'
    """
    parts: list[str] = []
    for name, value in properties.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
            continue
        if isinstance(value, (list, tuple)):
            value = " ".join(str(v) for v in value)
        # hast spells the class attribute className
        name = "class" if name == "className" else name
        parts.append(f' {name}="{escape_html(str(value))}"')
    return "".join(parts)


class HtmlRenderer:
    """Render a typstdown tree to HTML.

    Usage:
        >>> renderer = HtmlRenderer()
        >>> renderer.render(Root(children=[Paragraph(children=[Text(value="Hi")])]))
        '<p>Hi</p>\\n'

    """

    __slots__ = ()

    def render(self, node: Node) -> str:
        """Render a tree (or any subtree) to an HTML string."""
        sb = StringBuilder()
        self._render(node, sb)
        return sb.build()

    def _render_children(self, node: Parent, sb: StringBuilder) -> None:
        for child in node.children:
            self._render(child, sb)

    def _render(self, node: Node, sb: StringBuilder) -> None:
        match node:
            case Root():
                self._render_children(node, sb)
            case Paragraph():
                sb.append("<p>")
                self._render_children(node, sb)
                sb.append("</p>\n")
            case Heading(depth=depth):
                level = min(max(depth, 1), 6)
                sb.append(f"<h{level}>")
                self._render_children(node, sb)
                sb.append(f"</h{level}>\n")
            case Blockquote():
                sb.append("<blockquote>\n")
                self._render_children(node, sb)
                sb.append("</blockquote>\n")
            case List(ordered=True, start=start):
                start_attr = f' start="{start}"' if start not in (None, 1) else ""
                sb.append(f"<ol{start_attr}>\n")
                self._render_children(node, sb)
                sb.append("</ol>\n")
            case List():
                sb.append("<ul>\n")
                self._render_children(node, sb)
                sb.append("</ul>\n")
            case ListItem():
                sb.append("<li>")
                self._render_list_item(node, sb)
                sb.append("</li>\n")
            case Code(value=value, lang=lang):
                lang_class = f' class="language-{html_escape(lang)}"' if lang else ""
                sb.append(f"<pre><code{lang_class}>")
                sb.append(html_escape(value))
                sb.append("</code></pre>\n")
            case Html(value=value):
                sb.append(value)
            case ThematicBreak():
                sb.append("<hr />\n")
            case Text(value=value):
                sb.append(html_escape(value))
            case Emphasis():
                self._render_wrapped("em", node, sb)
            case Strong():
                self._render_wrapped("strong", node, sb)
            case Delete():
                self._render_wrapped("del", node, sb)
            case Link(url=url, title=title):
                title_attr = f' title="{html_escape(title)}"' if title else ""
                sb.append(f'<a href="{html_escape(url)}"{title_attr}>')
                self._render_children(node, sb)
                sb.append("</a>")
            case Image(url=url, alt=alt, title=title):
                title_attr = f' title="{html_escape(title)}"' if title else ""
                sb.append(f'<img src="{html_escape(url)}" alt="{html_escape(alt)}"{title_attr} />')
            case InlineCode(value=value):
                sb.append(f"<code>{html_escape(value)}</code>")
            case Break():
                sb.append("<br />\n")
            case Raw(value=value):
                sb.append(value)
            case MathSegment(children=[]):
                # Not rendered (yet); keep the marker element with its source
                sb.append(f"<code{render_attributes(node.properties)}>")
                sb.append(html_escape(unescape_braces(node.content)))
                sb.append("</code>")
            case Element():
                self._render_element(node, sb)
            case Foreign():
                # No markup of its own; keep whatever prose it holds
                self._render_children(node, sb)
            case _:
                logger.debug("No HTML rendering for node kind %r", node.kind)

    def _render_wrapped(self, tag: str, node: Parent, sb: StringBuilder) -> None:
        sb.append(f"<{tag}>")
        self._render_children(node, sb)
        sb.append(f"</{tag}>")

    def _render_list_item(self, item: ListItem, sb: StringBuilder) -> None:
        # A single paragraph renders tight, without <p>
        if len(item.children) == 1 and isinstance(item.children[0], Paragraph):
            self._render_children(item.children[0], sb)
        else:
            self._render_children(item, sb)

    def _render_element(self, element: Element, sb: StringBuilder) -> None:
        sb.append(f"<{element.tag_name}{render_attributes(element.properties)}>")
        self._render_children(element, sb)
        sb.append(f"</{element.tag_name}>")
        if element.tag_name in _BLOCK_TAGS:
            sb.append("\n")
