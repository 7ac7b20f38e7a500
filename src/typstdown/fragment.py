"""SVG fragment handling.

Turns the SVG document produced by the engine into an ``svg`` Element whose
attributes are editable and whose body is kept as opaque trusted markup.
Only the root start tag is parsed; the glyph outlines inside are never
interpreted.
"""

from __future__ import annotations

import re
from html.parser import HTMLParser

from typstdown.errors import FragmentError
from typstdown.nodes import Element, Raw

# Used when the engine reports no usable size
DEFAULT_SIZE = 11.0

_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)")
_CLOSE_TAG = "</svg>"
_ATTR_NAME = re.compile(r"""([^\s"'>/=]+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+))?""")


class _RootTagParser(HTMLParser):
    """Records the first ``<svg>`` start tag and where it ends."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.attrs: dict[str, str] | None = None
        self.tag_end = 0
        self._offsets: list[int] = [0]

    def feed_document(self, markup: str) -> None:
        # getpos() counts lines by "\n" only
        self._offsets.extend(i + 1 for i, char in enumerate(markup) if char == "\n")
        self.feed(markup)
        self.close()

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._record(tag, attrs)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._record(tag, attrs)

    def _record(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self.attrs is not None or tag != "svg":
            return
        lineno, col = self.getpos()
        start_text = self.get_starttag_text() or ""
        # HTMLParser lowercases names; SVG needs viewBox and friends as written
        names = [m.group(1) for m in _ATTR_NAME.finditer(start_text, len("<svg"))]
        if [n.lower() for n in names] != [name for name, _ in attrs]:
            names = [name for name, _ in attrs]
        self.attrs = {n: value or "" for n, (_, value) in zip(names, attrs, strict=True)}
        self.tag_end = self._offsets[lineno - 1] + col + len(start_text)


def parse_svg(markup: str) -> Element:
    """Parse engine output into an ``svg`` Element.

    Args:
        markup: SVG document (an XML declaration before the root is fine)

    Returns:
        Element with the root's attributes as properties and the body as a
        single Raw child

    Raises:
        FragmentError: If the markup has no ``<svg>`` root

    """
    parser = _RootTagParser()
    parser.feed_document(markup)
    if parser.attrs is None:
        raise FragmentError("Typst output contains no <svg> element")
    close = markup.rfind(_CLOSE_TAG)
    body = markup[parser.tag_end : close] if close >= parser.tag_end else ""
    return Element(tag_name="svg", properties=dict(parser.attrs), children=[Raw(value=body)])


def svg_size(svg: Element) -> tuple[float, float]:
    """Intrinsic ``(height, width)`` of a parsed SVG root.

    Prefers ``data-height``/``data-width``, then the ``viewBox`` extent,
    then numeric ``height``/``width`` attributes; falls back to
    ``DEFAULT_SIZE`` for each dimension it cannot find.
    """
    props = svg.properties
    height = _number(props.get("data-height"))
    width = _number(props.get("data-width"))
    if height is None or width is None:
        view_box = [float(n) for n in _NUMBER.findall(str(props.get("viewBox", "")))]
        if len(view_box) == 4:
            width = view_box[2] if width is None else width
            height = view_box[3] if height is None else height
    if height is None:
        height = _number(props.get("height"))
    if width is None:
        width = _number(props.get("width"))
    return (
        DEFAULT_SIZE if height is None else height,
        DEFAULT_SIZE if width is None else width,
    )


def _number(value: object) -> float | None:
    if value is None:
        return None
    found = _NUMBER.match(str(value).strip())
    return float(found.group()) if found else None
