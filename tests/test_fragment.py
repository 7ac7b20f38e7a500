"""Tests for SVG fragment parsing."""

import pytest

from typstdown.errors import FragmentError, MathRenderError
from typstdown.fragment import DEFAULT_SIZE, parse_svg, svg_size
from typstdown.nodes import Element, Raw

DOCUMENT = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<svg class="typst-doc" viewBox="0 0 10 20" width="10pt" height="20pt" '
    'xmlns="http://www.w3.org/2000/svg">\n'
    '<path d="M0 0"/>\n'
    "</svg>\n"
)


class TestParseSvg:
    """Root attributes become properties, the body stays opaque."""

    def test_root_element(self) -> None:
        svg = parse_svg(DOCUMENT)
        assert svg.tag_name == "svg"
        assert svg.properties["class"] == "typst-doc"
        assert svg.properties["xmlns"] == "http://www.w3.org/2000/svg"

    def test_attribute_case_is_preserved(self) -> None:
        svg = parse_svg(DOCUMENT)
        assert svg.properties["viewBox"] == "0 0 10 20"
        assert "viewbox" not in svg.properties

    def test_body_is_raw(self) -> None:
        svg = parse_svg(DOCUMENT)
        assert svg.children == [Raw(value='\n<path d="M0 0"/>\n')]

    def test_single_line(self) -> None:
        svg = parse_svg('<svg width="3"><g></g></svg>')
        assert svg.properties == {"width": "3"}
        assert svg.children == [Raw(value="<g></g>")]

    def test_missing_svg(self) -> None:
        with pytest.raises(FragmentError):
            parse_svg("<p>not an image</p>")

    def test_fragment_error_is_a_render_error(self) -> None:
        with pytest.raises(MathRenderError):
            parse_svg("")


class TestSvgSize:
    """Intrinsic size lookup order."""

    def test_data_attributes_first(self) -> None:
        svg = Element(
            tag_name="svg",
            properties={"data-height": "7.5", "data-width": "4", "viewBox": "0 0 1 2"},
        )
        assert svg_size(svg) == (7.5, 4.0)

    def test_view_box(self) -> None:
        assert svg_size(parse_svg(DOCUMENT)) == (20.0, 10.0)

    def test_width_height_attributes(self) -> None:
        svg = Element(tag_name="svg", properties={"height": "12.5pt", "width": "3pt"})
        assert svg_size(svg) == (12.5, 3.0)

    def test_default(self) -> None:
        assert svg_size(Element(tag_name="svg")) == (DEFAULT_SIZE, DEFAULT_SIZE)
