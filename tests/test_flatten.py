"""Tests for the flattened sibling view."""

from typstdown.extract.flatten import OPAQUE, flatten
from typstdown.nodes import Emphasis, InlineCode, Strong, Text


def _siblings():  # type: ignore[no-untyped-def]
    return [
        Text(value="ab"),
        Strong(children=[Text(value="bold")]),
        Text(value="cd"),
        Text(value="ef"),
        InlineCode(value="$x$"),
    ]


class TestFlatten:
    """Flattened text and span map."""

    def test_text_and_placeholders(self) -> None:
        view = flatten(_siblings())
        assert view.text == "ab" + OPAQUE + "cdef" + OPAQUE

    def test_spans_are_contiguous_and_cover_view(self) -> None:
        view = flatten(_siblings())
        assert view.spans[0].start == 0
        assert view.spans[-1].end == len(view.text)
        for before, after in zip(view.spans, view.spans[1:]):
            assert before.end == after.start

    def test_opaque_spans_have_length_one(self) -> None:
        view = flatten(_siblings())
        opaque = [span for span in view.spans if not span.is_text]
        assert [span.end - span.start for span in opaque] == [1, 1]

    def test_spans_keep_original_nodes_and_indices(self) -> None:
        siblings = _siblings()
        view = flatten(siblings)
        for index, span in enumerate(view.spans):
            assert span.index == index
            assert span.node is siblings[index]

    def test_empty_sequence(self) -> None:
        view = flatten([])
        assert view.text == ""
        assert view.spans == ()
        assert list(view.text_runs()) == []


class TestTextRuns:
    """Maximal runs of adjacent text spans."""

    def test_runs_split_at_opaque_nodes(self) -> None:
        view = flatten(_siblings())
        assert list(view.text_runs()) == [(0, 2), (3, 7)]

    def test_single_text_node(self) -> None:
        view = flatten([Text(value="hello")])
        assert list(view.text_runs()) == [(0, 5)]

    def test_only_opaque(self) -> None:
        view = flatten([Emphasis(), Strong()])
        assert list(view.text_runs()) == []


class TestDelimiterDetection:
    """Fast-path detection of ``$``."""

    def test_dollar_in_text(self) -> None:
        assert flatten([Text(value="a $x$")]).has_delimiter()

    def test_dollar_only_inside_code_is_ignored(self) -> None:
        assert not flatten([Text(value="see "), InlineCode(value="$x$")]).has_delimiter()

    def test_no_dollar(self) -> None:
        assert not flatten([Text(value="plain")]).has_delimiter()


class TestTextBetween:
    """Text of a range with opaque positions left out."""

    def test_skips_opaque(self) -> None:
        view = flatten([Text(value="$a "), Strong(), Text(value=" c$")])
        assert view.text_between(1, 6) == "a  c"

    def test_placeholder_character_in_prose_is_kept(self) -> None:
        view = flatten([Text(value=f"x{OPAQUE}y")])
        assert view.text_between(0, 3) == f"x{OPAQUE}y"
