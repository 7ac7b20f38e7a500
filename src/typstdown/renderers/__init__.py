"""typstdown renderers.

Renderers convert a document tree into an output format.

Available Renderers:
- HtmlRenderer: Renders the tree to HTML using StringBuilder pattern

"""

from typstdown.renderers.html import HtmlRenderer

__all__ = ["HtmlRenderer"]
