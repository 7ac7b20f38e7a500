"""Render inline and display math in a hand-built tree (needs `typst` on PATH)."""

from typstdown import Paragraph, Root, Text, TypstMath

doc = Root(
    children=[
        Paragraph(children=[Text(value="The formula $a^2 + b^2 = c^2$ is known.")]),
        Paragraph(children=[Text(value="$ sum_(i=1)^n i = (n(n+1))/2 $")]),
    ]
)
print(TypstMath()(doc))
