#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/rendering/katex.py
"""Prepare math elements for client-side typesetting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from notepress.hast.nodes import Root, Text, iter_elements, text_content
from notepress.pipeline.stage import RenderingStage

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext


class KatexStage(RenderingStage):
    """Wrap math in ``\\(..\\)`` or ``\\[..\\]`` and mark it ``data-notation="latex"``.

    Elements with the ``math-inline`` class get inline delimiters, elements
    with ``math-display`` get display delimiters. KaTeX's auto-render (or
    MathJax) picks them up in the browser.
    """

    name = "katex"

    def run(self, tree: Root, context: PipelineContext) -> Root:
        for element in iter_elements(tree):
            if element.properties.get("data-notation"):
                continue
            if element.has_class("math-display"):
                opening, closing = "\\[", "\\]"
            elif element.has_class("math-inline"):
                opening, closing = "\\(", "\\)"
            else:
                continue
            tex = text_content(element).strip()
            element.children = [Text(value=f"{opening}{tex}{closing}")]
            element.properties["data-notation"] = "latex"
        return tree


__all__ = ["KatexStage"]
