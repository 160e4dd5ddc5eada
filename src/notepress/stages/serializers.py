#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/serializers.py
"""Final stages turning a tree into text."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notepress.ast.nodes import Document
from notepress.exceptions import RenderingError
from notepress.hast.nodes import Root
from notepress.hast.serialize import to_html
from notepress.pipeline.stage import SerializerStage
from notepress.renderers.markdown import MarkdownRenderer

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext


class StringifyStage(SerializerStage):
    """Serialize the rendering tree to HTML.

    Parameters
    ----------
    allow_dangerous_html : bool, default True
        Emit raw HTML fragments that are still in the tree

    """

    name = "stringify"

    def __init__(self, allow_dangerous_html: bool = True):
        self.allow_dangerous_html = allow_dangerous_html

    def run(self, tree: Any, context: PipelineContext) -> str:
        if not isinstance(tree, Root):
            raise RenderingError(
                f"stringify needs a rendering tree, got {type(tree).__name__}", rendering_stage=self.name
            )
        return to_html(tree, allow_dangerous_html=self.allow_dangerous_html)


class RemarkStringifyStage(SerializerStage):
    """Serialize the syntax tree back to markdown."""

    name = "remark-stringify"

    def __init__(self, bullet: str = "-", list_item_indent: int = 1):
        self.bullet = bullet
        self.list_item_indent = list_item_indent

    def run(self, tree: Any, context: PipelineContext) -> str:
        if not isinstance(tree, Document):
            raise RenderingError(
                f"remark-stringify needs a syntax tree, got {type(tree).__name__}", rendering_stage=self.name
            )
        return MarkdownRenderer(bullet=self.bullet, list_item_indent=self.list_item_indent).render_to_string(tree)
