#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/backlinks_hover.py
"""Highlight the hovered link text in a backlinks panel preview."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from notepress.ast.nodes import Document, Highlight, Text
from notepress.ast.transforms import TextPatternTransformer, TransformResult
from notepress.constants import BACKLINK_FOCUS_CLASS
from notepress.pipeline.options import BacklinkHoverOptions
from notepress.pipeline.stage import TreeStage

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext


class BacklinksHoverStage(TreeStage, TextPatternTransformer):
    """Wrap each occurrence of ``options.link_text`` in a :class:`Highlight`.

    Without options (or with empty link text) the tree is returned unchanged.
    """

    name = "backlinks-hover"

    def __init__(self, options: Optional[BacklinkHoverOptions] = None):
        self.options = options
        self.pattern = re.compile(re.escape(options.link_text)) if options is not None and options.link_text else None

    def run(self, tree: Document, context: PipelineContext) -> Document:
        if self.pattern is None:
            return tree
        return super().run(tree, context)

    def replace_match(self, match: re.Match[str]) -> TransformResult:
        return Highlight(
            children=[Text(value=match.group(0))],
            data={"h_name": "mark", "h_properties": {"class": [BACKLINK_FOCUS_CLASS]}},
        )
