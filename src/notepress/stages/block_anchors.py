#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/block_anchors.py
"""Block anchors (``^anchor-id`` at the end of a block)."""

from __future__ import annotations

import re

from notepress.ast.nodes import BlockAnchor
from notepress.ast.transforms import TextPatternTransformer, TransformResult
from notepress.pipeline.stage import TreeStage


class BlockAnchorsStage(TreeStage, TextPatternTransformer):
    """Turn a trailing `` ^anchor-id`` into a :class:`BlockAnchor` node.

    Only an anchor at the very end of a text run counts, either after
    whitespace or on a line of its own.
    """

    name = "block-anchors"
    pattern = re.compile(r"(?:^|[ \t]+|(?<=\n))\^([A-Za-z0-9_-]+)[ \t]*$")

    def replace_match(self, match: re.Match[str]) -> TransformResult:
        return BlockAnchor(value=match.group(1))
