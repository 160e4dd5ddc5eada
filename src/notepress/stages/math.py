#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/math.py
"""Rendering hints for ``$inline$`` and ``$$display$$`` math."""

from __future__ import annotations

from notepress.ast.nodes import MathBlock, MathInline
from notepress.constants import MATH_DISPLAY_CLASSES, MATH_INLINE_CLASSES
from notepress.pipeline.stage import TreeStage


class MathStage(TreeStage):
    """Mark math nodes as ``span.math-inline`` and ``div.math-display``."""

    name = "math"
    syntax = frozenset({"math"})

    def visit_math_inline(self, node: MathInline) -> MathInline:
        math = self._generic_transform(node)
        math.data["h_name"] = "span"
        math.data["h_properties"] = {"class": list(MATH_INLINE_CLASSES)}
        return math

    def visit_math_block(self, node: MathBlock) -> MathBlock:
        math = self._generic_transform(node)
        math.data["h_name"] = "div"
        math.data["h_properties"] = {"class": list(MATH_DISPLAY_CLASSES)}
        return math
