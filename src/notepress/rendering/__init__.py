#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/rendering/__init__.py
"""Rendering tree construction and the HTML-side stages.

- to_hast: syntax tree to rendering tree conversion
- table: table lowering used by the converter
- highlight, raw, headings, katex: stages run over the rendering tree
"""

from __future__ import annotations

from notepress.rendering.headings import AutolinkHeadingsStage, SlugStage
from notepress.rendering.highlight import HighlightStage
from notepress.rendering.katex import KatexStage
from notepress.rendering.raw import RawStage
from notepress.rendering.table import TableLowering
from notepress.rendering.to_hast import HastConverter, ToHastStage, to_hast

__all__ = [
    "HastConverter",
    "TableLowering",
    "to_hast",
    "ToHastStage",
    "HighlightStage",
    "RawStage",
    "SlugStage",
    "KatexStage",
    "AutolinkHeadingsStage",
]
