#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/hast/__init__.py
"""HTML-shaped rendering tree and its serializer."""

from __future__ import annotations

from notepress.hast.nodes import (
    Comment,
    Element,
    HastNode,
    Raw,
    Root,
    Text,
    iter_elements,
    text_content,
)
from notepress.hast.serialize import to_html

__all__ = [
    "Comment",
    "Element",
    "HastNode",
    "Raw",
    "Root",
    "Text",
    "iter_elements",
    "text_content",
    "to_html",
]
