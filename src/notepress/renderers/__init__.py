#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/renderers/__init__.py
"""Serializers from the syntax tree back to text."""

from __future__ import annotations

from notepress.renderers.markdown import MarkdownRenderer, render_markdown

__all__ = ["MarkdownRenderer", "render_markdown"]
