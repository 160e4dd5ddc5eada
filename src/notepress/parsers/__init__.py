#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/parsers/__init__.py
"""Markdown parsing into the notepress syntax tree."""

from __future__ import annotations

from notepress.parsers.markdown import MarkdownParser, parse_markdown

__all__ = ["MarkdownParser", "parse_markdown"]
