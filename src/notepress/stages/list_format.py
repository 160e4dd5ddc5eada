#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/list_format.py
"""Normalize list formatting for markdown output."""

from __future__ import annotations

from notepress.ast.nodes import List
from notepress.constants import DEFAULT_LIST_BULLET, DEFAULT_LIST_ITEM_INDENT
from notepress.pipeline.stage import TreeStage


class ListFormatStage(TreeStage):
    """Stamp the bullet character and item indent onto every list.

    Parameters
    ----------
    bullet : str, default "-"
        Bullet used for unordered lists when serializing to markdown
    list_item_indent : int, default 1
        Spaces between the bullet (or number) and the item content

    """

    name = "list-format"

    def __init__(self, bullet: str = DEFAULT_LIST_BULLET, list_item_indent: int = DEFAULT_LIST_ITEM_INDENT):
        self.bullet = bullet
        self.list_item_indent = list_item_indent

    def visit_list(self, node: List) -> List:
        new_list = self._generic_transform(node)
        new_list.bullet = self.bullet
        new_list.list_item_indent = self.list_item_indent
        return new_list
