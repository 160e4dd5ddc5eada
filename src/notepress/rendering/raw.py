#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/rendering/raw.py
"""Embed raw HTML fragments into the rendering tree with BeautifulSoup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from notepress.constants import DEPS_HTML
from notepress.hast.nodes import Comment, Element, HastNode, Raw, Root, Text
from notepress.hast.serialize import to_html
from notepress.pipeline.stage import RenderingStage
from notepress.utils.decorators import requires_dependencies

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)


def soup_to_hast(node: Any) -> Optional[HastNode]:
    """Convert a BeautifulSoup node to a rendering tree node.

    Doctypes, declarations and processing instructions are dropped.
    """
    from bs4.element import Comment as SoupComment
    from bs4.element import Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

    if isinstance(node, SoupComment):
        return Comment(value=str(node))
    if isinstance(node, (Doctype, Declaration, ProcessingInstruction)):
        return None
    if isinstance(node, NavigableString):
        return Text(value=str(node))
    if isinstance(node, Tag):
        children = [converted for child in node.children if (converted := soup_to_hast(child)) is not None]
        return Element(tag_name=node.name, properties=dict(node.attrs), children=children)
    return None


def parse_fragment(markup: str) -> list[HastNode]:
    """Parse an HTML fragment into rendering tree nodes."""
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(markup, "html.parser")
    return [converted for child in soup.children if (converted := soup_to_hast(child)) is not None]


class RawStage(RenderingStage):
    """Replace :class:`Raw` fragments with parsed elements.

    The siblings around a fragment are re-parsed together with it, so an
    element opened in one inline fragment and closed in another (``<kbd>``
    ... ``</kbd>``) becomes a single element around the text in between.
    """

    name = "raw"

    @requires_dependencies("raw", DEPS_HTML)
    def run(self, tree: Root, context: PipelineContext) -> Root:
        self._embed(tree)
        return tree

    def _embed(self, parent: Root | Element) -> None:
        if any(isinstance(child, Raw) for child in parent.children):
            markup = "".join(to_html(child) for child in parent.children)
            logger.debug(f"Re-parsing {len(parent.children)} node(s) around raw HTML")
            parent.children = parse_fragment(markup)

        for child in parent.children:
            if isinstance(child, Element):
                self._embed(child)


__all__ = ["RawStage", "parse_fragment", "soup_to_hast"]
