#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/hast/serialize.py
"""Serialize a rendering tree to an HTML string."""

from __future__ import annotations

import logging
from html import escape
from typing import Any

from notepress.constants import VOID_ELEMENTS
from notepress.exceptions import RenderingError
from notepress.hast.nodes import Comment, Element, HastNode, Raw, Root, Text

logger = logging.getLogger(__name__)


def _serialize_attribute(name: str, value: Any) -> str | None:
    if value is None or value is False:
        return None
    if value is True:
        return name
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = " ".join(str(item) for item in value)
    return f'{name}="{escape(str(value), quote=True)}"'


def serialize_properties(properties: dict[str, Any]) -> str:
    """Render element properties as an attribute string with a leading space.

    Parameters
    ----------
    properties : dict
        Element properties

    Returns
    -------
    str
        Attribute string (empty when no attribute is rendered)

    """
    parts = []
    for name, value in properties.items():
        attribute = _serialize_attribute(name, value)
        if attribute is not None:
            parts.append(attribute)
    return "".join(f" {part}" for part in parts)


def to_html(node: HastNode, *, allow_dangerous_html: bool = True) -> str:
    """Serialize a rendering tree.

    Parameters
    ----------
    node : HastNode
        Tree or subtree to serialize
    allow_dangerous_html : bool, default = True
        Emit Raw fragments verbatim. When False, raw fragments are dropped.

    Returns
    -------
    str
        HTML markup

    Raises
    ------
    RenderingError
        If the tree contains an object that is not a rendering tree node

    """
    if isinstance(node, Text):
        return escape(node.value, quote=False)

    if isinstance(node, Raw):
        if not allow_dangerous_html:
            logger.debug("Dropping raw HTML fragment")
            return ""
        return node.value

    if isinstance(node, Comment):
        return f"<!--{node.value}-->"

    if isinstance(node, Root):
        return "".join(to_html(child, allow_dangerous_html=allow_dangerous_html) for child in node.children)

    if isinstance(node, Element):
        attributes = serialize_properties(node.properties)
        if node.tag_name in VOID_ELEMENTS:
            return f"<{node.tag_name}{attributes}>"
        inner = "".join(to_html(child, allow_dangerous_html=allow_dangerous_html) for child in node.children)
        return f"<{node.tag_name}{attributes}>{inner}</{node.tag_name}>"

    raise RenderingError(f"Cannot serialize {type(node).__name__}", rendering_stage="stringify")


__all__ = ["to_html", "serialize_properties"]
