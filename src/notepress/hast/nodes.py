#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/hast/nodes.py
"""Rendering tree nodes.

The rendering tree is an HTML-shaped tree produced from the syntax tree by the
``to-hast`` stage and consumed by the HTML-side stages and the serializer.
Modules that handle both trees import this one as ``hast`` to keep the two
``Text`` classes apart.

Node kinds:
    - Root: top of a rendering tree
    - Element: an HTML element with a tag name, properties and children
    - Text: escaped character data
    - Raw: an HTML fragment emitted verbatim (until the ``raw`` stage parses it)
    - Comment: an HTML comment

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Optional, Union

from notepress.ast.nodes import Position


class HastNode:
    """Base class for rendering tree nodes."""

    node_type: ClassVar[str] = ""

    position: Optional[Position]

    @property
    def type(self) -> str:
        """Tag identifying the kind of node."""
        return self.node_type


@dataclass
class Root(HastNode):
    """Top of a rendering tree.

    Parameters
    ----------
    children : list of HastNode, default = empty list
        Top-level nodes
    data : dict, default = empty dict
        Document-level data carried over from the syntax tree

    """

    node_type: ClassVar[str] = "root"

    children: list[HastNode] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None


@dataclass
class Element(HastNode):
    """HTML element.

    Parameters
    ----------
    tag_name : str
        Element name (``"p"``, ``"table"`` ...)
    properties : dict, default = empty dict
        Attributes. ``class`` holds a list of class names; ``None`` and
        ``False`` values are omitted when serializing, ``True`` renders as a
        bare attribute.
    children : list of HastNode, default = empty list
        Child nodes

    """

    node_type: ClassVar[str] = "element"

    tag_name: str
    properties: dict[str, Any] = field(default_factory=dict)
    children: list[HastNode] = field(default_factory=list)
    position: Optional[Position] = None

    def class_list(self) -> list[str]:
        """Return the element's class names."""
        classes = self.properties.get("class")
        if not classes:
            return []
        if isinstance(classes, str):
            return classes.split()
        return list(classes)

    def has_class(self, name: str) -> bool:
        """Return True if ``name`` is one of the element's classes."""
        return name in self.class_list()


@dataclass
class Text(HastNode):
    """Character data."""

    node_type: ClassVar[str] = "text"

    value: str
    position: Optional[Position] = None


@dataclass
class Raw(HastNode):
    """HTML fragment emitted verbatim."""

    node_type: ClassVar[str] = "raw"

    value: str
    position: Optional[Position] = None


@dataclass
class Comment(HastNode):
    """HTML comment."""

    node_type: ClassVar[str] = "comment"

    value: str
    position: Optional[Position] = None


Parent = Union[Root, Element]


def iter_elements(node: HastNode, tag_names: Optional[set[str]] = None) -> Iterator[Element]:
    """Yield every element below ``node`` (inclusive) in document order.

    Parameters
    ----------
    node : HastNode
        Subtree to search
    tag_names : set of str, optional
        Only yield elements with one of these tag names

    """
    if isinstance(node, Element) and (tag_names is None or node.tag_name in tag_names):
        yield node
    for child in getattr(node, "children", []):
        yield from iter_elements(child, tag_names)


def text_content(node: HastNode) -> str:
    """Concatenate the text of every Text node below ``node``."""
    if isinstance(node, Text):
        return node.value
    return "".join(text_content(child) for child in getattr(node, "children", []))


__all__ = [
    "HastNode",
    "Root",
    "Element",
    "Text",
    "Raw",
    "Comment",
    "Parent",
    "iter_elements",
    "text_content",
]
