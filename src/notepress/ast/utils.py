#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/ast/utils.py
"""Utility functions for working with syntax tree nodes.

Functions
---------
extract_text : Extract plain text from a node or list of nodes
walk : Iterate over a subtree in document order
find_all : Collect every node of a given type

Examples
--------
    >>> from notepress.ast import Heading, Text, Emphasis
    >>> heading = Heading(level=1, children=[Text(value="Hello "), Emphasis(children=[Text(value="world")])])
    >>> extract_text(heading)
    'Hello world'

"""

from __future__ import annotations

from typing import Callable, Iterator, Optional, Type, TypeVar, Union

from notepress.ast.nodes import Node, get_node_children, is_literal

NodeT = TypeVar("NodeT", bound=Node)


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "") -> str:
    """Extract plain text from a node or list of nodes.

    Literal nodes (text, inline code, math, tags and so on) contribute their
    ``value``; wikilinks contribute their alias when one is set.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = ""
        String placed between the text of sibling nodes

    Returns
    -------
    str
        Concatenated text content

    """
    if isinstance(node_or_nodes, list):
        return joiner.join(extract_text(node, joiner) for node in node_or_nodes)

    node = node_or_nodes
    alias = getattr(node, "alias", None)
    if alias:
        return alias
    if is_literal(node):
        return node.value  # type: ignore[attr-defined]
    return joiner.join(extract_text(child, joiner) for child in get_node_children(node))


def walk(node: Node, prune: Optional[Callable[[Node], bool]] = None) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in document order.

    Descendants of a node for which ``prune`` returns True are not visited;
    the node itself still is.
    """
    yield node
    if prune is not None and prune(node):
        return
    for child in get_node_children(node):
        yield from walk(child, prune)


def find_all(node: Node, node_type: Type[NodeT]) -> list[NodeT]:
    """Return every node of ``node_type`` in the subtree rooted at ``node``."""
    return [candidate for candidate in walk(node) if isinstance(candidate, node_type)]


__all__ = [
    "extract_text",
    "walk",
    "find_all",
]
