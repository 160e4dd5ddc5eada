#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/ast/transforms.py
"""Syntax tree transformation utilities.

:class:`NodeTransformer` rebuilds a tree while letting subclasses replace,
expand or drop nodes. :class:`TextPatternTransformer` builds on it for the
common dialect case of recognizing a regular expression inside text nodes and
splitting the text around the matches.

Examples
--------
Uppercase every text node:

    >>> class Uppercase(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return Text(value=node.value.upper())
    >>> new_doc = Uppercase().transform(doc)

Turn ``TODO`` markers into strong text:

    >>> class MarkTodos(TextPatternTransformer):
    ...     pattern = re.compile(r"\\bTODO\\b")
    ...     def replace_match(self, match):
    ...         return Strong(children=[Text(value=match.group(0))])

"""

from __future__ import annotations

import copy
import re
from abc import ABCMeta, abstractmethod
from typing import Any, ClassVar, Optional, Pattern, Union

from notepress.ast.nodes import (
    Code,
    Link,
    Node,
    Text,
    get_node_children,
    replace_node_children,
)
from notepress.ast.visitors import NodeVisitor

TransformResult = Union[Node, list[Node], None]


class NodeTransformer(NodeVisitor):
    """Base class for transforming syntax tree nodes.

    Subclasses implement ``visit_*`` methods that return a replacement node,
    a list of nodes to splice in place of the original, or None to remove
    the node. The transformer never mutates its input: every node on the
    path it visits is copied, so the result shares no node with the source.

    """

    def transform(self, node: Node) -> TransformResult:
        """Transform a node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node, list of Node, or None
            Replacement node(s), or None to remove

        """
        return node.accept(self)

    def _transform_children(self, children: list[Node]) -> list[Node]:
        """Transform a list of child nodes, splicing list results and dropping None."""
        result: list[Node] = []
        for child in children:
            transformed = self.transform(child)
            if transformed is None:
                continue
            if isinstance(transformed, list):
                result.extend(transformed)
            else:
                result.append(transformed)
        return result

    def _generic_transform(self, node: Node) -> Node:
        """Copy ``node``, transforming its children when it has any.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node
            Transformed copy of the node

        """
        if not hasattr(node, "children"):
            leaf = copy.copy(node)
            leaf.data = copy.deepcopy(node.data)
            return leaf

        return replace_node_children(node, self._transform_children(get_node_children(node)))

    def generic_visit(self, node: Node) -> Any:
        """Transform nodes without a dedicated handler."""
        return self._generic_transform(node)


class TextPatternTransformer(NodeTransformer, metaclass=ABCMeta):
    """Transformer that splits text nodes around regular expression matches.

    Subclasses set ``pattern`` and implement :meth:`replace_match`. Text inside
    links is left alone so link labels are not rewritten into nested links.

    Attributes
    ----------
    pattern : Pattern
        Compiled pattern searched in each text node
    skip_types : tuple of type
        Node types whose subtrees are copied without being searched

    """

    pattern: ClassVar[Optional[Pattern[str]]] = None
    skip_types: ClassVar[tuple[type, ...]] = (Link, Code)

    @abstractmethod
    def replace_match(self, match: re.Match[str]) -> TransformResult:
        """Return the node(s) replacing one match, or None to keep the matched text."""

    def generic_visit(self, node: Node) -> Any:
        """Copy skipped subtrees verbatim, transform everything else."""
        if isinstance(node, self.skip_types):
            return copy.deepcopy(node)
        return super().generic_visit(node)

    def visit_text(self, node: Text) -> TransformResult:
        """Split a text node around every match of ``pattern``."""
        if self.pattern is None:
            return self._generic_transform(node)

        pieces: list[Node] = []
        cursor = 0
        matched = False
        for match in self.pattern.finditer(node.value):
            replacement = self.replace_match(match)
            if replacement is None:
                continue
            matched = True
            if match.start() > cursor:
                pieces.append(Text(value=node.value[cursor : match.start()]))
            if isinstance(replacement, list):
                pieces.extend(replacement)
            else:
                pieces.append(replacement)
            cursor = match.end()

        if not matched:
            return self._generic_transform(node)

        if cursor < len(node.value):
            pieces.append(Text(value=node.value[cursor:]))
        return pieces


__all__ = [
    "NodeTransformer",
    "TextPatternTransformer",
    "TransformResult",
]
