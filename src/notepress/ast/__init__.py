#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/ast/__init__.py
"""Syntax tree for the note markdown dialect.

The module consists of several components:

- nodes: node classes representing document structure
- visitors: visitor pattern implementation for tree traversal
- transforms: copying transformers used by pipeline stages
- utils: text extraction and traversal helpers

Examples
--------
    >>> from notepress.ast import Document, Heading, Paragraph, Text
    >>> doc = Document(children=[
    ...     Heading(level=1, children=[Text(value="Title")]),
    ...     Paragraph(children=[Text(value="Hello world")]),
    ... ])

"""

from __future__ import annotations

from notepress.ast.nodes import (
    Abbr,
    BlockAnchor,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Extension,
    FootnoteDefinition,
    FootnoteReference,
    HashTag,
    Heading,
    Highlight,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Node,
    NoteRef,
    Paragraph,
    Point,
    Position,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    UserTag,
    WikiLink,
    Yaml,
    get_node_children,
    is_literal,
    replace_node_children,
)
from notepress.ast.transforms import NodeTransformer, TextPatternTransformer
from notepress.ast.utils import extract_text, find_all, walk
from notepress.ast.visitors import NodeVisitor

__all__ = [
    "Abbr",
    "BlockAnchor",
    "BlockQuote",
    "Code",
    "CodeBlock",
    "Document",
    "Emphasis",
    "Extension",
    "FootnoteDefinition",
    "FootnoteReference",
    "HashTag",
    "Heading",
    "Highlight",
    "HTMLBlock",
    "HTMLInline",
    "Image",
    "LineBreak",
    "Link",
    "List",
    "ListItem",
    "MathBlock",
    "MathInline",
    "Node",
    "NoteRef",
    "Paragraph",
    "Point",
    "Position",
    "Strikethrough",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "ThematicBreak",
    "UserTag",
    "WikiLink",
    "Yaml",
    "get_node_children",
    "is_literal",
    "replace_node_children",
    "NodeTransformer",
    "TextPatternTransformer",
    "NodeVisitor",
    "extract_text",
    "find_all",
    "walk",
]
