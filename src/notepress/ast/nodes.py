#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/ast/nodes.py
"""Syntax tree node classes for the note markdown dialect.

Every node carries a ``type`` tag, an optional source ``position`` and a free
form ``data`` dict that stages use to attach hints for later stages (most
notably ``h_name``, ``h_properties`` and ``h_children``, which override how the
node is converted to the rendering tree). Container nodes keep their ordered
children in ``children``; leaf nodes with textual payload keep it in ``value``.

Node Hierarchy
--------------
Block-level nodes:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell
    - ThematicBreak, HTMLBlock, Yaml, MathBlock, FootnoteDefinition
    - NoteRef

Inline nodes:
    - Text, Emphasis, Strong, Strikethrough, Code
    - Link, Image, LineBreak, HTMLInline
    - FootnoteReference, MathInline, Abbr, Highlight

Dialect nodes produced by stages:
    - WikiLink, HashTag, UserTag, BlockAnchor, NoteRef

Nodes a stage defines for itself can subclass :class:`Node` or use
:class:`Extension`; visitors see those through ``generic_visit``.

"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Optional

from notepress.constants import Alignment


@dataclass
class Point:
    """One place in the source text (1-indexed line and column)."""

    line: int
    column: int
    offset: Optional[int] = None


@dataclass
class Position:
    """Source span of a node."""

    start: Point
    end: Point


class Node(ABC):
    """Base class for all syntax tree nodes.

    Parameters
    ----------
    data : dict, default = empty dict
        Stage-attached hints and metadata
    position : Position or None, default = None
        Where this node came from in the source

    Notes
    -----
    Subclasses set ``node_type`` and override :meth:`accept` to dispatch to
    their ``visit_*`` method. The base implementation dispatches to
    ``generic_visit`` so that node kinds unknown to a visitor take the
    visitor's fallback branch.

    """

    node_type: ClassVar[str] = ""

    data: dict[str, Any]
    position: Optional[Position]

    @property
    def type(self) -> str:
        """Tag identifying the kind of node."""
        return self.node_type

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        return visitor.generic_visit(self)


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root node of a parsed note.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level content
    data : dict, default = empty dict
        Document level data; the frontmatter stage stores parsed metadata
        under ``"frontmatter"``
    position : Position or None, default = None
        Source span

    """

    node_type: ClassVar[str] = "document"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_document``."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    children : list of Node, default = empty list
        Inline nodes representing heading text

    """

    node_type: ClassVar[str] = "heading"

    level: int
    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    node_type: ClassVar[str] = "paragraph"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    value : str
        Code content without the fence lines
    lang : str or None, default = None
        Language from the info string
    meta : str or None, default = None
        Remainder of the info string after the language

    """

    node_type: ClassVar[str] = "code_block"

    value: str
    lang: Optional[str] = None
    meta: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code_block``."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote containing block-level content."""

    node_type: ClassVar[str] = "block_quote"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_quote``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """Ordered or unordered list.

    Parameters
    ----------
    children : list of ListItem, default = empty list
        List items
    ordered : bool, default = False
        Whether the list is numbered
    start : int, default = 1
        First number of an ordered list
    tight : bool, default = True
        Tight lists render item paragraphs without ``<p>`` wrappers
    bullet : str or None, default = None
        Bullet character used when serializing back to markdown
    list_item_indent : int or None, default = None
        Spaces between the bullet and the item content when serializing

    """

    node_type: ClassVar[str] = "list"

    children: list[Node] = field(default_factory=list)
    ordered: bool = False
    start: int = 1
    tight: bool = True
    bullet: Optional[str] = None
    list_item_indent: Optional[int] = None
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item; ``checked`` is None for plain items and a bool for task items."""

    node_type: ClassVar[str] = "list_item"

    children: list[Node] = field(default_factory=list)
    checked: Optional[bool] = None
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class Table(Node):
    """Table node (GFM extension).

    Row 0 is the header row. The ``align`` list holds one entry per declared
    column and is the authority on how many columns the table has, whatever
    the width of individual rows.

    Parameters
    ----------
    children : list of TableRow, default = empty list
        Rows, header first
    align : list, default = empty list
        Column alignments ('left', 'center', 'right', or None)

    """

    node_type: ClassVar[str] = "table"

    children: list[Node] = field(default_factory=list)
    align: list[Optional[Alignment]] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row containing cells."""

    node_type: ClassVar[str] = "table_row"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell containing inline content."""

    node_type: ClassVar[str] = "table_cell"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_cell``."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    node_type: ClassVar[str] = "thematic_break"

    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_thematic_break``."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block, passed through to the rendering tree as a raw fragment."""

    node_type: ClassVar[str] = "html_block"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_block``."""
        return visitor.visit_html_block(self)


@dataclass
class Yaml(Node):
    """Frontmatter block as raw YAML text, without the ``---`` fences."""

    node_type: ClassVar[str] = "yaml"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_yaml``."""
        return visitor.visit_yaml(self)


@dataclass
class MathBlock(Node):
    """Display math (``$$ ... $$``) in LaTeX notation."""

    node_type: ClassVar[str] = "math_block"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_math_block``."""
        return visitor.visit_math_block(self)


@dataclass
class FootnoteDefinition(Node):
    """Footnote definition.

    Parameters
    ----------
    identifier : str
        Footnote label as written in the source (``[^identifier]: ...``)
    children : list of Node, default = empty list
        Block-level footnote content

    """

    node_type: ClassVar[str] = "footnote_definition"

    identifier: str
    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_footnote_definition``."""
        return visitor.visit_footnote_definition(self)


@dataclass
class NoteRef(Node):
    """Embedded reference to another note (``![[fname#anchor]]``).

    Before expansion the node has no children; the reference-expansion stage
    fills ``children`` with the referenced note's content.

    Parameters
    ----------
    value : str
        Referenced note name
    anchor : str or None, default = None
        Heading or block anchor inside the referenced note
    vault_name : str or None, default = None
        Vault of the referenced note for cross-vault references
    children : list of Node, default = empty list
        Expanded content

    """

    node_type: ClassVar[str] = "note_ref"

    value: str
    anchor: Optional[str] = None
    vault_name: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_note_ref``."""
        return visitor.visit_note_ref(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text."""

    node_type: ClassVar[str] = "text"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasized (italic) inline content."""

    node_type: ClassVar[str] = "emphasis"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) inline content."""

    node_type: ClassVar[str] = "strong"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strong``."""
        return visitor.visit_strong(self)


@dataclass
class Strikethrough(Node):
    """Struck-through inline content (GFM ``~~text~~``)."""

    node_type: ClassVar[str] = "strikethrough"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strikethrough``."""
        return visitor.visit_strikethrough(self)


@dataclass
class Code(Node):
    """Inline code span."""

    node_type: ClassVar[str] = "code"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink.

    Parameters
    ----------
    url : str
        Link target
    children : list of Node, default = empty list
        Link text
    title : str or None, default = None
        Optional link title

    Notes
    -----
    Links produced from wikilinks, hashtags and user tags carry the original
    target under ``data["wikilink"]`` so a later publishing pass can rewrite
    the URL.

    """

    node_type: ClassVar[str] = "link"

    url: str
    children: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_link``."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image reference.

    Parameters
    ----------
    url : str
        Image source URL or path
    alt : str, default = ""
        Alternative text
    title : str or None, default = None
        Optional image title

    """

    node_type: ClassVar[str] = "image"

    url: str
    alt: str = ""
    title: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_image``."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Hard line break (two trailing spaces or a backslash before a newline).

    Soft breaks are not nodes; the parser keeps them as ``"\\n"`` inside text.
    """

    node_type: ClassVar[str] = "line_break"

    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


@dataclass
class HTMLInline(Node):
    """Inline raw HTML."""

    node_type: ClassVar[str] = "html_inline"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_inline``."""
        return visitor.visit_html_inline(self)


@dataclass
class FootnoteReference(Node):
    """Footnote reference (``[^identifier]``)."""

    node_type: ClassVar[str] = "footnote_reference"

    identifier: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_footnote_reference``."""
        return visitor.visit_footnote_reference(self)


@dataclass
class MathInline(Node):
    """Inline math (``$ ... $``) in LaTeX notation."""

    node_type: ClassVar[str] = "math_inline"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_math_inline``."""
        return visitor.visit_math_inline(self)


@dataclass
class Abbr(Node):
    """Abbreviation with its expansion (``*[HTML]: Hyper Text Markup Language``)."""

    node_type: ClassVar[str] = "abbr"

    value: str
    title: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_abbr``."""
        return visitor.visit_abbr(self)


@dataclass
class Highlight(Node):
    """Highlighted inline content, used to focus a backlink's anchor text."""

    node_type: ClassVar[str] = "highlight"

    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_highlight``."""
        return visitor.visit_highlight(self)


# ============================================================================
# Dialect Nodes
# ============================================================================


@dataclass
class WikiLink(Node):
    """Link to another note (``[[alias|fname#anchor]]``).

    Parameters
    ----------
    value : str
        Target note name
    alias : str or None, default = None
        Display text; defaults to the target name when rendered
    anchor_header : str or None, default = None
        Heading slug or ``^block-anchor`` inside the target note
    vault_name : str or None, default = None
        Vault of the target note for cross-vault links

    """

    node_type: ClassVar[str] = "wikilink"

    value: str
    alias: Optional[str] = None
    anchor_header: Optional[str] = None
    vault_name: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_wikilink``."""
        return visitor.visit_wikilink(self)


@dataclass
class HashTag(Node):
    """Hashtag (``#tag``), a shorthand link to the note ``tags.<tag>``."""

    node_type: ClassVar[str] = "hashtag"

    value: str
    fname: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_hashtag``."""
        return visitor.visit_hashtag(self)


@dataclass
class UserTag(Node):
    """User tag (``@name``), a shorthand link to the note ``user.<name>``."""

    node_type: ClassVar[str] = "user_tag"

    value: str
    fname: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_user_tag``."""
        return visitor.visit_user_tag(self)


@dataclass
class BlockAnchor(Node):
    """Block anchor (``^anchor-id`` at the end of a block)."""

    node_type: ClassVar[str] = "block_anchor"

    value: str
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_anchor``."""
        return visitor.visit_block_anchor(self)


@dataclass
class Extension(Node):
    """Node kind defined outside this module.

    Parameters
    ----------
    kind : str
        Tag identifying the node kind
    children : list of Node, default = empty list
        Child nodes
    value : str or None, default = None
        Textual payload for literal nodes

    """

    kind: str
    children: list[Node] = field(default_factory=list)
    value: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None

    @property
    def type(self) -> str:
        """Tag identifying the kind of node."""
        return self.kind


# ============================================================================
# Helpers
# ============================================================================


def get_node_children(node: Node) -> list[Node]:
    """Get the child nodes of a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Copy of the child list (empty list for leaf nodes)

    """
    children = getattr(node, "children", None)
    if children is None:
        return []
    return list(children)


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of a node with replaced children.

    Parameters
    ----------
    node : Node
        The node to copy and modify
    new_children : list of Node
        New children to use in the copy

    Returns
    -------
    Node
        New node with replaced children and a copied ``data`` dict

    Raises
    ------
    ValueError
        If the node type doesn't support children

    """
    if not hasattr(node, "children"):
        raise ValueError(f"{type(node).__name__} does not have children")
    return replace(node, children=list(new_children), data=dict(node.data))  # type: ignore[type-var]


def is_literal(node: Node) -> bool:
    """Return True if the node carries a textual ``value`` payload."""
    return isinstance(getattr(node, "value", None), str)


__all__ = [
    "Point",
    "Position",
    "Node",
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "HTMLBlock",
    "Yaml",
    "MathBlock",
    "FootnoteDefinition",
    "NoteRef",
    "Text",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    "HTMLInline",
    "FootnoteReference",
    "MathInline",
    "Abbr",
    "Highlight",
    "WikiLink",
    "HashTag",
    "UserTag",
    "BlockAnchor",
    "Extension",
    "get_node_children",
    "replace_node_children",
    "is_literal",
]
