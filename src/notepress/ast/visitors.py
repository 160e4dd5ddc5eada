#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/ast/visitors.py
"""Visitor pattern implementation for syntax tree traversal.

Each node's ``accept`` method calls the matching ``visit_<type>`` method on
the visitor. Every ``visit_*`` method defaults to :meth:`NodeVisitor.generic_visit`,
so subclasses only override the node kinds they care about. Node kinds that
have no ``visit_*`` method at all (extension nodes) land in ``generic_visit``
directly, which makes it the single fallback branch for unrecognized nodes.

"""

from __future__ import annotations

from typing import Any

from notepress.ast.nodes import (
    Abbr,
    BlockAnchor,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
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
)


class NodeVisitor:
    """Base class for syntax tree visitors.

    Examples
    --------
    Count wikilinks in a document:

        >>> class WikiLinkCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_wikilink(self, node):
        ...         self.count += 1
        ...
        >>> counter = WikiLinkCounter()
        >>> document.accept(counter)
        >>> print(counter.count)

    """

    def generic_visit(self, node: Node) -> Any:
        """Visit every child of ``node``; the fallback for all node kinds."""
        for child in get_node_children(node):
            child.accept(self)
        return None

    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""
        return self.generic_visit(node)

    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""
        return self.generic_visit(node)

    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        return self.generic_visit(node)

    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""
        return self.generic_visit(node)

    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""
        return self.generic_visit(node)

    def visit_list(self, node: List) -> Any:
        """Visit a List node."""
        return self.generic_visit(node)

    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""
        return self.generic_visit(node)

    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""
        return self.generic_visit(node)

    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""
        return self.generic_visit(node)

    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""
        return self.generic_visit(node)

    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""
        return self.generic_visit(node)

    def visit_html_block(self, node: HTMLBlock) -> Any:
        """Visit an HTMLBlock node."""
        return self.generic_visit(node)

    def visit_yaml(self, node: Yaml) -> Any:
        """Visit a Yaml frontmatter node."""
        return self.generic_visit(node)

    def visit_math_block(self, node: MathBlock) -> Any:
        """Visit a MathBlock node."""
        return self.generic_visit(node)

    def visit_footnote_definition(self, node: FootnoteDefinition) -> Any:
        """Visit a FootnoteDefinition node."""
        return self.generic_visit(node)

    def visit_note_ref(self, node: NoteRef) -> Any:
        """Visit a NoteRef node."""
        return self.generic_visit(node)

    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        return self.generic_visit(node)

    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""
        return self.generic_visit(node)

    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""
        return self.generic_visit(node)

    def visit_strikethrough(self, node: Strikethrough) -> Any:
        """Visit a Strikethrough node."""
        return self.generic_visit(node)

    def visit_code(self, node: Code) -> Any:
        """Visit an inline Code node."""
        return self.generic_visit(node)

    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""
        return self.generic_visit(node)

    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""
        return self.generic_visit(node)

    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""
        return self.generic_visit(node)

    def visit_html_inline(self, node: HTMLInline) -> Any:
        """Visit an HTMLInline node."""
        return self.generic_visit(node)

    def visit_footnote_reference(self, node: FootnoteReference) -> Any:
        """Visit a FootnoteReference node."""
        return self.generic_visit(node)

    def visit_math_inline(self, node: MathInline) -> Any:
        """Visit a MathInline node."""
        return self.generic_visit(node)

    def visit_abbr(self, node: Abbr) -> Any:
        """Visit an Abbr node."""
        return self.generic_visit(node)

    def visit_highlight(self, node: Highlight) -> Any:
        """Visit a Highlight node."""
        return self.generic_visit(node)

    def visit_wikilink(self, node: WikiLink) -> Any:
        """Visit a WikiLink node."""
        return self.generic_visit(node)

    def visit_hashtag(self, node: HashTag) -> Any:
        """Visit a HashTag node."""
        return self.generic_visit(node)

    def visit_user_tag(self, node: UserTag) -> Any:
        """Visit a UserTag node."""
        return self.generic_visit(node)

    def visit_block_anchor(self, node: BlockAnchor) -> Any:
        """Visit a BlockAnchor node."""
        return self.generic_visit(node)
