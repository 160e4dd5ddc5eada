#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/renderers/markdown.py
"""Markdown rendering from the syntax tree.

This module provides the MarkdownRenderer class which turns a processed
syntax tree back into note markdown, dialect syntax included. List bullets
and item indentation come from the ``list-format`` stage when it ran, and
from the renderer's defaults otherwise.

The renderer uses the visitor pattern and writes into an output buffer; the
content of a block is rendered into a fresh buffer when it has to be
indented or quoted as a whole.

"""

from __future__ import annotations

import re
from typing import Optional

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
    Text,
    ThematicBreak,
    UserTag,
    WikiLink,
    Yaml,
    get_node_children,
    is_literal,
)
from notepress.ast.visitors import NodeVisitor
from notepress.constants import DEFAULT_LIST_BULLET, DEFAULT_LIST_ITEM_INDENT
from notepress.stages.extended_image import props_to_style
from notepress.stages.note_refs import format_note_ref
from notepress.stages.wikilinks import format_wikilink

_BLOCK_TYPES = (
    Paragraph,
    Heading,
    CodeBlock,
    BlockQuote,
    List,
    Table,
    ThematicBreak,
    HTMLBlock,
    MathBlock,
    FootnoteDefinition,
    NoteRef,
    Yaml,
)

_ALIGNMENT_MARKERS = {"left": ":--", "center": ":-:", "right": "--:", None: "---"}


def _is_block(node: Node) -> bool:
    if isinstance(node, _BLOCK_TYPES):
        return True
    return not is_literal(node) and any(_is_block(child) for child in get_node_children(node))


def _longest_run(text: str, char: str) -> int:
    runs = re.findall(f"{re.escape(char)}+", text)
    return max((len(run) for run in runs), default=0)


class MarkdownRenderer(NodeVisitor):
    """Render syntax tree nodes to markdown text.

    Parameters
    ----------
    bullet : str, default "-"
        Bullet for unordered lists that carry no bullet of their own
    list_item_indent : int, default 1
        Spaces after a list marker for lists that carry no indent of their own

    Examples
    --------
        >>> from notepress.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, children=[Text(value="Title")])])
        >>> MarkdownRenderer().render_to_string(doc)
        '# Title\\n'

    """

    def __init__(self, bullet: str = DEFAULT_LIST_BULLET, list_item_indent: int = DEFAULT_LIST_ITEM_INDENT):
        self.bullet = bullet
        self.list_item_indent = list_item_indent
        self._output: list[str] = []

    def render_to_string(self, document: Document) -> str:
        """Render a document to markdown.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            Markdown text ending with a single newline (empty for an empty
            document)

        """
        self._output = []
        document.accept(self)
        result = "".join(self._output).strip("\n")
        self._output = []
        return f"{result}\n" if result else ""

    def _render(self, node: Node) -> str:
        saved_output = self._output
        self._output = []
        node.accept(self)
        rendered = "".join(self._output)
        self._output = saved_output
        return rendered

    def _render_inline_content(self, nodes: list[Node]) -> str:
        parts: list[str] = []
        for node in nodes:
            rendered = self._render(node)
            if isinstance(node, BlockAnchor) and parts and not parts[-1][-1:].isspace():
                rendered = f" {rendered}"
            parts.append(rendered)
        return "".join(parts)

    def _render_blocks(self, nodes: list[Node], separator: str = "\n\n") -> str:
        return separator.join(self._render(node) for node in nodes)

    @staticmethod
    def _indent(text: str, prefix: str, first_prefix: Optional[str] = None) -> str:
        lines = text.split("\n")
        indented = []
        for index, line in enumerate(lines):
            lead = first_prefix if index == 0 and first_prefix is not None else prefix
            indented.append(f"{lead}{line}" if line else lead.rstrip())
        return "\n".join(indented)

    # ------------------------------------------------------------------
    # Fallback
    # ------------------------------------------------------------------

    def generic_visit(self, node: Node) -> None:
        """Render node kinds without a dedicated method (extension nodes)."""
        if is_literal(node):
            self._output.append(node.value)  # type: ignore[attr-defined]
            return
        children = get_node_children(node)
        if any(_is_block(child) for child in children):
            self._output.append(self._render_blocks(children))
        else:
            self._output.append(self._render_inline_content(children))

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        self._output.append(self._render_blocks(node.children))

    def visit_yaml(self, node: Yaml) -> None:
        self._output.append(f"---\n{node.value}\n---")

    def visit_heading(self, node: Heading) -> None:
        self._output.append(f"{'#' * node.level} {self._render_inline_content(node.children)}")

    def visit_paragraph(self, node: Paragraph) -> None:
        self._output.append(self._render_inline_content(node.children))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a fenced code block; the fence outgrows any backtick run inside."""
        fence = "`" * max(3, _longest_run(node.value, "`") + 1)
        info = " ".join(part for part in (node.lang, node.meta) if part)
        body = f"{node.value}\n" if node.value else ""
        self._output.append(f"{fence}{info}\n{body}{fence}")

    def visit_block_quote(self, node: BlockQuote) -> None:
        self._output.append(self._indent(self._render_blocks(node.children), "> "))

    def visit_list(self, node: List) -> None:
        bullet = node.bullet or self.bullet
        spacing = " " * (node.list_item_indent if node.list_item_indent is not None else self.list_item_indent)

        items = []
        for index, item in enumerate(child for child in node.children if isinstance(child, ListItem)):
            marker = f"{node.start + index}." if node.ordered else bullet
            items.append(self._list_item(item, f"{marker}{spacing}", node.tight))
        self._output.append(("\n" if node.tight else "\n\n").join(items))

    def visit_list_item(self, node: ListItem) -> None:
        self._output.append(self._list_item(node, f"{self.bullet}{' ' * self.list_item_indent}", tight=True))

    def _list_item(self, node: ListItem, marker: str, tight: bool) -> str:
        content = self._render_blocks(node.children, "\n" if tight else "\n\n")
        if node.checked is not None:
            content = f"[{'x' if node.checked else ' '}] {content}"
        return self._indent(content, " " * len(marker), first_prefix=marker)

    def visit_table(self, node: Table) -> None:
        rows = [[self._render_inline_content(cell.children) for cell in get_node_children(row)] for row in node.children]
        if not rows:
            return
        columns = len(node.align) if node.align else len(rows[0])

        def format_row(cells: list[str]) -> str:
            padded = (cells + [""] * columns)[:columns]
            return "| " + " | ".join(cell.replace("|", "\\|") for cell in padded) + " |"

        lines = [format_row(rows[0])]
        align = (list(node.align) + [None] * columns)[:columns]
        lines.append("| " + " | ".join(_ALIGNMENT_MARKERS.get(a, "---") for a in align) + " |")
        lines.extend(format_row(row) for row in rows[1:])
        self._output.append("\n".join(lines))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        self._output.append("***")

    def visit_html_block(self, node: HTMLBlock) -> None:
        self._output.append(node.value)

    def visit_math_block(self, node: MathBlock) -> None:
        self._output.append(f"$$\n{node.value}\n$$")

    def visit_footnote_definition(self, node: FootnoteDefinition) -> None:
        label = f"[^{node.identifier}]: "
        self._output.append(self._indent(self._render_blocks(node.children), "    ", first_prefix=label))

    def visit_note_ref(self, node: NoteRef) -> None:
        self._output.append(format_note_ref(node))

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        self._output.append(node.value)

    def visit_emphasis(self, node: Emphasis) -> None:
        self._output.append(f"*{self._render_inline_content(node.children)}*")

    def visit_strong(self, node: Strong) -> None:
        self._output.append(f"**{self._render_inline_content(node.children)}**")

    def visit_strikethrough(self, node: Strikethrough) -> None:
        self._output.append(f"~~{self._render_inline_content(node.children)}~~")

    def visit_code(self, node: Code) -> None:
        ticks = "`" * (_longest_run(node.value, "`") + 1)
        padding = " " if node.value.startswith("`") or node.value.endswith("`") else ""
        self._output.append(f"{ticks}{padding}{node.value}{padding}{ticks}")

    def visit_link(self, node: Link) -> None:
        content = self._render_inline_content(node.children)
        if node.title:
            self._output.append(f'[{content}]({node.url} "{node.title}")')
        else:
            self._output.append(f"[{content}]({node.url})")

    def visit_image(self, node: Image) -> None:
        alt = node.alt.replace("[", "\\[").replace("]", "\\]")
        title = f' "{node.title}"' if node.title else ""
        self._output.append(f"![{alt}]({node.url}{title})")
        props = node.data.get("props")
        if props:
            self._output.append("{" + props_to_style(props).replace(";", ",") + "}")

    def visit_line_break(self, node: LineBreak) -> None:
        self._output.append("\\\n")

    def visit_html_inline(self, node: HTMLInline) -> None:
        self._output.append(node.value)

    def visit_footnote_reference(self, node: FootnoteReference) -> None:
        self._output.append(f"[^{node.identifier}]")

    def visit_math_inline(self, node: MathInline) -> None:
        self._output.append(f"${node.value}$")

    def visit_abbr(self, node: Abbr) -> None:
        self._output.append(node.value)

    def visit_highlight(self, node: Highlight) -> None:
        self._output.append(self._render_inline_content(node.children))

    def visit_wikilink(self, node: WikiLink) -> None:
        self._output.append(format_wikilink(node))

    def visit_hashtag(self, node: HashTag) -> None:
        self._output.append(node.value)

    def visit_user_tag(self, node: UserTag) -> None:
        self._output.append(node.value)

    def visit_block_anchor(self, node: BlockAnchor) -> None:
        self._output.append(f"^{node.value}")


def render_markdown(document: Document) -> str:
    """Render ``document`` to markdown with the default settings."""
    return MarkdownRenderer().render_to_string(document)


__all__ = ["MarkdownRenderer", "render_markdown"]
