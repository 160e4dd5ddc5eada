#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/rendering/to_hast.py
"""Conversion of the syntax tree into the rendering tree.

:class:`HastConverter` is a visitor with one ``visit_*`` method per node
kind. Node kinds it does not know land in :meth:`HastConverter.generic_visit`,
which renders a plain literal as text and anything else as a ``div`` around
its converted children.

Every node may carry rendering hints in ``data``:

- ``h_name``: tag name to use instead of the default one
- ``h_properties``: properties merged over the default ones
- ``h_children``: rendering tree nodes used instead of the converted children

Elements separated by line feeds keep the serialized HTML readable; the
``wrap`` helper inserts them.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Optional, Union

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
from notepress.constants import BLOCK_ANCHOR_CLASS, HASHTAG_CLASS, USER_TAG_CLASS, WIKI_LINK_CLASS
from notepress.exceptions import RenderingError
from notepress.hast import nodes as hast
from notepress.pipeline.stage import RenderingStage
from notepress.rendering.table import TableLowering
from notepress.stages.note_refs import format_note_ref

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)

HastResult = Union[hast.HastNode, list[hast.HastNode], None]

_HINT_KEYS = ("h_name", "h_properties", "h_children")
_LINE_WHITESPACE = re.compile(r"[ \t]*(\r?\n|\r)[ \t]*")
_LEADING_WHITESPACE = re.compile(r"^\s+")


def trim_lines(value: str) -> str:
    """Remove spaces and tabs around line endings."""
    return _LINE_WHITESPACE.sub(r"\1", value)


def wrap(nodes: list[hast.HastNode], loose: bool = False) -> list[hast.HastNode]:
    """Separate ``nodes`` with line feeds.

    Parameters
    ----------
    nodes : list of HastNode
        Nodes to separate
    loose : bool, default False
        Also put a line feed before the first and after the last node

    Returns
    -------
    list of HastNode
        The separated nodes; an empty input gives an empty list

    """
    if not nodes:
        return []

    result: list[hast.HastNode] = [hast.Text(value="\n")] if loose else []
    for index, node in enumerate(nodes):
        if index:
            result.append(hast.Text(value="\n"))
        result.append(node)
    if loose:
        result.append(hast.Text(value="\n"))
    return result


def _strip_leading(result: HastResult) -> None:
    if isinstance(result, hast.Text):
        result.value = _LEADING_WHITESPACE.sub("", result.value)
    elif isinstance(result, hast.Element) and result.children:
        head = result.children[0]
        if isinstance(head, hast.Text):
            head.value = _LEADING_WHITESPACE.sub("", head.value)


class HastConverter(NodeVisitor):
    """Convert syntax tree nodes to rendering tree nodes.

    Parameters
    ----------
    allow_dangerous_html : bool, default False
        Keep raw HTML from the source as :class:`~notepress.hast.nodes.Raw`
        nodes. When False, raw HTML is dropped.

    """

    def __init__(self, allow_dangerous_html: bool = False):
        self.allow_dangerous_html = allow_dangerous_html
        self.tables = TableLowering(self)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def one(self, node: Any) -> HastResult:
        """Convert a single node.

        Raises
        ------
        RenderingError
            If ``node`` is not a syntax tree node or has no type

        """
        if not isinstance(node, Node) or not node.type:
            raise RenderingError(f"Expected node, got `{node!r}`", rendering_stage="to-hast")
        return node.accept(self)

    def all(self, parent: Node) -> list[hast.HastNode]:
        """Convert the children of ``parent``.

        Text right after a hard line break loses its leading whitespace.
        """
        children = get_node_children(parent)
        values: list[hast.HastNode] = []
        for index, child in enumerate(children):
            result = self.one(child)
            if result is None:
                continue
            if index and isinstance(children[index - 1], LineBreak):
                _strip_leading(result)
            if isinstance(result, list):
                values.extend(result)
            else:
                values.append(result)
        return values

    def element(
        self,
        node: Node,
        tag_name: str,
        properties: Optional[dict[str, Any]] = None,
        children: Optional[list[hast.HastNode]] = None,
    ) -> hast.Element:
        """Create an element for ``node``, applying its rendering hints."""
        data = node.data
        merged = dict(properties or {})
        merged.update(data.get("h_properties") or {})
        return hast.Element(
            tag_name=data.get("h_name") or tag_name,
            properties=merged,
            children=list(data["h_children"]) if "h_children" in data else list(children or []),
        )

    wrap = staticmethod(wrap)

    # ------------------------------------------------------------------
    # Fallback
    # ------------------------------------------------------------------

    def generic_visit(self, node: Node) -> HastResult:
        """Convert a node kind without a dedicated handler."""
        if is_literal(node) and not any(key in node.data for key in _HINT_KEYS):
            return hast.Text(value=node.value)  # type: ignore[attr-defined]
        return self.element(node, "div", {}, self.all(node))

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> hast.Root:
        return hast.Root(children=wrap(self.all(node)), data=dict(node.data))

    def visit_heading(self, node: Heading) -> hast.Element:
        return self.element(node, f"h{node.level}", {}, self.all(node))

    def visit_paragraph(self, node: Paragraph) -> hast.Element:
        return self.element(node, "p", {}, self.all(node))

    def visit_block_quote(self, node: BlockQuote) -> hast.Element:
        return self.element(node, "blockquote", {}, wrap(self.all(node), loose=True))

    def visit_code_block(self, node: CodeBlock) -> hast.Element:
        value = f"{node.value}\n" if node.value else ""
        properties: dict[str, Any] = {}
        if node.lang:
            properties["class"] = [f"language-{node.lang}"]
        if node.meta:
            properties["data-meta"] = node.meta
        code = self.element(node, "code", properties, [hast.Text(value=value)])
        return hast.Element(tag_name="pre", children=[code])

    def visit_list(self, node: List) -> hast.Element:
        properties: dict[str, Any] = {}
        if node.ordered and node.start != 1:
            properties["start"] = node.start
        items = [self._list_item(item, loose=not node.tight) for item in node.children if isinstance(item, ListItem)]
        if any(item.checked is not None for item in node.children if isinstance(item, ListItem)):
            properties["class"] = ["contains-task-list"]
        return self.element(node, "ol" if node.ordered else "ul", properties, wrap(items, loose=True))

    def visit_list_item(self, node: ListItem) -> hast.Element:
        return self._list_item(node, loose=False)

    def _list_item(self, node: ListItem, loose: bool) -> hast.Element:
        """Convert a list item; tight items unwrap their paragraphs."""
        result = self.all(node)
        properties: dict[str, Any] = {}

        if node.checked is not None:
            head = result[0] if result else None
            if isinstance(head, hast.Element) and head.tag_name == "p":
                paragraph = head
            else:
                paragraph = hast.Element(tag_name="p")
                result.insert(0, paragraph)
            if paragraph.children:
                paragraph.children.insert(0, hast.Text(value=" "))
            paragraph.children.insert(
                0, hast.Element(tag_name="input", properties={"type": "checkbox", "checked": node.checked, "disabled": True})
            )
            properties["class"] = ["task-list-item"]

        wrapped: list[hast.HastNode] = []
        for index, child in enumerate(result):
            is_paragraph = isinstance(child, hast.Element) and child.tag_name == "p"
            if loose or index != 0 or not is_paragraph:
                wrapped.append(hast.Text(value="\n"))
            if is_paragraph and not loose:
                wrapped.extend(child.children)  # type: ignore[union-attr]
            else:
                wrapped.append(child)

        tail = result[-1] if result else None
        if tail is not None and (loose or not (isinstance(tail, hast.Element) and tail.tag_name == "p")):
            wrapped.append(hast.Text(value="\n"))

        return self.element(node, "li", properties, wrapped)

    def visit_table(self, node: Table) -> hast.Element:
        return self.tables.lower(node)

    def visit_thematic_break(self, node: ThematicBreak) -> hast.Element:
        return self.element(node, "hr")

    def visit_html_block(self, node: HTMLBlock) -> Optional[hast.Raw]:
        return hast.Raw(value=node.value) if self.allow_dangerous_html else None

    def visit_yaml(self, node: Yaml) -> None:
        return None

    def visit_math_block(self, node: MathBlock) -> hast.Element:
        code = self.element(node, "code", {"class": ["language-math", "math-display"]}, [hast.Text(value=node.value)])
        if "h_name" in node.data:
            return code
        return hast.Element(tag_name="pre", children=[code])

    def visit_footnote_definition(self, node: FootnoteDefinition) -> hast.Element:
        children = self.all(node)
        backref = hast.Element(
            tag_name="a",
            properties={"href": f"#fnref-{node.identifier}", "data-footnote-backref": True, "aria-label": "Back to content"},
            children=[hast.Text(value="↩")],
        )
        tail = children[-1] if children else None
        if isinstance(tail, hast.Element) and tail.tag_name == "p":
            tail.children.extend([hast.Text(value=" "), backref])
        else:
            children.append(backref)
        return self.element(node, "li", {"id": f"fn-{node.identifier}"}, wrap(children, loose=True))

    def visit_note_ref(self, node: NoteRef) -> hast.Element:
        children = self.all(node) if node.children else [hast.Text(value=format_note_ref(node))]
        return self.element(node, "div", {}, wrap(children, loose=True))

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> hast.Text:
        return hast.Text(value=trim_lines(node.value))

    def visit_emphasis(self, node: Emphasis) -> hast.Element:
        return self.element(node, "em", {}, self.all(node))

    def visit_strong(self, node: Strong) -> hast.Element:
        return self.element(node, "strong", {}, self.all(node))

    def visit_strikethrough(self, node: Strikethrough) -> hast.Element:
        return self.element(node, "del", {}, self.all(node))

    def visit_code(self, node: Code) -> hast.Element:
        return self.element(node, "code", {}, [hast.Text(value=node.value.replace("\n", " "))])

    def visit_link(self, node: Link) -> hast.Element:
        properties: dict[str, Any] = {"href": node.url}
        if node.title:
            properties["title"] = node.title
        return self.element(node, "a", properties, self.all(node))

    def visit_image(self, node: Image) -> hast.Element:
        properties: dict[str, Any] = {"src": node.url, "alt": node.alt}
        if node.title:
            properties["title"] = node.title
        return self.element(node, "img", properties)

    def visit_line_break(self, node: LineBreak) -> list[hast.HastNode]:
        return [self.element(node, "br"), hast.Text(value="\n")]

    def visit_html_inline(self, node: HTMLInline) -> Optional[hast.Raw]:
        return hast.Raw(value=node.value) if self.allow_dangerous_html else None

    def visit_footnote_reference(self, node: FootnoteReference) -> hast.Element:
        label = str(node.data.get("index", node.identifier))
        link = hast.Element(
            tag_name="a",
            properties={"href": f"#fn-{node.identifier}", "id": f"fnref-{node.identifier}", "data-footnote-ref": True},
            children=[hast.Text(value=label)],
        )
        return self.element(node, "sup", {}, [link])

    def visit_math_inline(self, node: MathInline) -> hast.Element:
        return self.element(node, "code", {"class": ["language-math", "math-inline"]}, [hast.Text(value=node.value)])

    def visit_abbr(self, node: Abbr) -> hast.Element:
        return self.element(node, "abbr", {"title": node.title or None}, [hast.Text(value=node.value)])

    def visit_highlight(self, node: Highlight) -> hast.Element:
        return self.element(node, "mark", {}, self.all(node))

    def visit_wikilink(self, node: WikiLink) -> hast.Element:
        href = node.data.get("href") or node.value
        return self.element(
            node, "a", {"href": href, "class": [WIKI_LINK_CLASS]}, [hast.Text(value=node.alias or node.value)]
        )

    def visit_hashtag(self, node: HashTag) -> hast.Element:
        href = node.data.get("href") or node.fname
        return self.element(node, "a", {"href": href, "class": [HASHTAG_CLASS]}, [hast.Text(value=node.value)])

    def visit_user_tag(self, node: UserTag) -> hast.Element:
        href = node.data.get("href") or node.fname
        return self.element(node, "a", {"href": href, "class": [USER_TAG_CLASS]}, [hast.Text(value=node.value)])

    def visit_block_anchor(self, node: BlockAnchor) -> hast.Element:
        return self.element(
            node, "a", {"id": f"^{node.value}", "class": [BLOCK_ANCHOR_CLASS], "aria-hidden": "true"}, []
        )


def to_hast(tree: Document, allow_dangerous_html: bool = False) -> hast.Root:
    """Convert a syntax tree to a rendering tree.

    Raises
    ------
    RenderingError
        If the tree is not a Document or contains an unrecognizable node

    """
    if not isinstance(tree, Document):
        raise RenderingError(f"Expected Document, got {type(tree).__name__}", rendering_stage="to-hast")
    return HastConverter(allow_dangerous_html=allow_dangerous_html).visit_document(tree)


class ToHastStage(RenderingStage):
    """Convert the syntax tree to the rendering tree.

    Parameters
    ----------
    allow_dangerous_html : bool, default False
        Keep raw HTML from the source

    """

    name = "to-hast"

    def __init__(self, allow_dangerous_html: bool = False):
        self.allow_dangerous_html = allow_dangerous_html

    def run(self, tree: Document, context: PipelineContext) -> hast.Root:  # type: ignore[override]
        return to_hast(tree, allow_dangerous_html=self.allow_dangerous_html)


__all__ = [
    "HastConverter",
    "ToHastStage",
    "to_hast",
    "trim_lines",
    "wrap",
]
