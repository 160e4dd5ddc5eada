#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/parsers/markdown.py
"""Markdown to syntax tree parser.

This module converts note markdown into a :class:`~notepress.ast.nodes.Document`
using the mistune parser. Only standard markdown (with the GFM table,
strikethrough, task list and autolink extensions) is recognized here; the note
dialect (wikilinks, hashtags, block anchors and so on) is left as text for
the pipeline stages to pick up. Adjacent text runs are merged so dialect
syntax that mistune splits across tokens stays in a single text node.

Optional syntax is enabled per pipeline through ``features``:

- ``frontmatter``: a leading ``---`` block becomes a :class:`Yaml` node
- ``math``: ``$...$`` and ``$$...$$`` become math nodes
- ``footnotes``: ``[^label]`` references and definitions

"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from notepress.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
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
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    Yaml,
)
from notepress.constants import DEPS_MARKDOWN
from notepress.exceptions import ParsingError
from notepress.utils.decorators import requires_dependencies
from notepress.utils.text import split_frontmatter

logger = logging.getLogger(__name__)

BASE_PLUGINS = ("strikethrough", "table", "url", "task_lists")

# Parser features that map directly onto mistune plugins
FEATURE_PLUGINS = {
    "math": "math",
    "footnotes": "footnotes",
}


class MarkdownParser:
    """Parse note markdown into a syntax tree.

    Parameters
    ----------
    features : iterable of str, optional
        Optional syntax to recognize (``"frontmatter"``, ``"math"``,
        ``"footnotes"``). Unknown feature names are ignored.

    Examples
    --------
    >>> parser = MarkdownParser(features={"frontmatter", "math"})
    >>> doc = parser.parse("---\\ntitle: Hi\\n---\\nSome $x$ math")

    """

    def __init__(self, features: Optional[Iterable[str]] = None):
        self.features = frozenset(features or ())

    @property
    def plugins(self) -> list[str]:
        """mistune plugins enabled for this parser."""
        plugins = list(BASE_PLUGINS)
        for feature, plugin in FEATURE_PLUGINS.items():
            if feature in self.features:
                plugins.append(plugin)
        return plugins

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, text: str) -> Document:
        """Parse markdown text into a document.

        Parameters
        ----------
        text : str
            Markdown source

        Returns
        -------
        Document
            Parsed document

        Raises
        ------
        ParsingError
            If mistune fails on the input

        """
        import mistune

        if not isinstance(text, str):
            raise ParsingError(f"Expected markdown text, got {type(text).__name__}", parsing_stage="input")

        children: list[Node] = []
        body = text
        if "frontmatter" in self.features:
            yaml_text, body = split_frontmatter(text)
            if yaml_text is not None:
                children.append(Yaml(value=yaml_text))

        markdown = mistune.create_markdown(plugins=self.plugins, renderer=None)
        try:
            tokens, _state = markdown.parse(body)
        except Exception as e:
            raise ParsingError(f"Failed to parse markdown: {e}", parsing_stage="tokenize", original_error=e) from e

        children.extend(self._process_tokens(tokens))
        logger.debug(f"Parsed {len(children)} top-level node(s) with plugins {self.plugins}")
        return Document(children=children)

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is None:
                continue
            if isinstance(node, list):
                nodes.extend(node)
            else:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | list[Node] | None:
        token_type = token.get("type", "")
        attrs = token.get("attrs") or {}

        if token_type == "heading":
            level = attrs.get("level", 1)
            if not isinstance(level, int) or not 1 <= level <= 6:
                level = 1
            return Heading(level=level, children=self._process_inline_tokens(token.get("children", [])))
        elif token_type in ("paragraph", "block_text"):
            return Paragraph(children=self._process_inline_tokens(token.get("children", [])))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return self._process_table(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(value=token.get("raw", ""))
        elif token_type == "block_math":
            return MathBlock(value=token.get("raw", "").strip("\n"))
        elif token_type == "footnotes":
            return [self._process_footnote_item(item) for item in token.get("children", [])]
        elif token_type == "blank_line":
            return None

        logger.debug(f"Skipping unsupported block token: {token_type}")
        return None

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        info = ((token.get("attrs") or {}).get("info") or "").strip()
        lang: Optional[str] = None
        meta: Optional[str] = None
        if info:
            parts = info.split(maxsplit=1)
            lang = parts[0]
            if len(parts) > 1:
                meta = parts[1]
        value = token.get("raw", "")
        if value.endswith("\n"):
            value = value[:-1]
        return CodeBlock(value=value, lang=lang, meta=meta)

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered", False))
        start = attrs.get("start") or 1
        tight = bool(token.get("tight", True))
        bullet = token.get("bullet")

        items = []
        for child in token.get("children", []):
            checked: Optional[bool] = None
            if child.get("type") == "task_list_item":
                checked = bool((child.get("attrs") or {}).get("checked", False))
            items.append(ListItem(children=self._process_tokens(child.get("children", [])), checked=checked))

        return List(children=items, ordered=ordered, start=start, tight=tight, bullet=bullet)

    def _process_table(self, token: dict[str, Any]) -> Table:
        rows: list[Node] = []
        align: list[Any] = []

        for section in token.get("children", []):
            section_type = section.get("type", "")
            if section_type == "table_head":
                cells = []
                for cell_token in section.get("children", []):
                    align.append((cell_token.get("attrs") or {}).get("align"))
                    cells.append(TableCell(children=self._process_inline_tokens(cell_token.get("children", []))))
                rows.insert(0, TableRow(children=cells))
            elif section_type == "table_body":
                for row_token in section.get("children", []):
                    cells = [
                        TableCell(children=self._process_inline_tokens(cell_token.get("children", [])))
                        for cell_token in row_token.get("children", [])
                    ]
                    rows.append(TableRow(children=cells))

        return Table(children=rows, align=align)

    def _process_footnote_item(self, token: dict[str, Any]) -> FootnoteDefinition:
        attrs = token.get("attrs") or {}
        identifier = str(attrs.get("key") or attrs.get("label") or "")
        return FootnoteDefinition(identifier=identifier, children=self._process_tokens(token.get("children", [])))

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            # Merge adjacent text so dialect syntax split by mistune stays together
            if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
                nodes[-1] = Text(value=nodes[-1].value + node.value)
            else:
                nodes.append(node)
        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Node | None:
        token_type = token.get("type", "")
        attrs = token.get("attrs") or {}
        children = token.get("children", [])

        if token_type == "text":
            return Text(value=token.get("raw", ""))
        elif token_type == "softbreak":
            return Text(value="\n")
        elif token_type == "linebreak":
            return LineBreak()
        elif token_type == "strong":
            return Strong(children=self._process_inline_tokens(children))
        elif token_type == "emphasis":
            return Emphasis(children=self._process_inline_tokens(children))
        elif token_type == "strikethrough":
            return Strikethrough(children=self._process_inline_tokens(children))
        elif token_type == "codespan":
            return Code(value=token.get("raw", ""))
        elif token_type == "link":
            return Link(url=attrs.get("url", ""), children=self._process_inline_tokens(children), title=attrs.get("title"))
        elif token_type == "image":
            alt = "".join(child.get("raw", "") for child in children if isinstance(child, dict))
            return Image(url=attrs.get("url", ""), alt=alt, title=attrs.get("title"))
        elif token_type == "inline_html":
            return HTMLInline(value=token.get("raw", ""))
        elif token_type == "inline_math":
            return MathInline(value=token.get("raw", ""))
        elif token_type == "footnote_ref":
            return FootnoteReference(identifier=str(token.get("raw") or attrs.get("label") or ""))

        logger.debug(f"Skipping unsupported inline token: {token_type}")
        return None


def parse_markdown(text: str, features: Optional[Iterable[str]] = None) -> Document:
    """Parse markdown text with the given optional syntax features."""
    return MarkdownParser(features=features).parse(text)


__all__ = [
    "MarkdownParser",
    "parse_markdown",
    "BASE_PLUGINS",
]
