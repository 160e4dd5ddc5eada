#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/rendering/highlight.py
"""Syntax highlighting of fenced code with Pygments.

The highlighted code stays in the rendering tree: every token becomes a
``span`` carrying Pygments' short CSS class (``k`` for keywords, ``s`` for
strings and so on), so any Pygments style sheet applies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from notepress.constants import DEPS_HIGHLIGHT, HIGHLIGHT_CLASS
from notepress.exceptions import RenderingError
from notepress.hast.nodes import Element, HastNode, Root, Text, iter_elements, text_content
from notepress.pipeline.stage import RenderingStage
from notepress.utils.decorators import requires_dependencies

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)

# Languages rendered by other stages or by the client
SKIPPED_LANGUAGES = frozenset({"math", "mermaid"})


def code_language(code: Element) -> Optional[str]:
    """Return the language named by a ``language-*`` class, if any."""
    for name in code.class_list():
        if name.startswith("language-"):
            return name[len("language-") :]
    return None


def _token_class(token_type: Any) -> str:
    from pygments.token import STANDARD_TYPES

    while token_type not in STANDARD_TYPES:
        token_type = token_type.parent
    return STANDARD_TYPES[token_type]


def highlight_tokens(tokens: Iterable[tuple[Any, str]]) -> list[HastNode]:
    """Turn Pygments tokens into spans, merging neighbours of the same class."""
    nodes: list[HastNode] = []
    last_class: Optional[str] = None
    for token_type, value in tokens:
        if not value:
            continue
        css_class = _token_class(token_type)
        if nodes and css_class == last_class:
            tail = nodes[-1]
            target = tail.children[0] if isinstance(tail, Element) else tail
            target.value += value  # type: ignore[union-attr]
            continue
        if css_class:
            nodes.append(Element(tag_name="span", properties={"class": [css_class]}, children=[Text(value=value)]))
        else:
            nodes.append(Text(value=value))
        last_class = css_class
    return nodes


class HighlightStage(RenderingStage):
    """Highlight ``pre > code.language-*`` blocks.

    Parameters
    ----------
    ignore_missing : bool, default False
        Leave code in a language Pygments does not know as it is. When False,
        an unknown language raises RenderingError.

    """

    name = "highlight"

    def __init__(self, ignore_missing: bool = False):
        self.ignore_missing = ignore_missing

    @requires_dependencies("highlight", DEPS_HIGHLIGHT)
    def run(self, tree: Root, context: PipelineContext) -> Root:
        from pygments import lex
        from pygments.lexers import get_lexer_by_name
        from pygments.util import ClassNotFound

        for pre in iter_elements(tree, {"pre"}):
            code = next((child for child in pre.children if isinstance(child, Element) and child.tag_name == "code"), None)
            if code is None:
                continue
            language = code_language(code)
            if not language or language in SKIPPED_LANGUAGES:
                continue

            try:
                lexer = get_lexer_by_name(language, stripnl=False, ensurenl=False)
            except ClassNotFound as e:
                if self.ignore_missing:
                    logger.debug(f"No lexer for language '{language}', leaving code unhighlighted")
                    continue
                raise RenderingError(
                    f"Unknown language `{language}` is not registered", rendering_stage=self.name, original_error=e
                ) from e

            code.children = highlight_tokens(lex(text_content(code), lexer))
            code.properties["class"] = [*code.class_list(), HIGHLIGHT_CLASS]
        return tree


__all__ = ["HighlightStage", "code_language", "highlight_tokens"]
