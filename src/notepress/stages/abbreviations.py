#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/abbreviations.py
"""Abbreviation definitions and their occurrences.

A definition is a line of the form ``*[HTML]: Hyper Text Markup Language``.
Definition lines are removed from the document, and every whole-word
occurrence of a defined abbreviation is wrapped in an :class:`Abbr` node.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from notepress.ast.nodes import Abbr, Document, Paragraph, Text
from notepress.ast.transforms import TextPatternTransformer, TransformResult
from notepress.ast.utils import find_all
from notepress.pipeline.stage import TreeStage

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext

_DEFINITION_PATTERN = re.compile(r"^\*\[([^\]]+)\]:[ \t]*(.*?)[ \t]*$")


def _split_definitions(value: str) -> tuple[dict[str, str], list[str]]:
    definitions: dict[str, str] = {}
    remaining: list[str] = []
    for line in value.split("\n"):
        match = _DEFINITION_PATTERN.match(line)
        if match:
            definitions[match.group(1).strip()] = match.group(2)
        else:
            remaining.append(line)
    return definitions, remaining


def _paragraph_text(node: Paragraph) -> Optional[str]:
    if node.children and all(isinstance(child, Text) for child in node.children):
        return "".join(child.value for child in node.children)  # type: ignore[attr-defined]
    return None


class AbbreviationsStage(TreeStage, TextPatternTransformer):
    """Collect ``*[ABBR]: expansion`` definitions and mark their occurrences."""

    name = "abbreviations"

    def __init__(self) -> None:
        self.definitions: dict[str, str] = {}
        self.pattern = None

    def run(self, tree: Document, context: PipelineContext) -> Document:
        self.definitions = {}
        for paragraph in find_all(tree, Paragraph):
            text = _paragraph_text(paragraph)
            if text is not None:
                self.definitions.update(_split_definitions(text)[0])

        # Longest first so "HTML5" wins over "HTML"
        names = sorted(self.definitions, key=len, reverse=True)
        self.pattern = re.compile(r"(?<!\w)(" + "|".join(re.escape(n) for n in names) + r")(?!\w)") if names else None
        return super().run(tree, context)

    def visit_paragraph(self, node: Paragraph) -> TransformResult:
        text = _paragraph_text(node)
        if text is None:
            return self._generic_transform(node)

        definitions, remaining = _split_definitions(text)
        if not definitions:
            return self._generic_transform(node)

        body = "\n".join(remaining).strip("\n")
        if not body:
            return None
        return self._generic_transform(Paragraph(children=[Text(value=body)], data=dict(node.data)))

    def replace_match(self, match: re.Match[str]) -> TransformResult:
        abbr = match.group(1)
        return Abbr(value=abbr, title=self.definitions.get(abbr, ""))
