#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/footnotes.py
"""Number footnotes and collect their definitions at the end of the note."""

from __future__ import annotations

from typing import TYPE_CHECKING

from notepress.ast.nodes import Document, Extension, FootnoteDefinition, FootnoteReference, Node
from notepress.ast.utils import walk
from notepress.constants import FOOTNOTES_CLASS
from notepress.pipeline.stage import TreeStage, is_processed

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext


class FootnotesStage(TreeStage):
    """Order footnote definitions by first reference.

    References get a 1-based ``data["index"]``. Definitions are moved into a
    ``footnotes`` section at the end of the document, in the order they are
    first referenced; definitions that are never referenced follow. A
    reference without a definition is recorded as a diagnostic.
    """

    name = "footnotes"
    syntax = frozenset({"footnotes"})

    def __init__(self) -> None:
        self.order: dict[str, int] = {}
        self.definitions: dict[str, FootnoteDefinition] = {}

    def run(self, tree: Document, context: PipelineContext) -> Document:
        self.order = {}
        self.definitions = {}
        for node in walk(tree, prune=is_processed):
            if isinstance(node, FootnoteReference) and node.identifier not in self.order:
                self.order[node.identifier] = len(self.order) + 1
        return super().run(tree, context)

    def visit_footnote_reference(self, node: FootnoteReference) -> FootnoteReference:
        reference = self._generic_transform(node)
        reference.data["index"] = self.order[node.identifier]
        return reference

    def visit_footnote_definition(self, node: FootnoteDefinition) -> None:
        self.definitions[node.identifier] = self._generic_transform(node)
        return None

    def visit_document(self, node: Document) -> Document:
        document = self._generic_transform(node)

        for identifier in self.order:
            if identifier not in self.definitions:
                self.diagnostic(f"Footnote reference [^{identifier}] has no definition")

        if not self.definitions:
            return document

        ordered: list[Node] = []
        for identifier, index in self.order.items():
            definition = self.definitions.pop(identifier, None)
            if definition is not None:
                definition.data["index"] = index
                ordered.append(definition)
        ordered.extend(self.definitions.values())

        section = Extension(
            kind="footnotes",
            children=[Extension(kind="footnote_list", children=ordered, data={"h_name": "ol"})],
            data={"h_name": "section", "h_properties": {"class": [FOOTNOTES_CLASS]}},
        )
        document.children.append(section)
        return document
