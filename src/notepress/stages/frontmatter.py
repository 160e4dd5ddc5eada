#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/frontmatter.py
"""Parse the YAML frontmatter block of a note."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import yaml

from notepress.ast.nodes import Document, Yaml
from notepress.pipeline.stage import TreeStage

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)


class FrontmatterStage(TreeStage):
    """Load the ``Yaml`` node into ``document.data["frontmatter"]``.

    When the context has no frontmatter variables yet (a pipeline without
    data), the parsed mapping also becomes ``context.fm``. Invalid YAML is
    recorded as a diagnostic and leaves the document without frontmatter.
    """

    name = "frontmatter"
    syntax = frozenset({"frontmatter"})

    def __init__(self) -> None:
        self._frontmatter: Optional[dict[str, Any]] = None

    def run(self, tree: Document, context: PipelineContext) -> Document:
        self._frontmatter = None
        return super().run(tree, context)

    def visit_document(self, node: Document) -> Document:
        document = self._generic_transform(node)
        if self._frontmatter is not None:
            document.data["frontmatter"] = self._frontmatter
            if self.context.fm is None:
                self.context.fm = dict(self._frontmatter)
        return document

    def visit_yaml(self, node: Yaml) -> Yaml:
        try:
            loaded = yaml.safe_load(node.value) if node.value.strip() else {}
        except yaml.YAMLError as e:
            self.diagnostic(f"Invalid frontmatter: {e}")
            return self._generic_transform(node)

        if not isinstance(loaded, dict):
            self.diagnostic(f"Frontmatter must be a mapping, got {type(loaded).__name__}")
        else:
            self._frontmatter = loaded
        return self._generic_transform(node)
