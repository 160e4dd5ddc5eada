#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/pipeline/stage.py
"""Base classes for pipeline stages.

A stage takes the current tree and the shared context and returns the next
tree. Three kinds exist, matching the three shapes a tree passes through:

- :class:`TreeStage` rewrites the syntax tree (``Document -> Document``)
- :class:`RenderingStage` rewrites the rendering tree (``Root -> Root``);
  the conversion stage ``to-hast`` is the one that changes shape
- :class:`SerializerStage` turns a tree into output text

Stages declare the parser features they depend on in ``syntax`` so the parser
can be configured for exactly the stages in a pipeline.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from notepress.ast.nodes import Document, Node
from notepress.ast.transforms import NodeTransformer
from notepress.exceptions import StageError

if TYPE_CHECKING:
    from notepress.hast.nodes import Root
    from notepress.pipeline.context import PipelineContext


def is_processed(node: Node) -> bool:
    """Return True for content already run through a nested pipeline."""
    return bool(node.data.get("processed"))


class Stage(ABC):
    """Base class for all stages.

    Attributes
    ----------
    name : str
        Registry name, set on the class
    syntax : frozenset of str
        Parser features the stage needs (``"frontmatter"``, ``"math"``,
        ``"footnotes"``)

    """

    name: ClassVar[str] = ""
    syntax: ClassVar[frozenset[str]] = frozenset()

    @abstractmethod
    def run(self, tree: Any, context: PipelineContext) -> Any:
        """Process ``tree`` and return the result."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class TreeStage(Stage, NodeTransformer):
    """Stage that rewrites the syntax tree with ``visit_*`` methods.

    ``self.context`` is set for the duration of :meth:`run`. Subtrees marked
    as processed (expanded note references) are copied without being visited.
    """

    context: PipelineContext

    def run(self, tree: Document, context: PipelineContext) -> Document:
        """Transform ``tree`` and check that a document comes back."""
        self.context = context
        result = self.transform(tree)
        if not isinstance(result, Document):
            raise StageError(
                f"Stage {self.name} must return a Document, got {type(result).__name__}",
                stage_name=self.name,
            )
        return result

    def generic_visit(self, node: Node) -> Any:
        if is_processed(node):
            return copy.deepcopy(node)
        return super().generic_visit(node)

    def diagnostic(self, message: str) -> None:
        """Record a non-fatal problem against this stage."""
        self.context.add_diagnostic(message, stage=self.name)


class RenderingStage(Stage):
    """Stage that operates on the rendering tree."""

    @abstractmethod
    def run(self, tree: Root, context: PipelineContext) -> Root:
        """Process the rendering tree and return it."""


class SerializerStage(Stage):
    """Final stage producing output text."""

    @abstractmethod
    def run(self, tree: Any, context: PipelineContext) -> str:
        """Serialize ``tree``."""


__all__ = [
    "is_processed",
    "Stage",
    "TreeStage",
    "RenderingStage",
    "SerializerStage",
]
