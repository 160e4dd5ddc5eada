#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/pipeline/runner.py
"""Pipeline execution.

A :class:`Pipeline` is an ordered list of stage instances bound to one
:class:`~notepress.pipeline.context.PipelineContext`. Running it parses the
source text with the parser features its stages ask for, then hands the tree
from stage to stage. The return type depends on the last stage: a syntax tree
for parse-only markdown pipelines, a rendering tree for parse-only HTML
pipelines, and a string when a serializer is attached.

Examples
--------
    >>> pipeline = build_rendering_pipeline(PipelineOptions(mode=ProcMode.NO_DATA), {"dest": Destination.HTML})
    >>> html = run(pipeline, "# Hello [[world]]")
    >>> pipeline.diagnostics
    []

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from notepress.ast.nodes import Document
from notepress.parsers.markdown import MarkdownParser
from notepress.pipeline.context import Diagnostic, PipelineContext
from notepress.pipeline.stage import SerializerStage, Stage
from notepress.utils.decorators import debug_timer

if TYPE_CHECKING:
    from notepress.hast.nodes import Root
    from notepress.pipeline.options import PipelineOptions

logger = logging.getLogger(__name__)

PipelineResult = Union[Document, "Root", str]


class Pipeline:
    """Ordered stages sharing one context.

    Parameters
    ----------
    context : PipelineContext
        Context handed to every stage
    stages : list of Stage, optional
        Stages in execution order
    options : PipelineOptions, optional
        Options the pipeline was built from

    Notes
    -----
    The stage list is fixed once the builder returns the pipeline; a
    pipeline is not reusable across contexts.

    """

    def __init__(
        self,
        context: PipelineContext,
        stages: Optional[list[Stage]] = None,
        options: Optional[PipelineOptions] = None,
    ):
        self.context = context
        self.options = options
        self._stages: list[Stage] = list(stages or [])

    @property
    def stages(self) -> tuple[Stage, ...]:
        """Stage instances in execution order."""
        return tuple(self._stages)

    @property
    def stage_names(self) -> list[str]:
        """Stage names in execution order."""
        return [stage.name for stage in self._stages]

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Non-fatal problems recorded so far, in order."""
        return self.context.diagnostics

    @property
    def syntax_features(self) -> frozenset[str]:
        """Parser features requested by the stages."""
        features: set[str] = set()
        for stage in self._stages:
            features.update(stage.syntax)
        return frozenset(features)

    @property
    def has_serializer(self) -> bool:
        """True when the last stage produces output text."""
        return bool(self._stages) and isinstance(self._stages[-1], SerializerStage)

    def append(self, stage: Stage) -> None:
        """Add a stage at the end. Used while the pipeline is being built."""
        self._stages.append(stage)

    def parse(self, text: str) -> Document:
        """Parse ``text`` with the features the stages need."""
        with debug_timer(logger, "Parsing"):
            return MarkdownParser(features=self.syntax_features).parse(text)

    def run_tree(self, tree: Any) -> Any:
        """Run every stage over an already parsed tree.

        Raises
        ------
        NotepressError
            Whatever a failing stage raised, after logging it

        """
        result = tree
        logger.debug(f"Running {len(self._stages)} stage(s): {', '.join(self.stage_names)}")

        for stage in self._stages:
            self.context.current_stage = stage.name
            logger.debug(f"Applying stage: {stage.name}")
            try:
                with debug_timer(logger, f"Stage '{stage.name}'"):
                    result = stage.run(result, self.context)
            except Exception as e:
                logger.error(f"Stage {stage.name} failed: {e}", exc_info=True)
                raise
            finally:
                self.context.current_stage = None

        return result

    def process(self, text: str) -> Any:
        """Parse ``text`` and run every stage over it."""
        return self.run_tree(self.parse(text))

    def __repr__(self) -> str:
        return f"Pipeline(mode={self.context.mode.value}, stages={self.stage_names})"


def run(pipeline: Pipeline, text: str) -> PipelineResult:
    """Run ``pipeline`` over markdown ``text``.

    Parameters
    ----------
    pipeline : Pipeline
        Pipeline from one of the builders
    text : str
        Markdown source

    Returns
    -------
    Document, Root or str
        Syntax tree, rendering tree or serialized output, depending on the
        pipeline's last stage

    """
    return pipeline.process(text)


__all__ = [
    "Pipeline",
    "PipelineResult",
    "run",
]
