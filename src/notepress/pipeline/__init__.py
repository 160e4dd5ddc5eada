#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/pipeline/__init__.py
"""Pipeline construction and execution.

- options: modes, flavors, destinations and per-document input data
- context: the shared state stages read and write
- stage: base classes for stages
- builder: stage selection and ordering
- runner: the Pipeline object and ``run``
"""

from __future__ import annotations

from notepress.pipeline.builder import PipelineBuilder, build_parsing_pipeline, build_rendering_pipeline
from notepress.pipeline.context import Diagnostic, PipelineContext, should_apply_publishing_rules
from notepress.pipeline.options import (
    BacklinkHoverOptions,
    Destination,
    PipelineData,
    PipelineOptions,
    ProcFlavor,
    ProcMode,
    PublishOptions,
    WikiLinksOptions,
)
from notepress.pipeline.runner import Pipeline, run
from notepress.pipeline.stage import RenderingStage, SerializerStage, Stage, TreeStage

__all__ = [
    "PipelineBuilder",
    "build_parsing_pipeline",
    "build_rendering_pipeline",
    "Diagnostic",
    "PipelineContext",
    "should_apply_publishing_rules",
    "BacklinkHoverOptions",
    "Destination",
    "PipelineData",
    "PipelineOptions",
    "ProcFlavor",
    "ProcMode",
    "PublishOptions",
    "WikiLinksOptions",
    "Pipeline",
    "run",
    "Stage",
    "TreeStage",
    "RenderingStage",
    "SerializerStage",
]
