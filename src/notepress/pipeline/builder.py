#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/pipeline/builder.py
"""Stage selection and ordering.

The builder turns :class:`~notepress.pipeline.options.PipelineOptions` and the
caller's :class:`~notepress.pipeline.options.PipelineData` into a
:class:`~notepress.pipeline.runner.Pipeline`. The stage sequence depends only
on the mode, the flavor, the configuration and a few per-document flags, so
building twice from the same inputs yields the same sequence.

Stage order
-----------
Every pipeline starts with the dialect stages::

    frontmatter, abbreviations, list-format, note-refs, block-anchors,
    hashtags, user-tags, extended-image, footnotes, variables,
    backlinks-hover, wikilinks

``FULL`` pipelines then add navigation, preview, publishing, math and diagram
stages; ``IMPORT`` pipelines add math and diagram stages. Rendering pipelines
append the HTML stages and, unless ``parse_only`` is set, the serializer.

"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping, Optional, Union

from notepress.constants import DEFAULT_NOTES_PREFIX
from notepress.exceptions import ContractViolation
from notepress.pipeline.context import (
    PipelineContext,
    create_context,
    populate_context,
    resolve_config,
    resolve_frontmatter,
    resolve_ws_root,
    should_apply_publishing_rules,
    validate_required,
)
from notepress.pipeline.options import Destination, PipelineData, PipelineOptions, ProcFlavor, ProcMode
from notepress.pipeline.runner import Pipeline
from notepress.stages.registry import StageRegistry, stage_registry

logger = logging.getLogger(__name__)

FULL_REQUIRED_FIELDS = ("vault", "engine", "fname", "dest")
IMPORT_REQUIRED_FIELDS = ("vault", "engine", "dest")

DataInput = Union[PipelineData, Mapping[str, Any], None]

# A planned stage: registry name and constructor parameters
StagePlan = tuple[str, dict[str, Any]]


def _coerce_mode(mode: Any) -> ProcMode:
    if isinstance(mode, ProcMode):
        return mode
    try:
        return ProcMode(mode)
    except ValueError as e:
        raise ContractViolation(f"Unknown pipeline mode: {mode!r}", original_error=e) from e


class PipelineBuilder:
    """Build pipelines from options and per-document data.

    Parameters
    ----------
    registry : StageRegistry, optional
        Registry to instantiate stages from (defaults to the global one)

    """

    def __init__(self, registry: Optional[StageRegistry] = None):
        self.registry = registry or stage_registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, options: PipelineOptions, data: DataInput) -> Pipeline:
        """Build the parsing pipeline (no serializer).

        Parameters
        ----------
        options : PipelineOptions
            Mode, flavor and parse-only flag
        data : PipelineData or mapping
            Per-document inputs

        Returns
        -------
        Pipeline
            Pipeline whose stages transform the syntax tree

        Raises
        ------
        ConfigurationError
            If a field required by the mode is missing
        ContractViolation
            If the mode is not a known ProcMode

        """
        data = PipelineData.coerce(data)
        mode = _coerce_mode(options.mode)
        flavor = options.flavor or ProcFlavor.REGULAR

        if mode == ProcMode.FULL:
            validate_required(data, FULL_REQUIRED_FIELDS)
        elif mode == ProcMode.IMPORT:
            validate_required(data, IMPORT_REQUIRED_FIELDS)

        context = create_context(mode, flavor, data)
        plan = self._base_stages(context)

        if mode == ProcMode.FULL:
            self._populate(context, data, with_frontmatter=True)
            plan.extend(self._full_stages(context, data))
        elif mode == ProcMode.IMPORT:
            self._populate(context, data, with_frontmatter=False)
            plan.extend(self._render_feature_stages(context))

        return self._instantiate(plan, context, options)

    def build_rendering(self, options: PipelineOptions, data: DataInput) -> Pipeline:
        """Build the rendering pipeline: parsing stages, HTML stages, serializer.

        ``dest`` is forced to HTML. The serializer is omitted when
        ``options.parse_only`` is set, in which case running the pipeline
        returns the rendering tree.
        """
        data = dataclasses.replace(PipelineData.coerce(data), dest=Destination.HTML)
        pipeline = self.build(options, data)
        context = pipeline.context
        config = context.get_config()
        publishing_rules = context.should_apply_publishing_rules

        plan: list[StagePlan] = [
            ("to-hast", {"allow_dangerous_html": True}),
            ("highlight", {"ignore_missing": True}),
            ("raw", {}),
            ("slug", {}),
        ]
        if config.get_enable_math(publishing_rules):
            plan.append(("katex", {}))
        if publishing_rules:
            plan.append(("autolink-headings", {}))
        if not options.parse_only:
            plan.append(("stringify", {}))

        for name, params in plan:
            pipeline.append(self.registry.get_stage(name, **params))
        self.registry.validate_order(pipeline.stage_names)

        logger.debug(f"Built rendering pipeline: {pipeline.stage_names}")
        return pipeline

    # ------------------------------------------------------------------
    # Stage planning
    # ------------------------------------------------------------------

    def _base_stages(self, context: PipelineContext) -> list[StagePlan]:
        plan: list[StagePlan] = [
            ("frontmatter", {}),
            ("abbreviations", {}),
            ("list-format", {}),
            ("note-refs", {}),
            ("block-anchors", {}),
            ("hashtags", {}),
            ("user-tags", {}),
            ("extended-image", {}),
            ("footnotes", {}),
            ("variables", {}),
            ("backlinks-hover", {"options": context.backlink_hover_opts}),
        ]
        if self._converts_links(context):
            wiki_opts = context.wiki_links_opts
            params: dict[str, Any] = {}
            if wiki_opts is not None:
                params = {"prefix": wiki_opts.prefix, "use_id": wiki_opts.use_id}
            plan.append(("wikilinks", params))
        return plan

    def _full_stages(self, context: PipelineContext, data: PipelineData) -> list[StagePlan]:
        plan: list[StagePlan] = []
        flavor = context.flavor
        config = context.get_config()
        publishing_rules = should_apply_publishing_rules(context.dest, flavor)

        if context.dest == Destination.HTML and self._converts_links(context):
            plan.append(("hierarchies", {}))
            plan.append(("backlinks", {}))

        if flavor in (ProcFlavor.HOVER_PREVIEW, ProcFlavor.BACKLINKS_PANEL_HOVER):
            plan.append(("hover-preview", {}))

        if context.inside_note_ref or flavor == ProcFlavor.BACKLINKS_PANEL_HOVER:
            insert_title = False
        else:
            insert_title = config.get_enable_fm_title(publishing_rules)

        publish_params: dict[str, Any] = {
            "insert_title": insert_title,
            "transform_no_publish": flavor == ProcFlavor.PUBLISHING,
        }
        if context.publish_opts is not None:
            publish_params.update(context.publish_opts.as_params())
        plan.append(("publish", publish_params))

        plan.extend(self._render_feature_stages(context))

        if flavor == ProcFlavor.PUBLISHING:
            assets_prefix = config.get_assets_prefix()
            wikilink_prefix = f"{assets_prefix}/notes/" if assets_prefix else DEFAULT_NOTES_PREFIX
            plan.append(("publish", {"wikilink_prefix": wikilink_prefix}))

        return plan

    def _render_feature_stages(self, context: PipelineContext) -> list[StagePlan]:
        config = context.get_config()
        publishing_rules = context.should_apply_publishing_rules
        plan: list[StagePlan] = []
        if config.get_enable_math(publishing_rules):
            plan.append(("math", {}))
        if config.get_enable_mermaid(publishing_rules):
            plan.append(("mermaid", {}))
        return plan

    @staticmethod
    def _converts_links(context: PipelineContext) -> bool:
        return context.wiki_links_opts is None or context.wiki_links_opts.convert_links is not False

    @staticmethod
    def _populate(context: PipelineContext, data: PipelineData, with_frontmatter: bool) -> None:
        populate_context(
            context,
            data,
            config=resolve_config(data),
            ws_root=resolve_ws_root(data),
            fm=resolve_frontmatter(data) if with_frontmatter else None,
        )

    def _instantiate(self, plan: list[StagePlan], context: PipelineContext, options: PipelineOptions) -> Pipeline:
        names = [name for name, _params in plan]
        self.registry.validate_order(names)
        stages = [self.registry.get_stage(name, **params) for name, params in plan]
        logger.debug(f"Built {context.mode.value} pipeline ({context.flavor.value}): {names}")
        return Pipeline(context=context, stages=stages, options=options)


def build_parsing_pipeline(options: PipelineOptions, data: DataInput) -> Pipeline:
    """Build a pipeline that transforms the syntax tree, without a serializer.

    See :meth:`PipelineBuilder.build`.
    """
    return PipelineBuilder().build(options, data)


def build_rendering_pipeline(options: PipelineOptions, data: DataInput) -> Pipeline:
    """Build a pipeline producing HTML (or the rendering tree when ``parse_only``).

    See :meth:`PipelineBuilder.build_rendering`.
    """
    return PipelineBuilder().build_rendering(options, data)


__all__ = [
    "PipelineBuilder",
    "build_parsing_pipeline",
    "build_rendering_pipeline",
    "FULL_REQUIRED_FIELDS",
    "IMPORT_REQUIRED_FIELDS",
]
