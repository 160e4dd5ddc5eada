#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/api.py
"""Convenience entry points for the common pipeline shapes."""

from __future__ import annotations

import dataclasses
import logging
from typing import Union

from notepress.pipeline.builder import DataInput, PipelineBuilder
from notepress.pipeline.options import Destination, PipelineData, PipelineOptions, ProcFlavor, ProcMode
from notepress.pipeline.runner import Pipeline

logger = logging.getLogger(__name__)

FlavorInput = Union[ProcFlavor, str, None]


def proc_remark_parse(options: PipelineOptions, data: DataInput) -> Pipeline:
    """Build a parse-only pipeline; running it returns the transformed syntax tree.

    ``options.parse_only`` is forced to True.
    """
    options = options.create_updated(parse_only=True)
    return PipelineBuilder().build(options, data)


def proc_remark_parse_no_data(data: DataInput, flavor: FlavorInput = ProcFlavor.REGULAR) -> Pipeline:
    """Build a parse-only ``NO_DATA`` pipeline.

    Only ``dest`` is needed; it defaults to the markdown destination.
    """
    data = PipelineData.coerce(data)
    if data.dest is None:
        data = dataclasses.replace(data, dest=Destination.MARKDOWN)
    return proc_remark_parse(PipelineOptions(mode=ProcMode.NO_DATA, flavor=flavor), data)


def proc_remark_parse_full(data: DataInput, flavor: FlavorInput = ProcFlavor.REGULAR) -> Pipeline:
    """Build a parse-only ``FULL`` pipeline.

    Raises
    ------
    ConfigurationError
        If ``vault``, ``engine``, ``fname`` or ``dest`` is missing

    """
    return proc_remark_parse(PipelineOptions(mode=ProcMode.FULL, flavor=flavor), data)


def proc_remark_full(
    data: DataInput,
    mode: Union[ProcMode, str] = ProcMode.FULL,
    flavor: FlavorInput = ProcFlavor.REGULAR,
) -> Pipeline:
    """Build a pipeline that serializes the transformed tree back to markdown.

    Parameters
    ----------
    data : PipelineData or mapping
        Per-document inputs
    mode : ProcMode, default ProcMode.FULL
        Operating mode
    flavor : ProcFlavor, default ProcFlavor.REGULAR
        Rendering flavor

    Returns
    -------
    Pipeline
        Pipeline whose result is a markdown string

    Examples
    --------
        >>> pipeline = proc_remark_full({"dest": "markdown"}, mode=ProcMode.NO_DATA)
        >>> run(pipeline, "* one\\n* two")
        '- one\\n- two\\n'

    """
    builder = PipelineBuilder()
    pipeline = builder.build(PipelineOptions(mode=mode, flavor=flavor), data)
    pipeline.append(builder.registry.get_stage("remark-stringify"))
    builder.registry.validate_order(pipeline.stage_names)
    return pipeline


def proc_rehype_parse(options: PipelineOptions, data: DataInput) -> Pipeline:
    """Build a rendering pipeline without the serializer.

    ``dest`` is forced to HTML and running the pipeline returns the rendering
    tree.
    """
    options = options.create_updated(parse_only=True)
    return PipelineBuilder().build_rendering(options, data)


def proc_rehype_full(data: DataInput, flavor: FlavorInput = ProcFlavor.REGULAR) -> Pipeline:
    """Build a ``FULL`` rendering pipeline producing an HTML string.

    Raises
    ------
    ConfigurationError
        If ``vault``, ``engine`` or ``fname`` is missing

    """
    return PipelineBuilder().build_rendering(PipelineOptions(mode=ProcMode.FULL, flavor=flavor), data)


__all__ = [
    "proc_remark_full",
    "proc_remark_parse",
    "proc_remark_parse_no_data",
    "proc_remark_parse_full",
    "proc_rehype_parse",
    "proc_rehype_full",
]
