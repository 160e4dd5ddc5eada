#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/rendering/headings.py
"""Heading ids and heading anchor links."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from notepress.constants import ANCHOR_HEADING_PROPERTIES, HEADING_TAGS
from notepress.hast.nodes import Element, Root, Text, iter_elements, text_content
from notepress.pipeline.stage import RenderingStage
from notepress.utils.text import slugify

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext


class SlugStage(RenderingStage):
    """Give every heading without an ``id`` a unique slug of its text."""

    name = "slug"

    def run(self, tree: Root, context: PipelineContext) -> Root:
        seen: dict[str, int] = {}
        headings = list(iter_elements(tree, HEADING_TAGS))
        for heading in headings:
            if heading.properties.get("id"):
                seen.setdefault(str(heading.properties["id"]), 0)
        for heading in headings:
            if not heading.properties.get("id"):
                heading.properties["id"] = slugify(text_content(heading), seen_slugs=seen)
        return tree


class AutolinkHeadingsStage(RenderingStage):
    """Prepend a hidden ``a.anchor-heading`` link to every heading with an id."""

    name = "autolink-headings"

    def run(self, tree: Root, context: PipelineContext) -> Root:
        for heading in iter_elements(tree, HEADING_TAGS):
            heading_id = heading.properties.get("id")
            if not heading_id:
                continue
            properties = copy.deepcopy(ANCHOR_HEADING_PROPERTIES)
            properties["href"] = f"#{heading_id}"
            heading.children.insert(0, Element(tag_name="a", properties=properties, children=[Text(value="")]))
        return tree


__all__ = ["SlugStage", "AutolinkHeadingsStage"]
