#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/_builtin_metadata.py
"""Registry entries for the built-in stages."""

from __future__ import annotations

from notepress.constants import (
    DEFAULT_HASHTAG_PREFIX,
    DEFAULT_LIST_BULLET,
    DEFAULT_LIST_ITEM_INDENT,
    DEFAULT_MAX_NOTE_REF_DEPTH,
    DEFAULT_USER_TAG_PREFIX,
)
from notepress.pipeline.options import BacklinkHoverOptions
from notepress.rendering.headings import AutolinkHeadingsStage, SlugStage
from notepress.rendering.highlight import HighlightStage
from notepress.rendering.katex import KatexStage
from notepress.rendering.raw import RawStage
from notepress.rendering.to_hast import ToHastStage
from notepress.stages.abbreviations import AbbreviationsStage
from notepress.stages.backlinks_hover import BacklinksHoverStage
from notepress.stages.block_anchors import BlockAnchorsStage
from notepress.stages.extended_image import ExtendedImageStage
from notepress.stages.footnotes import FootnotesStage
from notepress.stages.frontmatter import FrontmatterStage
from notepress.stages.hover_preview import HoverPreviewStage
from notepress.stages.list_format import ListFormatStage
from notepress.stages.math import MathStage
from notepress.stages.mermaid import MermaidStage
from notepress.stages.metadata import ParameterSpec, StageMetadata
from notepress.stages.navigation import BacklinksStage, HierarchiesStage
from notepress.stages.note_refs import NoteRefsStage
from notepress.stages.publish import PublishStage
from notepress.stages.serializers import RemarkStringifyStage, StringifyStage
from notepress.stages.tags import HashtagsStage, UserTagsStage
from notepress.stages.variables import VariablesStage
from notepress.stages.wikilinks import WikiLinksStage


def _positive(value: int) -> bool:
    if value < 1:
        raise ValueError(f"must be at least 1, got {value}")
    return True


_BULLET = ParameterSpec(type=str, default=DEFAULT_LIST_BULLET, choices=["-", "*", "+"], help="Bullet character")
_LIST_ITEM_INDENT = ParameterSpec(
    type=int, default=DEFAULT_LIST_ITEM_INDENT, validator=_positive, help="Spaces between a list marker and its text"
)
_ALLOW_DANGEROUS_HTML = ParameterSpec(type=bool, default=True, help="Keep raw HTML in the output")

BUILTIN_STAGES: list[StageMetadata] = [
    # Dialect
    StageMetadata(
        name="frontmatter",
        description="Parse the YAML frontmatter block",
        stage_class=FrontmatterStage,
        tags=["dialect", "metadata"],
    ),
    StageMetadata(
        name="abbreviations",
        description="Expand *[ABBR]: title definitions into abbreviation nodes",
        stage_class=AbbreviationsStage,
        tags=["dialect"],
    ),
    StageMetadata(
        name="list-format",
        description="Normalize list bullets and marker indentation",
        stage_class=ListFormatStage,
        parameters={"bullet": _BULLET, "list_item_indent": _LIST_ITEM_INDENT},
        tags=["dialect", "format"],
    ),
    StageMetadata(
        name="note-refs",
        description="Expand ![[note#section]] references with the referenced content",
        stage_class=NoteRefsStage,
        parameters={
            "max_depth": ParameterSpec(
                type=int,
                default=DEFAULT_MAX_NOTE_REF_DEPTH,
                validator=_positive,
                help="Nesting depth at which references stop expanding",
            )
        },
        tags=["dialect", "links"],
    ),
    StageMetadata(
        name="block-anchors",
        description="Recognize ^anchor markers at the end of blocks",
        stage_class=BlockAnchorsStage,
        tags=["dialect", "links"],
    ),
    StageMetadata(
        name="hashtags",
        description="Recognize #tag references",
        stage_class=HashtagsStage,
        parameters={"prefix": ParameterSpec(type=str, default=DEFAULT_HASHTAG_PREFIX, help="Tag note prefix")},
        tags=["dialect", "links"],
    ),
    StageMetadata(
        name="user-tags",
        description="Recognize @user references",
        stage_class=UserTagsStage,
        parameters={"prefix": ParameterSpec(type=str, default=DEFAULT_USER_TAG_PREFIX, help="User note prefix")},
        tags=["dialect", "links"],
    ),
    StageMetadata(
        name="extended-image",
        description="Attach {key: value} style properties to images",
        stage_class=ExtendedImageStage,
        tags=["dialect"],
    ),
    StageMetadata(
        name="footnotes",
        description="Number footnote references and collect definitions",
        stage_class=FootnotesStage,
        tags=["dialect"],
    ),
    StageMetadata(
        name="variables",
        description="Substitute {{fm.key}} with frontmatter values",
        stage_class=VariablesStage,
        run_after=["frontmatter"],
        tags=["dialect", "metadata"],
    ),
    StageMetadata(
        name="backlinks-hover",
        description="Highlight the hovered link text",
        stage_class=BacklinksHoverStage,
        parameters={
            "options": ParameterSpec(
                type=BacklinkHoverOptions, allow_none=True, help="Hovered link; no highlighting when None"
            )
        },
        tags=["dialect", "preview"],
    ),
    StageMetadata(
        name="wikilinks",
        description="Recognize [[alias|note#anchor]] links",
        stage_class=WikiLinksStage,
        parameters={
            "prefix": ParameterSpec(type=str, allow_none=True, help="Prefix for link targets"),
            "use_id": ParameterSpec(type=bool, default=False, help="Link to note ids instead of fnames"),
        },
        tags=["dialect", "links"],
    ),
    # Engine-aware
    StageMetadata(
        name="hierarchies",
        description="Append a list of child notes",
        stage_class=HierarchiesStage,
        tags=["navigation"],
    ),
    StageMetadata(
        name="backlinks",
        description="Append a list of notes linking to this one",
        stage_class=BacklinksStage,
        tags=["navigation"],
    ),
    StageMetadata(
        name="hover-preview",
        description="Resolve relative image URLs to file URIs",
        stage_class=HoverPreviewStage,
        tags=["preview"],
    ),
    StageMetadata(
        name="publish",
        description="Turn note links into plain links and apply publishing rules",
        stage_class=PublishStage,
        parameters={
            "insert_title": ParameterSpec(type=bool, default=False, help="Insert the note title as a heading"),
            "transform_no_publish": ParameterSpec(
                type=bool, default=False, help="Replace links to unpublished notes with text"
            ),
            "wikilink_prefix": ParameterSpec(type=str, allow_none=True, help="Path prefix for note links"),
            "assets_prefix": ParameterSpec(type=str, allow_none=True, help="Path prefix for local images"),
        },
        run_after=["hierarchies", "backlinks"],
        tags=["links", "publishing"],
    ),
    StageMetadata(
        name="math",
        description="Mark math nodes for typesetting",
        stage_class=MathStage,
        tags=["render"],
    ),
    StageMetadata(
        name="mermaid",
        description="Turn mermaid code blocks into diagram containers",
        stage_class=MermaidStage,
        tags=["render"],
    ),
    # Rendering tree
    StageMetadata(
        name="to-hast",
        description="Convert the syntax tree to the rendering tree",
        stage_class=ToHastStage,
        parameters={"allow_dangerous_html": _ALLOW_DANGEROUS_HTML},
        tags=["html"],
    ),
    StageMetadata(
        name="highlight",
        description="Highlight fenced code with Pygments",
        stage_class=HighlightStage,
        parameters={
            "ignore_missing": ParameterSpec(type=bool, default=False, help="Skip code in unknown languages")
        },
        run_after=["to-hast"],
        tags=["html"],
    ),
    StageMetadata(
        name="raw",
        description="Parse raw HTML fragments into elements",
        stage_class=RawStage,
        run_after=["to-hast"],
        tags=["html"],
    ),
    StageMetadata(
        name="slug",
        description="Give headings unique ids",
        stage_class=SlugStage,
        run_after=["to-hast", "raw"],
        tags=["html"],
    ),
    StageMetadata(
        name="katex",
        description="Wrap math in typesetting delimiters",
        stage_class=KatexStage,
        run_after=["to-hast"],
        tags=["html"],
    ),
    StageMetadata(
        name="autolink-headings",
        description="Prepend anchor links to headings",
        stage_class=AutolinkHeadingsStage,
        run_after=["slug"],
        tags=["html"],
    ),
    # Serializers
    StageMetadata(
        name="stringify",
        description="Serialize the rendering tree to HTML",
        stage_class=StringifyStage,
        parameters={"allow_dangerous_html": _ALLOW_DANGEROUS_HTML},
        run_after=["to-hast"],
        tags=["serializer", "html"],
    ),
    StageMetadata(
        name="remark-stringify",
        description="Serialize the syntax tree to markdown",
        stage_class=RemarkStringifyStage,
        parameters={"bullet": _BULLET, "list_item_indent": _LIST_ITEM_INDENT},
        tags=["serializer", "markdown"],
    ),
]

__all__ = ["BUILTIN_STAGES"]
