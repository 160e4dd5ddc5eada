#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/publish.py
"""Prepare a note for output: titles, note links, unpublished notes and assets.

The stage runs once in every ``FULL`` pipeline and a second time, with only
``wikilink_prefix`` set, at the end of a publishing pipeline. Links it
creates are marked with ``data["wikilink"]`` so the second pass can find and
rewrite them, including links created by stages in between.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Union

from notepress.ast.nodes import Document, HashTag, Heading, Image, Link, Node, Text, UserTag, WikiLink, Yaml
from notepress.ast.utils import extract_text
from notepress.constants import HASHTAG_CLASS, USER_TAG_CLASS, WIKI_LINK_CLASS
from notepress.pipeline.stage import TreeStage
from notepress.stages.wikilinks import wikilink_href

if TYPE_CHECKING:
    from notepress.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)


def _is_local_url(url: str) -> bool:
    return bool(url) and not url.startswith(("//", "#")) and ":" not in url.split("/", 1)[0]


class PublishStage(TreeStage):
    """Convert dialect links to plain links and apply publishing rewrites.

    Parameters
    ----------
    insert_title : bool, default False
        Insert the note title as a level 1 heading after the frontmatter
    transform_no_publish : bool, default False
        Replace links to notes with ``published: false`` by their text
    wikilink_prefix : str, optional
        When set, note links point at ``{wikilink_prefix}{note id}``
    assets_prefix : str, optional
        Prefix for local image URLs. Under publishing rules the configured
        prefix is used when this is not given.

    """

    name = "publish"

    def __init__(
        self,
        insert_title: bool = False,
        transform_no_publish: bool = False,
        wikilink_prefix: Optional[str] = None,
        assets_prefix: Optional[str] = None,
    ):
        self.insert_title = insert_title
        self.transform_no_publish = transform_no_publish
        self.wikilink_prefix = wikilink_prefix
        self.assets_prefix = assets_prefix
        self._assets_prefix: Optional[str] = None

    def run(self, tree: Document, context: PipelineContext) -> Document:
        self._assets_prefix = self.assets_prefix
        if self._assets_prefix is None and context.should_apply_publishing_rules:
            self._assets_prefix = context.get_config().get_assets_prefix()
        return super().run(tree, context)

    # ------------------------------------------------------------------
    # Title
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> Document:
        document = self._generic_transform(node)
        if not self.insert_title:
            return document

        title = self._title()
        if title is None:
            return document

        position = 0
        while position < len(document.children) and isinstance(document.children[position], Yaml):
            position += 1
        document.children.insert(position, Heading(level=1, children=[Text(value=title)]))
        return document

    def _title(self) -> Optional[str]:
        title = (self.context.fm or {}).get("title")
        if title:
            return str(title)
        note = self.context.current_note()
        return note.title if note is not None else None

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def visit_wikilink(self, node: WikiLink) -> Node:
        link = Link(
            url=node.data.get("href") or wikilink_href(node.value, node.anchor_header),
            children=[Text(value=node.alias or node.value)],
            data={
                "wikilink": {
                    "fname": node.value,
                    "vault": node.vault_name,
                    "anchor": node.anchor_header,
                    "kind": "wikilink",
                },
                "h_properties": {"class": [WIKI_LINK_CLASS]},
            },
        )
        return self._finish_link(link)

    def visit_hashtag(self, node: HashTag) -> Node:
        return self._finish_link(self._tag_link(node, "hashtag", HASHTAG_CLASS))

    def visit_user_tag(self, node: UserTag) -> Node:
        return self._finish_link(self._tag_link(node, "user_tag", USER_TAG_CLASS))

    def visit_link(self, node: Link) -> Node:
        link = self._generic_transform(node)
        if "wikilink" not in link.data:
            return link
        return self._finish_link(link)

    def _tag_link(self, node: Union[HashTag, UserTag], kind: str, css_class: str) -> Link:
        wiki_opts = self.context.wiki_links_opts
        prefix = wiki_opts.prefix if wiki_opts is not None else None
        return Link(
            url=wikilink_href(node.fname, None, prefix),
            children=[Text(value=node.value)],
            data={
                "wikilink": {"fname": node.fname, "vault": None, "anchor": None, "kind": kind},
                "h_properties": {"class": [css_class]},
            },
        )

    def _finish_link(self, link: Link) -> Node:
        info = link.data["wikilink"]
        note = self.context.find_note(info["fname"], info["vault"]) if self.context.notes else None

        if self.transform_no_publish and note is not None and not note.published:
            self.diagnostic(f"Link to unpublished note {note.fname} replaced with text")
            return Text(value=extract_text(link))

        if self.wikilink_prefix is not None:
            target = note.id if note is not None else info["fname"]
            link.url = wikilink_href(target, info["anchor"], self.wikilink_prefix)
        return link

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def visit_image(self, node: Image) -> Image:
        image = self._generic_transform(node)
        prefix = self._assets_prefix
        if not prefix or image.data.get("assets_prefixed") or not _is_local_url(image.url):
            return image

        path = image.url[2:] if image.url.startswith("./") else image.url.lstrip("/")
        image.url = f"{prefix}/{path}"
        image.data["assets_prefixed"] = True
        return image
