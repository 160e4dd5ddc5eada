#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/note_refs.py
"""Note references (``![[fname]]``, ``![[fname#heading]]``, ``![[fname#^block]]``).

A paragraph consisting only of references is replaced by one
:class:`NoteRef` per reference. When notes are available, the referenced
note is run through a nested pipeline and its content (or the requested
section of it) becomes the reference's children. The nested content is
marked as processed, so the stages of the outer pipeline leave it alone.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from notepress.ast.nodes import BlockAnchor, Document, Extension, Heading, Node, NoteRef, Paragraph, Text, WikiLink, Yaml
from notepress.ast.transforms import TransformResult
from notepress.ast.utils import extract_text, walk
from notepress.constants import (
    DEFAULT_MAX_NOTE_REF_DEPTH,
    NOTE_REF_BODY_CLASS,
    NOTE_REF_CLASS,
    NOTE_REF_ERROR_CLASS,
    NOTE_REF_TITLE_CLASS,
    VAULT_LINK_SCHEME,
)
from notepress.engine import NoteProps
from notepress.pipeline.options import PipelineData, PipelineOptions, ProcMode
from notepress.pipeline.stage import TreeStage
from notepress.stages.wikilinks import wikilink_href
from notepress.utils.text import slugify

logger = logging.getLogger(__name__)

NOTE_REF_PATTERN = re.compile(r"!\[\[(?:dendron://([^/\]]+)/)?([^\]#|]+)(?:#([^\]|]+))?\]\]")


def format_note_ref(node: NoteRef) -> str:
    """Return the markdown source of a reference."""
    vault = f"{VAULT_LINK_SCHEME}{node.vault_name}/" if node.vault_name else ""
    anchor = f"#{node.anchor}" if node.anchor else ""
    return f"![[{vault}{node.value}{anchor}]]"


def extract_section(document: Document, anchor: str) -> Optional[list[Node]]:
    """Return the part of ``document`` that ``anchor`` points at.

    Parameters
    ----------
    document : Document
        Processed tree of the referenced note
    anchor : str
        ``^block-id`` for the top-level block holding that block anchor, or
        heading text for the heading and everything up to the next heading
        of the same or a higher level

    Returns
    -------
    list of Node or None
        The section, or None when the anchor is not found

    """
    children = document.children
    if anchor.startswith("^"):
        block_id = anchor[1:]
        for child in children:
            if any(isinstance(node, BlockAnchor) and node.value == block_id for node in walk(child)):
                return [child]
        return None

    wanted = slugify(anchor)
    for index, child in enumerate(children):
        if isinstance(child, Heading) and slugify(extract_text(child)) == wanted:
            section: list[Node] = [child]
            for following in children[index + 1 :]:
                if isinstance(following, Heading) and following.level <= child.level:
                    break
                section.append(following)
            return section
    return None


class NoteRefsStage(TreeStage):
    """Replace reference-only paragraphs with expanded :class:`NoteRef` nodes.

    Parameters
    ----------
    max_depth : int, default 3
        References nested deeper than this are not expanded

    """

    name = "note-refs"

    def __init__(self, max_depth: int = DEFAULT_MAX_NOTE_REF_DEPTH):
        self.max_depth = max_depth

    def visit_paragraph(self, node: Paragraph) -> TransformResult:
        if not node.children or not all(isinstance(child, Text) for child in node.children):
            return self._generic_transform(node)

        text = "".join(child.value for child in node.children).strip()  # type: ignore[attr-defined]
        matches = list(NOTE_REF_PATTERN.finditer(text))
        if not matches or NOTE_REF_PATTERN.sub("", text).strip():
            return self._generic_transform(node)

        return [self._build_ref(match) for match in matches]

    def _build_ref(self, match: re.Match[str]) -> NoteRef:
        vault_name, fname, anchor = match.groups()
        fname = fname.strip()
        anchor = anchor.strip() if anchor else None
        ref = NoteRef(
            value=fname,
            anchor=anchor,
            vault_name=vault_name,
            data={"h_name": "div", "h_properties": {"class": [NOTE_REF_CLASS]}},
        )

        if not self.context.notes:
            return ref

        if self.context.note_ref_level >= self.max_depth:
            return self._error(ref, f"Too many nested note references at {fname} (max depth {self.max_depth})")

        note = self.context.find_note(fname, vault_name)
        if note is None:
            return self._error(ref, f"Referenced note not found: {fname}")

        content = self._expand(note)
        body = [child for child in content.children if not isinstance(child, Yaml)]
        if anchor:
            section = extract_section(content, anchor)
            if section is None:
                return self._error(ref, f"Anchor #{anchor} not found in {fname}")
            body = section

        children: list[Node] = []
        if self.context.get_config().enable_pretty_refs:
            children.append(self._title(note, anchor))
        children.append(
            Extension(
                kind="note_ref_content",
                children=body,
                data={"processed": True, "h_name": "div", "h_properties": {"class": [NOTE_REF_BODY_CLASS]}},
            )
        )
        ref.children = children
        return ref

    def _expand(self, note: NoteProps) -> Document:
        """Run the referenced note's body through a nested pipeline."""
        from notepress.pipeline.builder import build_parsing_pipeline

        context = self.context
        full = context.engine is not None and context.dest is not None
        data = PipelineData(
            dest=context.dest,
            fname=note.fname,
            vault=note.vault,
            engine=context.engine,
            config=context.config,
            ws_root=context.ws_root,
            notes=context.notes,
            fm=None if full else {**note.custom, "id": note.id, "title": note.title, "desc": note.desc},
            note_ref_level=context.note_ref_level + 1,
            inside_note_ref=True,
            diagnostics=context.diagnostics,
            wiki_links_opts=context.wiki_links_opts,
        )
        options = PipelineOptions(mode=ProcMode.FULL if full else ProcMode.NO_DATA, flavor=context.flavor, parse_only=True)
        logger.debug(f"Expanding note reference {note.fname} at level {data.note_ref_level}")
        return build_parsing_pipeline(options, data).process(note.body)

    def _title(self, note: NoteProps, anchor: Optional[str]) -> Extension:
        wiki_opts = self.context.wiki_links_opts
        prefix = wiki_opts.prefix if wiki_opts is not None else None
        link = WikiLink(
            value=note.fname,
            alias=note.title,
            anchor_header=anchor,
            vault_name=note.vault.name,
            data={"href": wikilink_href(note.fname, anchor, prefix)},
        )
        return Extension(
            kind="note_ref_title",
            children=[link],
            data={"h_name": "div", "h_properties": {"class": [NOTE_REF_TITLE_CLASS]}},
        )

    def _error(self, ref: NoteRef, message: str) -> NoteRef:
        self.diagnostic(message)
        ref.data["error"] = message
        ref.data["h_properties"] = {"class": [NOTE_REF_CLASS, NOTE_REF_ERROR_CLASS]}
        ref.children = [Paragraph(children=[Text(value=message)])]
        return ref
