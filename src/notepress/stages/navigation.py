#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/navigation.py
"""Navigation sections appended to a note: child notes and backlinks."""

from __future__ import annotations

import logging
from abc import abstractmethod

from notepress.ast.nodes import Document, Heading, List, ListItem, Paragraph, Text, WikiLink
from notepress.engine import NoteProps
from notepress.pipeline.context import PipelineContext
from notepress.pipeline.stage import TreeStage
from notepress.stages.wikilinks import wikilink_href

logger = logging.getLogger(__name__)


def note_link(note: NoteProps, context: PipelineContext) -> WikiLink:
    """Build a wikilink to ``note`` labelled with its title."""
    wiki_opts = context.wiki_links_opts
    prefix = wiki_opts.prefix if wiki_opts is not None else None
    note_id = note.id if wiki_opts is not None and wiki_opts.use_id else None
    return WikiLink(
        value=note.fname,
        alias=note.title,
        vault_name=note.vault.name,
        data={"href": wikilink_href(note.fname, None, prefix, note_id)},
    )


def link_list(notes: list[NoteProps], context: PipelineContext, ordered: bool) -> List:
    """Build a tight list with one wikilink per note."""
    items = [ListItem(children=[Paragraph(children=[note_link(note, context)])]) for note in notes]
    return List(children=items, ordered=ordered, tight=True)


def _sort_key(note: NoteProps) -> tuple[float, str]:
    nav_order = note.custom.get("nav_order")
    return (float(nav_order) if isinstance(nav_order, (int, float)) else float("inf"), note.title.lower())


class _NavigationStage(TreeStage):
    """Append a titled list of note links to the document."""

    heading: str = ""
    ordered: bool = False

    @abstractmethod
    def enabled(self) -> bool:
        """Return True if the configuration asks for this section."""

    @abstractmethod
    def collect(self, note: NoteProps) -> list[NoteProps]:
        """Return the notes to link from ``note``, in display order."""

    def visit_document(self, node: Document) -> Document:
        document = self._generic_transform(node)
        if self.context.inside_note_ref or not self.enabled():
            return document

        note = self.context.current_note()
        if note is None:
            return document

        notes = self.collect(note)
        if not notes:
            return document

        logger.debug(f"Appending {len(notes)} {self.heading.lower()} link(s) to {note.fname}")
        document.children.append(Heading(level=2, children=[Text(value=self.heading)]))
        document.children.append(link_list(notes, self.context, self.ordered))
        return document


class HierarchiesStage(_NavigationStage):
    """Append a "Children" section listing the note's children in the hierarchy.

    Children are sorted by their ``nav_order`` frontmatter value, then by
    title. Notes with ``nav_exclude_children`` set get no section.
    """

    name = "hierarchies"
    heading = "Children"
    ordered = True

    def enabled(self) -> bool:
        context = self.context
        if (context.fm or {}).get("nav_exclude_children"):
            return False
        return context.get_config().get_enable_child_links(context.should_apply_publishing_rules)

    def collect(self, note: NoteProps) -> list[NoteProps]:
        notes = self.context.notes or {}
        children = [notes[child_id] for child_id in note.children if child_id in notes]
        return sorted(children, key=_sort_key)


class BacklinksStage(_NavigationStage):
    """Append a "Backlinks" section listing the notes that link to this one."""

    name = "backlinks"
    heading = "Backlinks"

    def enabled(self) -> bool:
        context = self.context
        return context.get_config().get_enable_backlinks(context.should_apply_publishing_rules)

    def collect(self, note: NoteProps) -> list[NoteProps]:
        wanted = note.fname.lower()
        backlinks: list[NoteProps] = []
        for candidate in (self.context.notes or {}).values():
            if candidate.id == note.id:
                continue
            if any(link.lower() == wanted for link in candidate.links):
                backlinks.append(candidate)
        return sorted(backlinks, key=lambda n: n.fname)

