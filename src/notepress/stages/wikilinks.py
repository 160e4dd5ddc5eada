#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/wikilinks.py
"""Wikilinks: ``[[fname]]``, ``[[alias|fname#anchor]]`` and cross-vault links.

A cross-vault link names its vault with the ``dendron://`` scheme, as in
``[[dendron://private/journal.2024#summary]]``. A link with an empty target
(``[[#anchor]]``) points into the current note.
"""

from __future__ import annotations

import re
from typing import Optional

from notepress.ast.nodes import WikiLink
from notepress.ast.transforms import TextPatternTransformer, TransformResult
from notepress.constants import VAULT_LINK_SCHEME
from notepress.pipeline.stage import TreeStage

WIKILINK_PATTERN = re.compile(r"(?<!!)\[\[(?:([^\]|]+)\|)?(?:dendron://([^/\]]+)/)?([^\]#|]*)(?:#([^\]|]+))?\]\]")


def format_wikilink(node: WikiLink) -> str:
    """Return the markdown source of a wikilink."""
    alias = f"{node.alias}|" if node.alias else ""
    vault = f"{VAULT_LINK_SCHEME}{node.vault_name}/" if node.vault_name else ""
    anchor = f"#{node.anchor_header}" if node.anchor_header else ""
    return f"[[{alias}{vault}{node.value}{anchor}]]"


def wikilink_href(value: str, anchor: Optional[str] = None, prefix: Optional[str] = None, note_id: Optional[str] = None) -> str:
    """Build the href of a wikilink.

    Parameters
    ----------
    value : str
        Target fname
    anchor : str, optional
        Heading or block anchor within the target
    prefix : str, optional
        Path prepended to the target
    note_id : str, optional
        Target note id, used in place of the fname when given

    Returns
    -------
    str
        ``{prefix}{target}`` followed by ``#anchor`` when there is one

    Examples
    --------
    >>> wikilink_href("projects.notepress", "usage", prefix="/notes/")
    '/notes/projects.notepress#usage'

    """
    href = f"{prefix or ''}{note_id or value}"
    if anchor:
        href = f"{href}#{anchor}"
    return href


class WikiLinksStage(TreeStage, TextPatternTransformer):
    """Turn ``[[...]]`` syntax into :class:`WikiLink` nodes.

    Parameters
    ----------
    prefix : str, optional
        Prefix for the rendered href
    use_id : bool, default False
        Link to the note id instead of the fname when the target note is known

    """

    name = "wikilinks"
    pattern = WIKILINK_PATTERN

    def __init__(self, prefix: Optional[str] = None, use_id: bool = False):
        self.prefix = prefix
        self.use_id = use_id

    def replace_match(self, match: re.Match[str]) -> TransformResult:
        alias, vault_name, target, anchor = match.groups()
        value = target.strip() or (self.context.fname or "")
        if not value:
            return None

        note_id = None
        if self.use_id:
            note = self.context.find_note(value, vault_name)
            if note is not None:
                note_id = note.id

        return WikiLink(
            value=value,
            alias=alias.strip() if alias else None,
            anchor_header=anchor.strip() if anchor else None,
            vault_name=vault_name,
            data={"href": wikilink_href(value, anchor.strip() if anchor else None, self.prefix, note_id)},
        )
