#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/pipeline/context.py
"""Shared state of one pipeline.

A :class:`PipelineContext` is created by the builder and handed to every
stage. Stages read the document identity, configuration and note lookup from
it, and record non-fatal problems as :class:`Diagnostic` entries.

The derivation of context fields from the caller's data is split into small
functions (:func:`resolve_config`, :func:`resolve_ws_root`,
:func:`resolve_frontmatter`, :func:`resolve_notes`) so each rule can be
exercised on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Sequence

from notepress.config import NotepressConfig
from notepress.engine import NoteEngine, NoteProps, Vault
from notepress.exceptions import ConfigurationError
from notepress.pipeline.options import (
    BacklinkHoverOptions,
    Destination,
    PipelineData,
    ProcFlavor,
    ProcMode,
    PublishOptions,
    WikiLinksOptions,
)

logger = logging.getLogger(__name__)

Severity = Literal["info", "warning", "error"]


@dataclass
class Diagnostic:
    """A non-fatal problem found while running a stage.

    Parameters
    ----------
    message : str
        Human readable description
    stage : str or None
        Name of the stage that recorded it
    severity : {"info", "warning", "error"}, default "warning"
        How serious the problem is
    fname : str or None
        Note being processed when it was recorded

    """

    message: str
    stage: Optional[str] = None
    severity: Severity = "warning"
    fname: Optional[str] = None


def should_apply_publishing_rules(dest: Optional[Destination], flavor: Optional[ProcFlavor]) -> bool:
    """Return True when publishing overrides apply (HTML output for publishing)."""
    return dest == Destination.HTML and flavor == ProcFlavor.PUBLISHING


@dataclass
class PipelineContext:
    """Mutable state shared by the stages of one pipeline.

    Attributes
    ----------
    mode : ProcMode
        Operating mode the pipeline was built for
    flavor : ProcFlavor
        Rendering flavor the pipeline was built for
    dest : Destination or None
        Output target
    fname, vault
        Identity of the document being processed
    engine : NoteEngine or None
        Note store
    config : NotepressConfig or None
        Configuration snapshot; resolved once by the builder
    ws_root : str or None
        Workspace root
    notes : dict or None
        Notes keyed by id, used to resolve links and references
    inside_note_ref : bool
        True when the pipeline expands a reference inside another note
    fm : dict or None
        Frontmatter variables of the current note
    note_ref_level : int
        Reference nesting level
    diagnostics : list of Diagnostic
        Non-fatal problems, in the order they were recorded. Nested
        pipelines share their parent's list.
    wiki_links_opts, publish_opts, backlink_hover_opts
        Stage option payloads supplied by the caller
    current_stage : str or None
        Name of the stage currently running

    """

    mode: ProcMode = ProcMode.NO_DATA
    flavor: ProcFlavor = ProcFlavor.REGULAR
    dest: Optional[Destination] = None
    fname: Optional[str] = None
    vault: Optional[Vault] = None
    engine: Optional[NoteEngine] = None
    config: Optional[NotepressConfig] = None
    ws_root: Optional[str] = None
    notes: Optional[dict[str, NoteProps]] = None
    inside_note_ref: bool = False
    fm: Optional[dict[str, Any]] = None
    note_ref_level: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)
    wiki_links_opts: Optional[WikiLinksOptions] = None
    publish_opts: Optional[PublishOptions] = None
    backlink_hover_opts: Optional[BacklinkHoverOptions] = None
    current_stage: Optional[str] = None

    @property
    def should_apply_publishing_rules(self) -> bool:
        """True when publishing overrides apply to this pipeline."""
        return should_apply_publishing_rules(self.dest, self.flavor)

    def get_config(self) -> NotepressConfig:
        """Return the configuration, or the defaults when none was resolved."""
        return self.config if self.config is not None else NotepressConfig()

    def add_diagnostic(self, message: str, stage: Optional[str] = None, severity: Severity = "warning") -> Diagnostic:
        """Record a non-fatal problem.

        Parameters
        ----------
        message : str
            Description of the problem
        stage : str, optional
            Stage name. Defaults to the stage currently running.
        severity : {"info", "warning", "error"}, default "warning"
            How serious the problem is

        Returns
        -------
        Diagnostic
            The recorded entry

        """
        diagnostic = Diagnostic(message=message, stage=stage or self.current_stage, severity=severity, fname=self.fname)
        self.diagnostics.append(diagnostic)
        logger.warning(f"[{diagnostic.stage or 'pipeline'}] {self.fname or '<text>'}: {message}")
        return diagnostic

    def find_note(self, fname: str, vault_name: Optional[str] = None) -> Optional[NoteProps]:
        """Look up a note by fname in ``notes``.

        A match in ``vault_name`` (or, without one, in the current vault) is
        preferred; otherwise the first match in any vault is returned.
        """
        if not self.notes:
            return None

        wanted = fname.lower()
        matches = [note for note in self.notes.values() if note.fname.lower() == wanted]
        if not matches:
            return None

        preferred = vault_name or (self.vault.name if self.vault is not None else None)
        for note in matches:
            if note.vault.name == preferred:
                return note
        return matches[0]

    def current_note(self) -> Optional[NoteProps]:
        """Return the note being processed, when it is known."""
        if self.fname is None:
            return None
        return self.find_note(self.fname, self.vault.name if self.vault is not None else None)


def validate_required(data: PipelineData, required: Sequence[str]) -> None:
    """Check that every field in ``required`` is supplied.

    Raises
    ------
    ConfigurationError
        Listing every missing field, in the order given

    """
    missing = [name for name in required if not data.is_supplied(name)]
    if missing:
        raise ConfigurationError(missing_fields=missing)


def resolve_config(data: PipelineData) -> Optional[NotepressConfig]:
    """Return the supplied config, falling back to the engine's."""
    if data.config is not None:
        return data.config
    if data.engine is not None:
        return data.engine.config
    return None


def resolve_ws_root(data: PipelineData) -> Optional[str]:
    """Return the supplied workspace root, falling back to the engine's."""
    if data.ws_root is not None:
        return data.ws_root
    if data.engine is not None:
        return data.engine.ws_root
    return None


def resolve_notes(data: PipelineData) -> Optional[dict[str, NoteProps]]:
    """Return the supplied notes, falling back to the engine's."""
    if data.notes is not None:
        return data.notes
    if data.engine is not None:
        return data.engine.notes
    return None


def resolve_frontmatter(data: PipelineData) -> Optional[dict[str, Any]]:
    """Return the frontmatter variables of the note named in ``data``.

    The note's custom frontmatter is combined with its ``id``, ``title``,
    ``desc``, ``created`` and ``updated`` fields. Returns None when there is
    no engine or the note does not exist.
    """
    if data.engine is None or data.fname is None:
        return None

    note = data.engine.find_note(data.fname, data.vault)
    if note is None:
        logger.debug(f"Note not found for frontmatter: {data.fname}")
        return None

    return {
        **note.custom,
        "id": note.id,
        "title": note.title,
        "desc": note.desc,
        "created": note.created,
        "updated": note.updated,
    }


def create_context(mode: ProcMode, flavor: ProcFlavor, data: PipelineData) -> PipelineContext:
    """Create a context holding exactly what the caller supplied."""
    return PipelineContext(
        mode=mode,
        flavor=flavor,
        dest=data.dest,
        fname=data.fname,
        vault=data.vault,
        engine=data.engine,
        config=data.config,
        ws_root=data.ws_root,
        notes=data.notes,
        inside_note_ref=data.inside_note_ref or data.note_ref_level is not None,
        fm=data.fm,
        note_ref_level=data.note_ref_level or 0,
        diagnostics=data.diagnostics if data.diagnostics is not None else [],
        wiki_links_opts=data.wiki_links_opts,
        publish_opts=data.publish_opts,
        backlink_hover_opts=data.backlink_hover_opts,
    )


def populate_context(
    context: PipelineContext,
    data: PipelineData,
    *,
    config: Optional[NotepressConfig],
    ws_root: Optional[str],
    fm: Optional[dict[str, Any]] = None,
) -> PipelineContext:
    """Merge resolved values into ``context``.

    Values supplied in ``data`` take precedence over derived ones; ``notes``
    falls back to the engine's notes.
    """
    context.config = config
    context.ws_root = ws_root
    if data.fm is None and fm is not None:
        context.fm = fm
    context.notes = resolve_notes(data)
    return context


__all__ = [
    "Diagnostic",
    "PipelineContext",
    "should_apply_publishing_rules",
    "validate_required",
    "resolve_config",
    "resolve_ws_root",
    "resolve_notes",
    "resolve_frontmatter",
    "create_context",
    "populate_context",
]
