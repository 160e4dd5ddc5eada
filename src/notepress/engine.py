#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/engine.py
"""Note store consulted by pipelines running with data.

A pipeline in ``FULL`` or ``IMPORT`` mode needs an engine: it supplies the
workspace configuration, the workspace root, and the notes that wikilinks,
references, backlinks and child listings resolve against.

Two engines are provided:

- :class:`InMemoryEngine` holds notes built in code (tests, previews)
- :class:`FileSystemEngine` loads the ``*.md`` files of one or more vaults

"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from notepress.config import NotepressConfig, discover_config_file, load_config
from notepress.exceptions import ConfigurationError
from notepress.utils.text import fname_to_title, split_frontmatter

logger = logging.getLogger(__name__)

_WIKILINK_TARGET_PATTERN = re.compile(r"!?\[\[(?:[^\]|]*\|)?(?:dendron://[^/\]]+/)?([^\]#|]+)(?:#[^\]]*)?\]\]")

# Frontmatter keys mapped onto NoteProps fields rather than kept as custom data
_RESERVED_KEYS = ("id", "title", "desc", "created", "updated")


@dataclass(frozen=True)
class Vault:
    """A directory of notes inside the workspace.

    Parameters
    ----------
    fs_path : str
        Vault directory, relative to the workspace root
    name : str or None, default None
        Name used in cross-vault links. Defaults to the last path component.

    """

    fs_path: str
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.name is None:
            object.__setattr__(self, "name", Path(self.fs_path).name or self.fs_path)


@dataclass
class NoteProps:
    """A note and its metadata.

    Parameters
    ----------
    id : str
        Stable note identifier, used in published URLs
    fname : str
        Dotted hierarchical name (``"projects.notepress"``)
    vault : Vault
        Vault the note lives in
    title : str, default ""
        Display title. Derived from ``fname`` when empty.
    desc : str, default ""
        Short description
    created, updated : int, default 0
        Timestamps in milliseconds
    custom : dict
        Frontmatter keys other than the ones mapped onto fields
    body : str, default ""
        Markdown body without frontmatter
    links : list of str
        fnames this note links to
    parent : str or None
        id of the parent note in the hierarchy
    children : list of str
        ids of child notes

    """

    id: str
    fname: str
    vault: Vault
    title: str = ""
    desc: str = ""
    created: int = 0
    updated: int = 0
    custom: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    links: list[str] = field(default_factory=list)
    parent: Optional[str] = None
    children: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.title:
            self.title = fname_to_title(self.fname)

    @property
    def published(self) -> bool:
        """Whether the note may appear on a published site."""
        return bool(self.custom.get("published", True))


class NoteEngine(ABC):
    """Source of notes, configuration and workspace root for a pipeline."""

    @property
    @abstractmethod
    def config(self) -> NotepressConfig:
        """Workspace configuration."""

    @property
    @abstractmethod
    def ws_root(self) -> str:
        """Workspace root directory."""

    @property
    @abstractmethod
    def notes(self) -> dict[str, NoteProps]:
        """All notes, keyed by id."""

    @property
    def vaults(self) -> list[Vault]:
        """Vaults holding the engine's notes, in first-seen order."""
        seen: dict[str, Vault] = {}
        for note in self.notes.values():
            seen.setdefault(note.vault.fs_path, note.vault)
        return list(seen.values())

    def find_notes(self, fname: str) -> list[NoteProps]:
        """Return every note named ``fname`` (case-insensitive), across vaults."""
        wanted = fname.lower()
        return [note for note in self.notes.values() if note.fname.lower() == wanted]

    def find_note(self, fname: str, vault: Optional[Vault | str] = None) -> Optional[NoteProps]:
        """Return the note named ``fname``, optionally restricted to one vault.

        Parameters
        ----------
        fname : str
            Note name
        vault : Vault or str, optional
            Vault, or vault name, to search. Without it the first match wins.

        Returns
        -------
        NoteProps or None
            The note, or None when no note matches

        """
        candidates = self.find_notes(fname)
        if vault is None:
            return candidates[0] if candidates else None

        vault_name = vault if isinstance(vault, str) else vault.name
        for note in candidates:
            if note.vault.name == vault_name:
                return note
        return None


def link_hierarchy(notes: Iterable[NoteProps]) -> None:
    """Set ``parent`` and ``children`` from the dotted fname hierarchy.

    A note's parent is the closest existing ancestor in the same vault, so
    ``a.b.c`` becomes a child of ``a`` when ``a.b`` does not exist.

    """
    notes = list(notes)
    by_name = {(note.vault.fs_path, note.fname.lower()): note for note in notes}
    for note in notes:
        note.parent = None
        note.children = []

    for note in sorted(notes, key=lambda n: n.fname):
        parts = note.fname.split(".")
        for depth in range(len(parts) - 1, 0, -1):
            ancestor = by_name.get((note.vault.fs_path, ".".join(parts[:depth]).lower()))
            if ancestor is not None:
                note.parent = ancestor.id
                ancestor.children.append(note.id)
                break


def extract_links(body: str) -> list[str]:
    """Return the fnames of wikilinks and references in ``body``, deduplicated."""
    links: list[str] = []
    for match in _WIKILINK_TARGET_PATTERN.finditer(body):
        target = match.group(1).strip()
        if target and target not in links:
            links.append(target)
    return links


class InMemoryEngine(NoteEngine):
    """Engine over a fixed collection of notes.

    Parameters
    ----------
    notes : iterable of NoteProps
        Notes to serve. Hierarchy links are computed on construction.
    config : NotepressConfig, optional
        Workspace configuration (defaults apply when omitted)
    ws_root : str, default "."
        Workspace root

    """

    def __init__(
        self,
        notes: Iterable[NoteProps] = (),
        config: Optional[NotepressConfig] = None,
        ws_root: str = ".",
    ):
        self._notes = {note.id: note for note in notes}
        self._config = config or NotepressConfig()
        self._ws_root = ws_root
        link_hierarchy(self._notes.values())

    @property
    def config(self) -> NotepressConfig:
        return self._config

    @property
    def ws_root(self) -> str:
        return self._ws_root

    @property
    def notes(self) -> dict[str, NoteProps]:
        return self._notes

    def add_note(self, note: NoteProps) -> None:
        """Add or replace a note and recompute the hierarchy."""
        self._notes[note.id] = note
        link_hierarchy(self._notes.values())


class FileSystemEngine(InMemoryEngine):
    """Engine loaded from the markdown files of a workspace."""

    @classmethod
    def from_workspace(
        cls,
        ws_root: Path | str,
        vaults: Optional[Iterable[Vault | str]] = None,
        config: Optional[NotepressConfig] = None,
    ) -> FileSystemEngine:
        """Load every ``*.md`` file of the given vaults.

        Parameters
        ----------
        ws_root : Path or str
            Workspace root directory
        vaults : iterable of Vault or str, optional
            Vaults to load, relative to ``ws_root``. Defaults to the root
            itself as a single vault.
        config : NotepressConfig, optional
            Configuration. When omitted, a config file in ``ws_root`` is
            loaded if present.

        Returns
        -------
        FileSystemEngine
            Engine serving the loaded notes

        Raises
        ------
        ConfigurationError
            If the workspace or a vault directory does not exist

        """
        root = Path(ws_root)
        if not root.is_dir():
            raise ConfigurationError(message=f"Workspace root is not a directory: {root}")

        if config is None:
            config_path = discover_config_file(root)
            config = load_config(config_path) if config_path else NotepressConfig()

        vault_list = [v if isinstance(v, Vault) else Vault(fs_path=v) for v in (vaults or [Vault(fs_path=".")])]

        notes: list[NoteProps] = []
        for vault in vault_list:
            vault_dir = root / vault.fs_path
            if not vault_dir.is_dir():
                raise ConfigurationError(message=f"Vault directory does not exist: {vault_dir}")
            for path in sorted(vault_dir.glob("*.md")):
                notes.append(_load_note(path, vault))

        logger.info(f"Loaded {len(notes)} notes from {len(vault_list)} vault(s) under {root}")
        return cls(notes, config=config, ws_root=str(root))


def _load_note(path: Path, vault: Vault) -> NoteProps:
    text = path.read_text(encoding="utf-8")
    fname = path.stem
    yaml_text, body = split_frontmatter(text)

    meta: dict[str, Any] = {}
    if yaml_text is not None:
        try:
            loaded = yaml.safe_load(yaml_text)
        except yaml.YAMLError as e:
            logger.warning(f"Ignoring invalid frontmatter in {path}: {e}")
            loaded = None
        if isinstance(loaded, dict):
            meta = loaded

    custom = {key: value for key, value in meta.items() if key not in _RESERVED_KEYS}
    return NoteProps(
        id=str(meta.get("id") or fname),
        fname=fname,
        vault=vault,
        title=str(meta.get("title") or ""),
        desc=str(meta.get("desc") or ""),
        created=int(meta.get("created") or 0),
        updated=int(meta.get("updated") or 0),
        custom=custom,
        body=body,
        links=extract_links(body),
    )


__all__ = [
    "Vault",
    "NoteProps",
    "NoteEngine",
    "InMemoryEngine",
    "FileSystemEngine",
    "link_hierarchy",
    "extract_links",
]
