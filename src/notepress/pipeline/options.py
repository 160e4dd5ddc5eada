#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/pipeline/options.py
"""Options and input data for building a pipeline.

:class:`PipelineOptions` selects the overall shape of a pipeline (operating
mode, rendering flavor, whether a serializer is attached). :class:`PipelineData`
carries the per-document inputs that are merged into the pipeline context.
The remaining classes are the option payloads of individual stages.

Examples
--------
    >>> options = PipelineOptions(mode=ProcMode.FULL, flavor=ProcFlavor.PREVIEW)
    >>> data = PipelineData(fname="projects.notepress", vault=vault, engine=engine, dest=Destination.HTML)

"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from notepress.config import CloneFrozenMixin, NotepressConfig
from notepress.exceptions import ValidationError

if TYPE_CHECKING:
    from notepress.engine import NoteEngine, NoteProps, Vault
    from notepress.pipeline.context import Diagnostic


class ProcMode(str, Enum):
    """How much surrounding data a pipeline has.

    NO_DATA pipelines parse a document in isolation. FULL pipelines know the
    document's identity and its engine. IMPORT pipelines know the engine but
    not the document.
    """

    NO_DATA = "NO_DATA"
    FULL = "FULL"
    IMPORT = "IMPORT"


class ProcFlavor(str, Enum):
    """Where the rendered output is shown."""

    REGULAR = "REGULAR"
    PREVIEW = "PREVIEW"
    HOVER_PREVIEW = "HOVER_PREVIEW"
    BACKLINKS_PANEL_HOVER = "BACKLINKS_PANEL_HOVER"
    PUBLISHING = "PUBLISHING"


class Destination(str, Enum):
    """Output target of a pipeline."""

    MARKDOWN = "markdown"
    HTML = "html"


@dataclass(frozen=True)
class PipelineOptions(CloneFrozenMixin):
    """Shape of a pipeline.

    Parameters
    ----------
    mode : ProcMode, default ProcMode.NO_DATA
        Operating mode
    flavor : ProcFlavor or None, default ProcFlavor.REGULAR
        Rendering flavor. None is normalized to REGULAR.
    parse_only : bool, default False
        When True no serialization stage is attached and running the
        pipeline returns a tree

    """

    mode: ProcMode = field(
        default=ProcMode.NO_DATA,
        metadata={"help": "Operating mode (NO_DATA, FULL or IMPORT)", "importance": "core"},
    )
    flavor: Optional[ProcFlavor] = field(
        default=ProcFlavor.REGULAR,
        metadata={"help": "Rendering flavor", "importance": "core"},
    )
    parse_only: bool = field(
        default=False,
        metadata={"help": "Return the transformed tree instead of serialized output", "importance": "core"},
    )

    def __post_init__(self) -> None:
        # mode is checked by the builder, which rejects unknown modes
        flavor = self.flavor
        if flavor is None:
            flavor = ProcFlavor.REGULAR
        elif not isinstance(flavor, ProcFlavor):
            try:
                flavor = ProcFlavor(flavor)
            except ValueError as e:
                raise ValidationError(
                    f"Unknown flavor: {flavor!r}", parameter_name="flavor", parameter_value=flavor, original_error=e
                ) from e
        object.__setattr__(self, "flavor", flavor)


@dataclass(frozen=True)
class WikiLinksOptions(CloneFrozenMixin):
    """Options for the ``wikilinks`` stage.

    Parameters
    ----------
    convert_links : bool or None, default None
        Set to False to leave ``[[...]]`` syntax as text. Any other value
        converts links.
    prefix : str or None, default None
        Prefix prepended to link targets in the rendered href
    use_id : bool, default False
        Link to note ids instead of fnames when the target is known

    """

    convert_links: Optional[bool] = None
    prefix: Optional[str] = None
    use_id: bool = False


@dataclass(frozen=True)
class PublishOptions(CloneFrozenMixin):
    """Caller overrides for the ``publish`` stage.

    Fields left as None keep the value chosen by the builder.

    Parameters
    ----------
    insert_title : bool or None
        Insert the note title as a level 1 heading
    transform_no_publish : bool or None
        Replace links to unpublished notes with plain text
    wikilink_prefix : str or None
        Path prefix for rewritten note links
    assets_prefix : str or None
        Path prefix for relative image URLs

    """

    insert_title: Optional[bool] = None
    transform_no_publish: Optional[bool] = None
    wikilink_prefix: Optional[str] = None
    assets_prefix: Optional[str] = None

    def as_params(self) -> dict[str, Any]:
        """Return the fields that are set, as stage parameters."""
        return {name: value for name, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class BacklinkHoverOptions(CloneFrozenMixin):
    """Options for the ``backlinks-hover`` stage.

    Parameters
    ----------
    link_text : str
        Text of the link being hovered; its occurrences are highlighted
    link_start, link_end : int or None
        Character offsets of the link in the source, when known

    """

    link_text: str
    link_start: Optional[int] = None
    link_end: Optional[int] = None


@dataclass
class PipelineData:
    """Per-document inputs merged into the pipeline context.

    Every field is optional here; which fields are required depends on the
    operating mode. See :func:`notepress.pipeline.builder.PipelineBuilder.build`.

    """

    dest: Optional[Destination] = None
    fname: Optional[str] = None
    vault: Optional[Vault] = None
    engine: Optional[NoteEngine] = None
    config: Optional[NotepressConfig] = None
    ws_root: Optional[str] = None
    notes: Optional[dict[str, NoteProps]] = None
    fm: Optional[dict[str, Any]] = None
    note_ref_level: Optional[int] = None
    inside_note_ref: bool = False
    diagnostics: Optional[list[Diagnostic]] = None
    wiki_links_opts: Optional[WikiLinksOptions] = None
    publish_opts: Optional[PublishOptions] = None
    backlink_hover_opts: Optional[BacklinkHoverOptions] = None

    @classmethod
    def coerce(cls, data: Union[PipelineData, Mapping[str, Any], None]) -> PipelineData:
        """Return ``data`` as a PipelineData, accepting a plain mapping.

        Raises
        ------
        ValidationError
            If the mapping has keys that are not PipelineData fields, or names
            an unknown destination

        """
        if data is None:
            return cls()
        if isinstance(data, PipelineData):
            return data

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(
                f"Unknown pipeline data field(s): {', '.join(unknown)}",
                parameter_name="data",
                parameter_value=unknown,
            )
        values = dict(data)
        dest = values.get("dest")
        if isinstance(dest, str):
            try:
                values["dest"] = Destination(dest)
            except ValueError as e:
                raise ValidationError(
                    f"Unknown destination: {dest!r}", parameter_name="dest", parameter_value=dest, original_error=e
                ) from e
        return cls(**values)

    def is_supplied(self, name: str) -> bool:
        """Return True if the field ``name`` holds a value."""
        return getattr(self, name) is not None


__all__ = [
    "ProcMode",
    "ProcFlavor",
    "Destination",
    "PipelineOptions",
    "WikiLinksOptions",
    "PublishOptions",
    "BacklinkHoverOptions",
    "PipelineData",
]
