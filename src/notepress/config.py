#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/config.py
"""Workspace configuration for note processing.

The pipeline builder reads feature toggles from a :class:`NotepressConfig`
snapshot. Several toggles have a publishing-specific counterpart under
:class:`PublishingConfig`, so every toggle query accepts a
``should_apply_publish_rules`` flag: when it is set and the publishing value
is configured, the publishing value wins.

Configuration files are YAML, JSON or TOML and may use either snake_case or
camelCase keys::

    enableMath: true
    enableMermaid: false
    publishing:
      assetsPrefix: /my-site
      enableFMTitle: false

"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional, Self

import yaml

from notepress.constants import CONFIG_FILENAMES
from notepress.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

# camelCase keys whose snake_case form is not a plain case conversion
_KEY_ALIASES = {
    "enableFMTitle": "enable_fm_title",
    "enableKatex": "enable_math",
}


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class PublishingConfig(CloneFrozenMixin):
    """Settings that apply when publishing a site.

    The optional toggles override their top-level counterparts when
    publishing rules apply; ``None`` means "use the top-level value".

    Parameters
    ----------
    assets_prefix : str or None, default None
        Path prefix under which the site is served (e.g. ``"/my-site"``)
    enable_math : bool or None, default None
        Publishing override for math rendering
    enable_mermaid : bool or None, default None
        Publishing override for diagram rendering
    enable_fm_title : bool or None, default None
        Publishing override for inserting the frontmatter title
    enable_backlinks : bool or None, default None
        Publishing override for appending a backlinks section
    enable_child_links : bool or None, default None
        Publishing override for appending a children section

    """

    assets_prefix: Optional[str] = field(
        default=None,
        metadata={"help": "Path prefix under which the published site is served", "importance": "core"},
    )
    enable_math: Optional[bool] = field(
        default=None,
        metadata={"help": "Render math when publishing (overrides enable_math)", "importance": "advanced"},
    )
    enable_mermaid: Optional[bool] = field(
        default=None,
        metadata={"help": "Render mermaid diagrams when publishing (overrides enable_mermaid)", "importance": "advanced"},
    )
    enable_fm_title: Optional[bool] = field(
        default=None,
        metadata={"help": "Insert the frontmatter title when publishing", "importance": "advanced"},
    )
    enable_backlinks: Optional[bool] = field(
        default=None,
        metadata={"help": "Append a backlinks section when publishing", "importance": "advanced"},
    )
    enable_child_links: Optional[bool] = field(
        default=None,
        metadata={"help": "Append a children section when publishing", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Normalize the assets prefix.

        Raises
        ------
        ValidationError
            If the prefix is not an absolute path

        """
        if self.assets_prefix is not None:
            prefix = self.assets_prefix.rstrip("/")
            if prefix and not prefix.startswith("/"):
                raise ValidationError(
                    f"assets_prefix must start with '/', got {self.assets_prefix!r}",
                    parameter_name="assets_prefix",
                    parameter_value=self.assets_prefix,
                )
            object.__setattr__(self, "assets_prefix", prefix or None)


@dataclass(frozen=True)
class NotepressConfig(CloneFrozenMixin):
    """Feature toggles read by the pipeline builder and stages.

    Parameters
    ----------
    enable_math : bool, default True
        Parse ``$...$`` math and render it for client-side typesetting
    enable_mermaid : bool, default False
        Render ``mermaid`` code blocks as diagrams
    enable_fm_title : bool, default True
        Insert the note title from frontmatter as a level 1 heading
    enable_child_links : bool, default True
        Append links to child notes when rendering HTML
    enable_backlinks : bool, default True
        Append links to notes that link here when rendering HTML
    enable_pretty_refs : bool, default True
        Wrap expanded note references in a titled container
    publishing : PublishingConfig
        Publishing specific settings and overrides

    """

    enable_math: bool = field(
        default=True,
        metadata={"help": "Render math notation", "importance": "core"},
    )
    enable_mermaid: bool = field(
        default=False,
        metadata={"help": "Render mermaid diagrams", "importance": "core"},
    )
    enable_fm_title: bool = field(
        default=True,
        metadata={"help": "Insert the frontmatter title as a heading", "importance": "core"},
    )
    enable_child_links: bool = field(
        default=True,
        metadata={"help": "Append a list of child notes to rendered notes", "importance": "advanced"},
    )
    enable_backlinks: bool = field(
        default=True,
        metadata={"help": "Append a list of backlinks to rendered notes", "importance": "advanced"},
    )
    enable_pretty_refs: bool = field(
        default=True,
        metadata={"help": "Wrap expanded note references in a titled container", "importance": "advanced"},
    )
    publishing: PublishingConfig = field(
        default_factory=PublishingConfig,
        metadata={"help": "Publishing settings and overrides", "importance": "core"},
    )

    def _toggle(self, name: str, should_apply_publish_rules: bool) -> bool:
        if should_apply_publish_rules:
            override = getattr(self.publishing, name)
            if override is not None:
                return bool(override)
        return bool(getattr(self, name))

    def get_enable_math(self, should_apply_publish_rules: bool = False) -> bool:
        """Return whether math rendering is enabled."""
        return self._toggle("enable_math", should_apply_publish_rules)

    def get_enable_mermaid(self, should_apply_publish_rules: bool = False) -> bool:
        """Return whether mermaid diagram rendering is enabled."""
        return self._toggle("enable_mermaid", should_apply_publish_rules)

    def get_enable_fm_title(self, should_apply_publish_rules: bool = False) -> bool:
        """Return whether the frontmatter title is inserted as a heading."""
        return self._toggle("enable_fm_title", should_apply_publish_rules)

    def get_enable_backlinks(self, should_apply_publish_rules: bool = False) -> bool:
        """Return whether a backlinks section is appended."""
        return self._toggle("enable_backlinks", should_apply_publish_rules)

    def get_enable_child_links(self, should_apply_publish_rules: bool = False) -> bool:
        """Return whether a children section is appended."""
        return self._toggle("enable_child_links", should_apply_publish_rules)

    def get_assets_prefix(self) -> Optional[str]:
        """Return the configured assets prefix, without a trailing slash."""
        return self.publishing.assets_prefix

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NotepressConfig:
        """Build a config from a mapping with snake_case or camelCase keys.

        Parameters
        ----------
        data : dict
            Raw configuration, e.g. loaded from a YAML file

        Returns
        -------
        NotepressConfig
            Parsed configuration. Unknown keys are ignored.

        Raises
        ------
        ValidationError
            If a value has the wrong type

        """
        publishing_raw = {}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _normalize_key(key)
            if name == "publishing":
                if not isinstance(value, dict):
                    raise ValidationError(
                        "publishing must be a mapping", parameter_name="publishing", parameter_value=value
                    )
                publishing_raw = value
                continue
            values[name] = value

        values["publishing"] = _build(PublishingConfig, publishing_raw)
        return _build(cls, values)


def _normalize_key(key: str) -> str:
    if key in _KEY_ALIASES:
        return _KEY_ALIASES[key]
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _build(config_cls: type, raw: dict[str, Any]) -> Any:
    known = {f.name: f for f in fields(config_cls)}
    kwargs = {}
    for key, value in raw.items():
        name = _normalize_key(key)
        if name not in known:
            logger.debug(f"Ignoring unknown {config_cls.__name__} key: {key}")
            continue
        if name.startswith("enable_") and value is not None and not isinstance(value, bool):
            raise ValidationError(
                f"{key} must be a boolean, got {type(value).__name__}", parameter_name=key, parameter_value=value
            )
        kwargs[name] = value
    return config_cls(**kwargs)


def load_config(config_path: Path | str) -> NotepressConfig:
    """Load configuration from a YAML, JSON or TOML file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    NotepressConfig
        Parsed configuration

    Raises
    ------
    ConfigurationError
        If the file is missing, unreadable or not a mapping

    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigurationError(message=f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix in (".yml", ".yaml"):
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".json":
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        elif suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            raise ConfigurationError(message=f"Unsupported configuration format: {path.suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(message=f"Error reading configuration file {path}: {e}", original_error=e) from e

    if not isinstance(data, dict):
        raise ConfigurationError(message=f"Configuration in {path} must be a mapping, got {type(data).__name__}")

    logger.debug(f"Loaded configuration from {path}")
    return NotepressConfig.from_dict(data)


def discover_config_file(ws_root: Path | str) -> Optional[Path]:
    """Return the first configuration file found in ``ws_root``, if any."""
    root = Path(ws_root)
    for filename in CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


__all__ = [
    "CloneFrozenMixin",
    "NotepressConfig",
    "PublishingConfig",
    "load_config",
    "discover_config_file",
]
