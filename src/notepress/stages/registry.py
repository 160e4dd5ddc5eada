#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/registry.py
"""Stage registry for stage discovery and lookup.

This module implements a registry pattern for pipeline stages, enabling:
- Registration of the built-in stages on first access
- Plugin discovery via entry points
- Ordering constraint checks
- Stage lookup and instantiation

Examples
--------
Get a stage:

    >>> from notepress.stages import stage_registry
    >>> stage = stage_registry.get_stage("list-format", bullet="*")

List all stages:

    >>> for name in stage_registry.list_stages():
    ...     metadata = stage_registry.get_metadata(name)
    ...     print(f"{name}: {metadata.description}")

Notes
-----
The preferred access pattern is to import the global ``stage_registry``
instance rather than instantiating StageRegistry. Both work because the
class is a singleton.

"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from notepress.exceptions import ValidationError

if TYPE_CHECKING:
    from notepress.pipeline.stage import Stage
    from notepress.stages.metadata import StageMetadata

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "notepress.stages"


class StageRegistry:
    """Registry for managing pipeline stages.

    The registry registers the built-in stages and discovers plugin stages
    via the ``notepress.stages`` entry point group on first access.

    """

    _instance: Optional[StageRegistry] = None
    _stages: dict[str, StageMetadata]
    _initialized: bool

    def __new__(cls) -> StageRegistry:
        """Create or return singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._stages = {}
            cls._instance._initialized = False
        return cls._instance

    def _ensure_initialized(self) -> None:
        """Register built-in stages and run plugin discovery once."""
        if not self._initialized:
            self._initialized = True
            from notepress.stages._builtin_metadata import BUILTIN_STAGES

            for metadata in BUILTIN_STAGES:
                self._stages.setdefault(metadata.name, metadata)
            self.discover_plugins()

    def register(self, metadata: StageMetadata) -> None:
        """Register a stage with its metadata.

        Parameters
        ----------
        metadata : StageMetadata
            Stage metadata to register

        Notes
        -----
        If a stage with the same name is already registered, it will be
        overwritten and a warning will be logged.

        """
        self._ensure_initialized()
        if metadata.name in self._stages:
            logger.warning(f"Stage '{metadata.name}' already registered, overwriting")

        self._stages[metadata.name] = metadata
        logger.debug(f"Registered stage: {metadata.name}")

    def unregister(self, name: str) -> bool:
        """Unregister a stage.

        Returns
        -------
        bool
            True if the stage was unregistered, False if not found

        """
        self._ensure_initialized()
        if name in self._stages:
            del self._stages[name]
            logger.debug(f"Unregistered stage: {name}")
            return True
        return False

    def get_metadata(self, name: str) -> StageMetadata:
        """Get metadata for a stage.

        Raises
        ------
        KeyError
            If the stage is not registered

        """
        self._ensure_initialized()

        if name not in self._stages:
            raise KeyError(f"Stage '{name}' not registered")

        return self._stages[name]

    def get_stage(self, name: str, **kwargs: Any) -> Stage:
        """Get a stage instance by name.

        Parameters
        ----------
        name : str
            Stage name
        **kwargs
            Parameters to pass to the stage constructor

        Returns
        -------
        Stage
            Stage instance

        Raises
        ------
        KeyError
            If the stage is not registered
        ValidationError
            If parameters are invalid

        """
        metadata = self.get_metadata(name)
        return metadata.create_instance(**kwargs)

    def has_stage(self, name: str) -> bool:
        """Check if a stage is registered."""
        self._ensure_initialized()
        return name in self._stages

    def list_stages(self, tags: Optional[list[str]] = None) -> list[str]:
        """List registered stage names, sorted alphabetically.

        Parameters
        ----------
        tags : list[str], optional
            Only return stages with at least one of these tags

        """
        self._ensure_initialized()

        if tags is None:
            return sorted(self._stages.keys())

        return sorted(name for name, metadata in self._stages.items() if any(tag in metadata.tags for tag in tags))

    def discover_plugins(self) -> int:
        """Discover and register stages from entry points.

        Returns
        -------
        int
            Number of stages discovered and registered

        """
        discovered_count = 0
        from notepress.stages.metadata import StageMetadata

        for ep in importlib.metadata.entry_points().select(group=ENTRY_POINT_GROUP):
            try:
                metadata = ep.load()
            except Exception as e:
                logger.warning(f"Failed to load stage entry point '{ep.name}': {e}")
                continue

            if not isinstance(metadata, StageMetadata):
                logger.warning(f"Entry point '{ep.name}' did not return StageMetadata, skipping")
                continue

            if metadata.name in self._stages:
                logger.warning(f"Stage '{metadata.name}' already registered, overwriting")
            self._stages[metadata.name] = metadata
            discovered_count += 1
            logger.debug(f"Discovered stage from entry point: {ep.name}")

        logger.debug(f"Discovered {discovered_count} stage(s) from entry points")
        return discovered_count

    def validate_order(self, stage_names: Sequence[str]) -> None:
        """Check that ``stage_names`` honours every ``run_after`` constraint.

        A constraint only applies when both stages are present. Repeated
        stages are checked at each occurrence.

        Raises
        ------
        KeyError
            If a stage is not registered
        ValidationError
            If a stage appears before a stage it must run after

        """
        self._ensure_initialized()

        for index, name in enumerate(stage_names):
            metadata = self.get_metadata(name)
            later = set(stage_names[index + 1 :])
            for required_first in metadata.run_after:
                if required_first in later and required_first not in stage_names[:index]:
                    raise ValidationError(
                        f"Stage '{name}' must run after '{required_first}'",
                        parameter_name="stage_names",
                        parameter_value=list(stage_names),
                    )

    def clear(self) -> None:
        """Clear all registered stages.

        The built-in stages are registered again on next access. This is
        primarily useful for testing.

        """
        self._stages.clear()
        self._initialized = False
        logger.debug("Cleared stage registry")


# Global registry instance (preferred access pattern)
stage_registry = StageRegistry()

__all__ = [
    "ENTRY_POINT_GROUP",
    "StageRegistry",
    "stage_registry",
]
