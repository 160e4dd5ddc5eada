#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/__init__.py
"""Pipeline stages and their registry.

Each built-in stage lives in its own module and is described by a
:class:`StageMetadata` entry in ``_builtin_metadata``. The registry loads the
built-in entries on first access and discovers plugin stages through the
``notepress.stages`` entry point group.

Examples
--------
    >>> from notepress.stages import stage_registry
    >>> "wikilinks" in stage_registry.list_stages()
    True

"""

from __future__ import annotations

from notepress.stages.metadata import ParameterSpec, StageMetadata
from notepress.stages.registry import ENTRY_POINT_GROUP, StageRegistry, stage_registry

__all__ = [
    "ParameterSpec",
    "StageMetadata",
    "StageRegistry",
    "stage_registry",
    "ENTRY_POINT_GROUP",
]
