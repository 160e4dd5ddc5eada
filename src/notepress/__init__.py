"""notepress - a configurable processing pipeline for note markdown.

notepress parses an extended markdown dialect (wikilinks, note references,
block anchors, hashtags, user tags, frontmatter variables) into a syntax tree,
runs it through an ordered sequence of transformation stages chosen from the
operating mode, the rendering flavor and the configuration, and returns the
transformed tree, rendered HTML or normalized markdown.

Key Features
------------
- Stage selection per mode (NO_DATA, FULL, IMPORT) and flavor
- Note reference expansion through nested pipelines
- Child-note and backlink navigation, publishing rules
- HTML rendering with table lowering, Pygments highlighting and heading anchors
- Stage registry with entry point plugin discovery

Examples
--------
Render a note without any surrounding data:

    >>> from notepress import Destination, PipelineOptions, build_rendering_pipeline, run
    >>> pipeline = build_rendering_pipeline(PipelineOptions(), {"dest": Destination.HTML})
    >>> run(pipeline, "See [[projects]]")
    '<p>See <a href="projects" class="wiki-link">projects</a></p>'

Render a note from an engine:

    >>> from notepress import InMemoryEngine, NoteProps, Vault, proc_rehype_full
    >>> vault = Vault(fs_path="notes")
    >>> engine = InMemoryEngine([NoteProps(id="p", fname="projects", vault=vault, body="# Projects")])
    >>> pipeline = proc_rehype_full({"vault": vault, "engine": engine, "fname": "projects"})
    >>> html = run(pipeline, engine.find_note("projects").body)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 11):
    raise ImportError(
        "notepress requires Python 3.11 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from notepress.api import (
    proc_rehype_full,
    proc_rehype_parse,
    proc_remark_full,
    proc_remark_parse,
    proc_remark_parse_full,
    proc_remark_parse_no_data,
)
from notepress.config import NotepressConfig, PublishingConfig, load_config
from notepress.engine import FileSystemEngine, InMemoryEngine, NoteEngine, NoteProps, Vault
from notepress.exceptions import (
    ConfigurationError,
    ContractViolation,
    DependencyError,
    NotepressError,
    ParsingError,
    RenderingError,
    StageError,
    ValidationError,
)
from notepress.logging_utils import configure_logging
from notepress.pipeline import (
    BacklinkHoverOptions,
    Destination,
    Diagnostic,
    Pipeline,
    PipelineBuilder,
    PipelineContext,
    PipelineData,
    PipelineOptions,
    ProcFlavor,
    ProcMode,
    PublishOptions,
    WikiLinksOptions,
    build_parsing_pipeline,
    build_rendering_pipeline,
    run,
)
from notepress.rendering.table import TableLowering
from notepress.stages import ParameterSpec, StageMetadata, stage_registry

__all__ = [
    "__version__",
    # Entry points
    "build_parsing_pipeline",
    "build_rendering_pipeline",
    "run",
    "proc_remark_full",
    "proc_remark_parse",
    "proc_remark_parse_no_data",
    "proc_remark_parse_full",
    "proc_rehype_parse",
    "proc_rehype_full",
    # Pipeline
    "Pipeline",
    "PipelineBuilder",
    "PipelineContext",
    "PipelineData",
    "PipelineOptions",
    "ProcMode",
    "ProcFlavor",
    "Destination",
    "Diagnostic",
    "WikiLinksOptions",
    "PublishOptions",
    "BacklinkHoverOptions",
    "TableLowering",
    # Stages
    "stage_registry",
    "StageMetadata",
    "ParameterSpec",
    # Configuration and engine
    "NotepressConfig",
    "PublishingConfig",
    "load_config",
    "NoteEngine",
    "InMemoryEngine",
    "FileSystemEngine",
    "NoteProps",
    "Vault",
    "configure_logging",
    # Exceptions
    "NotepressError",
    "ValidationError",
    "ConfigurationError",
    "ContractViolation",
    "ParsingError",
    "StageError",
    "RenderingError",
    "DependencyError",
]
