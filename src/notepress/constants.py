#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the notepress library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Pipeline Defaults - Link prefixes, nesting limits, list formatting
3. Rendering Constants - CSS classes and fixed attributes of generated markup
4. Dependency Tables - Optional packages checked by ``requires_dependencies``
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

Alignment = Literal["left", "center", "right"]

# Parser syntax features a stage can request from the markdown parser
SyntaxFeature = Literal["frontmatter", "math", "footnotes"]

# =============================================================================
# Pipeline Defaults
# =============================================================================

# Published note links live under this path unless an assets prefix is configured
DEFAULT_NOTES_PREFIX = "/notes/"

# Reference expansion stops descending past this many nested references
DEFAULT_MAX_NOTE_REF_DEPTH = 3

DEFAULT_LIST_BULLET = "-"
DEFAULT_LIST_ITEM_INDENT = 1

DEFAULT_HASHTAG_PREFIX = "tags."
DEFAULT_USER_TAG_PREFIX = "user."

# Scheme used for cross-vault wikilinks, e.g. [[dendron://vault/fname]]
VAULT_LINK_SCHEME = "dendron://"

# Config file names searched for by ``discover_config_file``
CONFIG_FILENAMES = ["notepress.yml", "notepress.yaml", "notepress.json", "notepress.toml"]

# =============================================================================
# Rendering Constants
# =============================================================================

ANCHOR_HEADING_PROPERTIES = {"aria-hidden": "true", "class": ["anchor-heading", "icon-link"]}
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
HIGHLIGHT_CLASS = "highlight"

WIKI_LINK_CLASS = "wiki-link"
HASHTAG_CLASS = "color-tag"
USER_TAG_CLASS = "user-tag"
BLOCK_ANCHOR_CLASS = "block-anchor"
NOTE_REF_CLASS = "portal-container"
NOTE_REF_ERROR_CLASS = "portal-error"
NOTE_REF_TITLE_CLASS = "portal-head"
NOTE_REF_BODY_CLASS = "portal-body"
BACKLINK_FOCUS_CLASS = "backlink-focus"
MERMAID_CLASS = "mermaid"
FOOTNOTES_CLASS = "footnotes"

MATH_INLINE_CLASSES = ["math", "math-inline"]
MATH_DISPLAY_CLASSES = ["math", "math-display"]

# Elements serialized without a closing tag
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# =============================================================================
# Dependency Tables
# =============================================================================

DEPS_MARKDOWN = (("mistune", "mistune", ">=3.0.0"),)
DEPS_HTML = (("beautifulsoup4", "bs4", ">=4.12.0"),)
DEPS_HIGHLIGHT = (("pygments", "pygments", ">=2.15.0"),)
