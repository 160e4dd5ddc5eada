#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/utils/text.py
"""Text processing utilities for stages.

Functions
---------
slugify : Convert heading text to a URL-safe id
fname_to_title : Derive a display title from a dotted note name
split_frontmatter : Separate a leading YAML block from a note body
is_relative_url : Tell document-relative URLs from absolute ones

Examples
--------
Basic slugification:

    >>> from notepress.utils.text import slugify
    >>> slugify("My Heading Title")
    'my-heading-title'

Unique ids within one document:

    >>> seen = {}
    >>> slugify("Intro", seen_slugs=seen), slugify("Intro", seen_slugs=seen)
    ('intro', 'intro-1')

"""

from __future__ import annotations

import re
import unicodedata

_STRIP_PATTERN = re.compile(r"[^\w\- ]", re.UNICODE)


def slugify(text: str, *, seen_slugs: dict[str, int] | None = None, max_length: int = 100) -> str:
    """Create a heading id from text.

    Ids follow the GitHub convention: lowercase, punctuation removed,
    spaces turned into hyphens, and repeated ids suffixed with ``-1``,
    ``-2`` and so on.

    Parameters
    ----------
    text : str
        Heading text content
    seen_slugs : dict[str, int] or None, default = None
        Occurrence counts of previously generated slugs (mutated in place).
        When provided, duplicate slugs get a numeric suffix.
    max_length : int, default = 100
        Maximum length of the base slug, applied before collision suffixes

    Returns
    -------
    str
        Slug, unique within ``seen_slugs`` when given

    Examples
    --------
    >>> slugify("API Reference (v2.0)")
    'api-reference-v20'
    >>> slugify("Café résumé")
    'café-résumé'

    """
    normalized = unicodedata.normalize("NFC", text).strip().lower()
    slug = _STRIP_PATTERN.sub("", normalized).replace(" ", "-")

    if len(slug) > max_length:
        slug = slug[:max_length]

    if seen_slugs is None:
        return slug

    base = slug
    while slug in seen_slugs:
        seen_slugs[base] += 1
        slug = f"{base}-{seen_slugs[base]}"
    seen_slugs.setdefault(base, 0)
    seen_slugs.setdefault(slug, 0)
    return slug


def fname_to_title(fname: str) -> str:
    """Derive a display title from a dotted note name.

    >>> fname_to_title("projects.notepress.design-notes")
    'Design Notes'

    """
    last = fname.split(".")[-1]
    return " ".join(part.capitalize() for part in re.split(r"[-_\s]+", last) if part)


_FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split a leading ``---`` fenced YAML block from the note body.

    Parameters
    ----------
    text : str
        Full note source

    Returns
    -------
    tuple of (str or None, str)
        The YAML text without fences (None when the note has no frontmatter)
        and the remaining body

    """
    match = _FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None, text
    return match.group(1), text[match.end() :]


_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def is_relative_url(url: str) -> bool:
    """Return True for a URL without a scheme, host or leading slash.

    >>> is_relative_url("assets/diagram.png"), is_relative_url("/assets/diagram.png")
    (True, False)

    """
    return bool(url) and not url.startswith(("/", "#")) and _SCHEME_PATTERN.match(url) is None


__all__ = [
    "slugify",
    "fname_to_title",
    "split_frontmatter",
    "is_relative_url",
]
