#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/variables.py
"""Frontmatter variable substitution (``{{fm.title}}``)."""

from __future__ import annotations

import re
from typing import Any

from notepress.ast.nodes import Text
from notepress.ast.transforms import TextPatternTransformer, TransformResult
from notepress.pipeline.stage import TreeStage

_MISSING = object()


def lookup_variable(variables: dict[str, Any], path: str) -> Any:
    """Resolve a dotted ``path`` in nested mappings, or return a sentinel."""
    value: Any = variables
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


class VariablesStage(TreeStage, TextPatternTransformer):
    """Replace ``{{fm.key}}`` with the value of ``key`` in the note's frontmatter.

    Nested keys use dots (``{{fm.author.name}}``). An unknown key is recorded
    as a diagnostic and the placeholder is left in place.
    """

    name = "variables"
    pattern = re.compile(r"\{\{\s*fm\.([\w.-]+)\s*\}\}")

    def replace_match(self, match: re.Match[str]) -> TransformResult:
        key = match.group(1)
        value = lookup_variable(self.context.fm or {}, key)
        if value is _MISSING:
            self.diagnostic(f"Unknown frontmatter variable: {key}")
            return None
        return Text(value="" if value is None else str(value))
