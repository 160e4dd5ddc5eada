#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/tags.py
"""Hashtags (``#tag``) and user tags (``@name``).

Both are shorthand links to a note in a reserved hierarchy: ``#ml.python``
links to ``tags.ml.python`` and ``@jane`` links to ``user.jane``.
"""

from __future__ import annotations

import re

from notepress.ast.nodes import HashTag, UserTag
from notepress.ast.transforms import TextPatternTransformer, TransformResult
from notepress.constants import DEFAULT_HASHTAG_PREFIX, DEFAULT_USER_TAG_PREFIX
from notepress.pipeline.stage import TreeStage

# Dotted segments, no trailing punctuation
_TAG_BODY = r"[\w-]+(?:\.[\w-]+)*"


class HashtagsStage(TreeStage, TextPatternTransformer):
    """Recognize ``#tag``; a tag may not start with a digit."""

    name = "hashtags"
    pattern = re.compile(r"(?<![\w#&/\[|])#(?![\d#])(" + _TAG_BODY + ")")

    def __init__(self, prefix: str = DEFAULT_HASHTAG_PREFIX):
        self.prefix = prefix

    def replace_match(self, match: re.Match[str]) -> TransformResult:
        return HashTag(value=match.group(0), fname=f"{self.prefix}{match.group(1)}")


class UserTagsStage(TreeStage, TextPatternTransformer):
    """Recognize ``@name``, but not the ``@`` inside an e-mail address."""

    name = "user-tags"
    pattern = re.compile(r"(?<![\w@.\[|])@(" + _TAG_BODY + ")")

    def __init__(self, prefix: str = DEFAULT_USER_TAG_PREFIX):
        self.prefix = prefix

    def replace_match(self, match: re.Match[str]) -> TransformResult:
        return UserTag(value=match.group(0), fname=f"{self.prefix}{match.group(1)}")
