#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/extended_image.py
"""Image properties written after the image: ``![alt](src){width: 50%}``."""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from notepress.ast.nodes import Image, Node, Text
from notepress.pipeline.stage import TreeStage

logger = logging.getLogger(__name__)

_PROPS_PATTERN = re.compile(r"^\{([^{}\n]*)\}")


def props_to_style(props: dict[str, Any]) -> str:
    """Render a property mapping as an inline CSS declaration list."""
    return "; ".join(f"{key}: {value}" for key, value in props.items())


class ExtendedImageStage(TreeStage):
    """Attach ``{key: value}`` properties following an image to the image.

    The properties are parsed as a YAML flow mapping, stored under
    ``data["props"]`` and rendered as the ``style`` attribute. The properties
    text is removed from the document.
    """

    name = "extended-image"

    def _transform_children(self, children: list[Node]) -> list[Node]:
        transformed = super()._transform_children(children)
        result: list[Node] = []
        index = 0
        while index < len(transformed):
            node = transformed[index]
            result.append(node)
            following = transformed[index + 1] if index + 1 < len(transformed) else None
            if isinstance(node, Image) and isinstance(following, Text):
                remainder = self._attach_props(node, following.value)
                if remainder is not None:
                    if remainder:
                        result.append(Text(value=remainder))
                    index += 2
                    continue
            index += 1
        return result

    def _attach_props(self, image: Image, text: str) -> str | None:
        """Move properties from the start of ``text`` onto ``image``.

        Returns the rest of the text, or None when ``text`` does not start
        with a valid properties block.
        """
        match = _PROPS_PATTERN.match(text)
        if match is None:
            return None

        try:
            props = yaml.safe_load("{" + match.group(1) + "}")
        except yaml.YAMLError as e:
            self.diagnostic(f"Invalid image properties {match.group(0)!r}: {e}")
            return None
        if not isinstance(props, dict) or not props:
            return None

        image.data["props"] = props
        h_properties = dict(image.data.get("h_properties", {}))
        h_properties["style"] = props_to_style(props)
        image.data["h_properties"] = h_properties
        return text[match.end() :]
