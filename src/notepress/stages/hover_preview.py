#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/hover_preview.py
"""Point relative images at the workspace so hover previews can load them."""

from __future__ import annotations

from pathlib import Path

from notepress.ast.nodes import Image
from notepress.pipeline.stage import TreeStage
from notepress.utils.text import is_relative_url


class HoverPreviewStage(TreeStage):
    """Rewrite relative image URLs to ``file://`` URLs under the note's vault.

    A hover preview is rendered outside the published site, so an image path
    relative to the vault would not resolve. Without a workspace root or a
    vault the tree is left unchanged.
    """

    name = "hover-preview"

    def visit_image(self, node: Image) -> Image:
        image = self._generic_transform(node)
        ws_root, vault = self.context.ws_root, self.context.vault
        if ws_root is None or vault is None or not is_relative_url(image.url):
            return image

        image.url = Path(ws_root, vault.fs_path, image.url).resolve().as_uri()
        return image
