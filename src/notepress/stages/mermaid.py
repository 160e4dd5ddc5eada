#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/mermaid.py
"""Mermaid diagrams, rendered client-side."""

from __future__ import annotations

import html

from notepress.ast.nodes import CodeBlock, HTMLBlock, Node
from notepress.constants import MERMAID_CLASS
from notepress.pipeline.stage import TreeStage


class MermaidStage(TreeStage):
    """Replace ```` ```mermaid ```` code blocks with a ``div.mermaid`` block."""

    name = "mermaid"

    def visit_code_block(self, node: CodeBlock) -> Node:
        if (node.lang or "").lower() != "mermaid":
            return self._generic_transform(node)
        return HTMLBlock(value=f'<div class="{MERMAID_CLASS}">{html.escape(node.value, quote=False)}</div>')
