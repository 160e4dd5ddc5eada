#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/rendering/table.py
"""Lowering of markdown tables into ``table``/``thead``/``tbody`` elements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from notepress.ast.nodes import Table, TableCell, TableRow
from notepress.hast.nodes import Element, HastNode

if TYPE_CHECKING:
    from notepress.rendering.to_hast import HastConverter


class TableLowering:
    """Convert a :class:`Table` into a rendering tree ``table`` element.

    The number of columns comes from the table's alignment list, not from
    the rows: extra cells in a row are dropped and missing cells are filled
    with empty cells carrying the column's alignment. A table without an
    alignment list uses each row's own width.

    The first row always becomes the ``thead``; the remaining rows, when
    there are any, go into a single ``tbody``. Sections, rows and the cells
    of a row are separated by line feeds.

    Parameters
    ----------
    converter : HastConverter
        Converter used for cell content and for rendering hints

    """

    def __init__(self, converter: HastConverter):
        self.converter = converter

    def lower(self, node: Table) -> Element:
        """Lower ``node``.

        Parameters
        ----------
        node : Table
            Table to convert. Non-row children are ignored.

        Returns
        -------
        Element
            The ``table`` element

        """
        rows = [row for row in node.children if isinstance(row, TableRow)]
        lowered = [self._row(row, node.align, header=index == 0) for index, row in enumerate(rows)]
        if not lowered:
            return self.converter.element(node, "table", {}, [])

        wrap = self.converter.wrap
        sections: list[HastNode] = [Element(tag_name="thead", children=wrap(lowered[:1], loose=True))]
        if len(lowered) > 1:
            sections.append(Element(tag_name="tbody", children=wrap(lowered[1:], loose=True)))
        return self.converter.element(node, "table", {}, wrap(sections, loose=True))

    def _row(self, row: TableRow, align: list[Optional[str]], header: bool) -> Element:
        cells = [cell for cell in row.children if isinstance(cell, TableCell)]
        tag_name = "th" if header else "td"
        columns = len(align) if align else len(cells)

        out: list[HastNode] = []
        for column in range(columns):
            properties = {"align": align[column] if column < len(align) else None}
            if column < len(cells):
                cell = cells[column]
                out.append(self.converter.element(cell, tag_name, properties, self.converter.all(cell)))
            else:
                out.append(Element(tag_name=tag_name, properties=properties))
        return self.converter.element(row, "tr", {}, self.converter.wrap(out, loose=True))


__all__ = ["TableLowering"]
