from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from ..errors import InvalidElementKind, InvalidTableShape
from .elements import Table, TableCell, TableColumnDefinition, TableRow, TextBlock

_CELL_VALUE_TYPES = (str, int, float, bool)


def new_table_cells_with_text_block(values: Iterable[Any]) -> List[TableCell]:
    """Wrap each value in a table cell holding a single wrapped TextBlock."""
    cells: List[TableCell] = []
    for value in values:
        if isinstance(value, TableCell):
            cells.append(value)
            continue
        if value is None or not isinstance(value, _CELL_VALUE_TYPES):
            raise InvalidElementKind(f"unsupported table cell value {value!r} ({type(value).__name__})")
        cells.append(TableCell(items=[TextBlock(text=str(value), wrap=True)]))
    return cells


def _column_definitions(count: int) -> List[TableColumnDefinition]:
    return [TableColumnDefinition(width=1) for _ in range(count)]


def new_table_from_table_cells(
    rows: Sequence[Sequence[TableCell]],
    column_count: int = 0,
    *,
    first_row_as_header: bool = False,
    show_grid_lines: bool = True,
) -> Table:
    """Build a table from rows of cells.

    When ``column_count`` is 0 it is inferred from the first row; every row
    must then have exactly that many cells.
    """
    if not rows:
        raise InvalidTableShape("table requires at least one row of cells")
    if column_count < 0:
        raise InvalidTableShape(f"column count cannot be negative: {column_count}")

    width = column_count or len(rows[0])
    if width == 0:
        raise InvalidTableShape("table rows must contain at least one cell")

    table_rows: List[TableRow] = []
    for index, cells in enumerate(rows):
        if len(cells) != width:
            raise InvalidTableShape(f"row {index} has {len(cells)} cells; expected {width}")
        for cell in cells:
            if not isinstance(cell, TableCell):
                raise InvalidElementKind(f"table rows hold table cells, got {type(cell).__name__}")
        table_rows.append(TableRow(cells=list(cells)))

    return Table(
        columns=_column_definitions(width),
        rows=table_rows,
        first_row_as_header=first_row_as_header,
        show_grid_lines=show_grid_lines,
    )


def new_table_with_grid_from_table_cells(
    cells: Sequence[TableCell],
    cells_per_row: int,
    *,
    show_grid_lines: bool = True,
) -> Table:
    """Lay a flat list of cells out in rows of ``cells_per_row``.

    The last row is padded with empty cells so the grid stays rectangular.
    """
    if cells_per_row <= 0:
        raise InvalidTableShape(f"cells per row must be positive, got {cells_per_row}")
    if not cells:
        raise InvalidTableShape("table requires at least one cell")

    rows: List[List[TableCell]] = []
    for start in range(0, len(cells), cells_per_row):
        row = list(cells[start : start + cells_per_row])
        row.extend(TableCell() for _ in range(cells_per_row - len(row)))
        rows.append(row)

    return new_table_from_table_cells(rows, cells_per_row, show_grid_lines=show_grid_lines)


def new_table_from_values(
    rows: Sequence[Sequence[Any]],
    column_count: Optional[int] = None,
    *,
    first_row_as_header: bool = False,
    show_grid_lines: bool = True,
) -> Table:
    """Build a table from nested plain values, one TextBlock per cell."""
    cell_rows = [new_table_cells_with_text_block(row) for row in rows]
    return new_table_from_table_cells(
        cell_rows,
        column_count or 0,
        first_row_as_header=first_row_as_header,
        show_grid_lines=show_grid_lines,
    )
