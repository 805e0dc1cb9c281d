from __future__ import annotations

import json

import pytest

from teamsnotify.adaptivecard import (
    TableCell,
    TableRow,
    new_card,
    new_message_from_card,
    new_table_cells_with_text_block,
    new_table_from_table_cells,
    new_table_from_values,
    new_table_with_grid_from_table_cells,
)
from teamsnotify.errors import InvalidElementKind, InvalidTableShape


def _render_table(table):
    card = new_card()
    card.add_element(False, table)
    message = new_message_from_card(card)
    message.prepare()
    return json.loads(message.payload)["attachments"][0]["content"]["body"][0]


def _cell_text(cell):
    return cell["items"][0]["text"] if cell["items"] else None


def test_table_with_header_row() -> None:
    table = new_table_from_values(
        [["Host", "Status", "Latency"], ["web-1", "up", 12], ["web-2", "down", 0.5]],
        first_row_as_header=True,
    )

    rendered = _render_table(table)

    assert rendered["type"] == "Table"
    assert len(rendered["columns"]) == 3
    assert all(column == {"type": "TableColumnDefinition", "width": 1} for column in rendered["columns"])
    assert len(rendered["rows"]) == 3
    assert rendered["firstRowAsHeader"] is True
    assert rendered["showGridLines"] is True
    assert [_cell_text(cell) for cell in rendered["rows"][2]["cells"]] == ["web-2", "down", "0.5"]


def test_cells_wrap_text_blocks() -> None:
    cells = new_table_cells_with_text_block(["a", 1, True])

    assert all(isinstance(cell, TableCell) for cell in cells)
    assert [cell.items[0].text for cell in cells] == ["a", "1", "True"]
    assert all(cell.items[0].wrap for cell in cells)


def test_existing_cells_pass_through() -> None:
    existing = TableCell()

    assert new_table_cells_with_text_block([existing])[0] is existing


@pytest.mark.parametrize("value", [None, {"nested": 1}, ["list"]])
def test_unsupported_cell_value(value) -> None:
    with pytest.raises(InvalidElementKind):
        new_table_cells_with_text_block([value])


def test_row_length_mismatch() -> None:
    with pytest.raises(InvalidTableShape):
        new_table_from_values([["a", "b"], ["c"]])


def test_explicit_column_count_mismatch() -> None:
    cells = [new_table_cells_with_text_block(["a", "b"])]

    with pytest.raises(InvalidTableShape):
        new_table_from_table_cells(cells, column_count=3)


@pytest.mark.parametrize("rows", [[], [[]]])
def test_empty_table_rejected(rows) -> None:
    with pytest.raises(InvalidTableShape):
        new_table_from_table_cells(rows)


def test_grid_pads_last_row() -> None:
    cells = new_table_cells_with_text_block(["1", "2", "3", "4", "5"])

    table = new_table_with_grid_from_table_cells(cells, 2, show_grid_lines=False)

    rendered = _render_table(table)
    assert len(rendered["columns"]) == 2
    assert [[_cell_text(cell) for cell in row["cells"]] for row in rendered["rows"]] == [
        ["1", "2"],
        ["3", "4"],
        ["5", None],
    ]
    assert rendered["showGridLines"] is False
    assert rendered["firstRowAsHeader"] is False


@pytest.mark.parametrize("cells_per_row", [0, -2])
def test_grid_requires_positive_width(cells_per_row: int) -> None:
    with pytest.raises(InvalidTableShape):
        new_table_with_grid_from_table_cells(new_table_cells_with_text_block(["x"]), cells_per_row)


def test_row_added_later_is_checked_on_prepare() -> None:
    table = new_table_from_values([["a", "b"]])
    table.rows.append(TableRow(cells=new_table_cells_with_text_block(["only one"])))

    with pytest.raises(InvalidTableShape):
        _render_table(table)


def test_table_requires_columns() -> None:
    table = new_table_from_values([["a"]])
    table.columns.clear()

    with pytest.raises(InvalidElementKind):
        new_card().add_element(False, table)


def test_table_rows_rejected_outside_table() -> None:
    row = TableRow(cells=new_table_cells_with_text_block(["a"]))

    with pytest.raises(InvalidElementKind):
        new_card().add_element(False, row)
