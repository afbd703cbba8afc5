"""Schema provisioner: make sure every entity's sheet and table exist.

Safe to call before every operation. Lookups are explicit membership
checks; nothing already present is touched, so a second call is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.cell_range import CellRange
from openpyxl.worksheet.table import Table, TableStyleInfo
from openpyxl.worksheet.worksheet import Worksheet

from rentalbook.errors import SchemaCollisionError
from rentalbook.models import TableSchema

logger = logging.getLogger(__name__)

# ── Style constants ──────────────────────────────────────────────

HEADER_FONT = Font(name="Calibri", bold=True, size=11)
HEADER_FILL = PatternFill(start_color="CCEABB", end_color="CCEABB", fill_type="solid")
TABLE_STYLE = "TableStyleMedium2"

_MIN_COLUMN_WIDTH = 12


# ── Lookups ──────────────────────────────────────────────────────


def find_sheet(wb: Workbook, name: str) -> Worksheet | None:
    """Return the worksheet titled *name* (case-insensitive), or ``None``.

    Raises
    ------
    SchemaCollisionError
        If the name belongs to a chart sheet.
    """
    wanted = name.lower()
    for title in wb.sheetnames:
        if title.lower() != wanted:
            continue
        sheet = wb[title]
        if not isinstance(sheet, Worksheet):
            raise SchemaCollisionError(f"Sheet name {name!r} is taken by a chart sheet")
        return sheet
    return None


def find_table(wb: Workbook, name: str) -> tuple[Worksheet, Table] | None:
    """Return ``(worksheet, table)`` for the table called *name*, or ``None``.

    Table names are workbook-wide and compared case-insensitively.
    """
    wanted = name.lower()
    for ws in wb.worksheets:
        for table_name in ws.tables:
            if table_name.lower() == wanted:
                return ws, ws.tables[table_name]
    return None


# ── Creation ─────────────────────────────────────────────────────


def _create_sheet(wb: Workbook, name: str) -> Worksheet:
    ws = wb.create_sheet(title=name)
    wb.active = ws
    logger.info("Created sheet %s", name)
    return ws


def _write_header_row(ws: Worksheet, headers: Iterable[str]) -> int:
    ncols = 0
    for c_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=c_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        letter = get_column_letter(c_idx)
        ws.column_dimensions[letter].width = max(len(header) + 4, _MIN_COLUMN_WIDTH)
        ncols = c_idx
    return ncols


def _create_table(ws: Worksheet, schema: TableSchema) -> Table:
    ref = f"A1:{get_column_letter(len(schema.headers))}1"
    header_range = CellRange(ref)
    for existing_name, existing_ref in ws.tables.items():
        if not header_range.isdisjoint(CellRange(existing_ref)):
            raise SchemaCollisionError(
                f"Cannot create {schema.table_name} at {ws.title}!{ref}: "
                f"range overlaps table {existing_name} ({existing_ref})"
            )

    _write_header_row(ws, schema.headers)
    table = Table(displayName=schema.table_name, ref=ref)
    table.tableStyleInfo = TableStyleInfo(
        name=TABLE_STYLE, showFirstColumn=False,
        showLastColumn=False, showRowStripes=True, showColumnStripes=False,
    )
    try:
        ws.add_table(table)
    except ValueError as exc:
        raise SchemaCollisionError(
            f"Cannot create table {schema.table_name}: {exc}"
        ) from exc
    logger.info("Created table %s on %s!%s", schema.table_name, ws.title, ref)
    return table


# ── Public API ───────────────────────────────────────────────────


def ensure_schema(wb: Workbook, schemas: Iterable[TableSchema]) -> list[str]:
    """Create any missing sheet or table named by *schemas*.

    Returns the names of the objects created; an empty list means the
    workbook was already provisioned and has not been modified.
    """
    created: list[str] = []
    for schema in schemas:
        ws = find_sheet(wb, schema.sheet_name)
        if ws is None:
            ws = _create_sheet(wb, schema.sheet_name)
            created.append(schema.sheet_name)

        if find_table(wb, schema.table_name) is None:
            _create_table(ws, schema)
            created.append(schema.table_name)
    return created
