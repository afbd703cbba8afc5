"""Generic CRUD over one entity's Excel table.

Rows are addressed by ``position``: the 0-based offset into the table's
data body as returned by :meth:`TableRepository.list`. A position is only
meaningful until the next ``add_many``/``delete`` on the same table; a stale
but in-range position silently hits whichever row now sits there.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from numbers import Integral
from typing import TYPE_CHECKING, Any

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.worksheet.cell_range import CellRange
from openpyxl.worksheet.table import Table
from openpyxl.worksheet.worksheet import Worksheet

from rentalbook.codec import decode_row, encode_record
from rentalbook.errors import RentalbookError, RowPositionError
from rentalbook.models import EntityDefinition, Record, TableSchema
from rentalbook.schema import find_table

if TYPE_CHECKING:
    from rentalbook.store import RentalStore

logger = logging.getLogger(__name__)


# ── Cell helpers ─────────────────────────────────────────────────


def _set_value(cell: Cell, value: Any) -> None:
    cell.value = value
    # keep text that looks like a formula as text
    if isinstance(value, str) and value.startswith("="):
        cell.data_type = "s"


def _write_row(ws: Worksheet, row_idx: int, first_col: int, values: Sequence[Any]) -> None:
    for offset, value in enumerate(values):
        _set_value(ws.cell(row=row_idx, column=first_col + offset), value)


def _resize(table: Table, bounds: CellRange, max_row: int) -> None:
    ref = CellRange(
        min_col=bounds.min_col, min_row=bounds.min_row,
        max_col=bounds.max_col, max_row=max_row,
    ).coord
    table.ref = ref
    if table.autoFilter is not None:
        table.autoFilter.ref = ref


def _check_position(table_name: str, position: Any, row_count: int) -> int:
    if isinstance(position, bool) or not isinstance(position, Integral):
        raise TypeError("position must be an integer")
    position = int(position)
    if not 0 <= position < row_count:
        raise RowPositionError(table_name, position, row_count)
    return position


# ── Repository ───────────────────────────────────────────────────


class TableRepository:
    """List/add/update/delete for one :class:`EntityDefinition`.

    Every operation provisions the schema first, then runs as a single unit
    of work against the store's workbook.
    """

    def __init__(self, store: RentalStore, entity: EntityDefinition) -> None:
        self._store = store
        self.entity = entity

    def __repr__(self) -> str:
        return f"TableRepository({self.entity.name!r}, {self._store.path})"

    @property
    def name(self) -> str:
        return self.entity.name

    @property
    def schema(self) -> TableSchema:
        return self.entity.schema

    def _locate(self, wb: Workbook) -> tuple[Worksheet, Table, CellRange]:
        found = find_table(wb, self.schema.table_name)
        if found is None:
            raise RentalbookError(f"Table {self.schema.table_name} is missing from the workbook")
        ws, table = found
        return ws, table, CellRange(table.ref)

    def encode(self, record: Mapping[str, Any]) -> list[Any]:
        return encode_record(self.entity.fields, record)

    # ── Reads ────────────────────────────────────────────────────

    def list(self) -> list[Record]:
        """Return every row as a :class:`Record`, top to bottom."""
        self._store.ensure_schema()
        with self._store.session() as session:
            ws, _table, bounds = self._locate(session.workbook)
            headers = next(ws.iter_rows(
                min_row=bounds.min_row, max_row=bounds.min_row,
                min_col=bounds.min_col, max_col=bounds.max_col,
                values_only=True,
            ))
            if bounds.max_row == bounds.min_row:
                return []
            rows = ws.iter_rows(
                min_row=bounds.min_row + 1, max_row=bounds.max_row,
                min_col=bounds.min_col, max_col=bounds.max_col,
                values_only=True,
            )
            records = [decode_row(headers, row, i) for i, row in enumerate(rows)]
        logger.debug("Read %d rows from %s", len(records), self.schema.table_name)
        return records

    # ── Writes ───────────────────────────────────────────────────

    def add(self, record: Mapping[str, Any]) -> None:
        """Append *record* as the new last row."""
        self.add_many([record])

    def add_many(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Append several records in one unit of work; return how many."""
        rows = [self.encode(record) for record in records]
        self._store.ensure_schema()
        if not rows:
            return 0
        with self._store.session() as session:
            ws, table, bounds = self._locate(session.workbook)
            for offset, row in enumerate(rows, 1):
                _write_row(ws, bounds.max_row + offset, bounds.min_col, row)
            _resize(table, bounds, bounds.max_row + len(rows))
            session.mark_dirty()
        logger.debug("Appended %d rows to %s", len(rows), self.schema.table_name)
        return len(rows)

    def update(self, position: int, record: Mapping[str, Any]) -> None:
        """Overwrite the row currently at *position* with *record*."""
        row = self.encode(record)
        self._store.ensure_schema()
        with self._store.session() as session:
            ws, _table, bounds = self._locate(session.workbook)
            row_count = bounds.max_row - bounds.min_row
            position = _check_position(self.schema.table_name, position, row_count)
            _write_row(ws, bounds.min_row + 1 + position, bounds.min_col, row)
            session.mark_dirty()
        logger.debug("Updated row %d of %s", position, self.schema.table_name)

    def delete(self, position: int) -> None:
        """Remove the row at *position*; the rows below it move up by one."""
        self._store.ensure_schema()
        with self._store.session() as session:
            ws, table, bounds = self._locate(session.workbook)
            row_count = bounds.max_row - bounds.min_row
            position = _check_position(self.schema.table_name, position, row_count)
            for r_idx in range(bounds.min_row + 1 + position, bounds.max_row):
                for c_idx in range(bounds.min_col, bounds.max_col + 1):
                    source = ws.cell(row=r_idx + 1, column=c_idx)
                    target = ws.cell(row=r_idx, column=c_idx)
                    target.value = source.value
                    target.data_type = source.data_type
                    target.number_format = source.number_format
            for c_idx in range(bounds.min_col, bounds.max_col + 1):
                ws.cell(row=bounds.max_row, column=c_idx).value = None
            _resize(table, bounds, bounds.max_row - 1)
            session.mark_dirty()
        logger.debug("Deleted row %d of %s", position, self.schema.table_name)
