"""Tests for sheet/table provisioning."""

from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.table import Table

from rentalbook.entities import ENTITIES, VEHICLES
from rentalbook.errors import SchemaCollisionError
from rentalbook.schema import HEADER_FILL, ensure_schema, find_sheet, find_table

SCHEMAS = [e.schema for e in ENTITIES]


def _empty_workbook() -> Workbook:
    wb = Workbook()
    wb.remove(wb.active)
    return wb


def _header_values(ws, ncols: int) -> list:  # type: ignore[no-untyped-def]
    return [ws.cell(row=1, column=c).value for c in range(1, ncols + 1)]


def test_ensure_schema_creates_every_sheet_and_table() -> None:
    wb = _empty_workbook()

    created = ensure_schema(wb, SCHEMAS)

    assert wb.sheetnames == ["Vehicles", "Customers", "Rentals", "Maintenance"]
    assert created == [
        "Vehicles", "tblVehicles",
        "Customers", "tblCustomers",
        "Rentals", "tblRentals",
        "Maintenance", "tblMaintenance",
    ]
    for schema in SCHEMAS:
        ws = wb[schema.sheet_name]
        table = ws.tables[schema.table_name]
        assert table.ref == f"A1:{chr(ord('A') + len(schema.headers) - 1)}1"
        assert _header_values(ws, len(schema.headers)) == list(schema.headers)


def test_new_sheet_becomes_active() -> None:
    wb = _empty_workbook()

    ensure_schema(wb, [VEHICLES.schema])

    assert wb.active.title == "Vehicles"


def test_header_row_is_bold_with_fill() -> None:
    wb = _empty_workbook()

    ensure_schema(wb, [VEHICLES.schema])

    cell = wb["Vehicles"]["A1"]
    assert cell.font.bold is True
    assert cell.fill.fill_type == "solid"
    assert cell.fill.start_color.rgb.endswith("CCEABB")
    assert HEADER_FILL.start_color.rgb.endswith("CCEABB")


def test_ensure_schema_twice_is_a_no_op(tmp_path: Path) -> None:
    wb = _empty_workbook()
    ensure_schema(wb, SCHEMAS)
    path = tmp_path / "book.xlsx"
    wb.save(path)

    reloaded = load_workbook(path)
    created = ensure_schema(reloaded, SCHEMAS)

    assert created == []
    assert reloaded.sheetnames == ["Vehicles", "Customers", "Rentals", "Maintenance"]
    ws = reloaded["Vehicles"]
    assert list(ws.tables.keys()) == ["tblVehicles"]
    assert ws.tables["tblVehicles"].ref == "A1:G1"
    assert ws.max_row == 1
    assert _header_values(ws, 7) == list(VEHICLES.schema.headers)


def test_existing_table_headers_are_never_rewritten() -> None:
    wb = _empty_workbook()
    ensure_schema(wb, [VEHICLES.schema])
    wb["Vehicles"]["A1"] = "Plate No"

    assert ensure_schema(wb, [VEHICLES.schema]) == []
    assert wb["Vehicles"]["A1"].value == "Plate No"


def test_existing_sheet_without_table_only_gets_the_table() -> None:
    wb = Workbook()
    wb.active.title = "Vehicles"

    created = ensure_schema(wb, [VEHICLES.schema])

    assert created == ["tblVehicles"]
    assert wb.sheetnames == ["Vehicles"]


def test_table_on_another_sheet_counts_as_present() -> None:
    wb = Workbook()
    fleet = wb.active
    fleet.title = "Fleet"
    for c_idx, header in enumerate(VEHICLES.schema.headers, 1):
        fleet.cell(row=1, column=c_idx, value=header)
    fleet.add_table(Table(displayName="TBLVEHICLES", ref="A1:G1"))

    created = ensure_schema(wb, [VEHICLES.schema])

    assert created == ["Vehicles"]
    assert wb["Vehicles"].tables == {}
    found = find_table(wb, "tblVehicles")
    assert found is not None
    assert found[0].title == "Fleet"


def test_overlapping_table_on_target_sheet_is_a_collision() -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "Vehicles"
    ws["A1"] = "Other"
    ws["B1"] = "Stuff"
    ws.add_table(Table(displayName="tblOther", ref="A1:B3"))

    with pytest.raises(SchemaCollisionError, match="tblOther"):
        ensure_schema(wb, [VEHICLES.schema])


def test_chart_sheet_with_entity_name_is_a_collision() -> None:
    wb = _empty_workbook()
    wb.create_chartsheet("Vehicles")

    with pytest.raises(SchemaCollisionError, match="chart sheet"):
        ensure_schema(wb, [VEHICLES.schema])


def test_find_sheet_and_find_table_report_absence_without_raising() -> None:
    wb = _empty_workbook()

    assert find_sheet(wb, "Vehicles") is None
    assert find_table(wb, "tblVehicles") is None

    ensure_schema(wb, [VEHICLES.schema])
    assert find_sheet(wb, "vehicles") is wb["Vehicles"]
