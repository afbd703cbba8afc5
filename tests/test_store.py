"""Store-level behaviour: unit of work, provisioning and demo seeding."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from openpyxl import load_workbook

import rentalbook.store as store_mod
from rentalbook.entities import VEHICLES
from rentalbook.store import RentalStore

TODAY = date(2025, 3, 10)


def _count_saves(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    saves: list[Path] = []
    real_save = store_mod.save_workbook

    def _counting_save(wb, path):  # type: ignore[no-untyped-def]
        saves.append(path)
        return real_save(wb, path)

    monkeypatch.setattr(store_mod, "save_workbook", _counting_save)
    return saves


def test_ensure_schema_saves_only_when_something_was_created(
    store: RentalStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    saves = _count_saves(monkeypatch)

    first = store.ensure_schema()
    second = store.ensure_schema()

    assert "tblVehicles" in first
    assert second == []
    assert len(saves) == 1


def test_empty_workbook_lists_nothing_for_every_entity(store: RentalStore) -> None:
    store.ensure_schema()

    for repo in store.repositories:
        assert repo.list() == []


def test_session_does_not_save_when_block_raises(store: RentalStore, workbook_path: Path) -> None:
    store.ensure_schema()

    with pytest.raises(RuntimeError):
        with store.session() as session:
            session.workbook["Vehicles"]["A2"] = "NAB-1234"
            session.mark_dirty()
            raise RuntimeError("boom")

    assert load_workbook(workbook_path)["Vehicles"]["A2"].value is None


def test_save_is_atomic_and_leaves_no_temp_file(store: RentalStore, workbook_path: Path) -> None:
    store.vehicles.add({"plate": "NAB-1234"})

    assert workbook_path.exists()
    assert list(workbook_path.parent.glob("*.tmp*")) == []


def test_repository_lookup(store: RentalStore) -> None:
    assert store.repository("Vehicles") is store.vehicles
    assert store.repository(" RENTALS ") is store.rentals
    assert store.maintenance.schema.table_name == "tblMaintenance"
    assert [r.name for r in store.repositories] == ["vehicles", "customers", "rentals", "maintenance"]

    with pytest.raises(KeyError, match="Unknown entity"):
        store.repository("bookings")


def test_store_rejects_duplicate_entity_names(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="unique"):
        RentalStore(tmp_path / "x.xlsx", entities=(VEHICLES, VEHICLES))


def test_store_with_custom_entities_only_provisions_those(tmp_path: Path) -> None:
    path = tmp_path / "fleet.xlsx"
    store = RentalStore(path, entities=(VEHICLES,))

    store.vehicles.add({"plate": "NAB-1234"})

    assert load_workbook(path).sheetnames == ["Vehicles"]
    with pytest.raises(KeyError):
        store.rentals  # noqa: B018


def test_unsupported_workbook_suffix_is_rejected(tmp_path: Path) -> None:
    store = RentalStore(tmp_path / "rentals.csv")

    with pytest.raises(ValueError, match="Unsupported workbook type"):
        store.ensure_schema()


# ── Seeding ──────────────────────────────────────────────────────


def test_seed_demo_populates_every_table(store: RentalStore) -> None:
    inserted = store.seed_demo(TODAY)

    assert inserted == {"vehicles": 4, "customers": 3, "rentals": 2, "maintenance": 2}
    vehicles = store.vehicles.list()
    assert len(vehicles) == 4
    assert vehicles[0] == {
        "plate": "NAB-1234",
        "make": "Toyota",
        "model": "Vios 1.3 E",
        "year": 2019,
        "transmission": "AT",
        "rate": 2000,
        "status": "Available",
    }
    assert vehicles[0].position == 0


def test_seed_demo_dates_are_relative_to_today(seeded_store: RentalStore) -> None:
    rentals = seeded_store.rentals.list()
    maintenance = seeded_store.maintenance.list()

    assert rentals[0]["startdate"] == "2025-03-08"
    assert rentals[0]["duedate"] == "2025-03-14"
    assert rentals[0]["actualreturn"] == ""
    assert rentals[0]["amount"] == 12000
    assert rentals[1]["actualreturn"] == "2025-02-08"
    assert rentals[1]["status"] == "Returned"
    assert maintenance[0]["date"] == "2025-02-23"
    assert maintenance[1]["odometer"] == 51000


def test_seed_demo_is_idempotent(seeded_store: RentalStore) -> None:
    again = seeded_store.seed_demo(date(2030, 1, 1))

    assert again == {"vehicles": 0, "customers": 0, "rentals": 0, "maintenance": 0}
    assert len(seeded_store.vehicles.list()) == 4
    assert seeded_store.rentals.list()[0]["startdate"] == "2025-03-08"


def test_seed_demo_fills_only_empty_tables(store: RentalStore) -> None:
    store.customers.add({"name": "Walk-in"})

    inserted = store.seed_demo(TODAY)

    assert inserted["customers"] == 0
    assert inserted["vehicles"] == 4
    assert [c["name"] for c in store.customers.list()] == ["Walk-in"]
