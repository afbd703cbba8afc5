from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from rentalbook.store import RentalStore

TODAY = date(2025, 3, 10)


@pytest.fixture()
def workbook_path(tmp_path: Path) -> Path:
    return tmp_path / "rentals.xlsx"


@pytest.fixture()
def store(workbook_path: Path) -> RentalStore:
    return RentalStore(workbook_path)


@pytest.fixture()
def seeded_store(store: RentalStore) -> RentalStore:
    store.seed_demo(TODAY)
    return store
