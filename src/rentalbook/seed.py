"""Demo rows used to populate an empty workbook."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any


def _iso(day: date) -> str:
    return day.isoformat()


def demo_rows(today: date) -> dict[str, list[list[Any]]]:
    """Return sample rows per entity, in header order, dated around *today*."""
    return {
        "vehicles": [
            ["NAB-1234", "Toyota", "Vios 1.3 E", 2019, "AT", 2000, "Available"],
            ["XYZ-5678", "Honda", "City 1.5", 2021, "AT", 2300, "Available"],
            ["AAA-1111", "Mitsubishi", "Mirage G4", 2018, "MT", 1700, "Maintenance"],
            ["BBB-2222", "Toyota", "Innova", 2020, "AT", 3500, "Reserved"],
        ],
        "customers": [
            ["Jane Doe", "0917-000-1111", "jane@example.com", "DL", "D-12345"],
            ["Juan Cruz", "0918-222-3333", "juan@example.com", "DL", "D-67890"],
            ["Maria S.", "0917-888-9999", "maria@example.com", "Passport", "P-556677"],
        ],
        "rentals": [
            [
                "RENT-2025-001", "Jane Doe", "NAB-1234",
                _iso(today - timedelta(days=2)), _iso(today + timedelta(days=4)), "",
                2000, 2000 * 6, "Ongoing",
            ],
            [
                "RENT-2025-002", "Juan Cruz", "XYZ-5678",
                _iso(today - timedelta(days=35)), _iso(today - timedelta(days=30)),
                _iso(today - timedelta(days=30)),
                2300, 2300 * 5, "Returned",
            ],
        ],
        "maintenance": [
            [_iso(today - timedelta(days=15)), "AAA-1111", "Oil Change", 42000, 1800,
             "5W-30 full synthetic"],
            [_iso(today - timedelta(days=70)), "XYZ-5678", "Tire", 51000, 12000,
             "2 tires replaced"],
        ],
    }
