"""Dump every entity table to JSON or CSV files."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import pandas as pd

from rentalbook.io import write_csv, write_json
from rentalbook.models import Record, TableSchema
from rentalbook.store import RentalStore

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    json = "json"
    csv = "csv"


def records_frame(schema: TableSchema, records: list[Record]) -> pd.DataFrame:
    """Tabulate *records* under the table's own headers, position first."""
    columns = ["position", *schema.headers]
    data = [
        [record.position, *(record.get(key) for key in schema.keys)]
        for record in records
    ]
    return pd.DataFrame(data, columns=columns)


def export_records(
    store: RentalStore, out_dir: Path, fmt: ExportFormat = ExportFormat.json,
) -> list[Path]:
    """Write ``<entity>.json`` or ``<entity>.csv`` per table into *out_dir*."""
    out_dir = Path(out_dir)
    written: list[Path] = []
    for repo in store.repositories:
        records = repo.list()
        if fmt is ExportFormat.csv:
            path = write_csv(out_dir / f"{repo.name}.csv", records_frame(repo.schema, records))
        else:
            path = write_json(
                out_dir / f"{repo.name}.json", [record.to_dict() for record in records],
            )
        logger.info("Exported %d %s -> %s", len(records), repo.name, path)
        written.append(path)
    return written
