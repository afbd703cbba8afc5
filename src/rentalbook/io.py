"""I/O helpers: load and atomically save the workbook, write export files."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl import Workbook, load_workbook

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")

# ── Workbook ─────────────────────────────────────────────────────


def open_workbook(path: Path) -> Workbook:
    """Load the workbook at *path*, or return an empty one if it is missing.

    The empty workbook has no sheets at all; provisioning adds them.

    Raises
    ------
    ValueError
        If *path* is a directory or not an ``.xlsx``/``.xlsm`` file.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in WORKBOOK_SUFFIXES:
        raise ValueError(f"Unsupported workbook type: {suffix!r}. Use .xlsx or .xlsm")
    if path.is_dir():
        raise ValueError(f"Workbook path is a directory, not a file: {path}")

    if not path.exists():
        logger.debug("No workbook at %s, starting empty", path)
        wb = Workbook()
        active_sheet = wb.active
        if active_sheet is not None:
            wb.remove(active_sheet)  # remove default sheet
        return wb

    return load_workbook(path, keep_vba=(suffix == ".xlsm"))


def save_workbook(wb: Workbook, path: Path) -> Path:
    """Save *wb* to *path* via a temp file so readers never see half a file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.stem}.tmp{path.suffix}")
    wb.save(tmp_path)
    tmp_path.replace(path)
    logger.debug("Saved workbook %s", path)
    return path


# ── Export ───────────────────────────────────────────────────────


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def write_json(path: Path, data: Any) -> Path:
    """Write *data* as pretty-printed JSON to *path* (atomic + deterministic)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(
        data,
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
        default=_json_default,
    ) + "\n"
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(payload, encoding="utf-8")
    tmp_path.replace(path)
    return path


def write_csv(path: Path, frame: pd.DataFrame) -> Path:
    """Write *frame* to *path* as UTF-8 CSV without the index (atomic)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    frame.to_csv(tmp_path, index=False, encoding="utf-8")
    tmp_path.replace(path)
    return path
