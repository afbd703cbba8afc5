"""Row codec: header-ordered cell values <-> keyed records.

Decoding is a plain zip of normalised headers and cell values. Encoding is
deliberately forgiving: a missing or malformed field never raises, it falls
back to that field's default (``""`` for text, ``0`` for numbers).
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from numbers import Integral, Real
from typing import Any

from rentalbook.keys import normalize_key
from rentalbook.models import FieldSpec, Record

# ── Coercions ────────────────────────────────────────────────────


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def as_text(value: Any, default: Any = "") -> Any:
    """Coerce a text column value; dates are stored as ``YYYY-MM-DD``."""
    if _is_empty(value):
        return default
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def as_number(value: Any, default: Any = 0) -> Any:
    """Coerce a numeric column value, falling back to *default*.

    ``"2022"`` becomes ``2022`` and ``"12.5"`` becomes ``12.5``; anything
    that does not parse (``"abc"``, ``NaN``) becomes *default*.
    """
    if _is_empty(value):
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, (Real, Decimal)):
        try:
            number = float(value)
        except (ValueError, OverflowError):
            return default
        return number if math.isfinite(number) else default
    if isinstance(value, str):
        token = value.strip()
        if "_" in token:
            return default
        try:
            return int(token)
        except ValueError:
            pass
        try:
            number = float(token)
        except ValueError:
            return default
        return number if math.isfinite(number) else default
    return default


# ── Decode / encode ──────────────────────────────────────────────


def decode_row(headers: Sequence[Any], row: Sequence[Any], position: int) -> Record:
    """Zip *headers* with *row* into a :class:`Record` at *position*.

    Blank cells decode to ``""``. Headers past the end of a short row map
    to ``None``; surplus row values are ignored.
    """
    values: dict[str, Any] = {}
    for idx, header in enumerate(headers):
        if idx < len(row):
            cell = row[idx]
            values[normalize_key(header)] = "" if cell is None else cell
        else:
            values[normalize_key(header)] = None
    return Record(values, position=position)


def _lookup(spec: FieldSpec, record: Mapping[str, Any]) -> Any:
    for name in spec.candidates:
        value = record.get(name)
        if not _is_empty(value):
            return value
    return None


def encode_record(fields: Sequence[FieldSpec], record: Mapping[str, Any]) -> list[Any]:
    """Build a storage row from *record* following *fields* order."""
    return [spec.coerce(_lookup(spec, record), spec.default) for spec in fields]


def canonical_fields(fields: Sequence[FieldSpec], record: Mapping[str, Any]) -> dict[str, Any]:
    """Re-key *record* onto each field's canonical key.

    Any candidate spelling (key, header or alias) is accepted; keys that
    belong to no field are dropped.
    """
    resolved: dict[str, Any] = {}
    for spec in fields:
        for name in spec.candidates:
            if name in record:
                resolved[spec.key] = record[name]
                break
    return resolved
