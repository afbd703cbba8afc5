"""Schema and record types shared across the package."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from rentalbook.keys import normalize_key

Coercion = Callable[[Any, Any], Any]


def _to_name(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    if not value.strip():
        raise ValueError(f"{field_name} must not be empty")
    return value


def _to_string_tuple(values: Sequence[Any] | None, field_name: str) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        raise TypeError(f"{field_name} must be a sequence of strings")
    normalized: list[str] = []
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} items must be strings")
        normalized.append(item)
    return tuple(normalized)


@dataclass(frozen=True)
class TableSchema:
    """Where an entity lives in the workbook and its column layout.

    Header order is significant: it is the column-to-field mapping and must
    never change once rows exist.
    """

    sheet_name: str
    table_name: str
    headers: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "sheet_name", _to_name(self.sheet_name, "sheet_name"))
        object.__setattr__(self, "table_name", _to_name(self.table_name, "table_name"))
        headers = _to_string_tuple(self.headers, "headers")
        if not headers:
            raise ValueError("headers must not be empty")
        if any(not h.strip() for h in headers):
            raise ValueError("headers must not contain empty names")
        keys = [normalize_key(h) for h in headers]
        if len(set(keys)) != len(keys):
            raise ValueError(f"headers must be unique: {list(headers)}")
        object.__setattr__(self, "headers", headers)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(normalize_key(h) for h in self.headers)


@dataclass(frozen=True)
class FieldSpec:
    """How one column is filled from a loosely keyed record."""

    header: str
    coerce: Coercion
    default: Any = ""
    aliases: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "header", _to_name(self.header, "header"))
        object.__setattr__(self, "aliases", _to_string_tuple(self.aliases, "aliases"))

    @property
    def key(self) -> str:
        return normalize_key(self.header)

    @property
    def candidates(self) -> tuple[str, ...]:
        """Record keys consulted for this field, in priority order."""
        seen: list[str] = []
        names = (self.key, self.header, *self.aliases, *(normalize_key(a) for a in self.aliases))
        for name in names:
            if name not in seen:
                seen.append(name)
        return tuple(seen)


@dataclass(frozen=True)
class EntityDefinition:
    """A named entity kind: its table schema plus its field coercions."""

    name: str
    schema: TableSchema
    fields: tuple[FieldSpec, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _to_name(self.name, "name"))
        fields = tuple(self.fields)
        headers = tuple(f.header for f in fields)
        if headers != self.schema.headers:
            raise ValueError(
                f"{self.name}: field headers {list(headers)} do not match "
                f"schema headers {list(self.schema.headers)}"
            )
        object.__setattr__(self, "fields", fields)


class Record(dict[str, Any]):
    """A row decoded into ``{field_key: value}``.

    ``position`` is the 0-based offset of the row inside the table's data
    body at the time it was read. Any insert or delete on the same table
    invalidates it.
    """

    def __init__(self, values: Any = (), /, *, position: int = 0, **kwargs: Any) -> None:
        super().__init__(values, **kwargs)
        self.position = position

    def __repr__(self) -> str:
        return f"Record(position={self.position}, {dict.__repr__(self)})"

    def to_dict(self) -> dict[str, Any]:
        return {"position": self.position, **self}
