"""Exception types raised by the store."""

from __future__ import annotations


class RentalbookError(Exception):
    """Base class for errors raised by rentalbook."""


class SchemaCollisionError(RentalbookError):
    """A sheet or table name is already claimed by an incompatible object."""


class RowPositionError(RentalbookError, IndexError):
    """A row position points outside a table's data body."""

    def __init__(self, table_name: str, position: int, row_count: int) -> None:
        self.table_name = table_name
        self.position = position
        self.row_count = row_count
        super().__init__(
            f"Row position {position} is out of range for {table_name} "
            f"({row_count} rows)"
        )
