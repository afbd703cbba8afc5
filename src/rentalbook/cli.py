"""CLI entry point for rentalbook."""

from __future__ import annotations

import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from enum import Enum
from pathlib import Path

import typer
from openpyxl.utils.exceptions import InvalidFileException
from rich.console import Console
from rich.table import Table as RichTable

from rentalbook import __version__
from rentalbook.codec import canonical_fields
from rentalbook.errors import RentalbookError, RowPositionError, SchemaCollisionError
from rentalbook.export import ExportFormat, export_records
from rentalbook.keys import normalize_key
from rentalbook.log import setup_logging
from rentalbook.models import Record
from rentalbook.repository import TableRepository
from rentalbook.store import RentalStore

app = typer.Typer(
    name="rentalbook",
    help="rentalbook: keep vehicles, customers, rentals and maintenance in one Excel workbook.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


class EntityOption(str, Enum):
    vehicles = "vehicles"
    customers = "customers"
    rentals = "rentals"
    maintenance = "maintenance"


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {msg}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"rentalbook v{__version__}")
        raise typer.Exit()


def _parse_fields(raw: list[str] | None) -> dict[str, str]:
    """Parse ``--field key=value`` pairs into ``{normalized_key: value}``."""
    if not raw:
        return {}
    fields: dict[str, str] = {}
    for item in raw:
        if "=" not in item:
            raise ValueError(f"Invalid --field value: {item!r}  (expected key=value)")
        key, value = item.split("=", 1)
        key_norm = normalize_key(key)
        if not key_norm:
            raise ValueError("--field entries must have a non-empty key (key=value)")
        fields[key_norm] = value.strip()
    return fields


def _parse_day(raw: str | None) -> date | None:
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid date {raw!r}: expected YYYY-MM-DD") from exc


def _repo(ctx: typer.Context, entity: EntityOption) -> TableRepository:
    store: RentalStore = ctx.obj
    return store.repository(entity.value)


def _render(repo: TableRepository, records: list[Record]) -> RichTable:
    tbl = RichTable(title=f"{repo.schema.sheet_name} ({len(records)})")
    tbl.add_column("#", justify="right", style="dim")
    for header in repo.schema.headers:
        tbl.add_column(header)
    for record in records:
        cells = ["" if record.get(key) is None else str(record.get(key)) for key in repo.schema.keys]
        tbl.add_row(str(record.position), *cells)
    return tbl


@contextmanager
def _cli_errors() -> Iterator[None]:
    """Map store errors onto exit codes: 2 for bad input, 1 for everything else."""
    try:
        yield
    except typer.Exit:
        raise
    except (RowPositionError, ValueError) as exc:
        _err(str(exc))
        raise typer.Exit(code=2)
    except SchemaCollisionError as exc:
        _err(f"Schema collision: {exc}")
        raise typer.Exit(code=1)
    except (RentalbookError, OSError, zipfile.BadZipFile, InvalidFileException) as exc:
        _err(str(exc))
        raise typer.Exit(code=1)
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    ctx: typer.Context,
    workbook: Path = typer.Option(
        Path("rentals.xlsx"), "--workbook", "-w",
        envvar="RENTALBOOK_WORKBOOK",
        help="Workbook used as the database (created on first use).",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log every table operation.",
    ),
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """rentalbook CLI."""
    setup_logging(verbose)
    ctx.obj = RentalStore(workbook)


# ── Schema commands ──────────────────────────────────────────────


@app.command()
def init(ctx: typer.Context) -> None:
    """Create any missing sheets and tables."""
    store: RentalStore = ctx.obj
    with _cli_errors():
        created = store.ensure_schema()
    if created:
        console.print(f"[blue]>[/blue] Created: {', '.join(created)}")
    else:
        console.print("[blue]>[/blue] Schema already present")
    console.print(f"  Workbook -> {store.path}")


@app.command()
def seed(
    ctx: typer.Context,
    today: str | None = typer.Option(
        None, "--today",
        help="Reference date (YYYY-MM-DD) for the demo rental and maintenance dates.",
    ),
) -> None:
    """Fill empty tables with demo rows."""
    store: RentalStore = ctx.obj
    with _cli_errors():
        inserted = store.seed_demo(_parse_day(today))
    for name, count in inserted.items():
        if count:
            console.print(f"[blue]>[/blue] {name}: {count} rows added")
        else:
            console.print(f"[yellow]![/yellow] {name}: already has rows, skipped")


# ── Row commands ─────────────────────────────────────────────────


@app.command("list")
def list_rows(
    ctx: typer.Context,
    entity: EntityOption = typer.Argument(..., help="Which table to show."),
) -> None:
    """Show every row with its current position."""
    repo = _repo(ctx, entity)
    with _cli_errors():
        records = repo.list()
    console.print(_render(repo, records))


@app.command()
def add(
    ctx: typer.Context,
    entity: EntityOption = typer.Argument(..., help="Which table to append to."),
    field: list[str] | None = typer.Option(
        None, "--field", "-f",
        help="Column value as key=value, key being the header in any case or spacing. "
             "E.g. -f plate=ZZZ-0001 -f year=2022",
    ),
) -> None:
    """Append a row; missing columns get their defaults."""
    repo = _repo(ctx, entity)
    with _cli_errors():
        repo.add(_parse_fields(field))
    console.print(f"[blue]>[/blue] Added 1 row to {repo.schema.table_name}")


@app.command()
def update(
    ctx: typer.Context,
    entity: EntityOption = typer.Argument(..., help="Which table to change."),
    position: int = typer.Argument(..., help="Row position as shown by `list`."),
    field: list[str] | None = typer.Option(
        None, "--field", "-f",
        help="Column value as key=value; columns not given keep their current value.",
    ),
) -> None:
    """Change columns of the row at POSITION."""
    repo = _repo(ctx, entity)
    with _cli_errors():
        fields = _parse_fields(field)
        records = repo.list()
        if not 0 <= position < len(records):
            raise RowPositionError(repo.schema.table_name, position, len(records))
        changes = canonical_fields(repo.entity.fields, fields)
        repo.update(position, {**records[position], **changes})
    console.print(f"[blue]>[/blue] Updated row {position} of {repo.schema.table_name}")


@app.command()
def delete(
    ctx: typer.Context,
    entity: EntityOption = typer.Argument(..., help="Which table to change."),
    position: int = typer.Argument(..., help="Row position as shown by `list`."),
) -> None:
    """Remove the row at POSITION; later rows move up by one."""
    repo = _repo(ctx, entity)
    with _cli_errors():
        repo.delete(position)
    console.print(f"[blue]>[/blue] Deleted row {position} of {repo.schema.table_name}")
    console.print("  [yellow]![/yellow] Positions after it have shifted; run `list` again")


# ── export command ───────────────────────────────────────────────


@app.command()
def export(
    ctx: typer.Context,
    out_dir: Path = typer.Option(
        Path("export"), "--out-dir", "-o",
        help="Directory for one file per table.",
    ),
    fmt: ExportFormat = typer.Option(
        ExportFormat.json, "--format",
        help="Output format: json or csv.",
    ),
) -> None:
    """Write every table to JSON or CSV files."""
    store: RentalStore = ctx.obj
    with _cli_errors():
        paths = export_records(store, out_dir, fmt)
    for path in paths:
        console.print(f"  Export -> {path}")
