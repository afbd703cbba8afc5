"""The shared workbook document and its unit of work."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from openpyxl import Workbook

from rentalbook.entities import ENTITIES, entity_by_name
from rentalbook.io import open_workbook, save_workbook
from rentalbook.models import EntityDefinition
from rentalbook.repository import TableRepository
from rentalbook.schema import ensure_schema as provision
from rentalbook.seed import demo_rows

logger = logging.getLogger(__name__)


class WorkbookSession:
    """One unit of work: a loaded workbook plus a flag saying it must be saved."""

    def __init__(self, workbook: Workbook) -> None:
        self.workbook = workbook
        self.dirty = False

    def mark_dirty(self) -> None:
        self.dirty = True


class RentalStore:
    """All entity repositories over a single ``.xlsx`` file.

    Each repository call loads the file, works on it and, if anything
    changed, saves it once. There is no locking: the last writer wins.
    """

    def __init__(self, path: Path | str, entities: Iterable[EntityDefinition] = ENTITIES) -> None:
        self.path = Path(path)
        self.entities: tuple[EntityDefinition, ...] = tuple(entities)
        names = [e.name for e in self.entities]
        if len(set(names)) != len(names):
            raise ValueError(f"entity names must be unique: {names}")
        self._repositories = {e.name: TableRepository(self, e) for e in self.entities}

    def __repr__(self) -> str:
        return f"RentalStore({str(self.path)!r})"

    @contextmanager
    def session(self) -> Iterator[WorkbookSession]:
        """Load the workbook, yield it, and save once if it was marked dirty.

        Nothing is saved when the block raises.
        """
        session = WorkbookSession(open_workbook(self.path))
        yield session
        if session.dirty:
            save_workbook(session.workbook, self.path)

    # ── Repositories ─────────────────────────────────────────────

    def repository(self, name: str) -> TableRepository:
        return self._repositories[entity_by_name(name, self.entities).name]

    @property
    def repositories(self) -> tuple[TableRepository, ...]:
        return tuple(self._repositories.values())

    @property
    def vehicles(self) -> TableRepository:
        return self.repository("vehicles")

    @property
    def customers(self) -> TableRepository:
        return self.repository("customers")

    @property
    def rentals(self) -> TableRepository:
        return self.repository("rentals")

    @property
    def maintenance(self) -> TableRepository:
        return self.repository("maintenance")

    # ── Workbook-wide operations ─────────────────────────────────

    def ensure_schema(self) -> list[str]:
        """Create whatever sheets and tables are missing; return their names."""
        with self.session() as session:
            created = provision(session.workbook, [e.schema for e in self.entities])
            if created:
                session.mark_dirty()
        return created

    def seed_demo(self, today: date | None = None) -> dict[str, int]:
        """Insert the sample rows into every table that is still empty.

        Tables that already hold rows are left alone, so running it twice
        does not duplicate anything. Returns rows inserted per entity.
        """
        self.ensure_schema()
        samples = demo_rows(today or date.today())
        inserted: dict[str, int] = {}
        for repo in self.repositories:
            rows = samples.get(repo.name, [])
            if not rows or repo.list():
                inserted[repo.name] = 0
                continue
            records = [dict(zip(repo.schema.headers, row)) for row in rows]
            inserted[repo.name] = repo.add_many(records)
            logger.info("Seeded %d %s", inserted[repo.name], repo.name)
        return inserted
