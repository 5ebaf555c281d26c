"""
Unit-of-work access to the person and image collections.

``EntityStore`` wraps one SQLite connection.  Reads (``find_by_id``,
``all``, ``count``) run immediately.  Writes (``add``, ``update``,
``remove``) are only staged; ``commit`` applies every staged change in a
single transaction, so either all of them become visible or none do.
Closing the store discards anything that was not committed.

Entities are the pydantic models from ``schemas``.  ``add`` always
assigns a fresh opaque id and ``update`` never touches the id; both are
explicit methods of the store rather than behaviour of the entities.
"""

import logging
import sqlite3
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple, Type

from pydantic import BaseModel

from .db import get_connection
from ..schemas.image import ImageEntry
from ..schemas.person import PersonEntry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Collection:
    """Mapping between an entity model and its table.

    ``columns`` pairs model attribute names with column names; the
    first pair must be the ``id``.
    """

    table: str
    model: Type[BaseModel]
    columns: Tuple[Tuple[str, str], ...]

    @property
    def column_list(self) -> str:
        return ", ".join(column for _, column in self.columns)

    def to_params(self, entity: BaseModel) -> tuple:
        return tuple(getattr(entity, attr) for attr, _ in self.columns)

    def from_row(self, row: sqlite3.Row) -> BaseModel:
        return self.model(**{attr: row[column] for attr, column in self.columns})


PEOPLE = Collection(
    table="people",
    model=PersonEntry,
    columns=(
        ("id", "id"),
        ("first_name", "first_name"),
        ("last_name", "last_name"),
        ("gender", "gender"),
        ("age", "age"),
        ("interests", "interests"),
        ("avatar_id", "avatar_id"),
        ("addr1", "addr1"),
        ("addr2", "addr2"),
        ("country", "country"),
        ("state", "state"),
        ("city", "city"),
        ("zip_code", "zip_code"),
    ),
)

IMAGES = Collection(
    table="images",
    model=ImageEntry,
    columns=(
        ("id", "id"),
        ("person_id", "person_id"),
        ("data", "data"),
    ),
)

_COLLECTIONS = {c.model: c for c in (PEOPLE, IMAGES)}


def new_id() -> str:
    """Return a new opaque entity id."""
    return uuid.uuid4().hex


class EntityStore:
    """Staged add/update/remove over the people and images tables."""

    def __init__(self, conn: Optional[sqlite3.Connection] = None) -> None:
        self._conn = conn if conn is not None else get_connection()
        self._pending: List[Tuple[str, Collection, BaseModel]] = []

    def __enter__(self) -> "EntityStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._pending:
            logger.debug("Discarding %d uncommitted change(s)", len(self._pending))
        self._pending.clear()
        self._conn.close()

    # Reads

    def find_by_id(self, collection: Collection, entity_id: Optional[str]) -> Optional[BaseModel]:
        """Return the entity whose id equals ``entity_id`` exactly, or ``None``."""
        if entity_id is None:
            return None
        row = self._conn.execute(
            f"SELECT {collection.column_list} FROM {collection.table} WHERE id = ?",
            (entity_id,),
        ).fetchone()
        return collection.from_row(row) if row else None

    def all(self, collection: Collection) -> List[BaseModel]:
        """Return every entity of ``collection`` in insertion order."""
        rows = self._conn.execute(
            f"SELECT {collection.column_list} FROM {collection.table} ORDER BY rowid"
        ).fetchall()
        return [collection.from_row(row) for row in rows]

    def count(self, collection: Collection) -> int:
        row = self._conn.execute(f"SELECT COUNT(*) AS n FROM {collection.table}").fetchone()
        return row["n"]

    # Staged writes

    def add(self, entity: BaseModel) -> str:
        """Stage an insert under a newly assigned id and return that id.

        Any id already present on ``entity`` is discarded.  The new id is
        visible on ``entity`` immediately, before ``commit``.
        """
        collection = self._collection_for(entity)
        entity.id = new_id()
        self._pending.append(("add", collection, entity))
        return entity.id

    def add_with_id(self, entity: BaseModel) -> str:
        """Stage an insert that keeps the caller's id (used for seeding)."""
        if not entity.id:
            return self.add(entity)
        self._stage("add", entity)
        return entity.id

    def update(self, entity: BaseModel) -> None:
        """Stage a full-row update; the entity's id is preserved."""
        self._stage("update", entity)

    def remove(self, entity: BaseModel) -> None:
        self._stage("remove", entity)

    def commit(self) -> int:
        """Apply all staged changes atomically and return how many there were.

        If any statement fails the transaction is rolled back and the
        error propagates; nothing staged is retried.
        """
        pending, self._pending = self._pending, []
        if not pending:
            return 0
        with self._conn:
            for op, collection, entity in pending:
                self._apply(op, collection, entity)
        logger.debug("Committed %d change(s)", len(pending))
        return len(pending)

    @staticmethod
    def _collection_for(entity: BaseModel) -> Collection:
        try:
            return _COLLECTIONS[type(entity)]
        except KeyError:
            raise TypeError(f"No collection stores {type(entity).__name__} entities") from None

    def _stage(self, op: str, entity: BaseModel) -> None:
        self._pending.append((op, self._collection_for(entity), entity))

    def _apply(self, op: str, collection: Collection, entity: BaseModel) -> None:
        params = collection.to_params(entity)
        if op == "add":
            placeholders = ", ".join("?" for _ in collection.columns)
            self._conn.execute(
                f"INSERT INTO {collection.table} ({collection.column_list}) VALUES ({placeholders})",
                params,
            )
        elif op == "update":
            assignments = ", ".join(f"{column} = ?" for _, column in collection.columns[1:])
            self._conn.execute(
                f"UPDATE {collection.table} SET {assignments} WHERE id = ?",
                params[1:] + (params[0],),
            )
        elif op == "remove":
            self._conn.execute(f"DELETE FROM {collection.table} WHERE id = ?", (entity.id,))
        else:
            raise ValueError(f"Unknown store operation {op!r}")
