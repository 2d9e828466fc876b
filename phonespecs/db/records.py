"""Record sink and read helpers for the ``phones`` table.

One row is one scraped product document::

    {"manufacturer": ..., "model": ..., "url": ..., "specifications": {...}}

No uniqueness is enforced; scraping the same phone twice stores two rows.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from time import time
from typing import Optional, Protocol

from phonespecs.db.models import StoredPhone
from phonespecs.errors import PersistenceError
from phonespecs.scraper.models import PhoneRecord


# ---------------------------------------------------------------------------
# Sink interface
# ---------------------------------------------------------------------------

class RecordSink(Protocol):
    """Anything the pipeline can hand finished records to."""

    def put(self, record: PhoneRecord) -> None:
        """Persist *record*.  Raise :class:`PersistenceError` on failure."""


class SqliteRecordSink:
    """Insert each record as one row of the ``phones`` table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def put(self, record: PhoneRecord) -> None:
        try:
            insert_record(self._conn, record)
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"could not store {record.product!r}: {exc}"
            ) from exc


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_phone(row: sqlite3.Row) -> StoredPhone:
    return StoredPhone(
        id=row["id"],
        manufacturer=row["manufacturer"],
        model=row["model"],
        url=row["url"],
        specifications=json.loads(row["specifications"] or "{}"),
        created_at=row["created_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def insert_record(conn: sqlite3.Connection, record: PhoneRecord) -> StoredPhone:
    """Insert *record* and return the stored row."""
    doc = record.to_document()
    phone = StoredPhone(
        id=str(uuid.uuid4()),
        manufacturer=doc["manufacturer"],
        model=doc["model"],
        url=doc["url"],
        specifications=doc["specifications"],
        created_at=int(time()),
    )
    with conn:
        conn.execute(
            """
            INSERT INTO phones (id, manufacturer, model, url, specifications, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                phone.id,
                phone.manufacturer,
                phone.model,
                phone.url,
                phone.specifications_json(),
                phone.created_at,
            ),
        )
    return phone


def list_records(
    conn: sqlite3.Connection,
    manufacturer: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[StoredPhone]:
    """Return stored phones in insertion order, optionally filtered by maker."""
    sql = "SELECT * FROM phones"
    params: list[object] = []
    if manufacturer:
        sql += " WHERE manufacturer = ?"
        params.append(manufacturer)
    sql += " ORDER BY created_at, rowid"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)
    rows = conn.execute(sql, params).fetchall()
    return [_row_to_phone(r) for r in rows]


def count_records(conn: sqlite3.Connection, manufacturer: Optional[str] = None) -> int:
    """Return the number of stored phones, optionally filtered by maker."""
    if manufacturer:
        row = conn.execute(
            "SELECT COUNT(*) FROM phones WHERE manufacturer = ?", (manufacturer,)
        ).fetchone()
    else:
        row = conn.execute("SELECT COUNT(*) FROM phones").fetchone()
    return row[0]
