"""Database layer package.

Public re-exports so callers can write::

    from phonespecs.db import get_connection, init_db, SqliteRecordSink
"""

from phonespecs.db.connection import get_connection
from phonespecs.db.migrations import init_db
from phonespecs.db.records import RecordSink, SqliteRecordSink, count_records, list_records

__all__ = [
    "get_connection",
    "init_db",
    "RecordSink",
    "SqliteRecordSink",
    "list_records",
    "count_records",
]
