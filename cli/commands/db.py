"""Database commands: initialise and inspect stored phones."""

from pathlib import Path
from typing import Optional

import typer

from phonespecs.config import settings
from phonespecs.db import count_records, get_connection, init_db, list_records
from phonespecs.db.migrations import current_version

db_app = typer.Typer(help="Inspect the phone database.", no_args_is_help=True)


def _open(db: Optional[Path]):
    conn = get_connection(db)
    init_db(conn)
    return conn


@db_app.command("init")
def db_init(
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite file (default: settings.db_path)."),
) -> None:
    """Create the phones table if it does not exist."""
    conn = _open(db)
    try:
        version = current_version(conn)
    finally:
        conn.close()
    typer.echo(f"[db init] Database ready at {db or settings.db_path} (schema v{version})")


@db_app.command("list")
def db_list(
    manufacturer: Optional[str] = typer.Option(None, "--manufacturer", "-m", help="Filter by manufacturer."),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Show at most N phones."),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite file (default: settings.db_path)."),
) -> None:
    """List stored phones."""
    conn = _open(db)
    try:
        phones = list_records(conn, manufacturer=manufacturer, limit=limit)
    finally:
        conn.close()

    if not phones:
        typer.echo("[db list] No phones found.")
        return
    for p in phones:
        typer.echo(f"  {p.id[:8]}  [{p.manufacturer}]  {p.model!r}  ({len(p.specifications)} specs)  {p.url}")


@db_app.command("count")
def db_count(
    manufacturer: Optional[str] = typer.Option(None, "--manufacturer", "-m", help="Filter by manufacturer."),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite file (default: settings.db_path)."),
) -> None:
    """Count stored phones."""
    conn = _open(db)
    try:
        total = count_records(conn, manufacturer=manufacturer)
    finally:
        conn.close()
    typer.echo(f"[db count] {total}")
