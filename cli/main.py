"""phonespecs CLI — entry-point for crawling and inspecting phone specs.

Usage:
    python cli/main.py            # full crawl with default settings
    python cli/main.py --help

Commands:
    crawl   → walk the whole catalog and store every phone
    phone   → scrape a single phone page and print its specs
    db      → initialise / inspect the phone database
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from phonespecs.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import signal
from typing import Optional

import typer

from cli.commands.db import db_app
from cli.rendering import render_specs
from phonespecs.config import settings
from phonespecs.db import SqliteRecordSink, get_connection, init_db
from phonespecs.errors import FetchError, Interrupted
from phonespecs.pipeline import run_pipeline
from phonespecs.scraper import StopSignal, extract_details, fetch_page

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="phonespecs",
    help="Phone catalog scraper.",
)
app.add_typer(db_app, name="db")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Run the full crawl when no sub-command is given."""
    if ctx.invoked_subcommand is None:
        crawl(catalog_url=None, db=None)


# ---------------------------------------------------------------------------
# Crawl
# ---------------------------------------------------------------------------
@app.command("crawl")
def crawl(
    catalog_url: Optional[str] = typer.Option(None, "--catalog-url", help="Manufacturer list page."),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite file (default: settings.db_path)."),
) -> None:
    """Crawl every manufacturer and phone, storing one row per phone."""
    stop = StopSignal()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: stop.stop())

    conn = None
    try:
        conn = get_connection(db)
        init_db(conn)
        typer.echo(f"[crawl] Storing phones in {db or settings.db_path}")
        run_pipeline(SqliteRecordSink(conn), catalog_url, stop=stop)
    except Interrupted:
        typer.echo("[crawl] Scraping interrupted.", err=True)
        raise typer.Exit(EXIT_INTERRUPTED)
    except KeyboardInterrupt:
        typer.echo("[crawl] Scraping interrupted.", err=True)
        raise typer.Exit(EXIT_INTERRUPTED)
    except FetchError as exc:
        typer.echo(f"[crawl] Could not retrieve manufacturer links: {exc}", err=True)
        raise typer.Exit(1)
    except Exception as exc:
        typer.echo(f"[crawl] An error occurred during scraping: {exc}", err=True)
        raise typer.Exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        if conn is not None:
            conn.close()
            typer.echo("[crawl] Database connection closed.")


# ---------------------------------------------------------------------------
# Single phone
# ---------------------------------------------------------------------------
@app.command("phone")
def phone(
    url: str = typer.Argument(..., help="Phone detail page URL."),
) -> None:
    """Scrape one phone page and print the extracted specs (nothing is stored)."""
    typer.echo(f"[phone] Fetching {url!r} …")
    try:
        page = fetch_page(url)
    except FetchError as exc:
        typer.echo(f"[phone] ✗ {exc}", err=True)
        raise typer.Exit(1)

    specs = extract_details(page)
    typer.echo(f"[phone] HTTP {page.status_code} — {len(specs)} spec(s)")
    typer.echo("")
    typer.echo(render_specs(specs))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
