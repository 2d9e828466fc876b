"""Centralised settings for the phonespecs scraper.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/107.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("PHONESPECS_WORKSPACE", Path.home() / ".phonespecs_data")
        )
    )
    db_override: str = field(
        default_factory=lambda: os.environ.get("PHONESPECS_DB", "")
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        if self.db_override:
            return Path(self.db_override)
        return self.workspace_dir / "phones.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    catalog_url: str = field(
        default_factory=lambda: os.environ.get(
            "CATALOG_URL", "https://www.gsmarena.com/makers.php3"
        )
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "10.0"))
    )
    fetch_max_attempts: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_MAX_ATTEMPTS", "3"))
    )
    fetch_retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_RETRY_BASE_DELAY", "1.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SCRAPER_USER_AGENT", _DEFAULT_USER_AGENT)
    )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    pacing_delay: float = field(
        default_factory=lambda: float(os.environ.get("PACING_DELAY", "0.5"))
    )


# Module-level singleton — import this everywhere:
#   from phonespecs.config import settings
settings = Settings()
