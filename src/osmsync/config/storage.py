"""Location of the element database."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

DATABASE_FILENAME: Final[str] = "osmsync.db"


def get_data_dir() -> Path:
    """Directory holding the SQLite database.

    ``OSMSYNC_DATA_DIR`` wins; otherwise ``$XDG_DATA_HOME/osmsync`` (or
    ``~/.local/share/osmsync``).
    """

    explicit = os.getenv("OSMSYNC_DATA_DIR")
    if explicit:
        return Path(explicit).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / "osmsync").expanduser().resolve()


def get_database_uri() -> str:
    """``DATABASE_URI`` if set, else a SQLite file in the data dir (created on demand)."""

    override = os.getenv("DATABASE_URI")
    if override:
        return override
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{data_dir / DATABASE_FILENAME}"
