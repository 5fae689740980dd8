"""Schema migrations for the element tables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent

log = logging.getLogger(__name__)


def _build_config(connection: Connection) -> Config:
    # env.py migrates over this connection instead of opening its own
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    config.attributes["connection"] = connection
    return config


def upgrade_head(*, engine: Engine) -> None:
    """Bring the element schema behind ``engine`` to the latest revision."""

    with engine.begin() as connection:
        config = _build_config(connection)
        head = ScriptDirectory.from_config(config).get_current_head()
        current = MigrationContext.configure(connection).get_current_revision()
        if current == head:
            log.debug("Element schema already at revision %s", head)
            return
        log.info("Migrating element schema from %s to %s", current or "empty", head)
        command.upgrade(config, "head")
