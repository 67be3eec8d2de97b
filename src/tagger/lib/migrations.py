"""Apply the packaged Alembic revisions to a database.

All pending revisions run inside a single transaction opened here, so a
failing revision leaves the database exactly as it was before the upgrade
started (including the ``alembic_version`` bookkeeping table).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from tagger.lib.errors import SchemaError

logger = logging.getLogger(__name__)

DEFAULT_MIGRATIONS_LOCATION = str(Path(__file__).resolve().parents[1] / "migrations")


def alembic_config(migrations_location: Optional[str] = None) -> Config:
    """Build an in-memory Alembic config pointing at the migration scripts."""
    cfg = Config()
    cfg.set_main_option("script_location", migrations_location or DEFAULT_MIGRATIONS_LOCATION)
    return cfg


def head_revision(migrations_location: Optional[str] = None) -> Optional[str]:
    script = ScriptDirectory.from_config(alembic_config(migrations_location))
    return script.get_current_head()


def current_revision(connection) -> Optional[str]:
    """Return the revision stamped in the database, or None for an empty one."""
    return MigrationContext.configure(connection).get_current_revision()


def upgrade_to_latest(engine, migrations_location: Optional[str] = None) -> str:
    """Upgrade the database behind ``engine`` to the latest revision.

    A database that is already at head is left untouched.

    Raises:
        SchemaError: if the scripts cannot be loaded or any revision fails.
    """
    cfg = alembic_config(migrations_location)
    try:
        head = ScriptDirectory.from_config(cfg).get_current_head()
        with engine.begin() as connection:
            before = current_revision(connection)
            if before == head:
                logger.debug("schema already at %s", head)
                return head
            logger.info("upgrading schema from %s to %s", before or "<empty>", head)
            cfg.attributes["connection"] = connection
            command.upgrade(cfg, "head")
    except Exception as exc:
        logger.error("schema upgrade failed: %s", exc)
        raise SchemaError(f"cannot prepare schema: {exc}") from exc
    return head
