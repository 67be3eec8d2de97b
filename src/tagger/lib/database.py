import logging
import os
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tagger.lib.errors import ConfigError, StorageError

logger = logging.getLogger(__name__)

JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")


def get_engine(url: str | None = None, journal_mode: str = "WAL", echo: bool = False):
    """Create a SQLAlchemy engine. Defaults to in-memory SQLite when url is None.

    SQLite engines hold exactly one connection (``StaticPool``) and are set up
    so that ``BEGIN`` is emitted by SQLAlchemy rather than the sqlite3 driver,
    which makes DDL inside a transaction roll back like any other statement.
    """
    url = normalize_db_url(url or "sqlite:///:memory:")
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, future=True, pool_pre_ping=True)

    mode = journal_mode.upper()
    if mode not in JOURNAL_MODES:
        raise ConfigError(f"unsupported journal_mode: {journal_mode!r}")

    engine = create_engine(url, echo=echo, future=True, poolclass=StaticPool)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # stop the driver from issuing its own BEGIN/COMMIT around DDL
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(f"PRAGMA journal_mode={mode}")
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()
        logger.debug("opened sqlite connection journal_mode=%s", mode)

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def normalize_db_url(value: str) -> str:
    """Normalize a database location into a SQLAlchemy URL.

    - If value already looks like a URL (contains '://'), return as-is.
    - ':memory:' maps to an in-memory SQLite database.
    - Anything else is treated as a filesystem path to a SQLite file; its
      parent directory is created if missing (``StorageError`` when that fails).
    """
    if "://" in value:
        return value
    if value == ":memory:":
        return "sqlite:///:memory:"

    p = Path(os.path.expanduser(value))
    if not p.parent.exists():
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create database directory {p.parent}: {exc}") from exc
    # sqlite URLs want forward slashes even on Windows
    return f"sqlite:///{p.as_posix()}"


def get_sessionmaker(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine, migrations_location: str | None = None) -> str:
    """Bring the schema up to date by applying pending migrations.

    Returns the revision the database is at afterwards.
    """
    # Import lazily; the migrations env imports this module.
    from tagger.lib.migrations import upgrade_to_latest

    return upgrade_to_latest(engine, migrations_location)


class InMemoryAdapter:
    """Lightweight in-memory DB adapter for tests.

    Usage:
        adapter = InMemoryAdapter()
        session = adapter.session()
    """

    def __init__(self):
        self.engine = get_engine("sqlite:///:memory:")
        self.Session = get_sessionmaker(self.engine)
        init_db(self.engine)

    def session(self):
        return self.Session()
