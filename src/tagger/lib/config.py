"""Startup configuration.

The config is an explicit object built once by the caller (usually the CLI)
and handed to ``init``; nothing here is cached at module level.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from tagger.lib.database import JOURNAL_MODES
from tagger.lib.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "data.sqlite3"
DEFAULT_CONFIG_NAME = "config.json"


@dataclass
class TaggerConfig:
    database: str = DEFAULT_DATABASE
    journal_mode: str = "WAL"
    # None means the migration scripts shipped inside the package
    migrations_location: Optional[str] = None
    echo: bool = False


def _validate_and_normalize_config(raw: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    known = {"database", "journal_mode", "migrations_location", "echo"}
    for key in sorted(set(raw) - known):
        logger.debug("ignoring unknown config key: %s", key)

    database = raw.get("database")
    if database is not None:
        if not isinstance(database, str) or not database.strip():
            raise ConfigError("'database' must be a non-empty string")
        out["database"] = database.strip()

    journal_mode = raw.get("journal_mode")
    if journal_mode is not None:
        if not isinstance(journal_mode, str) or journal_mode.upper() not in JOURNAL_MODES:
            raise ConfigError(f"'journal_mode' must be one of {', '.join(JOURNAL_MODES)}")
        out["journal_mode"] = journal_mode.upper()

    location = raw.get("migrations_location")
    if location is not None:
        if not isinstance(location, str):
            raise ConfigError("'migrations_location' must be a string")
        out["migrations_location"] = location

    if "echo" in raw:
        if not isinstance(raw["echo"], bool):
            raise ConfigError("'echo' must be true or false")
        out["echo"] = raw["echo"]
    return out


def load_config(path: Optional[str] = None) -> TaggerConfig:
    """Load a JSON config file into a ``TaggerConfig``.

    With no path, ``config.json`` in the current directory is used when it
    exists. A missing file yields the defaults; a file that exists but cannot
    be read or parsed raises ``ConfigError``.
    """
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        if not candidate.exists():
            return TaggerConfig()
        p = candidate
    else:
        p = Path(path)
        if not p.exists():
            logger.debug("config path does not exist: %s", p)
            return TaggerConfig()

    logger.debug("loading config from: %s", p)
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"failed to load config file {p}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"config file {p} must contain a JSON object")
    return TaggerConfig(**_validate_and_normalize_config(data))
