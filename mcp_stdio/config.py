"""
Central configuration for the MCP stdio server.
Loads environment variables from a .env file at import time.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

# --- Load .env early so everything importing config sees the vars ---
# This looks for a .env in the current working dir or parents.
load_dotenv()

#: Environment variable names
SERVER_NAME_ENV = "MCP_SERVER_NAME"
LOG_LEVEL_ENV = "MCP_LOG_LEVEL"
DB_PATH_ENV = "MCP_DB_PATH"
DATABASES_ENV = "MCP_DATABASES"

#: Log level used when MCP_LOG_LEVEL is not set.
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(slots=True)
class Settings:
    """Values the entry point needs to build and start the server."""

    server_name: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL
    db_path: Optional[Path] = None
    databases: Dict[str, Path] = field(default_factory=dict)


def parse_databases(raw: str) -> Dict[str, Path]:
    """
    Parse `name=path` pairs separated by commas, e.g.
    ``reporting=/data/r.sqlite,analytics=/data/a.sqlite``.

    Raises
    ------
    ValueError
        If a pair has no `=` or an empty name or path.
    """
    databases: Dict[str, Path] = {}
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, sep, path = chunk.partition("=")
        name, path = name.strip(), path.strip()
        if not sep or not name or not path:
            raise ValueError(f"Malformed {DATABASES_ENV} entry '{chunk}', expected name=path.")
        databases[name] = Path(path)
    return databases


def load_settings() -> Settings:
    """Read server settings from the environment."""
    db_path = os.environ.get(DB_PATH_ENV)
    return Settings(
        server_name=os.environ.get(SERVER_NAME_ENV) or None,
        log_level=(os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper(),
        db_path=Path(db_path) if db_path else None,
        databases=parse_databases(os.environ.get(DATABASES_ENV, "")),
    )
