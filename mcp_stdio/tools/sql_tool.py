"""Read-only SQL query tool for SQLite databases."""

from __future__ import annotations

import logging
import re
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import pandas as pd
from pandas.errors import DatabaseError

from mcp_stdio.tools import error_result, text_result

logger = logging.getLogger(__name__)

ALLOWED_START_KEYWORDS = ("SELECT", "WITH", "EXPLAIN")

_ALLOWED_START = re.compile(
    r"^\s*(?:%s)\b" % "|".join(ALLOWED_START_KEYWORDS),
    flags=re.IGNORECASE,
)

PathLike = Union[str, Path]


def _connect_read_only(db_path: PathLike) -> sqlite3.Connection:
    """Open `db_path` so that any write fails at the SQLite level."""
    uri = Path(db_path).resolve().as_uri() + "?mode=ro"
    return sqlite3.connect(uri, uri=True)


def run_query(sql: str, db_path: PathLike) -> pd.DataFrame:
    """Execute `sql` against a read-only connection and return the rows."""
    with closing(_connect_read_only(db_path)) as conn:
        return pd.read_sql_query(sql, conn)


class QueryDatabaseTool:
    """
    Execute read-only queries against a SQLite database.

    Parameters
    ----------
    db_path : Optional[path]
        Database used when the caller does not name one.
    databases : Optional[Mapping[str, path]]
        Additional databases the caller may select with the `database` argument.
    """

    def __init__(
        self,
        db_path: Optional[PathLike] = None,
        databases: Optional[Mapping[str, PathLike]] = None,
    ) -> None:
        self.db_path = db_path
        self.databases: Dict[str, PathLike] = dict(databases or {})

    def get_name(self) -> str:
        return "query_database"

    def get_description(self) -> str:
        return (
            "Execute a read-only SQL query (SELECT, WITH, EXPLAIN) against the SQLite database. "
            "Use this to inspect schema or retrieve data."
        )

    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "sql": {
                    "type": "string",
                    "description": "The read-only SQL statement to execute (SELECT, WITH or EXPLAIN)",
                },
                "database": {
                    "type": "string",
                    "description": "Optional name of a configured database to query instead of the default",
                    "default": "",
                },
            },
            "required": ["sql"],
        }

    def execute(self, args: Dict[str, Any]) -> Dict[str, Any]:
        sql = str(args.get("sql") or "").strip()
        database = str(args.get("database") or "")

        if not _ALLOWED_START.match(sql):
            allowed = ", ".join(ALLOWED_START_KEYWORDS)
            return error_result(
                f"Error: Only read-only queries ({allowed}) are allowed. Your query: {sql}"
            )

        db_path = self._resolve(database)
        if db_path is None:
            if database:
                available = ", ".join(sorted(self.databases)) or "none"
                return error_result(f"Error: Unknown database '{database}'. Available: {available}")
            return error_result("Error: No default database is configured.")

        try:
            df = run_query(sql, db_path)
        except (sqlite3.Error, DatabaseError) as exc:
            logger.warning("Query failed on %s: %s", db_path, exc)
            return error_result(f"SQL Error: {exc}")

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Query on %s returned %d rows", db_path, len(df))
        return text_result(df.to_json(orient="records", indent=4))

    def _resolve(self, database: str) -> Optional[PathLike]:
        if database:
            return self.databases.get(database)
        return self.db_path
