"""SQLite connection provider built on the standard library driver."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from sqlenvelope.integrations.dbapi_connection import DBAPIConnection


def connect_sqlite(path: str | Path = ":memory:") -> DBAPIConnection:
    """Open *path* in autocommit mode and wrap it as a connection provider."""

    target = str(path)
    if target != ":memory:":
        resolved = Path(target).expanduser()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        target = str(resolved)

    # FastAPI runs sync handlers on worker threads; access is serialized by the caller.
    raw = sqlite3.connect(target, isolation_level=None, check_same_thread=False)
    return DBAPIConnection(raw_connection=raw, error_types=(sqlite3.Error,))


__all__ = ["connect_sqlite"]
