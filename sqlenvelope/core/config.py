"""Utilities for loading application settings from YAML configuration files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

SUPPORTED_DRIVERS = ("memory", "sqlite", "postgres")


@dataclass(slots=True)
class DatabaseSettings:
    driver: str = "memory"
    path: str = ":memory:"
    host: str = "localhost"
    port: int = 5432
    name: str = "postgres"
    user: str = "postgres"
    password_env: str | None = None
    sslmode: str = "disable"

    def resolve_password(self) -> str:
        if not self.password_env:
            return ""
        return os.getenv(self.password_env, "")


@dataclass(slots=True)
class PathsSettings:
    query_logs_dir: str | None = None


@dataclass(slots=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(slots=True)
class Settings:
    database: DatabaseSettings
    paths: PathsSettings
    logging: LoggingSettings


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_settings(path: str | Path) -> Settings:
    """Read configuration from *path* and return structured settings."""

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    raw = _load_yaml(config_path)

    database_raw = raw.get("database") or {}
    driver = str(database_raw.get("driver", "memory")).lower()
    if driver not in SUPPORTED_DRIVERS:
        raise ValueError(
            f"Unknown database driver '{driver}'. Expected one of: {', '.join(SUPPORTED_DRIVERS)}"
        )
    password_env = database_raw.get("password_env")
    database = DatabaseSettings(
        driver=driver,
        path=str(database_raw.get("path", ":memory:")),
        host=str(database_raw.get("host", "localhost")),
        port=int(database_raw.get("port", 5432)),
        name=str(database_raw.get("name", "postgres")),
        user=str(database_raw.get("user", "postgres")),
        password_env=str(password_env) if password_env else None,
        sslmode=str(database_raw.get("sslmode", "disable")),
    )

    paths_raw = raw.get("paths") or {}
    query_logs_dir = paths_raw.get("query_logs_dir")
    paths = PathsSettings(query_logs_dir=str(query_logs_dir) if query_logs_dir else None)

    logging_raw = raw.get("logging") or {}
    logging_settings = LoggingSettings(level=str(logging_raw.get("level", "INFO")).upper())

    return Settings(database=database, paths=paths, logging=logging_settings)


__all__ = [
    "DatabaseSettings",
    "LoggingSettings",
    "PathsSettings",
    "SUPPORTED_DRIVERS",
    "Settings",
    "load_settings",
]
