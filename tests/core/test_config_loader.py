"""Tests for loading application settings from YAML."""

# ruff: noqa: PLR2004

from __future__ import annotations

from pathlib import Path

import pytest

from sqlenvelope.core.config import load_settings


def test_load_settings_parses_postgres_section(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "dev.yaml"
    config_path.write_text(
        """
database:
  driver: Postgres
  host: db.internal
  port: 6543
  name: test
  user: reporter
  password_env: TEST_DB_PASSWORD
paths:
  query_logs_dir: logs/queries
logging:
  level: debug
        """,
        encoding="utf-8",
    )
    monkeypatch.setenv("TEST_DB_PASSWORD", "s3cret")

    settings = load_settings(config_path)

    assert settings.database.driver == "postgres"
    assert settings.database.host == "db.internal"
    assert settings.database.port == 6543
    assert settings.database.sslmode == "disable"
    assert settings.database.resolve_password() == "s3cret"
    assert settings.paths.query_logs_dir == "logs/queries"
    assert settings.logging.level == "DEBUG"


def test_load_settings_defaults_for_empty_file(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    settings = load_settings(config_path)

    assert settings.database.driver == "memory"
    assert settings.database.resolve_password() == ""
    assert settings.paths.query_logs_dir is None
    assert settings.logging.level == "INFO"


def test_load_settings_rejects_unknown_driver(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("database:\n  driver: oracle\n", encoding="utf-8")

    with pytest.raises(ValueError, match="oracle"):
        load_settings(config_path)


def test_load_settings_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")
