"""Logging setup and helpers for daily JSONL query logs."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger unless the host application already did."""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)


def truncate_for_log(value: str, limit: int = 200) -> str:
    """Collapse *value* onto one line and cap it at *limit* characters."""

    text = " ".join(value.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def make_date_slug(timestamp: str | None = None) -> str:
    """Return the UTC ``YYYYMMDD`` day of an ISO-8601 *timestamp* (now when absent)."""

    candidate = (timestamp or "").strip()
    parsed = None
    if candidate:
        sanitized = candidate[:-1] if candidate.endswith("Z") else candidate
        try:
            parsed = datetime.fromisoformat(sanitized)
        except ValueError:
            parsed = None

    if parsed is None:
        parsed = datetime.now(UTC)
    elif parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)

    return parsed.strftime("%Y%m%d")


def sanitize_stream_name(name: str) -> str:
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "-", name.strip())
    return cleaned or "queries"


def daily_log_path(base_dir: Path, stream: str, timestamp: str | None = None) -> Path:
    """Return ``<base_dir>/<YYYYMMDD>-<stream>.jsonl`` for the day of *timestamp*.

    Files rotate by day only; the number of files does not grow with the number
    of sessions or requests.
    """

    filename = f"{make_date_slug(timestamp)}-{sanitize_stream_name(stream)}.jsonl"
    return base_dir.expanduser() / filename


def utc_now_iso() -> str:
    """Return the current UTC time in ISO-8601 with millisecond precision."""

    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "daily_log_path",
    "make_date_slug",
    "sanitize_stream_name",
    "truncate_for_log",
    "utc_now_iso",
]
