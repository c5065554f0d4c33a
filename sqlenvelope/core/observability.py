"""JSONL-backed observability for statement execution."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol

from sqlenvelope.core.logging_utils import daily_log_path, utc_now_iso


class QueryObservationSink(Protocol):
    """Records lifecycle events emitted by the query executor."""

    def log_event(self, ticket_id: str, event: str, payload: dict[str, Any]) -> None:  # pragma: no cover - interface
        ...


def build_event(ticket_id: str, event: str, payload: dict[str, Any], timestamp: str) -> dict[str, Any]:
    """Return the JSON record for one executor event, dropping ``None`` fields."""

    record: dict[str, Any] = {"timestamp": timestamp, "event": event, "ticket_id": ticket_id}
    for key, value in payload.items():
        if value is not None and key not in record:
            record[key] = value
    return record


@dataclass(slots=True)
class JSONLQueryLogger(QueryObservationSink):
    """Appends executor events to one JSONL file per UTC day.

    Sessions and web requests are told apart by the ``ticket_id`` field of
    each record, not by file, so the logger holds no per-ticket state.
    """

    base_dir: Path
    stream: str = "queries"
    clock: Callable[[], str] = field(default=utc_now_iso)

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def log_event(self, ticket_id: str, event: str, payload: dict[str, Any]) -> None:  # type: ignore[override]
        record = build_event(ticket_id, event, payload, self.clock())
        target = daily_log_path(self.base_dir, self.stream, record["timestamp"])
        with target.open("a", encoding="utf-8") as handle:
            json.dump(record, handle, ensure_ascii=False, default=str)
            handle.write("\n")


__all__ = [
    "JSONLQueryLogger",
    "QueryObservationSink",
    "build_event",
]
