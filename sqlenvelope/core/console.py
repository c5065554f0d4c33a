"""Terminal interface for running ad-hoc SQL through the query executor."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from typing import Callable
from uuid import uuid4

from sqlenvelope.core.config import load_settings
from sqlenvelope.core.dependencies import build_executor
from sqlenvelope.core.envelope import build_error, serialize_response
from sqlenvelope.core.errors import QueryError
from sqlenvelope.core.executor import QueryExecutor
from sqlenvelope.core.logging_utils import configure_logging

LOGGER = logging.getLogger(__name__)

_exit_commands = {"exit", "quit", "\\q", "/exit"}


@dataclass
class SQLConsole:
    """Reads one statement per line and prints the resulting envelope."""

    executor: QueryExecutor
    input_func: Callable[[str], str] = field(default=input)
    output_func: Callable[[str], None] = field(default=print)
    session_id_factory: Callable[[], str] = field(default=lambda: f"session-{uuid4().hex[:8]}")

    def run_once(self, sql_text: str, *, ticket_id: str | None = None) -> str:
        """Execute *sql_text* and return the serialized envelope, failures included."""

        ticket = ticket_id or self.session_id_factory()
        try:
            envelope = self.executor.execute(sql_text, ticket_id=ticket)
        except QueryError as exc:
            LOGGER.error("Error executing the query: %s", exc)
            envelope = build_error(exc)
        return serialize_response(envelope)

    def start(self) -> None:
        """Launch an interactive session until an exit command or EOF."""

        session_id = self.session_id_factory()
        self.output_func("Enter one SQL statement per line. Type 'exit' to leave.")

        counter = 1
        while True:
            try:
                raw = self.input_func("sql> ")
            except EOFError:
                self.output_func("\nSession ended.")
                break

            statement = raw.strip()
            if not statement:
                continue
            if statement.lower() in _exit_commands:
                self.output_func("Session ended.")
                break

            ticket = f"{session_id}-Q{counter:03d}"
            self.output_func(self.run_once(statement, ticket_id=ticket))
            counter += 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run SQL statements and print response envelopes")
    parser.add_argument("--config", default="configs/dev.yaml", help="Path to the YAML config file")
    parser.add_argument("--execute", "-e", dest="statement", help="Run a single statement and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    configure_logging("DEBUG" if args.debug else settings.logging.level)

    executor = build_executor(settings)
    console = SQLConsole(executor=executor)
    try:
        if args.statement is not None:
            print(console.run_once(args.statement))
        else:
            console.start()
    finally:
        executor.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
