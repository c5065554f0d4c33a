"""Leading-keyword classification of SQL statements."""

from __future__ import annotations

from enum import Enum


class CommandKind(str, Enum):
    MUTATING = "mutating"
    READING = "reading"
    UNSUPPORTED = "unsupported"


MUTATING_KEYWORDS: frozenset[str] = frozenset({"UPDATE", "CREATE", "INSERT", "DELETE", "DROP"})
READING_KEYWORDS: frozenset[str] = frozenset({"SELECT"})


def leading_keyword(sql_text: str) -> str:
    """Return the uppercased first whitespace-delimited token of *sql_text*."""

    parts = sql_text.split(maxsplit=1)
    if not parts:
        return ""
    return parts[0].upper()


def classify(sql_text: str) -> CommandKind:
    """Decide whether *sql_text* mutates, reads, or is unsupported."""

    keyword = leading_keyword(sql_text)
    if keyword in MUTATING_KEYWORDS:
        return CommandKind.MUTATING
    if keyword in READING_KEYWORDS:
        return CommandKind.READING
    return CommandKind.UNSUPPORTED


__all__ = [
    "CommandKind",
    "MUTATING_KEYWORDS",
    "READING_KEYWORDS",
    "classify",
    "leading_keyword",
]
