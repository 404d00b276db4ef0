"""Diagnostics reported back to the caller of a read.

Diagnostics are an ordered, append-only list of (severity, summary, detail)
entries. They travel next to the returned state rather than being raised.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic entry.

    ``error`` holds the exception behind the entry, when there is one.
    """

    severity: Severity
    summary: str
    detail: str = ""
    error: Exception | None = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "severity": self.severity.value,
            "summary": self.summary,
            "detail": self.detail,
        }


class Diagnostics:
    """Ordered collection of diagnostics."""

    def __init__(self, entries: Iterable[Diagnostic] | None = None) -> None:
        self._entries: list[Diagnostic] = list(entries or [])

    def append(self, diagnostic: Diagnostic) -> None:
        self._entries.append(diagnostic)

    def extend(self, other: Iterable[Diagnostic]) -> None:
        self._entries.extend(other)

    def add_error(self, summary: str, detail: str = "", error: Exception | None = None) -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail, error))

    def add_warning(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail))

    def has_error(self) -> bool:
        """Check whether any entry has error severity."""
        return any(d.severity is Severity.ERROR for d in self._entries)

    def errors(self) -> list[Diagnostic]:
        return [d for d in self._entries if d.severity is Severity.ERROR]

    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._entries if d.severity is Severity.WARNING]

    def to_list(self) -> list[dict[str, Any]]:
        return [d.to_dict() for d in self._entries]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"Diagnostics({self._entries!r})"
