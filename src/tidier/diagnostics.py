"""Capture of libtidy's diagnostic output.

libtidy reports problems as free-form lines such as::

    line 3 column 5 - Warning: missing </p> before <ul>
    Info: Document content looks like HTML5

Each line becomes a :class:`Diagnostic` appended, in emission order, to a
:class:`DiagnosticLog`. The raw text is always kept verbatim; the severity,
position and message are a best-effort split of it. Duplicate lines are
kept and nothing is ever reordered.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Severity keyword found at the start of a diagnostic message."""

    INFO = "Info"
    WARNING = "Warning"
    CONFIG = "Config"
    ACCESS = "Access"
    ERROR = "Error"
    DOCUMENT = "Document"
    PANIC = "Panic"
    NONE = ""


_SEVERITIES = "|".join(s.value for s in Severity if s is not Severity.NONE)

_LINE_RE = re.compile(
    r"^(?:line (?P<line>\d+) column (?P<column>\d+) - )?"
    rf"(?:(?P<severity>{_SEVERITIES}): ?)?"
    r"(?P<message>.*)$"
)


@dataclass(frozen=True)
class Diagnostic:
    """A single line of engine output."""

    raw: str
    severity: Severity = Severity.NONE
    message: str = ""
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def from_line(cls, raw: str) -> Diagnostic:
        """Split *raw* into position, severity and message."""
        m = _LINE_RE.match(raw)
        if m is None:  # pragma: no cover - the pattern accepts any single line
            return cls(raw=raw, message=raw)
        severity = m.group("severity")
        return cls(
            raw=raw,
            severity=Severity(severity) if severity else Severity.NONE,
            message=m.group("message").strip(),
            line=int(m.group("line")) if m.group("line") else None,
            column=int(m.group("column")) if m.group("column") else None,
        )

    def __str__(self) -> str:
        return self.raw


@dataclass
class DiagnosticLog:
    """Ordered, append-only record of diagnostics for one document."""

    _items: list[Diagnostic] = field(default_factory=list)

    def collect(self, text: str) -> int:
        """Append one diagnostic per non-empty line of *text*.

        Returns the number of diagnostics added.
        """
        added = 0
        for raw in text.splitlines():
            if not raw.strip():
                continue
            diagnostic = Diagnostic.from_line(raw)
            self._items.append(diagnostic)
            logger.debug("tidy %s: %s", diagnostic.severity.name.lower(), diagnostic.message)
            added += 1
        return added

    @property
    def items(self) -> tuple[Diagnostic, ...]:
        """Snapshot of the log in emission order."""
        return tuple(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


def count_by_severity(diagnostics: Iterable[Diagnostic]) -> dict[Severity, int]:
    """Count diagnostics per severity, in order of first appearance."""
    counts: dict[Severity, int] = {}
    for d in diagnostics:
        counts[d.severity] = counts.get(d.severity, 0) + 1
    return counts


def summarize(diagnostics: Iterable[Diagnostic]) -> str:
    """One-line summary such as ``"2 warning, 1 error"``."""
    counts = count_by_severity(diagnostics)
    return ", ".join(
        f"{n} {severity.name.lower() if severity is not Severity.NONE else 'other'}"
        for severity, n in counts.items()
    )
