"""Low-level table rendering helpers (stdlib only)."""

import re
from dataclasses import dataclass
from typing import Any, Callable

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_LINEBREAK_RE = re.compile(r"[\r\n\t]+")

DEFAULT_COLUMN_WIDTH = 30


def _trunc(s, maxlen):
    """Truncate string with ellipsis indicator."""
    if not s:
        return ""
    return s[: maxlen - 1] + "…" if len(s) > maxlen else s


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars from table output.
    Preserves newlines (\\n) and tabs (\\t)."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _display(value):
    """Default cell text for a raw field value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


@dataclass(frozen=True)
class Column:
    """One column of a table: which field, its header, how to show it.

    ``formatter(value, row)`` gets the raw field value and the whole row.
    ``width`` is this column's truncation width.
    """

    key: str
    header: str
    formatter: Callable[[Any, dict], str] | None = None
    width: int = DEFAULT_COLUMN_WIDTH

    def cell(self, row):
        value = row.get(self.key) if isinstance(row, dict) else None
        text = self.formatter(value, row) if self.formatter else _display(value)
        # One row per line: fold line breaks after stripping control chars.
        text = _LINEBREAK_RE.sub(" ", _sanitize_str(text) or "")
        return _trunc(text, self.width)


def format_table(rows, columns, footer=None):
    """Build a fixed-width table string.

    Every non-final column is truncated and right-padded to its own width;
    the last column is truncated but not padded.
    """
    last = len(columns) - 1

    def _line(cells):
        parts = []
        for i, (text, col) in enumerate(zip(cells, columns)):
            parts.append(text if i == last else f"{text:<{col.width}}")
        return " ".join(parts)

    header = _line([_trunc(col.header, col.width) for col in columns])
    lines = [header, "-" * len(header)]
    for row in rows:
        lines.append(_line([col.cell(row) for col in columns]))
    if footer:
        lines.append(f"\n{footer}")
    return "\n".join(lines)
