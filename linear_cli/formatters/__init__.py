"""Output formatting package for linear-cli.

Re-exports all public names so consumers can do:
    from linear_cli.formatters import render, ISSUE_COLUMNS
"""

from linear_cli.formatters._columns import (
    COMMENT_COLUMNS,
    DOCUMENT_COLUMNS,
    INITIATIVE_COLUMNS,
    ISSUE_COLUMNS,
    LABEL_COLUMNS,
    PROJECT_COLUMNS,
    SEARCH_COLUMNS,
    STATE_COLUMNS,
    USER_COLUMNS,
    format_date,
    format_priority,
    format_progress,
    format_state_type,
)
from linear_cli.formatters._core import (
    PAGINATION_HINT,
    format_key_value,
    output,
    pagination_hint,
    render,
)
from linear_cli.formatters._table import (
    _CONTROL_RE,
    DEFAULT_COLUMN_WIDTH,
    Column,
    _sanitize_str,
    _trunc,
    format_table,
)

__all__ = [
    "COMMENT_COLUMNS",
    "DEFAULT_COLUMN_WIDTH",
    "DOCUMENT_COLUMNS",
    "INITIATIVE_COLUMNS",
    "ISSUE_COLUMNS",
    "LABEL_COLUMNS",
    "PAGINATION_HINT",
    "PROJECT_COLUMNS",
    "SEARCH_COLUMNS",
    "STATE_COLUMNS",
    "USER_COLUMNS",
    "_CONTROL_RE",
    "Column",
    "_sanitize_str",
    "_trunc",
    "format_date",
    "format_key_value",
    "format_priority",
    "format_progress",
    "format_state_type",
    "format_table",
    "output",
    "pagination_hint",
    "render",
]
