"""Per-entity column tables for ``--format table`` list output."""

from linear_cli.formatters._table import Column

PRIORITY_LABELS = {0: "None", 1: "Urgent", 2: "High", 3: "Medium", 4: "Low"}

STATE_TYPE_LABELS = {
    "backlog": "Backlog",
    "unstarted": "Todo",
    "started": "In Progress",
    "completed": "Done",
    "canceled": "Canceled",
}


def format_priority(value, row=None):
    if value is None:
        return "-"
    return PRIORITY_LABELS.get(value, str(value))


def format_progress(value, row=None):
    """0..1 float -> ``"42%"``."""
    if value is None:
        return "0%"
    return f"{round(float(value) * 100)}%"


def format_date(value, row=None):
    """ISO timestamp -> ``YYYY-MM-DD``."""
    if not value:
        return ""
    return str(value)[:10]


def format_state_type(value, row=None):
    return STATE_TYPE_LABELS.get(value, value or "")


def _or(fallback):
    def _fmt(value, row=None):
        return str(value) if value not in (None, "") else fallback

    return _fmt


def _label_name(value, row):
    return f"{value} (group)" if row.get("isGroup") else str(value)


def _owner_name(value, row):
    owner = row.get("owner")
    return owner["name"] if owner else "Unassigned"


def _single_line(value, row=None):
    return " ".join(str(value or "").split())


ISSUE_COLUMNS = [
    Column("identifier", "ID", width=10),
    Column("priority", "PRI", format_priority, width=7),
    Column("title", "TITLE", width=50),
    Column("updatedAt", "UPDATED", format_date, width=10),
]

SEARCH_COLUMNS = [
    Column("identifier", "ID", width=10),
    Column("priority", "PRI", format_priority, width=7),
    Column("title", "TITLE", width=50),
]

DOCUMENT_COLUMNS = [
    Column("title", "TITLE", width=40),
    Column("projectName", "PROJECT", _or("None"), width=20),
    Column("creatorName", "CREATOR", _or("Unknown"), width=20),
    Column("updatedAt", "UPDATED", format_date, width=10),
]

INITIATIVE_COLUMNS = [
    Column("id", "ID", width=12),
    Column("name", "NAME", width=30),
    Column("status", "STATUS", width=10),
    Column("owner", "OWNER", _owner_name, width=15),
    Column("targetDate", "TARGET", _or("No date"), width=10),
    Column("progress", "PROGRESS", format_progress, width=8),
]

COMMENT_COLUMNS = [
    Column("userName", "USER", _or("Unknown"), width=20),
    Column("body", "COMMENT", _single_line, width=60),
    Column("createdAt", "DATE", format_date, width=10),
]

LABEL_COLUMNS = [
    Column("name", "NAME", _label_name, width=30),
    Column("color", "COLOR", width=8),
    Column("description", "DESCRIPTION", width=40),
]

STATE_COLUMNS = [
    Column("teamKey", "TEAM", width=6),
    Column("name", "NAME", width=20),
    Column("type", "TYPE", format_state_type, width=12),
    Column("color", "COLOR", width=8),
]

PROJECT_COLUMNS = [
    Column("name", "NAME", width=30),
    Column("state", "STATE", width=10),
    Column("progress", "PROGRESS", format_progress, width=8),
    Column("targetDate", "TARGET", _or("No date"), width=10),
]

USER_COLUMNS = [
    Column("name", "NAME", width=25),
    Column("email", "EMAIL", width=35),
    Column("active", "ACTIVE", width=6),
    Column("admin", "ADMIN", width=5),
]
