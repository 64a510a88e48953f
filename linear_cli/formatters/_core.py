"""Core output dispatchers: render an envelope in the requested format."""

import json

from linear_cli import config
from linear_cli.envelope import build_success, build_success_list, encode_envelope, envelope_kind
from linear_cli.exceptions import INVALID_INPUT, CliError
from linear_cli.formatters._table import _display, _sanitize_str, format_table

PAGINATION_HINT = "More results available. Use --after {cursor}"


def format_key_value(item):
    """Render a flat dict as aligned ``key: value`` lines."""
    if not item:
        return ""
    width = max(len(str(key)) for key in item) + 1
    lines = []
    for key, value in item.items():
        if isinstance(value, (dict, list)):
            text = json.dumps(value, ensure_ascii=False)
        else:
            text = _sanitize_str(_display(value))
        lines.append(f"{str(key) + ':':<{width}} {text}")
    return "\n".join(lines)


def pagination_hint(page_info):
    """Next-page hint line, or None when there is no next page to fetch."""
    if not page_info or not page_info.get("hasNextPage"):
        return None
    cursor = page_info.get("endCursor")
    if not cursor:
        return None
    return PAGINATION_HINT.format(cursor=cursor)


def _primary_value(item, primary_key):
    if isinstance(item, dict):
        return _display(item.get(primary_key))
    return _display(item)


def _as_envelope(value):
    """Wrap bare rows or a bare item in a success envelope."""
    if isinstance(value, list):
        return build_success_list(value)
    if isinstance(value, dict) and "success" in value:
        return value
    return build_success(value)


def render(envelope, fmt=config.FORMAT_JSON, columns=None, primary_key="id"):
    """Render an envelope, a list of rows or a single item to display text.

    Errors always render as JSON so a narrower format never hides them.
    """
    if fmt not in config.VALID_FORMATS:
        raise CliError(
            f"Invalid format '{fmt}'. Use: {', '.join(config.VALID_FORMATS)}", INVALID_INPUT
        )
    envelope = _as_envelope(envelope)
    kind = envelope_kind(envelope)
    if kind == "error" or fmt == config.FORMAT_JSON:
        return encode_envelope(envelope)

    data = envelope.get("data")
    rows = data if kind == "list" else [data]

    if fmt == config.FORMAT_PLAIN:
        return "\n".join(_primary_value(row, primary_key) for row in rows)

    # table
    if columns:
        footer = pagination_hint(envelope.get("pageInfo")) if kind == "list" else None
        return format_table(rows, columns, footer=footer)
    if kind == "success" and isinstance(data, dict):
        return format_key_value(data)
    return encode_envelope(envelope)


def output(envelope, fmt=config.FORMAT_JSON, columns=None, primary_key="id"):
    """Print an envelope in the requested format."""
    print(render(envelope, fmt, columns=columns, primary_key=primary_key))
