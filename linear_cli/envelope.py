"""
Response envelopes shared by every command and the MCP server.

Three shapes, all plain dicts:

    {"success": True, "data": ...}
    {"success": True, "data": [...], "pageInfo": {...}}   # pageInfo optional
    {"success": False, "error": {"code", "message", "details"?}}

Constructors are pure; nothing here prints.
"""

import json

from linear_cli.exceptions import INVALID_INPUT, CliError

_PAGE_INFO_CURSORS = ("startCursor", "endCursor")


def build_success(data):
    return {"success": True, "data": data}


def build_success_list(data, page_info=None):
    """List envelope. ``pageInfo`` is present only when *page_info* is given."""
    response = {"success": True, "data": list(data)}
    if page_info is not None:
        response["pageInfo"] = page_info
    return response


def build_error(code, message, details=None):
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def page_info_from(raw):
    """Normalize an API ``pageInfo`` object. Cursors are copied, never parsed."""
    if raw is None:
        return None
    page_info = {
        "hasNextPage": bool(raw.get("hasNextPage")),
        "hasPreviousPage": bool(raw.get("hasPreviousPage")),
    }
    for key in _PAGE_INFO_CURSORS:
        if raw.get(key) is not None:
            page_info[key] = raw[key]
    return page_info


def envelope_kind(response):
    """Return ``"error"``, ``"list"`` or ``"success"``."""
    if not response.get("success"):
        return "error"
    if "pageInfo" in response or isinstance(response.get("data"), list):
        return "list"
    return "success"


def encode_envelope(response):
    return json.dumps(response, indent=2, ensure_ascii=False)


def decode_envelope(text):
    """Parse an encoded envelope back into a dict."""
    try:
        response = json.loads(text)
    except json.JSONDecodeError as e:
        raise CliError(
            f"Invalid JSON in envelope: {e.msg} at position {e.pos}", INVALID_INPUT
        ) from None
    if not isinstance(response, dict) or "success" not in response:
        raise CliError("Invalid envelope: expected object with 'success' field.", INVALID_INPUT)
    return response
