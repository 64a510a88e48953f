"""Core helpers: client construction, _call dispatcher, input validation."""

from __future__ import annotations

import re

from linear_cli import config, operations
from linear_cli.client import LinearClient
from linear_cli.envelope import build_error
from linear_cli.errors import error_response
from linear_cli.exceptions import INVALID_INPUT, CliError, InvalidReferenceError
from linear_cli.resolver import classify_reference, is_uuid


def _get_client() -> LinearClient:
    """Build a client for the configured API key (one per tool call)."""
    return LinearClient(config.require_api_key())


_ALLOWED_OPERATIONS = {
    "whoami",
    "list_issues",
    "get_issue",
    "create_issue",
    "update_issue",
    "delete_issue",
    "search_issues",
    "list_documents",
    "get_document",
    "create_document",
    "update_document",
    "delete_document",
    "list_initiatives",
    "get_initiative",
    "create_initiative",
    "update_initiative",
    "delete_initiative",
    "list_comments",
    "add_comment",
    "list_labels",
    "list_states",
    "list_projects",
    "list_users",
    "run_query",
    "schema",
}

# Operations that never touch the API.
_OFFLINE_OPERATIONS = {"schema"}


def _call(operation: str, **kwargs) -> dict:
    """Run an operation, converting any failure into an error envelope."""
    if operation not in _ALLOWED_OPERATIONS:
        return build_error(INVALID_INPUT, f"Unknown operation: {operation}")
    func = getattr(operations, operation)
    try:
        if operation in _OFFLINE_OPERATIONS:
            return func(**kwargs)
        return func(_get_client(), **kwargs)
    except Exception as e:
        return error_response(e)


_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_INPUT_LIMITS = {
    "title": 500,
    "name": 500,
    "body": 50_000,
    "content": 100_000,
    "description": 50_000,
    "query": 1000,
}


def _validate_input(text: str, field: str) -> str:
    """Strip control characters and enforce length limits.

    Raises CliError if text is not a string or exceeds the field limit.
    """
    if not isinstance(text, str):
        raise CliError(f"{field} must be a string", INVALID_INPUT)
    cleaned = _CONTROL_RE.sub("", text)
    limit = _INPUT_LIMITS.get(field, 50_000)
    if len(cleaned) > limit:
        raise CliError(f"{field} exceeds maximum length of {limit} characters", INVALID_INPUT)
    return cleaned


def _validate_reference(value: str) -> str:
    """Accept a UUID or TEAM-123 identifier, else raise INVALID_INPUT."""
    if not isinstance(value, str) or classify_reference(value) is None:
        raise InvalidReferenceError(value)
    return value


def _validate_uuid(value: str, field: str = "id") -> str:
    """Validate that a string is a 36-char UUID. Raises CliError if not."""
    if not isinstance(value, str) or not is_uuid(value):
        raise CliError(f"{field} must be a full 36-char UUID, got: {value!r}", INVALID_INPUT)
    return value
