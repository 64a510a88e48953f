"""
Entity reference resolution.

Linear entities are addressed either by UUID or, for issues, by a compound
identifier such as ``ENG-123``. The API indexes issues by owning team, so an
identifier costs two lookups: team by key, then issue by (team, number).
UUIDs are returned as-is without touching the network.
"""

from __future__ import annotations

import re
from typing import Any, Protocol

from linear_cli.exceptions import NOT_FOUND, CliError, InvalidReferenceError

_UUID_RE = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.I)
_TEAM_KEY_RE = re.compile(r"[A-Za-z]+")
# Leading zeros are accepted; ENG-012 is issue 12.
_NUMBER_RE = re.compile(r"[0-9]+")


class RemoteLookup(Protocol):
    """The two lookups the resolver needs from the API client."""

    def find_teams_by_key(self, key: str) -> list[dict[str, Any]]: ...

    def find_issue_by_team_and_number(self, team_id: str, number: int) -> dict[str, Any] | None: ...


def is_uuid(value: str) -> bool:
    return bool(_UUID_RE.fullmatch(value or ""))


def parse_identifier(value: str) -> tuple[str, int] | None:
    """Split ``eng-123`` into ``("ENG", 123)``. Returns None if malformed."""
    prefix, sep, number = (value or "").rpartition("-")
    if not sep or not _TEAM_KEY_RE.fullmatch(prefix) or not _NUMBER_RE.fullmatch(number):
        return None
    return prefix.upper(), int(number)


def classify_reference(value: str) -> str | None:
    """Return ``"uuid"``, ``"identifier"`` or None."""
    if is_uuid(value):
        return "uuid"
    if parse_identifier(value) is not None:
        return "identifier"
    return None


def resolve_issue_id(client: RemoteLookup, reference: str) -> str:
    """Resolve a UUID or ``TEAM-123`` identifier to an issue UUID.

    Raises:
        InvalidReferenceError: *reference* matches neither shape.
        CliError(NOT_FOUND): no team with that key, or no such issue number.
    """
    if is_uuid(reference):
        return reference

    parsed = parse_identifier(reference)
    if parsed is None:
        raise InvalidReferenceError(reference)
    team_key, number = parsed

    teams = client.find_teams_by_key(team_key)
    if not teams:
        raise CliError(f'Team with key "{team_key}" not found', NOT_FOUND)
    team = teams[0]

    issue = client.find_issue_by_team_and_number(team["id"], number)
    if not issue:
        raise CliError(f"Issue {reference} not found", NOT_FOUND)
    return issue["id"]


def resolve_team_id(client: RemoteLookup, team_key: str) -> str:
    """Return the UUID of the team with *team_key* (case-insensitive)."""
    teams = client.find_teams_by_key(team_key.upper())
    if not teams:
        raise CliError(f"Team {team_key} not found", NOT_FOUND)
    return teams[0]["id"]
