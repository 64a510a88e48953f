"""
Shared test fixtures for linear-cli tests.
Patches config so no test reads a real API key or config file, and provides
an in-memory stand-in for LinearClient.
"""

import pytest

from linear_cli import config

TEAM_ID = "11111111-1111-1111-1111-111111111111"
ISSUE_ID = "22222222-2222-2222-2222-222222222222"


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Ensure every test starts with a clean config state."""
    monkeypatch.setattr(config, "env", {"XDG_CONFIG_HOME": str(tmp_path / "xdg")})
    monkeypatch.setattr(config, "RUNTIME_QUIET", False)
    monkeypatch.setattr(config, "RUNTIME_VERBOSE", False)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "HTTP_LOG_SAMPLE_RATE", 1.0)


class FakeLinear:
    """Minimal LinearClient stand-in.

    Teams and issues are keyed by team key and (team id, number); every
    lookup is recorded in ``calls`` so tests can assert on round trips.
    """

    def __init__(self, teams=None, issues=None):
        self.teams = teams or {}
        self.issues = issues or {}
        self.calls = []

    def find_teams_by_key(self, key):
        self.calls.append(("find_teams_by_key", key))
        team = self.teams.get(key)
        return [team] if team else []

    def find_issue_by_team_and_number(self, team_id, number):
        self.calls.append(("find_issue_by_team_and_number", team_id, number))
        return self.issues.get((team_id, number))


@pytest.fixture
def fake_linear():
    return FakeLinear(
        teams={"ENG": {"id": TEAM_ID, "key": "ENG", "name": "Engineering"}},
        issues={(TEAM_ID, 123): {"id": ISSUE_ID, "identifier": "ENG-123"}},
    )


def page(nodes, has_next=False, end_cursor=None):
    """Build a ``{nodes, pageInfo}`` connection as LinearClient returns it."""
    page_info = {"hasNextPage": has_next, "hasPreviousPage": False}
    if end_cursor is not None:
        page_info["endCursor"] = end_cursor
    return {"nodes": nodes, "pageInfo": page_info}
