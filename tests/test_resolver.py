"""Tests for resolver.py — UUID / identifier classification and resolution."""

import pytest
from conftest import ISSUE_ID, TEAM_ID

from linear_cli.exceptions import INVALID_INPUT, NOT_FOUND, CliError, InvalidReferenceError
from linear_cli.resolver import (
    classify_reference,
    is_uuid,
    parse_identifier,
    resolve_issue_id,
    resolve_team_id,
)

UUID = "3f2b9c1e-8a4d-4e6f-9b0a-1c2d3e4f5a6b"


class TestIsUuid:
    def test_lowercase(self):
        assert is_uuid(UUID)

    def test_uppercase_accepted(self):
        assert is_uuid(UUID.upper())

    @pytest.mark.parametrize(
        "value", ["", "ENG-123", UUID[:-1], UUID.replace("-", ""), UUID + "\n", None]
    )
    def test_rejects(self, value):
        assert not is_uuid(value)


class TestParseIdentifier:
    def test_basic(self):
        assert parse_identifier("ENG-123") == ("ENG", 123)

    def test_lowercase_prefix_normalized(self):
        assert parse_identifier("eng-42") == ("ENG", 42)

    def test_zero(self):
        assert parse_identifier("ENG-0") == ("ENG", 0)

    def test_leading_zeros(self):
        assert parse_identifier("ENG-012") == ("ENG", 12)

    @pytest.mark.parametrize(
        "value",
        ["bad id", "ENG123", "ENG-", "-123", "EN9-1", "ENG-1a", "ENG-١٢", "ÉNG-1", "ENG-123\n"],
    )
    def test_rejects(self, value):
        assert parse_identifier(value) is None


class TestClassifyReference:
    def test_variants(self):
        assert classify_reference(UUID) == "uuid"
        assert classify_reference("ENG-1") == "identifier"
        assert classify_reference("nope") is None

    def test_trailing_newline(self):
        assert classify_reference("ENG-123\n") is None
        assert classify_reference(UUID + "\n") is None


class TestResolveIssueId:
    def test_identifier_resolves_via_team_then_number(self, fake_linear):
        assert resolve_issue_id(fake_linear, "ENG-123") == ISSUE_ID
        assert fake_linear.calls == [
            ("find_teams_by_key", "ENG"),
            ("find_issue_by_team_and_number", TEAM_ID, 123),
        ]

    def test_lowercase_identifier(self, fake_linear):
        assert resolve_issue_id(fake_linear, "eng-123") == ISSUE_ID
        assert fake_linear.calls[0] == ("find_teams_by_key", "ENG")

    def test_uuid_makes_no_remote_calls(self, fake_linear):
        assert resolve_issue_id(fake_linear, UUID) == UUID
        assert fake_linear.calls == []

    def test_uppercase_uuid_returned_unchanged(self, fake_linear):
        assert resolve_issue_id(fake_linear, UUID.upper()) == UUID.upper()
        assert fake_linear.calls == []

    def test_malformed_reference(self, fake_linear):
        with pytest.raises(InvalidReferenceError) as exc_info:
            resolve_issue_id(fake_linear, "bad id")
        assert exc_info.value.code == INVALID_INPUT
        assert fake_linear.calls == []

    @pytest.mark.parametrize("reference", ["ENG-123\n", UUID + "\n"])
    def test_trailing_newline_rejected(self, fake_linear, reference):
        with pytest.raises(InvalidReferenceError):
            resolve_issue_id(fake_linear, reference)
        assert fake_linear.calls == []

    def test_unknown_team(self, fake_linear):
        with pytest.raises(CliError) as exc_info:
            resolve_issue_id(fake_linear, "XYZ-1")
        assert exc_info.value.code == NOT_FOUND
        assert 'Team with key "XYZ" not found' in exc_info.value.message
        assert len(fake_linear.calls) == 1

    def test_unknown_issue_number(self, fake_linear):
        with pytest.raises(CliError) as exc_info:
            resolve_issue_id(fake_linear, "ENG-999")
        assert exc_info.value.code == NOT_FOUND
        assert exc_info.value.message == "Issue ENG-999 not found"

    def test_first_team_wins(self):
        class TwoTeams:
            def find_teams_by_key(self, key):
                return [{"id": "t-first"}, {"id": "t-second"}]

            def find_issue_by_team_and_number(self, team_id, number):
                return {"id": f"{team_id}:{number}"}

        assert resolve_issue_id(TwoTeams(), "ENG-7") == "t-first:7"


class TestResolveTeamId:
    def test_found(self, fake_linear):
        assert resolve_team_id(fake_linear, "eng") == TEAM_ID

    def test_missing(self, fake_linear):
        with pytest.raises(CliError) as exc_info:
            resolve_team_id(fake_linear, "OPS")
        assert exc_info.value.code == NOT_FOUND
        assert exc_info.value.message == "Team OPS not found"
