"""Tests for the MCP server tools.
Skipped when the optional ``mcp`` package is not installed.
"""

import pytest

mcp_mod = pytest.importorskip("linear_cli.mcp_server", reason="mcp package not installed")

from unittest.mock import MagicMock, patch  # noqa: E402

from conftest import ISSUE_ID, TEAM_ID, page  # noqa: E402

from linear_cli import config  # noqa: E402
from linear_cli.exceptions import CliError, GraphQLError  # noqa: E402

DOC_ID = "33333333-3333-3333-3333-333333333333"


@pytest.fixture
def client():
    mock = MagicMock()
    mock.find_teams_by_key.return_value = [{"id": TEAM_ID, "key": "ENG"}]
    mock.find_issue_by_team_and_number.return_value = {"id": ISSUE_ID}
    with patch("linear_cli.mcp_server._core._get_client", return_value=mock):
        yield mock


class TestCall:
    def test_unknown_operation(self):
        result = mcp_mod._call("drop_database")
        assert result["success"] is False
        assert result["error"]["code"] == "INVALID_INPUT"

    def test_failure_becomes_envelope(self, client):
        client.viewer.side_effect = GraphQLError(
            "Request failed with status 401: Authentication required"
        )
        result = mcp_mod.whoami()
        assert result["success"] is False
        assert result["error"]["code"] == "INVALID_API_KEY"

    def test_not_authenticated(self):
        result = mcp_mod.whoami()
        assert result["error"]["code"] == "NOT_AUTHENTICATED"

    def test_schema_needs_no_key(self):
        result = mcp_mod.schema("issues")
        assert result["success"] is True
        assert result["data"]["entity"] == "issues"

    def test_client_built_from_stored_key(self):
        config.save_api_key("lin_api_stored")
        with patch("linear_cli.mcp_server._core.LinearClient") as mock_cls:
            mcp_mod._get_client()
        mock_cls.assert_called_once_with("lin_api_stored")


class TestValidation:
    def test_validate_input_strips_control_chars(self):
        assert mcp_mod._validate_input("a\x00b\nc", "title") == "ab\nc"

    def test_validate_input_length(self):
        with pytest.raises(CliError):
            mcp_mod._validate_input("x" * 501, "title")

    def test_validate_input_type(self):
        with pytest.raises(CliError):
            mcp_mod._validate_input(42, "title")

    def test_validate_reference(self):
        assert mcp_mod._validate_reference("ENG-1") == "ENG-1"
        with pytest.raises(CliError):
            mcp_mod._validate_reference("not a ref")

    def test_validate_uuid(self):
        assert mcp_mod._validate_uuid(DOC_ID) == DOC_ID
        with pytest.raises(CliError):
            mcp_mod._validate_uuid("ENG-1")


class TestReadTools:
    def test_get_issue_bad_reference(self, client):
        result = mcp_mod.get_issue("bad id")
        assert result["error"]["code"] == "INVALID_INPUT"
        client.get_issue_detail.assert_not_called()

    def test_get_issue(self, client):
        client.get_issue_detail.return_value = {
            "id": ISSUE_ID,
            "identifier": "ENG-123",
            "title": "Fix login",
            "labels": [],
            "commentsCount": 1,
        }
        result = mcp_mod.get_issue("ENG-123")
        assert result["success"] is True
        assert result["data"]["commentsCount"] == 1

    def test_list_issues_page_info(self, client):
        client.list_issues.return_value = page([], has_next=True, end_cursor="c9")
        result = mcp_mod.list_issues(team="ENG")
        assert result["pageInfo"]["endCursor"] == "c9"

    def test_search_query_too_long(self, client):
        result = mcp_mod.search_issues("x" * 1001)
        assert result["error"]["code"] == "INVALID_INPUT"
        client.search_issues.assert_not_called()

    def test_run_query_graphql_errors(self, client):
        errors = [{"message": "Cannot query field"}]
        client.raw_query.side_effect = GraphQLError("Cannot query field", errors=errors)
        result = mcp_mod.run_query("{ nope }")
        assert result["error"]["code"] == "API_ERROR"
        assert result["error"]["details"] == {"errors": errors}

    def test_list_comments_missing_issue(self, client):
        client.list_comments.return_value = None
        result = mcp_mod.list_comments("ENG-123")
        assert result["error"]["code"] == "NOT_FOUND"


class TestWriteTools:
    def test_create_issue_strips_control_chars(self, client):
        client.create_issue.return_value = {"success": True, "issue": {"id": ISSUE_ID}}
        result = mcp_mod.create_issue("Fix\x07 login", team="ENG")
        assert result["success"] is True
        assert client.create_issue.call_args[0][0]["title"] == "Fix login"

    def test_delete_document_requires_uuid(self, client):
        result = mcp_mod.delete_document("not-a-uuid")
        assert result["error"]["code"] == "INVALID_INPUT"
        client.delete_document.assert_not_called()

    def test_delete_issue(self, client):
        client.get_issue.return_value = {"id": ISSUE_ID, "identifier": "ENG-123"}
        client.archive_issue.return_value = {"success": True}
        result = mcp_mod.delete_issue("ENG-123")
        assert result["data"]["message"] == "Issue ENG-123 moved to trash"

    def test_add_comment_empty_body(self, client):
        result = mcp_mod.add_comment("ENG-123", "")
        assert result["error"]["code"] == "INVALID_INPUT"
        client.create_comment.assert_not_called()

    def test_update_initiative_nothing_to_update(self, client):
        result = mcp_mod.update_initiative(DOC_ID)
        assert result["error"]["code"] == "INVALID_INPUT"


class TestRegistration:
    def test_main_runs_server(self):
        with patch.object(mcp_mod.mcp, "run") as run:
            mcp_mod.main()
        run.assert_called_once_with()
