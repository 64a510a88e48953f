"""Tests for operations.py — envelope-returning business layer."""

from unittest.mock import MagicMock

import pytest
from conftest import ISSUE_ID, TEAM_ID, page

from linear_cli import operations
from linear_cli.exceptions import API_ERROR, INVALID_INPUT, NOT_FOUND, CliError, GraphQLError

ISSUE_NODE = {
    "id": ISSUE_ID,
    "identifier": "ENG-123",
    "title": "Fix login",
    "description": "Steps",
    "priority": 2,
    "priorityLabel": "High",
    "estimate": 3,
    "url": "https://linear.app/x/issue/ENG-123",
    "createdAt": "2024-01-01T00:00:00.000Z",
    "updatedAt": "2024-01-02T00:00:00.000Z",
}


ADA = {"id": "u1", "name": "Ada", "email": "a@x"}


@pytest.fixture
def client():
    mock = MagicMock()
    mock.find_teams_by_key.return_value = [{"id": TEAM_ID, "key": "ENG"}]
    mock.find_issue_by_team_and_number.return_value = {"id": ISSUE_ID}
    return mock


class TestWhoami:
    def test_shape_and_summary(self, client):
        client.viewer.return_value = {
            "id": "u1",
            "name": "Ada",
            "email": "ada@example.com",
            "displayName": "ada",
            "active": True,
            "admin": False,
            "timezone": "UTC",
            "createdAt": "2024-01-01",
            "organization": {"id": "o1", "name": "Acme", "urlKey": "acme"},
            "teams": {"nodes": [{"id": TEAM_ID, "key": "ENG", "name": "Engineering"}]},
        }
        env = operations.whoami(client)
        assert env["success"] is True
        assert env["data"]["teams"] == [{"id": TEAM_ID, "key": "ENG", "name": "Engineering"}]
        summary = operations.whoami_summary(env["data"])
        assert summary["organization"] == "Acme"
        assert summary["admin"] == "No"
        assert summary["teams"] == "ENG"


class TestListIssues:
    def test_filters(self, client):
        client.viewer.return_value = {"id": "me-id"}
        client.list_issues.return_value = page([ISSUE_NODE], has_next=True, end_cursor="c1")
        env = operations.list_issues(
            client, team="eng", assignee="me", state="In Progress", first=10
        )
        client.list_issues.assert_called_once_with(
            filter={
                "team": {"key": {"eq": "ENG"}},
                "assignee": {"id": {"eq": "me-id"}},
                "state": {"name": {"eq": "In Progress"}},
            },
            first=10,
            after=None,
        )
        assert env["data"][0]["identifier"] == "ENG-123"
        assert env["pageInfo"] == {"hasNextPage": True, "hasPreviousPage": False, "endCursor": "c1"}

    def test_no_filter(self, client):
        client.list_issues.return_value = page([])
        env = operations.list_issues(client)
        client.list_issues.assert_called_once_with(filter=None, first=50, after=None)
        assert env["data"] == []

    def test_raw_filter_merged(self, client):
        client.list_issues.return_value = page([])
        operations.list_issues(client, team="ENG", filter={"priority": {"eq": 1}})
        assert client.list_issues.call_args.kwargs["filter"] == {
            "priority": {"eq": 1},
            "team": {"key": {"eq": "ENG"}},
        }


class TestGetIssue:
    def test_found(self, client):
        client.get_issue_detail.return_value = dict(
            ISSUE_NODE,
            state={"id": "s1", "name": "Todo", "color": "#fff", "type": "unstarted"},
            assignee=None,
            team={"id": TEAM_ID, "key": "ENG", "name": "Engineering"},
            labels=[{"id": "l1", "name": "Bug", "color": "#f00"}],
            commentsCount=2,
        )
        env = operations.get_issue(client, "ENG-123")
        client.get_issue_detail.assert_called_once_with(ISSUE_ID)
        data = env["data"]
        assert data["state"]["name"] == "Todo"
        assert data["assignee"] is None
        assert data["commentsCount"] == 2
        summary = operations.issue_summary(data)
        assert summary["assignee"] == "Unassigned"
        assert summary["labels"] == "Bug"
        assert summary["team"] == "ENG"

    def test_missing(self, client):
        client.get_issue_detail.return_value = None
        with pytest.raises(CliError) as exc_info:
            operations.get_issue(client, "ENG-123")
        assert exc_info.value.code == NOT_FOUND
        assert exc_info.value.message == "Issue ENG-123 not found"


class TestCreateIssue:
    def test_resolves_team(self, client):
        client.create_issue.return_value = {"success": True, "issue": ISSUE_NODE}
        env = operations.create_issue(client, "Fix login", team="ENG", priority=2, label_ids="a, b")
        client.create_issue.assert_called_once_with(
            {"title": "Fix login", "teamId": TEAM_ID, "priority": 2, "labelIds": ["a", "b"]}
        )
        assert env["data"]["identifier"] == "ENG-123"

    def test_team_id_skips_lookup(self, client):
        client.create_issue.return_value = {"success": True, "issue": ISSUE_NODE}
        operations.create_issue(client, "T", team_id="tid")
        client.find_teams_by_key.assert_not_called()

    def test_team_required(self, client):
        with pytest.raises(CliError) as exc_info:
            operations.create_issue(client, "T")
        assert exc_info.value.code == INVALID_INPUT

    def test_unknown_team(self, client):
        client.find_teams_by_key.return_value = []
        with pytest.raises(CliError) as exc_info:
            operations.create_issue(client, "T", team="OPS")
        assert exc_info.value.code == NOT_FOUND

    def test_bad_priority(self, client):
        with pytest.raises(CliError) as exc_info:
            operations.create_issue(client, "T", team_id="tid", priority=7)
        assert exc_info.value.code == INVALID_INPUT
        client.create_issue.assert_not_called()

    def test_mutation_failure(self, client):
        client.create_issue.return_value = {"success": False}
        with pytest.raises(CliError) as exc_info:
            operations.create_issue(client, "T", team_id="tid")
        assert exc_info.value.code == API_ERROR
        assert exc_info.value.message == "Failed to create issue"


class TestUpdateIssue:
    def test_fields(self, client):
        client.update_issue.return_value = {"success": True, "issue": ISSUE_NODE}
        operations.update_issue(client, "ENG-123", title="New", assignee_id="")
        client.update_issue.assert_called_once_with(ISSUE_ID, {"title": "New", "assigneeId": None})

    def test_raw_input(self, client):
        client.update_issue.return_value = {"success": True, "issue": ISSUE_NODE}
        operations.update_issue(client, "ENG-123", input={"priority": 1})
        client.update_issue.assert_called_once_with(ISSUE_ID, {"priority": 1})

    def test_input_and_fields_conflict(self, client):
        with pytest.raises(CliError) as exc_info:
            operations.update_issue(client, "ENG-123", input={"priority": 1}, title="x")
        assert exc_info.value.code == INVALID_INPUT

    def test_nothing_to_update(self, client):
        with pytest.raises(CliError) as exc_info:
            operations.update_issue(client, "ENG-123")
        assert "No update fields provided" in exc_info.value.message
        client.find_teams_by_key.assert_not_called()


class TestDeleteIssue:
    def test_trash(self, client):
        client.get_issue.return_value = ISSUE_NODE
        client.archive_issue.return_value = {"success": True}
        env = operations.delete_issue(client, "ENG-123")
        assert env["data"]["message"] == "Issue ENG-123 moved to trash"
        assert env["data"]["permanent"] is False
        client.delete_issue.assert_not_called()

    def test_permanent(self, client):
        client.get_issue.return_value = ISSUE_NODE
        client.archive_issue.return_value = {"success": True}
        client.delete_issue.return_value = {"success": True}
        env = operations.delete_issue(client, "ENG-123", permanent=True)
        assert env["data"]["message"] == "Issue ENG-123 permanently deleted"
        client.delete_issue.assert_called_once_with(ISSUE_ID)

    def test_missing(self, client):
        client.get_issue.return_value = None
        with pytest.raises(CliError) as exc_info:
            operations.delete_issue(client, "ENG-123")
        assert exc_info.value.code == NOT_FOUND
        client.archive_issue.assert_not_called()


class TestSearchIssues:
    def test_empty_query(self, client):
        with pytest.raises(CliError):
            operations.search_issues(client, "  ")

    def test_team_filter(self, client):
        client.search_issues.return_value = page([ISSUE_NODE])
        env = operations.search_issues(client, "login", team="eng")
        client.search_issues.assert_called_once_with(
            "login", filter={"team": {"key": {"eq": "ENG"}}}, first=20, after=None
        )
        assert "estimate" not in env["data"][0]


class TestDocuments:
    def test_list_flattens(self, client):
        client.list_documents.return_value = page(
            [{"id": "d1", "title": "Spec", "project": {"id": "p1", "name": "Web"}, "creator": None}]
        )
        env = operations.list_documents(client, project_id="p1")
        assert client.list_documents.call_args.kwargs["filter"] == {"project": {"id": {"eq": "p1"}}}
        assert env["data"][0]["projectName"] == "Web"
        assert env["data"][0]["creatorName"] is None

    def test_get_missing(self, client):
        client.get_document.return_value = None
        with pytest.raises(CliError) as exc_info:
            operations.get_document(client, "d1")
        assert exc_info.value.code == NOT_FOUND

    def test_summary_truncates_content(self, client):
        client.get_document.return_value = {"id": "d1", "title": "T", "content": "x" * 150}
        data = operations.get_document(client, "d1")["data"]
        summary = operations.document_summary(data)
        assert summary["content"] == "x" * 100 + "..."
        assert summary["project"] == "None"

    def test_update_detaches_project(self, client):
        client.update_document.return_value = {"success": True, "document": {"id": "d1"}}
        operations.update_document(client, "d1", project_id="")
        client.update_document.assert_called_once_with("d1", {"projectId": None})

    def test_update_requires_fields(self, client):
        with pytest.raises(CliError):
            operations.update_document(client, "d1")

    def test_delete(self, client):
        client.delete_document.return_value = {"success": True}
        assert operations.delete_document(client, "d1")["data"] == {"id": "d1", "deleted": True}

    def test_delete_failure(self, client):
        client.delete_document.return_value = {"success": False}
        with pytest.raises(CliError) as exc_info:
            operations.delete_document(client, "d1")
        assert exc_info.value.message == "Failed to delete document"


class TestInitiatives:
    def test_list_filters_status_and_averages(self, client):
        client.list_initiatives.return_value = page(
            [
                {
                    "id": "n1",
                    "name": "Q1",
                    "status": "Active",
                    "projects": {"nodes": [{"progress": 0.5}, {"progress": 0.25}]},
                },
                {"id": "n2", "name": "Q2", "status": "Planned", "projects": {"nodes": []}},
            ]
        )
        env = operations.list_initiatives(client, status="Active")
        assert [row["id"] for row in env["data"]] == ["n1"]
        assert env["data"][0]["progress"] == 0.375
        assert env["data"][0]["projectCount"] == 2

    def test_invalid_status(self, client):
        with pytest.raises(CliError) as exc_info:
            operations.list_initiatives(client, status="Done")
        assert exc_info.value.code == INVALID_INPUT

    def test_create(self, client):
        client.create_initiative.return_value = {
            "success": True,
            "initiative": {"id": "n1", "name": "Q1", "status": "Planned", "owner": None},
        }
        env = operations.create_initiative(client, "Q1", status="Planned", target_date="2025-03-31")
        client.create_initiative.assert_called_once_with(
            {"name": "Q1", "status": "Planned", "targetDate": "2025-03-31"}
        )
        assert env["data"]["owner"] is None

    def test_update_requires_fields(self, client):
        with pytest.raises(CliError):
            operations.update_initiative(client, "n1")

    def test_summary(self, client):
        client.get_initiative.return_value = {
            "id": "n1",
            "name": "Q1",
            "status": "Active",
            "owner": {"id": "u1", "name": "Ada"},
            "projects": {"nodes": [{"id": "p1", "name": "Web"}]},
        }
        summary = operations.initiative_summary(operations.get_initiative(client, "n1")["data"])
        assert summary["owner"] == "Ada"
        assert summary["projects"] == 1
        assert summary["targetDate"] == "None"


class TestComments:
    def test_list(self, client):
        client.list_comments.return_value = page(
            [{"id": "c1", "body": "hi", "user": ADA}]
        )
        env = operations.list_comments(client, "ENG-123")
        client.list_comments.assert_called_once_with(ISSUE_ID, first=50, after=None)
        assert env["data"][0]["userName"] == "Ada"

    def test_list_missing_issue(self, client):
        client.list_comments.return_value = None
        with pytest.raises(CliError) as exc_info:
            operations.list_comments(client, "ENG-123")
        assert exc_info.value.code == NOT_FOUND

    def test_add(self, client):
        client.get_issue.return_value = ISSUE_NODE
        client.create_comment.return_value = {
            "success": True,
            "comment": {"id": "c1", "body": "hi", "user": ADA},
        }
        env = operations.add_comment(client, "ENG-123", "hi")
        assert env["data"]["issue"]["identifier"] == "ENG-123"
        assert operations.comment_summary(env["data"])["user"] == "Ada"

    def test_add_empty_body(self, client):
        with pytest.raises(CliError):
            operations.add_comment(client, "ENG-123", " ")


class TestListings:
    def test_labels_for_team(self, client):
        client.list_labels.return_value = page(
            [{"id": "l1", "name": "Area", "isGroup": None, "parent": {"id": "l0"}}]
        )
        env = operations.list_labels(client, team="ENG")
        client.list_labels.assert_called_once_with(team_id=TEAM_ID, first=100, after=None)
        assert env["data"][0]["isGroup"] is False
        assert env["data"][0]["parentId"] == "l0"

    def test_states_sorted(self, client):
        client.list_workflow_states.return_value = page(
            [
                {"id": "3", "type": "completed", "position": 0, "team": {"key": "ENG"}},
                {"id": "2", "type": "started", "position": 2, "team": {"key": "ENG"}},
                {"id": "1", "type": "started", "position": 1, "team": {"key": "ENG"}},
                {"id": "0", "type": "backlog", "position": 9, "team": {"key": "APP"}},
            ]
        )
        env = operations.list_states(client)
        assert [row["id"] for row in env["data"]] == ["0", "1", "2", "3"]

    def test_projects_filter(self, client):
        client.list_projects.return_value = page([{"id": "p1", "name": "Web", "state": "started"}])
        operations.list_projects(client, team="eng", state="started")
        assert client.list_projects.call_args.kwargs["filter"] == {
            "state": {"eq": "started"},
            "accessibleTeams": {"some": {"key": {"eq": "ENG"}}},
        }

    def test_projects_bad_state(self, client):
        with pytest.raises(CliError):
            operations.list_projects(client, state="done")

    def test_users_active(self, client):
        client.list_users.return_value = page([{"id": "u1", "name": "Ada", "active": True}])
        env = operations.list_users(client, active=True)
        assert client.list_users.call_args.kwargs["filter"] == {"active": {"eq": True}}
        assert env["data"][0]["name"] == "Ada"


class TestRunQuery:
    def test_success(self, client):
        client.raw_query.return_value = {"viewer": {"id": "u1"}}
        env = operations.run_query(client, "{ viewer { id } }", {"a": 1}, timeout=5)
        client.raw_query.assert_called_once_with("{ viewer { id } }", {"a": 1}, timeout=5)
        assert env == {"success": True, "data": {"viewer": {"id": "u1"}}}

    def test_graphql_errors_in_details(self, client):
        errors = [{"message": "Cannot query field"}]
        client.raw_query.side_effect = GraphQLError("Cannot query field", errors=errors)
        with pytest.raises(CliError) as exc_info:
            operations.run_query(client, "{ nope }")
        assert exc_info.value.code == API_ERROR
        assert exc_info.value.details == {"errors": errors}

    def test_http_level_error_reraised(self, client):
        client.raw_query.side_effect = GraphQLError("Request failed with status 401: x", status=401)
        with pytest.raises(GraphQLError):
            operations.run_query(client, "{ viewer { id } }")

    def test_empty_query(self, client):
        with pytest.raises(CliError) as exc_info:
            operations.run_query(client, "")
        assert exc_info.value.code == INVALID_INPUT

    def test_variables_must_be_object(self, client):
        with pytest.raises(CliError):
            operations.run_query(client, "{ x }", [1])


class TestSchema:
    def test_wraps_describe(self):
        env = operations.schema("issues")
        assert env["success"] is True
        assert env["data"]["entity"] == "issues"
