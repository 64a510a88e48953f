"""Read tools: lookups, listings, search, raw query and schema."""

from __future__ import annotations

from typing import Literal

from linear_cli import CliError
from linear_cli.errors import error_response
from linear_cli.mcp_server._core import _call, _validate_input, _validate_reference


def whoami() -> dict:
    """Get the authenticated user, their organization and teams.

    Returns:
        Envelope whose data has id, name, email, organization, teams.
    """
    return _call("whoami")


def list_issues(
    team: str | None = None,
    assignee: str | None = None,
    state: str | None = None,
    filter: dict | None = None,
    first: int = 50,
    after: str | None = None,
) -> dict:
    """List issues. Filters combine with AND.

    Args:
        team: Team key, e.g. ENG.
        assignee: User ID, or 'me' for the authenticated user.
        state: Workflow state name, e.g. 'In Progress'.
        filter: Raw IssueFilter object merged under the shorthand filters.
        first/after: Page size and the endCursor of the previous page.

    Returns:
        List envelope with data and pageInfo.
    """
    return _call(
        "list_issues",
        team=team,
        assignee=assignee,
        state=state,
        filter=filter,
        first=first,
        after=after,
    )


def get_issue(issue: str) -> dict:
    """Get one issue with state, assignee, team, labels and comment count.

    Args:
        issue: UUID or identifier such as ENG-123.
    """
    try:
        issue = _validate_reference(issue)
    except CliError as e:
        return error_response(e)
    return _call("get_issue", reference=issue)


def search_issues(
    query: str, team: str | None = None, first: int = 20, after: str | None = None
) -> dict:
    """Full-text issue search, optionally limited to one team key."""
    try:
        query = _validate_input(query, "query")
    except CliError as e:
        return error_response(e)
    return _call("search_issues", query=query, team=team, first=first, after=after)


def list_documents(
    project_id: str | None = None, first: int = 50, after: str | None = None
) -> dict:
    """List documents, optionally only those attached to one project."""
    return _call("list_documents", project_id=project_id, first=first, after=after)


def get_document(document_id: str) -> dict:
    """Get a document including its markdown content."""
    return _call("get_document", document_id=document_id)


def list_initiatives(
    status: Literal["Planned", "Active", "Completed"] | None = None,
    first: int = 50,
    after: str | None = None,
) -> dict:
    """List initiatives with owner, project count and average project progress."""
    return _call("list_initiatives", status=status, first=first, after=after)


def get_initiative(initiative_id: str) -> dict:
    """Get one initiative with owner, creator and projects."""
    return _call("get_initiative", initiative_id=initiative_id)


def list_comments(issue: str, first: int = 50, after: str | None = None) -> dict:
    """List comments on an issue (UUID or identifier such as ENG-123)."""
    try:
        issue = _validate_reference(issue)
    except CliError as e:
        return error_response(e)
    return _call("list_comments", reference=issue, first=first, after=after)


def list_labels(team: str | None = None, first: int = 100, after: str | None = None) -> dict:
    """List workspace labels, or one team's labels by team key."""
    return _call("list_labels", team=team, first=first, after=after)


def list_states(team: str | None = None, first: int = 100, after: str | None = None) -> dict:
    """List workflow states sorted by team, state type and position."""
    return _call("list_states", team=team, first=first, after=after)


def list_projects(
    team: str | None = None,
    state: Literal["planned", "started", "paused", "completed", "canceled"] | None = None,
    first: int = 50,
    after: str | None = None,
) -> dict:
    """List projects, optionally by team key and/or project state."""
    return _call("list_projects", team=team, state=state, first=first, after=after)


def list_users(active: bool = False, first: int = 100, after: str | None = None) -> dict:
    """List workspace users; active=True hides deactivated accounts."""
    return _call("list_users", active=active, first=first, after=after)


def run_query(query: str, variables: dict | None = None, timeout: int = 30) -> dict:
    """Run a raw GraphQL query. GraphQL errors come back in error.details.errors."""
    return _call("run_query", gql=query, variables=variables, timeout=timeout)


def schema(entity: str | None = None, full: bool = False, include_examples: bool = False) -> dict:
    """Describe the entities this server can read and write."""
    return _call("schema", entity=entity, full=full, include_examples=include_examples)


def register(mcp):
    """Register all read tools with the FastMCP instance."""
    mcp.tool()(whoami)
    mcp.tool()(list_issues)
    mcp.tool()(get_issue)
    mcp.tool()(search_issues)
    mcp.tool()(list_documents)
    mcp.tool()(get_document)
    mcp.tool()(list_initiatives)
    mcp.tool()(get_initiative)
    mcp.tool()(list_comments)
    mcp.tool()(list_labels)
    mcp.tool()(list_states)
    mcp.tool()(list_projects)
    mcp.tool()(list_users)
    mcp.tool()(run_query)
    mcp.tool()(schema)
