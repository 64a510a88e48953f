"""Write tools: issue, document, initiative and comment mutations."""

from __future__ import annotations

from typing import Literal

from linear_cli import CliError
from linear_cli.errors import error_response
from linear_cli.mcp_server._core import _call, _validate_input, _validate_reference, _validate_uuid

InitiativeStatus = Literal["Planned", "Active", "Completed"]


def create_issue(
    title: str,
    team: str | None = None,
    team_id: str | None = None,
    description: str | None = None,
    priority: int | None = None,
    assignee_id: str | None = None,
    state_id: str | None = None,
    project_id: str | None = None,
    estimate: float | None = None,
    label_ids: list[str] | None = None,
) -> dict:
    """Create an issue. Give either a team key (team) or a team UUID (team_id).

    Args:
        title: Issue title (max 500 chars).
        description: Markdown body.
        priority: 0 none, 1 urgent, 2 high, 3 medium, 4 low.

    Returns:
        Envelope with id, identifier, title, url, createdAt.
    """
    try:
        title = _validate_input(title, "title")
        if description is not None:
            description = _validate_input(description, "description")
    except CliError as e:
        return error_response(e)
    return _call(
        "create_issue",
        title=title,
        team=team,
        team_id=team_id,
        description=description,
        priority=priority,
        assignee_id=assignee_id,
        state_id=state_id,
        project_id=project_id,
        estimate=estimate,
        label_ids=label_ids,
    )


def update_issue(
    issue: str,
    title: str | None = None,
    description: str | None = None,
    priority: int | None = None,
    assignee_id: str | None = None,
    state_id: str | None = None,
    project_id: str | None = None,
    estimate: float | None = None,
    label_ids: list[str] | None = None,
) -> dict:
    """Update an issue (UUID or identifier). Empty assignee_id unassigns.

    label_ids replaces the issue's existing labels.
    """
    try:
        issue = _validate_reference(issue)
        if title is not None:
            title = _validate_input(title, "title")
        if description is not None:
            description = _validate_input(description, "description")
    except CliError as e:
        return error_response(e)
    return _call(
        "update_issue",
        reference=issue,
        title=title,
        description=description,
        priority=priority,
        assignee_id=assignee_id,
        state_id=state_id,
        project_id=project_id,
        estimate=estimate,
        label_ids=label_ids,
    )


def delete_issue(issue: str, permanent: bool = False) -> dict:
    """Move an issue to the trash; permanent=True deletes it for good."""
    try:
        issue = _validate_reference(issue)
    except CliError as e:
        return error_response(e)
    return _call("delete_issue", reference=issue, permanent=permanent)


def create_document(
    title: str,
    content: str | None = None,
    project_id: str | None = None,
    icon: str | None = None,
    color: str | None = None,
) -> dict:
    """Create a markdown document, optionally attached to a project."""
    try:
        title = _validate_input(title, "title")
        if content is not None:
            content = _validate_input(content, "content")
    except CliError as e:
        return error_response(e)
    return _call(
        "create_document",
        title=title,
        content=content,
        project_id=project_id,
        icon=icon,
        color=color,
    )


def update_document(
    document_id: str,
    title: str | None = None,
    content: str | None = None,
    project_id: str | None = None,
    icon: str | None = None,
    color: str | None = None,
) -> dict:
    """Update a document. An empty project_id detaches it from its project."""
    try:
        if title is not None:
            title = _validate_input(title, "title")
        if content is not None:
            content = _validate_input(content, "content")
    except CliError as e:
        return error_response(e)
    return _call(
        "update_document",
        document_id=document_id,
        title=title,
        content=content,
        project_id=project_id,
        icon=icon,
        color=color,
    )


def delete_document(document_id: str) -> dict:
    """Delete a document by UUID."""
    try:
        document_id = _validate_uuid(document_id, "document_id")
    except CliError as e:
        return error_response(e)
    return _call("delete_document", document_id=document_id)


def create_initiative(
    name: str,
    description: str | None = None,
    status: InitiativeStatus | None = None,
    target_date: str | None = None,
    owner_id: str | None = None,
) -> dict:
    """Create an initiative. target_date is YYYY-MM-DD."""
    try:
        name = _validate_input(name, "name")
        if description is not None:
            description = _validate_input(description, "description")
    except CliError as e:
        return error_response(e)
    return _call(
        "create_initiative",
        name=name,
        description=description,
        status=status,
        target_date=target_date,
        owner_id=owner_id,
    )


def update_initiative(
    initiative_id: str,
    name: str | None = None,
    description: str | None = None,
    status: InitiativeStatus | None = None,
    target_date: str | None = None,
    owner_id: str | None = None,
) -> dict:
    """Update an initiative's name, description, status, target date or owner."""
    try:
        if name is not None:
            name = _validate_input(name, "name")
        if description is not None:
            description = _validate_input(description, "description")
    except CliError as e:
        return error_response(e)
    return _call(
        "update_initiative",
        initiative_id=initiative_id,
        name=name,
        description=description,
        status=status,
        target_date=target_date,
        owner_id=owner_id,
    )


def delete_initiative(initiative_id: str) -> dict:
    """Delete an initiative by UUID."""
    try:
        initiative_id = _validate_uuid(initiative_id, "initiative_id")
    except CliError as e:
        return error_response(e)
    return _call("delete_initiative", initiative_id=initiative_id)


def add_comment(issue: str, body: str) -> dict:
    """Comment on an issue (UUID or identifier such as ENG-123)."""
    try:
        issue = _validate_reference(issue)
        body = _validate_input(body, "body")
    except CliError as e:
        return error_response(e)
    return _call("add_comment", reference=issue, body=body)


def register(mcp):
    """Register all write tools with the FastMCP instance."""
    mcp.tool()(create_issue)
    mcp.tool()(update_issue)
    mcp.tool()(delete_issue)
    mcp.tool()(create_document)
    mcp.tool()(update_document)
    mcp.tool()(delete_document)
    mcp.tool()(create_initiative)
    mcp.tool()(update_initiative)
    mcp.tool()(delete_initiative)
    mcp.tool()(add_comment)
