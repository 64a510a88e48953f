"""
Operations shared by the CLI commands and the MCP server.

Each function takes a LinearClient plus keyword arguments, resolves any
references, calls the API and returns a response envelope. Nothing here
prints; rendering is the caller's job.
"""

from linear_cli import config
from linear_cli.envelope import build_success, build_success_list, page_info_from
from linear_cli.exceptions import API_ERROR, INVALID_INPUT, NOT_FOUND, CliError, GraphQLError
from linear_cli.resolver import resolve_issue_id, resolve_team_id
from linear_cli.schema import describe

STATE_TYPE_ORDER = {"backlog": 1, "unstarted": 2, "started": 3, "completed": 4, "canceled": 5}

_ISSUE_ROW_FIELDS = (
    "id",
    "identifier",
    "title",
    "description",
    "priority",
    "priorityLabel",
    "estimate",
    "url",
    "createdAt",
    "updatedAt",
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _pick(node, fields):
    return {field: node.get(field) for field in fields}


def _ref(obj, *fields):
    """``{id, name}``-style projection of a related object, or None."""
    if not obj:
        return None
    return {field: obj.get(field) for field in fields}


def _list_envelope(rows, connection):
    return build_success_list(rows, page_info_from(connection.get("pageInfo") or {}))


def _ensure_success(payload, action):
    if not payload.get("success"):
        raise CliError(f"Failed to {action}", API_ERROR)


def _mutation_entity(payload, action, entity):
    """Return the mutated entity, or raise API_ERROR if the mutation failed."""
    _ensure_success(payload, action)
    obj = payload.get(entity)
    if not obj:
        raise CliError(f"{entity.capitalize()} not returned", API_ERROR)
    return obj


def _validate_priority(priority):
    if priority is not None and not 0 <= priority <= 4:
        raise CliError(
            "Priority must be 0 (none), 1 (urgent), 2 (high), 3 (medium) or 4 (low).",
            INVALID_INPUT,
        )


def _validate_initiative_status(status):
    if status is not None and status not in config.VALID_INITIATIVE_STATUSES:
        raise CliError(
            f"Invalid status '{status}'. Use: {', '.join(config.VALID_INITIATIVE_STATUSES)}",
            INVALID_INPUT,
        )


def _compact(**fields):
    """Drop unset (None) fields from a mutation input."""
    return {key: value for key, value in fields.items() if value is not None}


def _split_ids(value):
    if value is None or isinstance(value, list):
        return value
    return [part.strip() for part in value.split(",") if part.strip()]


# ---------------------------------------------------------------------------
# Viewer
# ---------------------------------------------------------------------------


def _viewer_data(viewer):
    return {
        "id": viewer.get("id"),
        "name": viewer.get("name"),
        "email": viewer.get("email"),
        "displayName": viewer.get("displayName"),
        "active": viewer.get("active"),
        "admin": viewer.get("admin"),
        "timezone": viewer.get("timezone"),
        "createdAt": viewer.get("createdAt"),
        "organization": _ref(viewer.get("organization"), "id", "name", "urlKey"),
        "teams": [
            _ref(team, "id", "key", "name") for team in (viewer.get("teams") or {}).get("nodes", [])
        ],
    }


def whoami(client):
    return build_success(_viewer_data(client.viewer()))


def whoami_summary(data):
    return {
        "id": data["id"],
        "name": data["name"],
        "email": data["email"],
        "displayName": data["displayName"],
        "active": "Yes" if data["active"] else "No",
        "admin": "Yes" if data["admin"] else "No",
        "timezone": data["timezone"],
        "organization": (data["organization"] or {}).get("name") or "N/A",
        "teams": ", ".join(team["key"] for team in data["teams"]),
    }


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------


def list_issues(client, team=None, assignee=None, state=None, filter=None, first=50, after=None):
    issue_filter = dict(filter or {})
    if team:
        issue_filter["team"] = {"key": {"eq": team.upper()}}
    if assignee:
        assignee_id = client.viewer()["id"] if assignee == "me" else assignee
        issue_filter["assignee"] = {"id": {"eq": assignee_id}}
    if state:
        issue_filter["state"] = {"name": {"eq": state}}
    connection = client.list_issues(filter=issue_filter or None, first=first, after=after)
    rows = [_pick(node, _ISSUE_ROW_FIELDS) for node in connection["nodes"]]
    return _list_envelope(rows, connection)


def get_issue(client, reference):
    issue_id = resolve_issue_id(client, reference)
    issue = client.get_issue_detail(issue_id)
    if not issue:
        raise CliError(f"Issue {reference} not found", NOT_FOUND)
    data = _pick(issue, _ISSUE_ROW_FIELDS)
    data["state"] = _ref(issue.get("state"), "id", "name", "color", "type")
    data["assignee"] = _ref(issue.get("assignee"), "id", "name", "email")
    data["team"] = _ref(issue.get("team"), "id", "key", "name")
    data["labels"] = [_ref(label, "id", "name", "color") for label in issue.get("labels", [])]
    data["commentsCount"] = issue.get("commentsCount", 0)
    return build_success(data)


def issue_summary(data):
    return {
        "identifier": data["identifier"],
        "title": data["title"],
        "state": (data["state"] or {}).get("name") or "N/A",
        "priority": data["priorityLabel"],
        "team": (data["team"] or {}).get("key") or "N/A",
        "assignee": (data["assignee"] or {}).get("name") or "Unassigned",
        "labels": ", ".join(label["name"] for label in data["labels"]) or "None",
        "estimate": data["estimate"] if data["estimate"] is not None else "None",
        "comments": data["commentsCount"],
        "url": data["url"],
        "createdAt": data["createdAt"],
        "updatedAt": data["updatedAt"],
    }


def create_issue(
    client,
    title,
    team=None,
    team_id=None,
    description=None,
    priority=None,
    assignee_id=None,
    state_id=None,
    project_id=None,
    estimate=None,
    label_ids=None,
):
    if not title:
        raise CliError("Issue title is required.", INVALID_INPUT)
    if not team_id:
        if not team:
            raise CliError("A team is required: pass --team KEY or --team-id ID.", INVALID_INPUT)
        team_id = resolve_team_id(client, team)
    _validate_priority(priority)
    issue_input = _compact(
        title=title,
        teamId=team_id,
        description=description,
        priority=priority,
        assigneeId=assignee_id,
        stateId=state_id,
        projectId=project_id,
        estimate=estimate,
        labelIds=_split_ids(label_ids),
    )
    issue = _mutation_entity(client.create_issue(issue_input), "create issue", "issue")
    return build_success(_pick(issue, ("id", "identifier", "title", "url", "createdAt")))


def update_issue(
    client,
    reference,
    input=None,
    title=None,
    description=None,
    priority=None,
    assignee_id=None,
    state_id=None,
    project_id=None,
    estimate=None,
    label_ids=None,
):
    """Update an issue from a raw ``input`` dict or from individual fields.

    An empty ``assignee_id`` unassigns the issue.
    """
    fields = _compact(
        title=title,
        description=description,
        priority=priority,
        assigneeId=assignee_id,
        stateId=state_id,
        projectId=project_id,
        estimate=estimate,
        labelIds=_split_ids(label_ids),
    )
    if input is not None:
        if fields:
            raise CliError("--input cannot be combined with individual field flags.", INVALID_INPUT)
        if not isinstance(input, dict):
            raise CliError("--input must be a JSON object.", INVALID_INPUT)
        issue_input = input
    else:
        _validate_priority(priority)
        if fields.get("assigneeId") == "":
            fields["assigneeId"] = None
        issue_input = fields
    if not issue_input:
        raise CliError(
            "No update fields provided. Use --input or individual flags.", INVALID_INPUT
        )

    issue_id = resolve_issue_id(client, reference)
    issue = _mutation_entity(client.update_issue(issue_id, issue_input), "update issue", "issue")
    return build_success(_pick(issue, ("id", "identifier", "title", "url", "updatedAt")))


def delete_issue(client, reference, permanent=False):
    """Move an issue to the trash, or archive then delete it for good."""
    issue_id = resolve_issue_id(client, reference)
    issue = client.get_issue(issue_id)
    if not issue:
        raise CliError(f"Issue {reference} not found", NOT_FOUND)
    identifier = issue.get("identifier")

    _ensure_success(client.archive_issue(issue_id), "archive issue")
    if permanent:
        _ensure_success(client.delete_issue(issue_id), "delete issue")

    message = (
        f"Issue {identifier} permanently deleted"
        if permanent
        else f"Issue {identifier} moved to trash"
    )
    return build_success(
        {
            "id": issue_id,
            "identifier": identifier,
            "deleted": True,
            "permanent": permanent,
            "message": message,
        }
    )


def search_issues(client, query, team=None, first=20, after=None):
    if not query or not query.strip():
        raise CliError("Search query must not be empty.", INVALID_INPUT)
    issue_filter = {"team": {"key": {"eq": team.upper()}}} if team else None
    connection = client.search_issues(query, filter=issue_filter, first=first, after=after)
    rows = [
        _pick(node, [f for f in _ISSUE_ROW_FIELDS if f != "estimate"])
        for node in connection["nodes"]
    ]
    return _list_envelope(rows, connection)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def _document_row(node):
    project = node.get("project") or {}
    creator = node.get("creator") or {}
    return {
        "id": node.get("id"),
        "title": node.get("title"),
        "icon": node.get("icon"),
        "color": node.get("color"),
        "projectId": project.get("id"),
        "projectName": project.get("name"),
        "creatorId": creator.get("id"),
        "creatorName": creator.get("name"),
        "createdAt": node.get("createdAt"),
        "updatedAt": node.get("updatedAt"),
    }


def list_documents(client, project_id=None, first=50, after=None):
    doc_filter = {"project": {"id": {"eq": project_id}}} if project_id else None
    connection = client.list_documents(filter=doc_filter, first=first, after=after)
    return _list_envelope([_document_row(node) for node in connection["nodes"]], connection)


def get_document(client, document_id):
    document = client.get_document(document_id)
    if not document:
        raise CliError(f"Document {document_id} not found", NOT_FOUND)
    return build_success(
        {
            "id": document.get("id"),
            "title": document.get("title"),
            "content": document.get("content"),
            "icon": document.get("icon"),
            "color": document.get("color"),
            "project": _ref(document.get("project"), "id", "name"),
            "creator": _ref(document.get("creator"), "id", "name"),
            "createdAt": document.get("createdAt"),
            "updatedAt": document.get("updatedAt"),
        }
    )


def document_summary(data):
    content = data["content"]
    return {
        "id": data["id"],
        "title": data["title"],
        "project": (data["project"] or {}).get("name") or "None",
        "creator": (data["creator"] or {}).get("name") or "Unknown",
        "content": f"{content[:100]}..." if content else "Empty",
        "createdAt": data["createdAt"],
        "updatedAt": data["updatedAt"],
    }


def create_document(client, title, content=None, project_id=None, icon=None, color=None):
    if not title:
        raise CliError("Document title is required.", INVALID_INPUT)
    doc_input = _compact(
        title=title, content=content, projectId=project_id, icon=icon, color=color
    )
    document = _mutation_entity(client.create_document(doc_input), "create document", "document")
    return build_success(
        {
            "id": document.get("id"),
            "title": document.get("title"),
            "project": _ref(document.get("project"), "id", "name"),
            "createdAt": document.get("createdAt"),
        }
    )


def update_document(
    client, document_id, title=None, content=None, project_id=None, icon=None, color=None
):
    """Update a document. An empty ``project_id`` detaches it from its project."""
    doc_input = _compact(title=title, content=content, icon=icon, color=color)
    if project_id is not None:
        doc_input["projectId"] = project_id or None
    if not doc_input:
        raise CliError("No update fields provided", INVALID_INPUT)
    document = _mutation_entity(
        client.update_document(document_id, doc_input), "update document", "document"
    )
    return build_success(_pick(document, ("id", "title", "updatedAt")))


def delete_document(client, document_id):
    _ensure_success(client.delete_document(document_id), "delete document")
    return build_success({"id": document_id, "deleted": True})


# ---------------------------------------------------------------------------
# Initiatives
# ---------------------------------------------------------------------------


def _average_progress(projects):
    if not projects:
        return 0.0
    return round(sum(p.get("progress") or 0 for p in projects) / len(projects), 4)


def list_initiatives(client, status=None, first=50, after=None):
    """List initiatives. The API has no status filter, so it is applied here."""
    _validate_initiative_status(status)
    connection = client.list_initiatives(first=first, after=after)
    rows = []
    for node in connection["nodes"]:
        if status and node.get("status") != status:
            continue
        projects = (node.get("projects") or {}).get("nodes", [])
        rows.append(
            {
                "id": node.get("id"),
                "name": node.get("name"),
                "status": node.get("status"),
                "owner": _ref(node.get("owner"), "id", "name"),
                "targetDate": node.get("targetDate"),
                "projectCount": len(projects),
                "progress": _average_progress(projects),
                "createdAt": node.get("createdAt"),
            }
        )
    return _list_envelope(rows, connection)


def get_initiative(client, initiative_id):
    initiative = client.get_initiative(initiative_id)
    if not initiative:
        raise CliError(f"Initiative {initiative_id} not found", NOT_FOUND)
    projects = (initiative.get("projects") or {}).get("nodes", [])
    return build_success(
        {
            "id": initiative.get("id"),
            "name": initiative.get("name"),
            "description": initiative.get("description"),
            "status": initiative.get("status"),
            "icon": initiative.get("icon"),
            "color": initiative.get("color"),
            "owner": _ref(initiative.get("owner"), "id", "name"),
            "creator": _ref(initiative.get("creator"), "id", "name"),
            "targetDate": initiative.get("targetDate"),
            "projects": [_ref(p, "id", "name") for p in projects],
            "createdAt": initiative.get("createdAt"),
            "updatedAt": initiative.get("updatedAt"),
        }
    )


def initiative_summary(data):
    description = data["description"]
    return {
        "id": data["id"],
        "name": data["name"],
        "status": data["status"],
        "owner": (data["owner"] or {}).get("name") or "Unassigned",
        "targetDate": data["targetDate"] or "None",
        "projects": len(data["projects"]),
        "description": f"{description[:100]}..." if description else "None",
        "createdAt": data["createdAt"],
    }


def _initiative_input(description, status, target_date, owner_id, icon, color):
    _validate_initiative_status(status)
    return _compact(
        description=description,
        status=status,
        targetDate=target_date,
        ownerId=owner_id,
        icon=icon,
        color=color,
    )


def create_initiative(
    client, name, description=None, status=None, target_date=None, owner_id=None, icon=None,
    color=None,
):
    if not name:
        raise CliError("Initiative name is required.", INVALID_INPUT)
    init_input = {"name": name}
    init_input.update(_initiative_input(description, status, target_date, owner_id, icon, color))
    initiative = _mutation_entity(
        client.create_initiative(init_input), "create initiative", "initiative"
    )
    return build_success(
        {
            "id": initiative.get("id"),
            "name": initiative.get("name"),
            "status": initiative.get("status"),
            "owner": _ref(initiative.get("owner"), "id", "name"),
            "createdAt": initiative.get("createdAt"),
        }
    )


def update_initiative(
    client, initiative_id, name=None, description=None, status=None, target_date=None,
    owner_id=None, icon=None, color=None,
):
    init_input = _compact(name=name)
    init_input.update(_initiative_input(description, status, target_date, owner_id, icon, color))
    if not init_input:
        raise CliError("No update fields provided", INVALID_INPUT)
    initiative = _mutation_entity(
        client.update_initiative(initiative_id, init_input), "update initiative", "initiative"
    )
    return build_success(_pick(initiative, ("id", "name", "status", "updatedAt")))


def delete_initiative(client, initiative_id):
    _ensure_success(client.delete_initiative(initiative_id), "delete initiative")
    return build_success({"id": initiative_id, "deleted": True})


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


def list_comments(client, reference, first=50, after=None):
    issue_id = resolve_issue_id(client, reference)
    connection = client.list_comments(issue_id, first=first, after=after)
    if connection is None:
        raise CliError(f"Issue {reference} not found", NOT_FOUND)
    rows = []
    for node in connection["nodes"]:
        user = node.get("user") or {}
        rows.append(
            {
                "id": node.get("id"),
                "body": node.get("body"),
                "createdAt": node.get("createdAt"),
                "updatedAt": node.get("updatedAt"),
                "userId": user.get("id"),
                "userName": user.get("name"),
                "userEmail": user.get("email"),
            }
        )
    return _list_envelope(rows, connection)


def add_comment(client, reference, body):
    if not body or not body.strip():
        raise CliError("Comment body must not be empty.", INVALID_INPUT)
    issue_id = resolve_issue_id(client, reference)
    issue = client.get_issue(issue_id)
    if not issue:
        raise CliError(f"Issue {reference} not found", NOT_FOUND)
    comment = _mutation_entity(client.create_comment(issue_id, body), "create comment", "comment")
    return build_success(
        {
            "id": comment.get("id"),
            "body": comment.get("body"),
            "createdAt": comment.get("createdAt"),
            "user": _ref(comment.get("user"), "id", "name", "email"),
            "issue": _ref(issue, "id", "identifier", "title"),
        }
    )


def comment_summary(data):
    return {
        "id": data["id"],
        "issue": data["issue"]["identifier"],
        "user": (data["user"] or {}).get("name") or "Unknown",
        "body": data["body"],
        "createdAt": data["createdAt"],
    }


# ---------------------------------------------------------------------------
# Workspace listings
# ---------------------------------------------------------------------------


def list_labels(client, team=None, first=100, after=None):
    team_id = resolve_team_id(client, team) if team else None
    connection = client.list_labels(team_id=team_id, first=first, after=after)
    rows = [
        {
            "id": node.get("id"),
            "name": node.get("name"),
            "color": node.get("color"),
            "description": node.get("description"),
            "isGroup": bool(node.get("isGroup")),
            "parentId": (node.get("parent") or {}).get("id"),
            "createdAt": node.get("createdAt"),
        }
        for node in connection["nodes"]
    ]
    return _list_envelope(rows, connection)


def _state_sort_key(state):
    return (
        state["teamKey"],
        STATE_TYPE_ORDER.get(state["type"], 99),
        state["position"] if state["position"] is not None else 0,
    )


def list_states(client, team=None, first=100, after=None):
    """Workflow states sorted by team key, then type order, then position."""
    team_id = resolve_team_id(client, team) if team else None
    connection = client.list_workflow_states(team_id=team_id, first=first, after=after)
    rows = []
    for node in connection["nodes"]:
        state_team = node.get("team") or {}
        rows.append(
            {
                "id": node.get("id"),
                "name": node.get("name"),
                "color": node.get("color"),
                "type": node.get("type"),
                "position": node.get("position"),
                "teamId": state_team.get("id") or "",
                "teamKey": state_team.get("key") or "",
            }
        )
    rows.sort(key=_state_sort_key)
    return _list_envelope(rows, connection)


def list_projects(client, team=None, state=None, first=50, after=None):
    if state is not None and state not in config.VALID_PROJECT_STATES:
        raise CliError(
            f"Invalid state '{state}'. Use: {', '.join(config.VALID_PROJECT_STATES)}",
            INVALID_INPUT,
        )
    project_filter = {}
    if state:
        project_filter["state"] = {"eq": state}
    if team:
        project_filter["accessibleTeams"] = {"some": {"key": {"eq": team.upper()}}}
    connection = client.list_projects(filter=project_filter or None, first=first, after=after)
    rows = [
        _pick(
            node,
            (
                "id",
                "name",
                "description",
                "state",
                "progress",
                "targetDate",
                "url",
                "createdAt",
                "updatedAt",
            ),
        )
        for node in connection["nodes"]
    ]
    return _list_envelope(rows, connection)


def list_users(client, active=False, first=100, after=None):
    user_filter = {"active": {"eq": True}} if active else None
    connection = client.list_users(filter=user_filter, first=first, after=after)
    rows = [
        _pick(
            node,
            (
                "id",
                "name",
                "displayName",
                "email",
                "active",
                "admin",
                "guest",
                "avatarUrl",
                "createdAt",
            ),
        )
        for node in connection["nodes"]
    ]
    return _list_envelope(rows, connection)


# ---------------------------------------------------------------------------
# Raw query and schema
# ---------------------------------------------------------------------------


def run_query(client, gql, variables=None, timeout=config.QUERY_TIMEOUT_SECONDS):
    """Raw GraphQL passthrough.

    GraphQL errors in a 200 response become API_ERROR with the full
    ``errors`` list in details; HTTP-level failures are left to the
    error classifier.
    """
    if not gql or not gql.strip():
        raise CliError("GraphQL query must not be empty.", INVALID_INPUT)
    if variables is not None and not isinstance(variables, dict):
        raise CliError("--variables must be a JSON object.", INVALID_INPUT)
    try:
        data = client.raw_query(gql, variables, timeout=timeout)
    except GraphQLError as e:
        if e.status is not None:
            raise
        raise CliError(str(e), API_ERROR, details={"errors": e.errors}) from e
    return build_success(data)


def schema(entity=None, full=False, include_examples=False):
    return build_success(describe(entity, full=full, include_examples=include_examples))
