"""
Static entity schemas for discovery by scripts and agents.

``linear schema`` answers "what can I ask for?" without a network round trip;
anything beyond these summaries goes through ``linear query``.
"""

from linear_cli.exceptions import NOT_FOUND, CliError


def _field(type_, description, required=False):
    spec = {"type": type_, "description": description}
    if required:
        spec["required"] = True
    return spec


ENTITY_SCHEMAS = {
    "issues": {
        "entity": "issues",
        "operations": ["list", "get", "create", "update", "delete"],
        "description": "Work items in Linear (bugs, features, tasks)",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "identifier": _field("String!", "Human-readable identifier (e.g., ENG-123)"),
            "title": _field("String!", "Issue title"),
            "description": _field("String", "Issue description in markdown"),
            "priority": _field("Int!", "Priority (0=none, 1=urgent, 2=high, 3=medium, 4=low)"),
            "priorityLabel": _field("String!", "Priority label text"),
            "estimate": _field("Float", "Story points estimate"),
            "url": _field("String!", "Linear URL"),
            "createdAt": _field("DateTime!", "Creation timestamp"),
            "updatedAt": _field("DateTime!", "Last update timestamp"),
        },
        "filters": {
            "team": _field("TeamFilter", "Filter by team"),
            "assignee": _field("UserFilter", "Filter by assignee"),
            "state": _field("WorkflowStateFilter", "Filter by state"),
            "project": _field("ProjectFilter", "Filter by project"),
            "priority": _field("IntComparator", "Filter by priority"),
            "labels": _field("IssueLabelFilter", "Filter by labels"),
            "createdAt": _field("DateComparator", "Filter by creation date"),
            "updatedAt": _field("DateComparator", "Filter by update date"),
        },
        "createInput": {
            "title": _field("String!", "Issue title", required=True),
            "teamId": _field("ID!", "Team ID", required=True),
            "description": _field("String", "Issue description in markdown"),
            "priority": _field("Int", "Priority (0-4)"),
            "assigneeId": _field("ID", "Assignee user ID"),
            "stateId": _field("ID", "Workflow state ID"),
            "projectId": _field("ID", "Project ID"),
            "estimate": _field("Float", "Story points estimate"),
            "labelIds": _field("[ID!]", "Array of label IDs"),
        },
        "examples": {
            "list": 'linear issues list --team ENG --state "In Progress"',
            "get": "linear issues get ENG-123",
            "create": 'linear issues create --title "Fix bug" --team ENG',
            "update": "linear issues update ENG-123 --state-id STATE_ID",
            "delete": "linear issues delete ENG-123",
        },
    },
    "documents": {
        "entity": "documents",
        "operations": ["list", "get", "create", "update", "delete"],
        "description": "Markdown documents, optionally attached to a project",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "title": _field("String!", "Document title"),
            "content": _field("String", "Document content in markdown"),
            "icon": _field("String", "Document icon"),
            "color": _field("String", "Document color"),
            "createdAt": _field("DateTime!", "Creation timestamp"),
            "updatedAt": _field("DateTime!", "Last update timestamp"),
        },
        "createInput": {
            "title": _field("String!", "Document title", required=True),
            "content": _field("String", "Document content in markdown"),
            "projectId": _field("ID", "Project to attach the document to"),
        },
        "examples": {
            "list": "linear documents list --project-id PROJECT_ID",
            "create": 'linear documents create --title "Notes" --content "# Heading"',
        },
    },
    "initiatives": {
        "entity": "initiatives",
        "operations": ["list", "get", "create", "update", "delete"],
        "description": "Company-level goals grouping several projects",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "name": _field("String!", "Initiative name"),
            "description": _field("String", "Initiative description"),
            "status": _field("InitiativeStatus!", "Planned, Active or Completed"),
            "targetDate": _field("TimelessDate", "Target completion date"),
            "createdAt": _field("DateTime!", "Creation timestamp"),
        },
        "createInput": {
            "name": _field("String!", "Initiative name", required=True),
            "description": _field("String", "Initiative description"),
            "status": _field("InitiativeStatus", "Planned, Active or Completed"),
            "targetDate": _field("TimelessDate", "Target date (YYYY-MM-DD)"),
            "ownerId": _field("ID", "Owner user ID"),
        },
        "examples": {
            "list": "linear initiatives list --status Active",
            "create": 'linear initiatives create --name "Q3 launch" --status Planned',
        },
    },
    "projects": {
        "entity": "projects",
        "operations": ["list"],
        "description": "Projects group related issues together",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "name": _field("String!", "Project name"),
            "description": _field("String", "Project description"),
            "state": _field("String!", "Project state"),
            "progress": _field("Float!", "Completion ratio between 0 and 1"),
            "url": _field("String!", "Linear URL"),
            "targetDate": _field("TimelessDate", "Project target date"),
        },
        "filters": {
            "state": _field("StringComparator", "Filter by state"),
            "accessibleTeams": _field("TeamCollectionFilter", "Filter by team"),
        },
    },
    "teams": {
        "entity": "teams",
        "operations": [],
        "description": "Teams own issues; their key prefixes issue identifiers",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "key": _field("String!", "Team key (e.g., ENG)"),
            "name": _field("String!", "Team name"),
        },
    },
    "users": {
        "entity": "users",
        "operations": ["list", "me"],
        "description": "Users in the Linear workspace",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "name": _field("String!", "User name"),
            "email": _field("String!", "User email"),
            "displayName": _field("String!", "Display name"),
            "active": _field("Boolean!", "Whether user is active"),
            "admin": _field("Boolean!", "Whether user is an admin"),
        },
    },
    "labels": {
        "entity": "labels",
        "operations": ["list"],
        "description": "Labels for categorizing issues",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "name": _field("String!", "Label name"),
            "color": _field("String!", "Label color"),
            "description": _field("String", "Label description"),
            "isGroup": _field("Boolean!", "Whether the label groups other labels"),
        },
    },
    "states": {
        "entity": "states",
        "operations": ["list"],
        "description": "Workflow states an issue moves through",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "name": _field("String!", "State name"),
            "type": _field("String!", "backlog, unstarted, started, completed or canceled"),
            "position": _field("Float!", "Order within the team's workflow"),
            "color": _field("String!", "State color"),
        },
    },
    "comments": {
        "entity": "comments",
        "operations": ["list", "add"],
        "description": "Comments on issues",
        "fields": {
            "id": _field("ID!", "Unique identifier"),
            "body": _field("String!", "Comment body in markdown"),
            "createdAt": _field("DateTime!", "Creation timestamp"),
        },
        "createInput": {
            "body": _field("String!", "Comment body in markdown", required=True),
            "issueId": _field("ID!", "Issue ID to comment on", required=True),
        },
    },
}


def entity_names():
    return list(ENTITY_SCHEMAS)


def describe(entity=None, full=False, include_examples=False):
    """Schema summary, one entity's schema, or everything (``full``)."""
    if full:
        return {
            "entities": entity_names(),
            "schemas": ENTITY_SCHEMAS,
            "note": 'Use "linear query" for raw GraphQL queries',
        }

    if entity:
        schema = ENTITY_SCHEMAS.get(entity.lower())
        if schema is None:
            raise CliError(
                f"Unknown entity: {entity}",
                NOT_FOUND,
                details={"availableEntities": entity_names()},
            )
        result = dict(schema)
        if not include_examples:
            result.pop("examples", None)
        return result

    return {
        "entities": [
            {
                "name": name,
                "description": schema["description"],
                "operations": schema["operations"],
            }
            for name, schema in ENTITY_SCHEMAS.items()
        ],
        "usage": 'Use "linear schema <entity>" for detailed schema',
        "fullSchema": 'Use "linear schema --full" for complete schema',
    }
