"""
Command implementations for linear-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Business logic lives in operations.py. These thin wrappers handle
argparse → keyword args, format selection and column dispatch.
"""

from linear_cli import config, operations
from linear_cli.api import _mask_token, _safe_json_parse, warn
from linear_cli.client import LinearClient
from linear_cli.envelope import build_success
from linear_cli.exceptions import MISSING_REQUIRED_FIELD, NOT_AUTHENTICATED, CliError, SetupError
from linear_cli.formatters import (
    COMMENT_COLUMNS,
    DOCUMENT_COLUMNS,
    INITIATIVE_COLUMNS,
    ISSUE_COLUMNS,
    LABEL_COLUMNS,
    PROJECT_COLUMNS,
    SEARCH_COLUMNS,
    STATE_COLUMNS,
    USER_COLUMNS,
    output,
)


def _get_client():
    """Build a client for the stored or environment API key."""
    return LinearClient(config.require_api_key())


def _output_item(envelope, ns, summary=None, primary_key="id"):
    """Print a single-item envelope; table mode shows the flattened summary."""
    if ns.format == config.FORMAT_TABLE and summary is not None:
        envelope = build_success(summary(envelope["data"]))
    output(envelope, ns.format, primary_key=primary_key)


def _json_arg(value, flag):
    if value is None:
        return None
    return _safe_json_parse(value, flag)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def cmd_auth_login(ns):
    api_key = ns.key or ns.key_arg or config.env.get(config.API_KEY_ENV)
    if not api_key:
        raise CliError(
            "No API key provided. Create one in Linear settings and pass it with --key.",
            MISSING_REQUIRED_FIELD,
            details={"url": config.API_SETTINGS_URL},
        )
    viewer = LinearClient(api_key).viewer()
    config.save_api_key(api_key)
    if config.RUNTIME_VERBOSE:
        warn(f"Saved API key {_mask_token(api_key)} to {config.get_config_path()}")
    output(
        build_success(
            {
                "message": "Successfully authenticated",
                "user": {
                    "id": viewer.get("id"),
                    "name": viewer.get("name"),
                    "email": viewer.get("email"),
                },
                "configPath": config.get_config_path(),
            }
        ),
        ns.format,
    )


def cmd_auth_logout(ns):
    if not config.get_api_key():
        raise SetupError("Not currently authenticated", NOT_AUTHENTICATED)
    if config.api_key_source() == "environment":
        warn(f"{config.API_KEY_ENV} is set; unset it to fully log out.")
    config.remove_api_key()
    output(
        build_success(
            {"message": "Successfully logged out", "configPath": config.get_config_path()}
        ),
        ns.format,
    )


def cmd_auth_status(ns):
    api_key = config.get_api_key()
    if not api_key:
        output(
            build_success(
                {
                    "authenticated": False,
                    "message": "Not authenticated",
                    "configPath": config.get_config_path(),
                }
            ),
            ns.format,
            primary_key="authenticated",
        )
        return
    viewer = LinearClient(api_key).viewer()
    output(
        build_success(
            {
                "authenticated": True,
                "user": {
                    "id": viewer.get("id"),
                    "name": viewer.get("name"),
                    "email": viewer.get("email"),
                },
                "source": config.api_key_source(),
                "configPath": config.get_config_path(),
            }
        ),
        ns.format,
        primary_key="authenticated",
    )


def cmd_me(ns):
    _output_item(operations.whoami(_get_client()), ns, operations.whoami_summary, "email")


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------


def cmd_issues_list(ns):
    envelope = operations.list_issues(
        _get_client(),
        team=ns.team,
        assignee=ns.assignee,
        state=ns.state,
        filter=_json_arg(ns.filter, "--filter"),
        first=ns.first,
        after=ns.after,
    )
    output(envelope, ns.format, ISSUE_COLUMNS, primary_key="identifier")


def cmd_issues_get(ns):
    envelope = operations.get_issue(_get_client(), ns.id)
    _output_item(envelope, ns, operations.issue_summary, "identifier")


def cmd_issues_create(ns):
    envelope = operations.create_issue(
        _get_client(),
        ns.title,
        team=ns.team,
        team_id=ns.team_id,
        description=ns.description,
        priority=ns.priority,
        assignee_id=ns.assignee_id,
        state_id=ns.state_id,
        project_id=ns.project_id,
        estimate=ns.estimate,
        label_ids=ns.label_ids,
    )
    _output_item(envelope, ns, primary_key="identifier")


def cmd_issues_update(ns):
    envelope = operations.update_issue(
        _get_client(),
        ns.id,
        input=_json_arg(ns.input, "--input"),
        title=ns.title,
        description=ns.description,
        priority=ns.priority,
        assignee_id=ns.assignee_id,
        state_id=ns.state_id,
        project_id=ns.project_id,
        estimate=ns.estimate,
        label_ids=ns.label_ids,
    )
    _output_item(envelope, ns, primary_key="identifier")


def cmd_issues_delete(ns):
    envelope = operations.delete_issue(_get_client(), ns.id, permanent=ns.permanent)
    _output_item(envelope, ns, primary_key="identifier")


def cmd_search(ns):
    envelope = operations.search_issues(
        _get_client(), ns.query, team=ns.team, first=ns.first, after=ns.after
    )
    output(envelope, ns.format, SEARCH_COLUMNS, primary_key="identifier")


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def cmd_documents_list(ns):
    envelope = operations.list_documents(
        _get_client(), project_id=ns.project_id, first=ns.first, after=ns.after
    )
    output(envelope, ns.format, DOCUMENT_COLUMNS, primary_key="title")


def cmd_documents_get(ns):
    envelope = operations.get_document(_get_client(), ns.id)
    _output_item(envelope, ns, operations.document_summary)


def cmd_documents_create(ns):
    envelope = operations.create_document(
        _get_client(),
        ns.title,
        content=ns.content,
        project_id=ns.project_id,
        icon=ns.icon,
        color=ns.color,
    )
    _output_item(envelope, ns)


def cmd_documents_update(ns):
    envelope = operations.update_document(
        _get_client(),
        ns.id,
        title=ns.title,
        content=ns.content,
        project_id=ns.project_id,
        icon=ns.icon,
        color=ns.color,
    )
    _output_item(envelope, ns)


def cmd_documents_delete(ns):
    _output_item(operations.delete_document(_get_client(), ns.id), ns)


# ---------------------------------------------------------------------------
# Initiatives
# ---------------------------------------------------------------------------


def cmd_initiatives_list(ns):
    envelope = operations.list_initiatives(
        _get_client(), status=ns.status, first=ns.first, after=ns.after
    )
    output(envelope, ns.format, INITIATIVE_COLUMNS, primary_key="name")


def cmd_initiatives_get(ns):
    envelope = operations.get_initiative(_get_client(), ns.id)
    _output_item(envelope, ns, operations.initiative_summary)


def cmd_initiatives_create(ns):
    envelope = operations.create_initiative(
        _get_client(),
        ns.name,
        description=ns.description,
        status=ns.status,
        target_date=ns.target_date,
        owner_id=ns.owner_id,
        icon=ns.icon,
        color=ns.color,
    )
    _output_item(envelope, ns)


def cmd_initiatives_update(ns):
    envelope = operations.update_initiative(
        _get_client(),
        ns.id,
        name=ns.name,
        description=ns.description,
        status=ns.status,
        target_date=ns.target_date,
        owner_id=ns.owner_id,
        icon=ns.icon,
        color=ns.color,
    )
    _output_item(envelope, ns)


def cmd_initiatives_delete(ns):
    _output_item(operations.delete_initiative(_get_client(), ns.id), ns)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


def cmd_comments_list(ns):
    envelope = operations.list_comments(_get_client(), ns.issue, first=ns.first, after=ns.after)
    output(envelope, ns.format, COMMENT_COLUMNS)


def cmd_comments_add(ns):
    envelope = operations.add_comment(_get_client(), ns.issue, ns.body)
    _output_item(envelope, ns, operations.comment_summary)


# ---------------------------------------------------------------------------
# Workspace listings
# ---------------------------------------------------------------------------


def cmd_labels_list(ns):
    envelope = operations.list_labels(_get_client(), team=ns.team, first=ns.first, after=ns.after)
    output(envelope, ns.format, LABEL_COLUMNS, primary_key="name")


def cmd_states_list(ns):
    envelope = operations.list_states(_get_client(), team=ns.team, first=ns.first, after=ns.after)
    output(envelope, ns.format, STATE_COLUMNS, primary_key="name")


def cmd_projects_list(ns):
    envelope = operations.list_projects(
        _get_client(), team=ns.team, state=ns.state, first=ns.first, after=ns.after
    )
    output(envelope, ns.format, PROJECT_COLUMNS, primary_key="name")


def cmd_users_list(ns):
    envelope = operations.list_users(
        _get_client(), active=ns.active, first=ns.first, after=ns.after
    )
    output(envelope, ns.format, USER_COLUMNS, primary_key="name")


# ---------------------------------------------------------------------------
# Raw query and schema
# ---------------------------------------------------------------------------


def cmd_query(ns):
    variables = _json_arg(ns.variables, "--variables")
    envelope = operations.run_query(_get_client(), ns.gql, variables, timeout=ns.timeout)
    output(envelope, ns.format)


def cmd_schema(ns):
    envelope = operations.schema(ns.entity, full=ns.full, include_examples=ns.include_examples)
    output(envelope, ns.format, primary_key="entity")
