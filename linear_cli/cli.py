"""
linear-cli — command-line client for the Linear GraphQL API
"""

import argparse
import sys

from linear_cli import config
from linear_cli.commands import (
    cmd_auth_login,
    cmd_auth_logout,
    cmd_auth_status,
    cmd_comments_add,
    cmd_comments_list,
    cmd_documents_create,
    cmd_documents_delete,
    cmd_documents_get,
    cmd_documents_list,
    cmd_documents_update,
    cmd_initiatives_create,
    cmd_initiatives_delete,
    cmd_initiatives_get,
    cmd_initiatives_list,
    cmd_initiatives_update,
    cmd_issues_create,
    cmd_issues_delete,
    cmd_issues_get,
    cmd_issues_list,
    cmd_issues_update,
    cmd_labels_list,
    cmd_me,
    cmd_projects_list,
    cmd_query,
    cmd_schema,
    cmd_search,
    cmd_states_list,
    cmd_users_list,
)
from linear_cli.envelope import encode_envelope
from linear_cli.errors import classify, error_response
from linear_cli.exceptions import INVALID_INPUT, CliError

HELP_TEXT = """\
Usage: linear <command> [args...]

Global flags (accepted anywhere on the command line):
  --format, -F json|table|plain   Output format (default: json)
  --quiet, -q                     Suppress advisory warnings
  --verbose, -v                   Log HTTP requests to stderr
  --version                       Show version number

Commands:
  auth login [KEY] [--key KEY]    Validate and store an API key
  auth logout                     Remove the stored API key
  auth status                     Show authentication status
  me | whoami                     Current user, organization and teams
  issues list                     --team KEY --assignee ID|me --state NAME
                                  --filter JSON --first N --after CURSOR
  issues get REF                  REF is a UUID or an identifier like ENG-123
  issues create --title T         --team KEY | --team-id ID, --description,
                                  --priority 0-4, --assignee-id, --state-id,
                                  --project-id, --estimate, --label-ids a,b
  issues update REF               --input JSON or individual field flags
  issues delete REF               Move to trash; --permanent deletes for good
  documents list|get|create|update|delete
  initiatives list|get|create|update|delete
  comments list REF               Comments on an issue
  comments add REF --body TEXT    Comment on an issue
  labels list [--team KEY]
  states list [--team KEY]
  projects list [--team KEY] [--state S]
  users list [--active]
  search QUERY [--team KEY]       Full-text issue search
  query --gql Q [--variables JSON] [--timeout N]
                                  Raw GraphQL passthrough
  schema [ENTITY] [--full] [--include-examples]
                                  Entity schemas for discovery

Exit codes: 0 success, 1 error, 2 authentication/configuration error.
"""

# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so --format works after subcommand)
# ---------------------------------------------------------------------------


def _check_format(fmt):
    if fmt not in config.VALID_FORMATS:
        raise CliError(
            f"Invalid format '{fmt}'. Use: {', '.join(config.VALID_FORMATS)}", INVALID_INPUT
        )
    return fmt


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, quiet, verbose, remaining_argv).
    Handles --version directly.
    """
    fmt = config.FORMAT_JSON
    quiet = False
    verbose = False
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--version":
            print(f"linear-cli {config.VERSION}")
            sys.exit(0)
        elif arg in ("--quiet", "-q"):
            quiet = True
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif arg in ("--format", "-F"):
            if i + 1 >= len(argv):
                raise CliError(f"{arg} requires a value", INVALID_INPUT)
            fmt = _check_format(argv[i + 1])
            i += 1
        elif arg.startswith("--format="):
            fmt = _check_format(arg.split("=", 1)[1])
        else:
            remaining.append(arg)
        i += 1
    if quiet and verbose:
        raise CliError("--quiet and --verbose are mutually exclusive.", INVALID_INPUT)
    return fmt, quiet, verbose, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises CliError instead of printing full help text."""

    def error(self, message):
        raise CliError(message, INVALID_INPUT)


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _priority(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer between 0 and 4") from exc
    if not 0 <= parsed <= 4:
        raise argparse.ArgumentTypeError("must be an integer between 0 and 4")
    return parsed


def _add_paging(p, default_first=config.DEFAULT_PAGE_SIZE):
    p.add_argument("--first", type=_positive_int, default=default_first)
    p.add_argument("--after", help="Pagination cursor (endCursor of the previous page)")


def _add_issue_fields(p):
    p.add_argument("--description", "-d")
    p.add_argument("--priority", "-p", type=_priority)
    p.add_argument("--assignee-id", dest="assignee_id")
    p.add_argument("--state-id", dest="state_id")
    p.add_argument("--project-id", dest="project_id")
    p.add_argument("--estimate", type=float)
    p.add_argument("--label-ids", dest="label_ids", help="Comma-separated label IDs")


def _add_document_fields(p):
    p.add_argument("--content", "-c")
    p.add_argument("--project-id", dest="project_id")
    p.add_argument("--icon")
    p.add_argument("--color")


def _add_initiative_fields(p):
    p.add_argument("--description", "-d")
    p.add_argument("--status", "-s", choices=config.VALID_INITIATIVE_STATUSES)
    p.add_argument("--target-date", dest="target_date", help="YYYY-MM-DD")
    p.add_argument("--owner-id", dest="owner_id")
    p.add_argument("--icon")
    p.add_argument("--color")


def _group(sub, name, aliases=()):
    """Add a command group (e.g. ``issues``) and return its subparsers."""
    p = sub.add_parser(name, aliases=list(aliases))
    p.set_defaults(group=name)
    return p.add_subparsers(dest="action", parser_class=_SubcommandParser)


def build_parser():
    parser = _SubcommandParser(
        prog="linear",
        description="Command-line client for the Linear GraphQL API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- auth ---
    auth = _group(sub, "auth")
    p = auth.add_parser("login")
    p.add_argument("key_arg", nargs="?", metavar="KEY")
    p.add_argument("--key", "-k")
    p.set_defaults(func=cmd_auth_login)
    auth.add_parser("logout").set_defaults(func=cmd_auth_logout)
    auth.add_parser("status").set_defaults(func=cmd_auth_status)

    # --- me ---
    sub.add_parser("me", aliases=["whoami"]).set_defaults(func=cmd_me)

    # --- issues ---
    issues = _group(sub, "issues")
    p = issues.add_parser("list")
    p.add_argument("--team", "-t")
    p.add_argument("--assignee", "-a", help='Assignee user ID, or "me"')
    p.add_argument("--state", "-s", help='State name, e.g. "In Progress"')
    p.add_argument("--filter", "-f", help="JSON IssueFilter object")
    _add_paging(p)
    p.set_defaults(func=cmd_issues_list)

    p = issues.add_parser("get")
    p.add_argument("id", metavar="REF")
    p.set_defaults(func=cmd_issues_get)

    p = issues.add_parser("create")
    p.add_argument("--title", required=True)
    p.add_argument("--team", "-t", help="Team key, e.g. ENG")
    p.add_argument("--team-id", dest="team_id")
    _add_issue_fields(p)
    p.set_defaults(func=cmd_issues_create)

    p = issues.add_parser("update")
    p.add_argument("id", metavar="REF")
    p.add_argument("--input", "-i", help="JSON IssueUpdateInput object")
    p.add_argument("--title")
    _add_issue_fields(p)
    p.set_defaults(func=cmd_issues_update)

    p = issues.add_parser("delete")
    p.add_argument("id", metavar="REF")
    p.add_argument("--permanent", action="store_true")
    p.set_defaults(func=cmd_issues_delete)

    # --- documents ---
    documents = _group(sub, "documents")
    p = documents.add_parser("list")
    p.add_argument("--project-id", dest="project_id")
    _add_paging(p)
    p.set_defaults(func=cmd_documents_list)

    p = documents.add_parser("get")
    p.add_argument("id")
    p.set_defaults(func=cmd_documents_get)

    p = documents.add_parser("create")
    p.add_argument("--title", "-t", required=True)
    _add_document_fields(p)
    p.set_defaults(func=cmd_documents_create)

    p = documents.add_parser("update")
    p.add_argument("id")
    p.add_argument("--title", "-t")
    _add_document_fields(p)
    p.set_defaults(func=cmd_documents_update)

    p = documents.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_documents_delete)

    # --- initiatives ---
    initiatives = _group(sub, "initiatives")
    p = initiatives.add_parser("list")
    p.add_argument("--status", "-s", choices=config.VALID_INITIATIVE_STATUSES)
    _add_paging(p)
    p.set_defaults(func=cmd_initiatives_list)

    p = initiatives.add_parser("get")
    p.add_argument("id")
    p.set_defaults(func=cmd_initiatives_get)

    p = initiatives.add_parser("create")
    p.add_argument("--name", "-n", required=True)
    _add_initiative_fields(p)
    p.set_defaults(func=cmd_initiatives_create)

    p = initiatives.add_parser("update")
    p.add_argument("id")
    p.add_argument("--name", "-n")
    _add_initiative_fields(p)
    p.set_defaults(func=cmd_initiatives_update)

    p = initiatives.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_initiatives_delete)

    # --- comments ---
    comments = _group(sub, "comments")
    p = comments.add_parser("list")
    p.add_argument("issue", metavar="REF")
    _add_paging(p)
    p.set_defaults(func=cmd_comments_list)

    p = comments.add_parser("add")
    p.add_argument("issue", metavar="REF")
    p.add_argument("--body", "-b", required=True)
    p.set_defaults(func=cmd_comments_add)

    # --- workspace listings ---
    p = _group(sub, "labels").add_parser("list")
    p.add_argument("--team", "-t")
    _add_paging(p, 100)
    p.set_defaults(func=cmd_labels_list)

    p = _group(sub, "states").add_parser("list")
    p.add_argument("--team", "-t")
    _add_paging(p, 100)
    p.set_defaults(func=cmd_states_list)

    p = _group(sub, "projects").add_parser("list")
    p.add_argument("--team", "-t")
    p.add_argument("--state", "-s", choices=config.VALID_PROJECT_STATES)
    _add_paging(p)
    p.set_defaults(func=cmd_projects_list)

    p = _group(sub, "users").add_parser("list")
    p.add_argument("--active", action="store_true")
    _add_paging(p, 100)
    p.set_defaults(func=cmd_users_list)

    # --- search ---
    p = sub.add_parser("search")
    p.add_argument("query")
    p.add_argument("--team", "-t")
    _add_paging(p, 20)
    p.set_defaults(func=cmd_search)

    # --- query ---
    p = sub.add_parser("query")
    p.add_argument("--gql", "-g", required=True)
    p.add_argument("--variables", help="JSON object of query variables")
    p.add_argument("--timeout", "-t", type=_positive_int, default=config.QUERY_TIMEOUT_SECONDS)
    p.set_defaults(func=cmd_query)

    # --- schema ---
    p = sub.add_parser("schema")
    p.add_argument("entity", nargs="?")
    p.add_argument("--full", action="store_true")
    p.add_argument("--include-examples", dest="include_examples", action="store_true")
    p.set_defaults(func=cmd_schema)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def _emit_error(err):
    """Print the error envelope (always JSON) and return the exit code."""
    print(encode_envelope(error_response(err)))
    return classify(err).exit_code


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(HELP_TEXT)
        sys.exit(0)

    try:
        fmt, quiet, verbose, remaining_argv = _extract_global_flags(argv)
    except CliError as e:
        sys.exit(_emit_error(e))
    config.RUNTIME_QUIET = quiet
    config.RUNTIME_VERBOSE = verbose
    if verbose:
        config.HTTP_LOG_ENABLED = True

    if not remaining_argv:
        print(HELP_TEXT)
        sys.exit(0)

    try:
        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.format = fmt  # inject global format flag

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        handler = getattr(ns, "func", None)
        if handler is None:
            group = getattr(ns, "group", ns.command)
            raise CliError(f"Missing subcommand for '{group}'. See: linear --help", INVALID_INPUT)
        handler(ns)
    except Exception as e:
        sys.exit(_emit_error(e))


if __name__ == "__main__":
    main()
