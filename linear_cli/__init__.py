"""linear-cli — command-line client for the Linear GraphQL API."""

from linear_cli.client import LinearClient
from linear_cli.config import VERSION
from linear_cli.envelope import build_error, build_success, build_success_list
from linear_cli.errors import classify
from linear_cli.exceptions import CliError, InvalidReferenceError, SetupError
from linear_cli.resolver import resolve_issue_id

__all__ = [
    "VERSION",
    "LinearClient",
    "CliError",
    "InvalidReferenceError",
    "SetupError",
    "build_error",
    "build_success",
    "build_success_list",
    "classify",
    "resolve_issue_id",
]
