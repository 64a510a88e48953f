"""MCP server exposing linear-cli operations as tools.

Package structure:
  __init__.py       — FastMCP init, register() calls, re-exports
  __main__.py       — ``python -m linear_cli.mcp_server`` entry point
  _core.py          — Client construction, _call dispatcher, input validation
  _tools_read.py    — lookups, listings, search, raw query, schema
  _tools_write.py   — issue/document/initiative/comment mutations

Every tool returns the same envelope the CLI prints in JSON mode.

Run: python -m linear_cli.mcp_server
Requires: pip install .[mcp]
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from linear_cli.mcp_server import _tools_read, _tools_write

mcp = FastMCP(
    "linear",
    instructions=(
        "Linear project management tools. "
        "Issues accept a UUID or an identifier like ENG-123; documents and "
        "initiatives need their UUID. "
        "Every result is an envelope: check 'success', and on failure branch "
        "on error.code, never on the message. "
        "List results carry pageInfo; pass pageInfo.endCursor as 'after' to "
        "fetch the next page."
    ),
)

for _mod in [_tools_read, _tools_write]:
    _mod.register(mcp)

# ---------------------------------------------------------------------------
# Re-exports (tests import via mcp_mod.xxx)
# ---------------------------------------------------------------------------

from linear_cli.mcp_server._core import (  # noqa: E402, F401
    _call,
    _get_client,
    _validate_input,
    _validate_reference,
    _validate_uuid,
)
from linear_cli.mcp_server._tools_read import (  # noqa: E402, F401
    get_document,
    get_initiative,
    get_issue,
    list_comments,
    list_documents,
    list_initiatives,
    list_issues,
    list_labels,
    list_projects,
    list_states,
    list_users,
    run_query,
    schema,
    search_issues,
    whoami,
)
from linear_cli.mcp_server._tools_write import (  # noqa: E402, F401
    add_comment,
    create_document,
    create_initiative,
    create_issue,
    delete_document,
    delete_initiative,
    delete_issue,
    update_document,
    update_initiative,
    update_issue,
)


def main():
    """Run the MCP server (stdio transport)."""
    mcp.run()
