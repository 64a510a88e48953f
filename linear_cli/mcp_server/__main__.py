"""Allow ``python -m linear_cli.mcp_server``."""

from linear_cli.mcp_server import main

main()
