"""Allow ``python -m linear_cli``."""

from linear_cli.cli import main

main()
