"""Allow ``python -m covview``."""

from covview.cli import cli

cli()
