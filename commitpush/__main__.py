"""Allow ``python -m commitpush``."""

from commitpush.cli import cli

cli()
