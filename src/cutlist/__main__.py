"""Allow running the CLI with ``python -m cutlist``."""

from cutlist.cli.main import app

app()
