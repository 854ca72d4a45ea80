"""Allow ``python -m cronmatch``."""

from cronmatch.cli import app

app()
