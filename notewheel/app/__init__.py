"""Session runtime: scheduling, sounding notes, players and the CLI."""

from .session import ExplorerSession  # noqa: F401
