"""Logging setup for the CLI, the server, and the clients."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO", logfile: Path | None = None) -> None:
    """Install a single root handler.

    With *logfile* set, records go to that file instead of the terminal; the
    full-screen rich client would otherwise paint log lines over the
    board.
    """
    handler: logging.Handler
    if logfile is not None:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(logfile, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    else:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(level=level, handlers=[handler], force=True)
    # PIL logs every plugin it probes at DEBUG.
    logging.getLogger("PIL").setLevel(logging.INFO)
