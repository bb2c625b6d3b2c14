#!/usr/bin/env python3
"""Slide Quest, an image sliding puzzle.

Usage::

    python main.py play                 # pick a frontend interactively
    python main.py play -f rich -d 4x4  # Rich terminal, 4×4
    python main.py play -f pygame       # Pygame GUI (has its own menu)
    python main.py history              # recent completed games
    python main.py serve --port 5000    # HTTP API
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import Settings  # noqa: E402
from backend.errors import PersistenceError  # noqa: E402
from backend.log import configure_logging  # noqa: E402
from backend.models.board import Difficulty  # noqa: E402

logger = logging.getLogger("slidequest")

console = Console()


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
}

_GUI = {Frontend.pygame}


# -- helpers ------------------------------------------------------------------


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


def _ask_frontend() -> Frontend:
    console.print()
    console.print("  [bold]S L I D E   Q U E S T[/bold]")
    console.print()
    console.print("  1.  Play  (Rich Terminal)")
    console.print("  2.  Play  (Pygame GUI)")
    console.print()
    choice = typer.prompt("  Select", default="1").strip()
    if choice == "2":
        return Frontend.pygame
    if choice != "1":
        console.print("  Unknown option, using the terminal.")
    return Frontend.rich


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False, help="Slide Quest, an image sliding puzzle.")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log debug output.",
    ),
) -> None:
    """Slide Quest, an image sliding puzzle."""
    settings = Settings.from_env()
    if verbose:
        settings = settings.override(log_level="DEBUG")
    ctx.obj = settings


@app.command()
def play(
    ctx: typer.Context,
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit to choose interactively.",
    ),
    difficulty: Optional[Difficulty] = typer.Option(
        None, "-d", "--difficulty",
        help="Starting difficulty.",
    ),
) -> None:
    """Play the puzzle."""
    settings = _settings(ctx)
    if frontend is None:
        frontend = _ask_frontend()

    # Terminal frontends log to a file.
    logfile = None if frontend in _GUI else settings.data_dir / "slidequest.log"
    configure_logging(settings.log_level, logfile)
    logger.debug("Launching %s frontend", frontend.value)

    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(settings, difficulty)


@app.command()
def history(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(
        None, "-n", "--limit",
        min=1, max=100,
        help="Number of games to show.",
    ),
) -> None:
    """Show the most recent completed games."""
    from backend.models.history import JsonHistoryStore
    from frontend.formatting import format_time, time_ago

    settings = _settings(ctx)
    configure_logging(settings.log_level)
    store = JsonHistoryStore(settings.history_path)
    try:
        records = store.list(limit or settings.history_limit)
    except PersistenceError as exc:
        console.print(f"[red]Could not read the game history:[/red] {exc}")
        raise typer.Exit(code=1)

    if not records:
        console.print("  No games played yet.")
        return

    table = Table(title="Recent games")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Image")
    table.add_column("Size", justify="center", style="cyan")
    table.add_column("Moves", justify="right", style="yellow")
    table.add_column("Time", justify="right", style="yellow")
    table.add_column("When", style="dim")
    for i, rec in enumerate(records, 1):
        table.add_row(
            str(i),
            rec.image_name,
            rec.difficulty,
            str(rec.moves),
            format_time(rec.time_elapsed),
            time_ago(rec.completed_at),
        )
    console.print(table)


@app.command()
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="Port to listen on."),
) -> None:
    """Run the HTTP API for game history and images."""
    import uvicorn

    from backend.api import create_app

    settings = _settings(ctx).override(host=host, port=port)
    configure_logging(settings.log_level)
    logger.info("Serving on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    app()
