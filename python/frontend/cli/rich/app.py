"""Rich terminal frontend with picture tiles.

Tiles are drawn from the selected picture with half-block characters;
the hint toggle overlays tile numbers.  Includes a built-in menu for
difficulty selection, play, and the game history.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

import rich.box
from rich.align import Align
from rich.color import Color
from rich.console import Console, Group
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from backend.config import Settings
from backend.engine.gameplay import Event, GamePlay, movable_tiles
from backend.engine.gamestate import GameSession
from backend.errors import PersistenceError
from backend.models.board import Difficulty, Direction
from backend.models.history import JsonHistoryStore
from backend.models.images import JsonImageStore
from backend.services.recorder import GameRecorder
from frontend.artwork import RGB, available_images, display_name, load_square, tile_pixels
from frontend.cli.input_handler import MOVE_KEYS, get_key, get_key_timeout
from frontend.cli.tile_entry import TileEntry
from frontend.formatting import format_time, time_ago

logger = logging.getLogger(__name__)

console = Console()

# Character cells per tile: (columns, text lines).  Each line shows two
# pixel rows through the upper-half-block glyph.
_CELL: dict[int, tuple[int, int]] = {3: (10, 5), 4: (8, 4), 5: (6, 3)}

_HALF_BLOCK = "▀"


# -- client state -------------------------------------------------------------


@dataclass
class _Client:
    settings: Settings
    history: JsonHistoryStore
    images: JsonImageStore
    recorder: GameRecorder
    hints: bool = False
    image_refs: list[str] = field(default_factory=list)
    _art: dict[tuple[str, int], dict[int, list[list[RGB]]] | None] = field(
        default_factory=dict
    )

    def art_for(self, session: GameSession) -> dict[int, list[list[RGB]]] | None:
        """Pixel grids for the session's image, cached per image and size."""
        key = (session.current_image, session.grid_size)
        if key not in self._art:
            cols, lines = _CELL[session.grid_size]
            img = load_square(session.current_image, self.settings, self.settings.image_size)
            self._art[key] = (
                tile_pixels(img, session.grid_size, cols, lines * 2) if img else None
            )
        return self._art[key]


# -- board rendering ----------------------------------------------------------


def _picture_cell(pixels: list[list[RGB]], label: str | None) -> Text:
    lines: list[Text] = []
    for y in range(0, len(pixels), 2):
        line = Text()
        top_row, bottom_row = pixels[y], pixels[y + 1]
        for x, (top, bottom) in enumerate(zip(top_row, bottom_row)):
            if label and y == 0 and x < len(label):
                line.append(label[x], style="bold white on black")
            else:
                line.append(
                    _HALF_BLOCK,
                    style=Style(color=Color.from_rgb(*top), bgcolor=Color.from_rgb(*bottom)),
                )
        lines.append(line)
    return Text("\n").join(lines)


def _number_cell(value: int, correct: bool, cols: int, lines: int) -> Text:
    style = "bold green" if correct else "bold white"
    rows = [" " * cols] * lines
    rows[lines // 2] = f"{value:^{cols}}"
    return Text("\n".join(rows), style=style)


def _render_board(session: GameSession, art: dict[int, list[list[RGB]]] | None, hints: bool) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    size = session.grid_size
    cols, lines = _CELL[size]
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=False,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 0),
    )
    for _ in range(size):
        table.add_column(width=cols, justify="center")

    board = session.tiles
    cells = board.by_position()
    for r in range(size):
        row: list[Text] = []
        for c in range(size):
            pos = r * size + c
            tile = cells[pos]
            if tile.is_empty:
                row.append(Text("\n".join([" " * cols] * lines), style="dim"))
            elif art is not None:
                row.append(_picture_cell(art[tile.id], str(tile.id) if hints else None))
            else:
                row.append(_number_cell(tile.id, board.is_tile_correct(pos), cols, lines))
        table.add_row(*row)
    return table


def _stats(game: GamePlay) -> Text:
    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.session.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(format_time(game.elapsed_seconds()), style="bold yellow")
    return stats


# -- menu screen --------------------------------------------------------------


def _draw_menu(selected: Difficulty) -> None:
    console.clear()

    sizes = Text()
    for i, d in enumerate(Difficulty):
        if i:
            sizes.append("  ")
        if d == selected:
            sizes.append(f" {d.label} ", style="bold green on #313244")
        else:
            sizes.append(f" {d.label} ", style="dim")

    nav = Text("  ← →  change difficulty", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Play    ")
    opts.append("2", style="bold yellow")
    opts.append("  History    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(sizes),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )
    panel = Panel(
        body,
        title="[bold]S L I D E   Q U E S T[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


# -- game screens -------------------------------------------------------------


def _draw_game(game: GamePlay, client: _Client, status: str = "", entry: str = "") -> None:
    console.clear()
    session = game.session
    board_table = _render_board(session, client.art_for(session), client.hints)

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("1-24", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("X", style="bold cyan")
    controls.append("  shuffle   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  reset   ", style="dim")
    controls.append("V", style="bold cyan")
    controls.append("  solve\n", style="dim")
    controls.append("  H", style="bold cyan")
    controls.append("  numbers   ", style="dim")
    controls.append("I", style="bold cyan")
    controls.append("  image   ", style="dim")
    controls.append("Tab", style="bold cyan")
    controls.append("  size   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    subtitle = display_name(session.current_image)
    panel = Panel(
        Align.center(board_table),
        title=f"[bold cyan]Slide Quest  {session.difficulty.label}[/bold cyan]",
        subtitle=f"[dim]{subtitle}[/dim]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    # Save the cursor right before the stats line so _update_time() can
    # repaint only that line.
    sys.stdout.write("\033[s")
    sys.stdout.flush()
    console.print(Align.center(_stats(game)))
    if entry:
        console.print(Align.center(Text(f"  Tile: {entry}_", style="bold cyan")))
    elif not session.is_playing:
        console.print(Align.center(Text("  Press X to shuffle and start.", style="dim")))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _update_time(game: GamePlay) -> None:
    """Overwrite just the stats line using the saved cursor position."""
    _DIM = "\033[2m"
    _YB = "\033[33;1m"
    _RS = "\033[0m"

    moves = game.session.moves
    clock = format_time(game.elapsed_seconds())
    stats_raw = f"{_DIM}Moves: {_RS}{_YB}{moves}{_RS}    {_DIM}Time: {_RS}{_YB}{clock}{_RS}"

    visible_len = len(f"Moves: {moves}    Time: {clock}")
    pad = max(0, (console.width - visible_len) // 2)

    sys.stdout.write(f"\033[u\033[K{' ' * pad}{stats_raw}")
    sys.stdout.flush()


def _draw_win(game: GamePlay, client: _Client, status: str = "") -> None:
    console.clear()
    session = game.session
    board_table = _render_board(session, client.art_for(session), hints=False)

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("CONGRATULATIONS!", style="bold green")
    if session.start_time is None:
        congrats.append("  Auto-solved.  ", style="green")
    else:
        congrats.append("  You solved it!  ", style="green")
    congrats.append("★\n", style="bold yellow")

    parts = [Align.center(board_table), Align.center(congrats), Align.center(_stats(game))]
    if status:
        parts.append(Align.center(Text.from_markup(f"\n  {status}")))

    panel = Panel(
        Group(*parts),
        title=f"[bold green]Slide Quest  {session.difficulty.label}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(
        Align.center(Text("\n  Press X to play again, R to reset, Q to go back.\n", style="dim"))
    )


def _draw_history(client: _Client) -> None:
    """Full-screen history view (used from the menu)."""
    console.clear()

    try:
        records = client.history.list(client.settings.history_limit)
    except PersistenceError as exc:
        logger.warning("Could not load history: %s", exc)
        body: Table | Text = Text("  Could not load the game history.", style="red")
    else:
        if not records:
            body = Text("  No games played yet.", style="dim")
        else:
            table = Table(box=rich.box.ROUNDED, border_style="dim", show_lines=False)
            table.add_column("#", justify="right", style="dim", width=3)
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
            body = table

    panel = Panel(
        Align.center(body),
        title="[bold]RECENT  GAMES[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


# -- game loop ----------------------------------------------------------------

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _next_difficulty(current: Difficulty) -> Difficulty:
    order = list(Difficulty)
    return order[(order.index(current) + 1) % len(order)]


def _next_image(client: _Client, current: str) -> str | None:
    client.image_refs = available_images(client.settings, client.images)
    refs = client.image_refs
    if not refs:
        return None
    if current not in refs:
        return refs[0]
    return refs[(refs.index(current) + 1) % len(refs)]


def _notices(client: _Client) -> str:
    parts = []
    for notice in client.recorder.drain_notices():
        colour = "green" if notice.ok else "red"
        parts.append(f"[{colour}]{notice.message}[/{colour}]")
    return "  ".join(parts)


def _play_game(difficulty: Difficulty, client: _Client) -> None:
    refs = available_images(client.settings, client.images)
    image = refs[0] if refs else None
    game = GamePlay(difficulty, image) if image else GamePlay(difficulty)

    def _on_change(old: GameSession, new: GameSession, event: Event) -> None:
        if new.is_won and not old.is_won:
            client.recorder.record(new)

    game.subscribe(_on_change)
    entry = TileEntry()
    status = ""

    while True:
        if game.is_won:
            _draw_win(game, client, status or _notices(client))
        else:
            _draw_game(game, client, status, entry.buffer)
        status = ""

        # While the clock runs, poll with a timeout so the time keeps ticking.
        key: str | None
        if game.is_ticking:
            while True:
                key = get_key_timeout(client.settings.tick_interval)
                if key is not None or not game.is_ticking:
                    break
                _update_time(game)
        else:
            key = get_key()

        if key == "quit":
            return
        if key in MOVE_KEYS:
            entry.clear()
            game.move(_DIRECTIONS[key])
        elif key == "shuffle":
            entry.clear()
            game.shuffle()
        elif key == "reset":
            entry.clear()
            game.reset()
        elif key == "solve":
            game.solve()
        elif key == "hint":
            client.hints = not client.hints
        elif key == "difficulty":
            entry.clear()
            game.set_difficulty(_next_difficulty(game.session.difficulty))
        elif key == "image":
            ref = _next_image(client, game.session.current_image)
            if ref is None:
                status = "[yellow]No local images found.[/yellow]"
            else:
                game.select_image(ref)
        elif key is not None and not game.is_won:
            max_id = game.size * game.size - 1
            tile_id = entry.feed(key, max_id)
            if tile_id is not None and not game.move_tile(tile_id):
                movable = ", ".join(str(t) for t in movable_tiles(game.session))
                status = f"[yellow]Tile {tile_id} cannot move.[/yellow] [dim]Try {movable}.[/dim]"

        status = status or _notices(client)


# -- menu loop ----------------------------------------------------------------


def _menu_loop(client: _Client, difficulty: Difficulty) -> None:
    selected = difficulty
    order = list(Difficulty)

    while True:
        _draw_menu(selected)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            selected = order[max(0, order.index(selected) - 1)]
        elif key == "right":
            selected = order[min(len(order) - 1, order.index(selected) + 1)]
        elif key in ("1", "enter"):
            _play_game(selected, client)
        elif key == "2":
            _draw_history(client)


# -- public entry point -------------------------------------------------------


def run(settings: Settings, difficulty: Difficulty | None = None) -> None:
    """Launch the Rich CLI with interactive menu."""
    history = JsonHistoryStore(settings.history_path)
    client = _Client(
        settings=settings,
        history=history,
        images=JsonImageStore(settings.images_path),
        recorder=GameRecorder(history, settings.assets_dir),
    )
    try:
        _menu_loop(client, difficulty or settings.default_difficulty)
    finally:
        client.recorder.close()
