"""Move validation and execution."""

from __future__ import annotations

import logging
import time

from backend.engine.gamesolver import Solver
from backend.engine.gamestate import GameSession
from backend.models.board import Direction

logger = logging.getLogger(__name__)

# Offset from the gap to the tile that slides in each direction.
# UP    -> tile below the gap moves up
# DOWN  -> tile above the gap moves down
# LEFT  -> tile right of the gap moves left
# RIGHT -> tile left of the gap moves right
_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (1, 0),
    Direction.DOWN: (-1, 0),
    Direction.LEFT: (0, 1),
    Direction.RIGHT: (0, -1),
}


def is_adjacent(position: int, other: int, grid_size: int) -> bool:
    """True if the two cells share an edge."""
    row, col = divmod(position, grid_size)
    other_row, other_col = divmod(other, grid_size)
    return (abs(row - other_row) == 1 and col == other_col) or (
        abs(col - other_col) == 1 and row == other_row
    )


def movable_tiles(session: GameSession) -> list[int]:
    """Ids of the tiles that may slide into the gap right now."""
    empty = session.tiles.empty_tile
    if empty is None or session.is_won:
        return []
    return sorted(
        t.id
        for t in session.tiles
        if not t.is_empty and is_adjacent(t.position, empty.position, session.grid_size)
    )


def tile_in_direction(session: GameSession, direction: Direction) -> int | None:
    """Return the id of the tile that would slide in *direction*, if any."""
    empty = session.tiles.empty_tile
    if empty is None:
        return None
    size = session.grid_size
    row, col = divmod(empty.position, size)
    dr, dc = _OFFSETS[direction]
    tr, tc = row + dr, col + dc
    if not (0 <= tr < size and 0 <= tc < size):
        return None
    tile = session.tiles.tile_at(tr * size + tc)
    return tile.id if tile is not None else None


def apply_move(session: GameSession, tile_id: int, now: float | None = None) -> GameSession:
    """Slide *tile_id* into the gap.

    Returns *session* itself when the move is not allowed: the game is
    already won, the tile is unknown or is the gap, or it does not share an
    edge with the gap.  Otherwise returns a new session with the two
    positions swapped, the move counted and the win flag recomputed.
    """
    if session.is_won:
        return session

    board = session.tiles
    tile = board.find(tile_id)
    empty = board.empty_tile
    if tile is None:
        logger.debug("Ignoring move of unknown tile %d", tile_id)
        return session
    if empty is None:
        logger.error("Board has no empty tile; refusing move of tile %d", tile_id)
        return session
    if tile.is_empty or not is_adjacent(tile.position, empty.position, session.grid_size):
        logger.debug("Tile %d is not next to the gap", tile_id)
        return session

    now = time.time() if now is None else now
    tiles = board.swapped(tile.id, empty.id)
    is_won = Solver.is_solved(tiles, session.grid_size)
    return session.evolve(
        tiles=tiles,
        moves=session.moves + 1,
        start_time=session.start_time if session.start_time is not None else now,
        end_time=now if is_won else None,
        is_playing=True,
        is_won=is_won,
    )
