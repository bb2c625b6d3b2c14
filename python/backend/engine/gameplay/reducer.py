"""Session transitions: ``(session, event) -> session'``."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay.moves import apply_move
from backend.engine.gamestate import GameSession
from backend.models.board import Difficulty

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveTile:
    tile_id: int


@dataclass(frozen=True)
class Shuffle:
    """Start a new game from a fresh solvable shuffle."""


@dataclass(frozen=True)
class Reset:
    """Return to the solved, idle board."""


@dataclass(frozen=True)
class AutoSolve:
    """Snap to the solved board and mark the game won without playing it."""


@dataclass(frozen=True)
class ChangeDifficulty:
    difficulty: Difficulty


@dataclass(frozen=True)
class SelectImage:
    image: str


Event = MoveTile | Shuffle | Reset | AutoSolve | ChangeDifficulty | SelectImage


def _idle(session: GameSession, difficulty: Difficulty) -> GameSession:
    return session.evolve(
        tiles=GameGenerator.solved(difficulty.grid_size),
        difficulty=difficulty,
        moves=0,
        start_time=None,
        end_time=None,
        is_playing=False,
        is_won=False,
    )


def reduce(
    session: GameSession,
    event: Event,
    now: float | None = None,
    rng: random.Random | None = None,
) -> GameSession:
    """Apply *event* to *session* and return the resulting session.

    Pure apart from reading the clock (``now``) and the shuffle's random
    source (``rng``); both can be injected.
    """
    if isinstance(event, MoveTile):
        return apply_move(session, event.tile_id, now)

    if isinstance(event, Shuffle):
        tiles = GameGenerator.shuffle(session.tiles, rng)
        logger.info("New %s game", session.difficulty)
        return session.evolve(
            tiles=tiles,
            moves=0,
            start_time=time.time() if now is None else now,
            end_time=None,
            is_playing=True,
            is_won=False,
        )

    if isinstance(event, Reset):
        return _idle(session, session.difficulty)

    if isinstance(event, AutoSolve):
        return session.evolve(
            tiles=GameGenerator.solved(session.grid_size),
            moves=0,
            start_time=None,
            end_time=None,
            is_playing=False,
            is_won=True,
        )

    if isinstance(event, ChangeDifficulty):
        return _idle(session, Difficulty(event.difficulty))

    if isinstance(event, SelectImage):
        return session.evolve(current_image=event.image)

    raise TypeError(f"Unknown event {event!r}")
