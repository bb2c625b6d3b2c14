"""The immutable value describing a game in progress."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from enum import StrEnum

from backend.engine.gamegenerator import GameGenerator
from backend.models.board import Board, Difficulty
from backend.models.images import DEFAULT_IMAGE


class SessionPhase(StrEnum):
    IDLE = "idle"
    PLAYING = "playing"
    WON = "won"


@dataclass(frozen=True)
class GameSession:
    """Board, move counter, clock and win flag for one play session.

    Sessions are never mutated; each transition builds a new one.
    ``end_time`` is stamped by the winning move so the clock stops there.
    """

    tiles: Board
    difficulty: Difficulty = Difficulty.EASY
    moves: int = 0
    start_time: float | None = None
    end_time: float | None = None
    is_playing: bool = False
    is_won: bool = False
    current_image: str = DEFAULT_IMAGE

    @classmethod
    def new(
        cls,
        difficulty: Difficulty = Difficulty.EASY,
        image: str = DEFAULT_IMAGE,
    ) -> GameSession:
        """Return a Solved-Idle session for *difficulty*."""
        return cls(
            tiles=GameGenerator.solved(difficulty.grid_size),
            difficulty=difficulty,
            current_image=image,
        )

    @property
    def grid_size(self) -> int:
        return self.difficulty.grid_size

    @property
    def phase(self) -> SessionPhase:
        if self.is_won:
            return SessionPhase.WON
        if self.is_playing:
            return SessionPhase.PLAYING
        return SessionPhase.IDLE

    def evolve(self, **changes: object) -> GameSession:
        return replace(self, **changes)


# -- time tracking ------------------------------------------------------------


def is_ticking(session: GameSession) -> bool:
    """True while the elapsed-time display should refresh."""
    return session.is_playing and session.start_time is not None and not session.is_won


def elapsed_seconds(session: GameSession, now: float | None = None) -> int:
    """Whole seconds since the clock started, frozen once the game is won."""
    if session.start_time is None:
        return 0
    end = session.end_time if session.end_time is not None else (
        time.time() if now is None else now
    )
    return max(0, int(end - session.start_time))
