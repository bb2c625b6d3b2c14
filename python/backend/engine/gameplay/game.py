"""Core gameplay: holds the current session and dispatches events to it."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from backend.engine.gameplay.moves import tile_in_direction
from backend.engine.gameplay.reducer import (
    AutoSolve,
    ChangeDifficulty,
    Event,
    MoveTile,
    Reset,
    SelectImage,
    Shuffle,
    reduce,
)
from backend.engine.gamestate import GameSession, elapsed_seconds, is_ticking
from backend.models.board import Difficulty, Direction
from backend.models.images import DEFAULT_IMAGE

logger = logging.getLogger(__name__)

Listener = Callable[[GameSession, GameSession, Event], None]


class GamePlay:
    """Orchestrates a single play session.

    The session value is replaced wholesale on every accepted event and
    subscribers are told about the replacement; clients render from
    ``game.session`` and never modify it.
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.EASY,
        image: str = DEFAULT_IMAGE,
        rng: random.Random | None = None,
    ) -> None:
        self._session = GameSession.new(difficulty, image)
        self._rng = rng
        self._listeners: list[Listener] = []

    @classmethod
    def from_session(cls, session: GameSession, rng: random.Random | None = None) -> GamePlay:
        """Wrap an existing session (e.g. a fixture or a restored game)."""
        session.tiles.validate()
        obj = cls(session.difficulty, session.current_image, rng)
        obj._session = session
        return obj

    # -- subscription ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener(old, new, event)* after each session change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: Event, now: float | None = None) -> bool:
        """Reduce *event* into the session.  Returns True if it changed."""
        old = self._session
        new = reduce(old, event, now=now, rng=self._rng)
        if new == old:
            return False
        self._session = new
        for listener in list(self._listeners):
            listener(old, new, event)
        return True

    # -- actions --------------------------------------------------------------

    def move_tile(self, tile_id: int, now: float | None = None) -> bool:
        """Slide *tile_id* into the gap.  Returns True if the move was legal."""
        return self.dispatch(MoveTile(tile_id), now)

    def move(self, direction: Direction, now: float | None = None) -> bool:
        """Slide the tile next to the gap in *direction*.

        E.g. ``Direction.UP`` moves the tile **below** the gap upward.
        """
        tile_id = tile_in_direction(self._session, direction)
        if tile_id is None:
            return False
        return self.move_tile(tile_id, now)

    def shuffle(self, now: float | None = None) -> bool:
        return self.dispatch(Shuffle(), now)

    def reset(self) -> bool:
        return self.dispatch(Reset())

    def solve(self) -> bool:
        return self.dispatch(AutoSolve())

    def set_difficulty(self, difficulty: Difficulty) -> bool:
        return self.dispatch(ChangeDifficulty(difficulty))

    def select_image(self, image: str) -> bool:
        return self.dispatch(SelectImage(image))

    # -- queries --------------------------------------------------------------

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def size(self) -> int:
        return self._session.grid_size

    @property
    def is_won(self) -> bool:
        return self._session.is_won

    @property
    def is_ticking(self) -> bool:
        return is_ticking(self._session)

    def elapsed_seconds(self, now: float | None = None) -> int:
        return elapsed_seconds(self._session, now)
