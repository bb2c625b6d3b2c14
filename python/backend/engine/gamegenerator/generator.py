"""Generates solved and shuffled sliding puzzle boards."""

from __future__ import annotations

import logging
import random

from backend.engine.gamesolver import Solver
from backend.errors import BoardInvariantError
from backend.models.board import EMPTY_ID, Board, Tile

logger = logging.getLogger(__name__)


class GameGenerator:
    """Creates the goal layout and solvable shuffles of it."""

    @staticmethod
    def solved(size: int) -> Board:
        """Return the goal-state board (tiles in order, gap bottom-right)."""
        if size < 2:
            raise BoardInvariantError(f"Grid size must be at least 2, got {size}.")
        total = size * size
        tiles = [Tile(id=i, position=i - 1) for i in range(1, total)]
        tiles.append(Tile(id=EMPTY_ID, position=total - 1, is_empty=True))
        return Board.of(tiles)

    @staticmethod
    def shuffle(board: Board, rng: random.Random | None = None) -> Board:
        """Return a random solvable rearrangement of *board*'s layout.

        Rejection sampling: Fisher-Yates shuffle the solved layout and
        re-roll until the arrangement has an even inversion count, passes
        ``Solver.is_solvable`` and is not already solved.  Accepted tiles
        are re-seated at their index in the shuffled order.
        """
        rng = rng or random.Random()
        size = board.size
        attempts = 0
        while True:
            attempts += 1
            tiles = list(GameGenerator.solved(size).tiles)
            rng.shuffle(tiles)
            ids = [t.id for t in tiles]
            if Solver.count_inversions(ids) % 2 != 0:
                continue
            if not Solver.is_solvable(ids, size):
                continue
            shuffled = Board.of(tiles).resequenced()
            if Solver.is_solved(shuffled, size):
                continue
            logger.debug("Shuffled %dx%d board after %d attempt(s)", size, size, attempts)
            return shuffled

    @staticmethod
    def generate(size: int, rng: random.Random | None = None) -> Board:
        """Return a freshly shuffled board of the given size."""
        return GameGenerator.shuffle(GameGenerator.solved(size), rng)
