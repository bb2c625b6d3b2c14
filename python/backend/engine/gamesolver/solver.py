"""Win detection and solvability checks.

There is no move-sequence solver: "solve" in the game snaps the board to
its goal layout (see ``GameGenerator.solved``).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from backend.errors import BoardInvariantError
from backend.models.board import EMPTY_ID, Tile, grid_size_for


class Solver:
    """Stateless checks; all methods are static."""

    @staticmethod
    def is_solved(tiles: Iterable[Tile], grid_size: int | None = None) -> bool:
        """Return True if every cell holds its goal tile.

        Cell ``p`` must hold tile ``p + 1``, except the last cell which must
        hold the gap.  *grid_size* is inferred from the tile count when
        omitted; a non-square count raises ``BoardInvariantError``.
        """
        tiles = tuple(tiles)
        if grid_size is None:
            grid_size = grid_size_for(len(tiles))
        last = grid_size * grid_size - 1

        by_position = {t.position: t for t in tiles}
        for p in range(last + 1):
            tile = by_position.get(p)
            if tile is None:
                return False
            if p == last:
                if not tile.is_empty:
                    return False
            elif tile.is_empty or tile.id != p + 1:
                return False
        return True

    @staticmethod
    def count_inversions(ids: Sequence[int]) -> int:
        """Count pairs read out of numeric order, ignoring the gap."""
        seq = [v for v in ids if v != EMPTY_ID]
        inversions = 0
        for i in range(len(seq) - 1):
            for j in range(i + 1, len(seq)):
                if seq[i] > seq[j]:
                    inversions += 1
        return inversions

    @staticmethod
    def is_solvable(ids: Sequence[int], grid_size: int | None = None) -> bool:
        """Return True if the row-major arrangement *ids* can reach the goal.

        Odd widths: the inversion count must be even.  Even widths: the
        inversion count plus the gap's row distance from the bottom must be
        even, since every vertical slide changes both parities together.
        """
        if grid_size is None:
            grid_size = grid_size_for(len(ids))
        if len(ids) != grid_size * grid_size:
            raise BoardInvariantError(
                f"{len(ids)} ids do not fit a {grid_size}×{grid_size} board."
            )

        inversions = Solver.count_inversions(ids)
        if grid_size % 2 == 1:
            return inversions % 2 == 0

        try:
            gap_row = list(ids).index(EMPTY_ID) // grid_size
        except ValueError:
            raise BoardInvariantError("Arrangement has no empty tile.") from None
        rows_from_bottom = grid_size - 1 - gap_row
        return (inversions + rows_from_bottom) % 2 == 0
