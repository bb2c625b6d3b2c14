"""Typing tile numbers in the terminal in place of clicking them."""

from __future__ import annotations


class TileEntry:
    """Collects digits until they name a single tile.

    A number is committed as soon as no further digit could extend it
    to a valid tile id (e.g. ``"7"`` on a 3×3 board, ``"1"`` then ``"2"``
    on a 4×4 board), or when Enter is pressed.
    """

    def __init__(self) -> None:
        self.buffer = ""

    def clear(self) -> None:
        self.buffer = ""

    def feed(self, key: str, max_id: int) -> int | None:
        """Consume *key*; return a tile id once one is complete."""
        if key == "backspace":
            self.buffer = self.buffer[:-1]
            return None
        if key == "enter":
            return self._commit()
        if not (len(key) == 1 and key.isdigit()):
            return None
        if not self.buffer and key == "0":
            return None

        self.buffer += key
        value = int(self.buffer)
        if value > max_id:
            self.clear()
            return None
        if value * 10 > max_id:
            return self._commit()
        return None

    def _commit(self) -> int | None:
        value = int(self.buffer) if self.buffer else None
        self.clear()
        return value
