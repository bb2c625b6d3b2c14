"""Fire-and-forget saving of won games.

Clients hand a won session to ``GameRecorder.record`` and keep going; the
save runs on a worker thread and its outcome is reported later through
``drain_notices``.  A failed save never touches the session.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from backend.engine.gamestate import GameSession, elapsed_seconds
from backend.errors import PersistenceError
from backend.models.history import GameHistoryRecord, HistoryStore, NewGameHistory
from backend.services.imaging import image_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    ok: bool
    message: str


def history_entry(
    session: GameSession, now: float | None = None, assets_dir: Path | None = None
) -> NewGameHistory | None:
    """Build the history entry for *session*, or None if it was not played out.

    Auto-solved sessions are won without a clock and are not recorded.
    """
    if not session.is_won or session.start_time is None:
        return None
    return NewGameHistory(
        image_name=image_label(session.current_image, assets_dir),
        moves=session.moves,
        time_elapsed=elapsed_seconds(session, now),
        difficulty=session.difficulty.value,
    )


class GameRecorder:
    def __init__(
        self,
        store: HistoryStore,
        assets_dir: Path | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._store = store
        self._assets_dir = assets_dir
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="history"
        )
        self._notices: deque[Notice] = deque()
        self._lock = threading.Lock()

    def record(
        self, session: GameSession, now: float | None = None
    ) -> Future[GameHistoryRecord] | None:
        """Queue a save of *session*; returns None if there is nothing to save."""
        entry = history_entry(session, now, self._assets_dir)
        if entry is None:
            return None
        future = self._executor.submit(self._store.save, entry)
        future.add_done_callback(self._on_done)
        return future

    def _on_done(self, future: Future[GameHistoryRecord]) -> None:
        exc = future.exception()
        if exc is None:
            record = future.result()
            notice = Notice(True, f"Saved: {record.moves} moves in {record.time_elapsed}s")
        elif isinstance(exc, (PersistenceError, OSError)):
            logger.warning("Could not save game history: %s", exc)
            notice = Notice(False, "Could not save your game to the history.")
        else:
            logger.error("History save failed", exc_info=exc)
            notice = Notice(False, "Could not save your game to the history.")
        with self._lock:
            self._notices.append(notice)

    def drain_notices(self) -> list[Notice]:
        """Return and clear the notices collected since the last call."""
        with self._lock:
            notices = list(self._notices)
            self._notices.clear()
        return notices

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)
