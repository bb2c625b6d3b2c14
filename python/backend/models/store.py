"""JSON-file persistence shared by the history and image stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from backend.errors import PersistenceError

logger = logging.getLogger(__name__)

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(filepath: Path) -> threading.RLock:
    key = filepath.resolve()
    with _locks_guard:
        return _locks.setdefault(key, threading.RLock())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp; naive values are taken to be UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class JsonRecordFile:
    """Loads and rewrites a JSON array of records.

    Saves go through a temp file in the same directory and replace the
    target in one step, so readers never see a partial file. Instances
    for the same path share a lock; hold :meth:`locked` around a
    load-modify-save sequence.
    """

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath
        self._lock = _lock_for(filepath)

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def load(self) -> list[dict[str, Any]]:
        with self._lock:
            if not self.filepath.exists():
                return []
            try:
                data = json.loads(self.filepath.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise PersistenceError(f"Could not read {self.filepath}: {exc}") from exc
        if not isinstance(data, list):
            raise PersistenceError(f"{self.filepath} does not hold a JSON array.")
        return data

    def load_records(self, parse: Callable[[dict[str, Any]], Any]) -> list[Any]:
        """Load and convert every record, wrapping malformed ones."""
        raw = self.load()
        try:
            return [parse(d) for d in raw]
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(
                f"Malformed record in {self.filepath}: {exc!r}"
            ) from exc

    def save(self, records: list[dict[str, Any]]) -> None:
        payload = json.dumps(records, indent=2) + "\n"
        with self._lock:
            try:
                self.filepath.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(
                    dir=self.filepath.parent, prefix=f".{self.filepath.name}.", suffix=".tmp"
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as fh:
                        fh.write(payload)
                    os.replace(tmp, self.filepath)
                except BaseException:
                    Path(tmp).unlink(missing_ok=True)
                    raise
            except OSError as exc:
                raise PersistenceError(f"Could not write {self.filepath}: {exc}") from exc
        logger.debug("Wrote %d records to %s", len(records), self.filepath)
