"""Exception hierarchy shared by the engine, the stores, and the API."""

from __future__ import annotations


class SlideQuestError(Exception):
    """Base class for every error raised by this package."""


class BoardInvariantError(SlideQuestError, ValueError):
    """A board violates its structural invariants.

    This is a programming defect (a board without exactly one empty tile,
    duplicate or missing positions, a non-square tile count), never a
    user-facing condition.
    """


class PersistenceError(SlideQuestError):
    """A store could not read or write its backing medium."""


class UploadRejected(SlideQuestError):
    """An uploaded file was refused before (or while) processing it."""

    def __init__(self, message: str, status: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
