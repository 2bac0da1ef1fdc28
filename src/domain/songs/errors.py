"""Error taxonomy shared by the song repository, service and HTTP layer."""

from __future__ import annotations

from typing import Optional


class SongLibraryError(Exception):
    """Base class for domain failures; ``cause`` keeps the underlying exception."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationError(SongLibraryError):
    """Bad or missing input."""


class NotFoundError(SongLibraryError):
    """No song row matches the requested id."""


class ConflictError(SongLibraryError):
    """The (group, song) pair already exists."""


class UpstreamError(SongLibraryError):
    """The external song info lookup failed."""


class StorageError(SongLibraryError):
    """Any other persistence failure."""


__all__ = [
    "SongLibraryError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "UpstreamError",
    "StorageError",
]
