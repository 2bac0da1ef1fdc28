"""Song catalog domain: repository, external info client and service."""

from .errors import (
    ConflictError,
    NotFoundError,
    SongLibraryError,
    StorageError,
    UpstreamError,
    ValidationError,
)
from .info_client import HttpSongInfoClient, SongInfoClient, build_song_info_client
from .repository import SongRepository, SqlAlchemySongRepository
from .service import SongService

__all__ = [
    "SongLibraryError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "UpstreamError",
    "StorageError",
    "SongInfoClient",
    "HttpSongInfoClient",
    "build_song_info_client",
    "SongRepository",
    "SqlAlchemySongRepository",
    "SongService",
]
