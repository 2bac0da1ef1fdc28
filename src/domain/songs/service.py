from __future__ import annotations

import logging
from typing import List

from src.database.db_manager import Song
from src.models.dto import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_VERSES_PAGE_SIZE,
    SongFilter,
    SongInput,
    SongUpdate,
    VersesPagination,
)

from .errors import NotFoundError
from .info_client import SongInfoClient
from .repository import SongRepository

logger = logging.getLogger(__name__)


class SongService:
    """Song use cases on top of a repository and the external info client.

    Holds no storage logic: it normalizes pagination, orders the upstream
    lookup before the insert, and turns a missing row into ``NotFoundError``.
    """

    def __init__(self, repository: SongRepository, info_client: SongInfoClient):
        self.repository = repository
        self.info_client = info_client

    def create_song(self, song_input: SongInput) -> int:
        logger.debug("Creating song", extra={"group": song_input.group, "song": song_input.song})

        # UpstreamError propagates before anything is written
        details = self.info_client.get_details(song_input.group, song_input.song)

        song = Song(
            group_name=song_input.group,
            song_name=song_input.song,
            release_date=details.release_date,
            text=details.text,
            link=details.link,
        )
        song_id = self.repository.create(song)
        logger.info("Song added to library", extra={"song_id": song_id})
        return song_id

    def get_songs(self, song_filter: SongFilter) -> List[Song]:
        updates = {}
        if song_filter.page <= 0:
            updates["page"] = DEFAULT_PAGE
        if song_filter.page_size <= 0:
            updates["page_size"] = DEFAULT_PAGE_SIZE
        if updates:
            song_filter = song_filter.model_copy(update=updates)
        return self.repository.list(song_filter)

    def get_song_by_id(self, song_id: int) -> Song:
        song = self.repository.get_by_id(song_id)
        if song is None:
            raise NotFoundError(f"song {song_id} not found")
        return song

    def update_song(self, song_id: int, fields: SongUpdate) -> None:
        self.repository.update(song_id, fields)

    def delete_song(self, song_id: int) -> None:
        self.repository.delete(song_id)

    def get_song_verses(self, song_id: int, pagination: VersesPagination) -> List[str]:
        updates = {}
        if pagination.page <= 0:
            updates["page"] = DEFAULT_PAGE
        if pagination.page_size <= 0:
            updates["page_size"] = DEFAULT_VERSES_PAGE_SIZE
        if updates:
            pagination = pagination.model_copy(update=updates)
        return self.repository.get_verses(song_id, pagination)


__all__ = ["SongService"]
