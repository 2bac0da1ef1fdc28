from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.database.db_manager import Song, db, utcnow
from src.models.dto import SongFilter, SongUpdate, VersesPagination

from .errors import ConflictError, NotFoundError, StorageError


logger = logging.getLogger(__name__)

VERSE_SEPARATOR = "\n\n"


def split_verses(text: str) -> List[str]:
    """Split lyrics on blank lines. Single newlines stay inside a verse."""
    return text.split(VERSE_SEPARATOR)


def page_slice(items: List[str], page: int, page_size: int) -> List[str]:
    start = (page - 1) * page_size
    if start >= len(items):
        return []
    return items[start:start + page_size]


class SongRepository:
    """Interface for persisting songs."""

    def create(self, song: Song) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    def list(self, song_filter: SongFilter) -> List[Song]:  # pragma: no cover - interface
        raise NotImplementedError

    def get_by_id(self, song_id: int) -> Optional[Song]:  # pragma: no cover - interface
        raise NotImplementedError

    def update(self, song_id: int, fields: SongUpdate) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def delete(self, song_id: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def get_verses(self, song_id: int, pagination: VersesPagination) -> List[str]:  # pragma: no cover - interface
        raise NotImplementedError


class SqlAlchemySongRepository(SongRepository):
    """Song persistence on the Flask-SQLAlchemy session.

    Every method touches a single row, so each one commits (or rolls back)
    on its own. Must be called inside an application context.
    """

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def create(self, song: Song) -> int:
        now = utcnow()
        song.created_at = now
        song.updated_at = now
        logger.debug("Creating song", extra={"group": song.group_name, "song": song.song_name})
        try:
            self.session.add(song)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info(
                "Song already exists",
                extra={"group": song.group_name, "song": song.song_name},
            )
            raise ConflictError(
                f"song {song.group_name!r} - {song.song_name!r} already exists", cause=e
            ) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to create song: %s", e, exc_info=True)
            raise StorageError("failed to create song", cause=e) from e

        logger.info("Song created", extra={"song_id": song.id})
        return song.id

    def list(self, song_filter: SongFilter) -> List[Song]:
        query = select(Song)
        if song_filter.group:
            query = query.where(Song.group_name.ilike(f"%{song_filter.group}%"))
        if song_filter.song:
            query = query.where(Song.song_name.ilike(f"%{song_filter.song}%"))
        query = (
            query.order_by(Song.id.desc())
            .limit(song_filter.page_size)
            .offset(song_filter.offset)
        )
        logger.debug(
            "Listing songs",
            extra={
                "group": song_filter.group,
                "song": song_filter.song,
                "page": song_filter.page,
                "page_size": song_filter.page_size,
            },
        )
        try:
            songs = list(self.session.scalars(query))
        except (SQLAlchemyError, OverflowError) as e:
            logger.error("Failed to list songs: %s", e, exc_info=True)
            raise StorageError("failed to list songs", cause=e) from e

        logger.info("Songs listed", extra={"count": len(songs)})
        return songs

    def get_by_id(self, song_id: int) -> Optional[Song]:
        try:
            song = self.session.get(Song, song_id)
        except (SQLAlchemyError, OverflowError) as e:
            logger.error("Failed to load song %s: %s", song_id, e, exc_info=True)
            raise StorageError(f"failed to load song {song_id}", cause=e) from e

        if song is None:
            logger.info("Song not found", extra={"song_id": song_id})
        return song

    def update(self, song_id: int, fields: SongUpdate) -> None:
        statement = (
            update(Song)
            .where(Song.id == song_id)
            .values(
                group_name=fields.group,
                song_name=fields.song,
                release_date=fields.release_date,
                text=fields.text,
                link=fields.link,
                updated_at=utcnow(),
            )
        )
        try:
            result = self.session.execute(statement)
            if result.rowcount == 0:
                self.session.rollback()
                logger.info("Song to update not found", extra={"song_id": song_id})
                raise NotFoundError(f"song {song_id} not found")
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info(
                "Update collides with an existing song",
                extra={"song_id": song_id, "group": fields.group, "song": fields.song},
            )
            raise ConflictError(
                f"song {fields.group!r} - {fields.song!r} already exists", cause=e
            ) from e
        except (SQLAlchemyError, OverflowError) as e:
            self.session.rollback()
            logger.error("Failed to update song %s: %s", song_id, e, exc_info=True)
            raise StorageError(f"failed to update song {song_id}", cause=e) from e

        logger.info("Song updated", extra={"song_id": song_id})

    def delete(self, song_id: int) -> None:
        statement = delete(Song).where(Song.id == song_id)
        try:
            result = self.session.execute(statement)
            if result.rowcount == 0:
                self.session.rollback()
                logger.info("Song to delete not found", extra={"song_id": song_id})
                raise NotFoundError(f"song {song_id} not found")
            self.session.commit()
        except (SQLAlchemyError, OverflowError) as e:
            self.session.rollback()
            logger.error("Failed to delete song %s: %s", song_id, e, exc_info=True)
            raise StorageError(f"failed to delete song {song_id}", cause=e) from e

        logger.info("Song deleted", extra={"song_id": song_id})

    def get_verses(self, song_id: int, pagination: VersesPagination) -> List[str]:
        song = self.get_by_id(song_id)
        if song is None:
            raise NotFoundError(f"song {song_id} not found")

        verses = split_verses(song.text or "")
        selected = page_slice(verses, pagination.page, pagination.page_size)
        if not selected:
            logger.info(
                "Verse page is out of range",
                extra={"song_id": song_id, "verses_count": len(verses), "page": pagination.page},
            )
        return selected


__all__ = [
    "SongRepository",
    "SqlAlchemySongRepository",
    "VERSE_SEPARATOR",
    "split_verses",
    "page_slice",
]
