#!/usr/bin/env python
"""
Pydantic DTOs for the song API.

Request bodies (SongInput, SongUpdate), the external info payload
(SongDetail) and the list/verses query parameters (SongFilter,
VersesPagination).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_VERSES_PAGE_SIZE = 5
# Largest value the integer columns and bound query parameters accept
MAX_INT = 2_147_483_647


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class SongInput(BaseModel):
    """Body of POST /songs."""

    model_config = ConfigDict(extra="ignore")

    group: str
    song: str

    @field_validator("group", "song")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _strip_required(value)


class SongUpdate(BaseModel):
    """Body of PUT /songs/<id>; replaces every mutable field."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    group: str
    song: str
    release_date: str = Field(default="", alias="releaseDate")
    text: str = ""
    link: str = ""

    @field_validator("group", "song")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _strip_required(value)


class SongDetail(BaseModel):
    """Payload returned by the external song info API."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    release_date: str = Field(alias="releaseDate")
    text: str
    link: str


class SongFilter(BaseModel):
    group: str = ""
    song: str = ""
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class VersesPagination(BaseModel):
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_VERSES_PAGE_SIZE


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_VERSES_PAGE_SIZE",
    "MAX_INT",
    "SongInput",
    "SongUpdate",
    "SongDetail",
    "SongFilter",
    "VersesPagination",
]
