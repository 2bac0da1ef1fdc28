"""Song catalog CRUD and verse pagination."""

from __future__ import annotations

import logging
import re
from typing import Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError as PydanticValidationError

from src.domain.songs import (
    ConflictError,
    NotFoundError,
    SongService,
    UpstreamError,
    ValidationError,
)
from src.models.dto import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_VERSES_PAGE_SIZE,
    MAX_INT,
    SongFilter,
    SongInput,
    SongUpdate,
    VersesPagination,
)
from src.observability.metrics import record_song_operation


songs_bp = Blueprint('songs_bp', __name__, url_prefix='/api/v1/songs')
logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r'-?[0-9]+')

_STATUS_BY_ERROR = (
    (ValidationError, 400, 'invalid input'),
    (NotFoundError, 404, 'song not found'),
    (ConflictError, 409, 'song already exists'),
    (UpstreamError, 502, 'song details lookup failed'),
)


def _service() -> SongService:
    return current_app.extensions['song_service']


def _error(message: str, status: int):
    return jsonify({'error': message}), status


def _failure(exc: Exception, operation: str, failure_message: str, **context):
    """Map a service failure to a fixed client message; details only go to the log."""
    for error_cls, status, message in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            logger.info("%s rejected: %s", operation, exc, extra=context)
            record_song_operation(operation, error_cls.__name__)
            return _error(message, status)
    logger.error("%s failed: %s", operation, exc, extra=context, exc_info=True)
    record_song_operation(operation, 'error')
    return _error(failure_message, 500)


def _parse_int(raw: Optional[str]) -> Optional[int]:
    """Strict base-10 integer within the column range, or None."""
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        return None
    value = int(raw)
    if not -MAX_INT - 1 <= value <= MAX_INT:
        return None
    return value


def _positive_arg(name: str, default: int) -> int:
    value = _parse_int(request.args.get(name))
    if value is None or value <= 0:
        return default
    return value


def _json_object() -> Optional[dict]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


@songs_bp.route('', methods=['GET'])
def list_songs():
    song_filter = SongFilter(
        group=(request.args.get('group') or '').strip(),
        song=(request.args.get('song') or '').strip(),
        page=_positive_arg('page', DEFAULT_PAGE),
        page_size=_positive_arg('page_size', DEFAULT_PAGE_SIZE),
    )
    try:
        songs = _service().get_songs(song_filter)
    except Exception as exc:
        return _failure(exc, 'list', 'failed to list songs')

    record_song_operation('list', 'ok')
    return jsonify([song.to_dict() for song in songs]), 200


@songs_bp.route('', methods=['POST'])
def create_song():
    payload = _json_object()
    if payload is None:
        logger.info("Create rejected: body is not a JSON object")
        return _error('invalid request body', 400)
    try:
        song_input = SongInput.model_validate(payload)
    except PydanticValidationError as exc:
        logger.info("Create rejected: %s", exc.errors(include_url=False))
        return _error('invalid request body', 400)

    try:
        song_id = _service().create_song(song_input)
    except Exception as exc:
        return _failure(
            exc, 'create', 'failed to create song',
            group=song_input.group, song=song_input.song,
        )

    record_song_operation('create', 'ok')
    return jsonify({'id': song_id}), 201


@songs_bp.route('/<song_id>', methods=['GET'])
def get_song(song_id: str):
    parsed_id = _parse_int(song_id)
    if parsed_id is None:
        return _error('invalid song id', 400)

    try:
        song = _service().get_song_by_id(parsed_id)
    except Exception as exc:
        return _failure(exc, 'get', 'failed to load song', song_id=parsed_id)

    record_song_operation('get', 'ok')
    return jsonify(song.to_dict()), 200


@songs_bp.route('/<song_id>', methods=['PUT'])
def update_song(song_id: str):
    parsed_id = _parse_int(song_id)
    if parsed_id is None:
        return _error('invalid song id', 400)

    payload = _json_object()
    if payload is None:
        return _error('invalid request body', 400)
    try:
        fields = SongUpdate.model_validate(payload)
    except PydanticValidationError as exc:
        logger.info("Update rejected: %s", exc.errors(include_url=False), extra={'song_id': parsed_id})
        return _error('invalid request body', 400)

    try:
        _service().update_song(parsed_id, fields)
    except Exception as exc:
        return _failure(exc, 'update', 'failed to update song', song_id=parsed_id)

    record_song_operation('update', 'ok')
    return jsonify({'message': 'song updated'}), 200


@songs_bp.route('/<song_id>', methods=['DELETE'])
def delete_song(song_id: str):
    parsed_id = _parse_int(song_id)
    if parsed_id is None:
        return _error('invalid song id', 400)

    try:
        _service().delete_song(parsed_id)
    except Exception as exc:
        return _failure(exc, 'delete', 'failed to delete song', song_id=parsed_id)

    record_song_operation('delete', 'ok')
    return jsonify({'message': 'song deleted'}), 200


@songs_bp.route('/<song_id>/verses', methods=['GET'])
def get_song_verses(song_id: str):
    parsed_id = _parse_int(song_id)
    if parsed_id is None:
        return _error('invalid song id', 400)

    pagination = VersesPagination(
        page=_positive_arg('page', DEFAULT_PAGE),
        page_size=_positive_arg('page_size', DEFAULT_VERSES_PAGE_SIZE),
    )
    try:
        verses = _service().get_song_verses(parsed_id, pagination)
    except Exception as exc:
        return _failure(exc, 'verses', 'failed to load song verses', song_id=parsed_id)

    record_song_operation('verses', 'ok')
    return jsonify({'verses': verses}), 200


__all__ = ['songs_bp']
