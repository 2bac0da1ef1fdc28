import logging
import time
from typing import Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from src.models.dto import SongDetail
from src.observability.metrics import record_upstream_lookup

from .errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


class SongInfoClient:
    """Interface for the external song details lookup."""

    def get_details(self, group: str, song: str) -> SongDetail:  # pragma: no cover - interface
        raise NotImplementedError


class HttpSongInfoClient(SongInfoClient):
    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        """Client for ``GET {base_url}/info?group=...&song=...``.

        One attempt per call, no retries. The session is shared by all
        request threads; ``requests.Session`` connection pooling is safe for
        that use.
        """
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def info_url(self) -> str:
        return f"{self.base_url}/info"

    def get_details(self, group: str, song: str) -> SongDetail:
        logger.debug("Fetching song details", extra={"group": group, "song": song})
        started = time.monotonic()
        try:
            response = self.session.get(
                self.info_url,
                params={"group": group, "song": song},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            record_upstream_lookup("timeout", time.monotonic() - started)
            logger.error("Song info request to %s timed out after %ss", self.info_url, self.timeout)
            raise UpstreamError("song info request timed out", cause=e) from e
        except requests.exceptions.RequestException as e:
            record_upstream_lookup("error", time.monotonic() - started)
            logger.error("Song info request to %s failed: %s", self.info_url, e)
            raise UpstreamError("song info request failed", cause=e) from e

        elapsed = time.monotonic() - started
        if response.status_code != 200:
            record_upstream_lookup("bad_status", elapsed)
            logger.error(
                "Song info API returned an error",
                extra={"status_code": response.status_code, "group": group, "song": song},
            )
            raise UpstreamError(f"song info API returned status {response.status_code}")

        try:
            detail = SongDetail.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            record_upstream_lookup("bad_payload", elapsed)
            logger.error("Could not decode song info response: %s", e)
            raise UpstreamError("song info response could not be decoded", cause=e) from e

        record_upstream_lookup("ok", elapsed)
        logger.info("Fetched song details", extra={"group": group, "song": song})
        return detail


def build_song_info_client(config) -> HttpSongInfoClient:
    """Build the HTTP info client from a Flask config mapping."""
    return HttpSongInfoClient(
        base_url=config.get("EXTERNAL_API_URL", ""),
        timeout=config.get("EXTERNAL_API_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
    )


__all__ = ["SongInfoClient", "HttpSongInfoClient", "build_song_info_client"]
