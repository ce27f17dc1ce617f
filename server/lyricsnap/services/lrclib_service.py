"""Plain-text lyrics lookup against LRCLIB."""

import logging

import httpx

from lyricsnap.config import settings
from lyricsnap.exceptions import UpstreamFailure
from lyricsnap.models.lyrics import LyricsResponse

logger = logging.getLogger(__name__)

SOURCE = "lrclib"

NOT_FOUND_MESSAGE = "No lyrics found for this track."
EMPTY_MESSAGE = "Lyrics found but content is empty."


class LrcLibService:
    """Fetches plain lyrics by track metadata."""

    def __init__(self, http: httpx.AsyncClient | None = None) -> None:
        self._http = http

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=settings.lrclib_base_url,
                timeout=settings.request_timeout_seconds,
                headers={"User-Agent": settings.lrclib_user_agent},
            )
        return self._http

    async def fetch_lyrics(
        self,
        track_name: str,
        artist_name: str,
        album_name: str,
        duration_ms: int,
    ) -> LyricsResponse:
        """Look up lyrics. A provider 404 is a normal "not found" result."""
        params = {
            "track_name": track_name,
            "artist_name": artist_name,
            "album_name": album_name,
            "duration": round(duration_ms / 1000),
        }
        logger.info(
            "Fetching lyrics from LRCLIB for: %s by %s, album: %s, duration: %ss",
            track_name, artist_name, album_name, params["duration"],
        )

        try:
            response = await self._client().get("/api/get", params=params)
        except httpx.HTTPError as e:
            logger.error("Error fetching lyrics from LRCLIB: %s", e)
            raise UpstreamFailure("Failed to fetch lyrics from LRCLIB (Status: 500)", status_code=502) from e

        logger.info("LRCLIB response status: %d", response.status_code)

        if response.status_code == 404:
            return LyricsResponse(lyrics=None, source=SOURCE, message=NOT_FOUND_MESSAGE)

        if response.status_code != 200:
            raise UpstreamFailure(
                f"Failed to fetch lyrics from LRCLIB (Status: {response.status_code})",
                status_code=502,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFailure("LRCLIB returned an unreadable response", status_code=502) from e

        lyrics = (data or {}).get("plainLyrics") or None
        if not lyrics:
            logger.info("LRCLIB response did not contain lyrics content")
            return LyricsResponse(lyrics=None, source=SOURCE, message=EMPTY_MESSAGE)

        return LyricsResponse(lyrics=lyrics, source=SOURCE, is_synced=False)

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
