"""HTTP client for the lyrics proxy.

Every failure leaves this module as one of two exceptions carrying a
readable message: AuthExpired (the proxy said 401, the token has been
cleared) or UpstreamFailure (anything else). Raw httpx errors never escape.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from lyricsnap.client.token_holder import TokenHolder
from lyricsnap.config import settings
from lyricsnap.exceptions import AuthExpired, UpstreamFailure
from lyricsnap.models.lyrics import LyricsDocument, LyricsResponse
from lyricsnap.models.track import SearchResponse, Track

logger = logging.getLogger(__name__)

LYRICS_PATH = "/api/lyrics"

SESSION_EXPIRED = "Spotify session expired."


class LyricsApiClient:
    def __init__(
        self,
        tokens: TokenHolder,
        base_url: str | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.tokens = tokens
        self._base_url = (base_url or settings.proxy_base_url).rstrip("/")
        self._http = http

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=settings.request_timeout_seconds,
            )
        return self._http

    async def search(self, query: str) -> list[Track]:
        data = await self._get({"query": query})
        try:
            return SearchResponse.model_validate(data).results
        except PydanticValidationError as e:
            raise UpstreamFailure("Unexpected search response from the server.") from e

    async def fetch_lyrics(self, track: Track) -> LyricsDocument:
        data = await self._get({
            "trackName": track.title,
            "artistName": track.artist,
            "albumName": track.album,
            "duration": str(track.duration),
        })
        try:
            return LyricsDocument.from_response(LyricsResponse.model_validate(data))
        except PydanticValidationError as e:
            raise UpstreamFailure("Unexpected lyrics response from the server.") from e

    async def _get(self, params: dict[str, str]) -> dict[str, Any]:
        token = self.tokens.token
        if token is None:
            raise AuthExpired(SESSION_EXPIRED)

        try:
            response = await self._client().get(
                LYRICS_PATH,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.warning("Request to %s failed: %s", LYRICS_PATH, e)
            raise UpstreamFailure(f"Could not reach the server: {e}") from e

        if response.status_code == 401:
            self.tokens.clear_if(token)
            raise AuthExpired(SESSION_EXPIRED)

        body = self._json(response)
        if not response.is_success:
            message = body.get("error") or f"Request failed ({response.status_code})"
            raise UpstreamFailure(message, status_code=response.status_code)
        return body

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            if response.is_success:
                raise UpstreamFailure("The server returned an unreadable response.") from None
            return {}
        return body if isinstance(body, dict) else {}

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
