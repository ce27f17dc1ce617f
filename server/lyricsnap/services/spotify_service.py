"""Spotify catalog search through the client-credentials flow.

The backend owns its own app token: it is fetched on first use, renewed a
minute before it expires, and renewed once more (with a single retry of the
request) whenever Spotify answers 401. None of that is visible to callers.
"""

import asyncio
import base64
import logging
import time
from typing import Any

import httpx

from lyricsnap.config import settings
from lyricsnap.exceptions import ConfigurationError, UpstreamFailure
from lyricsnap.models.track import Track

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10

# Renew this many seconds before the token actually expires
_RENEW_MARGIN = 60


def _proxy_status(status_code: int) -> int:
    # A 401 here is the backend's own credential, never the caller's session
    return 502 if status_code == 401 else status_code


def track_from_item(item: dict[str, Any]) -> Track:
    """Map a Spotify track object to a Track, picking the smallest cover."""
    album = item.get("album") or {}
    images = album.get("images") or []
    return Track(
        id=item["id"],
        title=item.get("name", ""),
        artist=", ".join(a.get("name", "") for a in item.get("artists", [])),
        album=album.get("name", ""),
        duration=item.get("duration_ms", 0),
        thumbnail_url=images[-1].get("url") if images else None,
        preview_url=item.get("preview_url"),
    )


class SpotifyCatalog:
    """Track search against the Spotify Web API."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._client_id = client_id if client_id is not None else settings.spotify_client_id
        self._client_secret = client_secret if client_secret is not None else settings.spotify_client_secret
        self._http = http
        self._token: str | None = None
        self._expires_at: float = 0.0
        self._lock = asyncio.Lock()

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=settings.request_timeout_seconds)
        return self._http

    @property
    def has_token(self) -> bool:
        return self._token is not None and time.monotonic() < self._expires_at

    async def _request_token(self) -> None:
        if not self._client_id or not self._client_secret:
            raise ConfigurationError("Could not authenticate with Spotify. Check credentials.")

        basic = base64.b64encode(f"{self._client_id}:{self._client_secret}".encode()).decode()
        try:
            response = await self._client().post(
                f"{settings.spotify_accounts_url}/api/token",
                data={"grant_type": "client_credentials"},
                headers={"Authorization": f"Basic {basic}"},
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error getting Spotify client credentials token: %s", e)
            raise ConfigurationError("Could not authenticate with Spotify. Check credentials.") from e

        self._token = body["access_token"]
        expires_in = int(body.get("expires_in", 3600))
        self._expires_at = time.monotonic() + max(expires_in - _RENEW_MARGIN, 0)
        logger.info("Spotify token obtained, renewing in %ds", max(expires_in - _RENEW_MARGIN, 0))

    async def ensure_token(self, force: bool = False) -> str:
        """Return a valid app token, renewing it when close to expiry."""
        async with self._lock:
            if force or not self.has_token:
                await self._request_token()
            assert self._token is not None
            return self._token

    async def search_tracks(self, query: str, limit: int = SEARCH_LIMIT) -> list[Track]:
        """Search tracks by free text. Retries once on 401 with a fresh token."""
        logger.info("Searching Spotify for query: %s", query)
        response = await self._search(query, limit, await self.ensure_token())

        if response.status_code == 401:
            logger.info("Spotify token expired or invalid, renewing and retrying")
            response = await self._search(query, limit, await self.ensure_token(force=True))
            if response.status_code != 200:
                raise UpstreamFailure(
                    f"Spotify search failed after token refresh: HTTP {response.status_code}",
                    status_code=_proxy_status(response.status_code),
                )

        if response.status_code != 200:
            raise UpstreamFailure(
                f"Spotify search failed: HTTP {response.status_code}",
                status_code=_proxy_status(response.status_code),
            )

        items = (response.json().get("tracks") or {}).get("items") or []
        tracks = [track_from_item(item) for item in items]
        logger.info("Found %d tracks on Spotify", len(tracks))
        return tracks

    async def _search(self, query: str, limit: int, token: str) -> httpx.Response:
        try:
            return await self._client().get(
                f"{settings.spotify_api_url}/search",
                params={"q": query, "type": "track", "limit": limit},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.error("Error searching Spotify: %s", e)
            raise UpstreamFailure(f"Spotify search failed: {e}", status_code=502) from e

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
