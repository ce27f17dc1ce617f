"""Tests for the LRCLIB lyrics lookup."""

import httpx
import pytest

from lyricsnap.exceptions import UpstreamFailure
from lyricsnap.services.lrclib_service import EMPTY_MESSAGE, NOT_FOUND_MESSAGE, LrcLibService


def _service(handler) -> LrcLibService:
    http = httpx.AsyncClient(base_url="https://lrclib.net", transport=httpx.MockTransport(handler))
    return LrcLibService(http=http)


class TestFetchLyrics:
    @pytest.mark.asyncio
    async def test_found(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={
                "plainLyrics": "line one\nline two",
                "syncedLyrics": "[00:01.00] line one",
            })

        result = await _service(handler).fetch_lyrics("Song", "Artist", "Album", 215600)

        assert result.lyrics == "line one\nline two"
        assert result.source == "lrclib"
        assert result.is_synced is False
        assert result.message is None

        request = seen[0]
        assert request.url.path == "/api/get"
        assert dict(request.url.params) == {
            "track_name": "Song",
            "artist_name": "Artist",
            "album_name": "Album",
            "duration": "216",
        }

    @pytest.mark.asyncio
    async def test_duration_rounds_to_seconds(self):
        durations: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            durations.append(request.url.params["duration"])
            return httpx.Response(404)

        service = _service(handler)
        await service.fetch_lyrics("a", "b", "c", 180499)
        await service.fetch_lyrics("a", "b", "c", 180600)
        assert durations == ["180", "181"]

    @pytest.mark.asyncio
    async def test_404_is_not_found(self):
        result = await _service(lambda r: httpx.Response(404)).fetch_lyrics("a", "b", "c", 1000)
        assert result.lyrics is None
        assert result.message == NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_empty_plain_lyrics(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"plainLyrics": "", "instrumental": True})

        result = await _service(handler).fetch_lyrics("a", "b", "c", 1000)
        assert result.lyrics is None
        assert result.message == EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_server_error_is_upstream_failure(self):
        with pytest.raises(UpstreamFailure) as exc_info:
            await _service(lambda r: httpx.Response(500)).fetch_lyrics("a", "b", "c", 1000)
        assert exc_info.value.status_code == 502
        assert "Status: 500" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error_is_upstream_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFailure):
            await _service(handler).fetch_lyrics("a", "b", "c", 1000)

    def test_user_agent_header(self, monkeypatch):
        monkeypatch.setattr("lyricsnap.config.settings.lrclib_user_agent", "TestAgent/1.0")
        client = LrcLibService()._client()
        assert client.headers["User-Agent"] == "TestAgent/1.0"
        assert str(client.base_url).startswith("https://lrclib.net")
