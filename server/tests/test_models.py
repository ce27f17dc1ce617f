"""Tests for the Pydantic models."""

import pytest
from pydantic import ValidationError

from lyricsnap.models.lyrics import LyricsDocument, LyricsResponse
from lyricsnap.models.snippet import FONT_OPTIONS, GRADIENT_PRESETS, Snippet, SnippetConfig
from lyricsnap.models.track import SearchResponse, Track


# ── Track Models ──────────────────────────────────────────────


class TestTrack:
    def test_camel_case_round_trip(self):
        track = Track.model_validate({
            "id": "1",
            "title": "T",
            "artist": "A",
            "album": "B",
            "duration": 1000,
            "thumbnailUrl": "https://img",
        })
        assert track.thumbnail_url == "https://img"
        assert track.preview_url is None
        assert track.model_dump(by_alias=True)["thumbnailUrl"] == "https://img"

    def test_snake_case_accepted(self):
        track = Track(id="1", title="T", artist="A", album="B", duration=1, preview_url="https://p")
        assert track.preview_url == "https://p"

    def test_frozen(self):
        track = Track(id="1", title="T", artist="A", album="B", duration=1)
        with pytest.raises(ValidationError):
            track.title = "changed"

    def test_missing_fields(self):
        with pytest.raises(ValidationError):
            Track.model_validate({"id": "1"})

    def test_search_response(self):
        response = SearchResponse.model_validate({"results": []})
        assert response.results == []


# ── Lyrics Models ─────────────────────────────────────────────


class TestLyricsDocument:
    def test_blank_lines_kept(self):
        doc = LyricsDocument(text="one\n\nthree\n")
        assert doc.lines == ["one", "", "three", ""]

    def test_empty(self):
        doc = LyricsDocument()
        assert doc.lines == []
        assert not doc.found

    def test_from_response(self):
        response = LyricsResponse.model_validate({"lyrics": "x", "source": "lrclib", "isSynced": False})
        doc = LyricsDocument.from_response(response)
        assert doc.text == "x"
        assert doc.source == "lrclib"
        assert doc.found

    def test_from_not_found_response(self):
        response = LyricsResponse(lyrics=None, message="No lyrics found for this track.")
        doc = LyricsDocument.from_response(response)
        assert not doc.found
        assert doc.message == "No lyrics found for this track."

    def test_response_serialization(self):
        data = LyricsResponse(lyrics="x").model_dump(by_alias=True)
        assert data == {"lyrics": "x", "source": "lrclib", "isSynced": False, "message": None}


# ── Snippet Models ────────────────────────────────────────────


class TestSnippetConfig:
    def test_defaults(self):
        config = SnippetConfig()
        assert config.font == "geist-mono"
        assert config.gradient == "default"

    def test_unknown_font(self):
        with pytest.raises(ValidationError):
            SnippetConfig(font="comic-sans")

    def test_unknown_gradient(self):
        with pytest.raises(ValidationError):
            SnippetConfig(gradient="rainbow")

    def test_palettes_cover_literals(self):
        assert set(FONT_OPTIONS) == {"geist-sans", "geist-mono", "inter", "roboto-mono", "merriweather"}
        assert set(GRADIENT_PRESETS) == {"default", "sunset", "ocean", "forest", "twilight", "mono"}

    def test_snippet_defaults(self):
        snippet = Snippet(title="T", artist="A", attribution="Lyrics via lrclib")
        assert snippet.lines == []
        assert snippet.thumbnail_url is None
