"""Tests for snippet composition and export file naming."""

import pytest

from lyricsnap.models.lyrics import LyricsDocument
from lyricsnap.models.snippet import SnippetConfig
from lyricsnap.models.track import Track
from lyricsnap.services.selection import EMPTY_SELECTION, apply_click
from lyricsnap.services.snippet_service import (
    BLANK_LINE,
    attribution_label,
    build_snippet,
    snippet_filename,
)


@pytest.fixture
def track():
    return Track(
        id="t1",
        title="Bohemian Rhapsody",
        artist="Queen",
        album="A Night at the Opera",
        duration=354000,
        thumbnail_url="https://i.scdn.co/image/small",
    )


@pytest.fixture
def doc():
    return LyricsDocument(text="Is this the real life?\nIs this just fantasy?\n\nCaught in a landslide", source="lrclib")


class TestBuildSnippet:
    def test_lines_in_ascending_order(self, track, doc):
        selection = EMPTY_SELECTION
        for index in (1, 0):
            selection = apply_click(selection, index).selection

        snippet = build_snippet(track, doc, selection)
        assert snippet.lines == ["Is this the real life?", "Is this just fantasy?"]

    def test_order_independent_of_click_order(self, track, doc):
        forward = build_snippet(track, doc, [1, 2, 3])
        backward = build_snippet(track, doc, [3, 2, 1])
        assert forward.lines == backward.lines

    def test_blank_line_is_preserved(self, track, doc):
        snippet = build_snippet(track, doc, {1, 2, 3})
        assert snippet.lines[1] == BLANK_LINE
        assert len(snippet.lines) == 3

    def test_metadata(self, track, doc):
        snippet = build_snippet(track, doc, {0}, SnippetConfig(font="inter", gradient="ocean"))
        assert snippet.title == "Bohemian Rhapsody"
        assert snippet.artist == "Queen"
        assert snippet.attribution == "Lyrics via lrclib"
        assert snippet.font == "inter"
        assert snippet.gradient == "ocean"
        assert snippet.thumbnail_url == "https://i.scdn.co/image/small"

    def test_default_config(self, track, doc):
        snippet = build_snippet(track, doc, {0})
        assert snippet.font == "geist-mono"
        assert snippet.gradient == "default"


class TestAttributionLabel:
    def test_source(self):
        assert attribution_label("lrclib") == "Lyrics via lrclib"

    def test_missing_source_falls_back(self):
        assert attribution_label(None) == "Lyrics via Genius"
        assert attribution_label("") == "Lyrics via Genius"

    def test_synced_suffix(self):
        assert attribution_label("lrclib", is_synced=True) == "Lyrics via lrclib, Synced"


class TestSnippetFilename:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Bohemian Rhapsody", "bohemianrhapsody_selection.png"),
            ("Don't Stop Me Now!", "dontstopmenow_selection.png"),
            ("99 Luftballons", "99luftballons_selection.png"),
            ("", "lyrics_selection.png"),
            ("???", "lyrics_selection.png"),
        ],
    )
    def test_slug(self, title, expected):
        assert snippet_filename(title) == expected

    def test_extension(self):
        assert snippet_filename("Hey Jude", "jpg") == "heyjude_selection.jpg"
