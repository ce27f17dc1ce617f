"""Snippet composition: the exact lines and labels that go into an export."""

import re
from collections.abc import Iterable

from lyricsnap.models.lyrics import DEFAULT_SOURCE, LyricsDocument
from lyricsnap.models.snippet import Snippet, SnippetConfig
from lyricsnap.models.track import Track

# Keeps blank lyric lines from collapsing in the rendered card
BLANK_LINE = "\u00a0"

FILENAME_SUFFIX = "_selection"

_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def attribution_label(source: str | None, is_synced: bool = False) -> str:
    label = f"Lyrics via {source or DEFAULT_SOURCE}"
    if is_synced:
        label += ", Synced"
    return label


def build_snippet(
    track: Track,
    doc: LyricsDocument,
    selection: Iterable[int],
    config: SnippetConfig | None = None,
) -> Snippet:
    """Assemble the snippet for ``selection``, lines in ascending index order."""
    config = config or SnippetConfig()
    lines = doc.lines

    rendered: list[str] = []
    for index in sorted(selection):
        text = lines[index] if 0 <= index < len(lines) else ""
        rendered.append(text or BLANK_LINE)

    return Snippet(
        title=track.title,
        artist=track.artist,
        lines=rendered,
        attribution=attribution_label(doc.source, doc.is_synced),
        font=config.font,
        gradient=config.gradient,
        thumbnail_url=track.thumbnail_url,
    )


def snippet_filename(title: str, extension: str = "png") -> str:
    """``"Don't Stop Me Now!"`` -> ``"dontstopmenow_selection.png"``."""
    stem = _NON_ALNUM.sub("", title).lower() or "lyrics"
    return f"{stem}{FILENAME_SUFFIX}.{extension}"
