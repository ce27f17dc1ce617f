from lyricsnap.models.track import SearchResponse, Track
from lyricsnap.models.lyrics import LyricsDocument, LyricsResponse
from lyricsnap.models.snippet import ExportResult, Snippet, SnippetConfig

__all__ = [
    "SearchResponse",
    "Track",
    "LyricsDocument",
    "LyricsResponse",
    "ExportResult",
    "Snippet",
    "SnippetConfig",
]
