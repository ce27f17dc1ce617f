"""Browsing session: the state behind the search, lyrics and export views.

One session per user. All mutation happens on the event loop; the only
awaits are the two proxy calls and the export steps. Each proxy call is
tagged with a sequence number and a response is applied only if no newer
request (or a logout) has happened since it was sent. New requests are also
refused while one is in flight, mirroring the disabled search controls.
"""

import logging
from pathlib import Path
from typing import Literal

import httpx

from lyricsnap.client.api_client import LyricsApiClient
from lyricsnap.client.token_holder import TokenHolder
from lyricsnap.config import settings
from lyricsnap.exceptions import AuthExpired, ExportFailure, UpstreamFailure, ValidationError
from lyricsnap.models.lyrics import LyricsDocument
from lyricsnap.models.snippet import ExportResult
from lyricsnap.models.track import Track
from lyricsnap.services.auth_service import build_authorize_url
from lyricsnap.services.export_session import ExportSession
from lyricsnap.services.selection import EMPTY_SELECTION, ClickResult, apply_click, sorted_selection

logger = logging.getLogger(__name__)

View = Literal["login", "browse"]

NO_SONGS = "No songs found."
NO_LYRICS = "No lyrics found."


class BrowsingSession:
    def __init__(
        self,
        api: LyricsApiClient | None = None,
        tokens: TokenHolder | None = None,
        export: ExportSession | None = None,
        max_lines: int | None = None,
    ) -> None:
        self.tokens = tokens or (api.tokens if api else TokenHolder())
        self.api = api or LyricsApiClient(self.tokens)
        self.export = export or ExportSession(max_lines=max_lines)
        self.max_lines = max_lines or settings.max_selected_lines

        self.results: list[Track] = []
        self.song: Track | None = None
        self.lyrics: LyricsDocument | None = None
        self.selection: frozenset[int] = EMPTY_SELECTION

        self.error = ""
        self.notice: str | None = None
        self.is_searching = False
        self.is_fetching_lyrics = False
        self._seq = 0

    # ── Auth ──────────────────────────────────────────────────────────

    @property
    def view(self) -> View:
        return "browse" if self.tokens.is_authenticated() else "login"

    def login_url(self) -> str:
        return build_authorize_url()

    def handle_redirect(self, url: str) -> str:
        """Consume a login redirect; returns the URL to show without the fragment."""
        error, clean_url = self.tokens.accept_redirect(url)
        if error:
            self.error = error
        return clean_url

    def logout(self) -> None:
        self._reset()
        self.error = ""

    def _expire(self, exc: AuthExpired) -> None:
        if self.tokens.is_authenticated():
            # The rejected token was already replaced by a newer login
            logger.info("Ignoring expiry for a replaced token")
            return
        self._reset()
        self.error = exc.message

    def _reset(self) -> None:
        # Responses still in flight belong to the old login and get dropped
        self._seq += 1
        self.tokens.clear()
        self.results = []
        self.song = None
        self.lyrics = None
        self.selection = EMPTY_SELECTION
        self.export.cancel()
        self.is_searching = False
        self.is_fetching_lyrics = False

    # ── Search and lyrics ─────────────────────────────────────────────

    @property
    def busy(self) -> bool:
        return self.is_searching or self.is_fetching_lyrics

    async def search(self, query: str) -> bool:
        """Run a track search. Returns False if it was not started."""
        if not query.strip() or self.busy:
            return False

        self._seq += 1
        seq = self._seq
        self.results = []
        self.song = None
        self.lyrics = None
        self.selection = EMPTY_SELECTION
        self.export.cancel()
        self.error = ""
        self.notice = None
        self.is_searching = True

        try:
            results = await self.api.search(query)
        except AuthExpired as e:
            if seq == self._seq:
                self._expire(e)
                self.is_searching = False
            return True
        except UpstreamFailure as e:
            if seq == self._seq:
                self.error = e.message
                self.is_searching = False
            return True

        if seq != self._seq:
            logger.debug("Dropping stale search response for %r", query)
            return True

        self.results = results
        if not results:
            self.notice = NO_SONGS
        self.is_searching = False
        return True

    async def select_song(self, track: Track) -> bool:
        """Load lyrics for ``track``. Lyrics and selection are reset first."""
        if self.busy:
            return False

        self._seq += 1
        seq = self._seq
        self.song = track
        self.lyrics = None
        self.selection = EMPTY_SELECTION
        self.export.cancel()
        self.error = ""
        self.notice = None
        self.is_fetching_lyrics = True

        try:
            doc = await self.api.fetch_lyrics(track)
        except AuthExpired as e:
            if seq == self._seq:
                self._expire(e)
                self.is_fetching_lyrics = False
            return True
        except UpstreamFailure as e:
            if seq == self._seq:
                self.error = e.message
                self.is_fetching_lyrics = False
            return True

        if seq != self._seq:
            logger.debug("Dropping stale lyrics response for %s", track.id)
            return True

        self.lyrics = doc
        if not doc.found:
            self.notice = doc.message or NO_LYRICS
        self.is_fetching_lyrics = False
        return True

    # ── Selection ─────────────────────────────────────────────────────

    @property
    def lines(self) -> list[str]:
        return self.lyrics.lines if self.lyrics else []

    def click_line(self, index: int) -> ClickResult:
        if not 0 <= index < len(self.lines):
            return ClickResult(self.selection)

        result = apply_click(self.selection, index, self.max_lines)
        self.selection = result.selection
        if result.notice:
            self.notice = result.notice
        return result

    def selected_lines(self) -> list[str]:
        lines = self.lines
        return [lines[i] for i in sorted_selection(self.selection)]

    # ── Export ────────────────────────────────────────────────────────

    def open_export(self) -> bool:
        if self.song is None or self.lyrics is None:
            self.notice = "Select some lines first."
            return False
        try:
            self.export.open(self.song, self.lyrics, self.selection)
        except ValidationError as e:
            self.notice = e.message
            return False
        return True

    async def load_export_cover(self, client: httpx.AsyncClient) -> bool:
        try:
            await self.export.load_cover(client)
        except ExportFailure as e:
            self.notice = e.message
            return False
        return True

    async def export_image(self, output_dir: Path | None = None) -> ExportResult | None:
        try:
            return await self.export.confirm(output_dir)
        except ExportFailure as e:
            self.notice = e.message
            return None

    def cancel_export(self) -> None:
        self.export.cancel()
