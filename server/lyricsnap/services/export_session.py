"""Export flow: configure a snippet, wait for the cover, rasterize it.

Phases follow the preview dialog:

    idle --open()--> configuring --cover loaded / no cover--> ready
    ready --confirm() ok--> idle
    ready --confirm() fails--> ready   (configuring with the cover already
                                        loaded: dialog stays open, retry allowed)
    configuring/ready --cancel()--> idle
"""

import asyncio
import logging
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Literal, get_args

import aiofiles
import httpx

from lyricsnap.config import settings
from lyricsnap.exceptions import ExportFailure, ValidationError
from lyricsnap.models.lyrics import LyricsDocument
from lyricsnap.models.snippet import (
    ExportResult,
    FontId,
    GradientId,
    Snippet,
    SnippetConfig,
)
from lyricsnap.models.track import Track
from lyricsnap.services.selection import validate_for_export
from lyricsnap.services.snippet_renderer import RenderTarget, SnippetRenderer
from lyricsnap.services.snippet_service import build_snippet, snippet_filename

logger = logging.getLogger(__name__)

ExportPhase = Literal["idle", "configuring", "ready"]

_FONTS = set(get_args(FontId))
_GRADIENTS = set(get_args(GradientId))


class ExportSession:
    """One preview dialog worth of export state."""

    def __init__(
        self,
        renderer: SnippetRenderer | None = None,
        pixel_ratio: int | None = None,
        max_lines: int | None = None,
    ) -> None:
        self._renderer = renderer or SnippetRenderer()
        self._pixel_ratio = pixel_ratio or settings.export_pixel_ratio
        self._max_lines = max_lines or settings.max_selected_lines

        self.phase: ExportPhase = "idle"
        self.config = SnippetConfig()
        self.cover_key: int = 0
        self._track: Track | None = None
        self._doc: LyricsDocument | None = None
        self._selection: list[int] = []
        self._cover: bytes | None = None

    @property
    def is_open(self) -> bool:
        return self.phase != "idle"

    @property
    def is_ready(self) -> bool:
        return self.phase == "ready"

    @property
    def cover_url(self) -> str | None:
        """Cover URL with a per-session cache buster so the load fires again."""
        if self._track is None or not self._track.thumbnail_url:
            return None
        separator = "&" if "?" in self._track.thumbnail_url else "?"
        return f"{self._track.thumbnail_url}{separator}_={self.cover_key}"

    def open(self, track: Track, doc: LyricsDocument, selection: Iterable[int]) -> None:
        """Start configuring an export. Raises ValidationError for a bad selection."""
        ordered = validate_for_export(selection, self._max_lines)

        self._track = track
        self._doc = doc
        self._selection = ordered
        self._cover = None
        self.config = SnippetConfig()
        self.cover_key = max(int(time.time() * 1000), self.cover_key + 1)
        self.phase = "configuring"

        if not track.thumbnail_url:
            # Nothing to wait for
            self.phase = "ready"

    def set_font(self, font: str) -> None:
        self._require_open()
        if font not in _FONTS:
            raise ValidationError(f"Unknown font '{font}'")
        self.config = self.config.model_copy(update={"font": font})

    def set_gradient(self, gradient: str) -> None:
        self._require_open()
        if gradient not in _GRADIENTS:
            raise ValidationError(f"Unknown gradient '{gradient}'")
        self.config = self.config.model_copy(update={"gradient": gradient})

    def mark_cover_loaded(self, image: bytes | None = None) -> None:
        self._require_open()
        self._cover = image
        self.phase = "ready"

    async def load_cover(self, client: httpx.AsyncClient) -> None:
        """Download the cover art and mark the session ready."""
        self._require_open()
        url = self.cover_url
        if url is None:
            self.phase = "ready"
            return

        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Cover download failed for %s: %s", url, e)
            raise ExportFailure("Could not load the cover image.") from e

        self.mark_cover_loaded(response.content)

    def snippet(self) -> Snippet:
        self._require_open()
        if self._track is None or self._doc is None:
            raise ExportFailure("Error preparing image.")
        return build_snippet(self._track, self._doc, self._selection, self.config)

    def render_target(self) -> RenderTarget | None:
        if not self.is_open or self._track is None or self._doc is None:
            return None
        return RenderTarget(
            snippet=self.snippet(),
            cover=self._cover,
            pixel_ratio=self._pixel_ratio,
        )

    async def confirm(self, output_dir: Path | None = None) -> ExportResult:
        """Rasterize the snippet and write it to ``output_dir``.

        On success the session closes. On failure nothing is written, the
        session stays open and ExportFailure is raised.
        """
        if self.phase == "configuring":
            raise ExportFailure("Cover image is still loading.")

        target = self.render_target()
        if target is None:
            raise ExportFailure("Error preparing image.")

        try:
            data = await asyncio.to_thread(self._renderer.render, target)
        except ExportFailure:
            raise
        except Exception as e:
            logger.exception("PNG generation failed for '%s'", target.snippet.title)
            raise ExportFailure("PNG generation failed.") from e

        directory = output_dir or settings.export_dir
        filename = snippet_filename(target.snippet.title)
        path = Path(directory) / filename
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.exception("Could not write snippet image to %s", path)
            path.unlink(missing_ok=True)
            raise ExportFailure("PNG generation failed.") from e

        logger.info("Exported %d line(s) of '%s' to %s", len(target.snippet.lines), target.snippet.title, path)
        self.close()
        return ExportResult(filename=filename, path=path)

    def cancel(self) -> None:
        self.close()

    def close(self) -> None:
        self.phase = "idle"
        self.config = SnippetConfig()
        self._track = None
        self._doc = None
        self._selection = []
        self._cover = None

    def _require_open(self) -> None:
        if not self.is_open:
            raise ExportFailure("The export preview is not open.")
