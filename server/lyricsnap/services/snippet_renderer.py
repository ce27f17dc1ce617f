"""Snippet rasterizer: draws the share card into a PNG with Pillow.

The card mirrors the on-screen preview: a diagonal two-colour gradient with
rounded top corners, the cover art floated to the top right, the title over
a thin rule, the artist, the selected lines and a small attribution in the
bottom right corner. Layout is done in logical pixels and scaled by the
pixel ratio, so a 2x export is a sharper copy of the preview rather than a
bigger one. Everything outside the card stays fully transparent.
"""

import io
import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from lyricsnap.exceptions import ExportFailure
from lyricsnap.models.snippet import FONT_OPTIONS, GRADIENT_PRESETS, Snippet

logger = logging.getLogger(__name__)

# Logical layout, in CSS-like pixels
CARD_WIDTH = 448
PADDING = 24
CORNER_RADIUS = 8
COVER_SIZE = 80
COVER_GAP = 16
TITLE_SIZE = 18
ARTIST_SIZE = 14
LINE_SIZE = 16
ATTRIBUTION_SIZE = 12
LINE_HEIGHT = 1.6

_WHITE = (255, 255, 255)

# Platform-specific font paths in order of preference, per family
FONT_PATHS: dict[str, dict[str, list[str]]] = {
    "sans": {
        "darwin": [
            "/System/Library/Fonts/Helvetica.ttc",
            "/Library/Fonts/Arial.ttf",
        ],
        "linux": [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
            "/usr/share/fonts/TTF/DejaVuSans.ttf",
        ],
        "win32": [
            "C:/Windows/Fonts/segoeui.ttf",
            "C:/Windows/Fonts/arial.ttf",
        ],
    },
    "mono": {
        "darwin": [
            "/System/Library/Fonts/Menlo.ttc",
            "/System/Library/Fonts/Monaco.ttf",
        ],
        "linux": [
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
            "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
        ],
        "win32": [
            "C:/Windows/Fonts/consola.ttf",
            "C:/Windows/Fonts/cour.ttf",
        ],
    },
    "serif": {
        "darwin": [
            "/System/Library/Fonts/Times.ttc",
            "/Library/Fonts/Georgia.ttf",
        ],
        "linux": [
            "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf",
            "/usr/share/fonts/TTF/DejaVuSerif.ttf",
        ],
        "win32": [
            "C:/Windows/Fonts/georgia.ttf",
            "C:/Windows/Fonts/times.ttf",
        ],
    },
}

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


def _platform_key() -> str:
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


@lru_cache(maxsize=32)
def get_font(family: str, size: int) -> FontType:
    """Load a TrueType font for ``family``, falling back to Pillow's default."""
    candidates = FONT_PATHS.get(family, FONT_PATHS["sans"])
    paths = candidates.get(_platform_key(), candidates["linux"])

    for path in paths:
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue

    logger.debug("No %s font found on this system, using Pillow default", family)
    return ImageFont.load_default(size=size)


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    value = hex_color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def diagonal_gradient(width: int, height: int, start: str, end: str) -> Image.Image:
    """RGBA image fading from ``start`` (top left) to ``end`` (bottom right)."""
    xs = np.linspace(0.0, 1.0, width, dtype=np.float32)
    ys = np.linspace(0.0, 1.0, height, dtype=np.float32)
    t = (xs[np.newaxis, :] + ys[:, np.newaxis]) / 2.0

    start_rgb = np.array(hex_to_rgb(start), dtype=np.float32)
    end_rgb = np.array(hex_to_rgb(end), dtype=np.float32)
    rgb = start_rgb + (end_rgb - start_rgb) * t[..., np.newaxis]

    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    pixels[..., 3] = 255
    return Image.fromarray(pixels)


def wrap_text(text: str, font: FontType, max_width: float, draw: ImageDraw.ImageDraw) -> list[str]:
    """Greedy word wrap. A single word wider than ``max_width`` gets its own line."""
    words = text.split(" ")
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = word if not current else f"{current} {word}"
        if current and draw.textlength(candidate, font=font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    lines.append(current)
    return lines


@dataclass
class RenderTarget:
    """Everything the rasterizer needs, fully resolved before capture."""

    snippet: Snippet
    cover: bytes | None = None
    pixel_ratio: int = 2


class SnippetRenderer:
    """Rasterize a snippet card to PNG bytes."""

    def render(self, target: RenderTarget | None) -> bytes:
        if target is None:
            raise ExportFailure("Error preparing image.")

        image = self.render_image(target)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def render_image(self, target: RenderTarget) -> Image.Image:
        snippet = target.snippet
        scale = max(1, int(target.pixel_ratio))
        family = FONT_OPTIONS[snippet.font].family
        preset = GRADIENT_PRESETS[snippet.gradient]

        title_font = get_font(family, TITLE_SIZE * scale)
        artist_font = get_font(family, ARTIST_SIZE * scale)
        line_font = get_font(family, LINE_SIZE * scale)
        attribution_font = get_font(family, ATTRIBUTION_SIZE * scale)

        width = CARD_WIDTH * scale
        pad = PADDING * scale
        cover_size = COVER_SIZE * scale
        text_width = width - 2 * pad
        header_width = text_width - (cover_size + COVER_GAP * scale if snippet.thumbnail_url else 0)

        measure = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        title_lines = wrap_text(snippet.title, title_font, header_width, measure)
        artist_lines = wrap_text(snippet.artist, artist_font, header_width, measure)
        body_lines: list[str] = []
        for line in snippet.lines:
            body_lines.extend(wrap_text(line, line_font, text_width, measure))

        title_step = round(TITLE_SIZE * LINE_HEIGHT * scale)
        artist_step = round(ARTIST_SIZE * LINE_HEIGHT * scale)
        line_step = round(LINE_SIZE * LINE_HEIGHT * scale)
        attribution_step = round(ATTRIBUTION_SIZE * LINE_HEIGHT * scale)
        rule_gap = 4 * scale
        block_gap = 16 * scale

        header_height = (
            title_step * len(title_lines) + rule_gap + 8 * scale
            + artist_step * len(artist_lines)
        )
        if snippet.thumbnail_url:
            header_height = max(header_height, cover_size + 8 * scale)

        height = (
            pad + header_height + block_gap
            + line_step * len(body_lines)
            + block_gap + attribution_step + pad
        )

        card = diagonal_gradient(width, height, preset.start, preset.end)

        # Rounded top corners; everything outside the card stays transparent
        mask = Image.new("L", (width, height), 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, width - 1, height + CORNER_RADIUS * scale),
            radius=CORNER_RADIUS * scale,
            fill=255,
        )
        card.putalpha(mask)

        overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)

        if target.cover is not None:
            self._paste_cover(overlay, target.cover, (width - pad - cover_size, pad), cover_size, scale)

        y = pad
        for text in title_lines:
            draw.text((pad, y), text, font=title_font, fill=(*_WHITE, 255))
            y += title_step
        y += rule_gap
        draw.line((pad, y, pad + header_width, y), fill=(*_WHITE, 77), width=scale)
        y += 8 * scale
        for text in artist_lines:
            draw.text((pad, y), text, font=artist_font, fill=(*_WHITE, 204))
            y += artist_step

        y = pad + header_height + block_gap
        for text in body_lines:
            draw.text((pad, y), text, font=line_font, fill=(*_WHITE, 255))
            y += line_step

        y += block_gap
        attribution_x = width - pad - draw.textlength(snippet.attribution, font=attribution_font)
        draw.text((attribution_x, y), snippet.attribution, font=attribution_font, fill=(*_WHITE, 153))

        return Image.alpha_composite(card, overlay)

    def _paste_cover(
        self,
        overlay: Image.Image,
        cover_bytes: bytes,
        origin: tuple[int, int],
        size: int,
        scale: int,
    ) -> None:
        cover = Image.open(io.BytesIO(cover_bytes)).convert("RGBA").resize((size, size))
        border = 2 * scale
        framed = Image.new("RGBA", (size + 2 * border, size + 2 * border), (*_WHITE, 128))
        framed.paste(cover, (border, border))
        overlay.paste(framed, (origin[0] - border, origin[1] - border))
