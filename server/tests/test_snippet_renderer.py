"""Tests for the Pillow snippet rasterizer."""

import io

import pytest
from PIL import Image, UnidentifiedImageError

from lyricsnap.exceptions import ExportFailure
from lyricsnap.models.snippet import Snippet
from lyricsnap.services.snippet_renderer import (
    CARD_WIDTH,
    RenderTarget,
    SnippetRenderer,
    diagonal_gradient,
    hex_to_rgb,
)


def _png(color: str = "red", size: int = 12) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (size, size), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def snippet():
    return Snippet(
        title="Hey Jude",
        artist="The Beatles",
        lines=["Hey Jude, don't make it bad", "\u00a0", "Take a sad song and make it better"],
        attribution="Lyrics via lrclib",
    )


class TestHelpers:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#9333EA") == (0x93, 0x33, 0xEA)
        assert hex_to_rgb("000000") == (0, 0, 0)

    def test_gradient_endpoints(self):
        image = diagonal_gradient(20, 10, "#000000", "#FFFFFF")
        assert image.mode == "RGBA"
        assert image.size == (20, 10)
        assert image.getpixel((0, 0)) == (0, 0, 0, 255)
        assert image.getpixel((19, 9)) == (255, 255, 255, 255)


class TestSnippetRenderer:
    def setup_method(self):
        self.renderer = SnippetRenderer()

    def test_missing_target_fails(self):
        with pytest.raises(ExportFailure):
            self.renderer.render(None)

    def test_png_output(self, snippet):
        data = self.renderer.render(RenderTarget(snippet=snippet))
        assert data.startswith(b"\x89PNG")
        image = Image.open(io.BytesIO(data))
        assert image.mode == "RGBA"

    def test_pixel_ratio_scales_width(self, snippet):
        single = self.renderer.render_image(RenderTarget(snippet=snippet, pixel_ratio=1))
        double = self.renderer.render_image(RenderTarget(snippet=snippet, pixel_ratio=2))
        assert single.width == CARD_WIDTH
        assert double.width == CARD_WIDTH * 2
        assert double.height > single.height

    def test_rounded_corner_is_transparent(self, snippet):
        image = self.renderer.render_image(RenderTarget(snippet=snippet))
        assert image.getpixel((0, 0))[3] == 0
        # Only the top corners are rounded
        assert image.getpixel((0, image.height - 1))[3] == 255

    def test_more_lines_make_taller_card(self, snippet):
        short = snippet.model_copy(update={"lines": ["one"]})
        tall = snippet.model_copy(update={"lines": ["one", "two", "three", "four"]})
        assert (
            self.renderer.render_image(RenderTarget(snippet=tall)).height
            > self.renderer.render_image(RenderTarget(snippet=short)).height
        )

    def test_cover_is_drawn(self, snippet):
        with_cover = snippet.model_copy(update={"thumbnail_url": "https://example.com/c.jpg"})
        target = RenderTarget(snippet=with_cover, cover=_png("red"), pixel_ratio=1)
        image = self.renderer.render_image(target)
        # Centre of the 80px cover, top right, inside the 24px padding
        x = CARD_WIDTH - 24 - 40
        r, g, b, a = image.getpixel((x, 24 + 40))
        assert (r, g, b, a) == (255, 0, 0, 255)

    def test_every_font_and_gradient(self, snippet):
        for font in ("geist-sans", "geist-mono", "inter", "roboto-mono", "merriweather"):
            for gradient in ("default", "sunset", "ocean", "forest", "twilight", "mono"):
                styled = snippet.model_copy(update={"font": font, "gradient": gradient})
                image = self.renderer.render_image(RenderTarget(snippet=styled, pixel_ratio=1))
                assert image.width == CARD_WIDTH

    def test_bad_cover_bytes_raise(self, snippet):
        target = RenderTarget(snippet=snippet, cover=b"not an image")
        with pytest.raises(UnidentifiedImageError):
            self.renderer.render(target)
