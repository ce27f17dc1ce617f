from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FontId = Literal["geist-sans", "geist-mono", "inter", "roboto-mono", "merriweather"]
GradientId = Literal["default", "sunset", "ocean", "forest", "twilight", "mono"]
FontFamily = Literal["sans", "mono", "serif"]


class FontOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    family: FontFamily


class GradientPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    start: str
    end: str


FONT_OPTIONS: dict[str, FontOption] = {
    "geist-sans": FontOption(name="Geist Sans", family="sans"),
    "geist-mono": FontOption(name="Geist Mono", family="mono"),
    "inter": FontOption(name="Inter", family="sans"),
    "roboto-mono": FontOption(name="Roboto Mono", family="mono"),
    "merriweather": FontOption(name="Merriweather", family="serif"),
}

# Diagonal gradients, top-left colour to bottom-right colour
GRADIENT_PRESETS: dict[str, GradientPreset] = {
    "default": GradientPreset(name="Default", start="#9333EA", end="#4F46E5"),
    "sunset": GradientPreset(name="Sunset", start="#EF4444", end="#F97316"),
    "ocean": GradientPreset(name="Ocean", start="#60A5FA", end="#34D399"),
    "forest": GradientPreset(name="Forest", start="#22C55E", end="#65A30D"),
    "twilight": GradientPreset(name="Twilight", start="#6366F1", end="#6B21A8"),
    "mono": GradientPreset(name="Mono", start="#374151", end="#111827"),
}

DEFAULT_FONT: FontId = "geist-mono"
DEFAULT_GRADIENT: GradientId = "default"


class SnippetConfig(BaseModel):
    font: FontId = DEFAULT_FONT
    gradient: GradientId = DEFAULT_GRADIENT


class Snippet(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    artist: str
    lines: list[str] = Field(default_factory=list)
    attribution: str
    font: FontId = DEFAULT_FONT
    gradient: GradientId = DEFAULT_GRADIENT
    thumbnail_url: str | None = None


class ExportResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    path: Path
