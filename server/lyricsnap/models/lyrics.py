from pydantic import BaseModel, ConfigDict

from lyricsnap.models.track import _to_camel

DEFAULT_SOURCE = "Genius"


class LyricsResponse(BaseModel):
    """Body returned by the lyrics proxy endpoint."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=_to_camel)

    lyrics: str | None
    source: str = "lrclib"
    is_synced: bool = False
    message: str | None = None


class LyricsDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    source: str | None = None
    is_synced: bool = False
    message: str | None = None

    @property
    def lines(self) -> list[str]:
        """Lines in order. Empty lines are kept, they are selectable too."""
        if not self.text:
            return []
        return self.text.split("\n")

    @property
    def found(self) -> bool:
        return bool(self.text)

    @classmethod
    def from_response(cls, response: LyricsResponse) -> "LyricsDocument":
        return cls(
            text=response.lyrics or "",
            source=response.source or None,
            is_synced=response.is_synced,
            message=response.message,
        )
