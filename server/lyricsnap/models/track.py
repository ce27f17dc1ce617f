from pydantic import BaseModel, ConfigDict


def _to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class Track(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=_to_camel, frozen=True)

    id: str
    title: str
    artist: str
    album: str
    duration: int  # milliseconds
    thumbnail_url: str | None = None
    preview_url: str | None = None


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=_to_camel)

    results: list[Track]
