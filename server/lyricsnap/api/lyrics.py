import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from lyricsnap.api.deps import get_catalog, get_lrclib, require_bearer
from lyricsnap.services.lrclib_service import LrcLibService
from lyricsnap.services.spotify_service import SpotifyCatalog

router = APIRouter()
logger = logging.getLogger(__name__)

_MISSING_PARAMS = (
    "Either query (for search) or trackName, artistName, albumName, "
    "and duration (for lyrics) parameters are required"
)


@router.get("")
async def lyrics_proxy(
    query: str | None = None,
    track_name: str | None = Query(None, alias="trackName"),
    artist_name: str | None = Query(None, alias="artistName"),
    album_name: str | None = Query(None, alias="albumName"),
    duration: str | None = None,
    _token: str = Depends(require_bearer),
    catalog: SpotifyCatalog = Depends(get_catalog),
    lrclib: LrcLibService = Depends(get_lrclib),
) -> dict:
    """Search tracks (``query``) or look up lyrics (track/artist/album/duration)."""
    logger.info(
        "Lyrics proxy params - query: %s, trackName: %s, artistName: %s, albumName: %s, duration: %s",
        query, track_name, artist_name, album_name, duration,
    )

    if query:
        tracks = await catalog.search_tracks(query)
        return {"results": [t.model_dump(by_alias=True) for t in tracks]}

    if track_name and artist_name and album_name and duration:
        try:
            duration_ms = int(duration)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="duration must be an integer number of milliseconds") from e

        result = await lrclib.fetch_lyrics(track_name, artist_name, album_name, duration_ms)
        body = result.model_dump(by_alias=True)
        if body["message"] is None:
            body.pop("message")
        return body

    raise HTTPException(status_code=400, detail=_MISSING_PARAMS)
