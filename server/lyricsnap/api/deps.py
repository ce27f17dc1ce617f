"""Shared route dependencies: bearer check and long-lived provider clients."""

from fastapi import Header, HTTPException

from lyricsnap.services.lrclib_service import LrcLibService
from lyricsnap.services.spotify_service import SpotifyCatalog

# Singleton instances; the catalog caches its app token between requests
spotify_catalog = SpotifyCatalog()
lrclib_service = LrcLibService()


def get_catalog() -> SpotifyCatalog:
    return spotify_catalog


def get_lrclib() -> LrcLibService:
    return lrclib_service


def require_bearer(authorization: str | None = Header(None)) -> str:
    """Return the caller's bearer token, or answer 401."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip() or token.strip() == "null":
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()
