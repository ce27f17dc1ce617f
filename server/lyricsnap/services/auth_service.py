"""Implicit-grant login helpers: build the authorize URL, read the redirect back."""

from typing import NamedTuple
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from lyricsnap.config import Settings, settings as default_settings
from lyricsnap.exceptions import ConfigurationError


class RedirectResult(NamedTuple):
    token: str | None
    error: str | None
    clean_url: str


def build_authorize_url(config: Settings | None = None) -> str:
    config = config or default_settings
    if not config.spotify_client_id or not config.spotify_redirect_uri:
        raise ConfigurationError("Configure Spotify Client ID / Redirect URI.")

    query = urlencode({
        "response_type": "token",
        "client_id": config.spotify_client_id,
        "scope": " ".join(config.spotify_scope_list),
        "redirect_uri": config.spotify_redirect_uri,
    })
    return f"{config.spotify_accounts_url}/authorize?{query}"


def parse_redirect(url: str) -> RedirectResult:
    """Pull ``access_token`` or ``error`` out of the URL fragment.

    The returned ``clean_url`` has the fragment removed so the token does not
    linger in the visible address.
    """
    parts = urlsplit(url)
    clean_url = urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))
    if not parts.fragment:
        return RedirectResult(None, None, url)

    params = parse_qs(parts.fragment)
    token = params.get("access_token", [None])[0]
    error = None if token else params.get("error", [None])[0]
    return RedirectResult(token, error, clean_url)
