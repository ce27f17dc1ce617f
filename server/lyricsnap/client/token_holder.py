import logging
import threading

from lyricsnap.services.auth_service import parse_redirect

logger = logging.getLogger(__name__)


class TokenHolder:
    """Holds the user's bearer token.

    Written by the login callback and cleared on expiry; read by every API
    call. Both writes take the lock so a clear is never half-seen.
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self._lock = threading.Lock()

    @property
    def token(self) -> str | None:
        with self._lock:
            return self._token

    def is_authenticated(self) -> bool:
        return self.token is not None

    def set_token(self, token: str) -> None:
        with self._lock:
            self._token = token

    def clear(self) -> None:
        with self._lock:
            if self._token is not None:
                logger.info("Bearer token cleared, re-authentication required")
            self._token = None

    def clear_if(self, token: str) -> bool:
        """Clear only if ``token`` is still the current one.

        A 401 for a token that has since been replaced must not log out the
        newer login.
        """
        with self._lock:
            if self._token != token:
                return False
            self._token = None
        logger.info("Bearer token cleared, re-authentication required")
        return True

    def accept_redirect(self, url: str) -> tuple[str | None, str]:
        """Take the token from a login redirect.

        Returns ``(error, clean_url)``; ``error`` is set when the provider
        refused the login.
        """
        result = parse_redirect(url)
        if result.token:
            self.set_token(result.token)
            return None, result.clean_url
        if result.error:
            return f"Spotify login failed: {result.error}", result.clean_url
        return None, result.clean_url
