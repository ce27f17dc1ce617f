"""Error taxonomy shared by the proxy backend and the client."""


class LyricSnapError(Exception):
    """Base exception for LyricSnap."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthExpired(LyricSnapError):
    """The bearer token was rejected; the user has to log in again."""


class NotFound(LyricSnapError):
    """Nothing matched. Informational, not a failure."""


class UpstreamFailure(LyricSnapError):
    """A provider or the proxy answered with an unexpected status."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(LyricSnapError):
    """The user attempted an invalid selection or styling action."""


class ExportFailure(LyricSnapError):
    """Rasterizing or writing the snippet image failed."""


class ConfigurationError(LyricSnapError):
    """Required credentials or URLs are not configured."""
