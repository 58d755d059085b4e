"""Exceptions raised while talking to the geocoding provider."""

from .constants import RETRYABLE_STATUS_CODES


class GeocodingError(Exception):
    """Base class for geocoding failures."""


class GeocoderTransportError(GeocodingError):
    """The provider could not be reached or answered with an HTTP error.

    Unlike a "no match" answer, this is retryable and must never be cached.
    """

    def __init__(self, query: str, message: str, status_code: int | None = None):
        super().__init__(f"{message} (query: {query!r})")
        self.query = query
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Network errors, 429 and 5xx are retried; other HTTP errors are not."""
        if self.status_code is None:
            return True
        return self.status_code in RETRYABLE_STATUS_CODES or self.status_code >= 500
