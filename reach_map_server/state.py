"""Server configuration and session state."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass

from dotenv import load_dotenv

from .cache import GeocodeCache
from .constants import (
    DEFAULT_BACKOFF_SECONDS,
    DEFAULT_COUNTRY,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_ENDPOINT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MIN_DELAY_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)


@dataclass(frozen=True)
class GeocoderSettings:
    """How to reach the geocoding provider and how politely to do it."""

    endpoint: str = DEFAULT_ENDPOINT
    country: str = DEFAULT_COUNTRY
    country_code: str = DEFAULT_COUNTRY_CODE
    user_agent: str = DEFAULT_USER_AGENT
    min_delay_seconds: float = DEFAULT_MIN_DELAY_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        if not self.endpoint:
            raise ValueError("Geocoder endpoint must not be empty")
        if not self.user_agent.strip():
            raise ValueError("Geocoder user agent must not be empty (required by Nominatim)")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.min_delay_seconds < 0 or self.backoff_seconds < 0:
            raise ValueError("Delays must be >= 0")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    def to_dict(self) -> dict:
        return asdict(self)


# Configuration (set by configure() at startup)
GEOCODER_SETTINGS: GeocoderSettings | None = None

# Geocoding cache for this server process; lives until the process exits
session_cache: GeocodeCache = GeocodeCache()


def _read_settings() -> GeocoderSettings:
    """Build settings from GEOCODER_* environment variables.

    Raises:
        ValueError: If a numeric variable cannot be parsed or is out of range.
    """
    try:
        return GeocoderSettings(
            endpoint=os.getenv("GEOCODER_ENDPOINT", DEFAULT_ENDPOINT),
            country=os.getenv("GEOCODER_COUNTRY", DEFAULT_COUNTRY),
            country_code=os.getenv("GEOCODER_COUNTRY_CODE", DEFAULT_COUNTRY_CODE).lower(),
            user_agent=os.getenv("GEOCODER_USER_AGENT", DEFAULT_USER_AGENT),
            min_delay_seconds=float(
                os.getenv("GEOCODER_MIN_DELAY", str(DEFAULT_MIN_DELAY_SECONDS))
            ),
            max_retries=int(os.getenv("GEOCODER_MAX_RETRIES", str(DEFAULT_MAX_RETRIES))),
            backoff_seconds=float(os.getenv("GEOCODER_BACKOFF", str(DEFAULT_BACKOFF_SECONDS))),
            timeout_seconds=float(os.getenv("GEOCODER_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid geocoder configuration: {e}") from e


def configure() -> GeocoderSettings:
    """Initialize configuration from environment. Called at startup.

    Loads .env file if present, then reads GEOCODER_* variables.
    Note: load_dotenv() does NOT override existing env vars by default.
    """
    global GEOCODER_SETTINGS
    load_dotenv()  # Load .env, won't override existing env vars
    GEOCODER_SETTINGS = _read_settings()
    return GEOCODER_SETTINGS


def get_settings() -> GeocoderSettings:
    """Return the active settings, configuring from the environment on first use."""
    if GEOCODER_SETTINGS is None:
        return configure()
    return GEOCODER_SETTINGS
