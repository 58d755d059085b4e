"""Utility functions for location text normalization."""

import re
import unicodedata

from .models import AddressFragments

_SPACE_AROUND_COMMA = re.compile(r"\s*,\s*")


def strip_accents(text: str) -> str:
    """Remove diacritics ("São João" -> "Sao Joao")."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_location(text: str | None) -> str:
    """Normalize a location string for use as a grouping and cache key.

    Applies lowercasing, accent removal and whitespace cleanup. Empty input
    yields an empty string. Normalizing an already-normalized key is a no-op.
    """
    if not text:
        return ""

    result = strip_accents(text).lower()

    # Collapse whitespace
    result = " ".join(result.split())
    result = _SPACE_AROUND_COMMA.sub(", ", result)

    return result.strip(" ,")


def location_label(fragments: AddressFragments) -> str:
    """Human-readable location for a user: "Neighborhood, City" or just the city."""
    if fragments.neighborhood and fragments.city:
        return f"{fragments.neighborhood}, {fragments.city}"
    return fragments.city or fragments.neighborhood or ""

