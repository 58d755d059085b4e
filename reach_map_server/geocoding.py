"""Geocoding of user address fragments through OpenStreetMap Nominatim.

Queries go from most to least specific and stop at the first match:

1. neighborhood, city, state, country
2. neighborhood, city, country
3. city, state, country
4. city, country

Every query is looked up in the session cache first. A "no match" answer is
cached as NOT_FOUND; a transport failure (network error, timeout, 429/5xx) is
retried with exponential backoff and never cached, so a later run can try
again once the provider recovers.

Requests are serialized and spaced by a minimum delay, as required by the
Nominatim usage policy.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

from .cache import NOT_FOUND
from .constants import (
    GRANULARITY_CITY,
    GRANULARITY_NEIGHBORHOOD,
    NEIGHBORHOOD_ADDRESS_KEYS,
    NEIGHBORHOOD_BOUNDS_PADDING,
)
from .errors import GeocoderTransportError
from .helpers import normalize_location
from .models import AddressFragments, Bounds, CoordinatePair
from .state import GeocoderSettings
from .telemetry import get_tracer

if TYPE_CHECKING:
    from .cache import GeocodeCache

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["resolved", "not_found", "transport_error"]


@dataclass
class ResolveOutcome:
    """Result of resolving one set of fragments (or one free-text query)."""

    status: OutcomeStatus
    coordinates: CoordinatePair | None = None
    query: str | None = None  # Query that produced the coordinates
    source: str | None = None  # "cache" or "provider"
    attempts: int = 0  # Queries sent to the provider
    tried: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "resolved" and self.coordinates is not None


def build_queries(fragments: AddressFragments, country: str) -> list[str]:
    """Build the fallback chain for a set of fragments, most specific first.

    Queries missing a required field are skipped, and queries that normalize
    to an earlier one are dropped. A neighborhood is never queried without
    its city.
    """
    n, c, s = fragments.neighborhood, fragments.city, fragments.state
    candidates: list[tuple[str | None, ...]] = [
        (n, c, s, country),
        (n, c, country),
        (c, s, country),
        (c, country),
    ]

    queries = []
    seen: set[str] = set()
    for parts in candidates:
        if not c or not all(parts):
            continue
        query = ", ".join(p for p in parts if p)
        key = normalize_location(query)
        if key in seen:
            continue
        seen.add(key)
        queries.append(query)
    return queries


def _parse_nominatim_result(item: dict, query: str) -> CoordinatePair | None:
    """Turn the first element of a Nominatim answer into coordinates.

    Neighborhood-level answers (suburb/neighbourhood in the address details)
    get a tight bounds box around the point; anything else is city-level and
    keeps the provider's bounding box when there is one.
    """
    try:
        lat = float(item["lat"])
        lon = float(item["lon"])
    except (KeyError, TypeError, ValueError):
        logger.info(f"Discarding malformed geocoder answer for '{query}': {item!r}")
        return None

    address = item.get("address") or {}
    if any(k in address for k in NEIGHBORHOOD_ADDRESS_KEYS):
        pad = NEIGHBORHOOD_BOUNDS_PADDING
        bounds = Bounds(south=lat - pad, north=lat + pad, west=lon - pad, east=lon + pad)
        granularity = GRANULARITY_NEIGHBORHOOD
    else:
        bounds = None
        bbox = item.get("boundingbox")
        if bbox and len(bbox) == 4:
            try:
                south, north, west, east = map(float, bbox)
                bounds = Bounds(south=south, north=north, west=west, east=east)
            except (TypeError, ValueError):
                bounds = None
        granularity = GRANULARITY_CITY

    return CoordinatePair(
        latitude=lat,
        longitude=lon,
        bounds=bounds,
        display_name=item.get("display_name", query),
        granularity=granularity,
    )


class GeocodeResolver:
    """Resolve address fragments to coordinates with a fallback chain.

    Use as an async context manager, or call aclose() when done, unless an
    externally owned httpx.AsyncClient was passed in.
    """

    def __init__(
        self,
        settings: GeocoderSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or GeocoderSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        self._lock = asyncio.Lock()
        self._last_request = 0.0
        self.requests_sent = 0

    async def __aenter__(self) -> GeocodeResolver:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_queries(self, fragments: AddressFragments) -> list[str]:
        return build_queries(fragments, self.settings.country)

    async def resolve(
        self, fragments: AddressFragments, cache: GeocodeCache | None = None
    ) -> ResolveOutcome:
        """Resolve fragments by walking the fallback chain.

        After a transport failure the rest of the chain is only checked
        against the cache; the provider is not called again for these
        fragments.
        """
        queries = self.build_queries(fragments)
        outcome = ResolveOutcome(status="not_found")
        offline = False

        for query in queries:
            outcome.tried.append(query)
            cached = cache.get(query) if cache is not None else None
            if cached is NOT_FOUND:
                logger.debug(f"Skipping '{query}': cached as not found")
                continue
            if cached is not None:
                outcome.status = "resolved"
                outcome.coordinates = cached
                outcome.query = query
                outcome.source = "cache"
                return outcome
            if offline:
                continue

            outcome.attempts += 1
            try:
                coords = await self.search(query)
            except GeocoderTransportError as e:
                logger.warning(f"Geocoder unavailable for '{query}': {e}")
                outcome.status = "transport_error"
                offline = True
                continue

            if coords is None:
                if cache is not None:
                    cache.put(query, NOT_FOUND)
                continue

            if cache is not None:
                cache.put(query, coords)
            outcome.status = "resolved"
            outcome.coordinates = coords
            outcome.query = query
            outcome.source = "provider"
            return outcome

        if outcome.status != "transport_error":
            logger.info(
                f"Low confidence geocode: {fragments.to_dict()} -> not found "
                f"(tried {len(outcome.tried)} queries)"
            )
        return outcome

    async def resolve_text(self, query: str, cache: GeocodeCache | None = None) -> ResolveOutcome:
        """Resolve a single free-text query with the same cache semantics."""
        outcome = ResolveOutcome(status="not_found", tried=[query])
        if not normalize_location(query):
            return outcome

        cached = cache.get(query) if cache is not None else None
        if cached is NOT_FOUND:
            return outcome
        if cached is not None:
            return ResolveOutcome(
                status="resolved", coordinates=cached, query=query, source="cache", tried=[query]
            )

        outcome.attempts = 1
        try:
            coords = await self.search(query)
        except GeocoderTransportError as e:
            logger.warning(f"Geocoder unavailable for '{query}': {e}")
            outcome.status = "transport_error"
            return outcome

        if coords is None:
            if cache is not None:
                cache.put(query, NOT_FOUND)
            return outcome

        if cache is not None:
            cache.put(query, coords)
        outcome.status = "resolved"
        outcome.coordinates = coords
        outcome.query = query
        outcome.source = "provider"
        return outcome

    async def search(self, query: str) -> CoordinatePair | None:
        """Send one query to the provider, retrying transport failures.

        Returns None when the provider has no match.

        Raises:
            GeocoderTransportError: When every attempt failed at the transport level.
        """
        retries = self.settings.max_retries
        attempt = 0
        while True:
            try:
                data = await self._request(query)
                break
            except GeocoderTransportError as e:
                if not e.retryable or attempt >= retries:
                    raise
                delay = self.settings.backoff_seconds * (2**attempt)
                logger.debug(
                    f"Geocoder attempt {attempt + 1}/{retries + 1} failed for '{query}', "
                    f"retrying in {delay:.2f}s: {e}"
                )
                attempt += 1
                await asyncio.sleep(delay)

        if not data:
            logger.debug(f"No geocoder match for '{query}'")
            return None
        return _parse_nominatim_result(data[0], query)

    async def _throttle(self) -> None:
        elapsed = time.monotonic() - self._last_request
        wait = self.settings.min_delay_seconds - elapsed
        if wait > 0:
            await asyncio.sleep(wait)
        self._last_request = time.monotonic()

    async def _request(self, query: str) -> list:
        """Perform a single rate-limited request. Returns the decoded JSON array."""
        params = {
            "q": query,
            "format": "json",
            "limit": 1,
            "countrycodes": self.settings.country_code,
            "addressdetails": 1,
        }
        headers = {"User-Agent": self.settings.user_agent}

        with get_tracer().start_as_current_span("geocode_request") as span:
            span.set_attribute("geocode.query", query)
            async with self._lock:
                await self._throttle()
                self.requests_sent += 1
                try:
                    response = await self._client.get(
                        self.settings.endpoint, params=params, headers=headers
                    )
                except httpx.HTTPError as e:
                    raise GeocoderTransportError(query, f"{type(e).__name__}: {e}") from e

            span.set_attribute("http.status_code", response.status_code)
            if response.status_code != 200:
                raise GeocoderTransportError(
                    query,
                    f"HTTP {response.status_code} from geocoder",
                    status_code=response.status_code,
                )

            try:
                data = response.json()
            except ValueError as e:
                raise GeocoderTransportError(query, f"Undecodable geocoder response: {e}") from e

            if not isinstance(data, list):
                raise GeocoderTransportError(query, f"Unexpected geocoder payload: {data!r:.100}")
            span.set_attribute("geocode.match", bool(data))
            return data
