"""Core logic behind the server's tools and resources.

All calls share the process-wide session cache from state, and a single
resolver so that provider rate limiting applies across calls.
"""

from __future__ import annotations

from . import state
from .geocoding import GeocodeResolver
from .helpers import normalize_location
from .models import User
from .orchestrator import resolve_fragments, resolve_users
from .viewport import focus_on_user

_resolver: GeocodeResolver | None = None


def _get_resolver() -> GeocodeResolver:
    """Get or create the shared resolver."""
    global _resolver
    if _resolver is None:
        _resolver = GeocodeResolver(state.get_settings())
    return _resolver


async def _close_resolver() -> None:
    global _resolver
    if _resolver is not None:
        await _resolver.aclose()
        _resolver = None


async def _resolve_user_locations(users: list[dict]) -> dict:
    result = await resolve_users(users, _get_resolver(), state.session_cache)
    return result.to_dict()


async def _geocode_location(
    neighborhood: str | None = None,
    city: str | None = None,
    state_name: str | None = None,
) -> dict:
    user = User(id="", neighborhood=neighborhood, city=city, state=state_name)
    fragments = user.fragments
    outcome = await resolve_fragments(fragments, _get_resolver(), state.session_cache)

    return {
        "query": fragments.to_dict(),
        "status": outcome.status,
        "coordinates": outcome.coordinates.to_dict() if outcome.coordinates else None,
        "matched_query": outcome.query,
        "source": outcome.source,
        "tried": outcome.tried,
    }


async def _focus_on_user(users: list[dict], user_id: str) -> dict | None:
    result = await resolve_users(users, _get_resolver(), state.session_cache)
    viewport = focus_on_user(result.groups, str(user_id))
    return viewport.to_dict() if viewport else None


def _normalize_location_text(text: str) -> str:
    return normalize_location(text)


def _get_cache_status() -> dict:
    status = state.session_cache.stats()
    if _resolver is not None:
        status["provider_requests"] = _resolver.requests_sent
    return status


def _get_config() -> dict:
    return state.get_settings().to_dict()
