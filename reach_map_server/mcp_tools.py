"""MCP tool definitions for the reach map server."""

from .core import (
    _focus_on_user,
    _geocode_location,
    _get_cache_status,
    _normalize_location_text,
    _resolve_user_locations,
)


def register_tools(mcp):
    """Register all MCP tools with the server."""

    # ============== RESOLUTION TOOLS (2) ==============

    @mcp.tool()
    async def resolve_user_locations(users: list[dict]) -> dict:
        """
        Place a network of users on the map.

        Groups users sharing the same neighborhood and city, geocodes each
        group once (OpenStreetMap Nominatim, rate limited, cached for the
        lifetime of the server) and computes the map viewport.

        Args:
            users: User records with id, name, email, role and optional
                neighborhood, city and state

        Returns:
            Dictionary with groups (coordinates, members, label, granularity,
            status), center, zoom, resolved_count, unresolved_count and
            coverage statistics
        """
        return await _resolve_user_locations(users)

    @mcp.tool()
    async def geocode_location(
        neighborhood: str | None = None,
        city: str | None = None,
        state: str | None = None,
    ) -> dict:
        """
        Geocode a single neighborhood/city/state combination.

        Tries the most specific query first and falls back to the city.

        Returns:
            Dictionary with status ("resolved", "not_found", "transport_error"),
            coordinates and the query that matched
        """
        return await _geocode_location(neighborhood, city, state)

    # ============== VIEWPORT TOOLS (1) ==============

    @mcp.tool()
    async def focus_on_user(users: list[dict], user_id: str) -> dict | None:
        """
        Get a close-up viewport centered on one user's location.

        Returns:
            Dictionary with center and zoom, or None if the user has no
            resolved location
        """
        return await _focus_on_user(users, user_id)

    # ============== UTILITY TOOLS (2) ==============

    @mcp.tool()
    def normalize_location_text(text: str) -> str:
        """
        Normalize a location the way grouping and caching do
        (lowercase, no accents, single spaces).
        """
        return _normalize_location_text(text)

    @mcp.tool()
    def get_geocode_cache_status() -> dict:
        """
        Get geocoding cache statistics for this server session.

        Returns:
            Dictionary with entries, resolved, not_found, hits, misses
        """
        return _get_cache_status()
