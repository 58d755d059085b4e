"""Map viewport calculation for resolved location groups."""

from haversine import Unit, haversine

from .constants import (
    CITY_RADIUS_M,
    CLOSE_ZOOM,
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    GRANULARITY_NEIGHBORHOOD,
    NEIGHBORHOOD_RADIUS_M,
    REGIONAL_ZOOM,
    USER_FOCUS_ZOOM,
)
from .grouping import find_user_group
from .models import UserGroup, Viewport


def group_radius(granularity: str) -> int:
    """Display radius in meters. Fixed per granularity, not derived from bounds."""
    if granularity == GRANULARITY_NEIGHBORHOOD:
        return NEIGHBORHOOD_RADIUS_M
    return CITY_RADIUS_M


def compute_viewport(groups: list[UserGroup]) -> Viewport:
    """Center the map on the centroid of resolved groups and pick a zoom.

    No resolved groups gives the national default view; one group gets a
    close zoom, several get a regional zoom. spread_km is the distance from
    the center to the farthest resolved group.
    """
    points = [g.coordinates.as_tuple() for g in groups if g.is_resolved]
    if not points:
        return Viewport(center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM)

    avg_lat = sum(p[0] for p in points) / len(points)
    avg_lon = sum(p[1] for p in points) / len(points)
    center = (avg_lat, avg_lon)

    spread = max(haversine(center, p, unit=Unit.KILOMETERS) for p in points)
    zoom = CLOSE_ZOOM if len(points) == 1 else REGIONAL_ZOOM
    return Viewport(center=center, zoom=zoom, spread_km=spread)


def focus_on_group(group: UserGroup) -> Viewport | None:
    """Viewport centered on one group, or None if it has no coordinates."""
    if not group.is_resolved:
        return None
    return Viewport(center=group.coordinates.as_tuple(), zoom=CLOSE_ZOOM)


def focus_on_user(groups: list[UserGroup], user_id: str) -> Viewport | None:
    """Viewport zoomed in on a single user's location, or None if unmapped."""
    group = find_user_group(groups, user_id)
    if group is None or not group.is_resolved:
        return None
    return Viewport(center=group.coordinates.as_tuple(), zoom=USER_FOCUS_ZOOM)
