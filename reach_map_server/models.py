"""Data models for users, locations and resolution results."""

from dataclasses import dataclass, field
from typing import Literal

from .constants import (
    GRANULARITY_UNKNOWN,
    SENTINEL_COORDINATES,
)

Granularity = Literal["neighborhood", "city", "unknown"]
GroupStatus = Literal["pending", "resolved", "unresolved"]


def _clean(value) -> str | None:
    """Return a stripped string, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class User:
    id: str
    name: str = ""
    email: str = ""
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    role: str = "user"

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Build a User from a record supplied by the caller. Unknown keys are ignored."""
        return cls(
            id="" if data.get("id") is None else str(data["id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            neighborhood=_clean(data.get("neighborhood")),
            city=_clean(data.get("city")),
            state=_clean(data.get("state")),
            role=str(data.get("role") or "user"),
        )

    @property
    def fragments(self) -> "AddressFragments":
        return AddressFragments(
            neighborhood=_clean(self.neighborhood),
            city=_clean(self.city),
            state=_clean(self.state),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "neighborhood": self.neighborhood,
            "city": self.city,
            "state": self.state,
            "role": self.role,
        }

    def to_summary(self) -> dict:
        """Short summary for map popups."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
        }


@dataclass(frozen=True)
class AddressFragments:
    """The parts of a user record used for geocoding."""

    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None

    def is_empty(self) -> bool:
        return not (self.neighborhood or self.city)

    def to_dict(self) -> dict:
        return {
            "neighborhood": self.neighborhood,
            "city": self.city,
            "state": self.state,
        }


@dataclass(frozen=True)
class Bounds:
    south: float
    north: float
    west: float
    east: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.south <= latitude <= self.north and self.west <= longitude <= self.east

    def to_dict(self) -> dict:
        return {"south": self.south, "north": self.north, "west": self.west, "east": self.east}


@dataclass(frozen=True)
class CoordinatePair:
    """A resolved point, with the provider's area information when available."""

    latitude: float
    longitude: float
    bounds: Bounds | None = None
    display_name: str | None = None
    granularity: Granularity = GRANULARITY_UNKNOWN

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "bounds": self.bounds.to_dict() if self.bounds else None,
            "display_name": self.display_name,
            "granularity": self.granularity,
        }


SENTINEL = CoordinatePair(*SENTINEL_COORDINATES)


@dataclass
class UserGroup:
    """Users sharing a normalized location.

    Created with sentinel coordinates and updated once when resolution
    finishes, successfully or not.
    """

    normalized_key: str
    location_name: str
    fragments: AddressFragments
    users: list[User] = field(default_factory=list)
    coordinates: CoordinatePair = SENTINEL
    granularity: Granularity = GRANULARITY_UNKNOWN
    status: GroupStatus = "pending"
    matched_query: str | None = None
    source: str | None = None  # "cache" | "provider"
    error: str | None = None  # "not_found" | "transport_error"
    radius_m: int | None = None

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved" and self.coordinates is not SENTINEL

    @property
    def size(self) -> int:
        return len(self.users)

    def to_dict(self) -> dict:
        return {
            "normalized_key": self.normalized_key,
            "location_name": self.location_name,
            "fragments": self.fragments.to_dict(),
            "users": [u.to_summary() for u in self.users],
            "user_count": self.size,
            "others_count": max(self.size - 1, 0),
            "coordinates": self.coordinates.to_dict() if self.is_resolved else None,
            "granularity": self.granularity,
            "status": self.status,
            "matched_query": self.matched_query,
            "source": self.source,
            "error": self.error,
            "radius_m": self.radius_m,
        }


@dataclass(frozen=True)
class Viewport:
    center: tuple[float, float]
    zoom: int
    spread_km: float = 0.0

    def to_dict(self) -> dict:
        return {
            "center": list(self.center),
            "zoom": self.zoom,
            "spread_km": round(self.spread_km, 1),
        }


@dataclass
class ResolutionResult:
    groups: list[UserGroup]
    center: tuple[float, float]
    zoom: int
    resolved_count: int
    unresolved_count: int
    spread_km: float = 0.0
    statistics: dict = field(default_factory=dict)

    @property
    def resolved_groups(self) -> list[UserGroup]:
        return [g for g in self.groups if g.is_resolved]

    @property
    def unresolved_groups(self) -> list[UserGroup]:
        return [g for g in self.groups if not g.is_resolved]

    def to_dict(self) -> dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "center": list(self.center),
            "zoom": self.zoom,
            "spread_km": round(self.spread_km, 1),
            "resolved_count": self.resolved_count,
            "unresolved_count": self.unresolved_count,
            "statistics": self.statistics,
        }
