"""Coverage statistics for a user network on the map."""

from .helpers import normalize_location
from .models import User, UserGroup


def compute_network_statistics(users: list[User], groups: list[UserGroup]) -> dict:
    """Count distinct places and how many users ended up on the map."""
    neighborhoods = {normalize_location(u.neighborhood) for u in users if u.neighborhood}
    cities = {normalize_location(u.city) for u in users if u.city}
    states = {normalize_location(u.state) for u in users if u.state}

    users_with_location = sum(g.size for g in groups if g.is_resolved)

    total = len(users)
    return {
        "total_users": total,
        "neighborhoods": len(neighborhoods),
        "cities": len(cities),
        "states": len(states),
        "users_with_location": users_with_location,
        "coverage_percentage": round(users_with_location / total * 100) if total > 0 else 0,
        "user_groups": len(groups),
        "shared_locations": sum(1 for g in groups if g.size > 1),
    }
