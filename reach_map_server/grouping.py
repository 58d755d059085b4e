"""Group users that share a location."""

import logging

from .constants import GRANULARITY_CITY, GRANULARITY_NEIGHBORHOOD
from .helpers import location_label, normalize_location
from .models import User, UserGroup

logger = logging.getLogger(__name__)


def _as_user(record: User | dict) -> User:
    return record if isinstance(record, User) else User.from_dict(record)


def group_users(users: list[User | dict]) -> list[UserGroup]:
    """Partition users into groups keyed by normalized "neighborhood, city" (or city).

    Users without a neighborhood or city are skipped. Groups come out in the
    order their key was first seen, and the first user of each group sets its
    display label and granularity hint. Coordinates stay at the sentinel until
    the group is resolved.
    """
    groups: dict[str, UserGroup] = {}
    skipped = 0

    for record in users:
        user = _as_user(record)
        fragments = user.fragments
        label = location_label(fragments)
        key = normalize_location(label)
        if not key:
            skipped += 1
            continue

        group = groups.get(key)
        if group is None:
            group = UserGroup(
                normalized_key=key,
                location_name=label,
                fragments=fragments,
                granularity=(
                    GRANULARITY_NEIGHBORHOOD if fragments.neighborhood else GRANULARITY_CITY
                ),
            )
            groups[key] = group
        elif not group.fragments.city and fragments.city:
            # Only fragments with a city can be geocoded
            group.fragments = fragments
        group.users.append(user)

    if skipped:
        logger.debug(f"Skipped {skipped} users without a location")
    return list(groups.values())


def find_user_group(groups: list[UserGroup], user_id: str) -> UserGroup | None:
    """Return the group containing the given user, if any."""
    for group in groups:
        if any(u.id == user_id for u in group.users):
            return group
    return None
