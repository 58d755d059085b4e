"""Resolve grouped users to coordinates and build the map result.

Groups are resolved strictly one after another, in grouping order. Public
geocoding endpoints expect serialized, rate-limited access, so there is no
fan-out across groups. A group is only updated once its outcome is final, so
an abandoned run leaves nothing to roll back; whatever reached the cache is
reused by the next run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .geocoding import ResolveOutcome
from .grouping import group_users
from .helpers import normalize_location
from .models import AddressFragments, ResolutionResult, User, UserGroup
from .stats import compute_network_statistics
from .telemetry import get_tracer
from .viewport import compute_viewport, group_radius

if TYPE_CHECKING:
    from .cache import GeocodeCache
    from .geocoding import GeocodeResolver

logger = logging.getLogger(__name__)


@dataclass
class ResolutionSummary:
    resolved: int = 0
    unresolved: int = 0
    transport_errors: int = 0
    provider_requests: int = 0

    def to_dict(self) -> dict:
        return {
            "resolved": self.resolved,
            "unresolved": self.unresolved,
            "transport_errors": self.transport_errors,
            "provider_requests": self.provider_requests,
        }


def _apply_outcome(group: UserGroup, outcome: ResolveOutcome) -> None:
    """Record the final outcome on the group. Called exactly once per group."""
    if outcome.ok:
        coords = outcome.coordinates
        group.coordinates = coords
        if coords.granularity != "unknown":
            group.granularity = coords.granularity
        group.status = "resolved"
        group.matched_query = outcome.query
        group.source = outcome.source
        group.error = None
        group.radius_m = group_radius(group.granularity)
    else:
        group.status = "unresolved"
        group.error = outcome.status
        group.radius_m = None


async def resolve_fragments(
    fragments: AddressFragments, resolver: GeocodeResolver, cache: GeocodeCache
) -> ResolveOutcome:
    """Run the fallback chain, then the city on its own as a last resort."""
    outcome = await resolver.resolve(fragments, cache)

    city = fragments.city
    if not outcome.ok and city:
        already_tried = {normalize_location(q) for q in outcome.tried}
        if normalize_location(city) not in already_tried:
            logger.debug(f"Falling back to city only: '{city}'")
            fallback = await resolver.resolve_text(city, cache)
            fallback.attempts += outcome.attempts
            fallback.tried = outcome.tried + fallback.tried
            if fallback.ok or outcome.status != "transport_error":
                outcome = fallback
            else:
                outcome.attempts = fallback.attempts
                outcome.tried = fallback.tried
    return outcome


async def resolve_group(
    group: UserGroup, resolver: GeocodeResolver, cache: GeocodeCache
) -> ResolveOutcome:
    """Resolve one group and record the outcome on it."""
    outcome = await resolve_fragments(group.fragments, resolver, cache)
    _apply_outcome(group, outcome)
    return outcome


async def resolve_groups(
    groups: list[UserGroup], resolver: GeocodeResolver, cache: GeocodeCache
) -> tuple[list[UserGroup], ResolutionSummary]:
    """Resolve every group in order. Failures are recorded on the group, never raised."""
    summary = ResolutionSummary()
    tracer = get_tracer()

    for group in groups:
        with tracer.start_as_current_span("resolve_group") as span:
            span.set_attribute("group.key", group.normalized_key)
            span.set_attribute("group.size", group.size)

            outcome = await resolve_group(group, resolver, cache)
            summary.provider_requests += outcome.attempts

            span.set_attribute("group.status", group.status)
            if group.is_resolved:
                summary.resolved += 1
                span.set_attribute("group.source", group.source or "")
            else:
                summary.unresolved += 1
                if group.error == "transport_error":
                    summary.transport_errors += 1

    logger.info(
        f"Resolved {summary.resolved}/{len(groups)} location groups "
        f"({summary.provider_requests} provider queries, "
        f"{summary.transport_errors} transport errors)"
    )
    return groups, summary


async def resolve_users(
    users: list[User | dict], resolver: GeocodeResolver, cache: GeocodeCache
) -> ResolutionResult:
    """Group users, resolve their locations and compute the map viewport."""
    with get_tracer().start_as_current_span("resolve_users") as span:
        user_objs = [u if isinstance(u, User) else User.from_dict(u) for u in users]
        span.set_attribute("users.count", len(user_objs))

        groups = group_users(user_objs)
        groups, summary = await resolve_groups(groups, resolver, cache)
        viewport = compute_viewport(groups)

        span.set_attribute("groups.resolved", summary.resolved)
        span.set_attribute("groups.unresolved", summary.unresolved)

        return ResolutionResult(
            groups=groups,
            center=viewport.center,
            zoom=viewport.zoom,
            resolved_count=summary.resolved,
            unresolved_count=summary.unresolved,
            spread_km=viewport.spread_km,
            statistics=compute_network_statistics(user_objs, groups),
        )
