"""Tests for network statistics."""

from reach_map_server.grouping import group_users
from reach_map_server.models import CoordinatePair, User
from reach_map_server.stats import compute_network_statistics


def _resolve(group, lat=-7.8, lon=-35.7):
    group.coordinates = CoordinatePair(lat, lon)
    group.status = "resolved"


class TestNetworkStatistics:
    def test_empty_network(self):
        stats = compute_network_statistics([], [])
        assert stats["total_users"] == 0
        assert stats["coverage_percentage"] == 0
        assert stats["user_groups"] == 0

    def test_distinct_places_ignore_accents_and_case(self, sample_users):
        stats = compute_network_statistics(sample_users, group_users(sample_users))
        assert stats["neighborhoods"] == 1
        assert stats["cities"] == 3
        assert stats["states"] == 3

    def test_only_resolved_groups_count_as_located(self, sample_users):
        groups = group_users(sample_users)
        _resolve(groups[0])

        stats = compute_network_statistics(sample_users, groups)
        assert stats["users_with_location"] == 3
        assert stats["coverage_percentage"] == 60
        assert stats["user_groups"] == 3
        assert stats["shared_locations"] == 1

    def test_coverage_is_rounded(self):
        users = [User(id=str(i), city="Surubim" if i == 0 else None) for i in range(3)]
        groups = group_users(users)
        _resolve(groups[0])

        assert compute_network_statistics(users, groups)["coverage_percentage"] == 33

    def test_users_without_location_still_counted(self):
        users = [User(id="1"), User(id="2", state="PE")]
        stats = compute_network_statistics(users, group_users(users))
        assert stats["total_users"] == 2
        assert stats["states"] == 1
        assert stats["users_with_location"] == 0

    def test_missing_ids_do_not_inflate_coverage(self):
        records = [{"name": "a", "city": "Surubim"}, {"name": "b"}]
        users = [User.from_dict(r) for r in records]
        groups = group_users(users)
        _resolve(groups[0])

        stats = compute_network_statistics(users, groups)
        assert stats["users_with_location"] == 1
        assert stats["coverage_percentage"] == 50
