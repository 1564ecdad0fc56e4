"""
tests/unit/test_group_resolution.py - Tests for group request validation and resolution
"""

import pytest

from gridbudget.catalog import TensionLevel
from gridbudget.errors import ErrorCode, ErrorKind
from gridbudget.groups import (
    GroupItemRole,
    GroupMaterialItem,
    GroupRequest,
    GroupResolver,
    GroupSpecs,
    partition_items,
)

LOW = TensionLevel.LOW
MEDIUM = TensionLevel.MEDIUM


@pytest.fixture
def resolver(group_store):
    return GroupResolver(group_store)


class TestCheckLevels:
    """Test GroupResolver.check_levels()."""

    def test_two_low_levels_fit(self, pole):
        requests = [GroupRequest(LOW, 1, "grp-low-a"), GroupRequest(LOW, 2, "grp-low-b")]
        assert GroupResolver.check_levels(requests, pole).ok

    def test_level_above_capacity(self, pole):
        result = GroupResolver.check_levels([GroupRequest(LOW, 3, "grp-low-a")], pole)
        assert not result.ok
        assert result.error.kind == ErrorKind.INVALID_REQUEST
        assert result.error.code == ErrorCode.IR_POLE_CAPACITY
        assert result.error.details["tension_level"] == "LOW"

    def test_level_below_one(self, pole):
        result = GroupResolver.check_levels([GroupRequest(MEDIUM, 0, "grp-med")], pole)
        assert result.error.code == ErrorCode.IR_POLE_CAPACITY

    def test_duplicate_level_is_conflict(self, pole):
        requests = [GroupRequest(LOW, 1, "grp-low-a"), GroupRequest(LOW, 1, "grp-low-b")]
        result = GroupResolver.check_levels(requests, pole)
        assert result.error.kind == ErrorKind.CONFLICT
        assert result.error.code == ErrorCode.CF_GROUP_LEVEL
        assert result.error.message == "Duplicate low tension group level 1 found"

    def test_same_level_on_both_sides(self, pole):
        requests = [GroupRequest(LOW, 1, "grp-low-a"), GroupRequest(MEDIUM, 1, "grp-med")]
        assert GroupResolver.check_levels(requests, pole).ok

    def test_side_without_levels(self, pole):
        """A pole with no MEDIUM levels rejects any MEDIUM group."""
        from dataclasses import replace

        bare = replace(pole, medium_voltage_levels_count=0)
        result = GroupResolver.check_levels([GroupRequest(MEDIUM, 1, "grp-med")], bare)
        assert result.error.code == ErrorCode.IR_POLE_CAPACITY

    def test_tension_given_as_text(self, pole):
        request = GroupRequest("low", 3, "grp-low-a")
        assert request.tension_level is LOW
        result = GroupResolver.check_levels([request], pole)
        assert result.error.code == ErrorCode.IR_POLE_CAPACITY
        assert result.error.details["tension_level"] == "LOW"

    def test_unknown_tension_rejected(self):
        with pytest.raises(ValueError):
            GroupRequest("HIGH", 1, "grp-low-a")


class TestResolve:
    """Test GroupResolver.resolve()."""

    def test_empty_requests(self, resolver, pole, group_store):
        result = resolver.resolve([], pole)
        assert result.ok
        assert result.value == []
        assert group_store.calls["find_groups_by_ids"] == 0

    def test_resolves_in_request_order(self, resolver, pole):
        requests = [
            GroupRequest(MEDIUM, 1, "grp-med"),
            GroupRequest(LOW, 2, "grp-low-b"),
            GroupRequest(LOW, 1, "grp-low-a"),
        ]
        result = resolver.resolve(requests, pole)
        assert result.ok
        assert [r.group.id for r in result.value] == ["grp-med", "grp-low-b", "grp-low-a"]
        assert [r.level for r in result.value] == [1, 2, 1]

    def test_partitions_items_by_role(self, resolver, pole):
        result = resolver.resolve([GroupRequest(LOW, 1, "grp-low-a")], pole)
        resolved = result.value[0]
        assert [i.id for i in resolved.materials] == ["item-a-clamp"]
        assert [i.id for i in resolved.pole_screws] == ["item-a-screw"]
        assert [i.id for i in resolved.cable_connectors] == ["item-a-conn"]

    def test_group_without_items(self, resolver, pole, group_store):
        from gridbudget.groups import Group

        group_store.groups["grp-empty"] = Group("EMPTY", LOW, id="grp-empty")
        resolved = resolver.resolve([GroupRequest(LOW, 1, "grp-empty")], pole).value[0]
        assert resolved.materials == ()
        assert resolved.pole_screws == ()
        assert resolved.cable_connectors == ()

    def test_same_group_on_two_levels(self, resolver, pole, group_store):
        """A group used twice is fetched once and resolved twice."""
        requests = [GroupRequest(LOW, 1, "grp-low-b"), GroupRequest(LOW, 2, "grp-low-b")]
        result = resolver.resolve(requests, pole)
        assert len(result.value) == 2
        assert group_store.calls["find_groups_by_ids"] == 1
        assert group_store.calls["find_group_items_by_group_ids"] == 1

    def test_missing_groups_reported_together(self, resolver, pole):
        requests = [
            GroupRequest(LOW, 1, "ghost-1"),
            GroupRequest(LOW, 2, "grp-low-b"),
            GroupRequest(MEDIUM, 1, "ghost-2"),
        ]
        result = resolver.resolve(requests, pole)
        assert result.error.kind == ErrorKind.NOT_FOUND
        assert result.error.code == ErrorCode.NF_GROUP
        assert result.error.details["missing_ids"] == ["ghost-1", "ghost-2"]
        assert result.error.message == "Groups not found: ghost-1, ghost-2"

    def test_capacity_checked_before_lookup(self, resolver, pole, group_store):
        result = resolver.resolve([GroupRequest(LOW, 3, "ghost")], pole)
        assert result.error.code == ErrorCode.IR_POLE_CAPACITY
        assert group_store.calls["find_groups_by_ids"] == 0

    def test_specs(self, resolver, pole):
        resolved = resolver.resolve([GroupRequest(LOW, 2, "grp-low-b")], pole).value[0]
        assert resolved.specs == GroupSpecs("grp-low-b", 2, LOW)
        assert resolved.specs.to_dict() == {"group_id": "grp-low-b", "level": 2, "tension_level": "LOW"}


class TestPartitionItems:
    """Test partition_items()."""

    def test_roles(self, group_items):
        assert [item.role for item in group_items[:3]] == [
            GroupItemRole.MATERIAL,
            GroupItemRole.POLE_SCREW,
            GroupItemRole.CABLE_CONNECTOR,
        ]

    def test_unknown_item_type_raises(self):
        with pytest.raises(TypeError):
            partition_items([GroupMaterialItem("g", "m", 1), object()])
