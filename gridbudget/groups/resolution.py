"""
groups/resolution.py - Group request validation and item partitioning.

Turns the (tension level, level, group id) triples requested for a point
into ResolvedGroup records:

1. a (tension level, level) pair may appear only once
2. each tension side must fit on the pole: no more requests than levels,
   and every level between 1 and the side's level count
3. all group ids are resolved in one store call; every missing id is
   reported together
4. all group items are fetched in one store call and split per group by role
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from ..catalog.enums import TensionLevel
from ..catalog.lookup import index_by_id, missing_ids, unique_ids
from ..catalog.models import UtilityPole
from ..errors import (
    ErrorCode,
    Result,
    conflict_error,
    internal_error,
    invalid_request_error,
    not_found_error,
)
from .models import (
    Group,
    GroupCableConnectorItem,
    GroupItem,
    GroupMaterialItem,
    GroupPoleScrewItem,
    GroupSpecs,
)

if TYPE_CHECKING:
    from ..stores.base import GroupStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupRequest:
    """A group attached to one level of the point's pole."""
    tension_level: TensionLevel
    level: int
    group_id: str

    def __post_init__(self):
        object.__setattr__(self, "tension_level", TensionLevel.parse(self.tension_level))


@dataclass(frozen=True)
class ResolvedGroup:
    """A group request with its group and items split by role."""
    tension_level: TensionLevel
    level: int
    group: Group
    materials: Tuple[GroupMaterialItem, ...] = ()
    cable_connectors: Tuple[GroupCableConnectorItem, ...] = ()
    pole_screws: Tuple[GroupPoleScrewItem, ...] = ()

    @property
    def specs(self) -> GroupSpecs:
        return GroupSpecs(
            group_id=self.group.id,
            level=self.level,
            tension_level=self.tension_level,
        )


@dataclass
class _ItemBuckets:
    materials: List[GroupMaterialItem]
    cable_connectors: List[GroupCableConnectorItem]
    pole_screws: List[GroupPoleScrewItem]


@dataclass(frozen=True)
class GroupArena:
    """Groups found in the store and their items split per group and role."""
    groups: Dict[str, Group]
    items: Dict[str, _ItemBuckets]



def partition_items(items: Iterable[GroupItem]) -> Dict[str, _ItemBuckets]:
    """
    Split group items per group id and role.

    Raises:
        TypeError: for an item that is not one of the GroupItem variants
    """
    buckets: Dict[str, _ItemBuckets] = {}
    for item in items:
        if isinstance(item, GroupMaterialItem):
            role = "materials"
        elif isinstance(item, GroupCableConnectorItem):
            role = "cable_connectors"
        elif isinstance(item, GroupPoleScrewItem):
            role = "pole_screws"
        else:
            raise TypeError(f"Unknown group item type: {type(item).__name__}")
        bucket = buckets.setdefault(item.group_id, _ItemBuckets([], [], []))
        getattr(bucket, role).append(item)
    return buckets


class GroupResolver:
    """
    Validates group requests against a pole and resolves them.

    Usage:
        resolver = GroupResolver(group_store)
        result = resolver.resolve(requests, pole)
    """

    def __init__(self, store: "GroupStore"):
        self.store = store

    def fetch(self, group_ids: Sequence[str]) -> GroupArena:
        """
        Fetch groups and their items in one store call each.

        Missing ids are not an error here; resolve() reports them per
        request list.
        """
        group_ids = unique_ids(group_ids)
        if not group_ids:
            return GroupArena(groups={}, items={})

        groups = index_by_id(self.store.find_groups_by_ids(group_ids))
        items = partition_items(self.store.find_group_items_by_group_ids(list(groups))) if groups else {}
        logger.debug(f"Fetched {len(groups)} of {len(group_ids)} group(s)")
        return GroupArena(groups=groups, items=items)

    def resolve(
        self,
        requests: Sequence[GroupRequest],
        pole: UtilityPole,
        arena: Optional[GroupArena] = None,
    ) -> Result[List[ResolvedGroup]]:
        """
        Resolve group requests for a point.

        Args:
            requests: Requested groups, in the order records must be emitted
            pole: The point's utility pole
            arena: Groups already fetched for a batch; fetched here when omitted

        Returns:
            Result with one ResolvedGroup per request, in request order
        """
        if not requests:
            return Result.success([])

        check = self.check_levels(requests, pole)
        if not check.ok:
            return check

        group_ids = unique_ids(request.group_id for request in requests)
        if arena is None:
            arena = self.fetch(group_ids)
        missing = missing_ids(group_ids, arena.groups)
        if missing:
            return Result.failure(not_found_error(
                f"Groups not found: {', '.join(missing)}",
                ErrorCode.NF_GROUP,
                source="groups.resolution",
                missing_ids=missing,
            ))

        resolved: List[ResolvedGroup] = []
        for request in requests:
            group = arena.groups.get(request.group_id)
            if group is None:
                return Result.failure(internal_error(
                    "Internal error: Group mapping failed. This should not happen.",
                    ErrorCode.INT_GROUP_MAPPING,
                    source="groups.resolution",
                    group_id=request.group_id,
                ))
            bucket = arena.items.get(group.id, _ItemBuckets([], [], []))
            resolved.append(ResolvedGroup(
                tension_level=request.tension_level,
                level=request.level,
                group=group,
                materials=tuple(bucket.materials),
                cable_connectors=tuple(bucket.cable_connectors),
                pole_screws=tuple(bucket.pole_screws),
            ))

        logger.debug(f"Resolved {len(resolved)} group request(s) over {len(group_ids)} group(s)")
        return Result.success(resolved)

    @staticmethod
    def check_levels(requests: Sequence[GroupRequest], pole: UtilityPole) -> Result[None]:
        """Reject duplicated levels and levels the pole cannot hold."""
        seen = set()
        for request in requests:
            key = (request.tension_level, request.level)
            if key in seen:
                return Result.failure(conflict_error(
                    f"Duplicate {request.tension_level.value.lower()} tension group level "
                    f"{request.level} found",
                    ErrorCode.CF_GROUP_LEVEL,
                    source="groups.resolution",
                    tension_level=request.tension_level.value,
                    level=request.level,
                ))
            seen.add(key)

        for tension in TensionLevel:
            side = [request for request in requests if request.tension_level == tension]
            capacity = pole.levels_count(tension)
            if len(side) > capacity or any(not 1 <= r.level <= capacity for r in side):
                return Result.failure(invalid_request_error(
                    f"Utility pole does not support all {tension.value.lower()} voltage levels "
                    f"required by the groups",
                    ErrorCode.IR_POLE_CAPACITY,
                    source="groups.resolution",
                    tension_level=tension.value,
                    levels_count=capacity,
                    requested_levels=[r.level for r in side],
                ))

        return Result.success(None)
