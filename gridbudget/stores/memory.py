"""
stores/memory.py - In-memory store adapters.

Dict-backed implementations of the store interfaces, used by the CLI
(loaded from a JSON snapshot) and by the tests. Every store keeps a
counter of calls per method so callers can check how often a bulk lookup
or a persistence write happened.
"""

from __future__ import annotations
from collections import Counter
from threading import Lock
from typing import Dict, Iterable, List, Optional, Sequence

from ..catalog.models import Cable, CableConnector, Material, PoleScrew, UtilityPole
from ..groups.models import Group, GroupItem
from ..points.models import Point, ProjectMaterial
from .base import CatalogStore, GroupStore, MaterialSink, ProjectStore


class _CallCounter:
    def __init__(self):
        self.calls: Counter = Counter()
        self._lock = Lock()

    def _count(self, method: str) -> None:
        with self._lock:
            self.calls[method] += 1


class InMemoryCatalogStore(_CallCounter, CatalogStore):
    """Catalog kept in dicts keyed by id."""

    def __init__(
        self,
        materials: Iterable[Material] = (),
        cables: Iterable[Cable] = (),
        utility_poles: Iterable[UtilityPole] = (),
        pole_screws: Iterable[PoleScrew] = (),
        cable_connectors: Iterable[CableConnector] = (),
    ):
        super().__init__()
        self.materials: Dict[str, Material] = {m.id: m for m in materials}
        self.cables: Dict[str, Cable] = {c.id: c for c in cables}
        self.utility_poles: Dict[str, UtilityPole] = {p.id: p for p in utility_poles}
        self.pole_screws: Dict[str, PoleScrew] = {s.id: s for s in pole_screws}
        self.cable_connectors: Dict[str, CableConnector] = {c.id: c for c in cable_connectors}

    def find_utility_pole_by_id(self, pole_id: str) -> Optional[UtilityPole]:
        self._count("find_utility_pole_by_id")
        return self.utility_poles.get(pole_id)

    def find_utility_poles_by_ids(self, ids: Sequence[str]) -> List[UtilityPole]:
        self._count("find_utility_poles_by_ids")
        return [self.utility_poles[i] for i in dict.fromkeys(ids) if i in self.utility_poles]

    def find_utility_pole_by_code(self, code: int) -> Optional[UtilityPole]:
        self._count("find_utility_pole_by_code")
        return next((p for p in self.utility_poles.values() if p.code == code), None)

    def save_utility_poles(self, poles: Sequence[UtilityPole]) -> None:
        self._count("save_utility_poles")
        for pole in poles:
            self.utility_poles[pole.id] = pole

    def find_cables_by_ids(self, ids: Sequence[str]) -> List[Cable]:
        self._count("find_cables_by_ids")
        return [self.cables[i] for i in dict.fromkeys(ids) if i in self.cables]

    def find_materials_by_ids(self, ids: Sequence[str]) -> List[Material]:
        self._count("find_materials_by_ids")
        return [self.materials[i] for i in dict.fromkeys(ids) if i in self.materials]

    def list_pole_screws_ordered_by_length(self) -> List[PoleScrew]:
        self._count("list_pole_screws_ordered_by_length")
        return sorted(self.pole_screws.values(), key=lambda s: (s.length_mm, s.code))

    def list_pole_screw_codes(self) -> List[int]:
        self._count("list_pole_screw_codes")
        return [s.code for s in self.pole_screws.values()]

    def save_pole_screws(self, screws: Sequence[PoleScrew]) -> None:
        self._count("save_pole_screws")
        for screw in screws:
            self.pole_screws[screw.id] = screw

    def list_cable_connectors_ordered(self) -> List[CableConnector]:
        self._count("list_cable_connectors_ordered")
        return sorted(
            self.cable_connectors.values(),
            key=lambda c: (c.entrance_max_mm, c.exit_max_mm, c.code),
        )

    def list_cable_connector_codes(self) -> List[int]:
        self._count("list_cable_connector_codes")
        return [c.code for c in self.cable_connectors.values()]

    def save_cable_connectors(self, connectors: Sequence[CableConnector]) -> None:
        self._count("save_cable_connectors")
        for connector in connectors:
            self.cable_connectors[connector.id] = connector


class InMemoryGroupStore(_CallCounter, GroupStore):
    """Groups and items kept in memory; items keep insertion order."""

    def __init__(self, groups: Iterable[Group] = (), items: Iterable[GroupItem] = ()):
        super().__init__()
        self.groups: Dict[str, Group] = {g.id: g for g in groups}
        self.items: List[GroupItem] = list(items)

    def find_groups_by_ids(self, ids: Sequence[str]) -> List[Group]:
        self._count("find_groups_by_ids")
        return [self.groups[i] for i in dict.fromkeys(ids) if i in self.groups]

    def find_group_items_by_group_ids(self, group_ids: Sequence[str]) -> List[GroupItem]:
        self._count("find_group_items_by_group_ids")
        wanted = set(group_ids)
        return [item for item in self.items if item.group_id in wanted]


class InMemoryProjectStore(_CallCounter, ProjectStore):
    """Known project ids and the points registered in them."""

    def __init__(self, project_ids: Iterable[str] = (), points: Iterable[Point] = ()):
        super().__init__()
        self.project_ids = set(project_ids)
        self.points: Dict[str, Point] = {p.id: p for p in points}

    def project_exists(self, project_id: str) -> bool:
        self._count("project_exists")
        return project_id in self.project_ids

    def point_name_exists_in_project(self, project_id: str, name: str) -> bool:
        self._count("point_name_exists_in_project")
        return name in self.list_point_names_in_project(project_id)

    def list_point_names_in_project(self, project_id: str) -> List[str]:
        return [p.name for p in self.points.values() if p.project_id == project_id]

    def save_points(self, points: Sequence[Point]) -> None:
        self._count("save_points")
        for point in points:
            self.points[point.id] = point


class InMemoryMaterialSink(_CallCounter, MaterialSink):
    """Collects persisted batches."""

    def __init__(self):
        super().__init__()
        self.batches: List[List[ProjectMaterial]] = []

    @property
    def records(self) -> List[ProjectMaterial]:
        return [record for batch in self.batches for record in batch]

    def persist_project_materials(self, records: Sequence[ProjectMaterial]) -> None:
        self._count("persist_project_materials")
        self.batches.append(list(records))
