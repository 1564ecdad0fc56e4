"""
stores/base.py - Store interfaces consumed by the budgeting engine.

The engine only talks to these abstract classes. Bulk lookups take a list
of ids and return whatever subset exists, in any order; callers detect
missing ids themselves.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..catalog.models import Cable, CableConnector, Material, PoleScrew, UtilityPole
from ..groups.models import Group, GroupItem
from ..points.models import Point, ProjectMaterial


class CatalogStore(ABC):
    """Catalog entries: materials, cables, utility poles, pole screws, cable connectors."""

    @abstractmethod
    def find_utility_pole_by_id(self, pole_id: str) -> Optional[UtilityPole]:
        pass

    @abstractmethod
    def find_utility_poles_by_ids(self, ids: Sequence[str]) -> List[UtilityPole]:
        pass

    @abstractmethod
    def find_utility_pole_by_code(self, code: int) -> Optional[UtilityPole]:
        pass

    @abstractmethod
    def save_utility_poles(self, poles: Sequence[UtilityPole]) -> None:
        """Insert or replace poles by id."""
        pass

    @abstractmethod
    def find_cables_by_ids(self, ids: Sequence[str]) -> List[Cable]:
        pass

    @abstractmethod
    def find_materials_by_ids(self, ids: Sequence[str]) -> List[Material]:
        pass

    @abstractmethod
    def list_pole_screws_ordered_by_length(self) -> List[PoleScrew]:
        """All pole screws, ascending by length_mm."""
        pass

    @abstractmethod
    def list_pole_screw_codes(self) -> List[int]:
        pass

    @abstractmethod
    def save_pole_screws(self, screws: Sequence[PoleScrew]) -> None:
        pass

    @abstractmethod
    def list_cable_connectors_ordered(self) -> List[CableConnector]:
        """All cable connectors in a deterministic order."""
        pass

    @abstractmethod
    def list_cable_connector_codes(self) -> List[int]:
        pass

    @abstractmethod
    def save_cable_connectors(self, connectors: Sequence[CableConnector]) -> None:
        pass


class GroupStore(ABC):
    """Group templates and their items."""

    @abstractmethod
    def find_groups_by_ids(self, ids: Sequence[str]) -> List[Group]:
        pass

    @abstractmethod
    def find_group_items_by_group_ids(self, group_ids: Sequence[str]) -> List[GroupItem]:
        pass


class ProjectStore(ABC):
    """Projects and their registered points."""

    @abstractmethod
    def project_exists(self, project_id: str) -> bool:
        pass

    @abstractmethod
    def point_name_exists_in_project(self, project_id: str, name: str) -> bool:
        pass

    @abstractmethod
    def list_point_names_in_project(self, project_id: str) -> List[str]:
        pass

    @abstractmethod
    def save_points(self, points: Sequence[Point]) -> None:
        pass


class MaterialSink(ABC):
    """Destination of computed BOM records."""

    @abstractmethod
    def persist_project_materials(self, records: Sequence[ProjectMaterial]) -> None:
        """Write a batch of records in one operation."""
        pass
