"""
points/models.py - Point requests, resolved inputs and BOM records.

Three families of records:

- requests: what the caller asks for (ids plus "newly acquired" flags)
- resolved inputs: the same selections with catalog entities looked up
- outputs: the Point itself and the ProjectMaterial records of its BOM
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..catalog.enums import CatalogItemType, TensionLevel
from ..catalog.models import Cable, Material, UtilityPole, new_id
from ..groups.models import GroupSpecs
from ..groups.resolution import GroupRequest


# =============================================================================
# REQUESTS
# =============================================================================

@dataclass(frozen=True)
class PoleSelection:
    """Utility pole chosen for a point."""
    utility_pole_id: str
    is_new: bool = False


@dataclass(frozen=True)
class CableSelection:
    """Cable chosen for one slot of a point."""
    cable_id: str
    is_new: bool = False


@dataclass(frozen=True)
class TensionCables:
    """Entrance (mandatory) and exit (optional) cables on one tension side."""
    entrance: CableSelection
    exit: Optional[CableSelection] = None


@dataclass(frozen=True)
class PointCables:
    """Cables of a point, per tension side."""
    low: Optional[TensionCables] = None
    medium: Optional[TensionCables] = None

    def slots(self) -> List[Optional[CableSelection]]:
        """The four cable slots: low entrance, low exit, medium entrance, medium exit."""
        return [
            self.low.entrance if self.low else None,
            self.low.exit if self.low else None,
            self.medium.entrance if self.medium else None,
            self.medium.exit if self.medium else None,
        ]

    def cable_ids(self) -> List[str]:
        return [slot.cable_id for slot in self.slots() if slot is not None]


@dataclass(frozen=True)
class LooseMaterialRequest:
    """Material requested directly on the point, outside any group."""
    material_id: str
    quantity: float


@dataclass(frozen=True)
class PointRequest:
    """
    Everything needed to create a point and compute its BOM.

    A point with only ids (no groups, no loose materials, nothing new) is
    the plain case of the same request.
    """
    project_id: str
    name: str
    description: Optional[str] = None
    utility_pole: Optional[PoleSelection] = None
    cables: PointCables = field(default_factory=PointCables)
    groups: Tuple[GroupRequest, ...] = ()
    loose_materials: Tuple[LooseMaterialRequest, ...] = ()


# =============================================================================
# RESOLVED INPUTS
# =============================================================================

@dataclass(frozen=True)
class ResolvedPole:
    utility_pole: UtilityPole
    is_new: bool = False


@dataclass(frozen=True)
class ResolvedCable:
    cable: Cable
    is_new: bool = False


@dataclass(frozen=True)
class ResolvedTensionCables:
    entrance: ResolvedCable
    exit: Optional[ResolvedCable] = None


@dataclass(frozen=True)
class ResolvedCables:
    low: Optional[ResolvedTensionCables] = None
    medium: Optional[ResolvedTensionCables] = None

    def for_tension(self, tension: TensionLevel) -> Optional[ResolvedTensionCables]:
        if tension == TensionLevel.LOW:
            return self.low
        return self.medium

    def slots(self) -> List[Optional[ResolvedCable]]:
        """Same slot order as PointCables.slots()."""
        return [
            self.low.entrance if self.low else None,
            self.low.exit if self.low else None,
            self.medium.entrance if self.medium else None,
            self.medium.exit if self.medium else None,
        ]


@dataclass(frozen=True)
class ResolvedMaterial:
    material: Material
    quantity: float


# =============================================================================
# OUTPUTS
# =============================================================================

@dataclass(frozen=True)
class Point:
    """Physical location in a project."""
    project_id: str
    name: str
    description: Optional[str] = None
    utility_pole_id: Optional[str] = None
    low_tension_entrance_cable_id: Optional[str] = None
    low_tension_exit_cable_id: Optional[str] = None
    medium_tension_entrance_cable_id: Optional[str] = None
    medium_tension_exit_cable_id: Optional[str] = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "utility_pole_id": self.utility_pole_id,
            "low_tension_entrance_cable_id": self.low_tension_entrance_cable_id,
            "low_tension_exit_cable_id": self.low_tension_exit_cable_id,
            "medium_tension_entrance_cable_id": self.medium_tension_entrance_cable_id,
            "medium_tension_exit_cable_id": self.medium_tension_exit_cable_id,
        }


@dataclass(frozen=True)
class ProjectMaterial:
    """One line of a point's bill of materials."""
    project_id: str
    point_id: str
    item_id: str
    item_type: CatalogItemType
    quantity: float
    group_specs: Optional[GroupSpecs] = None
    id: str = field(default_factory=new_id)

    @property
    def signature(self) -> Tuple[Any, ...]:
        """Content of the record without its own id."""
        return (self.project_id, self.point_id, self.item_id, self.item_type,
                self.quantity, self.group_specs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "point_id": self.point_id,
            "item_id": self.item_id,
            "item_type": self.item_type.value,
            "quantity": self.quantity,
            "group_specs": self.group_specs.to_dict() if self.group_specs else None,
        }


@dataclass
class PointBOM:
    """A point and its computed bill of materials."""
    point: Point
    materials: List[ProjectMaterial] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.materials)

    def count_by_type(self) -> Dict[str, int]:
        """Number of records per item type."""
        counts = Counter(record.item_type.value for record in self.materials)
        return dict(sorted(counts.items()))

    def signature(self) -> Counter:
        """Record multiset, ignoring record ids and order."""
        return Counter(record.signature for record in self.materials)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point": self.point.to_dict(),
            "materials": [record.to_dict() for record in self.materials],
            "summary": {
                "item_count": self.item_count,
                "by_type": self.count_by_type(),
            },
        }
