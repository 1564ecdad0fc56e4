"""
groups/models.py - Group templates and their items.

A group is a reusable bundle of hardware attached to one level of a pole.
Its items form a closed union of three roles; consumers dispatch on the
concrete type and treat anything else as a programming error.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..catalog.enums import TensionLevel
from ..catalog.models import new_id


class GroupItemRole(Enum):
    """Role of an item inside a group."""
    MATERIAL = "material"
    CABLE_CONNECTOR = "cableConnector"
    POLE_SCREW = "poleScrew"


@dataclass(frozen=True)
class Group:
    """Named hardware template."""
    description: str
    tension: TensionLevel
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class GroupMaterialItem:
    """Loose material contributed by a group."""
    group_id: str
    material_id: str
    quantity: float
    id: str = field(default_factory=new_id)

    @property
    def role(self) -> GroupItemRole:
        return GroupItemRole.MATERIAL


@dataclass(frozen=True)
class GroupCableConnectorItem:
    """
    Cable connector requirement, sized from the point's cables.

    local_cable_section_mm overrides the exit cable section; a one-side
    connector only needs the entrance cable.
    """
    group_id: str
    quantity: float
    local_cable_section_mm: Optional[float] = None
    one_side_connector: bool = False
    id: str = field(default_factory=new_id)

    @property
    def role(self) -> GroupItemRole:
        return GroupItemRole.CABLE_CONNECTOR


@dataclass(frozen=True)
class GroupPoleScrewItem:
    """Pole screw requirement, sized from the pole section at the group level."""
    group_id: str
    quantity: float
    length_add_mm: float = 0.0
    id: str = field(default_factory=new_id)

    @property
    def role(self) -> GroupItemRole:
        return GroupItemRole.POLE_SCREW


GroupItem = Union[GroupMaterialItem, GroupCableConnectorItem, GroupPoleScrewItem]


@dataclass(frozen=True)
class GroupSpecs:
    """Provenance of a project material that came from a group."""
    group_id: str
    level: int
    tension_level: TensionLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_id": self.group_id,
            "level": self.level,
            "tension_level": self.tension_level.value,
        }
