"""
stores/snapshot.py - JSON catalog snapshots and point requests.

Pydantic schemas for the two JSON documents the command line reads:

- a catalog file: projects, catalog entries, groups with their items and
  already registered points, loaded into the in-memory stores
- a point request, converted into a PointRequest
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Union
import logging

from pydantic import BaseModel, BeforeValidator, Field

from ..catalog.enums import TensionLevel
from ..catalog.models import Cable, CableConnector, Material, PoleScrew, UtilityPole, new_id
from ..groups.models import (
    Group,
    GroupCableConnectorItem,
    GroupItem,
    GroupMaterialItem,
    GroupPoleScrewItem,
)
from ..groups.resolution import GroupRequest
from ..points.models import (
    CableSelection,
    LooseMaterialRequest,
    Point,
    PointCables,
    PointRequest,
    PoleSelection,
    TensionCables,
)
from .memory import InMemoryCatalogStore, InMemoryGroupStore, InMemoryProjectStore

logger = logging.getLogger(__name__)


# Tension levels are accepted in any case
Tension = Annotated[TensionLevel, BeforeValidator(TensionLevel.parse)]


# =============================================================================
# Catalog Schemas
# =============================================================================


class MaterialSchema(BaseModel):
    id: str = Field(default_factory=new_id)
    code: int
    description: str
    unit: str = "UN"

    def to_model(self) -> Material:
        return Material(code=self.code, description=self.description, unit=self.unit, id=self.id)


class CableSchema(BaseModel):
    id: str = Field(default_factory=new_id)
    code: int
    description: str
    section_area_mm: float = Field(..., ge=0, description="Cable section area in mm2")
    tension: Tension

    def to_model(self) -> Cable:
        return Cable(
            code=self.code,
            description=self.description,
            section_area_mm=self.section_area_mm,
            tension=self.tension,
            id=self.id,
        )


class UtilityPoleSchema(BaseModel):
    id: str = Field(default_factory=new_id)
    code: int
    description: str
    strong_side_section_multiplier: float = Field(default=1.0, ge=0)
    medium_voltage_levels_count: int = Field(default=0, ge=0)
    medium_voltage_start_section_length_cm: float = Field(default=0.0, ge=0)
    medium_voltage_section_length_add_by_level_cm: float = Field(default=0.0, ge=0)
    low_voltage_levels_count: int = Field(default=0, ge=0)
    low_voltage_start_section_length_cm: float = Field(default=0.0, ge=0)
    low_voltage_section_length_add_by_level_cm: float = Field(default=0.0, ge=0)

    def to_model(self) -> UtilityPole:
        return UtilityPole(**self.model_dump())


class PoleScrewSchema(BaseModel):
    id: str = Field(default_factory=new_id)
    code: int
    description: str
    length_mm: float = Field(..., gt=0, description="Screw length in mm")

    def to_model(self) -> PoleScrew:
        return PoleScrew(**self.model_dump())


class CableConnectorSchema(BaseModel):
    id: str = Field(default_factory=new_id)
    code: int
    description: str
    entrance_min_mm: float = Field(..., ge=0)
    entrance_max_mm: float = Field(..., ge=0)
    exit_min_mm: float = Field(..., ge=0)
    exit_max_mm: float = Field(..., ge=0)

    def to_model(self) -> CableConnector:
        return CableConnector(**self.model_dump())


# =============================================================================
# Group Schemas
# =============================================================================


class MaterialItemSchema(BaseModel):
    role: Literal["material"]
    id: str = Field(default_factory=new_id)
    material_id: str
    quantity: float

    def to_model(self, group_id: str) -> GroupMaterialItem:
        return GroupMaterialItem(
            group_id=group_id, material_id=self.material_id, quantity=self.quantity, id=self.id,
        )


class CableConnectorItemSchema(BaseModel):
    role: Literal["cableConnector"]
    id: str = Field(default_factory=new_id)
    quantity: float
    local_cable_section_mm: Optional[float] = None
    one_side_connector: bool = False

    def to_model(self, group_id: str) -> GroupCableConnectorItem:
        return GroupCableConnectorItem(
            group_id=group_id,
            quantity=self.quantity,
            local_cable_section_mm=self.local_cable_section_mm,
            one_side_connector=self.one_side_connector,
            id=self.id,
        )


class PoleScrewItemSchema(BaseModel):
    role: Literal["poleScrew"]
    id: str = Field(default_factory=new_id)
    quantity: float
    length_add_mm: float = 0.0

    def to_model(self, group_id: str) -> GroupPoleScrewItem:
        return GroupPoleScrewItem(
            group_id=group_id, quantity=self.quantity, length_add_mm=self.length_add_mm, id=self.id,
        )


GroupItemSchema = Annotated[
    Union[MaterialItemSchema, CableConnectorItemSchema, PoleScrewItemSchema],
    Field(discriminator="role"),
]


class GroupSchema(BaseModel):
    id: str = Field(default_factory=new_id)
    description: str
    tension: Tension
    items: List[GroupItemSchema] = Field(default_factory=list)

    def to_model(self) -> Group:
        return Group(description=self.description, tension=self.tension, id=self.id)

    def item_models(self) -> List[GroupItem]:
        return [item.to_model(self.id) for item in self.items]


class PointSchema(BaseModel):
    """A point already registered in a project."""
    id: str = Field(default_factory=new_id)
    project_id: str
    name: str
    description: Optional[str] = None

    def to_model(self) -> Point:
        return Point(
            project_id=self.project_id, name=self.name, description=self.description, id=self.id,
        )


class CatalogFileSchema(BaseModel):
    """Whole catalog file."""

    projects: List[str] = Field(default_factory=list, description="Known project ids")
    materials: List[MaterialSchema] = Field(default_factory=list)
    cables: List[CableSchema] = Field(default_factory=list)
    utility_poles: List[UtilityPoleSchema] = Field(default_factory=list)
    pole_screws: List[PoleScrewSchema] = Field(default_factory=list)
    cable_connectors: List[CableConnectorSchema] = Field(default_factory=list)
    groups: List[GroupSchema] = Field(default_factory=list)
    points: List[PointSchema] = Field(default_factory=list)

    def build_stores(self) -> "LoadedStores":
        """Populate fresh in-memory stores with this catalog."""
        catalog = InMemoryCatalogStore(
            materials=[m.to_model() for m in self.materials],
            cables=[c.to_model() for c in self.cables],
            utility_poles=[p.to_model() for p in self.utility_poles],
            pole_screws=[s.to_model() for s in self.pole_screws],
            cable_connectors=[c.to_model() for c in self.cable_connectors],
        )
        groups = InMemoryGroupStore(
            groups=[g.to_model() for g in self.groups],
            items=[item for g in self.groups for item in g.item_models()],
        )
        projects = InMemoryProjectStore(
            project_ids=self.projects,
            points=[p.to_model() for p in self.points],
        )
        return LoadedStores(catalog=catalog, groups=groups, projects=projects)


@dataclass
class LoadedStores:
    catalog: InMemoryCatalogStore
    groups: InMemoryGroupStore
    projects: InMemoryProjectStore


# =============================================================================
# Point Request Schemas
# =============================================================================


class CableSelectionSchema(BaseModel):
    cable_id: str
    is_new: bool = False

    def to_model(self) -> CableSelection:
        return CableSelection(cable_id=self.cable_id, is_new=self.is_new)


class TensionCablesSchema(BaseModel):
    entrance: CableSelectionSchema
    exit: Optional[CableSelectionSchema] = None

    def to_model(self) -> TensionCables:
        return TensionCables(
            entrance=self.entrance.to_model(),
            exit=self.exit.to_model() if self.exit else None,
        )


class PointCablesSchema(BaseModel):
    low: Optional[TensionCablesSchema] = None
    medium: Optional[TensionCablesSchema] = None

    def to_model(self) -> PointCables:
        return PointCables(
            low=self.low.to_model() if self.low else None,
            medium=self.medium.to_model() if self.medium else None,
        )


class PoleSelectionSchema(BaseModel):
    utility_pole_id: str
    is_new: bool = False


class GroupRequestSchema(BaseModel):
    tension_level: Tension
    level: int
    group_id: str


class LooseMaterialSchema(BaseModel):
    material_id: str
    quantity: float


class PointRequestSchema(BaseModel):
    """Point request document."""

    project_id: str
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    utility_pole: Optional[PoleSelectionSchema] = None
    cables: PointCablesSchema = Field(default_factory=PointCablesSchema)
    groups: List[GroupRequestSchema] = Field(default_factory=list)
    loose_materials: List[LooseMaterialSchema] = Field(default_factory=list)

    def to_request(self) -> PointRequest:
        return PointRequest(
            project_id=self.project_id,
            name=self.name,
            description=self.description,
            utility_pole=PoleSelection(
                utility_pole_id=self.utility_pole.utility_pole_id,
                is_new=self.utility_pole.is_new,
            ) if self.utility_pole else None,
            cables=self.cables.to_model(),
            groups=tuple(
                GroupRequest(tension_level=g.tension_level, level=g.level, group_id=g.group_id)
                for g in self.groups
            ),
            loose_materials=tuple(
                LooseMaterialRequest(material_id=m.material_id, quantity=m.quantity)
                for m in self.loose_materials
            ),
        )


# =============================================================================
# Loaders
# =============================================================================


def load_catalog_snapshot(filepath: str) -> LoadedStores:
    """
    Read a catalog file into in-memory stores.

    Raises:
        OSError: if the file cannot be read
        pydantic.ValidationError: if the document is malformed
    """
    snapshot = CatalogFileSchema.model_validate_json(Path(filepath).read_text())
    logger.info(
        f"Catalog loaded from {filepath}: {len(snapshot.utility_poles)} pole(s), "
        f"{len(snapshot.pole_screws)} screw(s), {len(snapshot.cable_connectors)} connector(s), "
        f"{len(snapshot.groups)} group(s)"
    )
    return snapshot.build_stores()


def load_point_request(filepath: str) -> PointRequest:
    """Read a point request file."""
    return PointRequestSchema.model_validate_json(Path(filepath).read_text()).to_request()
