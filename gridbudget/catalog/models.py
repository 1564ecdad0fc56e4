"""
catalog/models.py - Catalog data structures.

Catalog entries are shared, read-only references. They are frozen;
an edit builds a new record with dataclasses.replace().

Units: pole section dimensions are catalogued in centimeters, screw lengths
and cable section areas in millimeters (mm and mm2).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List
import uuid

from .enums import TensionLevel


def new_id() -> str:
    """Generate a new entity id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Material:
    """Loose material (anything bought by unit that needs no sizing)."""
    code: int
    description: str
    unit: str = "UN"
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class Cable:
    """Distribution cable."""
    code: int
    description: str
    section_area_mm: float
    tension: TensionLevel
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "section_area_mm": self.section_area_mm,
            "tension": self.tension.value,
        }


@dataclass(frozen=True)
class UtilityPole:
    """
    Utility pole with per-tension section geometry.

    Each tension side has a number of levels; the section at level 1 is
    `*_start_section_length_cm` long and every further level adds
    `*_section_length_add_by_level_cm`.
    """
    code: int
    description: str
    strong_side_section_multiplier: float = 1.0
    medium_voltage_levels_count: int = 0
    medium_voltage_start_section_length_cm: float = 0.0
    medium_voltage_section_length_add_by_level_cm: float = 0.0
    low_voltage_levels_count: int = 0
    low_voltage_start_section_length_cm: float = 0.0
    low_voltage_section_length_add_by_level_cm: float = 0.0
    id: str = field(default_factory=new_id)

    # Fields that must never be negative
    DIMENSION_FIELDS = (
        "strong_side_section_multiplier",
        "medium_voltage_levels_count",
        "medium_voltage_start_section_length_cm",
        "medium_voltage_section_length_add_by_level_cm",
        "low_voltage_levels_count",
        "low_voltage_start_section_length_cm",
        "low_voltage_section_length_add_by_level_cm",
    )

    def levels_count(self, tension: TensionLevel) -> int:
        if tension == TensionLevel.LOW:
            return self.low_voltage_levels_count
        return self.medium_voltage_levels_count

    def start_section_length_cm(self, tension: TensionLevel) -> float:
        if tension == TensionLevel.LOW:
            return self.low_voltage_start_section_length_cm
        return self.medium_voltage_start_section_length_cm

    def section_length_add_by_level_cm(self, tension: TensionLevel) -> float:
        if tension == TensionLevel.LOW:
            return self.low_voltage_section_length_add_by_level_cm
        return self.medium_voltage_section_length_add_by_level_cm

    def negative_fields(self) -> List[str]:
        """Names of dimension fields holding a negative value."""
        return [name for name in self.DIMENSION_FIELDS if getattr(self, name) < 0]

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id, "code": self.code, "description": self.description}
        for name in self.DIMENSION_FIELDS:
            data[name] = getattr(self, name)
        return data


@dataclass(frozen=True)
class PoleScrew:
    """Through-bolt used to fix hardware to a pole section."""
    code: int
    description: str
    length_mm: float
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "length_mm": self.length_mm,
        }


@dataclass(frozen=True)
class CableConnector:
    """
    Cable connector accepting a range of section areas on each side.

    Bounds are inclusive. A single-side connector has an exit range that
    contains 0.
    """
    code: int
    description: str
    entrance_min_mm: float
    entrance_max_mm: float
    exit_min_mm: float
    exit_max_mm: float
    id: str = field(default_factory=new_id)

    def accepts(self, entrance_mm: float, exit_mm: float) -> bool:
        """Check whether both section areas fall inside this connector's ranges."""
        return (
            self.entrance_min_mm <= entrance_mm <= self.entrance_max_mm
            and self.exit_min_mm <= exit_mm <= self.exit_max_mm
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "entrance_min_mm": self.entrance_min_mm,
            "entrance_max_mm": self.entrance_max_mm,
            "exit_min_mm": self.exit_min_mm,
            "exit_max_mm": self.exit_max_mm,
        }
