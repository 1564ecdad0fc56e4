"""
catalog/enums.py - Catalog enumerations.
"""

from enum import Enum


class TensionLevel(Enum):
    """Voltage classification of a pole section, cable or group."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"

    @classmethod
    def parse(cls, value: "str | TensionLevel") -> "TensionLevel":
        """Accept an enum member or its name in any case."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


class CatalogItemType(Enum):
    """Kind of catalog item referenced by a project material record."""
    MATERIAL = "material"
    CABLE = "cable"
    UTILITY_POLE = "utilityPole"
    POLE_SCREW = "poleScrew"
    CABLE_CONNECTOR = "cableConnector"
