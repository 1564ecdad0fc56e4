"""
catalog/ - Catalog entries, section length model and best-fit matching.

Provides the immutable catalog records (materials, cables, utility poles,
pole screws, cable connectors), the pole section length model, the
catalog matcher and the catalog registration operations.
"""

from .enums import (
    TensionLevel,
    CatalogItemType,
)

from .models import (
    Material,
    Cable,
    UtilityPole,
    PoleScrew,
    CableConnector,
    new_id,
)

from .lookup import (
    unique_ids,
    index_by_id,
    missing_ids,
)

from .section_length import (
    MM_PER_CM,
    section_length_mm,
    SectionLengthModel,
)

from .matcher import (
    find_pole_screw,
    find_cable_connector,
    required_exit_section_mm,
    CatalogMatcher,
)

from .registration import (
    PoleScrewEntry,
    CableConnectorEntry,
    FailedEntry,
    BulkCreationReport,
    CatalogRegistry,
)

__all__ = [
    # Enums
    "TensionLevel",
    "CatalogItemType",
    # Models
    "Material",
    "Cable",
    "UtilityPole",
    "PoleScrew",
    "CableConnector",
    "new_id",
    # Lookup
    "unique_ids",
    "index_by_id",
    "missing_ids",
    # Section length
    "MM_PER_CM",
    "section_length_mm",
    "SectionLengthModel",
    # Matcher
    "find_pole_screw",
    "find_cable_connector",
    "required_exit_section_mm",
    "CatalogMatcher",
    # Registration
    "PoleScrewEntry",
    "CableConnectorEntry",
    "FailedEntry",
    "BulkCreationReport",
    "CatalogRegistry",
]
