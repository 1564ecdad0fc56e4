"""
stores/ - Store interfaces, in-memory adapters and JSON snapshot loading.
"""

from .base import (
    CatalogStore,
    GroupStore,
    ProjectStore,
    MaterialSink,
)

from .memory import (
    InMemoryCatalogStore,
    InMemoryGroupStore,
    InMemoryProjectStore,
    InMemoryMaterialSink,
)

from .snapshot import (
    CatalogFileSchema,
    PointRequestSchema,
    LoadedStores,
    load_catalog_snapshot,
    load_point_request,
)

__all__ = [
    # Interfaces
    "CatalogStore",
    "GroupStore",
    "ProjectStore",
    "MaterialSink",
    # In-memory adapters
    "InMemoryCatalogStore",
    "InMemoryGroupStore",
    "InMemoryProjectStore",
    "InMemoryMaterialSink",
    # Snapshots
    "CatalogFileSchema",
    "PointRequestSchema",
    "LoadedStores",
    "load_catalog_snapshot",
    "load_point_request",
]
