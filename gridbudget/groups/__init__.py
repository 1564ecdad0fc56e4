"""
groups/ - Hardware group templates and their resolution for a point.
"""

from .models import (
    GroupItemRole,
    Group,
    GroupMaterialItem,
    GroupCableConnectorItem,
    GroupPoleScrewItem,
    GroupItem,
    GroupSpecs,
)

from .resolution import (
    GroupRequest,
    ResolvedGroup,
    GroupArena,
    GroupResolver,
    partition_items,
)

__all__ = [
    # Models
    "GroupItemRole",
    "Group",
    "GroupMaterialItem",
    "GroupCableConnectorItem",
    "GroupPoleScrewItem",
    "GroupItem",
    "GroupSpecs",
    # Resolution
    "GroupRequest",
    "ResolvedGroup",
    "GroupArena",
    "GroupResolver",
    "partition_items",
]
