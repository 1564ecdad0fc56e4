"""
points/ - Point requests, BOM aggregation and the point creation pipeline.
"""

from .enums import (
    PipelineStage,
)

from .models import (
    PoleSelection,
    CableSelection,
    TensionCables,
    PointCables,
    LooseMaterialRequest,
    PointRequest,
    ResolvedPole,
    ResolvedCable,
    ResolvedTensionCables,
    ResolvedCables,
    ResolvedMaterial,
    Point,
    ProjectMaterial,
    PointBOM,
)

from .aggregator import (
    AggregationInput,
    BOMAggregator,
)

from .service import (
    CatalogSnapshot,
    PointBudgetService,
)

__all__ = [
    # Enums
    "PipelineStage",
    # Requests
    "PoleSelection",
    "CableSelection",
    "TensionCables",
    "PointCables",
    "LooseMaterialRequest",
    "PointRequest",
    # Resolved inputs
    "ResolvedPole",
    "ResolvedCable",
    "ResolvedTensionCables",
    "ResolvedCables",
    "ResolvedMaterial",
    # Outputs
    "Point",
    "ProjectMaterial",
    "PointBOM",
    # Pipeline
    "AggregationInput",
    "BOMAggregator",
    "CatalogSnapshot",
    "PointBudgetService",
]
