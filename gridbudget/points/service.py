"""
points/service.py - Point creation pipeline.

Straight-line pipeline for one point:

    VALIDATE   project exists, point name free
    RESOLVE    utility pole, groups, cables, loose materials (one bulk
               lookup per kind, shared by every point of a batch)
    CALCULATE  pole screw / cable connector catalogs, BOM aggregation
    ASSEMBLED  point registered and records persisted once

Every step returns a Result; the first failure is returned unchanged and
nothing is persisted.
"""

from __future__ import annotations
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple
import logging

from ..bootstrap.config import EngineConfig
from ..catalog.enums import TensionLevel
from ..catalog.lookup import index_by_id, missing_ids, unique_ids
from ..catalog.models import Cable, CableConnector, Material, PoleScrew, UtilityPole
from ..catalog.section_length import SectionLengthModel
from ..errors import (
    BudgetError,
    ErrorCode,
    Result,
    conflict_error,
    invalid_request_error,
    not_found_error,
)
from ..groups.resolution import GroupArena, GroupResolver, ResolvedGroup
from .aggregator import AggregationInput, BOMAggregator
from .enums import PipelineStage
from .models import (
    CableSelection,
    Point,
    PointBOM,
    PointRequest,
    ProjectMaterial,
    ResolvedCable,
    ResolvedCables,
    ResolvedMaterial,
    ResolvedPole,
    ResolvedTensionCables,
    TensionCables,
)

if TYPE_CHECKING:
    from ..stores.base import CatalogStore, GroupStore, MaterialSink, ProjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Read-only candidate lists for the matcher."""
    pole_screws: Tuple[PoleScrew, ...] = ()
    cable_connectors: Tuple[CableConnector, ...] = ()


@dataclass(frozen=True)
class _Arenas:
    """Entities referenced by a set of requests, fetched once per kind."""
    utility_poles: Dict[str, UtilityPole]
    cables: Dict[str, Cable]
    materials: Dict[str, Material]
    groups: GroupArena


@dataclass(frozen=True)
class _ResolvedInputs:
    utility_pole: Optional[ResolvedPole]
    groups: List[ResolvedGroup]
    cables: ResolvedCables
    loose_materials: List[ResolvedMaterial]


class PointBudgetService:
    """
    Creates points and computes their bill of materials.

    Usage:
        service = PointBudgetService(catalog, groups, projects, sink)
        result = service.create_point(request)
        if result.ok:
            bom = result.value
    """

    def __init__(
        self,
        catalog: "CatalogStore",
        groups: "GroupStore",
        projects: "ProjectStore",
        sink: "MaterialSink",
        config: Optional[EngineConfig] = None,
    ):
        self.catalog = catalog
        self.groups = groups
        self.projects = projects
        self.sink = sink
        self.config = config or EngineConfig()

        strong_side = self.config.strong_side_tension
        self.section_model = SectionLengthModel(
            TensionLevel.parse(strong_side) if strong_side else None
        )
        self.resolver = GroupResolver(groups)
        self.aggregator = BOMAggregator(self.section_model)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def create_point(self, request: PointRequest) -> Result[PointBOM]:
        """Compute a point's BOM, then register the point and persist its records."""
        computed = self.compute_point_bom(request)
        if not computed.ok:
            return computed

        bom = computed.value
        self.projects.save_points([bom.point])
        self.sink.persist_project_materials(list(bom.materials))
        logger.info(
            f"Point '{bom.point.name}' created in project {bom.point.project_id} "
            f"with {bom.item_count} material record(s)"
        )
        return computed

    def compute_point_bom(
        self,
        request: PointRequest,
        point_id: Optional[str] = None,
    ) -> Result[PointBOM]:
        """
        Run the pipeline without persisting anything.

        Args:
            request: Point to compute
            point_id: Id for the new point; a fresh id when omitted

        Returns:
            Result with the point and its records in composition order
        """
        validated = self._validate(request)
        if not validated.ok:
            return self._fail(PipelineStage.VALIDATE, request, validated)
        return self._compute(request, point_id)

    def create_points(self, requests: Sequence[PointRequest]) -> Result[List[PointBOM]]:
        """
        Create several points of one project, all or nothing.

        Points are registered and every record persisted in a single sink
        call, only after every point computed successfully.
        """
        if not requests:
            return Result.success([])

        project_ids = unique_ids(request.project_id for request in requests)
        if len(project_ids) > 1:
            return Result.failure(invalid_request_error(
                "All points must belong to the same project",
                ErrorCode.IR_MIXED_PROJECTS,
                source="points.service",
                project_ids=project_ids,
            ))
        project_id = project_ids[0]

        if not self.projects.project_exists(project_id):
            return Result.failure(self._project_not_found(project_id))

        names = [request.name for request in requests]
        repeated = sorted(name for name, count in Counter(names).items() if count > 1)
        if repeated:
            return Result.failure(conflict_error(
                f"Duplicate point names in request: {', '.join(repeated)}",
                ErrorCode.CF_POINT_NAME,
                source="points.service",
                names=repeated,
            ))

        existing = set(self.projects.list_point_names_in_project(project_id))
        taken = [name for name in names if name in existing]
        if taken:
            return Result.failure(conflict_error(
                f"Point names already registered in this project: {', '.join(taken)}",
                ErrorCode.CF_POINT_NAME,
                source="points.service",
                names=taken,
            ))

        arenas = self._fetch_arenas(requests)
        catalogs = CatalogSnapshot()
        if any(request.groups for request in requests):
            catalogs = self.fetch_catalogs()

        boms: List[PointBOM] = []
        for request in requests:
            computed = self._compute(request, arenas=arenas, catalogs=catalogs)
            if not computed.ok:
                return Result.failure(computed.error)
            boms.append(computed.value)

        records: List[ProjectMaterial] = [record for bom in boms for record in bom.materials]
        self.projects.save_points([bom.point for bom in boms])
        self.sink.persist_project_materials(records)
        logger.info(
            f"{len(boms)} point(s) created in project {project_id} "
            f"with {len(records)} material record(s)"
        )
        return Result.success(boms)

    def fetch_catalogs(self) -> CatalogSnapshot:
        """List pole screws and cable connectors, concurrently when enabled."""
        if not self.config.parallel_catalog_fetch:
            return CatalogSnapshot(
                pole_screws=tuple(self.catalog.list_pole_screws_ordered_by_length()),
                cable_connectors=tuple(self.catalog.list_cable_connectors_ordered()),
            )

        with ThreadPoolExecutor(
            max_workers=self.config.catalog_fetch_workers,
            thread_name_prefix="catalog-fetch",
        ) as executor:
            screws = executor.submit(self.catalog.list_pole_screws_ordered_by_length)
            connectors = executor.submit(self.catalog.list_cable_connectors_ordered)
            return CatalogSnapshot(
                pole_screws=tuple(screws.result()),
                cable_connectors=tuple(connectors.result()),
            )

    # =========================================================================
    # PIPELINE STEPS
    # =========================================================================

    def _compute(
        self,
        request: PointRequest,
        point_id: Optional[str] = None,
        arenas: Optional[_Arenas] = None,
        catalogs: Optional[CatalogSnapshot] = None,
    ) -> Result[PointBOM]:
        self._enter(PipelineStage.RESOLVE, request)
        if arenas is None:
            arenas = self._fetch_arenas([request])
        resolved = self._resolve(request, arenas)
        if not resolved.ok:
            return self._fail(PipelineStage.RESOLVE, request, resolved)
        inputs = resolved.value

        self._enter(PipelineStage.CALCULATE, request)
        if catalogs is None:
            catalogs = self.fetch_catalogs() if inputs.groups else CatalogSnapshot()

        point = self._build_point(request, point_id)
        assembled = self.aggregator.assemble(AggregationInput(
            project_id=request.project_id,
            point_id=point.id,
            utility_pole=inputs.utility_pole,
            cables=inputs.cables,
            groups=inputs.groups,
            loose_materials=inputs.loose_materials,
            pole_screws=catalogs.pole_screws,
            cable_connectors=catalogs.cable_connectors,
        ))
        if not assembled.ok:
            return self._fail(PipelineStage.CALCULATE, request, assembled)

        self._enter(PipelineStage.ASSEMBLED, request)
        return Result.success(PointBOM(point=point, materials=assembled.value))

    def _validate(self, request: PointRequest) -> Result[None]:
        self._enter(PipelineStage.VALIDATE, request)
        if not self.projects.project_exists(request.project_id):
            return Result.failure(self._project_not_found(request.project_id))

        if self.projects.point_name_exists_in_project(request.project_id, request.name):
            return Result.failure(conflict_error(
                "Point name already registered in this project",
                ErrorCode.CF_POINT_NAME,
                source="points.service",
                project_id=request.project_id,
                name=request.name,
            ))
        return Result.success(None)

    def _fetch_arenas(self, requests: Sequence[PointRequest]) -> _Arenas:
        """One bulk lookup per entity kind for every id the requests reference."""
        pole_ids = unique_ids(
            request.utility_pole.utility_pole_id
            for request in requests if request.utility_pole is not None
        )
        cable_ids = unique_ids(
            cable_id for request in requests for cable_id in request.cables.cable_ids()
        )
        material_ids = unique_ids(
            loose.material_id for request in requests for loose in request.loose_materials
        )
        group_ids = unique_ids(
            group.group_id
            for request in requests if request.utility_pole is not None
            for group in request.groups
        )

        arenas = _Arenas(
            utility_poles=index_by_id(self.catalog.find_utility_poles_by_ids(pole_ids)) if pole_ids else {},
            cables=index_by_id(self.catalog.find_cables_by_ids(cable_ids)) if cable_ids else {},
            materials=index_by_id(self.catalog.find_materials_by_ids(material_ids)) if material_ids else {},
            groups=self.resolver.fetch(group_ids),
        )
        logger.debug(
            f"Fetched {len(arenas.utility_poles)} pole(s), {len(arenas.cables)} cable(s), "
            f"{len(arenas.materials)} material(s), {len(arenas.groups.groups)} group(s) "
            f"for {len(requests)} point(s)"
        )
        return arenas

    def _resolve(self, request: PointRequest, arenas: _Arenas) -> Result[_ResolvedInputs]:
        pole: Optional[ResolvedPole] = None
        if request.utility_pole is not None:
            utility_pole = arenas.utility_poles.get(request.utility_pole.utility_pole_id)
            if utility_pole is None:
                return Result.failure(not_found_error(
                    "Utility pole does not exist",
                    ErrorCode.NF_UTILITY_POLE,
                    source="points.service",
                    missing_ids=[request.utility_pole.utility_pole_id],
                ))
            pole = ResolvedPole(utility_pole, request.utility_pole.is_new)

        groups: List[ResolvedGroup] = []
        if request.groups:
            if pole is None:
                return Result.failure(invalid_request_error(
                    "Utility pole is required to attach groups",
                    ErrorCode.IR_POLE_REQUIRED,
                    source="points.service",
                ))
            resolved_groups = self.resolver.resolve(request.groups, pole.utility_pole, arenas.groups)
            if not resolved_groups.ok:
                return Result.failure(resolved_groups.error)
            groups = resolved_groups.value

        cables = self._resolve_cables(request, arenas.cables)
        if not cables.ok:
            return Result.failure(cables.error)

        materials = self._resolve_materials(request, arenas.materials)
        if not materials.ok:
            return Result.failure(materials.error)

        return Result.success(_ResolvedInputs(
            utility_pole=pole,
            groups=groups,
            cables=cables.value,
            loose_materials=materials.value,
        ))

    def _resolve_cables(self, request: PointRequest, arena: Dict[str, Cable]) -> Result[ResolvedCables]:
        cable_ids = unique_ids(request.cables.cable_ids())
        if not cable_ids:
            return Result.success(ResolvedCables())

        missing = missing_ids(cable_ids, arena)
        if missing:
            return Result.failure(not_found_error(
                f"Cables not found: {', '.join(missing)}",
                ErrorCode.NF_CABLE,
                source="points.service",
                missing_ids=missing,
            ))
        logger.debug(f"Resolved {len(cable_ids)} cable(s) for point '{request.name}'")

        def pair(side: Optional[TensionCables]) -> Optional[ResolvedTensionCables]:
            if side is None:
                return None
            return ResolvedTensionCables(
                entrance=_resolved_cable(side.entrance, arena),
                exit=_resolved_cable(side.exit, arena) if side.exit else None,
            )

        return Result.success(ResolvedCables(
            low=pair(request.cables.low),
            medium=pair(request.cables.medium),
        ))

    def _resolve_materials(
        self,
        request: PointRequest,
        arena: Dict[str, Material],
    ) -> Result[List[ResolvedMaterial]]:
        if not request.loose_materials:
            return Result.success([])

        for loose in request.loose_materials:
            if loose.quantity <= 0:
                return Result.failure(invalid_request_error(
                    f"Material quantity must be greater than zero: {loose.material_id}",
                    ErrorCode.IR_QUANTITY,
                    source="points.service",
                    material_id=loose.material_id,
                    quantity=loose.quantity,
                ))

        material_ids = unique_ids(loose.material_id for loose in request.loose_materials)
        missing = missing_ids(material_ids, arena)
        if missing:
            return Result.failure(not_found_error(
                f"Materials not found: {', '.join(missing)}",
                ErrorCode.NF_MATERIAL,
                source="points.service",
                missing_ids=missing,
            ))

        return Result.success([
            ResolvedMaterial(arena[loose.material_id], loose.quantity)
            for loose in request.loose_materials
        ])

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _build_point(request: PointRequest, point_id: Optional[str]) -> Point:
        slots = [slot.cable_id if slot else None for slot in request.cables.slots()]
        fields = dict(
            project_id=request.project_id,
            name=request.name,
            description=request.description,
            utility_pole_id=request.utility_pole.utility_pole_id if request.utility_pole else None,
            low_tension_entrance_cable_id=slots[0],
            low_tension_exit_cable_id=slots[1],
            medium_tension_entrance_cable_id=slots[2],
            medium_tension_exit_cable_id=slots[3],
        )
        if point_id is not None:
            fields["id"] = point_id
        return Point(**fields)

    @staticmethod
    def _project_not_found(project_id: str) -> BudgetError:
        return not_found_error(
            "Project does not exist",
            ErrorCode.NF_PROJECT,
            source="points.service",
            missing_ids=[project_id],
        )

    @staticmethod
    def _enter(stage: PipelineStage, request: PointRequest) -> None:
        logger.debug(f"Point '{request.name}': {stage.value}")

    @staticmethod
    def _fail(stage: PipelineStage, request: PointRequest, result: Result) -> Result:
        logger.warning(
            f"Point '{request.name}' {PipelineStage.FAILED.value} at {stage.value}: {result.error}"
        )
        return Result.failure(result.error)


def _resolved_cable(selection: CableSelection, arena: dict) -> ResolvedCable:
    cable: Cable = arena[selection.cable_id]
    return ResolvedCable(cable, selection.is_new)
