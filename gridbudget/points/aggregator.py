"""
points/aggregator.py - Point bill of materials assembly.

Combines every source of material for one point into a flat, ordered list
of ProjectMaterial records:

1. loose materials requested on the point
2. per resolved group, in request order: its loose materials, its pole
   screws (sized from the pole section), its cable connectors (sized from
   the point's cables on the group's tension side)
3. the utility pole, when newly acquired
4. each newly acquired cable, in slot order

Records are never merged: the same material coming from two groups gives
two records told apart by their group specs. The first failure aborts the
assembly and is returned unchanged.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

from ..catalog.enums import CatalogItemType
from ..catalog.matcher import CatalogMatcher, required_exit_section_mm
from ..catalog.models import CableConnector, PoleScrew
from ..catalog.section_length import SectionLengthModel
from ..errors import ErrorCode, Result, invalid_request_error
from ..groups.models import GroupCableConnectorItem
from ..groups.resolution import ResolvedGroup
from .models import ProjectMaterial, ResolvedCables, ResolvedMaterial, ResolvedPole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregationInput:
    """Resolved inputs for one point."""
    project_id: str
    point_id: str
    utility_pole: Optional[ResolvedPole]
    cables: ResolvedCables
    groups: Sequence[ResolvedGroup]
    loose_materials: Sequence[ResolvedMaterial]
    pole_screws: Sequence[PoleScrew]
    cable_connectors: Sequence[CableConnector]


class BOMAggregator:
    """
    Assembles a point's bill of materials.

    Usage:
        aggregator = BOMAggregator(SectionLengthModel(), CatalogMatcher())
        result = aggregator.assemble(inputs)
        if result.ok:
            records = result.value
    """

    def __init__(
        self,
        section_model: Optional[SectionLengthModel] = None,
        matcher: Optional[CatalogMatcher] = None,
    ):
        self.section_model = section_model or SectionLengthModel()
        self.matcher = matcher or CatalogMatcher()

    def assemble(self, inputs: AggregationInput) -> Result[List[ProjectMaterial]]:
        """
        Build the full record list for a point.

        Returns:
            Result with the records in composition order, or the first failure
        """
        records: List[ProjectMaterial] = []

        for loose in inputs.loose_materials:
            records.append(self._record(
                inputs, loose.material.id, CatalogItemType.MATERIAL, loose.quantity,
            ))

        for group in inputs.groups:
            for item in group.materials:
                records.append(self._record(
                    inputs, item.material_id, CatalogItemType.MATERIAL, item.quantity, group,
                ))

            screws = self._group_pole_screws(inputs, group)
            if not screws.ok:
                return screws
            records.extend(screws.value)

            connectors = self._group_cable_connectors(inputs, group)
            if not connectors.ok:
                return connectors
            records.extend(connectors.value)

        if inputs.utility_pole is not None and inputs.utility_pole.is_new:
            records.append(self._record(
                inputs, inputs.utility_pole.utility_pole.id, CatalogItemType.UTILITY_POLE, 1,
            ))

        for slot in inputs.cables.slots():
            if slot is not None and slot.is_new:
                records.append(self._record(
                    inputs, slot.cable.id, CatalogItemType.CABLE, 1,
                ))

        logger.debug(f"Assembled {len(records)} record(s) for point {inputs.point_id}")
        return Result.success(records)

    def _group_pole_screws(
        self,
        inputs: AggregationInput,
        group: ResolvedGroup,
    ) -> Result[List[ProjectMaterial]]:
        """Size every pole screw item of a group from the pole section at its level."""
        records: List[ProjectMaterial] = []
        if not group.pole_screws:
            return Result.success(records)

        if inputs.utility_pole is None:
            return Result.failure(invalid_request_error(
                "Utility pole is required to calculate pole screws",
                ErrorCode.IR_POLE_REQUIRED,
                source="points.aggregator",
                group_id=group.group.id,
            ))

        section_mm = self.section_model.length_mm(
            inputs.utility_pole.utility_pole, group.tension_level, group.level,
        )
        for item in group.pole_screws:
            screw = self.matcher.match_pole_screw(section_mm, inputs.pole_screws)
            if not screw.ok:
                return Result.failure(screw.error)
            records.append(self._record(
                inputs, screw.value.id, CatalogItemType.POLE_SCREW, item.quantity, group,
            ))
        return Result.success(records)

    def _group_cable_connectors(
        self,
        inputs: AggregationInput,
        group: ResolvedGroup,
    ) -> Result[List[ProjectMaterial]]:
        """Size every cable connector item of a group from the point's cables."""
        records: List[ProjectMaterial] = []
        for item in group.cable_connectors:
            entrance_exit = self._connector_sections(inputs.cables, group, item)
            if not entrance_exit.ok:
                return Result.failure(entrance_exit.error)
            entrance_mm, exit_mm = entrance_exit.value

            connector = self.matcher.match_cable_connector(entrance_mm, exit_mm, inputs.cable_connectors)
            if not connector.ok:
                return Result.failure(connector.error)
            records.append(self._record(
                inputs, connector.value.id, CatalogItemType.CABLE_CONNECTOR, item.quantity, group,
            ))
        return Result.success(records)

    @staticmethod
    def _connector_sections(
        cables: ResolvedCables,
        group: ResolvedGroup,
        item: GroupCableConnectorItem,
    ) -> Result[tuple]:
        """Entrance and exit section areas a connector item must accept."""
        pair = cables.for_tension(group.tension_level)
        if pair is None:
            return Result.failure(invalid_request_error(
                f"No cables available for tension level {group.tension_level.value} "
                f"to calculate cable connectors",
                ErrorCode.IR_MISSING_CABLES,
                source="points.aggregator",
                group_id=group.group.id,
                tension_level=group.tension_level.value,
            ))

        exit_cable_mm = pair.exit.cable.section_area_mm if pair.exit else None
        exit_mm = required_exit_section_mm(
            item.one_side_connector, item.local_cable_section_mm, exit_cable_mm,
        )
        if not exit_mm.ok:
            return Result.failure(exit_mm.error)
        return Result.success((pair.entrance.cable.section_area_mm, exit_mm.value))

    @staticmethod
    def _record(
        inputs: AggregationInput,
        item_id: str,
        item_type: CatalogItemType,
        quantity: float,
        group: Optional[ResolvedGroup] = None,
    ) -> ProjectMaterial:
        return ProjectMaterial(
            project_id=inputs.project_id,
            point_id=inputs.point_id,
            item_id=item_id,
            item_type=item_type,
            quantity=quantity,
            group_specs=group.specs if group is not None else None,
        )
