"""
catalog/matcher.py - Best-fit catalog search.

Two independent searches over read-only candidate lists supplied by the
catalog store:

- pole screws, sorted ascending by length: smallest screw at least as
  long as the required length (lower-bound binary search)
- cable connectors, in the store's deterministic order: first connector
  whose entrance and exit ranges contain the required section areas

The plain functions return None when nothing fits. CatalogMatcher turns
that into a NotFound failure carrying the required values.
"""

from __future__ import annotations
from bisect import bisect_left
from typing import Optional, Sequence
import logging

from ..errors import ErrorCode, Result, invalid_request_error, not_found_error
from .models import CableConnector, PoleScrew

logger = logging.getLogger(__name__)


def find_pole_screw(required_length_mm: float, screws: Sequence[PoleScrew]) -> Optional[PoleScrew]:
    """
    Find the shortest screw with length_mm >= required_length_mm.

    Args:
        required_length_mm: Minimum length the screw must reach
        screws: Candidates sorted ascending by length_mm

    Returns:
        Matching screw, or None if no screw is long enough
    """
    index = bisect_left(screws, required_length_mm, key=lambda screw: screw.length_mm)
    if index == len(screws):
        return None
    return screws[index]


def find_cable_connector(
    entrance_mm: float,
    exit_mm: float,
    connectors: Sequence[CableConnector],
) -> Optional[CableConnector]:
    """First connector whose ranges contain both section areas, or None."""
    return next(
        (connector for connector in connectors if connector.accepts(entrance_mm, exit_mm)),
        None,
    )


def required_exit_section_mm(
    one_side_connector: bool,
    local_cable_section_mm: Optional[float],
    exit_cable_section_mm: Optional[float],
) -> Result[float]:
    """
    Exit section area a connector must accept.

    One-side connectors always use 0. Two-side connectors take the item's
    local section override first, then the point's exit cable; resolving
    to 0 is an error since a two-side connector needs a real exit cable.
    """
    if one_side_connector:
        return Result.success(0.0)

    exit_mm = local_cable_section_mm or exit_cable_section_mm or 0.0
    if exit_mm == 0:
        return Result.failure(invalid_request_error(
            "Exit cable section is required to calculate cable connector for two-side connectors",
            ErrorCode.IR_EXIT_SECTION,
            source="catalog.matcher",
        ))
    return Result.success(float(exit_mm))


class CatalogMatcher:
    """
    Catalog matcher reporting failures as typed errors.

    Usage:
        matcher = CatalogMatcher()
        screw = matcher.match_pole_screw(1200.0, screws)
        if not screw.ok:
            return screw
    """

    def match_pole_screw(
        self,
        required_length_mm: float,
        screws: Sequence[PoleScrew],
    ) -> Result[PoleScrew]:
        screw = find_pole_screw(required_length_mm, screws)
        if screw is None:
            return Result.failure(not_found_error(
                f"No suitable pole screw found for length {required_length_mm:g}mm",
                ErrorCode.NF_POLE_SCREW,
                source="catalog.matcher",
                required_length_mm=required_length_mm,
            ))
        logger.debug(f"Pole screw {screw.code} ({screw.length_mm:g}mm) fits {required_length_mm:g}mm")
        return Result.success(screw)

    def match_cable_connector(
        self,
        entrance_mm: float,
        exit_mm: float,
        connectors: Sequence[CableConnector],
    ) -> Result[CableConnector]:
        connector = find_cable_connector(entrance_mm, exit_mm, connectors)
        if connector is None:
            return Result.failure(not_found_error(
                f"No suitable cable connector found for config: "
                f"Entrance {entrance_mm:g}mm, Exit {exit_mm:g}mm",
                ErrorCode.NF_CABLE_CONNECTOR,
                source="catalog.matcher",
                entrance_mm=entrance_mm,
                exit_mm=exit_mm,
            ))
        logger.debug(
            f"Cable connector {connector.code} fits entrance {entrance_mm:g}mm, exit {exit_mm:g}mm"
        )
        return Result.success(connector)
