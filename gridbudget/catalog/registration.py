"""
catalog/registration.py - Catalog creation and edit operations.

Keeps the catalog invariants the calculation engine relies on:
pole dimensions are never negative, screws have a positive length,
connector ranges are well-formed, and codes are unique per entity kind.

Single-entry operations return a Result. Bulk operations never stop on a
bad entry: valid entries are saved in one store call and the rejected
ones come back in a BulkCreationReport.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Generic, Iterable, List, Optional, TypeVar
import logging

from ..errors import (
    BudgetError,
    ErrorAggregator,
    ErrorCode,
    ErrorReport,
    Result,
    conflict_error,
    invalid_request_error,
    not_found_error,
)
from .models import CableConnector, PoleScrew, UtilityPole

if TYPE_CHECKING:
    from ..stores.base import CatalogStore

logger = logging.getLogger(__name__)

T = TypeVar("T")
S = TypeVar("S")


@dataclass(frozen=True)
class PoleScrewEntry:
    """Pole screw to register."""
    code: int
    description: str
    length_mm: float


@dataclass(frozen=True)
class CableConnectorEntry:
    """Cable connector to register."""
    code: int
    description: str
    entrance_min_mm: float
    entrance_max_mm: float
    exit_min_mm: float
    exit_max_mm: float


@dataclass
class FailedEntry(Generic[T]):
    """An entry rejected by a bulk operation and why."""
    entry: T
    error: BudgetError

    def to_dict(self) -> Dict[str, Any]:
        return {"code": getattr(self.entry, "code", None), "error": self.error.to_dict()}


@dataclass
class BulkCreationReport(Generic[T, S]):
    """Outcome of a bulk registration."""
    created: List[S] = field(default_factory=list)
    failed: List[FailedEntry[T]] = field(default_factory=list)
    report: Optional[ErrorReport] = None

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": [item.to_dict() for item in self.created],
            "failed": [failure.to_dict() for failure in self.failed],
            "summary": self.report.summary if self.report else "",
        }


class CatalogRegistry:
    """
    Catalog creation and edit operations over a CatalogStore.

    Usage:
        registry = CatalogRegistry(store)
        result = registry.create_utility_pole(code=1, description="DT 11/300", ...)
        report = registry.create_bulk_of_pole_screws(entries)
    """

    EDITABLE_POLE_FIELDS = ("description",) + UtilityPole.DIMENSION_FIELDS

    def __init__(self, store: "CatalogStore"):
        self.store = store

    # =========================================================================
    # UTILITY POLES
    # =========================================================================

    def create_utility_pole(self, code: int, description: str, **dimensions: float) -> Result[UtilityPole]:
        """
        Register a utility pole.

        Args:
            code: Catalog code (unique among poles)
            description: Free text, stored upper-cased
            **dimensions: Any of UtilityPole.DIMENSION_FIELDS

        Returns:
            Result with the created pole
        """
        pole = UtilityPole(code=code, description=description.upper(), **dimensions)

        negative = pole.negative_fields()
        if negative:
            return Result.failure(invalid_request_error(
                "One or more section length are less than zero",
                ErrorCode.IR_NEGATIVE_VALUE,
                source="catalog.registration",
                fields=negative,
            ))

        if self.store.find_utility_pole_by_code(code) is not None:
            return Result.failure(conflict_error(
                "UtilityPole code already registered",
                ErrorCode.CF_CATALOG_CODE,
                source="catalog.registration",
                pole_code=code,
            ))

        self.store.save_utility_poles([pole])
        logger.info(f"Registered utility pole {pole.code} ({pole.description})")
        return Result.success(pole)

    def edit_utility_pole(self, pole_id: str, **changes: Any) -> Result[UtilityPole]:
        """
        Edit a utility pole.

        Fields passed as None are left untouched. The stored pole is replaced
        only when at least one value actually differs.
        """
        unknown = sorted(set(changes) - set(self.EDITABLE_POLE_FIELDS))
        if unknown:
            raise TypeError(f"Unknown utility pole fields: {', '.join(unknown)}")

        given = {name: value for name, value in changes.items() if value is not None}
        if not given:
            return Result.failure(invalid_request_error(
                "No entries provided",
                ErrorCode.IR_NO_CHANGES,
                source="catalog.registration",
            ))

        negative = [name for name, value in given.items() if name != "description" and value < 0]
        if negative:
            return Result.failure(invalid_request_error(
                "One or more section length are less than zero",
                ErrorCode.IR_NEGATIVE_VALUE,
                source="catalog.registration",
                fields=negative,
            ))

        pole = self.store.find_utility_pole_by_id(pole_id)
        if pole is None:
            return Result.failure(not_found_error(
                "Given utility pole not found",
                ErrorCode.NF_UTILITY_POLE,
                source="catalog.registration",
                missing_ids=[pole_id],
            ))

        if "description" in given:
            given["description"] = given["description"].upper()

        updates = {name: value for name, value in given.items() if getattr(pole, name) != value}
        if not updates:
            return Result.success(pole)

        edited = replace(pole, **updates)
        self.store.save_utility_poles([edited])
        logger.info(f"Edited utility pole {pole.code}: {', '.join(sorted(updates))}")
        return Result.success(edited)

    # =========================================================================
    # POLE SCREWS
    # =========================================================================

    def create_bulk_of_pole_screws(
        self,
        entries: Iterable[PoleScrewEntry],
    ) -> BulkCreationReport[PoleScrewEntry, PoleScrew]:
        """Register many pole screws, collecting rejected entries."""
        result: BulkCreationReport[PoleScrewEntry, PoleScrew] = BulkCreationReport()
        aggregator = ErrorAggregator()
        codes = set(self.store.list_pole_screw_codes())

        for entry in entries:
            if entry.length_mm <= 0:
                error = invalid_request_error(
                    "Pole Screw length must be greater than zero",
                    ErrorCode.IR_NEGATIVE_VALUE,
                    source=str(entry.code),
                )
            elif entry.code in codes:
                error = conflict_error(
                    "PoleScrew code already registered",
                    ErrorCode.CF_CATALOG_CODE,
                    source=str(entry.code),
                )
            else:
                result.created.append(PoleScrew(
                    code=entry.code,
                    description=entry.description.upper(),
                    length_mm=entry.length_mm,
                ))
                codes.add(entry.code)
                continue

            aggregator.add(error)
            result.failed.append(FailedEntry(entry=entry, error=error))

        if result.created:
            self.store.save_pole_screws(result.created)
        result.report = aggregator.generate_report()
        logger.info(
            f"Pole screw bulk registration: {result.created_count} created, "
            f"{result.failed_count} rejected"
        )
        return result

    # =========================================================================
    # CABLE CONNECTORS
    # =========================================================================

    def create_bulk_of_cable_connectors(
        self,
        entries: Iterable[CableConnectorEntry],
    ) -> BulkCreationReport[CableConnectorEntry, CableConnector]:
        """Register many cable connectors, collecting rejected entries."""
        result: BulkCreationReport[CableConnectorEntry, CableConnector] = BulkCreationReport()
        aggregator = ErrorAggregator()
        codes = set(self.store.list_cable_connector_codes())

        for entry in entries:
            error = self._check_connector_ranges(entry)
            if error is None and entry.code in codes:
                error = conflict_error(
                    "CableConnector code already registered",
                    ErrorCode.CF_CATALOG_CODE,
                    source=str(entry.code),
                )
            if error is not None:
                aggregator.add(error)
                result.failed.append(FailedEntry(entry=entry, error=error))
                continue

            result.created.append(CableConnector(
                code=entry.code,
                description=entry.description.upper(),
                entrance_min_mm=entry.entrance_min_mm,
                entrance_max_mm=entry.entrance_max_mm,
                exit_min_mm=entry.exit_min_mm,
                exit_max_mm=entry.exit_max_mm,
            ))
            codes.add(entry.code)

        if result.created:
            self.store.save_cable_connectors(result.created)
        result.report = aggregator.generate_report()
        logger.info(
            f"Cable connector bulk registration: {result.created_count} created, "
            f"{result.failed_count} rejected"
        )
        return result

    @staticmethod
    def _check_connector_ranges(entry: CableConnectorEntry) -> Optional[BudgetError]:
        bounds = (entry.entrance_min_mm, entry.entrance_max_mm, entry.exit_min_mm, entry.exit_max_mm)
        if any(bound < 0 for bound in bounds):
            return invalid_request_error(
                "Cable connector section bounds must not be negative",
                ErrorCode.IR_NEGATIVE_VALUE,
                source=str(entry.code),
            )
        if entry.entrance_min_mm > entry.entrance_max_mm or entry.exit_min_mm > entry.exit_max_mm:
            return invalid_request_error(
                "Cable connector minimum section exceeds its maximum",
                ErrorCode.IR_RANGE,
                source=str(entry.code),
            )
        return None
