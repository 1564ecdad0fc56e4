"""
errors/taxonomy.py - Error classification system

Every failure the budgeting engine can report is a BudgetError value:
a kind (how the caller should react), a numeric code (which rule failed)
and a human-readable message. Failures are returned, not raised; see
errors/result.py for the carrier type.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional
from enum import Enum
import uuid


class ErrorKind(Enum):
    """Error kinds surfaced to callers."""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_REQUEST = "invalid_request"
    INTERNAL = "internal"


class ErrorCode(Enum):
    """Specific error codes."""

    # Not found (1xxx)
    NF_PROJECT = 1001
    NF_UTILITY_POLE = 1002
    NF_CABLE = 1003
    NF_MATERIAL = 1004
    NF_GROUP = 1005
    NF_POLE_SCREW = 1006
    NF_CABLE_CONNECTOR = 1007

    # Conflict (2xxx)
    CF_POINT_NAME = 2001
    CF_GROUP_LEVEL = 2002
    CF_CATALOG_CODE = 2003

    # Invalid request (3xxx)
    IR_POLE_CAPACITY = 3001
    IR_EXIT_SECTION = 3002
    IR_NEGATIVE_VALUE = 3003
    IR_MISSING_CABLES = 3004
    IR_POLE_REQUIRED = 3005
    IR_QUANTITY = 3006
    IR_NO_CHANGES = 3007
    IR_MIXED_PROJECTS = 3008
    IR_RANGE = 3009

    # Internal (9xxx)
    INT_GROUP_MAPPING = 9001


@dataclass(frozen=True)
class BudgetError:
    """Structured error representation."""

    message: str
    kind: ErrorKind = ErrorKind.INVALID_REQUEST
    code: ErrorCode = ErrorCode.IR_QUANTITY

    # Module or operation that produced the failure
    source: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    error_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    @property
    def recoverable(self) -> bool:
        """Internal errors point to a logic defect; everything else can be fixed by the caller."""
        return self.kind != ErrorKind.INTERNAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "kind": self.kind.value,
            "code": self.code.value,
            "message": self.message,
            "source": self.source,
            "details": dict(self.details),
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        return f"[{self.kind.value}:{self.code.value}] {self.message}"


def not_found_error(
    message: str,
    code: ErrorCode,
    source: str = "",
    missing_ids: Optional[Iterable[str]] = None,
    **details: Any,
) -> BudgetError:
    """Factory for not-found errors."""
    if missing_ids is not None:
        details["missing_ids"] = list(missing_ids)
    return BudgetError(
        message=message,
        kind=ErrorKind.NOT_FOUND,
        code=code,
        source=source,
        details=details,
    )


def conflict_error(
    message: str,
    code: ErrorCode,
    source: str = "",
    **details: Any,
) -> BudgetError:
    """Factory for conflict errors."""
    return BudgetError(
        message=message,
        kind=ErrorKind.CONFLICT,
        code=code,
        source=source,
        details=details,
    )


def invalid_request_error(
    message: str,
    code: ErrorCode,
    source: str = "",
    **details: Any,
) -> BudgetError:
    """Factory for invalid request errors."""
    return BudgetError(
        message=message,
        kind=ErrorKind.INVALID_REQUEST,
        code=code,
        source=source,
        details=details,
    )


def internal_error(
    message: str,
    code: ErrorCode = ErrorCode.INT_GROUP_MAPPING,
    source: str = "",
    **details: Any,
) -> BudgetError:
    """Factory for internal consistency errors."""
    return BudgetError(
        message=message,
        kind=ErrorKind.INTERNAL,
        code=code,
        source=source,
        details=details,
    )
