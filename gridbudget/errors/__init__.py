"""
errors/ - Error Taxonomy & Result Type

Structured failures for the budgeting engine, the Result carrier used by
every pipeline step, and aggregation for bulk catalog operations.
"""

from .taxonomy import (
    ErrorKind,
    ErrorCode,
    BudgetError,
    not_found_error,
    conflict_error,
    invalid_request_error,
    internal_error,
)

from .result import (
    Result,
    BudgetFailure,
)

from .aggregator import (
    ErrorReport,
    ErrorAggregator,
)

__all__ = [
    # Taxonomy
    "ErrorKind",
    "ErrorCode",
    "BudgetError",
    "not_found_error",
    "conflict_error",
    "invalid_request_error",
    "internal_error",
    # Result
    "Result",
    "BudgetFailure",
    # Aggregator
    "ErrorReport",
    "ErrorAggregator",
]
