"""
errors/aggregator.py - Aggregate and report errors

Bulk catalog operations keep going after a bad entry; the per-entry
failures are collected here and summarised once the batch is done.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List
from datetime import datetime, timezone
import uuid

from .taxonomy import BudgetError, ErrorKind


@dataclass
class ErrorReport:
    """Aggregated error report."""

    report_id: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Counts
    total_errors: int = 0
    by_kind: Dict[str, int] = field(default_factory=dict)

    # Summary
    summary: str = ""

    # All errors
    all_errors: List[BudgetError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "total_errors": self.total_errors,
            "by_kind": self.by_kind,
            "summary": self.summary,
            "errors": [e.to_dict() for e in self.all_errors],
        }


class ErrorAggregator:
    """
    Aggregates errors from multiple sources.

    Each error carries the identifier of the entry that failed (a catalog
    code for bulk registration) as its source.
    """

    def __init__(self):
        self._errors: List[BudgetError] = []

    def add(self, error: BudgetError) -> None:
        """Add an error."""
        self._errors.append(error)

    def generate_report(self) -> ErrorReport:
        """Generate aggregated report."""
        report = ErrorReport(
            report_id=str(uuid.uuid4())[:8],
            total_errors=len(self._errors),
        )

        for kind in ErrorKind:
            count = sum(1 for e in self._errors if e.kind == kind)
            if count > 0:
                report.by_kind[kind.value] = count

        if not self._errors:
            report.summary = "No rejected entries"
        else:
            parts = [f"{count} {kind.replace('_', ' ')}" for kind, count in report.by_kind.items()]
            report.summary = f"{len(self._errors)} entry(ies) rejected: " + ", ".join(parts)

        report.all_errors = self._errors.copy()

        return report
