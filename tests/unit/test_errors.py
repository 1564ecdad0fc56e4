"""
tests/unit/test_errors.py - Tests for the error taxonomy, Result and ErrorAggregator
"""

import pytest

from gridbudget.errors import (
    BudgetError,
    BudgetFailure,
    ErrorAggregator,
    ErrorCode,
    ErrorKind,
    Result,
    conflict_error,
    internal_error,
    invalid_request_error,
    not_found_error,
)


class TestTaxonomy:
    """Test BudgetError and its factories."""

    def test_not_found_carries_missing_ids(self):
        error = not_found_error("Cables not found: a, b", ErrorCode.NF_CABLE, missing_ids=("a", "b"))
        assert error.kind == ErrorKind.NOT_FOUND
        assert error.details == {"missing_ids": ["a", "b"]}

    def test_factory_kinds(self):
        assert conflict_error("x", ErrorCode.CF_POINT_NAME).kind == ErrorKind.CONFLICT
        assert invalid_request_error("x", ErrorCode.IR_QUANTITY).kind == ErrorKind.INVALID_REQUEST
        assert internal_error("x").code == ErrorCode.INT_GROUP_MAPPING

    def test_only_internal_errors_are_unrecoverable(self):
        assert conflict_error("x", ErrorCode.CF_POINT_NAME).recoverable
        assert not internal_error("x").recoverable

    def test_str(self):
        error = invalid_request_error("No entries provided", ErrorCode.IR_NO_CHANGES)
        assert str(error) == "[invalid_request:3007] No entries provided"

    def test_to_dict(self):
        error = conflict_error("dup", ErrorCode.CF_GROUP_LEVEL, source="groups", level=1)
        d = error.to_dict()
        assert d["kind"] == "conflict"
        assert d["code"] == 2002
        assert d["source"] == "groups"
        assert d["details"] == {"level": 1}
        assert d["recoverable"] is True
        assert len(d["error_id"]) == 8


class TestResult:
    """Test Result."""

    def test_success(self):
        result = Result.success(3)
        assert result.ok
        assert result.unwrap() == 3

    def test_success_with_none(self):
        assert Result.success(None).ok

    def test_failure_unwrap_raises(self):
        error = not_found_error("Project does not exist", ErrorCode.NF_PROJECT)
        result = Result.failure(error)
        assert not result.ok
        with pytest.raises(BudgetFailure) as excinfo:
            result.unwrap()
        assert excinfo.value.error is error
        assert "Project does not exist" in str(excinfo.value)


class TestErrorAggregator:
    """Test ErrorAggregator."""

    def test_empty_report(self):
        report = ErrorAggregator().generate_report()
        assert report.total_errors == 0
        assert report.summary == "No rejected entries"

    def test_counts_by_kind(self):
        aggregator = ErrorAggregator()
        for error in [
            conflict_error("dup", ErrorCode.CF_CATALOG_CODE, source="10"),
            invalid_request_error("neg", ErrorCode.IR_NEGATIVE_VALUE, source="11"),
            invalid_request_error("neg", ErrorCode.IR_NEGATIVE_VALUE, source="12"),
        ]:
            aggregator.add(error)
        report = aggregator.generate_report()
        assert report.by_kind == {"conflict": 1, "invalid_request": 2}
        assert report.summary == "3 entry(ies) rejected: 1 conflict, 2 invalid request"
        assert [e["source"] for e in report.to_dict()["errors"]] == ["10", "11", "12"]

    def test_report_is_a_copy(self):
        aggregator = ErrorAggregator()
        aggregator.add(internal_error("boom"))
        report = aggregator.generate_report()
        aggregator.add(internal_error("again"))
        assert report.total_errors == 1
        assert len(report.all_errors) == 1


def test_budget_error_is_frozen():
    error = BudgetError("x")
    with pytest.raises(Exception):
        error.message = "y"
