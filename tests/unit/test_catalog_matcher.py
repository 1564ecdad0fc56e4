"""
tests/unit/test_catalog_matcher.py - Tests for best-fit catalog search
"""

import pytest

from gridbudget.catalog import (
    CableConnector,
    CatalogMatcher,
    PoleScrew,
    find_cable_connector,
    find_pole_screw,
    required_exit_section_mm,
)
from gridbudget.errors import ErrorCode, ErrorKind


def _screws(*lengths):
    return [PoleScrew(code=i, description=f"S{length}", length_mm=length) for i, length in enumerate(lengths)]


class TestFindPoleScrew:
    """Test find_pole_screw()."""

    def test_rounds_up_to_next_length(self):
        screws = _screws(50, 100, 150)
        assert find_pole_screw(120, screws).length_mm == 150

    def test_exact_length_matches(self):
        screws = _screws(50, 100, 150)
        assert find_pole_screw(100, screws).length_mm == 100

    def test_too_long_returns_none(self):
        assert find_pole_screw(200, _screws(50, 100, 150)) is None

    def test_empty_catalog(self):
        assert find_pole_screw(10, []) is None

    def test_ties_resolve_to_first(self):
        screws = _screws(50, 100, 100, 150)
        assert find_pole_screw(80, screws) is screws[1]

    @pytest.mark.parametrize("required", [0, 1, 49.9, 50, 75, 100.5, 149, 150])
    def test_returns_minimal_qualifying_screw(self, required):
        screws = _screws(50, 100, 150)
        found = find_pole_screw(required, screws)
        qualifying = [s for s in screws if s.length_mm >= required]
        assert found is not None
        assert found.length_mm == min(s.length_mm for s in qualifying)


class TestFindCableConnector:
    """Test find_cable_connector()."""

    def test_first_accepting_connector_wins(self, cable_connectors):
        found = find_cable_connector(16, 25, cable_connectors)
        assert found.id == "conn-small-2s"

    def test_bounds_are_inclusive(self, cable_connectors):
        assert find_cable_connector(35, 35, cable_connectors).id == "conn-small-2s"
        assert find_cable_connector(10, 10, cable_connectors).id == "conn-small-2s"

    def test_one_side_needs_zero_in_exit_range(self, cable_connectors):
        assert find_cable_connector(50, 0, cable_connectors).id == "conn-large-1s"

    def test_no_connector_fits(self, cable_connectors):
        assert find_cable_connector(120, 0, cable_connectors) is None
        assert find_cable_connector(16, 70, cable_connectors) is None

    def test_found_connector_contains_requirements(self, cable_connectors):
        for entrance, exit_mm in [(16, 0), (16, 25), (50, 70), (95, 95)]:
            found = find_cable_connector(entrance, exit_mm, cable_connectors)
            assert found is not None
            assert found.entrance_min_mm <= entrance <= found.entrance_max_mm
            assert found.exit_min_mm <= exit_mm <= found.exit_max_mm


class TestRequiredExitSection:
    """Test required_exit_section_mm()."""

    def test_one_side_is_zero(self):
        result = required_exit_section_mm(True, 25.0, 50.0)
        assert result.ok
        assert result.value == 0.0

    def test_local_section_overrides_exit_cable(self):
        assert required_exit_section_mm(False, 25.0, 50.0).value == 25.0

    def test_exit_cable_section(self):
        assert required_exit_section_mm(False, None, 50.0).value == 50.0

    def test_two_side_without_exit_fails(self):
        result = required_exit_section_mm(False, None, None)
        assert not result.ok
        assert result.error.kind == ErrorKind.INVALID_REQUEST
        assert result.error.code == ErrorCode.IR_EXIT_SECTION

    def test_zero_local_section_falls_back_to_cable(self):
        assert required_exit_section_mm(False, 0, 35.0).value == 35.0


class TestCatalogMatcher:
    """Test CatalogMatcher failures."""

    def test_pole_screw_not_found(self):
        result = CatalogMatcher().match_pole_screw(200, _screws(50, 100, 150))
        assert not result.ok
        assert result.error.kind == ErrorKind.NOT_FOUND
        assert result.error.code == ErrorCode.NF_POLE_SCREW
        assert result.error.details["required_length_mm"] == 200
        assert "200mm" in result.error.message

    def test_pole_screw_found(self):
        result = CatalogMatcher().match_pole_screw(120, _screws(50, 100, 150))
        assert result.ok
        assert result.value.length_mm == 150

    def test_cable_connector_not_found(self):
        connectors = [CableConnector(1, "C", 10, 35, 10, 35)]
        result = CatalogMatcher().match_cable_connector(50, 0, connectors)
        assert not result.ok
        assert result.error.code == ErrorCode.NF_CABLE_CONNECTOR
        assert result.error.details == {"entrance_mm": 50, "exit_mm": 0}
