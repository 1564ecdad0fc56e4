"""
Test configuration and fixtures

Shared catalog used across unit and integration tests:

- pole "pole-1": 2 LOW levels (15cm start, +5cm per level),
  2 MEDIUM levels (20cm start, +10cm per level), strong side multiplier 1.5
- pole screws of 100, 160, 250, 350 and 500 mm
- cable connectors for small (10-35 mm2) and large (35-95 mm2) cables,
  each in a one-side (exit 0) and a two-side variant
- groups "grp-low-a" (clamp x3, screw x2 +20mm, two-side connector x3),
  "grp-low-b" (clamp x3) and "grp-med" (screw x1, one-side connector x1)
"""

import pytest

from gridbudget.catalog import (
    Cable,
    CableConnector,
    Material,
    PoleScrew,
    TensionLevel,
    UtilityPole,
)
from gridbudget.groups import (
    Group,
    GroupCableConnectorItem,
    GroupMaterialItem,
    GroupPoleScrewItem,
)
from gridbudget.bootstrap import EngineConfig
from gridbudget.points import PointBudgetService
from gridbudget.stores import (
    InMemoryCatalogStore,
    InMemoryGroupStore,
    InMemoryMaterialSink,
    InMemoryProjectStore,
)

PROJECT_ID = "proj-1"


@pytest.fixture
def pole():
    """Utility pole with two levels per tension side."""
    return UtilityPole(
        code=1001,
        description="DT 11/300",
        strong_side_section_multiplier=1.5,
        medium_voltage_levels_count=2,
        medium_voltage_start_section_length_cm=20,
        medium_voltage_section_length_add_by_level_cm=10,
        low_voltage_levels_count=2,
        low_voltage_start_section_length_cm=15,
        low_voltage_section_length_add_by_level_cm=5,
        id="pole-1",
    )


@pytest.fixture
def pole_screws():
    return [
        PoleScrew(code=600 + i, description=f"SCREW {length}MM", length_mm=length, id=f"screw-{length}")
        for i, length in enumerate([100, 160, 250, 350, 500])
    ]


@pytest.fixture
def cable_connectors():
    return [
        CableConnector(700, "SMALL ONE SIDE", 10, 35, 0, 0, id="conn-small-1s"),
        CableConnector(701, "SMALL TWO SIDE", 10, 35, 10, 35, id="conn-small-2s"),
        CableConnector(702, "LARGE ONE SIDE", 35, 95, 0, 0, id="conn-large-1s"),
        CableConnector(703, "LARGE TWO SIDE", 35, 95, 35, 95, id="conn-large-2s"),
    ]


@pytest.fixture
def cables():
    return [
        Cable(801, "CA 16MM2", 16, TensionLevel.LOW, id="cab-low-16"),
        Cable(802, "CA 25MM2", 25, TensionLevel.LOW, id="cab-low-25"),
        Cable(803, "CAA 50MM2", 50, TensionLevel.MEDIUM, id="cab-med-50"),
        Cable(804, "CAA 70MM2", 70, TensionLevel.MEDIUM, id="cab-med-70"),
    ]


@pytest.fixture
def materials():
    return [
        Material(500, "ANCHOR CLAMP", id="mat-clamp"),
        Material(501, "INSULATING TAPE", unit="M", id="mat-tape"),
    ]


@pytest.fixture
def groups():
    return [
        Group("LOW CROSSARM", TensionLevel.LOW, id="grp-low-a"),
        Group("LOW CLAMPS", TensionLevel.LOW, id="grp-low-b"),
        Group("MEDIUM TERMINAL", TensionLevel.MEDIUM, id="grp-med"),
    ]


@pytest.fixture
def group_items():
    return [
        GroupMaterialItem("grp-low-a", "mat-clamp", 3, id="item-a-clamp"),
        GroupPoleScrewItem("grp-low-a", 2, length_add_mm=20, id="item-a-screw"),
        GroupCableConnectorItem("grp-low-a", 3, id="item-a-conn"),
        GroupMaterialItem("grp-low-b", "mat-clamp", 3, id="item-b-clamp"),
        GroupPoleScrewItem("grp-med", 1, id="item-med-screw"),
        GroupCableConnectorItem("grp-med", 1, one_side_connector=True, id="item-med-conn"),
    ]


@pytest.fixture
def catalog_store(pole, pole_screws, cable_connectors, cables, materials):
    return InMemoryCatalogStore(
        materials=materials,
        cables=cables,
        utility_poles=[pole],
        pole_screws=pole_screws,
        cable_connectors=cable_connectors,
    )


@pytest.fixture
def group_store(groups, group_items):
    return InMemoryGroupStore(groups=groups, items=group_items)


@pytest.fixture
def project_store():
    return InMemoryProjectStore(project_ids=[PROJECT_ID])


@pytest.fixture
def sink():
    return InMemoryMaterialSink()


@pytest.fixture
def service(catalog_store, group_store, project_store, sink):
    return PointBudgetService(catalog_store, group_store, project_store, sink, EngineConfig())
