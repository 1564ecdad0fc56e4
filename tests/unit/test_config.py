"""
tests/unit/test_config.py - Tests for configuration loading
"""

import json

import pytest

from gridbudget.bootstrap import (
    EngineConfig,
    GridBudgetConfig,
    get_config,
    load_config,
    reset_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [
        "GRIDBUDGET_STRONG_SIDE",
        "GRIDBUDGET_PARALLEL_FETCH",
        "GRIDBUDGET_FETCH_WORKERS",
        "GRIDBUDGET_CATALOG_FILE",
        "GRIDBUDGET_LOG_LEVEL",
        "GRIDBUDGET_ENVIRONMENT",
    ]:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


class TestDefaults:
    """Test default values."""

    def test_engine_defaults(self):
        config = EngineConfig()
        assert config.strong_side_tension == "MEDIUM"
        assert config.parallel_catalog_fetch is True
        assert config.catalog_fetch_workers == 2

    def test_root_defaults(self):
        config = GridBudgetConfig()
        assert config.environment == "development"
        assert config.storage.catalog_file is None
        assert config.logging.level == "INFO"


class TestFromEnv:
    """Test environment variable loading."""

    def test_engine_from_env(self, monkeypatch):
        monkeypatch.setenv("GRIDBUDGET_STRONG_SIDE", "LOW")
        monkeypatch.setenv("GRIDBUDGET_PARALLEL_FETCH", "false")
        monkeypatch.setenv("GRIDBUDGET_FETCH_WORKERS", "4")

        config = GridBudgetConfig.from_env()
        assert config.engine.strong_side_tension == "LOW"
        assert config.engine.parallel_catalog_fetch is False
        assert config.engine.catalog_fetch_workers == 4

    def test_empty_strong_side_disables_multiplier(self, monkeypatch):
        monkeypatch.setenv("GRIDBUDGET_STRONG_SIDE", "")
        assert EngineConfig.from_env().strong_side_tension == ""

    def test_invalid_strong_side_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("GRIDBUDGET_STRONG_SIDE", "HIGH")
        with caplog.at_level("WARNING", logger="bootstrap.config"):
            config = EngineConfig.from_env()
        assert config.strong_side_tension == "MEDIUM"
        assert "Invalid strong side tension 'HIGH'" in caplog.text

    def test_catalog_file_from_env(self, monkeypatch):
        monkeypatch.setenv("GRIDBUDGET_CATALOG_FILE", "/data/catalog.json")
        assert GridBudgetConfig.from_env().storage.catalog_file == "/data/catalog.json"


class TestFromFile:
    """Test JSON file overrides."""

    def test_file_overrides_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GRIDBUDGET_FETCH_WORKERS", "8")
        path = tmp_path / "gridbudget.json"
        path.write_text(json.dumps({
            "environment": "production",
            "engine": {"strong_side_tension": "LOW", "unknown_key": 1},
            "storage": {"catalog_file": "catalog.json"},
        }))

        config = GridBudgetConfig.from_file(str(path))
        assert config.environment == "production"
        assert config.engine.strong_side_tension == "LOW"
        assert config.engine.catalog_fetch_workers == 8
        assert config.storage.catalog_file == "catalog.json"
        assert not hasattr(config.engine, "unknown_key")

    def test_missing_file_falls_back_to_env(self, tmp_path):
        config = GridBudgetConfig.from_file(str(tmp_path / "absent.json"))
        assert config.engine == EngineConfig()

    def test_strong_side_from_file_normalized(self, tmp_path):
        path = tmp_path / "gridbudget.json"
        path.write_text(json.dumps({"engine": {"strong_side_tension": "low"}}))
        assert GridBudgetConfig.from_file(str(path)).engine.strong_side_tension == "LOW"

    def test_invalid_strong_side_in_file(self, tmp_path, catalog_store, group_store, project_store, sink):
        from gridbudget.points import PointBudgetService

        path = tmp_path / "gridbudget.json"
        path.write_text(json.dumps({"engine": {"strong_side_tension": "HIGH"}}))
        engine = GridBudgetConfig.from_file(str(path)).engine
        assert engine.strong_side_tension == "MEDIUM"

        service = PointBudgetService(catalog_store, group_store, project_store, sink, engine)
        assert service.section_model.strong_side.value == "MEDIUM"

    def test_to_dict(self):
        d = GridBudgetConfig().to_dict()
        assert d["engine"]["strong_side_tension"] == "MEDIUM"
        assert d["storage"]["catalog_file"] is None


class TestGlobalConfig:
    """Test load_config/get_config caching."""

    def test_load_then_get(self, tmp_path):
        path = tmp_path / "gridbudget.json"
        path.write_text(json.dumps({"environment": "test"}))

        loaded = load_config(str(path))
        assert get_config() is loaded
        assert get_config().environment == "test"
