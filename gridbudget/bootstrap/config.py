"""
bootstrap/config.py - Application configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("bootstrap.config")


@dataclass
class EngineConfig:
    """Point pipeline settings."""

    STRONG_SIDE_CHOICES = ("LOW", "MEDIUM")

    # Tension side receiving the pole's strong side multiplier; empty disables it
    strong_side_tension: str = "MEDIUM"
    parallel_catalog_fetch: bool = True
    catalog_fetch_workers: int = 2

    @classmethod
    def from_env(cls) -> "EngineConfig":
        config = cls(
            strong_side_tension=os.getenv("GRIDBUDGET_STRONG_SIDE", "MEDIUM"),
            parallel_catalog_fetch=os.getenv("GRIDBUDGET_PARALLEL_FETCH", "true").lower() == "true",
            catalog_fetch_workers=int(os.getenv("GRIDBUDGET_FETCH_WORKERS", "2")),
        )
        config.normalize()
        return config

    def normalize(self) -> None:
        """Upper-case the strong side; an unknown value falls back to MEDIUM."""
        value = str(self.strong_side_tension or "").strip().upper()
        if value and value not in self.STRONG_SIDE_CHOICES:
            logger.warning(
                f"Invalid strong side tension {self.strong_side_tension!r}, using MEDIUM"
            )
            value = "MEDIUM"
        self.strong_side_tension = value


@dataclass
class StorageConfig:
    """Storage paths configuration."""

    catalog_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            catalog_file=os.getenv("GRIDBUDGET_CATALOG_FILE"),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("GRIDBUDGET_LOG_LEVEL", "INFO"),
            format=os.getenv("GRIDBUDGET_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("GRIDBUDGET_LOG_FILE"),
            json_logs=os.getenv("GRIDBUDGET_JSON_LOGS", "false").lower() == "true",
        )


@dataclass
class GridBudgetConfig:
    """Root configuration."""

    environment: str = "development"
    version: str = "0.1.0"

    engine: EngineConfig = field(default_factory=EngineConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "GridBudgetConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("GRIDBUDGET_ENVIRONMENT", "development"),
            engine=EngineConfig.from_env(),
            storage=StorageConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "GridBudgetConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "GridBudgetConfig":
        """Create config from dictionary; file values override the environment."""
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]

        for section in ("engine", "storage", "logging"):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Unknown config key ignored: {section}.{key}")

        config.engine.normalize()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "version": self.version,
            "engine": {
                "strong_side_tension": self.engine.strong_side_tension,
                "parallel_catalog_fetch": self.engine.parallel_catalog_fetch,
                "catalog_fetch_workers": self.engine.catalog_fetch_workers,
            },
            "storage": {
                "catalog_file": self.storage.catalog_file,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[GridBudgetConfig] = None


def load_config(filepath: str = None) -> GridBudgetConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        GridBudgetConfig instance
    """
    global _config

    if filepath:
        _config = GridBudgetConfig.from_file(filepath)
    else:
        default_paths = [
            "./gridbudget.json",
            "./config/gridbudget.json",
            os.path.expanduser("~/.gridbudget/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = GridBudgetConfig.from_file(path)
                return _config

        _config = GridBudgetConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> GridBudgetConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration."""
    global _config
    _config = None
