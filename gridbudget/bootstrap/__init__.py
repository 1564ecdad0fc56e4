"""
bootstrap/ - Bootstrap Layer

Provides configuration, logging setup and the command line entry point.
"""

from .config import (
    GridBudgetConfig,
    EngineConfig,
    StorageConfig,
    LoggingConfig,
    load_config,
    get_config,
    reset_config,
)

from .entrypoints import (
    cli_main,
    setup_logging,
    format_bom,
    JSONFormatter,
)


__all__ = [
    # Config
    "GridBudgetConfig",
    "EngineConfig",
    "StorageConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reset_config",
    # Entry Points
    "cli_main",
    "setup_logging",
    "format_bom",
    "JSONFormatter",
]
