"""
bootstrap/entrypoints.py - Application entry points

Provides logging setup and the `gridbudget` command line.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import json
import logging
import sys

logger = logging.getLogger("bootstrap.entrypoints")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2

# Handlers installed by setup_logging, replaced on each call
_handlers: List[logging.Handler] = []


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(level: str = "INFO", log_file: str = None, json_format: bool = False) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # Console handler; stdout is reserved for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    _handlers.append(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        _handlers.append(file_handler)

    for handler in _handlers:
        root_logger.addHandler(handler)


def format_bom(bom) -> str:
    """Render a PointBOM as a plain text table."""
    point = bom.point
    lines = [
        f"Point '{point.name}' (project {point.project_id}, id {point.id})",
        f"{bom.item_count} material record(s)",
    ]
    for record in bom.materials:
        origin = ""
        if record.group_specs is not None:
            specs = record.group_specs
            origin = f"  [{specs.tension_level.value} L{specs.level} group {specs.group_id}]"
        lines.append(
            f"  {record.item_type.value:<15} {record.item_id:<36} x {record.quantity:g}{origin}"
        )
    return "\n".join(lines)


def cli_main(args: List[str] = None) -> int:
    """
    CLI entry point.

    Computes the bill of materials of one point request against a catalog
    file, without persisting anything.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code: 0 on success, 1 when the point is rejected, 2 when an
        input file cannot be read or is malformed
    """
    parser = argparse.ArgumentParser(
        description="Electrical distribution point bill of materials",
        prog="gridbudget",
    )

    parser.add_argument(
        "request",
        help="Path to the point request JSON file",
    )
    parser.add_argument(
        "--catalog",
        help="Path to the catalog JSON file (defaults to storage.catalog_file)",
        default=None,
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    parsed = parser.parse_args(args)

    from .config import load_config

    config = load_config(parsed.config)

    log_level = "DEBUG" if parsed.verbose else (parsed.log_level or config.logging.level)
    setup_logging(
        level=log_level,
        log_file=parsed.log_file or config.logging.log_file,
        json_format=config.logging.json_logs,
    )

    catalog_file: Optional[str] = parsed.catalog or config.storage.catalog_file
    if not catalog_file:
        print("No catalog file given (use --catalog or storage.catalog_file)", file=sys.stderr)
        return EXIT_BAD_INPUT

    try:
        from ..points.service import PointBudgetService
        from ..stores.memory import InMemoryMaterialSink
        from ..stores.snapshot import load_catalog_snapshot, load_point_request

        try:
            stores = load_catalog_snapshot(catalog_file)
            request = load_point_request(parsed.request)
        except (OSError, ValueError) as e:
            # pydantic.ValidationError is a ValueError
            print(f"Invalid input: {e}", file=sys.stderr)
            return EXIT_BAD_INPUT

        service = PointBudgetService(
            stores.catalog,
            stores.groups,
            stores.projects,
            InMemoryMaterialSink(),
            config.engine,
        )
        result = service.compute_point_bom(request)

        if not result.ok:
            if parsed.json:
                print(json.dumps({"error": result.error.to_dict()}, indent=2))
            else:
                print(f"Error: {result.error}", file=sys.stderr)
            return EXIT_FAILED

        if parsed.json:
            print(json.dumps(result.value.to_dict(), indent=2))
        else:
            print(format_bom(result.value))
        return EXIT_OK

    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(cli_main())
