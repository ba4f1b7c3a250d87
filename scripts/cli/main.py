"""CLI main loop: settings, logging, database and menu dispatch."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from scripts.cli.app import CliApp
from scripts.cli.menu import MAIN_MENU, option_range, print_menu
from scripts.cli.util import prompt
from scripts.cli.views import show_inventory_menu, show_orders_menu, show_shipments_menu
from warehouse_config import WarehouseSettings, get_settings
from warehouse_kernel.db.engine import Database
from warehouse_kernel.exceptions import DatabaseConnectionError
from warehouse_kernel.logging_config import configure_logging, get_logger
from warehouse_kernel.services.coordinator import (
    MainThreadDispatcher,
    WarehouseCoordinator,
    root_cause_message,
)

logger = get_logger("cli")


class _FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit so the log file updates immediately."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="warehouse-cli",
        description="Interactive warehouse management console.",
    )
    parser.add_argument("--config", help="YAML settings file layered over the defaults")
    parser.add_argument("--database", help="SQLite database file (overrides settings)")
    parser.add_argument("--log-level", help="Log level (overrides settings)")
    return parser


def load_settings(args: argparse.Namespace) -> WarehouseSettings:
    settings = get_settings(args.config)
    overrides = {}
    if args.database:
        overrides["database_path"] = args.database
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return dataclasses.replace(settings, **overrides) if overrides else settings


def setup_logging(settings: WarehouseSettings) -> None:
    """Log to the configured file, or only warnings to stderr so menus stay readable."""
    if settings.log_file:
        handler: logging.Handler = _FlushingFileHandler(settings.log_file, mode="a")
        configure_logging(level=settings.log_level, handler=handler)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
        configure_logging(level=settings.log_level, handler=handler)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args)
    except (OSError, ValueError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logging(settings)
    logger.info(
        "cli_starting",
        extra={"database_path": settings.database_path, "log_level": settings.log_level},
    )

    db = Database.from_settings(settings)
    try:
        db.ensure_schema()
    except DatabaseConnectionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        db.dispose()
        return 1

    dispatcher = MainThreadDispatcher()
    coordinator = WarehouseCoordinator.from_database(db, settings, dispatch=dispatcher)
    coordinator.set_event_handlers(
        on_error=lambda message: print(f"  Error: {message}"),
        on_success=lambda message: print(f"  {message}"),
        on_progress=logger.debug,
    )
    app = CliApp(coordinator, dispatcher)
    handlers = {
        "1": show_inventory_menu,
        "2": show_orders_menu,
        "3": show_shipments_menu,
    }

    print(f"\n  Warehouse database: {settings.database_path}")
    try:
        while True:
            print_menu("WAREHOUSE MANAGEMENT", MAIN_MENU)
            choice = prompt(f"Select option {option_range(MAIN_MENU)}")
            if choice == "0":
                print("\n  Goodbye.\n")
                break
            handler = handlers.get(choice)
            if handler is None:
                print(f"\n  Invalid option '{choice}'.")
                continue
            try:
                handler(app)
            except EOFError:
                raise
            except Exception as exc:
                logger.exception("menu_action_failed", extra={"choice": choice})
                print(f"  Error: {root_cause_message(exc)}")
    except (EOFError, KeyboardInterrupt):
        print("\n")
    finally:
        coordinator.shutdown()
        db.dispose()
        logger.info("cli_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
