"""CLI application state and the generic numbered-menu loop."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any

from scripts.cli.menu import option_range, print_menu
from scripts.cli.util import prompt
from warehouse_kernel.services.coordinator import MainThreadDispatcher, WarehouseCoordinator

FAILED = object()


@dataclass
class CliApp:
    """Coordinator plus the dispatcher the menu thread drains."""

    coordinator: WarehouseCoordinator
    dispatcher: MainThreadDispatcher

    def call(self, start: Callable[..., Future], *args: Any) -> Any:
        """
        Start a coordinator operation and wait for it.

        Returns the operation's result, or FAILED once the error callback has
        printed the failure.
        """
        future = self.dispatcher.wait_for(start(*args))
        if future.exception() is not None:
            return FAILED
        return future.result()


def run_menu(title: str, options, handlers: dict[str, Callable[[], None]]) -> None:
    """Show ``options`` until the user picks 0."""
    while True:
        print_menu(title, options)
        choice = prompt(f"Select option {option_range(options)}")
        if choice == "0":
            return
        handler = handlers.get(choice)
        if handler is None:
            print(f"\n  Invalid option '{choice}'.")
            continue
        handler()
