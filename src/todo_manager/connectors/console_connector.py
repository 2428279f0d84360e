# src/todo_manager/connectors/console_connector.py

from __future__ import annotations

import logging

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("quit", "exit")


def run_console_loop(state: AppState) -> None:
    """
    Read one command per line until quit/exit, EOF or Ctrl+C.

    Nothing a single command does can end the loop: domain errors come back as
    messages from the registry, anything else is logged and reported here.
    """
    app_name = str(getattr(state.settings, "app_name", "todo"))
    logger.info("Console loop started (tasks=%d).", len(state.manager))

    print(f"\nWelcome to {app_name}!")
    print("Type 'help' for available commands.\n")

    load_error = state.manager.load_error
    if load_error is not None:
        print(f"Warning: {load_error}. Starting fresh.")

    def emit(text: str) -> None:
        print(text, flush=True)

    while True:
        try:
            user_input = state.prompt("todo> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            print()
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except (EOFError, KeyboardInterrupt):
            # Input closed in the middle of an interactive prompt.
            logger.info("Input interrupted during command %r.", user_input)
            print("\nCancelled.")
            continue
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(response)

    print("Goodbye! Your tasks have been saved.")
    logger.info("Console loop finished.")
