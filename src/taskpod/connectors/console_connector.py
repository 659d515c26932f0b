# src/taskpod/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[1A\033[2K\r")
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        else:
            print(line)
    except Exception:
        print(line)


def _print_ts(text: str) -> None:
    ts = _ts_local()
    lines = text.splitlines() or [""]
    for i, line in enumerate(lines):
        # keep nice alignment for multi-line command output
        prefix = f"[{ts}] " if i == 0 else " " * (len(ts) + 3)
        print(prefix + line)


class ConsoleNotifier:
    """Notifier that prints one timestamped line per notification."""

    def success(self, text: str) -> None:
        print(f"[{_ts_local()}] [OK] {text}", flush=True)

    def info(self, text: str) -> None:
        print(f"[{_ts_local()}] [INFO] {text}", flush=True)

    def error(self, text: str) -> None:
        print(f"[{_ts_local()}] [ERROR] {text}", flush=True)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (service=%s).", getattr(state.settings, "api_base_url", "?"))
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    app_name = str(getattr(state.settings, "app_name", "taskpod"))

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (e.g., remote execution)
        print(f"[{_ts_local()}] {text}", flush=True)

    # Initial load, like opening the task page.
    _print_ts(await command_registry.handle(state, "/list", emit=emit) or "")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, f"{app_name}> ")).strip()
            _rewrite_prev_line(f"[{_ts_local()}] {app_name}> {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = await command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is None:
            _print_ts("Not a command. Use /help to list available commands.")
            continue

        _print_ts(cmd_response)

    logger.info("Console connector finished.")
