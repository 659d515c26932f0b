# src/taskpod/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the console readable: taskpod logs pass, per-request lines only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith("taskpod."):
            # httpx logs every request at INFO.
            return record.levelno >= logging.ERROR
        if record.name == "taskpod.tasks.task_client":
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpod",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """Filtered stderr output plus a full log at <log_dir>/taskpod.log. Call once at startup."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())

    logfile = logging.FileHandler(log_dir / "taskpod.log", encoding="utf-8")
    logfile.setLevel(file_level)
    logfile.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(console)
    root.addHandler(logfile)
