# Area: Shared
"""
rps_finalizer._shared.logging_config — Structured logging setup
===============================================================

Configures dual logging: terminal (colored) + file (JSON lines).
Provides task-error logging.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .logging_formatters import JSONFormatter, NarrativeFilter, TerminalFormatter

if TYPE_CHECKING:
    from ..errors import RPSFinalizerError

# Package logger
logger = logging.getLogger("rps_finalizer")


def setup_logging(
    log_file_path: Optional[str] = "rps_finalizer.log",
    level: int = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str, optional
        Path to the JSON-lines log file; None disables the file handler.
    level : int
        Logging level. Defaults to INFO.
    """
    pkg_logger = logging.getLogger("rps_finalizer")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    terminal_handler.addFilter(NarrativeFilter())
    pkg_logger.addHandler(terminal_handler)

    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning(f"Could not create log file: {e}")

    pkg_logger.propagate = False


def log_task_error(error: "RPSFinalizerError", log: Optional[logging.Logger] = None) -> None:
    """
    Log a failed per-game task.

    The structured block goes to the log at DEBUG; the one-line summary at
    ERROR carries game id and error type as record fields.
    """
    log = log or logger
    log.error(
        "Game #%s: %s: %s",
        error.game_id if error.game_id is not None else "?",
        error.__class__.__name__,
        error,
        extra={
            "game_id": error.game_id,
            "slot": error.slot,
            "error_type": error.error_type,
        },
    )
    log.debug(error.format_error_log())
