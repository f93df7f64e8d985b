# Area: Shared
"""
rps_finalizer._shared.logging_formatters — Logging formatters and filters
=========================================================================

Contains formatter/filter classes and the narrative mode flag/functions.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

# Flag to control narrative-only terminal output
_narrative_mode_enabled = False

# LogRecord attributes copied into the JSON line when a caller passes them via extra=
CONTEXT_FIELDS = ("game_id", "slot", "event", "error_type", "transaction_hash")


class NarrativeFilter(logging.Filter):
    """Filter that suppresses terminal logs when narrative mode is enabled.

    In narrative mode the GameLogger prints one colored line per game step
    and the standard handlers only write to the log file.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not _narrative_mode_enabled


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.COLORS.get(original, self.RESET)
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def enable_narrative_mode() -> None:
    """Enable narrative mode.

    - Standard logs are suppressed from the terminal
    - Only GameLogger lines are shown
    - File logging remains unchanged
    """
    global _narrative_mode_enabled
    _narrative_mode_enabled = True


def disable_narrative_mode() -> None:
    """Disable narrative mode (restore standard terminal logging)."""
    global _narrative_mode_enabled
    _narrative_mode_enabled = False


def is_narrative_mode_enabled() -> bool:
    """Check if narrative mode is enabled."""
    return _narrative_mode_enabled
