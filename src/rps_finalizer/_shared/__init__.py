# Area: Shared
"""
Shared utilities used by the orchestrator, the agent and the runner.

This package contains:
- Logging configuration (terminal + JSON file)
- Formatters and the narrative mode flag
- The per-game narrative logger
"""

from .game_logger import GameLogger
from .logging_config import log_task_error, setup_logging
from .logging_formatters import (
    disable_narrative_mode,
    enable_narrative_mode,
    is_narrative_mode_enabled,
)

__all__ = [
    "GameLogger",
    "setup_logging",
    "log_task_error",
    "enable_narrative_mode",
    "disable_narrative_mode",
    "is_narrative_mode_enabled",
]
