# Area: Shared
"""
rps_finalizer._shared.game_logger — Per-game narrative output
=============================================================

One colored terminal line per step of a game's handling, for operators
watching the process:

    12:01:07 | GAME #7      | RECEIVED  | NeedsFinalization       | block 5120331
    12:01:09 | GAME #7      | DECRYPTED | slot 1                  | Rock
    12:01:12 | GAME #7      | RESULT    | Player 2                | Rock vs Paper
    12:01:30 | GAME #7      | SUBMITTED | finalizeResult          | tx 0x9c1e...

Lines are printed only when narrative mode is enabled.
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Optional, TextIO

from .logging_formatters import is_narrative_mode_enabled

# ══════════════════════════════════════════════════════════════
# ANSI COLOR CODES
# ══════════════════════════════════════════════════════════════

GREEN = "\033[32m"         # Ledger events and confirmed writes
ORANGE = "\033[38;5;208m"  # Gateway round trips
RED = "\033[31m"           # Failures
RESET = "\033[0m"


class GameLogger:
    """Narrative logger for game handling steps."""

    def __init__(self, stream: Optional[TextIO] = None, force: bool = False):
        self._stream = stream
        self.force = force

    @property
    def enabled(self) -> bool:
        return self.force or is_narrative_mode_enabled()

    def _now(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _emit(self, color: str, game_id: int, step: str, subject: str, detail: str = "",
              stream: Optional[TextIO] = None) -> None:
        if not self.enabled:
            return
        line = (
            f"{color}{self._now()} | GAME #{game_id:<6} | {step:9} | "
            f"{subject:23} | {detail}{RESET}"
        )
        print(line, file=stream or self._stream or sys.stdout)

    def log_received(self, game_id: int, event_name: str, block_number: Optional[int] = None) -> None:
        detail = f"block {block_number}" if block_number is not None else ""
        self._emit(GREEN, game_id, "RECEIVED", event_name, detail)

    def log_skipped(self, game_id: int, reason: str) -> None:
        self._emit(GREEN, game_id, "SKIPPED", reason)

    def log_decrypted(self, game_id: int, slot: int, label: str) -> None:
        self._emit(ORANGE, game_id, "DECRYPTED", f"slot {slot}", label)

    def log_result(self, game_id: int, outcome_label: str, detail: str = "") -> None:
        self._emit(GREEN, game_id, "RESULT", outcome_label, detail)

    def log_sent(self, game_id: int, method: str, tx_hash: Optional[str] = None) -> None:
        self._emit(GREEN, game_id, "SUBMITTED", method, f"tx {tx_hash}" if tx_hash else "")

    def log_failed(self, game_id: int, description: str) -> None:
        self._emit(RED, game_id, "FAILED", description[:23], description[23:].strip(),
                   stream=self._stream or sys.stderr)
