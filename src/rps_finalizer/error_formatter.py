# Area: Shared
"""Error formatting for structured task error logs."""

from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def format_error_block(
    error_type: str,
    message: str,
    game_id: Optional[int],
    slot: Optional[int],
    details: Optional[Dict[str, Any]],
) -> str:
    """Format a structured error block for the terminal and the log file."""
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        f" {error_type}",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Message:      {message}",
    ]

    if game_id is not None:
        lines.append(f" Game:         #{game_id}")
    if slot is not None:
        lines.append(f" Move slot:    {slot}")

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        lines.append(indent_json(details))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
