"""High-level helpers for structured activity logging."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

_ACTIVITY_LOGGER_NAME = "activity"


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError:
        return repr(value)


def _format_details(details: Mapping[str, Any]) -> str:
    lines: list[str] = []
    for key, value in details.items():
        title = key.replace("_", " ").strip() or "value"
        lines.append(f"- **{title.title()}:** {_stringify(value)}")
    return "\n".join(lines)


def format_action(
    action: str,
    details: Optional[Mapping[str, Any]] = None,
    snapshot: Optional[Mapping[str, Any]] = None,
) -> str:
    """Return the Markdown body written for one activity entry."""

    body_lines = [f"#### {action}"]
    if details:
        formatted = _format_details(details)
        if formatted:
            body_lines.append("")
            body_lines.append(formatted)
    if snapshot:
        try:
            snapshot_json = json.dumps(snapshot, ensure_ascii=False, indent=2)
        except TypeError:
            snapshot_json = json.dumps(str(snapshot), ensure_ascii=False)
        body_lines.extend(
            [
                "",
                "<details><summary>Data snapshot</summary>",
                "",
                "```json",
                snapshot_json,
                "```",
                "</details>",
            ]
        )
    return "\n".join(body_lines)


def log_user_action(
    action: str,
    *,
    details: Optional[Mapping[str, Any]] = None,
    snapshot: Optional[Mapping[str, Any]] = None,
    level: int = logging.INFO,
) -> None:
    """Log a high-level action with optional structured details."""

    logging.getLogger(_ACTIVITY_LOGGER_NAME).log(level, format_action(action, details, snapshot))
