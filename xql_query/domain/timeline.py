"""Shared timeline event helper utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured query-run timeline event.

    Args:
        stage: Protocol stage name (`time_window`, `submit`, `poll`, `stream`).
        status: Stage status marker.
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline event with UTC timestamp.
    """

    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        event_payload["details"] = dict(details)
    return event_payload
