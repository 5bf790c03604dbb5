"""Error message extraction from remote API responses."""

from __future__ import annotations

import json
from typing import Any


def parse_json_body(body: str | bytes | None) -> dict[str, Any] | None:
    """Parse a response body as a JSON object, or None when it is not one."""
    if not body:
        return None
    try:
        data = json.loads(body)
    except (ValueError, TypeError):
        return None
    return data if isinstance(data, dict) else None


def extract_batch_error_message(
    body: dict[str, Any] | None,
    status_code: int,
    reason: str | None = None,
) -> str:
    """Pick the most specific human readable failure message.

    Fallback order: top-level "error", then nested "status.message",
    then the HTTP status line.
    """
    if body:
        error = body.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()

        status = body.get("status")
        if isinstance(status, dict):
            message = status.get("message")
            if isinstance(message, str) and message.strip():
                return message.strip()

    if reason:
        return f"HTTP {status_code} {reason}"
    return f"HTTP {status_code}"


def extract_token_error_message(
    body: dict[str, Any] | None,
    status_code: int,
    reason: str | None = None,
) -> str:
    """Failure cause for a rejected credential exchange."""
    if body:
        description = body.get("error_description")
        if isinstance(description, str) and description.strip():
            return description.strip()
        error = body.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()
    return reason or f"HTTP {status_code}"
