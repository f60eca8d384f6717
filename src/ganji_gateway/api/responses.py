"""Response envelope shared by every JSON route.

Success: ``{"success": true, "data": ..., "timestamp": ...}``
Failure: ``{"success": false, "error": ..., "code": ..., "timestamp": ...}``
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi.responses import JSONResponse


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def envelope(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data, "timestamp": utc_timestamp()}


def error_response(
    status_code: int,
    message: str,
    *,
    code: str | None = None,
    details: Any = None,
) -> JSONResponse:
    """Build a ``success: false`` envelope with the given status."""
    content: dict[str, Any] = {"success": False, "error": message}
    if code:
        content["code"] = code
    if details is not None:
        content["details"] = details
    content["timestamp"] = utc_timestamp()
    return JSONResponse(status_code=status_code, content=content)
