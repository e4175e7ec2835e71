"""Standard batch response helpers.

Response Format:
    Success: {"id": cmd_id, "status": "success", "data": {...}}
    Error:   {"id": cmd_id, "status": "error", "error": {"code": "...", "message": "..."}}
"""

from typing import Any


def success_response(cmd_id: Any, data: dict[str, Any]) -> dict[str, Any]:
    """Create a standard success response.

    Example:
        >>> success_response(1, {"removed": 3})
        {"id": 1, "status": "success", "data": {"removed": 3}}
    """
    return {
        "id": cmd_id,
        "status": "success",
        "data": data,
    }


def error_response(cmd_id: Any, code: str, message: str) -> dict[str, Any]:
    """Create a standard error response.

    Args:
        cmd_id: Request identifier for response correlation.
        code: Error code (e.g., "UNKNOWN_COMMAND", "INVALID_PARAMS").
        message: Human-readable error message.
    """
    return {
        "id": cmd_id,
        "status": "error",
        "error": {
            "code": code,
            "message": message,
        },
    }
