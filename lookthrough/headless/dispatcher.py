"""Command Dispatcher.

Routes incoming batch requests to the appropriate handler functions.
Handles both sync and async handlers transparently.
"""

import inspect
from typing import Any

from lookthrough.headless.handlers import HANDLER_REGISTRY
from lookthrough.headless.responses import error_response
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


async def dispatch(cmd: dict[str, Any]) -> dict[str, Any]:
    """Dispatch a request to its handler.

    Args:
        cmd: Request dict with 'command', 'id', and 'payload' keys.

    Returns:
        Response dict:
        - Success: {"id": cmd_id, "status": "success", "data": {...}}
        - Error: {"id": cmd_id, "status": "error", "error": {"code": "...", "message": "..."}}

    Example:
        >>> await dispatch({"command": "clear_caches", "id": 1, "payload": {}})
        {"id": 1, "status": "success", "data": {"removed": {...}}}
    """
    command = cmd.get("command", "")
    cmd_id = cmd.get("id", 0)
    payload = cmd.get("payload")
    if payload is None:
        payload = {}

    handler = HANDLER_REGISTRY.get(command)

    if handler is None:
        logger.warning(f"Unknown command received: {command}")
        return error_response(
            cmd_id,
            "UNKNOWN_COMMAND",
            f"Unknown command: {command}",
        )

    if not isinstance(payload, dict):
        return error_response(cmd_id, "INVALID_PARAMS", "payload must be an object")

    try:
        if inspect.iscoroutinefunction(handler):
            return await handler(cmd_id, payload)
        else:
            return handler(cmd_id, payload)
    except Exception as e:
        logger.error(f"Handler error for '{command}': {e}", exc_info=True)
        return error_response(cmd_id, "HANDLER_ERROR", str(e))


def get_available_commands() -> list[str]:
    """Sorted list of command names."""
    return sorted(HANDLER_REGISTRY.keys())


def is_command_registered(command: str) -> bool:
    return command in HANDLER_REGISTRY
