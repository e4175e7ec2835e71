"""Headless batch interface.

- dispatcher: Request routing
- handlers: Command handlers and registry
- responses: Standard response format helpers
- state: Engine singleton shared across requests
- stdin_loop: JSON-lines transport over stdin/stdout
"""

from lookthrough.headless.responses import error_response, success_response
from lookthrough.headless.state import get_engine, reset_state, set_engine
from lookthrough.headless.dispatcher import (
    dispatch,
    get_available_commands,
    is_command_registered,
)

__all__ = [
    # Responses
    "success_response",
    "error_response",
    # State
    "get_engine",
    "set_engine",
    "reset_state",
    # Dispatcher
    "dispatch",
    "get_available_commands",
    "is_command_registered",
]
