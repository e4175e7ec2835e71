"""Stdin/Stdout Transport.

Reads one JSON request per line from stdin, dispatches it and writes one
JSON response per line to stdout. Logs go to stderr.
"""

import asyncio
import json
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TextIO

from lookthrough import __version__
from lookthrough.headless.dispatcher import dispatch
from lookthrough.utils.logging_config import configure_root_logger, get_logger

logger = get_logger(__name__)


def _emit(response: dict[str, Any], out: TextIO) -> None:
    out.write(json.dumps(response) + "\n")
    out.flush()


async def run_stdin_loop(stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    """Run the request loop until stdin closes.

    Protocol:
        1. On startup, emits a ready signal: {"status": "ready", "version": "...", "pid": ...}
        2. Reads one JSON request per line
        3. Writes one JSON response per request
    """
    _emit({"status": "ready", "version": __version__, "pid": os.getpid()}, stdout)
    logger.info("Stdin loop started")

    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="stdin")

    try:
        while True:
            line = await loop.run_in_executor(executor, stdin.readline)

            if not line:
                logger.info("Stdin closed, shutting down")
                break

            line = line.strip()
            if not line:
                continue

            try:
                cmd = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON received: {e}")
                _emit(
                    {
                        "id": 0,
                        "status": "error",
                        "error": {"code": "INVALID_JSON", "message": f"Failed to parse JSON: {e}"},
                    },
                    stdout,
                )
                continue

            if not isinstance(cmd, dict):
                _emit(
                    {
                        "id": 0,
                        "status": "error",
                        "error": {"code": "INVALID_PARAMS", "message": "Request must be an object"},
                    },
                    stdout,
                )
                continue

            _emit(await dispatch(cmd), stdout)
    finally:
        executor.shutdown(wait=False)
        logger.info("Stdin loop terminated")


def main() -> None:
    """Console entry point."""
    configure_root_logger()
    try:
        asyncio.run(run_stdin_loop())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt, shutting down")


if __name__ == "__main__":
    main()
