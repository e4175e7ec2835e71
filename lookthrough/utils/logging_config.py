import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_console = Console(stderr=True)


class EngineFormatter(logging.Formatter):
    PREFIX = "LOOKTHROUGH"

    def format(self, record: logging.LogRecord) -> str:
        message = f"{self.PREFIX} {record.name}: {record.getMessage()}"

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            if record.exc_text:
                message += f"\n{record.exc_text}"

        return message


def configure_root_logger(
    level: int = logging.INFO, console: Optional[Console] = None
) -> None:
    root = logging.getLogger()
    root.setLevel(level)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = RichHandler(
        console=console or _console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(EngineFormatter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Returns a named logger.
    Assumes configure_root_logger() has been called.
    """
    return logging.getLogger(name)
