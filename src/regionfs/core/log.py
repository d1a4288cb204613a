"""Logging setup for the server process."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from regionfs.core.settings import Settings

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger("regionfs")
    root.setLevel(settings.log_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # stdout belongs to the MCP stdio transport
    console_handler = RichHandler(
        console=Console(stderr=True), show_path=False, rich_tracebacks=True
    )
    console_handler.setLevel(settings.log_level)
    root.addHandler(console_handler)

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root.addHandler(file_handler)
    root.propagate = False
