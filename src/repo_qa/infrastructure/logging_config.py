"""Logging setup: console output plus error / combined log files."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", log_dir: str | Path | None = "logs") -> logging.Logger:
    """Configure the root logger and return the ``repo_qa`` logger.

    Console records go to stderr through a rich handler.  When *log_dir* is
    given, ``error.log`` receives ERROR and above and ``combined.log``
    receives everything at *level*; the directory is created if missing.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    console = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=numeric_level <= logging.DEBUG,
        log_time_format="[%X]",
    )
    console.setFormatter(logging.Formatter("%(message)s"))
    handlers: list[logging.Handler] = [console]

    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_formatter = logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)

        error_handler = logging.FileHandler(directory / "error.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)

        combined_handler = logging.FileHandler(directory / "combined.log", encoding="utf-8")
        combined_handler.setFormatter(file_formatter)

        handlers.extend([error_handler, combined_handler])

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    logger = logging.getLogger("repo_qa")
    logger.setLevel(numeric_level)
    return logger
