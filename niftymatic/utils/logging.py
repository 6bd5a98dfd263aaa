"""
Package-level logging configuration.

* Rich console output (colourised, nicely formatted).
* Rotating **JSON** log file in ``$NIFTYMATIC_LOG_DIR`` when set, otherwise
  in ``<log_root>/logs`` (the CLI passes the configured base directory).
* Optional plain-text mirror controlled via ``--save-logfile`` on the CLI.

External tool output is logged at DEBUG level line by line, so ``--debug``
shows long reconstructions as they progress.

The public helper :func:`setup_logging` wires everything and should be the
sole entry-point used by the CLI.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

import structlog
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

__all__ = ["setup_logging", "log_directory"]

LOG_FILENAME = "niftymatic.log"


def log_directory(log_root: Path | None) -> Path:
    """Return the folder receiving the JSON log.

    Args:
        log_root: Folder under which ``logs/`` is created. ``None`` falls
            back to the package-local ``logs/`` folder.
    """
    env_dir = os.environ.get("NIFTYMATIC_LOG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    if log_root is not None:
        return log_root / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def _json_file_handler(log_root: Path | None, level: int) -> logging.Handler:
    """Return a rotating file handler for the JSON event stream."""
    logdir = log_directory(log_root)
    logdir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=logdir / LOG_FILENAME,
        maxBytes=5_000_000,  # ~5 MB before rollover
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _plain_text_file_handler(path: Optional[Path], level: int) -> logging.Handler | None:
    """Return a plain-text file handler or *None* when *path* is *None*."""
    if path is None:
        return None

    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    atexit.register(handler.close)
    return handler


def setup_logging(
    *,
    log_root: Path | None = None,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
) -> None:
    """Configure rich console logging and file mirrors.

    Args:
        log_root: Folder whose ``logs/`` sub-folder receives the JSON log.
        verbose: Emit INFO-level messages to the console.
        debug: Emit DEBUG-level messages, including every line of external
            tool output.
        extra_text_log: Optional path for a plain-text mirror of console
            output.
    """
    console_lvl = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    file_lvl = logging.DEBUG if debug else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            level=console_lvl,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
        ),
        _json_file_handler(log_root, file_lvl),
    ]

    txt_handler = _plain_text_file_handler(extra_text_log, console_lvl)
    if txt_handler:
        handlers.append(txt_handler)

    # Root logger stays at DEBUG; handlers filter. ``force`` lets repeated
    # CLI invocations in one process replace earlier handlers.
    logging.basicConfig(
        level=logging.DEBUG,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            (
                StructlogConsoleRenderer()
                if verbose or debug
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min(console_lvl, file_lvl)),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )
