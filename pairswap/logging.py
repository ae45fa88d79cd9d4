"""
Logging configuration for pairswap.

Importing this module installs the loguru sinks once and exposes ``log``.
Records bound with ``SWAP_EVENT=True`` (submitted approvals and swaps) are
additionally written to ``swaps.log`` next to the main log file.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable

from loguru import logger

# Lazy import settings to avoid circular dependency
_settings = None

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
DETAIL_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
EVENT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {extra[app]} | {message}"
FALLBACK_LOG_DIR = Path("/tmp/pairswap_logs")


def _is_swap_event(record: dict[str, Any]) -> bool:
    return bool(record["extra"].get("SWAP_EVENT"))


# (file name or None for the configured LOG_FILE, level, rotation, retention, format, filter)
FILE_SINKS: tuple[tuple[str | None, str, str, str, str, Callable[[dict[str, Any]], bool] | None], ...] = (
    (None, "DEBUG", "100 MB", "30 days", DETAIL_FORMAT, None),
    ("errors.log", "ERROR", "50 MB", "90 days", DETAIL_FORMAT, None),
    ("swaps.log", "INFO", "50 MB", "365 days", EVENT_FORMAT, _is_swap_event),
)


def _get_settings():
    """Get settings with lazy loading."""
    global _settings
    if _settings is None:
        from pairswap.settings.config import settings as app_settings

        _settings = app_settings
    return _settings


def _resolve_log_path(default_path: Path) -> Path:
    try:
        default_path.parent.mkdir(parents=True, exist_ok=True)
        return default_path
    except OSError:
        fallback_dir = Path.cwd() / "logs"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        return fallback_dir / default_path.name


def _add_file_sink(path: Path, **kwargs) -> Path:
    """Add a file sink; unwritable locations fall back to ``FALLBACK_LOG_DIR``."""
    try:
        logger.add(str(path), **kwargs)
        return path
    except PermissionError:
        FALLBACK_LOG_DIR.mkdir(parents=True, exist_ok=True)
        fallback = FALLBACK_LOG_DIR / path.name
        logger.add(str(fallback), **kwargs)
        return fallback


class LoguruHandler(logging.Handler):
    """Forward stdlib logging records (web3, urllib3) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def _console_level(configured: str | None) -> str:
    # LOG_LEVEL in the process environment wins over .env (debug runs, CI)
    return (os.getenv("LOG_LEVEL") or configured or "INFO").upper()


def setup_logging():
    """Configure loguru logger with appropriate settings."""
    settings = _get_settings()

    logger.remove()
    logger.configure(extra={"app": settings.app_name})

    console_level = _console_level(settings.log_level)
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    main_path = _resolve_log_path(Path(settings.log_file))
    for file_name, level, rotation, retention, fmt, record_filter in FILE_SINKS:
        target = main_path if file_name is None else _resolve_log_path(main_path.parent / file_name)
        added = _add_file_sink(
            target,
            format=fmt,
            level=level,
            filter=record_filter,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )
        if file_name is None:
            main_path = added

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(LoguruHandler())

    logger.info(f"Logging initialized - Level: {console_level}, File: {main_path}")
    return logger


_log = None


def _get_log():
    """Get or initialize the logger."""
    global _log
    if _log is None:
        try:
            _log = setup_logging()
        except OSError as exc:
            # Unwritable log directory: keep the default stderr sink
            logger.warning(f"File logging disabled: {exc}")
            _log = logger
    return _log


log = _get_log()
