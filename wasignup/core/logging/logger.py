"""
Rich-based logger with WABA and user context support.

Provides context-aware logging for onboarding runs and webhook processing.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


class CompactFormatter(logging.Formatter):
    """Shortens long module names for better readability."""

    def format(self, record):
        if record.name.startswith("wasignup."):
            # wasignup.messaging.whatsapp.handlers.x -> handlers.x
            parts = record.name.split(".")
            if len(parts) > 2:
                record.name = ".".join(parts[-2:])

        return super().format(record)


_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "debug": "dim white",
    }
)
_console = Console(theme=_theme)


class ContextLogger:
    """
    Logger wrapper that adds WABA and user context to messages.

    Context is added as a message prefix so plain format strings keep working.
    """

    def __init__(
        self,
        logger: logging.Logger,
        waba_id: str | None = None,
        user_id: str | None = None,
    ):
        self.logger = logger
        self.waba_id = waba_id or "---"
        self.user_id = user_id or "---"

    def _format_message(self, message: str) -> str:
        """Add context prefix to message."""
        from .context import get_current_user_context, get_current_waba_context

        current_waba = get_current_waba_context() or self.waba_id
        current_user = get_current_user_context() or self.user_id

        if current_waba and current_waba != "---":
            if current_user and current_user != "---":
                return f"[W:{current_waba}][U:{current_user}] {message}"
            return f"[W:{current_waba}] {message}"
        elif current_user and current_user != "---":
            return f"[U:{current_user}] {message}"
        return message

    def debug(self, message: str, *args, **kwargs) -> None:
        self.logger.debug(self._format_message(message), *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self.logger.info(self._format_message(message), *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.logger.warning(self._format_message(message), *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self.logger.error(self._format_message(message), *args, **kwargs)

    def critical(self, message: str, *args, **kwargs) -> None:
        self.logger.critical(self._format_message(message), *args, **kwargs)

    def exception(self, message: str, *args, **kwargs) -> None:
        self.logger.exception(self._format_message(message), *args, **kwargs)


def setup_logging(
    *,
    level: str = "INFO",
    mode: str = "PROD",
    log_dir: str | None = None,
    console_fmt: str | None = None,
    file_fmt: str | None = None,
) -> None:
    """
    Initialize the root logger with Rich formatting.

    Parameters
    ----------
    level : str
        Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
    mode : str
        "DEV" creates daily log files + console; anything else → console only
    log_dir : str, optional
        Directory for log files (DEV mode only)
    console_fmt : str, optional
        Console format string
    file_fmt : str, optional
        File format string
    """
    lvl = level.upper()
    lvl = lvl if lvl in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"

    # RichHandler already shows level and time
    console_format = console_fmt or "[%(name)s] %(message)s"
    file_format = file_fmt or "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    rich_handler = RichHandler(
        console=_console,
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        markup=False,
    )
    rich_handler.setFormatter(CompactFormatter(console_format))

    handlers: list[logging.Handler] = [rich_handler]

    if mode.upper() == "DEV" and log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, f"wasignup_{datetime.now():%Y%m%d}.log")
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(CompactFormatter(file_format))
        handlers.append(file_handler)
        _console.print(f"[green]DEV mode:[/] console + file → {logfile}")
    else:
        _console.print(f"Logging configured for mode '{mode}'. Console only.")

    logging.basicConfig(level=lvl, handlers=handlers, force=True)

    # aiohttp access noise is not useful at INFO
    if lvl != "DEBUG":
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logging.getLogger("wasignup.setup").info(f"Logging initialized ({lvl})")


def setup_app_logging(settings=None) -> None:
    """
    Initialize application logging.

    Called once during FastAPI application startup.
    """
    if settings is None:
        from wasignup.core.config.settings import settings

    setup_logging(
        level=settings.log_level,
        mode="DEV" if settings.is_development else "PROD",
        log_dir=settings.log_dir if settings.is_development else None,
    )


def get_logger(name: str) -> ContextLogger:
    """
    Get a logger that automatically uses request context variables.

    Args:
        name: Logger name (usually __name__)

    Returns:
        ContextLogger instance with automatic context from context variables
    """
    from .context import get_current_user_context, get_current_waba_context

    base_logger = logging.getLogger(name)
    return ContextLogger(
        base_logger,
        waba_id=get_current_waba_context(),
        user_id=get_current_user_context(),
    )


def get_app_logger() -> ContextLogger:
    """Get application logger for startup, shutdown and similar events."""
    return get_logger("wasignup.app")


def get_api_logger(name: str | None = None) -> ContextLogger:
    """Get API logger for endpoints and controllers."""
    return get_logger(name or "wasignup.api")
