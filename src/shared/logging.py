"""Logging for Baxoq.Store.

Modules log through ``structlog.get_logger(__name__)``. Each domain module calls
``configure_logging()`` on import; only the first call has any effect. It
routes structlog through the standard library to the console, a rotating log
file and a rotating errors-only file. Output is colored in development and
JSON in production.

The web app wraps each request in ``request_context`` so every line logged
while serving it names the domain and path.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

from shared.config import ENVIRONMENT

_JSON_ENVIRONMENTS = {"production", "prod", "staging"}
_DEFAULT_LEVELS = {"development": "DEBUG", "test": "WARNING"}
_QUIET_LOGGERS = {
    "protean": logging.WARNING,
    "passlib": logging.ERROR,
    "asyncio": logging.WARNING,
}
_MAX_LOG_BYTES = 10 * 1024 * 1024

_configured = False


def log_level() -> str:
    """``LOG_LEVEL`` if set, else DEBUG in development, WARNING under test, INFO elsewhere."""
    return os.getenv("LOG_LEVEL", _DEFAULT_LEVELS.get(ENVIRONMENT, "INFO")).upper()


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _renderer():
    if ENVIRONMENT in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def configure_logging(level: str | None = None, log_dir: str = "logs", log_file_prefix: str = "baxoq") -> None:
    global _configured
    if _configured:
        return

    level = level or log_level()
    directory = Path(log_dir)
    directory.mkdir(exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [
        console,
        _rotating_file(directory / f"{log_file_prefix}.log", level),
        _rotating_file(directory / f"{log_file_prefix}_error.log", logging.ERROR),
    ]
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def request_context(domain: str, path: str):
    """Context manager binding ``domain`` and ``path`` to every log line inside it."""
    return structlog.contextvars.bound_contextvars(domain=domain, path=path)
