"""
Structured logging for the NiceNote backend, CLI and editor client.

Every process calls setup_logging() once at startup; modules then obtain
loggers through get_logger(__name__). Defaults come from
config/settings/logging.yaml and any keyword passed to setup_logging()
wins over the file.

Records carry timestamp, level, logger, event, func_name, lineno and
source. HTTP requests additionally bind request_id and frontend through
structlog contextvars (see middleware.py). Records logged without a
source are stamped "unknown".

The optional file handler writes one JSON object per line to a single
rotating file (logs/system.jsonl by default); filter it on 'source'.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from nicenote.backend.core.config import find_project_root, load_yaml_config

VALID_SOURCES = frozenset({"web", "cli", "client", "api", "internal", "unknown"})
"""Values accepted for the 'source' field. Callers set it explicitly."""

# Third-party loggers that are too chatty at INFO.
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "aiosqlite")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Read logging.yaml once and cache it. Raises FileNotFoundError if absent."""
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _stamp_source(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("source", "unknown")
    return event_dict


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        _stamp_source,
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _rotating_file(file_config: dict[str, Any], formatter: logging.Formatter) -> logging.Handler:
    path = _resolve_log_path(file_config["path"])
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=file_config["max_bytes"],
        backupCount=file_config["backup_count"],
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Route stdlib and structlog records through one set of handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        format_type: 'console' for colored key=value lines, 'json' otherwise.
        enable_console: Attach a stdout handler.
        enable_file_logging: Attach the rotating JSONL file handler.

    Unset arguments fall back to logging.yaml.
    """
    config = _load_logging_config()
    handlers = config["handlers"]

    if level is None:
        level = config["level"]
    if format_type is None:
        format_type = config["format"]
    if enable_console is None:
        enable_console = handlers["console"]["enabled"]
    if enable_file_logging is None:
        enable_file_logging = handlers["file"]["enabled"]

    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), pre_chain)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for existing in list(root.handlers):
        root.removeHandler(existing)

    if enable_console:
        stream = logging.StreamHandler(sys.stdout)
        if format_type == "console":
            stream.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=True), pre_chain))
        else:
            stream.setFormatter(json_formatter)
        root.addHandler(stream)

    if enable_file_logging:
        root.addHandler(_rotating_file(handlers["file"], json_formatter))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log outside a request context with an explicit source.

        log_with_source(logger, "client", "info", "Note saved", note_id="abc")

    An unknown level name raises AttributeError.
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
