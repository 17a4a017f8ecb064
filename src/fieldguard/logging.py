"""Logging configuration for FieldGuard."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

from fieldguard.config import get_settings
from fieldguard.redaction import redact_secrets

# Processors shared by structlog-native and stdlib log records
_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.StackInfoRenderer(),
    structlog.dev.set_exc_info,
    structlog.processors.TimeStamper(fmt="iso"),
    redact_secrets,
]


def _formatter(renderer: structlog.types.Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging() -> None:
    """Configure structured logging."""
    settings = get_settings()

    # Set log level
    log_level = getattr(logging, str(settings.log_level).upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    # Configure structlog
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route standard library logging through the same renderers
    logging.basicConfig(format="%(message)s", level=log_level, handlers=[])
    root = logging.getLogger()
    root.setLevel(log_level)

    console_renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if settings.is_development
        else structlog.processors.JSONRenderer()
    )
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(console_renderer))
    root.addHandler(console)

    if settings.log_to_file:
        try:
            Path(settings.log_directory).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            settings.log_to_file = False
            root.warning("Could not create log directory %s: %s", settings.log_directory, exc)

    if settings.log_to_file:
        json_formatter = _formatter(structlog.processors.JSONRenderer())
        try:
            file_handler = RotatingFileHandler(
                settings.log_file_path,
                maxBytes=settings.log_file_max_bytes,
                backupCount=settings.log_file_backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(json_formatter)
            root.addHandler(file_handler)

            if settings.log_error_file_enabled:
                error_handler = RotatingFileHandler(
                    settings.error_log_file_path,
                    maxBytes=settings.log_file_max_bytes,
                    backupCount=settings.log_file_backup_count,
                    encoding="utf-8",
                )
                error_handler.setLevel(logging.WARNING)
                error_handler.setFormatter(json_formatter)
                root.addHandler(error_handler)
        except OSError as exc:
            root.warning("Could not open log file %s: %s", settings.log_file_path, exc)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)
