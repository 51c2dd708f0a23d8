"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from structlog.contextvars import (
    bind_contextvars,
    bound_contextvars,
    clear_contextvars,
    merge_contextvars,
)

if TYPE_CHECKING:
    from cv_formatter_core.config.settings import Settings

_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "instructor", "PIL", "pytesseract")


def configure_logging(settings: Settings) -> None:
    """Configure structlog with JSON or console rendering.

    Sets up shared processors, routes stdlib logging through structlog,
    and configures the output format based on settings.
    """
    shared_processors: list[structlog.types.Processor] = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    level = _resolve_level(settings.log_level)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Quiet noisy third-party loggers
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    # pdfminer logs every malformed object at WARNING
    logging.getLogger("pdfminer").setLevel(max(level, logging.ERROR))


def bind_document_context(document_id: str, **extra: object) -> None:
    """Bind document_id (and any extra keys) to all subsequent log entries."""
    bind_contextvars(document_id=document_id, **extra)


def bind_extraction_context(source_format: str, page_count: int, used_ocr: bool) -> None:
    """Tag later entries of this document with what the extractor found."""
    bind_contextvars(source_format=source_format, page_count=page_count, used_ocr=used_ocr)


@contextmanager
def chunk_log_context(chunk_index: int) -> Iterator[None]:
    """Bind chunk_index for the duration of one chunk's structuring.

    Chunks run as separate tasks, so the binding never leaks between them.
    """
    with bound_contextvars(chunk_index=chunk_index):
        yield


def clear_document_context() -> None:
    """Clear all bound context variables."""
    clear_contextvars()


def _resolve_level(level_name: str) -> int:
    """Convert a level name string to a logging level int."""
    mapping: dict[str, int] = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(level_name.upper(), logging.INFO)
