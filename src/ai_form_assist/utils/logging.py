"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any, Dict, List, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

from ai_form_assist.config import settings


def _resolve_level(level: Optional[str]) -> int:
    level_name = (level or settings.log_level).upper()
    resolved = logging.getLevelName(level_name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return resolved


def _processors(debug: bool) -> List[Any]:
    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="ISO"),
        renderer,
    ]


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structured logging with rich output.

    Log lines go to stderr so that command output on stdout (reports,
    filled documents) stays clean.

    Args:
        level: Level name overriding ``settings.log_level``

    Raises:
        ValueError: If the level name is not a logging level
    """
    numeric_level = _resolve_level(level)

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=True)],
        force=True,
    )

    structlog.configure(
        processors=_processors(settings.debug),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def preview_text(text: str, limit: int = 100) -> str:
    """Shorten text for log output, marking truncation with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def log_fill_cycle(stage: str, **fields: Any) -> Dict[str, Any]:
    """Event fields tagging a fill cycle stage; ``None`` values are dropped."""
    return {"stage": stage, **{k: v for k, v in fields.items() if v is not None}}
