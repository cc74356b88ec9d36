from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from logging.config import dictConfig

from tqadb.settings import Settings, get_settings

_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_operation_context: ContextVar[str | None] = ContextVar("tqadb_operation", default=None)


def normalize_log_level(raw_level: str) -> str:
    level = raw_level.strip().upper()
    if level in _VALID_LOG_LEVELS:
        return level
    return "INFO"


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "operation": getattr(record, "operation", "-"),
            "message": record.getMessage(),
        }
        return json.dumps(payload, ensure_ascii=True)


def get_operation() -> str | None:
    return _operation_context.get()


@contextmanager
def operation_scope(operation: str) -> Iterator[None]:
    """Tag every log record emitted inside the block with ``operation``."""
    token = _operation_context.set(operation)
    try:
        yield
    finally:
        _operation_context.reset(token)


class OperationContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        operation = get_operation()
        record.operation = operation if operation else "-"
        return True


def _format_log_value(value: object) -> str:
    text = value if isinstance(value, str) else str(value)
    # Keep one record per line even when values come straight from the store.
    return text.encode("unicode_escape").decode("ascii")


def format_log_fields(**fields: object) -> str:
    parts: list[str] = []
    for key in sorted(fields):
        value = fields[key]
        if value is None:
            continue
        parts.append(f"{key}={_format_log_value(value)}")
    return " ".join(parts)


def log_with_fields(logger: logging.Logger, level: int, message: str, **fields: object) -> None:
    field_text = format_log_fields(**fields)
    if field_text:
        logger.log(level, "%s %s", message, field_text)
    else:
        logger.log(level, "%s", message)


def configure_logging(settings: Settings | None = None) -> None:
    selected_settings = settings if settings is not None else get_settings()
    level = normalize_log_level(selected_settings.log_level)
    formatter_name = "json" if selected_settings.log_json else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "operation_context": {
                    "()": "tqadb.logging_config.OperationContextFilter",
                }
            },
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] [op=%(operation)s] %(message)s",
                },
                "json": {
                    "()": "tqadb.logging_config.JsonLogFormatter",
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "filters": ["operation_context"],
                    "formatter": formatter_name,
                }
            },
            "root": {"handlers": ["default"], "level": level},
            "loggers": {
                "sqlalchemy.engine": {"level": "INFO" if selected_settings.echo_sql else "WARNING"},
            },
        }
    )
