# 📄 File: app/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Sets up the catalog's logging so every line says which catalog question it belongs to
# (and in which language), and keeps a record of how long database and cache calls take.

# 🧪 Purpose (Technical Summary):
# Structured logging with JSON formatting (python-json-logger). log_context() binds the
# operation name, a per-operation id and the requested locale into contextvars that a
# logging.Filter stamps onto every record; PerformanceLogger emits store and cache timings.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: per-operation context tracking

# 🔄 Connected Modules / Calls From:
# Used by: CatalogEngine (operation context), repositories (query timing),
# cache layer (hit/miss timings, masked failures)

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from app.shared.config.settings import get_settings

operation_id_var: ContextVar[str] = ContextVar('operation_id', default='')
operation_var: ContextVar[str] = ContextVar('operation', default='')
locale_var: ContextVar[str] = ContextVar('locale', default='')

SERVICE_NAME = 'plant-catalog'
CONTEXT_FIELDS = ('operation_id', 'operation', 'locale')

_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}


def format_locale(language_id: Optional[str], country_id: Optional[str] = None) -> str:
    """'es' + 'MX' -> 'es-MX'; no language -> ''."""
    if not language_id:
        return ''
    return f"{language_id}-{country_id}" if country_id else language_id


class CatalogContextFilter(logging.Filter):
    """
    Stamps the bound operation context onto every record
    and flattens `extra_fields` into record attributes.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = SERVICE_NAME
        record.operation_id = operation_id_var.get()
        record.operation = operation_var.get()
        record.locale = locale_var.get()

        for key, value in (getattr(record, 'extra_fields', None) or {}).items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class CatalogJSONFormatter(JsonFormatter):
    """One JSON object per record; empty context fields are left out."""

    def __init__(self):
        super().__init__(
            '%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={'levelname': 'level', 'name': 'logger', 'asctime': 'timestamp'},
            json_ensure_ascii=False,
        )

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record.pop('extra_fields', None)
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, '')
            if value:
                log_record[key] = value
            else:
                log_record.pop(key, None)


class PerformanceLogger:
    """Store and cache timings, logged at DEBUG."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_database_query(
        self,
        operation: str,
        table: str,
        duration_ms: float,
        rows: Optional[int] = None,
    ):
        extra_fields: Dict[str, Any] = {
            'event_type': 'database_query',
            'query': operation,
            'table': table,
            'duration_ms': round(duration_ms, 3),
        }
        if rows is not None:
            extra_fields['rows'] = rows

        self.logger.debug(
            f"DB {operation} on {table} - {duration_ms:.2f}ms",
            extra={'extra_fields': extra_fields}
        )

    def log_cache_operation(
        self,
        operation: str,
        cache_type: str,
        key: str,
        hit: Optional[bool] = None,
        duration_ms: Optional[float] = None,
    ):
        extra_fields: Dict[str, Any] = {
            'event_type': 'cache_operation',
            'cache_operation': operation,
            'cache_type': cache_type,
            'cache_key': key,
        }
        if hit is not None:
            extra_fields['cache_hit'] = hit
        if duration_ms is not None:
            extra_fields['duration_ms'] = round(duration_ms, 3)

        outcome = '' if hit is None else (' hit' if hit else ' miss')
        self.logger.debug(
            f"Cache {operation}{outcome} {key}",
            extra={'extra_fields': extra_fields}
        )


class StructuredLogger:
    """
    Wraps a stdlib logger: keyword arguments become structured fields,
    and `performance` carries the timing channel.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.performance = PerformanceLogger(self.logger)

    def warning(self, message: str, **fields: Any):
        self.logger.warning(message, extra={'extra_fields': fields} if fields else None)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream=None,
) -> logging.Logger:
    """
    Configure the root logger once per process.

    Args:
        log_level: Override for LOG_LEVEL
        log_format: 'json' or 'text', override for LOG_FORMAT
        stream: Output stream (stdout when omitted)

    Returns:
        The catalog's root logger
    """
    global _logging_configured

    logger = logging.getLogger('app')
    if _logging_configured:
        return logger

    settings = get_settings()
    log_level = (log_level or settings.LOG_LEVEL).upper()
    log_format = (log_format or settings.LOG_FORMAT).lower()

    if log_format == 'json':
        formatter = CatalogJSONFormatter()
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - [%(operation)s] %(message)s')

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(CatalogContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )

    _logging_configured = True
    return logger


def get_logger(name: str) -> StructuredLogger:
    """Get (and memoize) a StructuredLogger for a module name."""
    if name not in _loggers_cache:
        _loggers_cache[name] = StructuredLogger(name)
    return _loggers_cache[name]


@contextmanager
def log_context(
    operation: str,
    language_id: Optional[str] = None,
    country_id: Optional[str] = None,
) -> Iterator[str]:
    """
    Bind one catalog operation to every log line emitted inside the block.

    Nested blocks (a cached read calling the store) keep the outer operation id.

    Yields:
        The operation id
    """
    operation_id = operation_id_var.get() or uuid4().hex
    tokens = [
        (operation_id_var, operation_id_var.set(operation_id)),
        (operation_var, operation_var.set(operation)),
        (locale_var, locale_var.set(format_locale(language_id, country_id))),
    ]
    try:
        yield operation_id
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
