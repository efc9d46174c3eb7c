"""
Campus Records - Logging

One "campus_records" logger for the whole service. Production writes JSON
lines (one object per record, extras included); development writes short
plain lines to the console and a detailed format to LOG_FILE if set.

Request and user ids live in context vars so every line logged while
handling a request can be correlated:

    logger.log_workflow_event("certificate", cert_id, "approved", actor_id=reviewer_id)
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List
from contextvars import ContextVar

from app.core.config import settings


request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Short id for X-Request-ID"""
    return uuid.uuid4().hex[:8]


# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {
    'message', 'asctime', 'request_id', 'user_id',
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with request context and `extra=` fields"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "service": settings.APP_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        for key, value in (("request_id", get_request_id()), ("user_id", get_user_id())):
            if value:
                log_data[key] = value

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        log_data.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith('_')
        )
        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """Plain formatter that fills %(request_id)s and %(user_id)s ('-' outside a request)"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'
        return super().format(record)


class CampusRecordsLogger(logging.Logger):
    """Logger with one helper per kind of event the service emits"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            f"HTTP {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_store_call(self, operation: str, entity: str, duration_ms: float,
                       rows: int = 0, **kwargs) -> None:
        self.debug(
            f"Store {operation} on {entity} - {rows} rows ({duration_ms:.2f}ms)",
            extra={
                "event_type": "store_call",
                "store_operation": operation,
                "store_entity": entity,
                "duration_ms": duration_ms,
                "rows": rows,
                **kwargs
            }
        )

    def log_workflow_event(self, record_type: str, record_id: str, event: str,
                           actor_id: str = None, **kwargs) -> None:
        """Review decisions, submissions and other status changes"""
        self.info(
            f"{record_type} {record_id}: {event}" +
            (f" by {actor_id}" if actor_id else ""),
            extra={
                "event_type": "workflow",
                "record_type": record_type,
                "record_id": record_id,
                "workflow_event": event,
                "actor_id": actor_id,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               **kwargs) -> None:
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


PLAIN_CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"
PLAIN_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
    "%(funcName)s:%(lineno)d | %(message)s"
)


def _build_handlers(json_logs: bool) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(JSONFormatter() if json_logs else ContextualFormatter(PLAIN_CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=10 if json_logs else 5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter() if json_logs else ContextualFormatter(PLAIN_FILE_FORMAT))
        handlers.append(file_handler)

    return handlers


def setup_logging() -> CampusRecordsLogger:
    """Configure the service logger for the current ENVIRONMENT"""
    logging.setLoggerClass(CampusRecordsLogger)

    logger = logging.getLogger("campus_records")
    logger.__class__ = CampusRecordsLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    json_logs = settings.ENVIRONMENT == "production"
    logger.handlers.clear()
    for handler in _build_handlers(json_logs):
        logger.addHandler(handler)

    for noisy in ("httpx", "uvicorn.access", "sqlalchemy.engine", "botocore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(
        "Logging initialized",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "json_logging": json_logs,
            "mock_mode": settings.USE_MOCK_DATA,
        }
    )
    return logger


logger: CampusRecordsLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'CampusRecordsLogger',
]
