import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from configs import app_config

# Id of the execution in flight, set by TransportExecutor.execute
trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

# Loggers that repeat what the executor already logs per request
QUIET_LOGGERS = ("httpx", "httpcore")


def trace_id_generator() -> str:
    return uuid.uuid4().hex


def _file_handler(log_file: str) -> logging.Handler:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    return RotatingFileHandler(
        filename=log_file,
        maxBytes=app_config.LOG_FILE_MAX_SIZE * 1024 * 1024,
        backupCount=app_config.LOG_FILE_BACKUP_COUNT,
    )


def _tz_converter(log_tz: str):
    import pytz

    timezone = pytz.timezone(log_tz)

    def time_converter(seconds):
        return datetime.fromtimestamp(seconds, tz=timezone).timetuple()

    return time_converter


def init_app() -> None:
    """Route fetch logs to stdout, and to a rotating file when ``LOG_FILE`` is set.

    Called by ``app_factory.create_client``. Library users that configure
    logging themselves can skip it; the trace id still reaches any handler
    that carries a ``TraceIdFilter``.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if app_config.LOG_FILE:
        handlers.insert(0, _file_handler(app_config.LOG_FILE))

    formatter = TraceIdFormatter(app_config.LOG_FORMAT, app_config.LOG_DATEFORMAT)
    if app_config.LOG_TZ:
        formatter.converter = _tz_converter(app_config.LOG_TZ)
    for handler in handlers:
        handler.addFilter(TraceIdFilter())
        handler.setFormatter(formatter)

    logging.basicConfig(level=app_config.LOG_LEVEL, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class TraceIdFilter(logging.Filter):
    # Records emitted outside an execution get an empty id
    def filter(self, record):
        record.trace_id = trace_id_var.get() or ""
        return True


class TraceIdFormatter(logging.Formatter):
    def format(self, record):
        if not hasattr(record, "trace_id"):
            record.trace_id = ""
        return super().format(record)
