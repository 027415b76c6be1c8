from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger as loguru_logger
from opentelemetry import trace


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger, Record

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Use test log directory if in test environment
LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)


# Masked in @Logger.io args/kwargs/returns (bearer tokens, GCS access token, DB password)
SENSITIVE_KEYWORDS = {
    'password',
    'token',
    'access_token',
    'authorization',
    'credentials',
    'secret',
}
MAX_CONTENT_LENGTH = 500

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    TRACE_ID = 'trace_id'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


DEFAULT_EXTRA: dict[str, Any] = {
    ExtraField.SERVICE_CONTEXT: get_service_context(),
    ExtraField.TRACE_ID: '-',
    ExtraField.CHAIN_START_TIME: '',
    ExtraField.CALL_TARGET: '',
}


def _attach_trace_id(record: 'Record') -> None:
    """Correlate log lines with the active span (use case / gateway spans)."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        record['extra'][ExtraField.TRACE_ID] = format(span_context.trace_id, '032x')


def _status_code_level(message: str) -> str | None:
    """
    Log level for a uvicorn access log line, from its status code.

    Format: '127.0.0.1:51234 - "GET /events HTTP/1.1" 200'
    """
    if ' - "' not in message or ' HTTP/' not in message:
        return None

    try:
        status_code = int(message.rsplit('"', 1)[1].split()[0])
    except (ValueError, IndexError):
        return None

    if status_code >= 500:
        return 'CRITICAL'
    if status_code in (401, 403):
        return 'WARNING'
    if status_code >= 400:
        return 'ERROR'
    if status_code >= 300:
        return 'WARNING'
    return 'SUCCESS'


class InterceptHandler(logging.Handler):
    """Routes stdlib logging (uvicorn, sqlalchemy, httpx) into loguru."""

    _bound_logger: 'LoguruLogger | None' = None

    @classmethod
    def bound_logger(cls) -> 'LoguruLogger':
        if cls._bound_logger is None:
            cls._bound_logger = custom_logger.bind(**DEFAULT_EXTRA)
        return cls._bound_logger

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()

        # asyncio selector / httpx connection chatter
        if record.levelno <= logging.DEBUG and (
            'Using selector:' in message or record.name.startswith('httpcore')
        ):
            return

        level = _status_code_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        self.bound_logger().opt(depth=depth, exception=record.exc_info).log(level, message)


# Log format for LoguruIO decorated functions
io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        f'<m>{{extra[{ExtraField.TRACE_ID}]:.8}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)

min_log_level = settings.LOG_LEVEL or ('DEBUG' if settings.DEBUG else 'INFO')


def _log_file_path() -> str:
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    return f'{LOG_DIR}/{prefix}{datetime.now().strftime("%Y-%m-%d_%H")}.log'


# Configure logger
loguru_logger.remove()  # Remove default handler to avoid duplicate output and use custom format
loguru_logger.configure(patcher=_attach_trace_id)
custom_logger = loguru_logger.bind(**DEFAULT_EXTRA)

if settings.LOG_JSON:
    # One JSON object per line for the log collector
    custom_logger.add(sys.stdout, serialize=True, level=min_log_level, enqueue=True)
else:
    custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

# Hourly files only in DEBUG mode
if settings.DEBUG:
    custom_logger.add(
        _log_file_path(),
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

# Intercept standard logging → loguru
logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
