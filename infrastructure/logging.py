import logging
import logging.handlers
import sys

import structlog

from infrastructure.config import settings

# Third-party loggers routed through our handlers instead of their own
_INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")
_NOISY_LOGGERS = ("pymongo", "motor", "fsspec")


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _build_handlers(formatter: logging.Formatter) -> list[logging.Handler]:
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    stream_handler = logging.StreamHandler(sys.stdout)
    file_handler = logging.handlers.TimedRotatingFileHandler(
        settings.log_dir / f"{settings.app_env}.log",
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    for handler in (stream_handler, file_handler):
        handler.setFormatter(formatter)
    return [stream_handler, file_handler]


def setup_logging() -> None:
    """Route structlog, uvicorn and stdlib logging through one set of handlers.

    Development gets coloured console output, every other environment JSON lines.
    Both go to stdout and to a daily rotated file under ``LOG_DIR``.
    """
    processors = _shared_processors()
    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.app_env == "development"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )
    handlers = _build_handlers(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = list(handlers)
    root_logger.setLevel(settings.log_level.upper())

    for name in _INTERCEPTED_LOGGERS:
        intercepted = logging.getLogger(name)
        intercepted.handlers = list(handlers)
        intercepted.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
