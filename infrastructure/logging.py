import logging
import logging.handlers
import sys

import structlog

from infrastructure.config import Settings, settings

# Marks handlers installed here so a repeat setup replaces them instead of stacking
_HANDLER_MARK = "_chunk_upload_handler"

ENGINE_LOGGERS = ("infrastructure.upload_engine", "infrastructure.policies", "application.use_cases")
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARK, True)
    return handler


def _is_ours(handler: logging.Handler) -> bool:
    return getattr(handler, _HANDLER_MARK, False)


def build_handlers(app_settings: Settings, *, log_to_file: bool = True) -> list[logging.Handler]:
    """Stdout handler plus, optionally, a daily rotated file under ``LOG_DIR``."""
    common_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    renderer = (
        structlog.dev.ConsoleRenderer()
        if app_settings.app_env == "development"
        else structlog.processors.JSONRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=common_processors,
        processor=renderer,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_to_file:
        app_settings.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.TimedRotatingFileHandler(
                app_settings.log_dir / f"{app_settings.app_env}.log",
                when="midnight",
                interval=1,
                backupCount=7,
            ),
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        _mark(handler)

    structlog.configure(
        processors=[
            *common_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return handlers


def setup_logging(app_settings: Settings | None = None, *, log_to_file: bool = True) -> None:
    """Route structlog, uvicorn and the upload engine through one set of handlers.

    Safe to call more than once: handlers from an earlier call are closed and
    replaced. ``UPLOAD_LOG_LEVEL`` tunes the engine loggers independently of
    ``LOG_LEVEL``, e.g. ``DEBUG`` to trace every chunk write.
    """
    app_settings = app_settings or settings
    handlers = build_handlers(app_settings, log_to_file=log_to_file)

    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if _is_ours(h)]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(app_settings.log_level.upper())

    engine_level = (app_settings.upload_log_level or app_settings.log_level).upper()
    for logger_name in ENGINE_LOGGERS:
        logging.getLogger(logger_name).setLevel(engine_level)

    for logger_name in SERVER_LOGGERS:
        server_logger = logging.getLogger(logger_name)
        server_logger.handlers = list(handlers)
        server_logger.propagate = False
