"""
Structured logging configuration for PriceLens.

structlog sits on top of stdlib logging. Modules keep using
``logging.getLogger(__name__)`` and pass structured fields through
``extra``; the ProcessorFormatter on the root handler turns each record
into an event dict and renders it:

- Development: colored console lines
- Staging/Production: one JSON object per line, tracebacks as text under
  ``exception``

Every record carries ``service``, ``version`` and ``env`` so lines from
several deployments can share one log index, plus any ``request_id``
bound by LoggingMiddleware.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from pricelens.config import AppEnv

# Third-party loggers and the level they are held at.
NOISY_LOGGERS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,  # LoggingMiddleware logs each request
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
    "aiosqlite": logging.WARNING,
}

# Echoes SQL statements when the root level is DEBUG.
SQL_ECHO_LOGGER = "sqlalchemy.engine"


class ServiceInfoAdder:
    """Stamp deployment identity onto every event without overriding call-site fields."""

    def __init__(self, service: str, version: str, env: AppEnv):
        self._fields = {"service": service, "version": version, "env": env.value}

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in self._fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def setup_logging(
    app_env: AppEnv,
    log_level: str = "INFO",
    log_format: str = "auto",
    service: str = "PriceLens",
    version: str = "",
) -> None:
    """
    Configure structured logging for the application.

    Args:
        app_env: Current environment (development, staging, production).
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR).
        log_format: ``"json"``, ``"console"``, or ``"auto"``
                    (auto = console in dev, json otherwise).
        service: Service name stamped on every record.
        version: Release version stamped on every record.
    """
    use_json = _should_use_json(app_env, log_format)
    root_level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        ServiceInfoAdder(service, version, app_env),
    ]

    render_chain: list[Processor]
    if use_json:
        render_chain = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        render_chain = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *render_chain,
        ],
        foreign_pre_chain=[*shared_processors, structlog.stdlib.ExtraAdder()],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(root_level)

    _quiet_noisy_loggers(root_level)


def _quiet_noisy_loggers(root_level: int) -> None:
    for name, level in NOISY_LOGGERS.items():
        if name == SQL_ECHO_LOGGER and root_level <= logging.DEBUG:
            level = logging.INFO
        logging.getLogger(name).setLevel(level)


def _should_use_json(app_env: AppEnv, log_format: str) -> bool:
    """Determine whether to use JSON output."""
    if log_format == "json":
        return True
    if log_format == "console":
        return False
    return app_env != AppEnv.DEVELOPMENT
