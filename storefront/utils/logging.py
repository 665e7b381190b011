# storefront/utils/logging.py
import logging
import sys

import structlog

from storefront.utils.settings import LOG_FORMAT, LOG_LEVEL

_configured = False


def setup_stdlib_logging() -> None:
    handler = logging.StreamHandler(sys.stdout)
    # renderowanie robi structlog, tu tylko gotowa linia
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("storefront")
    root.handlers = [handler]
    root.setLevel(LOG_LEVEL.upper())
    root.propagate = False

    #sqlalchemy i stripe sa bardzo gadatliwe na INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("stripe").setLevel(logging.WARNING)


def setup_structlog() -> None:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.contextvars.merge_contextvars,
    ]

    if LOG_FORMAT.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    global _configured
    if _configured:
        return
    setup_stdlib_logging()
    setup_structlog()
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    configure_logging()
    return structlog.get_logger(name)
