"""Logging configuration with structlog and standard logging integration."""

import logging
import sys
from typing import TextIO

import structlog

PACKAGE_LOGGER = 'namerec.dbtree'
SQL_LOGGER = 'sqlalchemy.engine'


def configure_logging(
    log_level: str = 'INFO',
    json_logs: bool = False,
    echo_sql: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """
    Route dbtree's structlog events through one stdlib handler.

    Only the package logger (and, with echo_sql, the SQLAlchemy engine
    logger) gets the handler; the root logger and the host application's
    handlers are left alone.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
        echo_sql: Also attach the handler to SQLAlchemy's statement log
        stream: Output stream (default: stdout)

    Returns:
        The installed handler, so the host can detach it
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=False),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt='iso', utc=False),
            ],
        )
    )

    logger_names = [PACKAGE_LOGGER, SQL_LOGGER] if echo_sql else [PACKAGE_LOGGER]
    for logger_name in logger_names:
        logger = logging.getLogger(logger_name)
        logger.handlers = [handler]
        logger.setLevel(numeric_level)
        logger.propagate = False
    return handler
