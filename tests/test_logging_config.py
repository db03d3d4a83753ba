"""Tests for logging configuration."""

import io
import json
import logging

import pytest
import structlog

from namerec.dbtree import configure_logging
from namerec.dbtree.core.logging_config import PACKAGE_LOGGER
from namerec.dbtree.core.logging_config import SQL_LOGGER


@pytest.fixture
def restore_logging():
    """Put touched loggers and structlog back as they were."""
    loggers = [logging.getLogger(name) for name in (PACKAGE_LOGGER, SQL_LOGGER)]
    saved = [(logger.handlers[:], logger.level, logger.propagate) for logger in loggers]

    yield

    for logger, (handlers, level, propagate) in zip(loggers, saved, strict=True):
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate
    structlog.reset_defaults()


def test_only_package_logger_is_configured(restore_logging) -> None:
    root_handlers = logging.getLogger().handlers[:]

    handler = configure_logging('debug', stream=io.StringIO())

    package = logging.getLogger(PACKAGE_LOGGER)
    assert package.handlers == [handler]
    assert package.level == logging.DEBUG
    assert logging.getLogger().handlers == root_handlers
    assert handler not in logging.getLogger(SQL_LOGGER).handlers


def test_echo_sql_attaches_engine_logger(restore_logging) -> None:
    handler = configure_logging('INFO', echo_sql=True, stream=io.StringIO())
    assert logging.getLogger(SQL_LOGGER).handlers == [handler]


def test_json_events_carry_key_values(restore_logging) -> None:
    stream = io.StringIO()
    configure_logging('INFO', json_logs=True, stream=stream)

    structlog.get_logger('namerec.dbtree.metadata.cache').info('invalidate', identity='db1|3306|root|shop')

    record = json.loads(stream.getvalue().splitlines()[-1])
    assert record['event'] == 'invalidate'
    assert record['identity'] == 'db1|3306|root|shop'
    assert record['level'] == 'info'
    assert record['logger'] == 'namerec.dbtree.metadata.cache'
