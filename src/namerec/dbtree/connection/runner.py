"""Query-runner collaborator."""

from collections.abc import Mapping
from typing import Any
from typing import Protocol
from typing import runtime_checkable

import structlog
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from namerec.dbtree.core.exceptions import DBTreeQueryError

logger = structlog.get_logger(__name__)

# Raw statements bypass driver-side %-formatting
NO_PARAMETERS = {'no_parameters': True}


@runtime_checkable
class QueryRunner(Protocol):
    """Executes one statement on a connection handle."""

    async def execute(
        self,
        handle: Any,
        sql: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Execute a statement.

        Args:
            handle: Connection handle from ConnectionRegistry
            sql: Statement text
            params: Optional bound parameters (named, :name style)

        Returns:
            Result rows as dictionaries (empty for statements without rows)

        Raises:
            DBTreeQueryError: If the engine rejects the statement
        """
        ...


def engine_message(error: Exception) -> str:
    """Extract the driver's own message from a SQLAlchemy error."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


class EngineQueryRunner:
    """
    Runs statements through a SQLAlchemy AsyncEngine.

    Each call checks out one connection and runs in its own transaction,
    committed on success. Statements without parameters go to the driver
    as-is, so literal colons and percent signs are never taken for bind
    markers.
    """

    async def execute(
        self,
        handle: AsyncEngine,
        sql: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        logger.debug('execute', sql=sql, params=dict(params) if params else None)
        try:
            async with handle.begin() as conn:
                if params is None:
                    result = await conn.exec_driver_sql(sql, execution_options=NO_PARAMETERS)
                else:
                    result = await conn.execute(text(sql), dict(params))
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            message = engine_message(e)
            logger.warning('query_failed', sql=sql, error=message)
            raise DBTreeQueryError(message, sql=sql, original_error=e) from e
