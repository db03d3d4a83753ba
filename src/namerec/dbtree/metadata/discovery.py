"""Discovery queries: enumerate databases, tables and columns."""

from typing import TYPE_CHECKING

import structlog

from namerec.dbtree.core.types import ColumnInfo
from namerec.dbtree.core.types import ConnectionDescriptor

if TYPE_CHECKING:
    from namerec.dbtree.core.context import DBTreeContext

logger = structlog.get_logger(__name__)

DATABASES_QUERY = 'SHOW DATABASES'

TABLES_QUERY = (
    'SELECT TABLE_NAME name, TABLE_COMMENT comment '
    'FROM information_schema.TABLES '
    "WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE <> 'VIEW' "
    'ORDER BY TABLE_NAME'
)

COLUMNS_QUERY = (
    'SELECT COLUMN_NAME name, COLUMN_TYPE type, COLUMN_COMMENT comment, '
    'COLUMN_KEY `key`, IS_NULLABLE nullable, CHARACTER_MAXIMUM_LENGTH maxLength '
    'FROM information_schema.COLUMNS '
    'WHERE TABLE_SCHEMA = :schema AND TABLE_NAME = :table '
    'ORDER BY ORDINAL_POSITION'
)


async def discover_databases(
    context: 'DBTreeContext',
    descriptor: ConnectionDescriptor,
) -> list[str]:
    """
    List database names visible to the descriptor's user.

    Raises:
        DBTreeConnectionError: If the endpoint cannot be reached
        DBTreeQueryError: If the engine rejects the query
    """
    rows = await context.query(descriptor, DATABASES_QUERY)
    return [row['Database'] for row in rows]


async def discover_tables(
    context: 'DBTreeContext',
    descriptor: ConnectionDescriptor,
) -> list[str]:
    """
    List base tables of descriptor.database, ordered by name.

    Raises:
        DBTreeConnectionError: If the endpoint cannot be reached
        DBTreeQueryError: If the engine rejects the query
    """
    rows = await context.query(descriptor, TABLES_QUERY, {'schema': descriptor.database})
    return [row['name'] for row in rows]


async def discover_columns(
    context: 'DBTreeContext',
    descriptor: ConnectionDescriptor,
    table: str,
) -> list[ColumnInfo]:
    """
    Read column metadata of one table, in ordinal order.

    Args:
        context: dbtree context
        descriptor: Descriptor scoped to the table's database
        table: Table name

    Returns:
        Column metadata in discovery order

    Raises:
        DBTreeConnectionError: If the endpoint cannot be reached
        DBTreeQueryError: If the engine rejects the query
    """
    rows = await context.query(
        descriptor,
        COLUMNS_QUERY,
        {'schema': descriptor.database, 'table': table},
    )
    logger.debug('columns_discovered', database=descriptor.database, table=table, count=len(rows))
    return [ColumnInfo.from_row(row) for row in rows]
