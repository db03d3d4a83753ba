"""
SQL text templates for table operations.

Pure functions: no I/O, no state. Database, table and column names are
always quoted with the dialect's identifier quote; string values go through
literal quoting. Templates meant for editing use placeholders the engine
rejects if run unedited (`:name` markers, `[condition]`).
"""

from collections.abc import Sequence

import sqlglot.expressions as exp

from namerec.dbtree.core.types import ColumnInfo

DIALECT = 'mysql'
CONDITION_PLACEHOLDER = '[condition]'
ASSIGNMENT_PLACEHOLDER = '[column] = [value]'


def quote_identifier(name: str) -> str:
    """
    Quote an identifier for the dialect.

    Examples:
        >>> quote_identifier('orders')
        '`orders`'
    """
    return exp.to_identifier(name, quoted=True).sql(dialect=DIALECT)


def quote_literal(value: str) -> str:
    """Quote a string literal for the dialect."""
    return exp.Literal.string(value).sql(dialect=DIALECT)


def qualified_name(database: str, table: str) -> str:
    """`database`.`table`"""
    return f'{quote_identifier(database)}.{quote_identifier(table)}'


def _placeholder(name: str) -> str:
    return f'{quote_identifier(name)} = :{name}'


def select_sql(database: str, table: str, limit: int) -> str:
    """SELECT * with a row limit."""
    return f'SELECT * FROM {qualified_name(database, table)} LIMIT {int(limit)};'


def insert_sql(database: str, table: str, columns: Sequence[ColumnInfo]) -> str:
    """
    INSERT listing every column twice: column list and value list.

    Both lists carry the quoted column names in discovery order; the user
    replaces the value list before running.

    Args:
        database: Database name
        table: Table name
        columns: Columns in discovery order

    Returns:
        SQL text
    """
    listing = ',\n    '.join(quote_identifier(column.name) for column in columns)
    return (
        f'INSERT INTO\n  {qualified_name(database, table)} (\n    {listing}\n  )\n'
        f'VALUES\n  (\n    {listing}\n  );'
    )


def delete_sql(database: str, table: str, columns: Sequence[ColumnInfo]) -> str:
    """DELETE with a WHERE built from key columns only."""
    where = '\n  AND '.join(_placeholder(c.name) for c in columns if c.is_key)
    return (
        f'DELETE FROM\n  {qualified_name(database, table)}\n'
        f'WHERE\n  {where or CONDITION_PLACEHOLDER};'
    )


def update_sql(database: str, table: str, columns: Sequence[ColumnInfo]) -> str:
    """UPDATE setting non-key columns, filtered by key columns."""
    sets = ',\n  '.join(_placeholder(c.name) for c in columns if not c.is_key)
    where = '\n  AND '.join(_placeholder(c.name) for c in columns if c.is_key)
    return (
        f'UPDATE\n  {qualified_name(database, table)}\n'
        f'SET\n  {sets or ASSIGNMENT_PLACEHOLDER}\n'
        f'WHERE\n  {where or CONDITION_PLACEHOLDER};'
    )


def add_column_sql(database: str, table: str) -> str:
    return (
        f'ALTER TABLE\n  {qualified_name(database, table)}\n'
        f"ADD\n  COLUMN [column] [type] NOT NULL COMMENT '';"
    )


def index_sql(database: str, table: str) -> str:
    """Commented DROP/ADD INDEX statements to uncomment and edit."""
    name = qualified_name(database, table)
    return (
        f'-- ALTER TABLE {name} DROP INDEX [indexName];\n'
        f'-- ALTER TABLE {name} ADD [UNIQUE|KEY|PRIMARY KEY] INDEX ([column]);'
    )


def index_listing_sql(database: str, table: str) -> str:
    """Existing indexes of a table from information_schema.STATISTICS."""
    return (
        'SELECT COLUMN_NAME name, TABLE_SCHEMA, INDEX_NAME, NON_UNIQUE '
        'FROM information_schema.STATISTICS '
        f'WHERE TABLE_SCHEMA = {quote_literal(database)} '
        f'AND TABLE_NAME = {quote_literal(table)};'
    )


def rename_sql(database: str, table: str, new_name: str) -> str:
    return f'RENAME TABLE {qualified_name(database, table)} TO {qualified_name(database, new_name)}'


def drop_sql(database: str, table: str) -> str:
    return f'DROP TABLE {qualified_name(database, table)}'


def truncate_sql(database: str, table: str) -> str:
    return f'TRUNCATE TABLE {qualified_name(database, table)}'


def show_create_sql(database: str, table: str) -> str:
    return f'SHOW CREATE TABLE {qualified_name(database, table)}'
