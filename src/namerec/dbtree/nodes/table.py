"""Table node: column discovery, SQL templates and table mutations."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING
from typing import ClassVar

import structlog

from namerec.dbtree.backup import DumpRequest
from namerec.dbtree.backup import backup_filename
from namerec.dbtree.core.exceptions import DBTreeBackupError
from namerec.dbtree.core.exceptions import DBTreeQueryError
from namerec.dbtree.core.types import ColumnInfo
from namerec.dbtree.core.types import ConnectionDescriptor
from namerec.dbtree.core.types import ModelType
from namerec.dbtree.core.types import SchemaNode
from namerec.dbtree.core.types import TreeItem
from namerec.dbtree.core.types import make_identity
from namerec.dbtree.metadata.discovery import discover_columns
from namerec.dbtree.mutation import InvalidationScope
from namerec.dbtree.mutation import MutationOutcome
from namerec.dbtree.mutation import MutationStatus
from namerec.dbtree.mutation import is_affirmative
from namerec.dbtree.nodes.base import InfoNode
from namerec.dbtree.nodes.base import branch_item
from namerec.dbtree.nodes.base import load_children
from namerec.dbtree.nodes.column import ColumnNode
from namerec.dbtree.sql import templates

if TYPE_CHECKING:
    from namerec.dbtree.core.context import DBTreeContext

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TableNode:
    """
    Table of a database.

    Children are ColumnNodes discovered from information_schema.COLUMNS and
    cached under the table identity. Template operations return the SQL text
    and either open it as a document or run it (run=True). Mutations go
    through the context's MutationCoordinator.
    """

    descriptor: ConnectionDescriptor
    table: str

    node_type: ClassVar[ModelType] = ModelType.TABLE

    def __post_init__(self) -> None:
        """Validate node after initialization."""
        if not self.descriptor.database:
            msg = 'descriptor must be scoped to a database'
            raise ValueError(msg)

    @property
    def database(self) -> str:
        return self.descriptor.database  # type: ignore[return-value]

    @property
    def identity(self) -> str:
        d = self.descriptor
        return make_identity(d.host, d.port, d.user, d.database, self.table)

    @property
    def label(self) -> str:
        return self.table

    @property
    def qualified_name(self) -> str:
        return f'{self.database}.{self.table}'

    def tree_item(self, context: 'DBTreeContext') -> TreeItem:
        return branch_item(context, self)

    async def get_children(
        self,
        context: 'DBTreeContext',
        force_refresh: bool = False,
    ) -> tuple[SchemaNode, ...]:
        """
        Get column nodes (cache-permitting).

        Args:
            context: dbtree context
            force_refresh: Re-run discovery even if cached

        Returns:
            ColumnNodes in ordinal order, or a single InfoNode on failure
        """

        async def discover() -> list[ColumnNode]:
            columns = await discover_columns(context, self.descriptor, self.table)
            return [ColumnNode(self.descriptor, self.table, column) for column in columns]

        return await load_children(context, self.identity, discover, force_refresh)

    async def columns(self, context: 'DBTreeContext') -> list[ColumnInfo]:
        """
        Column metadata of the table (cache-permitting).

        Raises:
            DBTreeQueryError: If discovery failed
        """
        children = await self.get_children(context)
        failures = [child for child in children if isinstance(child, InfoNode)]
        if failures:
            raise DBTreeQueryError(failures[0].message, identity=self.identity)
        return [child.column for child in children if isinstance(child, ColumnNode)]

    async def _emit(self, context: 'DBTreeContext', sql: str, run: bool) -> str:
        if run:
            await context.surface.run_immediately(sql, self)
        else:
            await context.surface.open_as_document(sql)
        return sql

    async def select_template(self, context: 'DBTreeContext', run: bool = False) -> str:
        """SELECT * … LIMIT <default_page_size>; runs on a fresh connection when run=True."""
        sql = templates.select_sql(self.database, self.table, context.settings.default_page_size)
        if run:
            await context.registry.get_connection(self.descriptor, force_new=True)
        return await self._emit(context, sql, run)

    async def insert_template(self, context: 'DBTreeContext', run: bool = False) -> str:
        columns = await self.columns(context)
        return await self._emit(context, templates.insert_sql(self.database, self.table, columns), run)

    async def delete_template(self, context: 'DBTreeContext', run: bool = False) -> str:
        columns = await self.columns(context)
        self._warn_without_key(context, columns)
        return await self._emit(context, templates.delete_sql(self.database, self.table, columns), run)

    async def update_template(self, context: 'DBTreeContext', run: bool = False) -> str:
        columns = await self.columns(context)
        self._warn_without_key(context, columns)
        return await self._emit(context, templates.update_sql(self.database, self.table, columns), run)

    def _warn_without_key(self, context: 'DBTreeContext', columns: list[ColumnInfo]) -> None:
        if any(column.is_key for column in columns):
            return
        logger.warning('template_without_key', identity=self.identity)
        context.notifier.warning(
            f'Table {self.qualified_name} has no primary or unique key, '
            f'edit the WHERE condition before running.'
        )

    async def add_column_template(self, context: 'DBTreeContext') -> str:
        return await self._emit(context, templates.add_column_sql(self.database, self.table), run=False)

    async def index_template(self, context: 'DBTreeContext') -> str:
        """Open index DDL stubs and list the table's current indexes."""
        sql = templates.index_sql(self.database, self.table)
        await context.surface.show_document(sql)
        await context.surface.run_immediately(templates.index_listing_sql(self.database, self.table), self)
        return sql

    async def show_source(self, context: 'DBTreeContext') -> str:
        """
        Fetch the table DDL on a fresh connection and show it.

        Returns:
            CREATE TABLE text

        Raises:
            DBTreeConnectionError: If no connection can be opened
            DBTreeQueryError: If the engine rejects the statement
        """
        sql = templates.show_create_sql(self.database, self.table)
        rows = await context.query(self.descriptor, sql, force_new=True)
        if not rows:
            msg = f'No DDL returned for {self.qualified_name}'
            raise DBTreeQueryError(msg, sql=sql, identity=self.identity)
        ddl = rows[0]['Create Table']
        await context.surface.show_document(ddl)
        return ddl

    async def change_name(
        self,
        context: 'DBTreeContext',
        new_name: str | None = None,
    ) -> MutationOutcome:
        """
        Rename the table.

        Args:
            context: dbtree context
            new_name: New table name; None prompts the confirmation collaborator

        Returns:
            Outcome; CANCELLED when the name is empty or unchanged
        """
        coordinator = context.coordinator
        if new_name is None:
            new_name = await coordinator.confirm(
                context,
                prompt=f'You will change {self.qualified_name} to a new table name!',
                placeholder='newTableName',
                value=self.table,
            )
        new_name = (new_name or '').strip()
        if not new_name or new_name == self.table:
            return MutationOutcome.cancelled()

        return await coordinator.apply(
            context,
            self,
            templates.rename_sql(self.database, self.table, new_name),
            InvalidationScope.DATABASE,
            f'Rename table {self.qualified_name} to {new_name} success!',
        )

    async def drop(
        self,
        context: 'DBTreeContext',
        confirmation: str | None = None,
    ) -> MutationOutcome:
        """
        Drop the table after an explicit 'y' confirmation.

        Args:
            context: dbtree context
            confirmation: Confirmation token; None prompts the confirmation collaborator

        Returns:
            Outcome; CANCELLED (no query, no invalidation) unless affirmative
        """
        if confirmation is None:
            confirmation = await context.coordinator.confirm(
                context,
                prompt=f'Are you sure you want to drop table {self.qualified_name}?',
                placeholder='Input y to confirm.',
            )
        if not is_affirmative(confirmation):
            if confirmation:
                context.notifier.info(f'Cancel drop table {self.table}!')
            return MutationOutcome.cancelled()

        return await context.coordinator.apply(
            context,
            self,
            templates.drop_sql(self.database, self.table),
            InvalidationScope.DATABASE,
            f'Drop table {self.table} success!',
        )

    async def truncate(
        self,
        context: 'DBTreeContext',
        confirmation: str | None = None,
    ) -> MutationOutcome:
        """Delete all rows after an explicit 'y' confirmation. Column cache is kept."""
        if confirmation is None:
            confirmation = await context.coordinator.confirm(
                context,
                prompt=f'Are you sure you want to clear all data of table {self.qualified_name}?',
                placeholder='Input y to confirm.',
            )
        if not is_affirmative(confirmation):
            return MutationOutcome.cancelled()

        return await context.coordinator.apply(
            context,
            self,
            templates.truncate_sql(self.database, self.table),
            InvalidationScope.NONE,
            f'Clear table {self.table} all data success!',
        )

    async def backup(
        self,
        context: 'DBTreeContext',
        destination: str | Path,
        when: datetime | None = None,
    ) -> MutationOutcome:
        """
        Dump the table into destination via the dump collaborator.

        Args:
            context: dbtree context
            destination: Directory receiving the dump file
            when: Timestamp embedded in the file name (default: now)

        Returns:
            Outcome; message holds the dump file path on success
        """
        d = self.descriptor
        label = f'{d.host}_{self.database}_{self.table}'
        target = Path(destination) / backup_filename(
            d.host,
            self.database,
            self.table,
            when,
            context.settings.backup_timestamp_format,
        )
        request = DumpRequest(
            host=d.host,
            port=d.port,
            user=d.user,
            database=self.database,
            table=self.table,
            password=d.password,
            cert_path=d.cert_path,
        )

        logger.info('backup_start', table=label, file=str(target))
        try:
            await context.dumper.dump(request, target)  # type: ignore[union-attr]
        except DBTreeBackupError as e:
            context.notifier.error(f'Backup {label} fail!\n{e}')
            return MutationOutcome(status=MutationStatus.FAILED, error=str(e))

        context.notifier.info(f'Backup {label} success!')
        return MutationOutcome(status=MutationStatus.SUCCEEDED, message=str(target))
