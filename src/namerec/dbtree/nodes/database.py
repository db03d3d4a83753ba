"""Database and connection nodes."""

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import ClassVar

from namerec.dbtree.core.types import ConnectionDescriptor
from namerec.dbtree.core.types import ModelType
from namerec.dbtree.core.types import SchemaNode
from namerec.dbtree.core.types import TreeItem
from namerec.dbtree.metadata.discovery import discover_databases
from namerec.dbtree.metadata.discovery import discover_tables
from namerec.dbtree.nodes.base import branch_item
from namerec.dbtree.nodes.base import load_children
from namerec.dbtree.nodes.table import TableNode

if TYPE_CHECKING:
    from namerec.dbtree.core.context import DBTreeContext


@dataclass(frozen=True)
class DatabaseNode:
    """Database of a server; children are its base tables."""

    descriptor: ConnectionDescriptor

    node_type: ClassVar[ModelType] = ModelType.DATABASE

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
        return self.descriptor.identity

    @property
    def label(self) -> str:
        return self.database

    def tree_item(self, context: 'DBTreeContext') -> TreeItem:
        return branch_item(context, self)

    def table(self, name: str) -> TableNode:
        """Node for a table of this database (no discovery)."""
        return TableNode(self.descriptor, name)

    async def get_children(
        self,
        context: 'DBTreeContext',
        force_refresh: bool = False,
    ) -> tuple[SchemaNode, ...]:
        async def discover() -> list[TableNode]:
            return [self.table(name) for name in await discover_tables(context, self.descriptor)]

        return await load_children(context, self.identity, discover, force_refresh)


@dataclass(frozen=True)
class ConnectionNode:
    """Root node of one server connection; children are databases."""

    descriptor: ConnectionDescriptor

    node_type: ClassVar[ModelType] = ModelType.CONNECTION

    @property
    def identity(self) -> str:
        return self.descriptor.server_identity

    @property
    def label(self) -> str:
        return f'{self.descriptor.host}@{self.descriptor.port}'

    def tree_item(self, context: 'DBTreeContext') -> TreeItem:
        return branch_item(context, self, description=self.descriptor.user)

    def database(self, name: str) -> DatabaseNode:
        """Node for a database of this server (no discovery)."""
        return DatabaseNode(self.descriptor.with_database(name))

    async def get_children(
        self,
        context: 'DBTreeContext',
        force_refresh: bool = False,
    ) -> tuple[SchemaNode, ...]:
        server = self.descriptor.with_database(None)

        async def discover() -> list[DatabaseNode]:
            return [self.database(name) for name in await discover_databases(context, server)]

        return await load_children(context, self.identity, discover, force_refresh)
