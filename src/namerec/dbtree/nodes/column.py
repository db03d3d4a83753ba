"""Column node (leaf)."""

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import ClassVar

from namerec.dbtree.core.types import ColumnInfo
from namerec.dbtree.core.types import ColumnKey
from namerec.dbtree.core.types import ConnectionDescriptor
from namerec.dbtree.core.types import ModelType
from namerec.dbtree.core.types import SchemaNode
from namerec.dbtree.core.types import TreeItem
from namerec.dbtree.core.types import make_identity

if TYPE_CHECKING:
    from namerec.dbtree.core.context import DBTreeContext


@dataclass(frozen=True)
class ColumnNode:
    """Column of a table. Metadata is fixed once discovered."""

    descriptor: ConnectionDescriptor
    table: str
    column: ColumnInfo

    node_type: ClassVar[ModelType] = ModelType.COLUMN

    @property
    def database(self) -> str | None:
        return self.descriptor.database

    @property
    def identity(self) -> str:
        d = self.descriptor
        return make_identity(d.host, d.port, d.user, d.database, self.table, self.column.name)

    @property
    def label(self) -> str:
        return f'{self.column.name} : {self.column.type}'

    def tree_item(self, context: 'DBTreeContext') -> TreeItem:  # noqa: ARG002
        column = self.column
        flags = []
        if column.key is ColumnKey.PRIMARY:
            flags.append('PK')
        elif column.key is ColumnKey.UNIQUE:
            flags.append('UNIQUE')
        if not column.nullable:
            flags.append('NOT NULL')
        if column.comment:
            flags.append(column.comment)
        return TreeItem(
            label=self.label,
            node_type=self.node_type,
            identity=self.identity,
            description='  '.join(flags),
        )

    async def get_children(
        self,
        context: 'DBTreeContext',  # noqa: ARG002
        force_refresh: bool = False,  # noqa: ARG002
    ) -> tuple[SchemaNode, ...]:
        return ()
