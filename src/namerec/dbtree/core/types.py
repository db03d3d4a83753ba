"""Type definitions for dbtree."""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol
from typing import runtime_checkable

if TYPE_CHECKING:
    from namerec.dbtree.core.context import DBTreeContext

IDENTITY_SEPARATOR = '|'


class ModelType(str, Enum):
    """Node type tags consumed by the tree-rendering layer."""

    CONNECTION = 'connection'
    DATABASE = 'database'
    TABLE = 'table'
    COLUMN = 'column'
    INFO = 'info'


class ColumnKey(str, Enum):
    """Values of information_schema.COLUMNS.COLUMN_KEY."""

    NONE = ''
    PRIMARY = 'PRI'
    UNIQUE = 'UNI'
    MULTIPLE = 'MUL'


def _escape_part(part: Any) -> str:
    text = str(part)
    return text.replace('\\', '\\\\').replace(IDENTITY_SEPARATOR, '\\' + IDENTITY_SEPARATOR)


def make_identity(*parts: Any) -> str:
    """
    Build a node identity from its scope parts.

    Parts are joined with IDENTITY_SEPARATOR. Separator and backslash characters
    inside a part are escaped, so the identity of one scope is a prefix
    (followed by the separator) only of identities nested beneath it.

    Args:
        *parts: Host, port, user, database, table, ... in scope order

    Returns:
        Deterministic identity string

    Examples:
        >>> make_identity('localhost', 3306, 'root', 'shop')
        'localhost|3306|root|shop'
    """
    return IDENTITY_SEPARATOR.join(_escape_part(part) for part in parts)


@dataclass(frozen=True)
class ConnectionDescriptor:
    """
    Immutable identity of a database endpoint.

    Nodes carry a descriptor by value; the registry keys live handles by
    its identity.
    """

    host: str
    user: str
    password: str = ''
    port: int = 3306
    database: str | None = None
    cert_path: str = ''

    @property
    def identity(self) -> str:
        """Registry key: host, port, user and (when set) database."""
        if self.database:
            return make_identity(self.host, self.port, self.user, self.database)
        return make_identity(self.host, self.port, self.user)

    @property
    def server_identity(self) -> str:
        """Identity of the server scope, regardless of database."""
        return make_identity(self.host, self.port, self.user)

    def with_database(self, database: str | None) -> 'ConnectionDescriptor':
        """Return a copy scoped to another database."""
        return replace(self, database=database)

    def __repr__(self) -> str:
        """Representation without credentials."""
        return (
            f"ConnectionDescriptor(host='{self.host}', port={self.port}, "
            f"user='{self.user}', database={self.database!r})"
        )


@dataclass(frozen=True)
class ColumnInfo:
    """Column metadata as discovered from information_schema. Immutable."""

    name: str
    type: str = ''
    comment: str = ''
    key: ColumnKey = ColumnKey.NONE
    nullable: bool = True
    max_length: int | None = None

    @property
    def is_key(self) -> bool:
        """True for primary and unique key columns."""
        return self.key in {ColumnKey.PRIMARY, ColumnKey.UNIQUE}

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'ColumnInfo':
        """
        Build column metadata from a discovery row.

        Args:
            row: Mapping with name, type, comment, key, nullable, maxLength

        Returns:
            ColumnInfo instance
        """
        try:
            key = ColumnKey(row.get('key') or '')
        except ValueError:
            key = ColumnKey.NONE
        max_length = row.get('maxLength')
        return cls(
            name=row['name'],
            type=row.get('type') or '',
            comment=row.get('comment') or '',
            key=key,
            nullable=str(row.get('nullable', 'YES')).upper() == 'YES',
            max_length=int(max_length) if max_length is not None else None,
        )


@dataclass(frozen=True)
class TreeItem:
    """What the tree-rendering collaborator needs to draw one node."""

    label: str
    node_type: ModelType
    identity: str
    expanded: bool | None = None  # None for leaves
    description: str = ''


@runtime_checkable
class SchemaNode(Protocol):
    """Capability shared by every node in the schema tree."""

    @property
    def identity(self) -> str:
        """Stable identity string, the cache key of this node."""
        ...

    @property
    def node_type(self) -> ModelType:
        """Node type tag."""
        ...

    @property
    def label(self) -> str:
        """Text shown in the tree."""
        ...

    def tree_item(self, context: 'DBTreeContext') -> TreeItem:
        """Render data for the tree view."""
        ...

    async def get_children(
        self,
        context: 'DBTreeContext',
        force_refresh: bool = False,
    ) -> tuple['SchemaNode', ...]:
        """Fetch children lazily (cache-permitting)."""
        ...
