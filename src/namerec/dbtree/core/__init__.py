"""Core dbtree components."""

from namerec.dbtree.core.config import DBTreeSettings
from namerec.dbtree.core.exceptions import DBTreeBackupError
from namerec.dbtree.core.exceptions import DBTreeConnectionError
from namerec.dbtree.core.exceptions import DBTreeError
from namerec.dbtree.core.exceptions import DBTreeQueryError
from namerec.dbtree.core.types import ColumnInfo
from namerec.dbtree.core.types import ColumnKey
from namerec.dbtree.core.types import ConnectionDescriptor
from namerec.dbtree.core.types import ModelType
from namerec.dbtree.core.types import SchemaNode
from namerec.dbtree.core.types import TreeItem
from namerec.dbtree.core.types import make_identity

__all__ = [
    'ColumnInfo',
    'ColumnKey',
    'ConnectionDescriptor',
    'DBTreeBackupError',
    'DBTreeConnectionError',
    'DBTreeError',
    'DBTreeQueryError',
    'DBTreeSettings',
    'ModelType',
    'SchemaNode',
    'TreeItem',
    'make_identity',
]
