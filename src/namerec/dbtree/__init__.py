"""
dbtree - database schema tree

Discovers and caches the schema hierarchy of a MySQL server, generates SQL
templates for table operations and applies schema mutations while keeping
the cache consistent.
"""

from namerec.dbtree.backup import DumpRequest
from namerec.dbtree.backup import MysqldumpDumper
from namerec.dbtree.backup import backup_filename
from namerec.dbtree.connection.registry import ConnectionRegistry
from namerec.dbtree.connection.runner import EngineQueryRunner
from namerec.dbtree.core.config import DBTreeSettings
from namerec.dbtree.core.context import DBTreeContext
from namerec.dbtree.core.exceptions import DBTreeBackupError
from namerec.dbtree.core.exceptions import DBTreeConnectionError
from namerec.dbtree.core.exceptions import DBTreeError
from namerec.dbtree.core.exceptions import DBTreeQueryError
from namerec.dbtree.core.logging_config import configure_logging
from namerec.dbtree.core.types import ColumnInfo
from namerec.dbtree.core.types import ColumnKey
from namerec.dbtree.core.types import ConnectionDescriptor
from namerec.dbtree.core.types import ModelType
from namerec.dbtree.core.types import SchemaNode
from namerec.dbtree.core.types import TreeItem
from namerec.dbtree.core.types import make_identity
from namerec.dbtree.metadata.cache import MetadataCache
from namerec.dbtree.mutation import InvalidationScope
from namerec.dbtree.mutation import MutationCoordinator
from namerec.dbtree.mutation import MutationOutcome
from namerec.dbtree.mutation import MutationStatus
from namerec.dbtree.nodes import ColumnNode
from namerec.dbtree.nodes import ConnectionNode
from namerec.dbtree.nodes import DatabaseNode
from namerec.dbtree.nodes import InfoNode
from namerec.dbtree.nodes import TableNode

__version__ = '1.0'

__all__ = [
    # Core types
    'ColumnInfo',
    'ColumnKey',
    'ConnectionDescriptor',
    'ModelType',
    'SchemaNode',
    'TreeItem',
    'make_identity',
    # Context and settings
    'DBTreeContext',
    'DBTreeSettings',
    'configure_logging',
    # Exceptions
    'DBTreeError',
    'DBTreeConnectionError',
    'DBTreeQueryError',
    'DBTreeBackupError',
    # Components
    'ConnectionRegistry',
    'EngineQueryRunner',
    'MetadataCache',
    'MutationCoordinator',
    'InvalidationScope',
    'MutationOutcome',
    'MutationStatus',
    # Nodes
    'ConnectionNode',
    'DatabaseNode',
    'TableNode',
    'ColumnNode',
    'InfoNode',
    # Backup
    'DumpRequest',
    'MysqldumpDumper',
    'backup_filename',
]
