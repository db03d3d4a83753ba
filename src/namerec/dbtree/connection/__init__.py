"""Connection handles and statement execution."""

from namerec.dbtree.connection.registry import ConnectionRegistry
from namerec.dbtree.connection.registry import EngineConnector
from namerec.dbtree.connection.runner import EngineQueryRunner
from namerec.dbtree.connection.runner import QueryRunner

__all__ = [
    'ConnectionRegistry',
    'EngineConnector',
    'EngineQueryRunner',
    'QueryRunner',
]
