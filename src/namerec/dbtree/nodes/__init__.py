"""Schema tree nodes."""

from namerec.dbtree.nodes.base import InfoNode
from namerec.dbtree.nodes.column import ColumnNode
from namerec.dbtree.nodes.database import ConnectionNode
from namerec.dbtree.nodes.database import DatabaseNode
from namerec.dbtree.nodes.table import TableNode

__all__ = [
    'ColumnNode',
    'ConnectionNode',
    'DatabaseNode',
    'InfoNode',
    'TableNode',
]
