"""Shared node helpers and the diagnostic placeholder node."""

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import ClassVar

import structlog

from namerec.dbtree.core.exceptions import DBTreeError
from namerec.dbtree.core.types import ModelType
from namerec.dbtree.core.types import SchemaNode
from namerec.dbtree.core.types import TreeItem
from namerec.dbtree.core.types import make_identity
from namerec.dbtree.metadata.cache import Loader

if TYPE_CHECKING:
    from namerec.dbtree.core.context import DBTreeContext

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InfoNode:
    """
    Leaf carrying a discovery failure.

    The tree has no other channel for fetch errors, so they are rendered
    inline in place of the children.
    """

    message: str

    node_type: ClassVar[ModelType] = ModelType.INFO

    @property
    def identity(self) -> str:
        return make_identity(ModelType.INFO.value, self.message)

    @property
    def label(self) -> str:
        return self.message

    def tree_item(self, context: 'DBTreeContext') -> TreeItem:  # noqa: ARG002
        return TreeItem(label=self.label, node_type=self.node_type, identity=self.identity)

    async def get_children(
        self,
        context: 'DBTreeContext',  # noqa: ARG002
        force_refresh: bool = False,  # noqa: ARG002
    ) -> tuple[SchemaNode, ...]:
        return ()


async def load_children(
    context: 'DBTreeContext',
    identity: str,
    loader: Loader,
    force_refresh: bool = False,
) -> tuple[SchemaNode, ...]:
    """
    Load children through the cache, turning failures into an InfoNode.

    Args:
        context: dbtree context
        identity: Identity of the parent node
        loader: Discovery coroutine function
        force_refresh: Ignore the cached entry

    Returns:
        Children, or a single InfoNode when discovery failed (nothing cached)
    """
    try:
        return await context.cache.load(identity, loader, force=force_refresh)
    except DBTreeError as e:
        logger.warning('discovery_failed', identity=identity, error=str(e))
        return (InfoNode(str(e)),)


def branch_item(context: 'DBTreeContext', node: SchemaNode, description: str = '') -> TreeItem:
    """Tree item for a node that has children."""
    return TreeItem(
        label=node.label,
        node_type=node.node_type,
        identity=node.identity,
        expanded=context.cache.get_expansion_state(node.identity),
        description=description,
    )
