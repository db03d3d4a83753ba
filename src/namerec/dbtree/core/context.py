"""dbtree context: the cache, registry and collaborators every operation uses."""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from namerec.dbtree.backup import MysqldumpDumper
from namerec.dbtree.connection.registry import ConnectionRegistry
from namerec.dbtree.connection.registry import Connector
from namerec.dbtree.connection.registry import EngineConnector
from namerec.dbtree.connection.runner import EngineQueryRunner
from namerec.dbtree.connection.runner import QueryRunner
from namerec.dbtree.core.collaborators import BufferTextSurface
from namerec.dbtree.core.collaborators import Confirmation
from namerec.dbtree.core.collaborators import DecliningConfirmation
from namerec.dbtree.core.collaborators import Dumper
from namerec.dbtree.core.collaborators import LoggingNotifier
from namerec.dbtree.core.collaborators import Notifier
from namerec.dbtree.core.collaborators import NullTreeView
from namerec.dbtree.core.collaborators import TextSurface
from namerec.dbtree.core.collaborators import TreeView
from namerec.dbtree.core.config import DBTreeSettings
from namerec.dbtree.core.types import ConnectionDescriptor
from namerec.dbtree.metadata.cache import MetadataCache
from namerec.dbtree.mutation import MutationCoordinator


@dataclass
class DBTreeContext:
    """
    Context for dbtree operations.

    Replaces process-wide singletons: one context owns one metadata cache
    and one connection registry, and carries the collaborators the core
    calls into. Passed explicitly to every node operation.
    """

    registry: ConnectionRegistry
    cache: MetadataCache
    runner: QueryRunner
    settings: DBTreeSettings = field(default_factory=DBTreeSettings)
    tree: TreeView = field(default_factory=NullTreeView)
    confirmation: Confirmation = field(default_factory=DecliningConfirmation)
    surface: TextSurface = field(default_factory=BufferTextSurface)
    notifier: Notifier = field(default_factory=LoggingNotifier)
    dumper: Dumper | None = None
    coordinator: MutationCoordinator = field(default_factory=MutationCoordinator)

    def __post_init__(self) -> None:
        """Validate context after initialization."""
        if self.registry is None:
            msg = 'registry is required'
            raise ValueError(msg)
        if self.cache is None:
            msg = 'cache is required'
            raise ValueError(msg)
        if self.runner is None:
            msg = 'runner is required'
            raise ValueError(msg)
        if self.dumper is None:
            self.dumper = MysqldumpDumper(self.settings)

    @classmethod
    def create(
        cls,
        settings: DBTreeSettings | None = None,
        connector: Connector | None = None,
        runner: QueryRunner | None = None,
        **collaborators: Any,
    ) -> 'DBTreeContext':
        """
        Create a context with a fresh cache and registry.

        Args:
            settings: Settings (default: read from environment)
            connector: Handle factory (default: SQLAlchemy AsyncEngine connector)
            runner: Query runner (default: EngineQueryRunner)
            **collaborators: tree, confirmation, surface, notifier, dumper, coordinator

        Returns:
            Initialized context
        """
        settings = settings or DBTreeSettings()
        return cls(
            registry=ConnectionRegistry(connector or EngineConnector(settings)),
            cache=MetadataCache(),
            runner=runner or EngineQueryRunner(),
            settings=settings,
            **collaborators,
        )

    async def query(
        self,
        descriptor: ConnectionDescriptor,
        sql: str,
        params: Mapping[str, Any] | None = None,
        force_new: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Run one statement on the descriptor's handle.

        Raises:
            DBTreeConnectionError: If no handle can be opened
            DBTreeQueryError: If the engine rejects the statement
        """
        handle = await self.registry.get_connection(descriptor, force_new=force_new)
        return await self.runner.execute(handle, sql, params)

    async def reset(self) -> None:
        """Clear the cache and dispose every connection handle."""
        self.cache.clear()
        await self.registry.reset()
