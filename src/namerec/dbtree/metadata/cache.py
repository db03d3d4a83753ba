"""Metadata cache for discovered schema children."""

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from typing import Any

import structlog

from namerec.dbtree.core.types import IDENTITY_SEPARATOR
from namerec.dbtree.core.types import SchemaNode

logger = structlog.get_logger(__name__)

Children = tuple[SchemaNode, ...]
Loader = Callable[[], Awaitable[Iterable[SchemaNode]]]


class MetadataCache:
    """
    Cache of discovered children keyed by node identity.

    Stores, per identity, the ordered children returned by the last
    successful discovery, plus an expansion flag that survives refreshes.
    Coordinates loads so that at most one discovery per identity is in
    flight; concurrent callers share its result.

    Attributes:
        _children: Cached children per identity
        _expanded: Expansion flag per identity
        _in_flight: Pending load per identity
    """

    def __init__(self) -> None:
        """Initialize empty cache."""
        self._children: dict[str, Children] = {}
        self._expanded: dict[str, bool] = {}
        self._in_flight: dict[str, asyncio.Task[Children]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, identity: str) -> Children | None:
        """
        Get cached children.

        Args:
            identity: Node identity

        Returns:
            Cached children or None if not cached
        """
        children = self._children.get(identity)
        if children is None:
            self._misses += 1
        else:
            self._hits += 1
        return children

    def put(self, identity: str, children: Iterable[SchemaNode]) -> None:
        """
        Cache children for identity, replacing any previous entry.

        Args:
            identity: Node identity
            children: Children in discovery order
        """
        self._children[identity] = tuple(children)

    def has(self, identity: str) -> bool:
        """Check if identity is cached (does not count as hit or miss)."""
        return identity in self._children

    def invalidate(self, identity: str) -> bool:
        """
        Remove exactly one entry.

        A load in flight for the identity will not store its result.

        Args:
            identity: Node identity

        Returns:
            True if an entry was removed
        """
        self._in_flight.pop(identity, None)
        if self._children.pop(identity, None) is None:
            logger.debug('invalidate_missing', identity=identity)
            return False
        logger.debug('invalidate', identity=identity)
        return True

    def invalidate_prefix(self, scope_identity: str) -> int:
        """
        Remove every entry nested beneath a scope.

        Matches identities starting with scope_identity followed by the
        separator; the scope's own entry is left alone.

        Args:
            scope_identity: Identity of the parent scope (e.g. a database)

        Returns:
            Number of entries removed
        """
        prefix = scope_identity + IDENTITY_SEPARATOR
        stale = [key for key in self._children if key.startswith(prefix)]
        for key in stale:
            del self._children[key]
        for key in [key for key in self._in_flight if key.startswith(prefix)]:
            del self._in_flight[key]

        logger.debug('invalidate_prefix', scope=scope_identity, removed=len(stale))
        return len(stale)

    def get_expansion_state(self, identity: str) -> bool:
        """Get the expand/collapse flag (collapsed by default)."""
        return self._expanded.get(identity, False)

    def set_expansion_state(self, identity: str, expanded: bool) -> None:
        """Set the expand/collapse flag."""
        self._expanded[identity] = expanded

    async def load(
        self,
        identity: str,
        loader: Loader,
        force: bool = False,
    ) -> Children:
        """
        Get children from cache or run the loader.

        On a hit (and not forced) returns the cached tuple unchanged.
        Otherwise joins a load already in flight for the identity, or runs
        loader and caches its result. A failing loader caches nothing and
        its error reaches every waiter.

        Args:
            identity: Node identity
            loader: Coroutine function running the discovery
            force: Skip the cached entry

        Returns:
            Children in discovery order
        """
        if not force:
            cached = self.get(identity)
            if cached is not None:
                return cached

        pending = self._in_flight.get(identity)
        if pending is None:
            pending = asyncio.create_task(self._run(identity, loader))
            pending.add_done_callback(_retrieve_exception)
            self._in_flight[identity] = pending
        else:
            logger.debug('load_join', identity=identity)
        # Cancelling one caller leaves the load running for the others
        return await asyncio.shield(pending)

    async def _run(self, identity: str, loader: Loader) -> Children:
        task = asyncio.current_task()
        try:
            children = tuple(await loader())
        except BaseException:
            self._release(identity, task)
            raise

        if self._release(identity, task):
            self._children[identity] = children
        else:
            logger.debug('load_discarded', identity=identity)
        return children

    def _release(self, identity: str, task: asyncio.Task | None) -> bool:
        """Drop task from in-flight; False if it was invalidated meanwhile."""
        if self._in_flight.get(identity) is task:
            del self._in_flight[identity]
            return True
        return False

    def clear(self) -> None:
        """Clear all cached data."""
        self._children.clear()
        self._expanded.clear()
        self._in_flight.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total = self._hits + self._misses
        return {
            'size': len(self._children),
            'hits': self._hits,
            'misses': self._misses,
            'hit_rate': self._hits / total if total > 0 else 0.0,
            'in_flight': len(self._in_flight),
        }


def _retrieve_exception(task: asyncio.Task) -> None:
    """Mark a failed load as retrieved when every caller has gone."""
    if not task.cancelled():
        task.exception()
