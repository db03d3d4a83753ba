"""Live connection handles keyed by descriptor identity."""

import asyncio
import ssl
from collections.abc import Awaitable
from collections.abc import Callable

import structlog
from sqlalchemy import URL
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import create_async_engine

from namerec.dbtree.core.config import DBTreeSettings
from namerec.dbtree.core.exceptions import DBTreeConnectionError
from namerec.dbtree.core.types import ConnectionDescriptor

logger = structlog.get_logger(__name__)

Connector = Callable[[ConnectionDescriptor], Awaitable[AsyncEngine]]


def build_url(descriptor: ConnectionDescriptor, driver: str) -> URL:
    """
    Build a SQLAlchemy URL for a descriptor.

    Args:
        descriptor: Connection descriptor
        driver: SQLAlchemy drivername (e.g. 'mysql+aiomysql')

    Returns:
        URL object (password is masked in its string form)
    """
    return URL.create(
        drivername=driver,
        username=descriptor.user or None,
        password=descriptor.password or None,
        host=descriptor.host or None,
        port=descriptor.port or None,
        database=descriptor.database or None,
    )


class EngineConnector:
    """
    Opens an AsyncEngine for a descriptor and verifies it with SELECT 1.

    Attributes:
        _settings: Driver name and connect timeout source
    """

    def __init__(self, settings: DBTreeSettings) -> None:
        self._settings = settings

    async def __call__(self, descriptor: ConnectionDescriptor) -> AsyncEngine:
        connect_args: dict = {'connect_timeout': self._settings.connect_timeout}
        if descriptor.cert_path:
            connect_args['ssl'] = ssl.create_default_context(cafile=descriptor.cert_path)

        engine = create_async_engine(
            build_url(descriptor, self._settings.driver),
            connect_args=connect_args,
            pool_pre_ping=True,
        )
        try:
            async with engine.connect() as conn:
                await conn.execute(text('SELECT 1'))
        except Exception:
            await engine.dispose()
            raise
        return engine


class ConnectionRegistry:
    """
    Owns live connection handles keyed by descriptor identity.

    Handles are created on first use and shared by every operation on the
    same descriptor. A forced refresh opens a new handle and retires the old
    one: its idle connections are closed, while connections already checked
    out from it finish on their own. An operation still holding a retired
    handle may open fresh connections on it, so retired handles are kept
    and disposed again by close() and reset().
    """

    def __init__(self, connector: Connector) -> None:
        """
        Initialize registry.

        Args:
            connector: Coroutine function opening a handle for a descriptor
        """
        self._connector = connector
        self._handles: dict[str, AsyncEngine] = {}
        self._retired: dict[str, list[AsyncEngine]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __contains__(self, descriptor: ConnectionDescriptor) -> bool:
        return descriptor.identity in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    async def get_connection(
        self,
        descriptor: ConnectionDescriptor,
        force_new: bool = False,
    ) -> AsyncEngine:
        """
        Get the live handle for a descriptor.

        Args:
            descriptor: Connection descriptor
            force_new: Open a new handle even if one exists

        Returns:
            Connection handle

        Raises:
            DBTreeConnectionError: If the endpoint is unreachable or rejects credentials
        """
        key = descriptor.identity
        if not force_new and key in self._handles:
            return self._handles[key]

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another caller may have opened it while we waited
            if not force_new and key in self._handles:
                return self._handles[key]

            logger.info('connection_open', identity=key, force_new=force_new)
            try:
                handle = await self._connector(descriptor)
            except DBTreeConnectionError:
                raise
            except Exception as e:
                logger.warning('connection_failed', identity=key, error=str(e))
                raise DBTreeConnectionError(key, e) from e

            previous = self._handles.get(key)
            self._handles[key] = handle

        if previous is not None and previous is not handle:
            self._retired.setdefault(key, []).append(previous)
            await self._dispose(key, previous)
        return handle

    async def close(self, descriptor: ConnectionDescriptor) -> None:
        """Dispose the handle of one descriptor and any it replaced."""
        key = descriptor.identity
        handle = self._handles.pop(key, None)
        for retired in self._retired.pop(key, []):
            await self._dispose(key, retired)
        if handle is not None:
            await self._dispose(key, handle)
        self._drop_lock(key)

    async def reset(self) -> None:
        """Dispose every handle, live or retired."""
        handles = list(self._handles.items())
        retired = [(key, handle) for key, engines in self._retired.items() for handle in engines]
        self._handles.clear()
        self._retired.clear()
        for key, handle in retired + handles:
            await self._dispose(key, handle)
        for key in list(self._locks):
            self._drop_lock(key)

    def _drop_lock(self, key: str) -> None:
        lock = self._locks.get(key)
        if lock is not None and not lock.locked():
            del self._locks[key]

    async def _dispose(self, key: str, handle: AsyncEngine) -> None:
        logger.debug('connection_dispose', identity=key)
        await handle.dispose()
