"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from namerec.dbtree import ConnectionDescriptor
from namerec.dbtree import DBTreeContext
from namerec.dbtree import DBTreeSettings
from namerec.dbtree import DatabaseNode
from namerec.dbtree import DumpRequest
from namerec.dbtree import TableNode
from namerec.dbtree.core.collaborators import BufferTextSurface

ORDERS_COLUMNS = [
    {'name': 'id', 'type': 'int(11)', 'comment': '', 'key': 'PRI', 'nullable': 'NO', 'maxLength': None},
    {'name': 'name', 'type': 'varchar(100)', 'comment': 'customer', 'key': '', 'nullable': 'YES', 'maxLength': 100},
    {'name': 'age', 'type': 'int(11)', 'comment': '', 'key': '', 'nullable': 'YES', 'maxLength': None},
]

SHOP_TABLES = [
    {'name': 'customers', 'comment': ''},
    {'name': 'orders', 'comment': ''},
]


class FakeHandle:
    """Connection handle stand-in."""

    def __init__(self, descriptor: ConnectionDescriptor) -> None:
        self.descriptor = descriptor
        self.disposed = False
        self.dispose_count = 0

    async def dispose(self) -> None:
        self.disposed = True
        self.dispose_count += 1


class FakeConnector:
    """Opens FakeHandles and records them; raises `error` when set."""

    def __init__(self) -> None:
        self.opened: list[FakeHandle] = []
        self.error: Exception | None = None

    async def __call__(self, descriptor: ConnectionDescriptor) -> FakeHandle:
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        handle = FakeHandle(descriptor)
        self.opened.append(handle)
        return handle


class FakeQueryRunner:
    """
    Answers statements by substring match and records every call.

    A response is a list of rows or an exception to raise.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[dict[str, Any]] | Exception] = {}
        self.calls: list[tuple[Any, str, dict[str, Any] | None]] = []
        self.delay = 0.01

    def respond(self, fragment: str, response: list[dict[str, Any]] | Exception) -> None:
        self.responses[fragment] = response

    def count(self, fragment: str) -> int:
        return sum(1 for _, sql, _ in self.calls if fragment in sql)

    async def execute(
        self,
        handle: Any,
        sql: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        self.calls.append((handle, sql, dict(params) if params is not None else None))
        await asyncio.sleep(self.delay)
        for fragment, response in self.responses.items():
            if fragment in sql:
                if isinstance(response, Exception):
                    raise response
                return [dict(row) for row in response]
        return []


class RecordingTreeView:
    def __init__(self) -> None:
        self.refreshes = 0

    def refresh(self) -> None:
        self.refreshes += 1


class ScriptedConfirmation:
    """Returns queued answers in order (None once exhausted)."""

    def __init__(self, *answers: str | None) -> None:
        self.answers = list(answers)
        self.prompts: list[tuple[str, str, str]] = []

    async def ask(self, prompt: str, placeholder: str = '', value: str = '') -> str | None:
        self.prompts.append((prompt, placeholder, value))
        return self.answers.pop(0) if self.answers else None


class RecordingNotifier:
    def __init__(self) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeDumper:
    def __init__(self) -> None:
        self.dumps: list[tuple[DumpRequest, Path]] = []
        self.error: Exception | None = None

    async def dump(self, request: DumpRequest, destination: Path) -> None:
        if self.error is not None:
            raise self.error
        self.dumps.append((request, destination))


@pytest.fixture
def settings() -> DBTreeSettings:
    """Settings isolated from the environment."""
    return DBTreeSettings(_env_file=None, default_page_size=100)


@pytest.fixture
def server() -> ConnectionDescriptor:
    return ConnectionDescriptor(host='db1', user='root', password='secret', port=3306)


@pytest.fixture
def shop(server: ConnectionDescriptor) -> ConnectionDescriptor:
    return server.with_database('shop')


@pytest.fixture
def runner() -> FakeQueryRunner:
    runner = FakeQueryRunner()
    runner.respond('information_schema.COLUMNS', ORDERS_COLUMNS)
    runner.respond('information_schema.TABLES', SHOP_TABLES)
    runner.respond('SHOW DATABASES', [{'Database': 'shop'}, {'Database': 'crm'}])
    return runner


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def tree() -> RecordingTreeView:
    return RecordingTreeView()


@pytest.fixture
def confirmation() -> ScriptedConfirmation:
    return ScriptedConfirmation()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def surface() -> BufferTextSurface:
    return BufferTextSurface()


@pytest.fixture
def dumper() -> FakeDumper:
    return FakeDumper()


@pytest.fixture
def context(  # noqa: PLR0913
    settings: DBTreeSettings,
    connector: FakeConnector,
    runner: FakeQueryRunner,
    tree: RecordingTreeView,
    confirmation: ScriptedConfirmation,
    surface: BufferTextSurface,
    notifier: RecordingNotifier,
    dumper: FakeDumper,
) -> DBTreeContext:
    """Context wired to fakes."""
    return DBTreeContext.create(
        settings=settings,
        connector=connector,
        runner=runner,
        tree=tree,
        confirmation=confirmation,
        surface=surface,
        notifier=notifier,
        dumper=dumper,
    )


@pytest.fixture
def orders(shop: ConnectionDescriptor) -> TableNode:
    return TableNode(shop, 'orders')


@pytest.fixture
def shop_node(shop: ConnectionDescriptor) -> DatabaseNode:
    return DatabaseNode(shop)
