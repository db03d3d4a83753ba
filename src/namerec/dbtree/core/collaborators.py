"""Interfaces the core calls into, with headless default implementations."""

from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol
from typing import runtime_checkable

import structlog

if TYPE_CHECKING:
    from namerec.dbtree.backup import DumpRequest

logger = structlog.get_logger(__name__)


@runtime_checkable
class TreeView(Protocol):
    """Tree-rendering collaborator."""

    def refresh(self) -> None:
        """Redraw the tree after a mutation."""
        ...


@runtime_checkable
class Confirmation(Protocol):
    """Prompts the user for a value or a confirmation token."""

    async def ask(self, prompt: str, placeholder: str = '', value: str = '') -> str | None:
        """
        Show a prompt.

        Args:
            prompt: Question shown to the user
            placeholder: Hint shown in an empty input
            value: Pre-filled input value

        Returns:
            User text, or None/'' when cancelled
        """
        ...


@runtime_checkable
class TextSurface(Protocol):
    """Editor/document collaborator for SQL text."""

    async def open_as_document(self, sql: str) -> None:
        """Open SQL text for editing."""
        ...

    async def show_document(self, text: str) -> None:
        """Show read-only text (e.g. DDL)."""
        ...

    async def run_immediately(self, sql: str, node: Any) -> None:
        """Execute SQL in the scope of node and display results."""
        ...


@runtime_checkable
class Dumper(Protocol):
    """Exports a table to a file."""

    async def dump(self, request: 'DumpRequest', destination: Path) -> None:
        """
        Dump request.table into destination.

        Raises:
            DBTreeBackupError: If the export fails
        """
        ...


@runtime_checkable
class Notifier(Protocol):
    """Surfaces messages to the user. Not part of control flow."""

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class NullTreeView:
    """Tree view that does nothing (headless use)."""

    def refresh(self) -> None:
        logger.debug('tree_refresh_requested')


class DecliningConfirmation:
    """Confirmation that always cancels. Mutations stay no-ops until a real prompt is wired."""

    async def ask(self, prompt: str, placeholder: str = '', value: str = '') -> str | None:
        _ = placeholder, value
        logger.debug('confirmation_declined', prompt=prompt)
        return None


@dataclass
class BufferTextSurface:
    """Text surface that keeps documents and run requests in memory."""

    documents: list[str] = field(default_factory=list)
    shown: list[str] = field(default_factory=list)
    executed: list[tuple[str, Any]] = field(default_factory=list)

    async def open_as_document(self, sql: str) -> None:
        self.documents.append(sql)

    async def show_document(self, text: str) -> None:
        self.shown.append(text)

    async def run_immediately(self, sql: str, node: Any) -> None:
        self.executed.append((sql, node))


class LoggingNotifier:
    """Notifier that writes user messages to the log."""

    def info(self, message: str) -> None:
        logger.info('notify', message=message)

    def warning(self, message: str) -> None:
        logger.warning('notify', message=message)

    def error(self, message: str) -> None:
        logger.error('notify', message=message)
