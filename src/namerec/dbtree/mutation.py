"""Confirm → execute → invalidate → refresh sequencing for schema mutations."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from typing import Any

import structlog

from namerec.dbtree.core.exceptions import DBTreeError

if TYPE_CHECKING:
    from namerec.dbtree.core.context import DBTreeContext

logger = structlog.get_logger(__name__)

AFFIRMATIVE_TOKENS = frozenset({'y', 'yes'})


class InvalidationScope(str, Enum):
    """Cache scope dropped after a successful mutation."""

    NONE = 'none'
    NODE = 'node'
    DATABASE = 'database'


class MutationStatus(str, Enum):
    """Terminal outcome of a mutating operation."""

    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    CANCELLED = 'cancelled'


@dataclass(frozen=True)
class MutationOutcome:
    """Single terminal result reported to the caller."""

    status: MutationStatus
    message: str = ''
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is MutationStatus.SUCCEEDED

    @classmethod
    def cancelled(cls, message: str = '') -> 'MutationOutcome':
        return cls(status=MutationStatus.CANCELLED, message=message)


def is_affirmative(answer: str | None) -> bool:
    """True only for an explicit 'y' / 'yes' (any case)."""
    if not answer:
        return False
    return answer.strip().lower() in AFFIRMATIVE_TOKENS


class MutationCoordinator:
    """
    Runs one mutating statement for a node and keeps the cache consistent.

    Sequence: forced-fresh connection → execute → invalidate the requested
    scope → refresh the tree → notify. On failure nothing is invalidated and
    the engine message is reported verbatim. Nothing is retried.
    """

    async def confirm(
        self,
        context: 'DBTreeContext',
        prompt: str,
        placeholder: str = '',
        value: str = '',
    ) -> str | None:
        """
        Ask the confirmation collaborator.

        Returns:
            Stripped answer, or None when cancelled or empty
        """
        answer = await context.confirmation.ask(prompt, placeholder, value)
        if answer is None:
            return None
        return answer.strip() or None

    async def apply(
        self,
        context: 'DBTreeContext',
        node: Any,
        statement: str,
        scope: InvalidationScope = InvalidationScope.NONE,
        success_message: str = '',
    ) -> MutationOutcome:
        """
        Execute statement for node.

        Args:
            context: dbtree context
            node: Node the statement targets (needs descriptor and identity)
            statement: SQL text
            scope: Cache scope to drop on success
            success_message: Message reported to the user on success

        Returns:
            SUCCEEDED or FAILED outcome
        """
        log = logger.bind(identity=node.identity, sql=statement)
        try:
            handle = await context.registry.get_connection(node.descriptor, force_new=True)
            await context.runner.execute(handle, statement)
        except DBTreeError as e:
            message = str(e)
            log.warning('mutation_failed', error=message)
            context.notifier.error(message)
            return MutationOutcome(status=MutationStatus.FAILED, error=message)

        self.invalidate(context, node, scope)
        context.tree.refresh()
        if success_message:
            context.notifier.info(success_message)
        log.info('mutation_applied', scope=scope.value)
        return MutationOutcome(status=MutationStatus.SUCCEEDED, message=success_message)

    def invalidate(
        self,
        context: 'DBTreeContext',
        node: Any,
        scope: InvalidationScope,
    ) -> None:
        """
        Drop cache entries affected by a mutation of node.

        DATABASE scope drops the database's own table list and every entry
        nested beneath it.
        """
        if scope is InvalidationScope.NODE:
            context.cache.invalidate(node.identity)
        elif scope is InvalidationScope.DATABASE:
            database_identity = node.descriptor.identity
            context.cache.invalidate(database_identity)
            context.cache.invalidate_prefix(database_identity)
