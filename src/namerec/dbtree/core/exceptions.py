"""dbtree exception hierarchy."""


class DBTreeError(Exception):
    """Base exception for dbtree errors."""

    def __init__(self, message: str, identity: str | None = None) -> None:
        """
        Initialize dbtree exception.

        Args:
            message: Error message
            identity: Optional node or connection identity context
        """
        self.identity = identity
        super().__init__(message)


class DBTreeConnectionError(DBTreeError):
    """Endpoint unreachable or credentials rejected."""

    def __init__(
        self,
        identity: str,
        cause: Exception,
        message: str | None = None,
    ) -> None:
        """
        Initialize connection error.

        Args:
            identity: Descriptor identity of the endpoint
            cause: Underlying driver exception
            message: Optional custom message
        """
        self.cause = cause
        msg = message or f'Cannot connect to {identity}: {cause}'
        super().__init__(msg, identity)


class DBTreeQueryError(DBTreeError):
    """Statement rejected by the database engine."""

    def __init__(
        self,
        message: str,
        sql: str | None = None,
        original_error: Exception | None = None,
        identity: str | None = None,
    ) -> None:
        """
        Initialize query error.

        Args:
            message: Engine error message, verbatim
            sql: Statement that failed
            original_error: Original exception that caused the error
            identity: Optional identity context
        """
        self.sql = sql
        self.original_error = original_error
        super().__init__(message, identity)


class DBTreeBackupError(DBTreeError):
    """Table dump failed."""
