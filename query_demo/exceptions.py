"""
Exceptions for query building and execution.
"""


class QueryDemoError(Exception):
    """Base exception for all query-demo errors."""

    pass


class DatabaseConnectionError(QueryDemoError):
    """Raised when no connection string is configured or connecting fails."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class DatabaseError(QueryDemoError):
    """Raised when the database rejects a statement."""

    def __init__(self, message: str, statement: str = ""):
        self.statement = statement
        super().__init__(message)


class NotFoundError(DatabaseError):
    """Raised when a single row was requested but none matched."""

    pass


class DeserializeError(QueryDemoError):
    """Raised when an external JSON form cannot be turned into a row."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)


class EmptyBatchError(QueryDemoError, ValueError):
    """Raised when an insert has no rows or no column can be inferred from them."""

    pass
