"""Persistence layer errors.

Raised by repositories when the backing store cannot answer. They are
deliberately distinct from ``DomainError``: a lookup that finds nothing
returns None, while a store that cannot be reached raises one of these.
"""


class PersistenceError(Exception):
    """Base persistence error."""

    pass


class StorageTimeoutError(PersistenceError):
    """A store operation did not finish within its time bound."""

    def __init__(self, operation: str, timeout: float | None):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"Store operation '{operation}' timed out after {timeout}s")


class StorageUnavailableError(PersistenceError):
    """The store could not be reached."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Store unavailable during '{operation}'")
