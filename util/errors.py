# util/errors.py


class WorkspaceError(Exception):
    # Flow: raise a typed subclass; the store/purge/scope boundaries decide what is recoverable.
    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key


class StorageReadError(WorkspaceError):
    """Entry is malformed or the backend could not be read. Recovered as a cache miss."""


class StorageWriteError(WorkspaceError):
    """Backend rejected a write (quota, availability, unserializable value)."""


class PurgeFailure(WorkspaceError):
    """One sandbox database could not be deleted. Never aborts the batch."""


class RemoteFetchError(WorkspaceError):
    """The remote collaborator could not produce the project's source."""
