"""
errors.py
─────────
Exception hierarchy shared by the store, the inventory facade and the API.
"""

from typing import Iterable


class StoreError(Exception):
    """Base class for every inventory store failure."""


class ValidationError(StoreError):
    """Caller input rejected before anything is persisted."""


class MissingFields(ValidationError):
    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__("missing fields: " + ", ".join(self.missing))


class DuplicateBackendId(ValidationError):
    def __init__(self, backend_id: str):
        self.backend_id = backend_id
        super().__init__(f"backend id already exists: {backend_id}")


class InvalidBackendId(ValidationError):
    def __init__(self, backend_id):
        self.backend_id = backend_id
        super().__init__(f"backend id must be a non-empty string, got {backend_id!r}")


class NotFound(StoreError):
    def __init__(self, backend_id: str):
        self.backend_id = backend_id
        super().__init__(f"not found: {backend_id}")


class CorruptStore(StoreError):
    """The backing document exists but is not a well-formed items document."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"corrupt store at {path}: {reason}")


class PersistenceFailure(StoreError):
    """
    A mutation could not be written to disk.

    applied_in_memory tells the caller whether the in-memory collection
    still carries the mutation (update/delete) or was rolled back (create).
    """

    def __init__(self, operation: str, applied_in_memory: bool):
        self.operation = operation
        self.applied_in_memory = applied_in_memory
        state = "applied in memory only" if applied_in_memory else "rolled back"
        super().__init__(f"failed to save db during {operation} ({state})")
