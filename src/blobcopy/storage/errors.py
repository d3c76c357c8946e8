"""
Object store error classes.

Provides a small taxonomy of errors raised by ObjectStore implementations.
Adapters map SDK exceptions into these so the copy-verify orchestrator can
classify failures without knowing which backend produced them.
"""
from __future__ import annotations


class StoreError(Exception):
    """
    Base class for all object store errors.

    Raised directly for service or transport failures that do not fit a
    more specific subclass (auth failures, throttling, connection resets).
    """
    pass


class ObjectNotFound(StoreError):
    """
    Object does not exist in the container.

    Raised when:
    - stat() is called for a missing key
    - open_read() is called for a missing key
    """

    def __init__(self, key: str, message: str | None = None):
        super().__init__(message or f"Object not found: {key}")
        self.key = key


class RemoteCopyError(StoreError):
    """
    Server-side copy did not complete.

    Raised when:
    - The service rejects the copy request
    - The copy finishes with status 'failed' or 'aborted'
    - The copy is still pending when the wait deadline passes
    """

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.status = status


__all__ = [
    "StoreError",
    "ObjectNotFound",
    "RemoteCopyError",
]
