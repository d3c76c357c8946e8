"""
Storage interfaces for blobcopy.

These protocols define the boundary between the copy-verify orchestrator and
object store implementations, enabling clean dependency injection and testing
with fakes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Iterable, Protocol, runtime_checkable

# Type alias for byte streams (file-like or iterable)
ByteStream = IO[bytes] | Iterable[bytes]


@dataclass(frozen=True, slots=True)
class ObjectRef:
    """
    Lookup handle for one stored object.

    Not an owned resource: holding a ref does not imply the object exists.
    """
    container: str
    key: str

    def __post_init__(self) -> None:
        if not self.container:
            raise ValueError("container cannot be empty")
        if not self.key:
            raise ValueError("key cannot be empty")

    def __str__(self) -> str:
        return f"{self.container}/{self.key}"


@dataclass(frozen=True)
class ObjectStat:
    """
    Metadata snapshot for a stored object.

    Invariants:
    - size: exact byte length (>= 0)

    The snapshot can be stale as soon as it is returned; nothing is locked
    against concurrent writers.
    """
    key: str
    size: int

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f"size must be non-negative, got {self.size}")


__all__ = ["ByteStream", "ObjectRef", "ObjectStat", "ObjectStore"]


@runtime_checkable
class ObjectStore(Protocol):
    """Protocol for the object store operations the orchestrator needs."""

    def exists(self, key: str) -> bool:
        """
        Check whether an object exists.

        Args:
            key: Object key within the store's container

        Returns:
            True if the object exists

        Raises:
            StoreError: For service or transport errors
        """
        ...

    def stat(self, key: str) -> ObjectStat:
        """
        Get metadata for an object without fetching content.

        Args:
            key: Object key within the store's container

        Returns:
            Object metadata (size)

        Raises:
            ObjectNotFound: If object does not exist
            StoreError: For service or transport errors
        """
        ...

    def copy(self, source_key: str, dest_key: str) -> None:
        """
        Copy an object server-side and wait for the copy to finish.

        No object bytes pass through the calling process.

        Args:
            source_key: Key to copy from
            dest_key: Key to copy to (overwritten if present)

        Raises:
            RemoteCopyError: If the copy is rejected or does not succeed
            StoreError: For other service or transport errors
        """
        ...

    def open_read(self, key: str) -> ByteStream:
        """
        Open a streaming source for an object's content.

        Args:
            key: Object key within the store's container

        Returns:
            Streaming source for the object content

        Raises:
            ObjectNotFound: If object does not exist
            OSError: For I/O errors while streaming
        """
        ...
