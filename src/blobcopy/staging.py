"""
Local staging of downloaded objects.

Each downloaded object is streamed into its own temp file while the digest is
fed chunk by chunk, so peak memory stays at one chunk regardless of object
size. The temp file is removed when the staging scope exits, on every path.
"""
from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from .digest import DigestFactory, Sha256Digest
from .storage.base import ByteStream

__all__ = ["CHUNK_SIZE", "StagedObject", "staging_buffer", "stage_and_digest"]

CHUNK_SIZE = 1024 * 1024  # 1 MiB

STAGING_PREFIX = ".blobcopy.stage."


@dataclass(frozen=True)
class StagedObject:
    """Digest and byte count of one fully staged object."""
    size: int
    digest: bytes


@contextmanager
def staging_buffer(staging_dir: Optional[str | Path] = None) -> Iterator[BinaryIO]:
    """
    Create a temp file owned by the caller for the duration of the block.

    Args:
        staging_dir: Directory for the temp file (None = system temp dir)

    Yields:
        Open binary file positioned at 0

    Raises:
        OSError: If the temp file cannot be created
    """
    fd, temp_path = tempfile.mkstemp(prefix=STAGING_PREFIX, dir=staging_dir)
    temp_path = Path(temp_path)

    try:
        with os.fdopen(fd, "w+b") as buf:
            yield buf
    finally:
        try:
            temp_path.unlink()
        except FileNotFoundError:
            pass


def _iter_stream(bytestream: ByteStream) -> Iterator[bytes]:
    # Handle file-like objects with read()
    if hasattr(bytestream, "read"):
        while True:
            chunk = bytestream.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    else:
        yield from bytestream


def stage_and_digest(
    bytestream: ByteStream,
    *,
    staging_dir: Optional[str | Path] = None,
    digest_factory: DigestFactory = Sha256Digest,
) -> StagedObject:
    """
    Stream content into a scoped staging buffer while digesting it.

    The buffer is released before this function returns or raises.

    Args:
        bytestream: Content stream (file-like with read() or iterable of bytes)
        staging_dir: Directory for the staging temp file
        digest_factory: Digest computer constructor

    Returns:
        StagedObject with the byte count and digest of the full content

    Raises:
        OSError: If reading the stream or writing the buffer fails
    """
    computer = digest_factory()
    size = 0

    try:
        with staging_buffer(staging_dir) as buf:
            for chunk in _iter_stream(bytestream):
                computer.update(chunk)
                buf.write(chunk)
                size += len(chunk)
            buf.flush()
    finally:
        close = getattr(bytestream, "close", None)
        if close is not None:
            close()

    return StagedObject(size=size, digest=computer.finish())
