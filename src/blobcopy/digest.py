"""
Content digests for copy verification.

Digests are only compared for equality; they are rendered as lowercase hex
whenever shown to a person.
"""
from __future__ import annotations

import hashlib
from typing import Callable, Protocol

__all__ = ["DigestComputer", "DigestFactory", "Sha256Digest", "digest_bytes", "hex_digest"]


class DigestComputer(Protocol):
    """Incremental hash accumulator."""

    def update(self, data: bytes) -> None:
        ...

    def finish(self) -> bytes:
        ...


DigestFactory = Callable[[], DigestComputer]


class Sha256Digest:
    """SHA-256 accumulator backed by hashlib."""

    name = "sha256"
    digest_size = 32

    def __init__(self) -> None:
        self._hash = hashlib.sha256()

    def update(self, data: bytes) -> None:
        self._hash.update(data)

    def finish(self) -> bytes:
        return self._hash.digest()


def digest_bytes(data: bytes, factory: DigestFactory = Sha256Digest) -> bytes:
    """Digest a complete in-memory byte sequence."""
    computer = factory()
    computer.update(data)
    return computer.finish()


def hex_digest(digest: bytes) -> str:
    """Render a digest as lowercase hex."""
    return digest.hex()
