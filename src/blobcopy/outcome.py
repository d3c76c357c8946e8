"""
Copy outcomes.

Every copy-verify run returns exactly one of these values. The value is the
authoritative result: it carries the sizes, digests or underlying cause needed
to explain a failure, so nothing has to be recovered from log output.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from .digest import hex_digest

__all__ = [
    "CopyOutcome",
    "Success",
    "SourceNotFound",
    "RemoteCopyFailed",
    "SizeMismatch",
    "ContentMismatch",
    "LocalIOFailure",
]


@dataclass(frozen=True)
class Success:
    """Copy finished and destination content matches source."""
    size: int
    digest: bytes

    ok: ClassVar[bool] = True
    exit_code: ClassVar[int] = 0

    def describe(self) -> str:
        return f"Copy verified: {self.size} bytes, sha256 {hex_digest(self.digest)}"


@dataclass(frozen=True)
class SourceNotFound:
    """Source object does not exist; nothing was copied."""
    key: str

    ok: ClassVar[bool] = False
    exit_code: ClassVar[int] = 1

    def describe(self) -> str:
        return f"Cannot copy from {self.key}: object does not exist"


@dataclass(frozen=True)
class RemoteCopyFailed:
    """Store reported an error for the copy (or for reading its result)."""
    cause: BaseException

    ok: ClassVar[bool] = False
    exit_code: ClassVar[int] = 3

    def describe(self) -> str:
        return f"Remote copy failed: {self.cause}"


@dataclass(frozen=True)
class LocalIOFailure:
    """Downloading or staging content for verification failed."""
    cause: BaseException
    key: Optional[str] = None

    ok: ClassVar[bool] = False
    exit_code: ClassVar[int] = 4

    def describe(self) -> str:
        where = f" for {self.key}" if self.key else ""
        return f"Local I/O failure during verification{where}: {self.cause}"


@dataclass(frozen=True)
class SizeMismatch:
    """Copy call succeeded but destination size differs from source size."""
    source_size: int
    dest_size: int

    ok: ClassVar[bool] = False
    exit_code: ClassVar[int] = 5

    def describe(self) -> str:
        return (
            f"Copy succeeded, but destination size != source size "
            f"(source {self.source_size} bytes, destination {self.dest_size} bytes)"
        )


@dataclass(frozen=True)
class ContentMismatch:
    """Sizes match but destination content differs from source."""
    source_digest: bytes
    dest_digest: bytes

    ok: ClassVar[bool] = False
    exit_code: ClassVar[int] = 6

    @property
    def source_hex(self) -> str:
        return hex_digest(self.source_digest)

    @property
    def dest_hex(self) -> str:
        return hex_digest(self.dest_digest)

    def describe(self) -> str:
        return (
            "Copy succeeded, but content is not the same "
            f"(source sha256 {self.source_hex}, destination sha256 {self.dest_hex})"
        )


CopyOutcome = Union[Success, SourceNotFound, RemoteCopyFailed, LocalIOFailure, SizeMismatch, ContentMismatch]
