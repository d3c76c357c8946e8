"""
Copy-then-verify orchestration.

Runs a server-side copy between two keys of one container and then proves
the copy correct by downloading both objects and comparing content digests.

Each step gates the next:

    exists(source) -> stat(source) -> copy -> stat(dest) -> stage+digest both -> compare

Any failed gate ends the run with the matching CopyOutcome. Nothing is
retried; a caller that wants retries wraps the whole run.

The store can be changed by other writers between any two steps; a run has
no isolation from that and reports whatever it observed.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from .digest import DigestFactory, Sha256Digest, hex_digest
from .outcome import (
    ContentMismatch,
    CopyOutcome,
    LocalIOFailure,
    RemoteCopyFailed,
    SizeMismatch,
    SourceNotFound,
    Success,
)
from .staging import StagedObject, stage_and_digest
from .storage.base import ObjectStore
from .storage.errors import ObjectNotFound, StoreError

__all__ = ["copy_and_verify", "verify_copy"]

_logger = logging.getLogger(__name__)


class _StagingFailed(Exception):
    """Download or staging of one side failed; carries the key and cause."""

    def __init__(self, key: str, cause: BaseException):
        super().__init__(f"{key}: {cause}")
        self.key = key
        self.cause = cause


def copy_and_verify(
    store: ObjectStore,
    source_key: str,
    dest_key: str,
    *,
    staging_dir: Optional[str | Path] = None,
    digest_factory: DigestFactory = Sha256Digest,
    parallel: bool = False,
    logger: Optional[logging.Logger] = None,
) -> CopyOutcome:
    """
    Copy source_key to dest_key server-side, then verify the copy.

    Source and destination may be the same key; the store then copies an
    object onto itself and verification compares it with itself.

    Args:
        store: Object store bound to the container
        source_key: Key to copy from
        dest_key: Key to copy to
        staging_dir: Directory for verification temp files (None = system temp)
        digest_factory: Digest computer used for both objects
        parallel: Download and digest both objects concurrently
        logger: Logger for progress messages (defaults to this module's logger)

    Returns:
        Exactly one CopyOutcome describing the run

    Raises:
        ValueError: If the store rejects a key outright (e.g. an empty key);
            keys are expected to be validated by the caller
    """
    log = logger or _logger

    source_size = _source_size(store, source_key, log)
    if not isinstance(source_size, int):
        return source_size

    log.info(f"Copying {source_key} to {dest_key} ({source_size} bytes)")
    try:
        store.copy(source_key, dest_key)
    except StoreError as e:
        log.error(f"Remote copy {source_key} -> {dest_key} failed: {e}")
        return RemoteCopyFailed(cause=e)

    return _verify_against(
        store, source_key, dest_key, source_size,
        staging_dir=staging_dir, digest_factory=digest_factory, parallel=parallel, log=log,
    )


def verify_copy(
    store: ObjectStore,
    source_key: str,
    dest_key: str,
    *,
    staging_dir: Optional[str | Path] = None,
    digest_factory: DigestFactory = Sha256Digest,
    parallel: bool = False,
    logger: Optional[logging.Logger] = None,
) -> CopyOutcome:
    """
    Verify an existing copy without copying again.

    Same checks as copy_and_verify minus the remote copy. A missing
    destination is reported as RemoteCopyFailed carrying ObjectNotFound.
    """
    log = logger or _logger

    source_size = _source_size(store, source_key, log)
    if not isinstance(source_size, int):
        return source_size

    return _verify_against(
        store, source_key, dest_key, source_size,
        staging_dir=staging_dir, digest_factory=digest_factory, parallel=parallel, log=log,
    )


def _source_size(store: ObjectStore, source_key: str, log: logging.Logger) -> int | CopyOutcome:
    """Existence check and size capture for the source."""
    try:
        if not store.exists(source_key):
            log.error(f"Cannot copy from {source_key} - blob does not exist")
            return SourceNotFound(key=source_key)
        return store.stat(source_key).size
    except ObjectNotFound:
        # Removed between the existence check and the metadata read
        log.error(f"Cannot copy from {source_key} - blob does not exist")
        return SourceNotFound(key=source_key)
    except StoreError as e:
        log.error(f"Reading metadata for {source_key} failed: {e}")
        return RemoteCopyFailed(cause=e)


def _verify_against(
    store: ObjectStore,
    source_key: str,
    dest_key: str,
    source_size: int,
    *,
    staging_dir: Optional[str | Path],
    digest_factory: DigestFactory,
    parallel: bool,
    log: logging.Logger,
) -> CopyOutcome:
    try:
        dest_size = store.stat(dest_key).size
    except StoreError as e:
        log.error(f"Reading metadata for {dest_key} failed: {e}")
        return RemoteCopyFailed(cause=e)

    if dest_size != source_size:
        log.error(f"Destination size != source size ({dest_size} != {source_size})")
        return SizeMismatch(source_size=source_size, dest_size=dest_size)

    try:
        if parallel:
            source_staged, dest_staged = _stage_parallel(
                store, source_key, dest_key, staging_dir=staging_dir, digest_factory=digest_factory
            )
        else:
            source_staged = _stage(store, source_key, staging_dir=staging_dir, digest_factory=digest_factory)
            dest_staged = _stage(store, dest_key, staging_dir=staging_dir, digest_factory=digest_factory)
    except _StagingFailed as e:
        log.error(f"Staging {e.key} for verification failed: {e.cause}")
        return LocalIOFailure(cause=e.cause, key=e.key)

    log.debug(f"Source hash:       {hex_digest(source_staged.digest)}")
    log.debug(f"Destination hash:  {hex_digest(dest_staged.digest)}")

    if source_staged.digest != dest_staged.digest:
        log.error("Copy succeeded, but content is not the same")
        return ContentMismatch(source_digest=source_staged.digest, dest_digest=dest_staged.digest)

    log.info(f"Verified {dest_key} matches {source_key}")
    return Success(size=source_staged.size, digest=source_staged.digest)


def _stage(
    store: ObjectStore,
    key: str,
    *,
    staging_dir: Optional[str | Path],
    digest_factory: DigestFactory,
) -> StagedObject:
    try:
        stream = store.open_read(key)
        return stage_and_digest(stream, staging_dir=staging_dir, digest_factory=digest_factory)
    except (StoreError, OSError) as e:
        raise _StagingFailed(key, e) from e


def _stage_parallel(
    store: ObjectStore,
    source_key: str,
    dest_key: str,
    *,
    staging_dir: Optional[str | Path],
    digest_factory: DigestFactory,
) -> tuple[StagedObject, StagedObject]:
    # Both branches finish (and release their buffers) before the pool exits;
    # a source failure is reported ahead of a destination failure.
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="blobcopy-verify") as pool:
        source_future = pool.submit(
            _stage, store, source_key, staging_dir=staging_dir, digest_factory=digest_factory
        )
        dest_future = pool.submit(
            _stage, store, dest_key, staging_dir=staging_dir, digest_factory=digest_factory
        )
        source_error = source_future.exception()
        dest_error = dest_future.exception()

    if source_error is not None:
        raise source_error
    if dest_error is not None:
        raise dest_error
    return source_future.result(), dest_future.result()
