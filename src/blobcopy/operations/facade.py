"""
Operations Facade - Application service layer.

Provides a clean interface between CLI and the copy-verify core, centralizing
command orchestration and configuration policy while keeping CLI commands
thin and testable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..outcome import CopyOutcome
from ..settings import Settings
from ..storage.azure_blob import AzureBlobStore
from ..storage.base import ObjectStore
from ..verify import copy_and_verify as _copy_and_verify, verify_copy as _verify_copy

__all__ = ["Operations", "OpsConfig", "copy_blob"]


@dataclass(frozen=True)
class OpsConfig:
    """
    Configuration for Operations facade.

    Centralizes policy decisions for verification runs.
    """
    parallel_verify: bool = False       # Download source and destination concurrently
    staging_dir: Optional[str] = None   # Temp file location (None = system temp)

    @classmethod
    def from_settings(cls, settings: Settings) -> OpsConfig:
        return cls(
            parallel_verify=settings.parallel_verify,
            staging_dir=settings.staging_dir,
        )


class Operations:
    """
    Application service facade for CLI operations.

    One method per CLI verb. The store is injected so tests can run every
    command against an in-memory fake; exceptions that are not part of the
    outcome taxonomy bubble up for central mapping.
    """

    def __init__(self, config: OpsConfig, store: Optional[ObjectStore] = None,
                 settings: Optional[Settings] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize Operations facade.

        Args:
            config: Configuration settings
            store: Object store (if None, an Azure store is built from settings)
            settings: Settings used to build the store when none is injected
            logger: Logger handed to the orchestrator
        """
        self.cfg = config
        self.logger = logger

        if store is None:
            if settings is None:
                raise ValueError("Either store or settings is required")
            store = AzureBlobStore(settings=settings)
        self.store = store

    def copy(self, source_key: str, dest_key: str) -> CopyOutcome:
        """
        Copy source_key to dest_key server-side and verify the result.

        Args:
            source_key: Key to copy from
            dest_key: Key to copy to

        Returns:
            Outcome of the run
        """
        return _copy_and_verify(
            self.store,
            source_key,
            dest_key,
            staging_dir=self.cfg.staging_dir,
            parallel=self.cfg.parallel_verify,
            logger=self.logger,
        )

    def verify(self, source_key: str, dest_key: str) -> CopyOutcome:
        """
        Verify that dest_key already holds the same content as source_key.

        Args:
            source_key: Reference object
            dest_key: Object to check

        Returns:
            Outcome of the check
        """
        return _verify_copy(
            self.store,
            source_key,
            dest_key,
            staging_dir=self.cfg.staging_dir,
            parallel=self.cfg.parallel_verify,
            logger=self.logger,
        )


def copy_blob(source_key: str, dest_key: str, account_name: str, account_key: str,
              container: str, *, config: Optional[OpsConfig] = None) -> CopyOutcome:
    """
    Copy and verify using only resolved connection strings.

    Args:
        source_key: Key to copy from
        dest_key: Key to copy to
        account_name: Azure storage account name
        account_key: Azure storage account key
        container: Container holding both keys
        config: Optional operations config

    Returns:
        Outcome of the run

    Raises:
        ValueError: If the connection values are invalid
    """
    store = AzureBlobStore.for_credentials(account_name, account_key, container)
    ops = Operations(config=config or OpsConfig(), store=store)
    return ops.copy(source_key, dest_key)
