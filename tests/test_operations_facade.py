"""
Test Operations facade wiring.

Validates that the Operations facade passes configuration policy through to
the orchestrator and builds stores from settings when none is injected.
"""
from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from blobcopy.operations import Operations, OpsConfig, copy_blob
from blobcopy.outcome import SourceNotFound, Success
from blobcopy.storage.azure_blob import AzureBlobStore


class TestOperationsFacade:
    """Test Operations facade orchestration."""

    def test_facade_initialization(self, store):
        config = OpsConfig(parallel_verify=True)
        ops = Operations(config=config, store=store)

        assert ops.cfg is config
        assert ops.store is store

    def test_builds_azure_store_from_settings(self, settings):
        ops = Operations(config=OpsConfig(), settings=settings)
        assert isinstance(ops.store, AzureBlobStore)
        assert ops.store.container == "test-container"

    def test_requires_store_or_settings(self):
        with pytest.raises(ValueError, match="Either store or settings is required"):
            Operations(config=OpsConfig())

    def test_config_from_settings(self, settings, tmp_path):
        from dataclasses import replace
        custom = replace(settings, parallel_verify=True, staging_dir=str(tmp_path))

        config = OpsConfig.from_settings(custom)

        assert config == OpsConfig(parallel_verify=True, staging_dir=str(tmp_path))

    def test_copy_delegates_with_policy(self, store, staging_dir):
        logger = logging.getLogger("tests.facade")
        ops = Operations(
            config=OpsConfig(parallel_verify=True, staging_dir=str(staging_dir)),
            store=store,
            logger=logger,
        )

        with patch("blobcopy.operations.facade._copy_and_verify") as mock_copy:
            result = ops.copy("a", "b")

        mock_copy.assert_called_once_with(
            store, "a", "b", staging_dir=str(staging_dir), parallel=True, logger=logger
        )
        assert result is mock_copy.return_value

    def test_verify_delegates_with_policy(self, store):
        ops = Operations(config=OpsConfig(), store=store)

        with patch("blobcopy.operations.facade._verify_copy") as mock_verify:
            ops.verify("a", "b")

        mock_verify.assert_called_once_with(store, "a", "b", staging_dir=None, parallel=False, logger=None)

    def test_copy_end_to_end(self, store, staging_dir):
        store.put("a", b"payload")
        ops = Operations(config=OpsConfig(staging_dir=str(staging_dir)), store=store)

        assert isinstance(ops.copy("a", "b"), Success)
        assert isinstance(ops.copy("missing", "b"), SourceNotFound)


class TestCopyBlob:
    """Test the five-string entry point."""

    def test_builds_store_from_credentials(self, store):
        with patch("blobcopy.operations.facade.AzureBlobStore.for_credentials", return_value=store) as factory:
            outcome = copy_blob("missing", "dst", "acct", "key==", "backups")

        factory.assert_called_once_with("acct", "key==", "backups")
        assert outcome == SourceNotFound(key="missing")

    def test_invalid_container_raises(self):
        with pytest.raises(ValueError, match="Invalid container name"):
            copy_blob("a", "b", "acct", "key==", "BAD")
