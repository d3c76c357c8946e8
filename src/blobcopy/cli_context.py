"""
CLI Context for managing application dependencies.

Resolves connection settings from CLI flags, an optional YAML config file and
the environment (in that order of precedence), and lazily builds the store.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .models import ConnectionConfig
from .settings import Settings, create_settings_from_env
from .storage.azure_blob import AzureBlobStore
from .storage.base import ObjectStore


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Manages application-level dependencies (settings, store) that are
    initialized once per command execution.
    """
    settings: Settings
    _store: Optional[ObjectStore] = None

    @classmethod
    def from_options(
        cls,
        *,
        config_path: Optional[str] = None,
        account_name: Optional[str] = None,
        account_key: Optional[str] = None,
        container: Optional[str] = None,
        staging_dir: Optional[str] = None,
        parallel_verify: Optional[bool] = None,
    ) -> CLIContext:
        """
        Create CLI context from command options.

        Args:
            config_path: Path to a YAML connection config file
            account_name: Azure storage account name flag
            account_key: Azure storage account key flag
            container: Container flag
            staging_dir: Staging directory flag
            parallel_verify: Parallel verification flag

        Returns:
            CLIContext with validated settings

        Raises:
            FileNotFoundError: If config_path does not exist
            ValueError: If the resolved configuration is invalid
        """
        overrides: Dict[str, Any] = {}
        if config_path:
            overrides.update(ConnectionConfig.from_yaml_file(Path(config_path)).as_settings_overrides())

        flags = {
            "az_account": account_name,
            "az_key": account_key,
            "container": container,
            "staging_dir": staging_dir,
            "parallel_verify": parallel_verify,
        }
        overrides.update({k: v for k, v in flags.items() if v is not None})

        return cls(settings=create_settings_from_env(**overrides))

    @property
    def store(self) -> ObjectStore:
        """
        Get or create the store (lazy initialization).

        Returns:
            AzureBlobStore bound to the configured container
        """
        if self._store is None:
            self._store = AzureBlobStore(settings=self.settings)
        return self._store
