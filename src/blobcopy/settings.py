"""
Settings and configuration for blobcopy.

Centralizes configuration values and provides validation with fail-fast behavior.
Settings are assembled by the CLI layer (flags, config file, environment) and
handed to the store adapter fully resolved.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

__all__ = ["Settings", "create_settings_from_env"]

# Azure container names: 3-63 chars, lowercase alphanumerics and single hyphens
_CONTAINER_PATTERN = r"^(?=.{3,63}$)[a-z0-9](?:[a-z0-9]|-(?=[a-z0-9]))*$"


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for the blob copy adapter.

    Container:
        container: Azure blob container holding both source and destination

    Authentication (exactly one method):
        az_connection_string: Azure storage connection string
        az_account: Azure storage account name
        az_key: Azure storage account key
        az_blob_endpoint: Custom Azure blob endpoint (for Azurite/private endpoints)

    Behavior:
        timeout_s: Connection timeout for Azure requests
        copy_poll_interval_s: Delay between server-side copy status checks
        copy_timeout_s: Maximum time to wait for a pending server-side copy
        staging_dir: Directory for verification temp files (None = system temp)
        parallel_verify: Download source and destination concurrently
    """
    container: str
    az_connection_string: Optional[str] = None
    az_account: Optional[str] = None
    az_key: Optional[str] = None
    az_blob_endpoint: Optional[str] = None

    timeout_s: float = 60.0
    copy_poll_interval_s: float = 1.0
    copy_timeout_s: float = 3600.0
    staging_dir: Optional[str] = None
    parallel_verify: bool = False

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.container:
            raise ValueError("container is required")

        if self.container != "$root" and not re.match(_CONTAINER_PATTERN, self.container):
            raise ValueError(
                f"Invalid container name: {self.container}. "
                "Must be 3-63 lowercase letters, digits or single hyphens."
            )

        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {self.timeout_s}")

        if self.copy_poll_interval_s <= 0:
            raise ValueError(f"copy_poll_interval_s must be positive, got {self.copy_poll_interval_s}")

        if self.copy_timeout_s <= 0:
            raise ValueError(f"copy_timeout_s must be positive, got {self.copy_timeout_s}")

        # Require either connection string OR (account + key)
        has_conn_str = bool(self.az_connection_string)
        has_account_key = bool(self.az_account and self.az_key)

        if has_conn_str and has_account_key:
            raise ValueError("Specify either az_connection_string OR (az_account + az_key), not both")

        if self.az_account and not self.az_key:
            raise ValueError("az_account specified but az_key is missing")
        if self.az_key and not self.az_account:
            raise ValueError("az_key specified but az_account is missing")

        if not has_conn_str and not has_account_key:
            raise ValueError(
                "Azure authentication not configured: need AZURE_STORAGE_CONNECTION_STRING "
                "or (AZURE_STORAGE_ACCOUNT + AZURE_STORAGE_KEY)"
            )

    @classmethod
    def for_account(cls, account_name: str, account_key: str, container: str, **overrides) -> Settings:
        """
        Build settings from the three connection strings the CLI resolves.

        Args:
            account_name: Azure storage account name
            account_key: Azure storage account key
            container: Container holding source and destination
            **overrides: Any other Settings field

        Returns:
            Validated Settings
        """
        return cls(container=container, az_account=account_name, az_key=account_key, **overrides)


def create_settings_from_env(**overrides) -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        Azure:
        - AZURE_STORAGE_CONNECTION_STRING (optional)
        - AZURE_STORAGE_ACCOUNT (optional)
        - AZURE_STORAGE_KEY (optional)
        - BLOBCOPY_AZURE_BLOB_ENDPOINT (optional, for Azurite/custom endpoints)

        blobcopy:
        - BLOBCOPY_CONTAINER (required unless passed as override)
        - BLOBCOPY_TIMEOUT (default: 60.0)
        - BLOBCOPY_COPY_POLL_INTERVAL (default: 1.0)
        - BLOBCOPY_COPY_TIMEOUT (default: 3600.0)
        - BLOBCOPY_STAGING_DIR (optional)
        - BLOBCOPY_PARALLEL_VERIFY (default: false)

    Args:
        **overrides: Values that take precedence over the environment
            (None values are ignored so unset CLI flags fall through)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid or required values missing

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    # Helper to convert string to bool
    def str_to_bool(value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on')

    # Helper to get float from env
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    values = {
        "container": os.getenv("BLOBCOPY_CONTAINER"),
        "az_connection_string": os.getenv("AZURE_STORAGE_CONNECTION_STRING"),
        "az_account": os.getenv("AZURE_STORAGE_ACCOUNT"),
        "az_key": os.getenv("AZURE_STORAGE_KEY"),
        "az_blob_endpoint": os.getenv("BLOBCOPY_AZURE_BLOB_ENDPOINT"),
        "timeout_s": get_float("BLOBCOPY_TIMEOUT", 60.0),
        "copy_poll_interval_s": get_float("BLOBCOPY_COPY_POLL_INTERVAL", 1.0),
        "copy_timeout_s": get_float("BLOBCOPY_COPY_TIMEOUT", 3600.0),
        "staging_dir": os.getenv("BLOBCOPY_STAGING_DIR"),
        "parallel_verify": str_to_bool(os.getenv("BLOBCOPY_PARALLEL_VERIFY", "false")),
    }

    explicit = {k: v for k, v in overrides.items() if v is not None}

    # Explicit account+key replaces any connection string from the environment
    if explicit.get("az_account") or explicit.get("az_key"):
        values["az_connection_string"] = None

    values.update(explicit)

    if not values["container"]:
        raise ValueError("BLOBCOPY_CONTAINER environment variable (or --container) is required")

    return Settings(**values)
