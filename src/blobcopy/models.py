"""
Data models for blobcopy configuration files.

The connection config file holds the account credentials and container so
they don't have to be passed on the command line.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConnectionConfig(BaseModel):
    """
    Connection settings parsed from a YAML config file.

    Example file::

        account-name: myaccount
        account-key: base64key==
        container: backups
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    account_name: str = Field(..., alias="account-name", description="Azure storage account name")
    account_key: str = Field(..., alias="account-key", description="Azure storage account key")
    container: Optional[str] = Field(default=None, description="Azure blob container")
    blob_endpoint: Optional[str] = Field(
        default=None, alias="blob-endpoint", description="Custom blob endpoint (Azurite/private cloud)"
    )

    @field_validator("account_name", "account_key")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @classmethod
    def from_yaml_file(cls, path: Path) -> ConnectionConfig:
        """Load ConnectionConfig from a YAML file."""
        import yaml

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Config file is not valid YAML: {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

        return cls.model_validate(data)

    def as_settings_overrides(self) -> Dict[str, Any]:
        """Map config fields onto Settings field names."""
        return {
            "az_account": self.account_name,
            "az_key": self.account_key,
            "container": self.container,
            "az_blob_endpoint": self.blob_endpoint,
        }


__all__ = ["ConnectionConfig"]
