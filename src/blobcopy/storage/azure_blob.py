"""
Azure Blob Storage adapter.

Implements the ObjectStore protocol for one container of an Azure storage
account using the azure-storage-blob SDK.
"""
from __future__ import annotations

import logging
import re
import time
from typing import Iterator, Optional

from ..settings import Settings
from .base import ByteStream, ObjectRef, ObjectStat, ObjectStore
from .errors import ObjectNotFound, RemoteCopyError, StoreError

__all__ = ["AzureBlobStore"]

logger = logging.getLogger(__name__)

_TERMINAL_COPY_FAILURES = ("failed", "aborted")


class AzureBlobStore(ObjectStore):
    """
    ObjectStore adapter for Azure Blob Storage.

    Uses azure-storage-blob SDK with connection string or account+key authentication.
    Supports custom endpoints for Azurite and private Azure clouds.
    All keys are resolved against the container named in settings.
    """

    def __init__(self, *, settings: Settings) -> None:
        """
        Initialize Azure adapter with settings.

        Args:
            settings: Settings containing Azure authentication and container

        Raises:
            ValueError: If Azure authentication is not properly configured
        """
        self._settings = settings
        self._container_client = None

        # Log configuration (without secrets)
        endpoint = settings.az_blob_endpoint or "default endpoint"
        if settings.az_connection_string:
            logger.debug(f"Azure store using connection string auth ({endpoint}), container {settings.container}")
        else:
            logger.debug(
                f"Azure store using account+key auth for {settings.az_account} ({endpoint}), "
                f"container {settings.container}"
            )

    @classmethod
    def for_credentials(cls, account_name: str, account_key: str, container: str, **overrides) -> AzureBlobStore:
        """
        Build a store from an account name, account key and container.

        Args:
            account_name: Azure storage account name
            account_key: Azure storage account key
            container: Container holding the objects
            **overrides: Any other Settings field

        Returns:
            AzureBlobStore bound to the container
        """
        return cls(settings=Settings.for_account(account_name, account_key, container, **overrides))

    @property
    def container(self) -> str:
        return self._settings.container

    def ref(self, key: str) -> ObjectRef:
        """Qualify a key with this store's container."""
        return ObjectRef(container=self._settings.container, key=key)

    def _get_container_client(self):
        """
        Get (and cache) the Azure container client.

        Connection patterns:

        1. Connection string: BlobServiceClient.from_connection_string()
        2. Connection string + custom endpoint: account name and key are
           extracted from the connection string and the endpoint becomes
           {endpoint}/{account}, authenticated with the shared key
        3. Account+key: https://{account}.blob.core.windows.net
        4. Account+key + custom endpoint: {endpoint}/{account}

        Retries are disabled on the SDK pipeline; a failed call is terminal
        for the run.
        """
        if self._container_client is not None:
            return self._container_client

        try:
            from azure.storage.blob import BlobServiceClient
        except ImportError:
            raise ImportError("azure-storage-blob package required for Azure blob storage")

        settings = self._settings
        client_kwargs = {
            "connection_timeout": settings.timeout_s,
            "retry_total": 0,
        }

        if settings.az_connection_string:
            account_match = re.search(r'AccountName=([^;]+)', settings.az_connection_string)
            key_match = re.search(r'AccountKey=([^;]+)', settings.az_connection_string)
            if settings.az_blob_endpoint and account_match:
                account_name = account_match.group(1)
                endpoint_url = f"{settings.az_blob_endpoint.rstrip('/')}/{account_name}"
                credential = None
                if key_match:
                    credential = {"account_name": account_name, "account_key": key_match.group(1)}
                service_client = BlobServiceClient(account_url=endpoint_url, credential=credential, **client_kwargs)
            else:
                service_client = BlobServiceClient.from_connection_string(
                    settings.az_connection_string, **client_kwargs
                )
        else:
            if settings.az_blob_endpoint:
                account_url = f"{settings.az_blob_endpoint.rstrip('/')}/{settings.az_account}"
            else:
                account_url = f"https://{settings.az_account}.blob.core.windows.net"
            credential = {"account_name": settings.az_account, "account_key": settings.az_key}
            service_client = BlobServiceClient(account_url=account_url, credential=credential, **client_kwargs)

        self._container_client = service_client.get_container_client(settings.container)
        return self._container_client

    def _get_blob_client(self, key: str):
        if not key:
            raise ValueError("Blob key cannot be empty")
        return self._get_container_client().get_blob_client(key)

    def exists(self, key: str) -> bool:
        """
        Check whether a blob exists.

        Args:
            key: Blob name within the container

        Returns:
            True if the blob exists

        Raises:
            StoreError: For Azure/network errors
        """
        from azure.core.exceptions import AzureError

        blob_client = self._get_blob_client(key)
        try:
            return blob_client.exists()
        except AzureError as e:
            raise StoreError(f"Azure blob exists check failed for {key}: {e}") from e

    def stat(self, key: str) -> ObjectStat:
        """
        Get blob size without downloading content.

        Args:
            key: Blob name within the container

        Returns:
            ObjectStat with the blob size

        Raises:
            ObjectNotFound: If blob does not exist
            StoreError: For other Azure/network errors
        """
        from azure.core.exceptions import AzureError, ResourceNotFoundError

        blob_client = self._get_blob_client(key)
        try:
            properties = blob_client.get_blob_properties()
        except ResourceNotFoundError as e:
            raise ObjectNotFound(key, f"Blob not found: {self.ref(key)}") from e
        except AzureError as e:
            raise StoreError(f"Azure blob properties error for {key}: {e}") from e

        return ObjectStat(key=key, size=properties.size)

    def copy(self, source_key: str, dest_key: str) -> None:
        """
        Copy a blob server-side within the container.

        Starts an Azure copy from the source blob URL and waits until the
        destination copy status leaves 'pending'. Same-account copies are
        authorized by the account credential, so no SAS is needed.

        Args:
            source_key: Blob to copy from
            dest_key: Blob to copy to (overwritten if present)

        Raises:
            RemoteCopyError: If the copy is rejected, fails, is aborted, or
                does not finish within copy_timeout_s
        """
        from azure.core.exceptions import AzureError

        source_client = self._get_blob_client(source_key)
        dest_client = self._get_blob_client(dest_key)

        logger.debug(f"Starting server-side copy {source_client.url} -> {dest_key}")
        try:
            result = dest_client.start_copy_from_url(source_client.url)
        except AzureError as e:
            raise RemoteCopyError(f"Azure copy {source_key} -> {dest_key} rejected: {e}") from e

        status = result.get("copy_status")
        if status == "pending":
            self._wait_for_copy(dest_client, dest_key, result.get("copy_id"))
        elif status in _TERMINAL_COPY_FAILURES:
            raise RemoteCopyError(f"Azure copy {source_key} -> {dest_key} {status}", status=status)

        logger.debug(f"Server-side copy to {dest_key} complete")

    def _wait_for_copy(self, dest_client, dest_key: str, copy_id: Optional[str]) -> None:
        """Poll destination properties until the pending copy finishes."""
        from azure.core.exceptions import AzureError

        deadline = time.monotonic() + self._settings.copy_timeout_s

        while True:
            time.sleep(self._settings.copy_poll_interval_s)
            try:
                copy_props = dest_client.get_blob_properties().copy
            except AzureError as e:
                raise RemoteCopyError(f"Azure copy status check failed for {dest_key}: {e}") from e

            if copy_id and copy_props.id and copy_props.id != copy_id:
                raise RemoteCopyError(
                    f"Copy to {dest_key} was superseded by another copy ({copy_props.id})",
                    status=copy_props.status,
                )

            if copy_props.status == "success":
                return
            if copy_props.status in _TERMINAL_COPY_FAILURES:
                detail = copy_props.status_description or "no description"
                raise RemoteCopyError(
                    f"Azure copy to {dest_key} {copy_props.status}: {detail}", status=copy_props.status
                )

            if time.monotonic() >= deadline:
                raise RemoteCopyError(
                    f"Azure copy to {dest_key} still pending after {self._settings.copy_timeout_s}s",
                    status=copy_props.status,
                )

            logger.debug(f"Copy to {dest_key} pending ({copy_props.progress or 'no progress yet'})")

    def open_read(self, key: str) -> ByteStream:
        """
        Open a chunked download stream for a blob.

        Args:
            key: Blob name within the container

        Returns:
            Iterator of content chunks

        Raises:
            ObjectNotFound: If blob does not exist
            OSError: For Azure/network errors (also raised lazily mid-stream)
        """
        from azure.core.exceptions import AzureError, ResourceNotFoundError

        blob_client = self._get_blob_client(key)
        try:
            downloader = blob_client.download_blob()
        except ResourceNotFoundError as e:
            raise ObjectNotFound(key, f"Blob not found: {self.ref(key)}") from e
        except AzureError as e:
            raise OSError(f"Azure blob download error for {key}: {e}") from e

        return _iter_chunks(downloader, key)


def _iter_chunks(downloader, key: str) -> Iterator[bytes]:
    from azure.core.exceptions import AzureError

    try:
        for chunk in downloader.chunks():
            yield chunk
    except AzureError as e:
        raise OSError(f"Azure blob download interrupted for {key}: {e}") from e
