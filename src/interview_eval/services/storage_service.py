"""Object storage for uploaded document files (Azure Blob Storage)."""

from typing import Optional, Protocol
from urllib.parse import unquote, urlparse

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity.aio import DefaultAzureCredential
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from interview_eval.config import StorageSettings, get_settings
from interview_eval.utils.errors import StorageError
from interview_eval.utils.logging import get_logger

logger = get_logger("storage_service")


class ObjectStorage(Protocol):
    """Upload bytes and get a URL back; delete by that URL."""

    async def upload(self, data: bytes, blob_name: str, content_type: str = "application/pdf") -> str:
        ...

    async def delete(self, url: str) -> None:
        ...


class StorageService:
    """
    Store uploaded files in Azure Blob Storage.

    Handles:
    - Uploading files under a session folder
    - Deleting files by the URL returned from upload
    """

    def __init__(self, storage_settings: Optional[StorageSettings] = None):
        """Initialize storage service."""
        self.settings = storage_settings or get_settings().storage
        self._client: Optional[BlobServiceClient] = None

    async def _get_client(self) -> BlobServiceClient:
        """
        Get or create BlobServiceClient.

        Raises:
            StorageError: If storage is not configured
        """
        if self._client is not None:
            return self._client

        if self.settings.connection_string:
            self._client = BlobServiceClient.from_connection_string(self.settings.connection_string)
            logger.info("Created BlobServiceClient with connection string")
        elif self.settings.account_name and self.settings.use_managed_identity:
            account_url = f"https://{self.settings.account_name}.blob.core.windows.net"
            self._client = BlobServiceClient(account_url=account_url, credential=DefaultAzureCredential())
            logger.info(f"Created BlobServiceClient with Managed Identity: {self.settings.account_name}")
        else:
            raise StorageError(
                "Storage not configured. Set STORAGE_CONNECTION_STRING or "
                "STORAGE_ACCOUNT_NAME with STORAGE_USE_MANAGED_IDENTITY"
            )
        return self._client

    def _blob_name_from_url(self, url: str) -> str:
        """Recover the blob name from a URL returned by ``upload``."""
        path = unquote(urlparse(url).path).lstrip("/")
        prefix = f"{self.settings.container_name}/"
        if not path.startswith(prefix) or len(path) == len(prefix):
            raise StorageError(f"URL does not point into container {self.settings.container_name}: {url}")
        return path[len(prefix):]

    async def upload(self, data: bytes, blob_name: str, content_type: str = "application/pdf") -> str:
        """
        Upload file bytes.

        Args:
            data: File content
            blob_name: Path of the blob inside the container
            content_type: MIME type stored with the blob

        Returns:
            URL of the uploaded blob

        Raises:
            StorageError: If the upload fails
        """
        client = await self._get_client()
        try:
            blob_client = client.get_blob_client(container=self.settings.container_name, blob=blob_name)
            await blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except AzureError as e:
            logger.error(f"Azure Storage error uploading file: {blob_name} - {e}", exc_info=True)
            raise StorageError(f"Failed to upload file to storage: {str(e)}") from e

        logger.info(f"Uploaded file: {blob_name}, size={len(data)} bytes")
        return blob_client.url

    async def delete(self, url: str) -> None:
        """
        Delete a previously uploaded file. Missing blobs are ignored.

        Raises:
            StorageError: If the delete fails
        """
        blob_name = self._blob_name_from_url(url)
        client = await self._get_client()
        try:
            blob_client = client.get_blob_client(container=self.settings.container_name, blob=blob_name)
            await blob_client.delete_blob()
        except ResourceNotFoundError:
            logger.warning(f"Blob already deleted: {blob_name}")
            return
        except AzureError as e:
            logger.error(f"Azure Storage error deleting file: {blob_name} - {e}", exc_info=True)
            raise StorageError(f"Failed to delete file from storage: {str(e)}") from e

        logger.info(f"Deleted file: {blob_name}")

    async def close(self) -> None:
        """Close storage client."""
        if self._client:
            await self._client.close()
            self._client = None
            logger.info("Storage client closed")
