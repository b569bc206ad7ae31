"""Tests for Azure Blob storage."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import AzureError, ResourceNotFoundError

from interview_eval.config import StorageSettings
from interview_eval.services.storage_service import StorageService
from interview_eval.utils.errors import StorageError

BLOB_URL = "https://acct.blob.core.windows.net/interview-prep/u1/global/resume/abc_cv%20final.pdf"


@pytest.fixture
def blob_client():
    client = MagicMock()
    client.url = BLOB_URL
    client.upload_blob = AsyncMock()
    client.delete_blob = AsyncMock()
    return client


@pytest.fixture
def storage(blob_client):
    service = StorageService(StorageSettings(connection_string="UseDevelopmentStorage=true"))
    service_client = MagicMock()
    service_client.get_blob_client.return_value = blob_client
    service._client = service_client
    return service


@pytest.mark.asyncio
async def test_upload_returns_blob_url(storage, blob_client):
    url = await storage.upload(b"%PDF", "u1/global/resume/abc_cv final.pdf")

    assert url == BLOB_URL
    storage._client.get_blob_client.assert_called_once_with(
        container="interview-prep", blob="u1/global/resume/abc_cv final.pdf"
    )
    assert blob_client.upload_blob.await_args.kwargs["overwrite"] is True


@pytest.mark.asyncio
async def test_upload_failure(storage, blob_client):
    blob_client.upload_blob.side_effect = AzureError("network down")
    with pytest.raises(StorageError, match="Failed to upload"):
        await storage.upload(b"%PDF", "x.pdf")


@pytest.mark.asyncio
async def test_delete_by_url(storage, blob_client):
    await storage.delete(BLOB_URL)
    storage._client.get_blob_client.assert_called_once_with(
        container="interview-prep", blob="u1/global/resume/abc_cv final.pdf"
    )
    blob_client.delete_blob.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_missing_blob_is_ignored(storage, blob_client):
    blob_client.delete_blob.side_effect = ResourceNotFoundError("gone")
    await storage.delete(BLOB_URL)


@pytest.mark.asyncio
async def test_delete_url_outside_container(storage):
    with pytest.raises(StorageError, match="does not point into container"):
        await storage.delete("https://acct.blob.core.windows.net/other/file.pdf")


@pytest.mark.asyncio
async def test_unconfigured_storage():
    service = StorageService(StorageSettings(connection_string=None, account_name=None))
    with pytest.raises(StorageError, match="Storage not configured"):
        await service.upload(b"%PDF", "x.pdf")
