"""Tests for the Azure Blob Storage uploader."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from azure.core.exceptions import HttpResponseError

from stream_audit.errors import StorageError
from stream_audit.storage.blob import BlobUploader, account_url


class TestBlobUploader(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.file = Path(self._tmp.name) / "20261019120000-1.csv"
        self.file.write_text("row\n", encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def test_account_url(self):
        self.assertEqual(account_url("auditstore"), "https://auditstore.blob.core.windows.net")

    @patch("stream_audit.storage.blob.BlobServiceClient")
    def test_upload_uses_file_name_as_blob_name(self, mock_service_cls):
        container_client = mock_service_cls.return_value.get_container_client.return_value
        container_client.upload_blob.return_value.url = "https://x/blob"
        credential = MagicMock()
        uploader = BlobUploader("auditstore", "reports", credential=credential)

        self.assertEqual(uploader.upload(self.file), "https://x/blob")
        mock_service_cls.assert_called_once_with(
            account_url="https://auditstore.blob.core.windows.net", credential=credential,
        )
        mock_service_cls.return_value.get_container_client.assert_called_once_with("reports")
        kwargs = container_client.upload_blob.call_args.kwargs
        self.assertEqual(kwargs["name"], self.file.name)
        self.assertTrue(kwargs["overwrite"])

    @patch("stream_audit.storage.blob.BlobServiceClient")
    def test_container_override(self, mock_service_cls):
        uploader = BlobUploader("auditstore", "reports", credential=MagicMock())
        uploader.upload(self.file, "other")
        mock_service_cls.return_value.get_container_client.assert_called_once_with("other")

    @patch("stream_audit.storage.blob.BlobServiceClient")
    def test_azure_error_becomes_storage_error(self, mock_service_cls):
        container_client = mock_service_cls.return_value.get_container_client.return_value
        container_client.upload_blob.side_effect = HttpResponseError(message="forbidden")
        uploader = BlobUploader("auditstore", credential=MagicMock())
        with self.assertRaises(StorageError):
            uploader.upload(self.file)

    @patch("stream_audit.storage.blob.BlobServiceClient")
    def test_missing_local_file(self, mock_service_cls):
        uploader = BlobUploader("auditstore", credential=MagicMock())
        with self.assertRaises(StorageError):
            uploader.upload(self.file.with_name("missing.csv"))

    @patch("stream_audit.storage.blob.StorageManagementClient")
    @patch("stream_audit.storage.blob.BlobServiceClient")
    def test_account_key_lookup_with_resource_group(self, mock_service_cls, mock_mgmt_cls):
        key = MagicMock()
        key.value = "s3cr3t"
        mock_mgmt_cls.return_value.storage_accounts.list_keys.return_value.keys = [key]
        credential = MagicMock()
        uploader = BlobUploader(
            "auditstore", resource_group="rg-audit", subscription_id="sub-1",
            credential=credential,
        )
        uploader.upload(self.file)
        mock_mgmt_cls.assert_called_once_with(credential, "sub-1")
        mock_mgmt_cls.return_value.storage_accounts.list_keys.assert_called_once_with(
            "rg-audit", "auditstore"
        )
        self.assertEqual(mock_service_cls.call_args.kwargs["credential"], "s3cr3t")


if __name__ == "__main__":
    unittest.main()
