"""Upload of finished result files to Azure Blob Storage."""

from pathlib import Path

from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.mgmt.storage import StorageManagementClient
from azure.storage.blob import BlobServiceClient

from ..config import DEFAULT_CONTAINER
from ..errors import StorageError
from ..logging_setup import log


def account_url(account_name: str) -> str:
    return f"https://{account_name}.blob.core.windows.net"


class BlobUploader:
    """
    Uploads local files into a blob container.

    When both a resource group and a subscription id are known the account
    key is looked up through the management API (the identity only needs
    ``listKeys`` on the account); otherwise the Azure AD credential is handed
    to the blob service directly and needs a data-plane role.
    """

    def __init__(
        self,
        account_name: str,
        container: str = DEFAULT_CONTAINER,
        resource_group: str | None = None,
        subscription_id: str | None = None,
        credential=None,
    ) -> None:
        self.account_name = account_name
        self.container = container
        self.resource_group = resource_group
        self.subscription_id = subscription_id
        self._credential = credential
        self._service: BlobServiceClient | None = None

    @property
    def credential(self):
        if self._credential is None:
            self._credential = DefaultAzureCredential()
        return self._credential

    def _account_key(self) -> str:
        mgmt = StorageManagementClient(self.credential, self.subscription_id)
        keys = mgmt.storage_accounts.list_keys(self.resource_group, self.account_name)
        if not keys.keys:
            raise StorageError(f"No access keys returned for storage account {self.account_name}")
        return keys.keys[0].value

    def _service_client(self) -> BlobServiceClient:
        if self._service is None:
            if self.resource_group and self.subscription_id:
                log.debug(
                    "Using account key of %s (resource group %s)",
                    self.account_name, self.resource_group,
                )
                credential = self._account_key()
            else:
                credential = self.credential
            self._service = BlobServiceClient(
                account_url=account_url(self.account_name),
                credential=credential,
            )
        return self._service

    def upload(self, local_path: Path, container: str | None = None) -> str:
        """Upload *local_path* as a blob named after the file. Returns the blob URL."""
        target = container or self.container
        local_path = Path(local_path)
        try:
            container_client = self._service_client().get_container_client(target)
            with local_path.open("rb") as fh:
                blob = container_client.upload_blob(name=local_path.name, data=fh, overwrite=True)
        except (AzureError, OSError) as exc:
            raise StorageError(
                f"Upload of {local_path} to {self.account_name}/{target} failed: {exc}"
            ) from exc
        log.info("Uploaded %s → %s/%s", local_path.name, self.account_name, target)
        return blob.url
