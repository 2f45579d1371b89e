# =============================================================================
# tools/blob_store.py  —  Azure Blob Storage backend for snippets
# =============================================================================
#
# A thin SnippetStore over azure-storage-blob.  Every snippet is the blob
# "snippets/<name>.json".  The container is created the first time a
# snippet is written.
#
# Connection strings come from the Functions-style "AzureWebJobsStorage"
# setting; "UseDevelopmentStorage=true" targets a local Azurite emulator.
# =============================================================================

import os
from typing import Optional

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient

from core.snippets import SNIPPET_CONTAINER, FileSnippetStore, SnippetStore, blob_name

STORAGE_SETTING = "AzureWebJobsStorage"
DEFAULT_SNIPPET_DIR = ".snippets"


class BlobSnippetStore(SnippetStore):

    def __init__(self, service: BlobServiceClient, container: str = SNIPPET_CONTAINER):
        self._container = service.get_container_client(container)
        self._container_ready = False

    @classmethod
    def from_connection_string(cls, conn_str: str,
                               container: str = SNIPPET_CONTAINER) -> "BlobSnippetStore":
        return cls(BlobServiceClient.from_connection_string(conn_str), container)

    def get(self, name: str) -> Optional[str]:
        blob = self._container.get_blob_client(blob_name(name))
        try:
            return blob.download_blob().readall().decode("utf-8")
        except ResourceNotFoundError:
            return None

    def put(self, name: str, content: str) -> None:
        if not self._container_ready:
            try:
                self._container.create_container()
            except ResourceExistsError:
                pass
            self._container_ready = True
        blob = self._container.get_blob_client(blob_name(name))
        blob.upload_blob(content.encode("utf-8"), overwrite=True)


def store_from_env() -> SnippetStore:
    """Blob storage when AzureWebJobsStorage is set, else a local directory."""
    conn_str = os.getenv(STORAGE_SETTING)
    if conn_str:
        return BlobSnippetStore.from_connection_string(conn_str)
    return FileSnippetStore(os.getenv("SNIPPET_DIR", DEFAULT_SNIPPET_DIR))
