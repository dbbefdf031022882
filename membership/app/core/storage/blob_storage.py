"""Blob storage interface and implementations.

Uploaded files (profile images, company documents) live in a blob
container. Azure Blob Storage is used in deployed environments; the
in-memory backend serves development and tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from urllib.parse import quote, urlsplit

import httpx
from loguru import logger

from membership.app.runtime.config.config_data import StorageConfig


class BlobStorageError(Exception):
    """Raised when the storage backend rejects an operation."""


class BlobStorage(ABC):
    """Abstract interface for blob storage backends."""

    @abstractmethod
    def upload(self, name: str, data: bytes, content_type: str | None = None) -> str:
        """Store a blob.

        Args:
            name: Blob name within the container
            data: File contents
            content_type: MIME type recorded with the blob

        Returns:
            Public URL of the stored blob
        """
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete a blob. Missing blobs are not an error.

        Args:
            name: Blob name within the container
        """
        pass

    @abstractmethod
    def url_for(self, name: str) -> str:
        """Public URL for a blob name."""
        pass

    def name_from_url(self, url: str) -> str:
        """Blob name is the last path segment of its URL."""
        return urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1]


class InMemoryBlobStorage(BlobStorage):
    """In-memory blob storage."""

    def __init__(self, base_url: str = "memory://userfiles/"):
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.blobs: dict[str, tuple[bytes, str | None]] = {}
        self.deleted: list[str] = []

    def upload(self, name: str, data: bytes, content_type: str | None = None) -> str:
        self.blobs[name] = (data, content_type)
        return self.url_for(name)

    def delete(self, name: str) -> None:
        self.deleted.append(name)
        self.blobs.pop(name, None)

    def url_for(self, name: str) -> str:
        return f"{self._base_url}{quote(name)}"


class AzureBlobStorage(BlobStorage):
    """Azure Blob Storage over its REST API, authorised with a SAS token."""

    def __init__(self, config: StorageConfig, transport: httpx.BaseTransport | None = None):
        self._config = config
        self._transport = transport
        account = config.account_url if config.account_url.endswith("/") else config.account_url + "/"
        self._container_url = f"{account}{config.container}/"

    def url_for(self, name: str) -> str:
        return f"{self._container_url}{quote(name)}"

    def _signed(self, name: str) -> str:
        url = self.url_for(name)
        if self._config.sas_token:
            return f"{url}?{self._config.sas_token.lstrip('?')}"
        return url

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self._config.timeout_seconds, transport=self._transport)

    def upload(self, name: str, data: bytes, content_type: str | None = None) -> str:
        headers = {
            "x-ms-blob-type": "BlockBlob",
            "Content-Type": content_type or "application/octet-stream",
        }
        try:
            with self._client() as client:
                resp = client.put(self._signed(name), content=data, headers=headers)
        except httpx.HTTPError as exc:
            raise BlobStorageError(f"Upload of {name} failed: {exc}") from exc

        if resp.status_code not in (200, 201):
            raise BlobStorageError(
                f"Upload of {name} failed {resp.status_code}: {resp.text[:200]}"
            )
        logger.debug("Uploaded blob {name}", name=name)
        return self.url_for(name)

    def delete(self, name: str) -> None:
        try:
            with self._client() as client:
                resp = client.delete(self._signed(name))
        except httpx.HTTPError as exc:
            raise BlobStorageError(f"Delete of {name} failed: {exc}") from exc

        if resp.status_code == 404:
            logger.debug("Blob {name} already absent", name=name)
            return
        if resp.status_code not in (200, 202):
            raise BlobStorageError(
                f"Delete of {name} failed {resp.status_code}: {resp.text[:200]}"
            )


def get_blob_storage(config: StorageConfig) -> BlobStorage:
    """Build the configured blob storage backend."""
    if config.provider == "azure":
        logger.info("Using Azure blob storage at {url}", url=config.account_url)
        return AzureBlobStorage(config)

    logger.info("Using in-memory blob storage")
    return InMemoryBlobStorage(f"memory://{config.container}/")
