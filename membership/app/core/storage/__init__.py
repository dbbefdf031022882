from .blob_storage import (
    AzureBlobStorage,
    BlobStorage,
    BlobStorageError,
    InMemoryBlobStorage,
    get_blob_storage,
)

__all__ = [
    "AzureBlobStorage",
    "BlobStorage",
    "BlobStorageError",
    "InMemoryBlobStorage",
    "get_blob_storage",
]
