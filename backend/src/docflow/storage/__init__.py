"""Document file storage"""

from .ports import DocumentStoragePort, StoredFile, StorageError
from .local_storage import LocalDocumentStorage

__all__ = ["DocumentStoragePort", "StoredFile", "StorageError", "LocalDocumentStorage"]
