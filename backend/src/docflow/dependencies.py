"""Shared FastAPI dependencies."""

from .config import get_settings
from .storage.local_storage import LocalDocumentStorage
from .storage.ports import DocumentStoragePort


def get_storage() -> DocumentStoragePort:
    """Storage adapter for uploaded document files.

    Overridden in tests to point at a temporary directory.
    """
    return LocalDocumentStorage(get_settings().UPLOAD_DIR)
