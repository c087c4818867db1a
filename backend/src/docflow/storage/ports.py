"""Document storage port - interface for persisting uploaded files.

The workflow only needs a storage key back; where the bytes live is up to
the adapter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO


@dataclass
class StoredFile:
    """Metadata for a stored file.

    Attributes:
        storage_key: Key to retrieve or delete the file later
        size_bytes: Number of bytes written
        content_type: MIME type declared at upload
    """
    storage_key: str
    size_bytes: int
    content_type: str


class StorageError(Exception):
    """Raised when a storage backend cannot complete an operation."""


class DocumentStoragePort(ABC):
    """Port interface for document file storage."""

    @abstractmethod
    def store_file(self, file: BinaryIO, file_name: str, content_type: str) -> StoredFile:
        """Persist a file.

        Args:
            file: Readable binary stream positioned at the start
            file_name: Collision-resistant name to store under
            content_type: MIME type

        Returns:
            StoredFile: Where and how much was stored

        Raises:
            StorageError: If the file could not be written
        """

    @abstractmethod
    def retrieve_file(self, storage_key: str) -> BinaryIO:
        """Open a stored file for reading.

        Returns:
            BinaryIO: File stream (caller must close when done)

        Raises:
            FileNotFoundError: If no file is stored under storage_key
            StorageError: If the file could not be opened
        """

    @abstractmethod
    def delete_file(self, storage_key: str) -> None:
        """Remove a stored file.

        Raises:
            StorageError: If the file exists but could not be removed
        """

    @abstractmethod
    def exists(self, storage_key: str) -> bool:
        """Check whether a stored file is present."""
