"""Local filesystem implementation of DocumentStoragePort."""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from .ports import DocumentStoragePort, StoredFile, StorageError

logger = logging.getLogger(__name__)


class LocalDocumentStorage(DocumentStoragePort):
    """Stores files below a base directory.

    Storage keys are relative paths like 'uploads/1704067200000-manual.pdf'.
    """

    KEY_PREFIX = "uploads"

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def _path_for(self, storage_key: str) -> Path:
        path = (self.base_dir / storage_key).resolve()
        if self.base_dir.resolve() not in path.parents:
            raise StorageError(f"Storage key escapes base directory: {storage_key}")
        return path

    def store_file(self, file: BinaryIO, file_name: str, content_type: str) -> StoredFile:
        storage_key = f"{self.KEY_PREFIX}/{file_name}"
        path = self._path_for(storage_key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as out:
                shutil.copyfileobj(file, out)
        except OSError as e:
            raise StorageError(f"Failed to store {storage_key}: {e}") from e

        size = path.stat().st_size
        logger.debug(f"Stored {storage_key} ({size} bytes)")
        return StoredFile(storage_key=storage_key, size_bytes=size, content_type=content_type)

    def retrieve_file(self, storage_key: str) -> BinaryIO:
        path = self._path_for(storage_key)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {storage_key}")
        try:
            return open(path, "rb")
        except OSError as e:
            raise StorageError(f"Failed to retrieve {storage_key}: {e}") from e

    def delete_file(self, storage_key: str) -> None:
        path = self._path_for(storage_key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {storage_key}: {e}") from e

    def exists(self, storage_key: str) -> bool:
        return self._path_for(storage_key).is_file()
