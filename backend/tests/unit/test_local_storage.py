"""Unit tests for the local filesystem storage adapter"""

import io

import pytest

from docflow.storage import LocalDocumentStorage, StorageError


class TestLocalDocumentStorage:

    def test_store_and_delete(self, tmp_path):
        storage = LocalDocumentStorage(tmp_path)

        stored = storage.store_file(io.BytesIO(b"%PDF-1.4"), "1704067200000-a.pdf", "application/pdf")

        assert stored.storage_key == "uploads/1704067200000-a.pdf"
        assert stored.size_bytes == 8
        assert storage.exists(stored.storage_key)

        storage.delete_file(stored.storage_key)
        assert not storage.exists(stored.storage_key)

    def test_delete_missing_file_is_noop(self, tmp_path):
        LocalDocumentStorage(tmp_path).delete_file("uploads/missing.pdf")

    def test_key_escaping_base_dir_rejected(self, tmp_path):
        storage = LocalDocumentStorage(tmp_path / "files")

        with pytest.raises(StorageError):
            storage.delete_file("../../outside.pdf")

    def test_retrieve_returns_stored_bytes(self, tmp_path):
        storage = LocalDocumentStorage(tmp_path)
        stored = storage.store_file(io.BytesIO(b"%PDF-1.4 body"), "1704067200000-a.pdf", "application/pdf")

        with storage.retrieve_file(stored.storage_key) as stream:
            assert stream.read() == b"%PDF-1.4 body"

    def test_retrieve_missing_file_raises_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalDocumentStorage(tmp_path).retrieve_file("uploads/missing.pdf")

    def test_retrieve_key_escaping_base_dir_rejected(self, tmp_path):
        with pytest.raises(StorageError):
            LocalDocumentStorage(tmp_path / "files").retrieve_file("../secret.pdf")
