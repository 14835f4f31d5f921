"""
Unit tests for the upload file store. Filesystem only, no DB.
"""
import pytest

from listings.core.errors import StorageFailure
from listings.services import file_store
from listings.services.file_store import FileStore, stored_filename


# ── stored_filename ──────────────────────────────────────────────────────────

class TestStoredFilename:
    def test_keeps_extension(self):
        assert stored_filename("house.jpg", 1700000000123) == "1700000000123.jpg"

    def test_only_last_suffix(self):
        assert stored_filename("plans.tar.gz", 5) == "5.gz"

    def test_no_extension(self):
        assert stored_filename("README", 42) == "42"

    def test_dotfile_has_no_extension(self):
        assert stored_filename(".hidden", 42) == "42"

    def test_directory_parts_ignored(self):
        assert stored_filename("photos/front.PNG", 7) == "7.PNG"


# ── FileStore ────────────────────────────────────────────────────────────────

class TestFileStore:
    def test_write_returns_name_and_stores_bytes(self, tmp_path, monkeypatch):
        monkeypatch.setattr(file_store, "_now_ms", lambda: 1000)
        store = FileStore(tmp_path)
        name = store.write(b"abc", "house.jpg")
        assert name == "1000.jpg"
        assert (tmp_path / name).read_bytes() == b"abc"

    def test_same_millisecond_does_not_overwrite(self, tmp_path, monkeypatch):
        monkeypatch.setattr(file_store, "_now_ms", lambda: 1000)
        store = FileStore(tmp_path)
        first = store.write(b"one", "a.jpg")
        second = store.write(b"two", "b.jpg")
        assert (first, second) == ("1000.jpg", "1001.jpg")
        assert (tmp_path / first).read_bytes() == b"one"
        assert (tmp_path / second).read_bytes() == b"two"

    def test_public_path(self, tmp_path):
        assert FileStore(tmp_path).public_path("1.jpg") == "/uploads/1.jpg"
        assert FileStore(tmp_path, url_prefix="/media/").public_path("1.jpg") == "/media/1.jpg"

    def test_ensure_directory_creates_parents(self, tmp_path):
        store = FileStore(tmp_path / "a" / "b")
        store.ensure_directory()
        assert store.directory.is_dir()

    def test_missing_directory_is_storage_failure(self, tmp_path):
        store = FileStore(tmp_path / "does-not-exist")
        with pytest.raises(StorageFailure) as excinfo:
            store.write(b"abc", "house.jpg")
        assert excinfo.value.status_code == 500
