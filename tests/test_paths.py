"""Tests for tagcache.utils.paths.

Date: 2026-10-19
"""

import os
import platform
from pathlib import Path

import pytest

from tagcache.core.errors import StorageUnavailable
from tagcache.services.interfaces import CacheDirectoryProvider
from tagcache.utils.paths import AppPaths, FixedCacheDirectoryProvider


class TestAppPaths:
    """Test suite for AppPaths class."""

    def test_get_cache_root_returns_path(self):
        result = AppPaths.get_cache_root()

        assert isinstance(result, Path)
        assert "tagcache" in str(result)

    @pytest.mark.skipif(platform.system() in ("Windows", "Darwin"), reason="XDG only")
    def test_get_cache_root_honours_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

        assert AppPaths.get_cache_root() == tmp_path / "tagcache"

    def test_get_logs_dir_creates_directory(self, tmp_path):
        result = AppPaths.get_logs_dir(tmp_path)

        assert result == tmp_path / "logs"
        assert result.is_dir()

    def test_get_preferences_path(self, tmp_path):
        result = AppPaths.get_preferences_path(tmp_path)

        assert result == tmp_path / "preferences.json"
        assert not result.exists()


class TestFixedCacheDirectoryProvider:
    """Test suite for FixedCacheDirectoryProvider."""

    def test_creates_directory_on_first_use(self, tmp_path):
        provider = FixedCacheDirectoryProvider(tmp_path / "root")

        directory = provider.get_cache_directory("ExifCache")

        assert directory == tmp_path / "root" / "ExifCache"
        assert directory.is_dir()
        assert provider.get_cache_directory("ExifCache") == directory

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(FixedCacheDirectoryProvider(tmp_path), CacheDirectoryProvider)

    @pytest.mark.parametrize("name", ["", f"a{os.sep}b"])
    def test_invalid_names_rejected(self, tmp_path, name):
        with pytest.raises(ValueError):
            FixedCacheDirectoryProvider(tmp_path).get_cache_directory(name)

    def test_uncreatable_directory_raises_storage_unavailable(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(StorageUnavailable):
            FixedCacheDirectoryProvider(blocker).get_cache_directory("ExifCache")
