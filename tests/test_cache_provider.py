"""Tests for CacheProviderAdapter and CacheProviderRegistry.

Date: 2026-10-19
"""

from unittest.mock import Mock

import pytest

from tagcache.models.file_identity import FileIdentity
from tagcache.services.cache_provider import CacheProviderAdapter
from tagcache.services.interfaces import CacheProvider
from tagcache.services.registry import CacheProviderRegistry


@pytest.mark.unit
def test_adapter_satisfies_protocol():
    assert isinstance(CacheProviderAdapter("x", Mock()), CacheProvider)


@pytest.mark.unit
def test_adapter_requires_clear():
    with pytest.raises(TypeError):
        CacheProviderAdapter("broken", object())


@pytest.mark.unit
def test_adapter_clear_and_count(thumbnail_cache, tmp_path, png_bytes):
    for i in range(3):
        thumbnail_cache.insert(FileIdentity.for_path(tmp_path / f"{i}.png", 1), png_bytes)
    provider = CacheProviderAdapter("ThumbnailCache", thumbnail_cache)

    assert provider.count() == 3
    assert provider.clear() == 3
    assert provider.count() == 0


@pytest.mark.unit
def test_adapter_count_is_none_when_cache_cannot_count():
    cache = Mock(spec=["clear"])
    cache.clear.return_value = 0

    assert CacheProviderAdapter("plain", cache).count() is None


@pytest.mark.unit
def test_registry_rejects_duplicate_names():
    registry = CacheProviderRegistry()
    registry.register(CacheProviderAdapter("ExifCache", Mock()))

    with pytest.raises(ValueError):
        registry.register(CacheProviderAdapter("ExifCache", Mock()))
    assert len(registry) == 1


@pytest.mark.unit
def test_registry_lookup_and_order():
    registry = CacheProviderRegistry()
    first = CacheProviderAdapter("ExifCache", Mock())
    second = CacheProviderAdapter("ThumbnailCache", Mock())
    registry.register(first)
    registry.register(second)

    assert registry.names() == ["ExifCache", "ThumbnailCache"]
    assert registry.get("ThumbnailCache") is second
    assert registry.get("Missing") is None
    assert "ExifCache" in registry


@pytest.mark.unit
def test_clear_all_reports_counts_per_cache():
    registry = CacheProviderRegistry()
    exif, thumbs = Mock(), Mock()
    exif.clear.return_value = 5
    thumbs.clear.return_value = 2
    registry.register(CacheProviderAdapter("ExifCache", exif))
    registry.register(CacheProviderAdapter("ThumbnailCache", thumbs))

    assert registry.clear_all() == {"ExifCache": 5, "ThumbnailCache": 2}
