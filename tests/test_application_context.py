"""Tests for CacheContext wiring.

Date: 2026-10-19
"""

import pytest

from tagcache.config.resolution import CacheSettings
from tagcache.core.application_context import CacheContext
from tagcache.core.errors import StorageUnavailable
from tagcache.models.file_identity import FileIdentity


@pytest.fixture
def context(cache_root):
    with CacheContext.create(CacheSettings(cache_root=cache_root, fetch_max_workers=3)) as ctx:
        yield ctx


@pytest.mark.integration
def test_create_opens_both_caches_in_their_directories(context, cache_root):
    assert (cache_root / "ExifCache" / "cache.db").exists()
    assert (cache_root / "ThumbnailCache" / "cache.db").exists()
    assert context.registry.names() == ["ExifCache", "ThumbnailCache"]
    assert list(context.caches()) == ["ExifCache", "ThumbnailCache"]


@pytest.mark.integration
def test_contexts_are_isolated(tmp_path, png_bytes):
    identity = FileIdentity.for_path(tmp_path / "a.png", 1)

    with (
        CacheContext.create(CacheSettings(cache_root=tmp_path / "one")) as one,
        CacheContext.create(CacheSettings(cache_root=tmp_path / "two")) as two,
    ):
        one.thumbnail_cache.insert(identity, png_bytes)

        assert one.thumbnail_cache.exists(identity)
        assert not two.thumbnail_cache.exists(identity)


@pytest.mark.integration
def test_explicit_directory_provider_wins(tmp_path, directory_provider, cache_root):
    settings = CacheSettings(cache_root=tmp_path / "ignored")

    with CacheContext.create(settings, directory_provider):
        pass

    assert (cache_root / "ExifCache" / "cache.db").exists()
    assert not (tmp_path / "ignored").exists()


@pytest.mark.integration
def test_storage_failure_surfaces_at_creation(tmp_path):
    blocker = tmp_path / "root"
    blocker.write_text("a file where the cache root should be")

    with pytest.raises(StorageUnavailable):
        CacheContext.create(CacheSettings(cache_root=blocker))


@pytest.mark.integration
def test_thumbnail_store_failure_closes_metadata_store(cache_root):
    (cache_root / "ThumbnailCache").mkdir()
    (cache_root / "ThumbnailCache" / "cache.db").write_bytes(b"garbage" * 512)

    with pytest.raises(StorageUnavailable):
        CacheContext.create(CacheSettings(cache_root=cache_root))


@pytest.mark.integration
def test_clear_all_through_registry(context, tmp_path, sample_tags, png_bytes):
    identity = FileIdentity.for_path(tmp_path / "a.jpg", 1)
    context.metadata_cache.put(identity, sample_tags)
    context.thumbnail_cache.insert(identity, png_bytes)

    assert context.registry.clear_all() == {"ExifCache": 1, "ThumbnailCache": 1}


@pytest.mark.integration
def test_new_scheduler_uses_configured_worker_count(context):
    scheduler = context.new_scheduler(lambda ref: None, lambda ref: None)

    assert scheduler.max_workers == 3


@pytest.mark.integration
def test_close_is_idempotent(cache_root):
    context = CacheContext.create(CacheSettings(cache_root=cache_root))

    context.close()
    context.close()

    assert context.is_closed
    assert context.metadata_cache.store.is_closed
    assert context.thumbnail_cache.store.is_closed
