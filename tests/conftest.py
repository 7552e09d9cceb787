"""Module: conftest.py

Date: 2026-10-19

Global pytest configuration and fixtures for the tagcache test suite.

Every fixture builds its stores under tmp_path, so tests never touch the
user's real cache directory and can run in parallel.
"""

import io

import pytest
from PIL import Image

from tagcache.infra.cache.metadata_cache import MetadataCache
from tagcache.infra.cache.thumbnail_cache import ThumbnailCache
from tagcache.infra.db.cache_store import CacheStore
from tagcache.infra.db.schema import CacheKind
from tagcache.models.exif_tags import ByteOrder, ExifIfd, ExifTag, ExifTagSet
from tagcache.utils.paths import FixedCacheDirectoryProvider


def pytest_configure(config):
    """Register custom markers (also declared in pyproject.toml)."""
    config.addinivalue_line("markers", "unit: fast, isolated tests")
    config.addinivalue_line("markers", "integration: tests touching SQLite files and threads")


@pytest.fixture
def cache_root(tmp_path):
    """Root directory for all caches of one test."""
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture
def directory_provider(cache_root):
    return FixedCacheDirectoryProvider(cache_root)


@pytest.fixture
def metadata_cache(directory_provider):
    """MetadataCache on a fresh database, closed after the test."""
    store = CacheStore.open(directory_provider.get_cache_directory("ExifCache"), CacheKind.METADATA)
    cache = MetadataCache(store)
    yield cache
    cache.close()


@pytest.fixture
def thumbnail_cache(directory_provider):
    """ThumbnailCache on a fresh database, closed after the test."""
    store = CacheStore.open(
        directory_provider.get_cache_directory("ThumbnailCache"), CacheKind.THUMBNAIL
    )
    cache = ThumbnailCache(store)
    yield cache
    cache.close()


@pytest.fixture
def sample_tags():
    """A tag set with entries in every group, binary values and non-ASCII text."""
    tags = ExifTagSet(maker_note_description="Nikon Type 3")
    tags.add_tags(
        [
            ExifTag(271, 2, 6, 0, b"Canon\x00", "Canon", ByteOrder.LITTLE_ENDIAN, "Make"),
            ExifTag(
                37510,
                7,
                12,
                1024,
                bytes(range(12)),
                "Café 東京 📷",
                ByteOrder.BIG_ENDIAN,
                "UserComment",
            ),
            ExifTag(1, 2, 2, 0, b"N\x00", "N", name="GPSLatitudeRef", ifd=ExifIfd.GPS),
            ExifTag(
                2,
                5,
                3,
                2**40,
                b"\x00" * 24,
                "",
                ByteOrder.BIG_ENDIAN,
                "GPSLatitude",
                ExifIfd.GPS,
            ),
            ExifTag(1, 7, 4, 0, b"0210", "0210", name="MakerNoteVersion", ifd=ExifIfd.MAKER_NOTE),
        ]
    )
    return tags


@pytest.fixture
def png_bytes():
    """A small (4x3) PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 3), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def image_file(tmp_path):
    """An existing file to cache artifacts for (content is irrelevant)."""
    path = tmp_path / "photos" / "IMG_0001.jpg"
    path.parent.mkdir()
    path.write_bytes(b"\xff\xd8\xff\xe0 not really a jpeg")
    return path
