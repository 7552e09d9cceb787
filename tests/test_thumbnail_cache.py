"""Tests for ThumbnailCache.

Date: 2026-10-19
"""

import threading
from unittest.mock import Mock

import pytest

from tagcache.infra.cache.thumbnail_cache import probe_dimensions
from tagcache.models.file_identity import FileIdentity

T1 = 1_700_000_000_000
T2 = 1_700_000_009_000


@pytest.fixture
def identity(tmp_path):
    return FileIdentity.for_path(tmp_path / "IMG_0002.png", T1)


@pytest.mark.unit
def test_insert_then_find(thumbnail_cache, identity, png_bytes):
    assert not thumbnail_cache.exists(identity)
    assert thumbnail_cache.find(identity) is None

    assert thumbnail_cache.insert(identity, png_bytes)

    assert thumbnail_cache.exists(identity)
    assert thumbnail_cache.find(identity) == png_bytes


@pytest.mark.unit
def test_dimensions_are_probed_from_image_bytes(thumbnail_cache, identity, png_bytes):
    thumbnail_cache.insert(identity, png_bytes)

    record = thumbnail_cache.find_record(identity)

    assert (record.width, record.height) == (4, 3)
    assert record.identity == identity


@pytest.mark.unit
def test_explicit_dimensions_win_and_unknown_bytes_store_null(thumbnail_cache, tmp_path, png_bytes):
    explicit = FileIdentity.for_path(tmp_path / "a.png", T1)
    opaque = FileIdentity.for_path(tmp_path / "b.bin", T1)

    thumbnail_cache.insert(explicit, png_bytes, width=160, height=120)
    thumbnail_cache.insert(opaque, b"\x00\x01 not an image")

    explicit_record = thumbnail_cache.find_record(explicit)
    assert (explicit_record.width, explicit_record.height) == (160, 120)
    opaque_record = thumbnail_cache.find_record(opaque)
    assert opaque_record.width is None
    assert opaque_record.height is None
    assert opaque_record.image == b"\x00\x01 not an image"


@pytest.mark.unit
def test_probe_dimensions_of_garbage():
    assert probe_dimensions(b"") == (None, None)
    assert probe_dimensions(b"GIF89a") == (None, None)


@pytest.mark.unit
def test_find_does_not_judge_staleness(thumbnail_cache, identity, png_bytes):
    thumbnail_cache.insert(identity, png_bytes)
    newer = identity.with_timestamp(T2)

    assert thumbnail_cache.find(newer) == png_bytes
    assert thumbnail_cache.find_record(newer).identity.timestamp == T1
    assert not thumbnail_cache.has_up_to_date(newer)


@pytest.mark.unit
def test_has_up_to_date_compares_stored_timestamp(thumbnail_cache, identity, png_bytes):
    assert not thumbnail_cache.has_up_to_date(identity)

    thumbnail_cache.insert(identity, png_bytes)

    assert thumbnail_cache.has_up_to_date(identity)
    assert thumbnail_cache.has_up_to_date(identity.with_timestamp(T1 - 1))
    assert not thumbnail_cache.has_up_to_date(identity.with_timestamp(T1 + 1))


@pytest.mark.unit
def test_reinsert_with_newer_timestamp_replaces_bytes(thumbnail_cache, identity, png_bytes):
    thumbnail_cache.insert(identity, b"old")
    thumbnail_cache.insert(identity.with_timestamp(T2), png_bytes)

    assert thumbnail_cache.count() == 1
    assert thumbnail_cache.find(identity) == png_bytes
    assert thumbnail_cache.has_up_to_date(identity.with_timestamp(T2))


@pytest.mark.unit
def test_insert_with_same_timestamp_is_a_no_op(thumbnail_cache, identity, png_bytes):
    thumbnail_cache.insert(identity, png_bytes)
    thumbnail_cache.insert(identity, b"different bytes")

    assert thumbnail_cache.list_keys() == {identity.path}
    assert thumbnail_cache.find(identity) == png_bytes


@pytest.mark.unit
def test_rename_preserves_payload(thumbnail_cache, identity, png_bytes, tmp_path):
    thumbnail_cache.insert(identity, png_bytes)
    target = FileIdentity.for_path(tmp_path / "moved" / "IMG_0002.png", T1)

    assert thumbnail_cache.rename(identity.path, target.path)

    assert thumbnail_cache.find(target) == png_bytes
    assert thumbnail_cache.has_up_to_date(target)
    assert not thumbnail_cache.exists(identity)


@pytest.mark.unit
def test_rename_replaces_record_at_target(thumbnail_cache, tmp_path, png_bytes):
    source = FileIdentity.for_path(tmp_path / "a.png", T1)
    target = FileIdentity.for_path(tmp_path / "b.png", T2)
    thumbnail_cache.insert(source, png_bytes)
    thumbnail_cache.insert(target, b"to be replaced")

    assert thumbnail_cache.rename(source.path, target.path)

    assert thumbnail_cache.list_keys() == {target.path}
    assert thumbnail_cache.find(target) == png_bytes
    assert thumbnail_cache.find_record(target).identity.timestamp == T1


@pytest.mark.unit
def test_rename_to_same_path_keeps_record(thumbnail_cache, identity, png_bytes):
    thumbnail_cache.insert(identity, png_bytes)
    on_renamed = Mock()
    thumbnail_cache.record_renamed.connect(on_renamed)

    assert thumbnail_cache.rename(identity.path, identity.path)

    assert thumbnail_cache.find(identity) == png_bytes
    on_renamed.assert_not_called()


@pytest.mark.unit
def test_rename_missing_source_returns_false(thumbnail_cache, tmp_path, png_bytes):
    other = FileIdentity.for_path(tmp_path / "other.png", T1)
    thumbnail_cache.insert(other, png_bytes)

    assert not thumbnail_cache.rename(tmp_path / "missing.png", other.path)
    assert thumbnail_cache.find(other) == png_bytes


@pytest.mark.unit
def test_delete(thumbnail_cache, identity, png_bytes):
    thumbnail_cache.insert(identity, png_bytes)

    assert thumbnail_cache.delete(identity)
    assert not thumbnail_cache.delete(identity)
    assert not thumbnail_cache.exists(identity)


@pytest.mark.unit
def test_clear_returns_count_and_every_key_misses(thumbnail_cache, tmp_path, png_bytes):
    identities = [FileIdentity.for_path(tmp_path / f"{i}.png", T1) for i in range(12)]
    for identity in identities:
        thumbnail_cache.insert(identity, png_bytes)

    assert thumbnail_cache.clear() == 12

    assert thumbnail_cache.count() == 0
    assert all(thumbnail_cache.find(i) is None for i in identities)


@pytest.mark.unit
def test_compact_after_clear(thumbnail_cache, identity, png_bytes):
    thumbnail_cache.insert(identity, png_bytes)
    thumbnail_cache.clear()

    assert thumbnail_cache.compact()


@pytest.mark.integration
def test_rename_is_atomic_for_a_concurrent_reader(thumbnail_cache, identity, png_bytes, tmp_path):
    first = identity.path
    second = FileIdentity.for_path(tmp_path / "renamed.png", T1).path
    thumbnail_cache.insert(identity, png_bytes)

    stop = threading.Event()
    observed = []

    def read():
        while not stop.is_set():
            rows = thumbnail_cache.store.query_all(
                "SELECT path, image FROM thumbnails WHERE path IN (?, ?)", (first, second)
            )
            observed.append([(row["path"], bytes(row["image"])) for row in rows])

    reader = threading.Thread(target=read)
    reader.start()
    try:
        for i in range(50):
            source, target = (first, second) if i % 2 == 0 else (second, first)
            assert thumbnail_cache.rename(source, target)
    finally:
        stop.set()
        reader.join()

    assert observed
    for rows in observed:
        assert len(rows) == 1
        assert rows[0][1] == png_bytes
    assert thumbnail_cache.list_keys() == {first}


@pytest.mark.integration
def test_concurrent_inserts_on_one_path_keep_one_record(thumbnail_cache, identity, png_bytes):
    writers = 16
    barrier = threading.Barrier(writers)
    failures = []

    def write(n):
        barrier.wait(timeout=5)
        for _ in range(20):
            if not thumbnail_cache.insert(identity.with_timestamp(T1 + n), png_bytes):
                failures.append(n)

    threads = [threading.Thread(target=write, args=(n,)) for n in range(writers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert failures == []
    assert thumbnail_cache.count() == 1
    record = thumbnail_cache.find_record(identity)
    assert record.image == png_bytes
    assert T1 <= record.identity.timestamp < T1 + writers


@pytest.mark.unit
@pytest.mark.parametrize("by_identity", [True, False])
def test_delete_accepts_identity_or_path(thumbnail_cache, identity, png_bytes, by_identity):
    thumbnail_cache.insert(identity, png_bytes)

    assert thumbnail_cache.delete(identity if by_identity else identity.path)
    assert not thumbnail_cache.exists(identity)
