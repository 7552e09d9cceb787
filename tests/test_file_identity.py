"""Tests for FileIdentity and path normalization.

Date: 2026-10-19
"""

import os

import pytest

from tagcache.models.file_identity import FileIdentity, modification_millis, normalize_path


@pytest.mark.unit
def test_path_is_normalized_and_absolute(tmp_path):
    identity = FileIdentity.for_path(tmp_path / "a" / ".." / "b.jpg", 5)

    assert identity.path == os.path.join(str(tmp_path), "b.jpg")
    assert os.path.isabs(identity.path)


@pytest.mark.unit
def test_relative_path_resolves_against_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert normalize_path("x.jpg") == os.path.join(os.getcwd(), "x.jpg")


@pytest.mark.unit
def test_from_path_uses_modification_time_in_millis(image_file):
    mtime_ns = 1_700_000_000_123_456_789
    os.utime(image_file, ns=(mtime_ns, mtime_ns))

    identity = FileIdentity.from_path(image_file)

    assert identity.timestamp == 1_700_000_000_123
    assert identity.timestamp == modification_millis(image_file)
    assert identity.name == "IMG_0001.jpg"


@pytest.mark.unit
def test_from_path_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        FileIdentity.from_path(tmp_path / "missing.jpg")


@pytest.mark.unit
def test_same_path_different_timestamp_are_different_identities(tmp_path):
    first = FileIdentity.for_path(tmp_path / "a.jpg", 1)
    second = first.with_timestamp(2)

    assert first != second
    assert first.path == second.path
    assert second.timestamp == 2
    assert FileIdentity.for_path(tmp_path / "a.jpg", 1) == first
    assert hash(FileIdentity.for_path(tmp_path / "a.jpg", 1)) == hash(first)


@pytest.mark.unit
def test_identity_is_immutable(tmp_path):
    identity = FileIdentity.for_path(tmp_path / "a.jpg", 1)

    with pytest.raises(AttributeError):
        identity.timestamp = 2  # type: ignore[misc]
