"""Tests for the ExifTagSet model.

Date: 2026-10-19
"""

import pytest

from tagcache.models.exif_tags import ExifIfd, ExifTag, ExifTagSet


@pytest.mark.unit
def test_empty_tag_set():
    tags = ExifTagSet()

    assert tags.is_empty()
    assert tags.tag_count() == 0
    assert tags.find_exif_tag_by_tag_id(271) is None


@pytest.mark.unit
def test_add_tag_routes_by_ifd(sample_tags):
    assert len(sample_tags.exif_tags) == 2
    assert len(sample_tags.gps_tags) == 2
    assert len(sample_tags.maker_note_tags) == 1
    assert sample_tags.tag_count() == 5
    assert not sample_tags.is_empty()


@pytest.mark.unit
def test_find_by_tag_id_searches_only_the_requested_group(sample_tags):
    assert sample_tags.find_exif_tag_by_tag_id(271).name == "Make"
    assert sample_tags.find_gps_tag_by_tag_id(1).name == "GPSLatitudeRef"
    assert sample_tags.find_maker_note_tag_by_tag_id(1).name == "MakerNoteVersion"
    assert sample_tags.find_gps_tag_by_tag_id(271) is None


@pytest.mark.unit
def test_duplicate_tag_ids_return_first_match():
    tags = ExifTagSet()
    tags.add_tag(ExifTag(306, 2, 20, 0, name="first"))
    tags.add_tag(ExifTag(306, 2, 20, 0, name="second"))

    assert tags.find_tag_by_tag_id(ExifIfd.EXIF, 306).name == "first"
    assert tags.tag_count() == 2
