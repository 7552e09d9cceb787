"""Module: exif_tags.py

Date: 2026-10-19

Decoded EXIF metadata as cached per image file.

An ExifTagSet holds three unordered groups of ExifTag, one per IFD
(EXIF, GPS, MakerNote). Tag ids are not unique inside a group; lookups by
id return the first match.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class ExifIfd(Enum):
    """Tag group (image file directory) a tag belongs to."""

    EXIF = "EXIF"
    GPS = "GPS"
    MAKER_NOTE = "MAKER_NOTE"


class ByteOrder(IntEnum):
    """Byte order marker of the TIFF header the tag was read from."""

    LITTLE_ENDIAN = 0x4949  # "II"
    BIG_ENDIAN = 0x4D4D  # "MM"


@dataclass(slots=True)
class ExifTag:
    """A single decoded tag.

    Attributes:
        tag_id: Numeric tag id (e.g. 271 for Make)
        type: Value encoding (TIFF field type, e.g. 2 for ASCII)
        value_count: Number of values of that type
        value_offset: Offset of the value in the file (64-bit)
        raw_value: Undecoded value bytes, possibly binary
        string_value: Display text, possibly empty
        byte_order: Byte order the value was encoded with
        name: Tag name
        ifd: Owning group

    """

    tag_id: int
    type: int
    value_count: int
    value_offset: int
    raw_value: bytes = b""
    string_value: str = ""
    byte_order: ByteOrder = ByteOrder.LITTLE_ENDIAN
    name: str = ""
    ifd: ExifIfd = ExifIfd.EXIF


@dataclass(slots=True)
class ExifTagSet:
    """All cached tags of one image file."""

    last_modified: int = 0
    maker_note_description: str | None = None
    exif_tags: list[ExifTag] = field(default_factory=list)
    gps_tags: list[ExifTag] = field(default_factory=list)
    maker_note_tags: list[ExifTag] = field(default_factory=list)

    def tags_for(self, ifd: ExifIfd) -> list[ExifTag]:
        """Return the (mutable) group for an IFD."""
        if ifd is ExifIfd.EXIF:
            return self.exif_tags
        if ifd is ExifIfd.GPS:
            return self.gps_tags
        return self.maker_note_tags

    def add_tag(self, tag: ExifTag) -> None:
        """Append a tag to the group named by its ifd."""
        self.tags_for(tag.ifd).append(tag)

    def add_tags(self, tags: list[ExifTag]) -> None:
        for tag in tags:
            self.add_tag(tag)

    def find_tag_by_tag_id(self, ifd: ExifIfd, tag_id: int) -> ExifTag | None:
        """Return the first tag with tag_id in the given group, or None."""
        return next((tag for tag in self.tags_for(ifd) if tag.tag_id == tag_id), None)

    def find_exif_tag_by_tag_id(self, tag_id: int) -> ExifTag | None:
        return self.find_tag_by_tag_id(ExifIfd.EXIF, tag_id)

    def find_gps_tag_by_tag_id(self, tag_id: int) -> ExifTag | None:
        return self.find_tag_by_tag_id(ExifIfd.GPS, tag_id)

    def find_maker_note_tag_by_tag_id(self, tag_id: int) -> ExifTag | None:
        return self.find_tag_by_tag_id(ExifIfd.MAKER_NOTE, tag_id)

    def is_empty(self) -> bool:
        """True if no group holds any tag."""
        return not (self.exif_tags or self.gps_tags or self.maker_note_tags)

    def tag_count(self) -> int:
        return len(self.exif_tags) + len(self.gps_tags) + len(self.maker_note_tags)
