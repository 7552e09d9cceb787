"""Module: exif_xml.py

Date: 2026-10-19

Canonical XML document for cached EXIF tag sets.

Document layout:

    <?xml version='1.0' encoding='UTF-8'?>
    <exifTagSet version="1" lastModified="1700000000000">
      <makerNoteDescription>Nikon Type 3</makerNoteDescription>
      <ifd name="EXIF">
        <tag tagId="271" type="2" valueCount="6" valueOffset="0"
             byteOrder="LITTLE_ENDIAN" ifd="EXIF">
          <name>Make</name>
          <stringValue>Canon</stringValue>
          <rawValue>Q2Fub24A</rawValue>
        </tag>
      </ifd>
      <ifd name="GPS"/>
      <ifd name="MAKER_NOTE"/>
    </exifTagSet>

Encoding rules:
- rawValue is always base64, so arbitrary bytes survive
- text is written verbatim (non-ASCII included) unless XML 1.0 cannot
  carry it (control characters, carriage returns, lone surrogates); such
  text is written as base64 of its UTF-8 bytes with encoding="base64"
- makerNoteDescription is omitted when None, empty element when ""
- all three ifd groups are always written, possibly empty
"""

from __future__ import annotations

import base64
import binascii
import re

from lxml import etree

from tagcache.core.errors import SerializationError
from tagcache.models.exif_tags import ByteOrder, ExifIfd, ExifTag, ExifTagSet

DOCUMENT_VERSION = "1"
DOCUMENT_ENCODING = "UTF-8"

_ROOT = "exifTagSet"
_MAKER_NOTE_DESCRIPTION = "makerNoteDescription"
_IFD = "ifd"
_TAG = "tag"
_NAME = "name"
_STRING_VALUE = "stringValue"
_RAW_VALUE = "rawValue"
_BASE64 = "base64"

# Characters outside the XML 1.0 Char production, plus CR (parsers fold it into LF)
_XML_UNSAFE = re.compile("[^\t\n\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

_GROUP_ORDER = (ExifIfd.EXIF, ExifIfd.GPS, ExifIfd.MAKER_NOTE)


def _set_text(element: etree._Element, text: str) -> None:
    if _XML_UNSAFE.search(text):
        element.set("encoding", _BASE64)
        element.text = base64.b64encode(text.encode("utf-8", "surrogatepass")).decode("ascii")
    else:
        element.text = text


def _get_text(element: etree._Element) -> str:
    text = element.text or ""
    if element.get("encoding") == _BASE64:
        return _b64decode(text).decode("utf-8", "surrogatepass")
    return text


def _b64decode(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise SerializationError(f"Invalid base64 content: {e}") from e


def _text_child(parent: etree._Element, tag: str, text: str) -> None:
    _set_text(etree.SubElement(parent, tag), text)


def serialize_exif_tags(tags: ExifTagSet) -> str:
    """Serialize a tag set into the canonical XML document.

    Args:
        tags: Tag set to serialize

    Returns:
        XML document text, starting with an UTF-8 encoding declaration

    Raises:
        SerializationError: If a field cannot be represented (e.g. an
            unknown byte order value)

    """
    try:
        root = etree.Element(_ROOT)
        root.set("version", DOCUMENT_VERSION)
        root.set("lastModified", str(int(tags.last_modified)))

        if tags.maker_note_description is not None:
            _text_child(root, _MAKER_NOTE_DESCRIPTION, tags.maker_note_description)

        for ifd in _GROUP_ORDER:
            group = etree.SubElement(root, _IFD)
            group.set("name", ifd.value)
            for tag in tags.tags_for(ifd):
                _append_tag(group, tag)

        document = etree.tostring(root, xml_declaration=True, encoding=DOCUMENT_ENCODING)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot serialize EXIF tags: {e}") from e

    return document.decode("utf-8")


def _append_tag(group: etree._Element, tag: ExifTag) -> None:
    element = etree.SubElement(group, _TAG)
    element.set("tagId", str(int(tag.tag_id)))
    element.set("type", str(int(tag.type)))
    element.set("valueCount", str(int(tag.value_count)))
    element.set("valueOffset", str(int(tag.value_offset)))
    element.set("byteOrder", ByteOrder(tag.byte_order).name)
    element.set("ifd", ExifIfd(tag.ifd).value)

    _text_child(element, _NAME, tag.name)
    _text_child(element, _STRING_VALUE, tag.string_value)
    etree.SubElement(element, _RAW_VALUE).text = base64.b64encode(bytes(tag.raw_value)).decode(
        "ascii"
    )


def deserialize_exif_tags(document: str | bytes) -> ExifTagSet:
    """Parse a document written by serialize_exif_tags.

    Args:
        document: XML document text or bytes

    Returns:
        The restored tag set

    Raises:
        SerializationError: If the document is malformed or incomplete

    """
    data = document.encode("utf-8") if isinstance(document, str) else document
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)

    try:
        root = etree.fromstring(data, parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise SerializationError(f"Malformed EXIF document: {e}") from e

    if root.tag != _ROOT:
        raise SerializationError(f"Unexpected root element: {root.tag!r}")
    if root.get("version") != DOCUMENT_VERSION:
        raise SerializationError(f"Unsupported document version: {root.get('version')!r}")

    try:
        tags = ExifTagSet(last_modified=int(root.get("lastModified", "")))

        description = root.find(_MAKER_NOTE_DESCRIPTION)
        if description is not None:
            tags.maker_note_description = _get_text(description)

        for group in root.iterfind(_IFD):
            target = tags.tags_for(ExifIfd(group.get("name")))
            target.extend(_parse_tag(element) for element in group.iterfind(_TAG))
    except (TypeError, ValueError, KeyError, UnicodeDecodeError) as e:
        raise SerializationError(f"Invalid EXIF document content: {e}") from e

    return tags


def _parse_tag(element: etree._Element) -> ExifTag:
    raw_value = element.find(_RAW_VALUE)
    return ExifTag(
        tag_id=int(element.get("tagId", "")),
        type=int(element.get("type", "")),
        value_count=int(element.get("valueCount", "")),
        value_offset=int(element.get("valueOffset", "")),
        raw_value=_b64decode(raw_value.text or "") if raw_value is not None else b"",
        string_value=_child_text(element, _STRING_VALUE),
        byte_order=ByteOrder[element.get("byteOrder", "")],
        name=_child_text(element, _NAME),
        ifd=ExifIfd(element.get("ifd")),
    )


def _child_text(element: etree._Element, tag: str) -> str:
    child = element.find(tag)
    return _get_text(child) if child is not None else ""
