"""Serialization of cached payloads."""

from tagcache.infra.serialization.exif_xml import deserialize_exif_tags, serialize_exif_tags

__all__ = ["deserialize_exif_tags", "serialize_exif_tags"]
