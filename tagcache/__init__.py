"""tagcache: derived-artifact cache for a photo tagger.

Caches decoded EXIF tag sets and generated thumbnails per image file in
SQLite stores, validated against each file's modification time.
"""

__version__ = "1.0.0"
