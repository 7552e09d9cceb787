"""Module: errors.py

Date: 2026-10-19

Exception taxonomy for the cache subsystem.

Only conditions a caller cannot branch on by value are exceptions:
- StorageUnavailable: a store cannot be created/opened; fatal to that cache
- SerializationError: a stored payload cannot be parsed back
- SchedulerNotAccepting: work submitted outside the ACCEPTING state

Staleness and misses are ordinary results (see tagcache.models.cache_result),
and a rename of an absent key simply returns False.
"""


class TagCacheError(Exception):
    """Base class for tagcache errors."""


class StorageUnavailable(TagCacheError):
    """Raised when a cache store cannot be created, opened or used."""

    def __init__(self, message: str, path: object = None):
        super().__init__(message)
        self.path = path


class SerializationError(TagCacheError):
    """Raised when a tag set document cannot be written or parsed."""


class SchedulerNotAccepting(TagCacheError):
    """Raised when work is submitted to a scheduler that is not accepting."""
