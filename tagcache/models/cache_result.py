"""Module: cache_result.py

Date: 2026-10-19

Explicit lookup results.

Callers branch on the returned value instead of catching exceptions:

    result = metadata_cache.get(identity)
    if result.is_hit:
        use(result.value)
    else:
        regenerate()   # CacheMiss, CacheStale and CacheError all mean "recompute"
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CacheErrorKind(Enum):
    """Why a lookup failed."""

    STORAGE = "storage"
    SERIALIZATION = "serialization"


@dataclass(frozen=True)
class CacheHit(Generic[T]):
    """A valid record was found."""

    value: T

    @property
    def is_hit(self) -> bool:
        return True


@dataclass(frozen=True)
class CacheMiss:
    """No record exists for the path."""

    @property
    def is_hit(self) -> bool:
        return False


@dataclass(frozen=True)
class CacheStale:
    """A record exists but was stored for another modification time."""

    stored_timestamp: int

    @property
    def is_hit(self) -> bool:
        return False


@dataclass(frozen=True)
class CacheError:
    """The lookup failed; treated by callers as a miss."""

    kind: CacheErrorKind
    message: str = ""

    @property
    def is_hit(self) -> bool:
        return False


CacheResult = CacheHit[T] | CacheMiss | CacheStale | CacheError
