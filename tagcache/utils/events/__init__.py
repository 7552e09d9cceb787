"""Module: __init__.py

Date: 2026-10-19

Event system.

Pure Python signals used by the caches to announce clears, deletions and
renames to whoever listens (UI refresh, statistics, tests).
"""

from tagcache.utils.events.observable import Observable, Signal, SignalInstance

__all__ = ["Observable", "Signal", "SignalInstance"]
