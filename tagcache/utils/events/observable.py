"""Module: observable.py

Date: 2026-10-19

Observer pattern without a GUI toolkit.

- Signal descriptor for defining events on a class
- Observable base class
- connect/disconnect/emit interface, thread-safe
- A failing callback is logged and never reaches the emitter
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

__all__ = ["Observable", "Signal", "SignalInstance"]


class Signal:
    """Descriptor for defining observable signals.

    Usage:
        class MetadataCache(Observable):
            cleared = Signal(int)

        cache.cleared.connect(on_cleared)
        cache.cleared.emit(42)
    """

    def __init__(self, *arg_types: type):
        """Initialize signal with expected argument types (documentation only)."""
        self.arg_types = arg_types
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Observable | None, _objtype: type | None = None) -> SignalInstance:
        if obj is None:
            return self  # type: ignore[return-value]

        attr_name = f"_signal_{self.name}"
        instance = obj.__dict__.get(attr_name)
        if instance is None:
            with obj._signal_lock:
                instance = obj.__dict__.get(attr_name)
                if instance is None:
                    instance = SignalInstance(self.name, self.arg_types)
                    obj.__dict__[attr_name] = instance
        return instance


class SignalInstance:
    """Instance of a signal bound to one object."""

    def __init__(self, name: str, arg_types: tuple[type, ...]):
        self.name = name
        self.arg_types = arg_types
        self._callbacks: list[Callable[..., Any]] = []
        self._lock = threading.Lock()

    def connect(self, callback: Callable[..., Any]) -> None:
        """Connect callback to signal (connecting twice is a no-op)."""
        with self._lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)
                logger.debug(
                    "Signal connected: %s -> %s",
                    self.name,
                    getattr(callback, "__name__", repr(callback)),
                    extra={"dev_only": True},
                )

    def disconnect(self, callback: Callable[..., Any] | None = None) -> None:
        """Disconnect callback from signal.

        Args:
            callback: Callback to remove. If None, removes all callbacks.

        """
        with self._lock:
            if callback is None:
                self._callbacks.clear()
            elif callback in self._callbacks:
                self._callbacks.remove(callback)

    def receiver_count(self) -> int:
        """Number of connected callbacks."""
        with self._lock:
            return len(self._callbacks)

    def emit(self, *args: Any) -> None:
        """Emit signal with arguments.

        Args:
            *args: Arguments to pass to connected callbacks

        """
        # Snapshot under lock, call outside it to avoid deadlocks
        with self._lock:
            callbacks = self._callbacks.copy()

        for callback in callbacks:
            try:
                callback(*args)
            except Exception:
                logger.exception(
                    "Error in signal callback: %s -> %s",
                    self.name,
                    getattr(callback, "__name__", repr(callback)),
                )


class Observable:
    """Base class for objects with observable signals."""

    def __init__(self) -> None:
        super().__init__()
        self._signal_lock = threading.Lock()
