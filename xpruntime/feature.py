"""Feature flags that may be enabled at runtime."""

from __future__ import annotations

import threading

__all__ = ["Flags"]


class Flags:
    """A thread-safe set of enabled feature flags. A fresh instance has none."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled: set[str] = set()

    def enable(self, flag: str) -> None:
        """Enable a feature flag."""
        with self._lock:
            self._enabled.add(flag)

    def enabled(self, flag: str) -> bool:
        """Return True if the flag is enabled."""
        with self._lock:
            return flag in self._enabled